"""Tests for autoffa.coalitions — coalition against a dominant team, challenge split."""

from autoffa.coalitions import apply_challenge_system_balance, find_dominant_team, manage_coalitions
from autoffa.config import FfaSettings
from autoffa.engine import DiplomacyStatus


def _six_with_dominant(make_state, join_team, settings=None):
    state = make_state(6, settings=settings)
    a, b, c, d, e, f = (state.participants[i] for i in range(6))
    join_team(state, a, b)
    join_team(state, a, c)
    d.power_points = 50
    e.power_points = 300
    f.power_points = 120
    return state, (a, b, c, d, e, f)


class TestDominance:
    def test_half_the_players_is_dominant(self, make_state, join_team):
        state, (a, *_) = _six_with_dominant(make_state, join_team)
        assert find_dominant_team(state) is state.teams[a.id]

    def test_no_dominant_team(self, state):
        assert find_dominant_team(state) is None
        assert not manage_coalitions(state, 9797)


class TestCoalition:
    def test_others_merge_under_strongest_leader(self, make_state, join_team):
        state, (a, b, c, d, e, f) = _six_with_dominant(make_state, join_team)
        assert manage_coalitions(state, 9797)

        assert set(state.teams) == {a.id, e.id}
        coalition = state.teams[e.id]
        assert coalition.leader is e
        assert coalition.has_member(d) and coalition.has_member(f)
        assert d.suzerain_id == e.id and f.suzerain_id == e.id
        assert state.ledger.get(d, f) is DiplomacyStatus.ALLIANCE
        for ally in (d, e, f):
            for enemy in (a, b, c):
                assert state.ledger.get(ally, enemy) is DiplomacyStatus.WAR

    def test_coalition_and_dominant_become_rivals(self, make_state, join_team):
        state, (a, b, c, d, e, f) = _six_with_dominant(make_state, join_team)
        manage_coalitions(state, 9797)
        assert all(p.target_id == a.id for p in (d, e, f))
        assert all(p.target_id == e.id for p in (a, b, c))
        assert any('coalition' in msg for msg in state.engine.broadcasts)

    def test_single_opponent_is_left_alone(self, make_state, join_team):
        state = make_state(4)
        a, b, c, d = (state.participants[i] for i in range(4))
        join_team(state, a, b)
        join_team(state, a, c)
        assert not manage_coalitions(state, 9797)
        assert len(state.teams) == 2

    def test_three_teams_become_two(self, make_state, join_team):
        state = make_state(5)
        a, b, c, d, e = (state.participants[i] for i in range(5))
        join_team(state, a, b)
        join_team(state, a, c)
        d.power_points = 50
        e.power_points = 300
        assert len(state.teams) == 3

        assert manage_coalitions(state, 9797)

        assert set(state.teams) == {a.id, e.id}
        assert state.teams[e.id].has_member(d)
        assert d.suzerain_id == e.id
        assert a.target_id == e.id and e.target_id == a.id
        for ally in (d, e):
            for enemy in (a, b, c):
                assert state.ledger.get(ally, enemy) is DiplomacyStatus.WAR

    def test_disabled(self, make_state, join_team):
        state, _ = _six_with_dominant(
            make_state, join_team, FfaSettings(enable_coalitions_against_leader=False))
        assert not manage_coalitions(state, 9797)
        assert len(state.teams) == 4


class TestChallengeSplit:
    NAMES = ['Warlord Ann', 'Lord Bob', 'Cid', 'Dee', 'Eve']

    def _state(self, make_state):
        return make_state(5, settings=FfaSettings(challenger_keywords=('lord',)),
                          names=self.NAMES)

    def test_challengers_face_everyone_else(self, make_state):
        state = self._state(make_state)
        ann, bob, cid, dee, eve = (state.participants[i] for i in range(5))
        bob.power_points = 200
        cid.power_points = 150

        assert apply_challenge_system_balance(state)

        assert set(state.teams) == {bob.id, cid.id}
        assert ann.suzerain_id == bob.id
        assert dee.suzerain_id == cid.id and eve.suzerain_id == cid.id
        assert state.ledger.get(ann, bob) is DiplomacyStatus.ALLIANCE
        assert state.ledger.get(ann, dee) is DiplomacyStatus.WAR
        assert state.ledger.get(bob, cid) is DiplomacyStatus.WAR
        assert any('challenged the system' in msg for msg in state.engine.broadcasts)

    def test_no_challengers_no_split(self, make_state):
        state = make_state(4)
        assert not apply_challenge_system_balance(state)
        assert len(state.teams) == 4
