"""Tests for autoffa.rivals — symmetric rival pairing between teams."""

from autoffa.config import FfaSettings
from autoffa.rivals import assign_new_target_for_team, check_and_reassign_targets, target_team_of


def _rival_id(state, team):
    rival = target_team_of(state, team.leader)
    return rival.id if rival is not None else None


def _assert_symmetric(state):
    for team in state.all_teams():
        rival_id = _rival_id(state, team)
        if rival_id is not None:
            assert _rival_id(state, state.teams[rival_id]) == team.id


class TestPairing:
    def test_even_count_pairs_everyone(self, state):
        assert check_and_reassign_targets(state, 0)
        assert all(_rival_id(state, team) is not None for team in state.all_teams())
        _assert_symmetric(state)

    def test_odd_count_leaves_one_out(self, make_state):
        state = make_state(5)
        check_and_reassign_targets(state, 0)
        unpaired = [team for team in state.all_teams() if _rival_id(state, team) is None]
        assert len(unpaired) == 1
        _assert_symmetric(state)

    def test_symmetric_pairs_are_stable(self, state):
        check_and_reassign_targets(state, 0)
        before = {p.id: p.target_id for p in state.all_participants()}
        assert not check_and_reassign_targets(state, 100)
        assert {p.id: p.target_id for p in state.all_participants()} == before

    def test_never_targets_own_team(self, make_state):
        state = make_state(6)
        check_and_reassign_targets(state, 0)
        for team in state.all_teams():
            assert _rival_id(state, team) != team.id

    def test_disabled_system_assigns_nothing(self, make_state):
        state = make_state(settings=FfaSettings(enable_target_system=False))
        assert not check_and_reassign_targets(state, 0)
        assert all(p.target_id is None for p in state.all_participants())


class TestTruceExclusion:
    def test_team_in_truce_loses_and_is_not_targeted(self, state):
        check_and_reassign_targets(state, 0)
        truced = state.teams[0]
        truced.truce_until_tick = 1000

        check_and_reassign_targets(state, 10)

        assert truced.leader.target_id is None
        assert all(p.target_id != truced.leader.id for p in state.all_participants())
        _assert_symmetric(state)

    def test_truce_over_team_is_paired_again(self, state):
        state.teams[0].truce_until_tick = 50
        state.teams[1].truce_until_tick = 50
        check_and_reassign_targets(state, 10)
        assert _rival_id(state, state.teams[0]) is None
        check_and_reassign_targets(state, 60)
        assert all(_rival_id(state, team) is not None for team in state.all_teams())


class TestAssignTarget:
    def test_notifies_only_on_change(self, state):
        a_team, b_team = state.teams[0], state.teams[1]
        assert assign_new_target_for_team(state, a_team, b_team)
        inbox_len = len(state.engine.inbox('s0'))
        assert any('target of team' in msg for msg in state.engine.inbox('s1'))

        assert not assign_new_target_for_team(state, a_team, b_team)
        assert len(state.engine.inbox('s0')) == inbox_len

    def test_clearing_target(self, state):
        a_team, b_team = state.teams[0], state.teams[1]
        assign_new_target_for_team(state, a_team, b_team)
        assert assign_new_target_for_team(state, a_team, None)
        assert a_team.leader.target_id is None
