"""Tests for autoffa.team.Team — membership, promotion, generosity and spoils."""

import pytest

from autoffa.engine import DiplomacyStatus, Resources


# ─────────────────────────────────────────────────────
# Membership
# ─────────────────────────────────────────────────────

class TestMembership:
    def test_add_subordinate_links_vassal(self, state, players, join_team):
        a, b = players[0], players[1]
        a.target_id = players[3].id
        join_team(state, a, b)

        team = state.teams[a.id]
        assert team.has_member(b)
        assert b.team_id == a.id
        assert b.suzerain_id == a.id
        assert b.target_id == players[3].id
        assert state.ledger.get(a, b) is DiplomacyStatus.ALLIANCE

    def test_new_vassal_allies_with_every_member(self, state, players, join_team):
        a, b, c = players[0], players[1], players[2]
        join_team(state, a, b)
        join_team(state, a, c)
        assert state.ledger.get(b, c) is DiplomacyStatus.ALLIANCE

    def test_defeated_vassal_gets_new_castle(self, state, players):
        a, b = players[0], players[1]
        state.engine.destroy_castle('s1')
        b.is_defeated = True
        state.teams[a.id].add_subordinate(b)
        assert state.engine.castle_alive('s1')
        assert any('welcomes you' in msg for msg in state.engine.inbox('s1'))

    def test_remove_subordinate(self, state, players, join_team):
        a, b = players[0], players[1]
        join_team(state, a, b)
        team = state.teams[a.id]
        assert team.remove_subordinate(b)
        assert not team.remove_subordinate(b)
        assert b.suzerain_id is None
        assert team.get_member_count() == 1

    def test_remove_leader_empties_solo_team(self, state, players):
        team = state.teams[0]
        assert team.remove_leader() is players[0]
        assert team.is_empty()
        assert team.leader is None


# ─────────────────────────────────────────────────────
# Promotion
# ─────────────────────────────────────────────────────

class TestPromotion:
    def test_stronger_vassal_takes_over(self, state, players, join_team):
        a, b, c = players[0], players[1], players[2]
        join_team(state, a, b)
        join_team(state, a, c)
        b.power_points = 115
        team = state.teams[a.id]

        assert team.promote_if_stronger()
        assert team.leader is b
        assert b.is_suzerain()
        assert a.suzerain_id == b.id
        assert c.suzerain_id == b.id
        assert any('yields' in msg for msg in state.engine.broadcasts)

    def test_margin_blocks_close_call(self, state, players, join_team):
        a, b = players[0], players[1]
        join_team(state, a, b)
        b.power_points = 110     # not strictly above 100 + 10
        assert not state.teams[a.id].promote_if_stronger()

    def test_promotion_is_idempotent(self, state, players, join_team):
        a, b = players[0], players[1]
        join_team(state, a, b)
        b.power_points = 300
        team = state.teams[a.id]
        assert team.promote_if_stronger()
        assert not team.promote_if_stronger()
        assert team.leader is b

    def test_members_follow_new_leader_target(self, state, players, join_team):
        a, b, c = players[0], players[1], players[2]
        join_team(state, a, b)
        join_team(state, a, c)
        b.target_id = players[3].id
        b.power_points = 200
        state.teams[a.id].promote_if_stronger()
        assert a.target_id == players[3].id
        assert c.target_id == players[3].id


# ─────────────────────────────────────────────────────
# Generosity
# ─────────────────────────────────────────────────────

class TestGenerosity:
    def _team_of_three(self, state, players, join_team):
        a, b, c = players[0], players[1], players[2]
        join_team(state, a, b)
        join_team(state, a, c)
        state.engine.settlements['s0'].resources = Resources(6000, 5000, 7000, 0)
        return state.teams[a.id], a, b, c

    def test_surplus_is_split_between_vassals(self, state, players, join_team):
        team, a, b, c = self._team_of_three(state, players, join_team)
        assert team.distribute_generosity(exchange_enabled=False)
        assert state.engine.resources('s1') == Resources(500, 0, 1000, 0)
        assert state.engine.resources('s2') == Resources(500, 0, 1000, 0)
        assert state.engine.resources('s0') == Resources(5000, 5000, 5000, 0)

    def test_share_capped_by_vassal_limit(self, state, players, join_team):
        team, a, b, c = self._team_of_three(state, players, join_team)
        state.engine.settlements['s1'].resources = Resources(800, 0, 0, 0)
        team.distribute_generosity(exchange_enabled=False)
        assert state.engine.resources('s1') == Resources(1000, 0, 1000, 0)
        assert state.engine.resources('s0').gold == 6000 - 200 - 500

    def test_exchange_moves_power_to_leader(self, state, players, join_team):
        team, a, b, c = self._team_of_three(state, players, join_team)
        team.distribute_generosity(exchange_enabled=True)
        assert b.power_points == pytest.approx(85)
        assert c.power_points == pytest.approx(85)
        assert a.power_points == pytest.approx(130)

    def test_below_threshold_gives_nothing(self, state, players, join_team):
        team, a, b, c = self._team_of_three(state, players, join_team)
        state.engine.settlements['s0'].resources = Resources(5000, 4000, 100, 0)
        assert not team.distribute_generosity(exchange_enabled=True)

    def test_solo_team_is_never_generous(self, state):
        state.engine.settlements['s0'].resources = Resources(9000, 9000, 9000, 0)
        assert not state.teams[0].distribute_generosity(exchange_enabled=True)


# ─────────────────────────────────────────────────────
# Spoils
# ─────────────────────────────────────────────────────

class TestSpoils:
    def test_spoils_are_conserved(self, state, players, join_team):
        a, b, c = players[0], players[1], players[2]
        join_team(state, a, b)
        c.power_points = 200
        a.damage_dealt_to[c.id]        = 30
        a.castle_damage_dealt_to[c.id] = 30
        before = a.power_points + b.power_points + c.power_points

        distributed = state.teams[a.id].share_spoils(c, 0.2)

        assert distributed == pytest.approx(40)
        assert c.power_points == pytest.approx(160)
        assert a.power_points == pytest.approx(100 + 40 * 30 / 31)
        assert b.power_points == pytest.approx(100 + 40 * 1 / 31)
        assert a.power_points + b.power_points + c.power_points == pytest.approx(before)

    def test_spoils_reset_damage_credit(self, state, players, join_team):
        a, b, c = players[0], players[1], players[2]
        join_team(state, a, b)
        a.damage_dealt_to[c.id]        = 30
        a.castle_damage_dealt_to[c.id] = 12
        state.teams[a.id].share_spoils(c, 0.1)
        assert a.damage_dealt_to[c.id] == 0
        assert a.castle_damage_dealt_to[c.id] == 0
        assert state.engine.inbox('s0') and state.engine.inbox('s1')


# ─────────────────────────────────────────────────────
# Team-wide diplomacy
# ─────────────────────────────────────────────────────

class TestTeamDiplomacy:
    def test_peace_then_war_with_all(self, state, players, join_team):
        a, b, c, d = players
        join_team(state, a, b)
        team = state.teams[a.id]

        team.set_peace_status_with_all(state.all_teams())
        assert state.ledger.get(a, c) is DiplomacyStatus.NEUTRAL
        assert state.ledger.get(b, d) is DiplomacyStatus.NEUTRAL
        assert state.ledger.get(a, b) is DiplomacyStatus.ALLIANCE
        assert state.ledger.get(c, d) is DiplomacyStatus.WAR

        team.set_war_status_with_all(state.all_teams())
        assert state.ledger.get(b, c) is DiplomacyStatus.WAR
        assert state.ledger.get(a, b) is DiplomacyStatus.ALLIANCE
