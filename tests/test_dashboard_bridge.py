"""Tests for autoffa.dashboard_bridge — snapshot contents and atomic write."""

import json

import pytest

from autoffa import dashboard_bridge
from autoffa.engine import DiplomacyStatus


@pytest.fixture(autouse=True)
def _fresh_history():
    dashboard_bridge.reset_history()
    yield
    dashboard_bridge.reset_history()


class TestSnapshot:
    def test_teams_sorted_by_size(self, state, players, join_team):
        join_team(state, players[2], players[3])
        snap = dashboard_bridge.build_snapshot(state, 100)
        assert snap['teams'][0]['leader'] == 'Charlie'
        assert snap['teams'][0]['members'] == ['Charlie', 'Delta']
        assert len(snap['participants']) == 4

    def test_diplomacy_matrix_codes(self, state, players):
        state.ledger.set(players[0], players[1], DiplomacyStatus.NEUTRAL)
        matrix = dashboard_bridge.diplomacy_matrix(state)
        assert len(matrix) == 4 and all(len(row) == 4 for row in matrix)
        assert [matrix[i][i] for i in range(4)] == [1, 1, 1, 1]
        assert matrix[0][1] == matrix[1][0] == 0
        assert matrix[0][2] == -1

    def test_power_history_rolls(self, state):
        dashboard_bridge.build_snapshot(state, 100)
        snap = dashboard_bridge.build_snapshot(state, 200)
        assert [h['tick'] for h in snap['power_history']] == [100, 200]
        dashboard_bridge.reset_history()
        snap = dashboard_bridge.build_snapshot(state, 300)
        assert [h['tick'] for h in snap['power_history']] == [300]

    def test_truce_and_bounty_columns(self, state, players):
        state.participant_truce_until[1] = 900
        state.bounty_participant_id      = 2
        snap = dashboard_bridge.build_snapshot(state, 400)
        rows = {row['name']: row for row in snap['participants']}
        assert rows['Bravo']['truce_left'] == 500
        assert rows['Alpha']['truce_left'] == 0
        assert rows['Charlie']['bounty']
        assert snap['bounty'] == 'Charlie'


class TestWrite:
    def test_atomic_write(self, state, tmp_path):
        target = tmp_path / 'dashboard_data.json'
        state.record(7, 'something happened')
        written = dashboard_bridge.write_dashboard_snapshot(state, 100, [0.01, 0.01], target)

        assert written == target
        data = json.loads(target.read_text(encoding='utf-8'))
        assert data['tick'] == 100
        assert data['tick_rate'] == 100.0
        assert data['event_tail'] == ['Tick 0007: something happened']
        assert not target.with_suffix('.tmp').exists()
