"""Tests for autoffa.charts — figures built from a snapshot dict."""

import numpy as np
import plotly.graph_objects as go
import pytest

from autoffa import charts, dashboard_bridge


@pytest.fixture
def snapshot(state, players, join_team):
    dashboard_bridge.reset_history()
    join_team(state, players[0], players[1])
    dashboard_bridge.build_snapshot(state, 100)
    players[0].power_points = 250
    snap = dashboard_bridge.build_snapshot(state, 200)
    dashboard_bridge.reset_history()
    return snap


class TestCharts:
    def test_power_chart_has_line_per_participant(self, snapshot):
        fig = charts.build_power_chart(snapshot)
        assert isinstance(fig, go.Figure)
        assert len(fig.data) == 4
        assert fig.data[0].name == 'Alpha'
        assert list(fig.data[0].y) == [100.0, 250.0]

    def test_power_chart_limits_lines(self, snapshot):
        assert len(charts.build_power_chart(snapshot, top=2).data) == 2

    def test_team_size_bars(self, snapshot):
        fig = charts.build_team_size_chart(snapshot)
        assert list(fig.data[0].y) == [2, 1, 1]

    def test_diplomacy_array(self, snapshot):
        grid = charts.diplomacy_array(snapshot)
        assert grid.dtype == np.int8
        assert grid.shape == (4, 4)
        assert grid[0, 1] == 1       # Alpha and Bravo are allied
        assert grid[0, 2] == -1

    def test_heatmap_uses_names(self, snapshot):
        fig = charts.build_diplomacy_heatmap(snapshot)
        assert list(fig.data[0].x) == ['Alpha', 'Bravo', 'Charlie', 'Delta']

    def test_empty_snapshot(self):
        assert len(charts.build_power_chart({}).data) == 0
        assert charts.diplomacy_array({}).shape == (0, 0)
