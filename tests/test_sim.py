"""Tests for autoffa.sim — the headless match driver on the sandbox host."""

import json

from autoffa import sim
from autoffa.sandbox import SandboxEngine
from autoffa.scheduler import AutoFfaScheduler


class TestArgs:
    def test_flags_map_onto_settings(self):
        args = sim.parse_args(['--full-absorption', '--truce-scope', 'team',
                               '--no-initial-peace', '--no-targets'])
        settings = sim.settings_from_args(args)
        assert settings.weaken_snowball_effect is False
        assert settings.truce_scope == 'team'
        assert settings.enable_initial_peace_period is False
        assert settings.enable_target_system is False
        assert settings.enable_coalitions_against_leader is True

    def test_sandbox_is_seeded(self):
        a = sim.build_sandbox(6, 64, seed=3)
        b = sim.build_sandbox(6, 64, seed=3)
        assert [s.castle_cell for s in a.settlements.values()] == \
               [s.castle_cell for s in b.settlements.values()]
        assert len(a.settlements) == 6


class TestSkirmish:
    def test_skirmishes_only_credit_hostile_hits(self):
        engine = sim.build_sandbox(4, 64, seed=11)
        sched  = AutoFfaScheduler(engine)
        sched.on_every_tick(1)                 # initial peace: everyone neutral
        for _ in range(200):
            assert sim.skirmish(sched, engine) == 0.0

    def test_income_adds_resources(self):
        engine = SandboxEngine(seed=1)
        engine.add_settlement('s0', 'Solo', (4, 4))
        sim.grant_income(engine)
        assert engine.resources('s0').gold >= 20


class TestRun:
    def test_short_match_writes_log_and_dashboard(self, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)
        sched = sim.run(['--ticks', '6000', '--players', '4', '--seed', '5',
                         '--log-dir', str(tmp_path / 'logs')])

        assert len(sched.state.participants) == 4
        assert list((tmp_path / 'logs').glob('run_*.txt'))
        data = json.loads((tmp_path / 'dashboard_data.json').read_text(encoding='utf-8'))
        assert data['tick'] == 6000
        assert 'final report' in capsys.readouterr().out
