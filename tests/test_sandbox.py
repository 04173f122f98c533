"""Tests for autoffa.sandbox.SandboxEngine."""

from autoffa.engine import DamageEvent, DiplomacyStatus, Resources
from autoffa.sandbox import CASTLE_MAX_HP, SandboxEngine


def _engine():
    engine = SandboxEngine(16, 16, seed=3)
    engine.add_settlement('a', 'Alpha', (2, 2), Resources(100, 50, 20, 5))
    engine.add_settlement('b', 'Bravo', (10, 10))
    return engine


# ─────────────────────────────────────────────────────
# Resources
# ─────────────────────────────────────────────────────

class TestResources:
    def test_take_clamps_at_zero(self):
        engine = _engine()
        engine.take_resources('a', Resources(150, 10, 0, 9))
        assert engine.resources('a') == Resources(0, 40, 20, 0)

    def test_resources_returns_a_copy(self):
        engine = _engine()
        engine.resources('a').gold = 0
        assert engine.resources('a').gold == 100


# ─────────────────────────────────────────────────────
# Castle placement
# ─────────────────────────────────────────────────────

class TestPlacement:
    def test_out_of_bounds_and_blocked_cells_rejected(self):
        engine = _engine()
        engine.block_cell(5, 5)
        assert not engine.can_place_castle('a', -1, 0)
        assert not engine.can_place_castle('a', 16, 3)
        assert not engine.can_place_castle('a', 5, 5)
        assert engine.can_place_castle('a', 6, 5)

    def test_live_castle_occupies_its_cell(self):
        engine = _engine()
        assert not engine.can_place_castle('a', 10, 10)
        engine.destroy_castle('b')
        assert engine.can_place_castle('a', 10, 10)

    def test_spawn_restores_hit_points(self):
        engine = _engine()
        engine.destroy_castle('a')
        engine.protect_castle('a')
        assert engine.spawn_castle('a', 3, 2)
        assert engine.castle_alive('a')
        assert engine.castle_cell('a') == (3, 2)
        assert engine.settlements['a'].castle_hp == CASTLE_MAX_HP
        assert not engine.settlements['a'].protected


# ─────────────────────────────────────────────────────
# Diplomacy, messaging, refunds
# ─────────────────────────────────────────────────────

class TestHostSurface:
    def test_diplomacy_is_directional_with_default(self):
        engine = _engine()
        engine.set_diplomacy('a', 'b', DiplomacyStatus.ALLIANCE)
        assert engine.get_diplomacy('a', 'b') is DiplomacyStatus.ALLIANCE
        assert engine.get_diplomacy('b', 'a') is DiplomacyStatus.WAR

    def test_notify_and_broadcast(self):
        engine = _engine()
        engine.notify('b', 'hello')
        engine.broadcast('everyone')
        assert engine.inbox('b') == ['hello']
        assert engine.inbox('a') == []
        assert engine.broadcasts == ['everyone']

    def test_refund_heals_castle_hit(self):
        engine = _engine()
        engine.damage_castle('b', 300)
        event = DamageEvent('a', 'b', 300.0, hit_castle=True)
        engine.refund_damage(event)
        assert engine.settlements['b'].castle_hp == CASTLE_MAX_HP
        assert engine.refunds == [event]

    def test_random_int_is_seeded(self):
        first  = [SandboxEngine(seed=9).random_int(0, 100) for _ in range(3)]
        again  = [SandboxEngine(seed=9).random_int(0, 100) for _ in range(3)]
        assert first == again
