# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
sandbox.py — An in-memory HostEngine for headless matches and tests.

SandboxEngine keeps just enough world to drive the core: per-settlement
resources and unit costs, one castle with hit points, a set of blocked cells,
a directional diplomacy table, message inboxes and a seeded RNG.

Test helpers (not part of HostEngine):
    add_settlement(uid, name, cell, resources=None, units=None)
    destroy_castle(uid) / damage_castle(uid, hp)
    block_cell(x, y)
"""

import logging
import random

from .engine import DamageEvent, DiplomacyStatus, HostEngine, Resources, SettlementInfo

logger = logging.getLogger(__name__)

CASTLE_MAX_HP = 4000


class _Settlement:
    def __init__(self, uid, name, cell, resources, units, tax_period):
        self.uid        = uid
        self.name       = name
        self.castle_cell = tuple(cell)
        self.castle_hp  = CASTLE_MAX_HP
        self.protected  = False
        self.resources  = resources
        self.units      = list(units)
        self.tax_period = tax_period
        self.inbox: list = []


class SandboxEngine(HostEngine):
    def __init__(self, width: int = 64, height: int = 64, seed: int = None,
                 tax_period: int = 1000,
                 default_status: DiplomacyStatus = DiplomacyStatus.WAR):
        self.width          = width
        self.height         = height
        self.rng            = random.Random(seed)
        self.default_tax_period = tax_period
        self.default_status = default_status

        self.settlements: dict = {}     # uid → _Settlement
        self.diplomacy:   dict = {}     # (uid, other_uid) → DiplomacyStatus
        self.blocked:     set  = set()
        self.broadcasts:  list = []
        self.refunds:     list = []
        self.victories:   set  = set()
        self.defeats:     set  = set()

    # ── Test helpers ───────────────────────────────────────────────────────

    def add_settlement(self, uid: str, name: str, cell=(0, 0), resources: Resources = None,
                       units=None, tax_period: int = None) -> None:
        self.settlements[uid] = _Settlement(
            uid, name, cell,
            resources if resources is not None else Resources(),
            units or [],
            tax_period if tax_period is not None else self.default_tax_period)

    def damage_castle(self, uid: str, hp: float) -> None:
        s = self.settlements[uid]
        s.castle_hp = max(0, s.castle_hp - hp)

    def destroy_castle(self, uid: str) -> None:
        self.settlements[uid].castle_hp = 0

    def block_cell(self, x: int, y: int) -> None:
        self.blocked.add((x, y))

    def inbox(self, uid: str) -> list:
        return self.settlements[uid].inbox

    def _occupied(self) -> set:
        return {s.castle_cell for s in self.settlements.values() if s.castle_hp > 0}

    # ── Discovery ──────────────────────────────────────────────────────────

    def list_settlements(self):
        return [SettlementInfo(s.uid, s.name, s.castle_cell)
                for s in self.settlements.values()]

    def map_size(self):
        return (self.width, self.height)

    # ── Resources and units ────────────────────────────────────────────────

    def resources(self, uid):
        r = self.settlements[uid].resources
        return Resources(r.gold, r.metal, r.lumber, r.people)

    def add_resources(self, uid, amount):
        s = self.settlements[uid]
        s.resources = s.resources + amount

    def take_resources(self, uid, amount):
        s = self.settlements[uid]
        left = s.resources - amount
        s.resources = Resources(max(0, left.gold), max(0, left.metal),
                                max(0, left.lumber), max(0, left.people))

    def unit_costs(self, uid):
        return list(self.settlements[uid].units)

    def tax_period(self, uid):
        return self.settlements[uid].tax_period

    # ── Castle and placement ───────────────────────────────────────────────

    def castle_alive(self, uid):
        return self.settlements[uid].castle_hp > 0

    def castle_cell(self, uid):
        return self.settlements[uid].castle_cell

    def can_place_castle(self, uid, x, y):
        if not (0 <= x < self.width and 0 <= y < self.height):
            return False
        return (x, y) not in self.blocked and (x, y) not in self._occupied()

    def spawn_castle(self, uid, x, y):
        if not self.can_place_castle(uid, x, y):
            return False
        s = self.settlements[uid]
        s.castle_cell = (x, y)
        s.castle_hp   = CASTLE_MAX_HP
        s.protected   = False
        return True

    def protect_castle(self, uid):
        self.settlements[uid].protected = True

    # ── Diplomacy ──────────────────────────────────────────────────────────

    def get_diplomacy(self, uid, other_uid):
        return self.diplomacy.get((uid, other_uid), self.default_status)

    def set_diplomacy(self, uid, other_uid, status):
        self.diplomacy[(uid, other_uid)] = status

    # ── Messaging, randomness, outcome ─────────────────────────────────────

    def notify(self, uid, text):
        self.settlements[uid].inbox.append(text)

    def broadcast(self, text):
        self.broadcasts.append(text)

    def random_int(self, lo, hi):
        return self.rng.randint(lo, hi)

    def refund_damage(self, event: DamageEvent):
        self.refunds.append(event)
        if event.hit_castle:
            s = self.settlements[event.victim_uid]
            s.castle_hp = min(CASTLE_MAX_HP, s.castle_hp + event.damage)

    def force_victory(self, uid):
        self.victories.add(uid)

    def force_defeat(self, uid):
        self.defeats.add(uid)
