# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
engine.py — Contract between the Auto FFA core and its host game engine.

The core never reaches into the world directly.  Everything it needs from
settlements, units, the map, messaging and randomness goes through a
HostEngine implementation; sandbox.SandboxEngine is the in-memory one used by
the run driver and the tests.

Value types
───────────
  Resources       gold / metal / lumber / people bundle
  DiplomacyStatus WAR / NEUTRAL / ALLIANCE
  DamageEvent     one damage application delivered by the combat feed
  SettlementInfo  what the engine reports about a playable settlement
"""

from __future__ import annotations

import abc
import enum
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

Cell = Tuple[int, int]


class DiplomacyStatus(enum.Enum):
    WAR      = 'war'
    NEUTRAL  = 'neutral'
    ALLIANCE = 'alliance'


@dataclass
class Resources:
    gold:   int = 0
    metal:  int = 0
    lumber: int = 0
    people: int = 0

    def any(self) -> bool:
        return self.gold > 0 or self.metal > 0 or self.lumber > 0 or self.people > 0

    def any_material(self) -> bool:
        """True when gold, metal or lumber is non-zero (people ignored)."""
        return self.gold > 0 or self.metal > 0 or self.lumber > 0

    def material_total(self) -> int:
        return self.gold + self.metal + self.lumber

    def weighted_value(self, population_weight: int) -> float:
        return self.material_total() + population_weight * self.people

    def materials_only(self) -> 'Resources':
        return Resources(self.gold, self.metal, self.lumber, 0)

    def __add__(self, other: 'Resources') -> 'Resources':
        return Resources(self.gold + other.gold, self.metal + other.metal,
                         self.lumber + other.lumber, self.people + other.people)

    def __sub__(self, other: 'Resources') -> 'Resources':
        return Resources(self.gold - other.gold, self.metal - other.metal,
                         self.lumber - other.lumber, self.people - other.people)


@dataclass
class SettlementInfo:
    uid:         str
    name:        str
    castle_cell: Cell


@dataclass
class DamageEvent:
    """One damage application reported by the host's combat feed.

    unit_kind / unit_value / max_health describe the victim unit so the core
    can price a hit point; attacker_cell is where the attacking unit stood.
    """
    attacker_uid:  str
    victim_uid:    str
    damage:        float
    hit_castle:    bool = False
    unit_kind:     str  = 'unit'
    unit_value:    float = 0.0
    max_health:    float = 1.0
    attacker_cell: Optional[Cell] = None


class HostEngine(abc.ABC):
    """Narrow interface to the host game engine.

    All calls are synchronous and assumed non-blocking.  Implementations
    must not raise for ordinary conditions; failures are reported through
    return values.
    """

    # ── Discovery ──────────────────────────────────────────────────────────

    @abc.abstractmethod
    def list_settlements(self) -> List[SettlementInfo]:
        """Playable settlements that own a castle."""

    @abc.abstractmethod
    def map_size(self) -> Tuple[int, int]:
        """(width, height) of the map in cells."""

    # ── Resources and units ────────────────────────────────────────────────

    @abc.abstractmethod
    def resources(self, uid: str) -> Resources:
        """Current holdings of the settlement (a copy)."""

    @abc.abstractmethod
    def add_resources(self, uid: str, amount: Resources) -> None: ...

    @abc.abstractmethod
    def take_resources(self, uid: str, amount: Resources) -> None: ...

    @abc.abstractmethod
    def unit_costs(self, uid: str) -> Iterable[Resources]:
        """Replacement cost of every unit the settlement currently owns."""

    @abc.abstractmethod
    def tax_period(self, uid: str) -> int:
        """Ticks between the settlement's tax and salary updates."""

    # ── Castle and placement ───────────────────────────────────────────────

    @abc.abstractmethod
    def castle_alive(self, uid: str) -> bool: ...

    @abc.abstractmethod
    def castle_cell(self, uid: str) -> Cell: ...

    @abc.abstractmethod
    def can_place_castle(self, uid: str, x: int, y: int) -> bool: ...

    @abc.abstractmethod
    def spawn_castle(self, uid: str, x: int, y: int) -> bool:
        """Place a new castle; False when the host refuses the placement."""

    @abc.abstractmethod
    def protect_castle(self, uid: str) -> None:
        """Forbid the owner from ordering its castle to self-destruct."""

    # ── Diplomacy (one direction per call) ─────────────────────────────────

    @abc.abstractmethod
    def get_diplomacy(self, uid: str, other_uid: str) -> DiplomacyStatus: ...

    @abc.abstractmethod
    def set_diplomacy(self, uid: str, other_uid: str,
                      status: DiplomacyStatus) -> None: ...

    # ── Messaging, randomness, outcome ─────────────────────────────────────

    @abc.abstractmethod
    def notify(self, uid: str, text: str) -> None: ...

    @abc.abstractmethod
    def broadcast(self, text: str) -> None: ...

    @abc.abstractmethod
    def random_int(self, lo: int, hi: int) -> int:
        """Uniform integer in [lo, hi] inclusive."""

    @abc.abstractmethod
    def refund_damage(self, event: DamageEvent) -> None:
        """Give back the hit points a non-hostile hit took."""

    @abc.abstractmethod
    def force_victory(self, uid: str) -> None: ...

    @abc.abstractmethod
    def force_defeat(self, uid: str) -> None: ...
