# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
participant.py — One competing settlement in the free-for-all.

A Participant owns its power score, its elimination flag and the damage
credit it has earned against every other participant.  Leader / rival links
are plain ids resolved through SimulationState, never object references.
"""

import logging
import math

from .config import FfaSettings
from .engine import HostEngine, Resources

logger = logging.getLogger(__name__)


def spiral_cells(x: int, y: int, max_radius: int):
    """Yield (x, y) first, then every cell of each surrounding ring outward."""
    yield (x, y)
    for r in range(1, max_radius + 1):
        # top and bottom rows of the ring, then the side columns
        for dx in range(-r, r + 1):
            yield (x + dx, y - r)
        for dy in range(-r + 1, r + 1):
            yield (x + r, y + dy)
        for dx in range(r - 1, -r - 1, -1):
            yield (x + dx, y + r)
        for dy in range(r - 1, -r, -1):
            yield (x - r, y + dy)


class Participant:
    def __init__(self, pid: int, settlement_uid: str, name: str,
                 initial_castle_cell: tuple, engine: HostEngine,
                 settings: FfaSettings):
        self.id                  = pid
        self.settlement_uid      = settlement_uid
        self.name                = name
        self.initial_castle_cell = tuple(initial_castle_cell)
        self.engine              = engine
        self.settings            = settings

        self.team_id     = pid      # everyone starts leading their own team
        self.suzerain_id = None
        self.target_id   = None
        self.is_defeated = False
        self.power_points = float(settings.initial_power_points)

        # victim id → accumulated credit
        self.damage_dealt_to:        dict = {}
        self.castle_damage_dealt_to: dict = {}

        self.next_reward_tick = engine.tax_period(settlement_uid)

        # ── Battle summary bookkeeping ─────────────────────────────────────
        self.current_battle_power_points = 0.0
        self.last_power_gain_tick        = 0

        # ── Exchange statistics ────────────────────────────────────────────
        self.points_from_tribute    = 0.0
        self.points_from_generosity = 0.0

    def __repr__(self) -> str:
        return f"Participant({self.id}, {self.name!r}, power={self.power_points:.1f})"

    def is_suzerain(self) -> bool:
        return self.suzerain_id is None

    def is_vassal(self) -> bool:
        return self.suzerain_id is not None

    # ── Economy ────────────────────────────────────────────────────────────

    def resource_limit(self) -> int:
        return math.floor(self.settings.vassal_resource_limit
                          + self.settings.tribute_resource_coeff * self.power_points)

    def population_limit(self) -> int:
        return math.floor(self.settings.vassal_population_limit
                          + self.settings.tribute_population_coeff * self.power_points)

    def compute_tribute(self) -> Resources:
        held      = self.engine.resources(self.settlement_uid)
        res_limit = self.resource_limit()
        pop_limit = self.population_limit()
        return Resources(
            max(0, held.gold   - res_limit),
            max(0, held.metal  - res_limit),
            max(0, held.lumber - res_limit),
            max(0, held.people - pop_limit),
        )

    def pay_tribute(self, suzerain: 'Participant', exchange_enabled: bool) -> bool:
        """Hand everything above the vassal limits to *suzerain*.

        Free people above the limit are taken but not transferred.  With the
        power exchange on, the suzerain pays power back for the materials, but
        only while it would stay ahead of the vassal by at least the payment.
        """
        if not self.is_vassal() or self.suzerain_id != suzerain.id:
            return False

        tribute = self.compute_tribute()
        if not tribute.any():
            return False

        self.engine.take_resources(self.settlement_uid, tribute)
        materials = tribute.materials_only()
        if materials.any_material():
            suzerain.receive_resources(materials)

        if exchange_enabled and materials.any_material():
            points = materials.material_total() * self.settings.power_points_exchange_rate
            if suzerain.power_points - points >= self.power_points + points:
                suzerain.power_points -= points
                self.power_points     += points
                suzerain.points_from_tribute -= points
                self.points_from_tribute     += points
                logger.info("Power exchange on tribute: %s (-%d) -> %s (+%d)",
                            suzerain.name, round(points), self.name, round(points))
            else:
                logger.info("Power exchange on tribute skipped: %s would fall "
                            "behind %s", suzerain.name, self.name)
        return True

    def receive_resources(self, amount: Resources) -> None:
        self.engine.add_resources(self.settlement_uid, amount)

    def reward_preview(self) -> tuple:
        """(per-resource amount, people) the next reward would pay."""
        pct = self.settings.power_points_reward_percentage
        return (math.floor(pct * self.power_points),
                math.floor(0.02 * pct * self.power_points))

    def give_power_point_reward(self) -> bool:
        if self.power_points < self.settings.reward_min_power:
            return False
        per_resource, people = self.reward_preview()
        self.receive_resources(Resources(per_resource, per_resource, per_resource, people))
        self.next_reward_tick += self.engine.tax_period(self.settlement_uid)
        return True

    def get_current_power(self) -> float:
        weight = self.settings.population_weight
        power  = self.engine.resources(self.settlement_uid).weighted_value(weight)
        for cost in self.engine.unit_costs(self.settlement_uid):
            power += cost.weighted_value(weight)
        return power

    # ── Castle ─────────────────────────────────────────────────────────────

    def respawn_castle(self) -> bool:
        x, y = self.initial_castle_cell
        for cx, cy in spiral_cells(x, y, self.settings.respawn_search_radius):
            if not self.engine.can_place_castle(self.settlement_uid, cx, cy):
                continue
            if self.engine.spawn_castle(self.settlement_uid, cx, cy):
                self.engine.protect_castle(self.settlement_uid)
                logger.info("Castle of %s respawned at (%d, %d)", self.name, cx, cy)
                return True
        logger.warning("No valid cell to respawn the castle of %s near (%d, %d)",
                       self.name, x, y)
        return False

    def reset_damage_counters(self) -> None:
        self.damage_dealt_to.clear()
        self.castle_damage_dealt_to.clear()
