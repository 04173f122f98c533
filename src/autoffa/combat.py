# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
combat.py — Turns the host's damage feed into power points and damage credit.

Called by the host once per damage application, outside the phase schedule:
    on_unit_damage(state, event, t)   → float  (power points credited)

Only hits between participants at WAR earn anything.  Hits between NEUTRAL
participants are refunded through the engine; allied hits are ignored.
"""

import logging

from .engine import DamageEvent, DiplomacyStatus
from .rivals import target_team_of

logger = logging.getLogger(__name__)


def chebyshev_distance(x1: int, y1: int, x2: int, y2: int) -> int:
    return max(abs(x1 - x2), abs(y1 - y2))


def power_per_hp(state, event: DamageEvent) -> float:
    """Power points one hit point of the victim unit is worth (cached per kind)."""
    cached = state.power_per_hp_cache.get(event.unit_kind)
    if cached is None:
        max_health = event.max_health if event.max_health > 0 else 1.0
        cached = state.settings.power_point_per_hp_coeff * event.unit_value / max_health
        state.power_per_hp_cache[event.unit_kind] = cached
    return cached


def distance_factor(state, attacker, event: DamageEvent) -> float:
    """Linear bonus from 1 near the attacker's castle up to the configured max."""
    max_coeff = state.settings.power_point_coeff_by_max_distance
    if event.attacker_cell is None:
        return 1.0
    cx, cy   = state.engine.castle_cell(attacker.settlement_uid)
    ax, ay   = event.attacker_cell
    distance = chebyshev_distance(cx, cy, ax, ay)
    return min(1 + (max_coeff - 1) * (distance / state.map_linear_size), max_coeff)


def on_unit_damage(state, event: DamageEvent, t: int = 0) -> float:
    attacker = state.participant_by_uid(event.attacker_uid)
    victim   = state.participant_by_uid(event.victim_uid)
    if attacker is None or victim is None or attacker.id == victim.id:
        return 0.0

    status = state.ledger.get(attacker, victim)
    if status is DiplomacyStatus.NEUTRAL:
        state.engine.refund_damage(event)
        return 0.0
    if status is not DiplomacyStatus.WAR:
        return 0.0
    return increase_attacker_power(state, attacker, victim, event, t)


def increase_attacker_power(state, attacker, victim, event: DamageEvent, t: int) -> float:
    settings = state.settings
    delta    = event.damage * power_per_hp(state, event) * distance_factor(state, attacker, event)

    if state.bounty_participant_id is not None and victim.id == state.bounty_participant_id:
        delta *= settings.bounty_power_points_multiplier

    if settings.enable_target_system:
        rival_team = target_team_of(state, attacker)
        if rival_team is not None and victim.team_id == rival_team.id:
            delta *= settings.target_power_points_multiplier

    if delta <= 0:
        return 0.0

    attacker.power_points += delta
    attacker.damage_dealt_to[victim.id] = attacker.damage_dealt_to.get(victim.id, 0.0) + delta
    if event.hit_castle:
        attacker.castle_damage_dealt_to[victim.id] = (
            attacker.castle_damage_dealt_to.get(victim.id, 0.0) + delta)

    if settings.enable_battle_summary_messages:
        attacker.current_battle_power_points += delta
        attacker.last_power_gain_tick = t
    return delta
