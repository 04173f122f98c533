# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
economy.py — Scheduled economy phases: tribute, generosity, rewards, bounty
and battle summaries.

Public API (each returns how many participants/teams the phase touched):
    process_vassal_tributes(state, exchange_enabled)
    process_suzerain_generosity(state, exchange_enabled)
    process_power_point_rewards(state, t)
    check_for_bounty(state, t)
    check_battle_summaries(state, t)

exchange_enabled is passed in by the scheduler rather than read from the
settings, because it is switched off for one cycle after a promotion.
"""

import logging

logger = logging.getLogger(__name__)


def process_vassal_tributes(state, exchange_enabled: bool) -> int:
    paid = 0
    for team in state.all_teams():
        if team.leader is None:
            logger.error("Team %d has no suzerain, skipping its tributes", team.id)
            continue
        for vassal in team.collect_tributes(exchange_enabled):
            paid += 1
            logger.info("Vassal %s (team %s) paid tribute", vassal.name, team.leader.name)
    if paid:
        logger.info("Tributes done: %d vassals paid", paid)
    return paid


def process_suzerain_generosity(state, exchange_enabled: bool) -> int:
    generous = 0
    for team in state.all_teams():
        if team.distribute_generosity(exchange_enabled):
            generous += 1
            logger.info("Suzerain %s was generous to their vassals", team.leader.name)
    if generous:
        logger.info("Generosity done: %d suzerains shared", generous)
    return generous


def process_power_point_rewards(state, t: int) -> int:
    rewarded = 0
    for participant in state.all_participants():
        if t >= participant.next_reward_tick and participant.give_power_point_reward():
            rewarded += 1
            logger.info("Participant %s received a power point reward", participant.name)
    return rewarded


def check_for_bounty(state, t: int) -> int:
    """Put the bounty on the richest participant still standing."""
    if not state.settings.enable_bounty_on_leader or t < state.next_bounty_check_tick:
        return 0
    state.next_bounty_check_tick = t + state.settings.bounty_check_interval_ticks

    richest   = None
    max_power = -1.0
    for participant in state.all_participants():
        if not participant.is_defeated and participant.power_points > max_power:
            max_power = participant.power_points
            richest   = participant

    if richest is None:
        logger.info("No candidate for the bounty")
        return 0
    if richest.id == state.bounty_participant_id:
        logger.info("Bounty stays on %s", richest.name)
        return 0

    state.bounty_participant_id = richest.id
    multiplier = state.settings.bounty_power_points_multiplier
    state.announce(t, f"{richest.name} is now the prime target! "
                      f"Damage against them earns x{multiplier:g} power points!")
    return 1


def check_battle_summaries(state, t: int) -> int:
    """Tell each participant what their last battle earned once it has gone quiet."""
    if not state.settings.enable_battle_summary_messages:
        return 0
    timeout = state.settings.battle_summary_timeout_ticks
    sent    = 0
    for participant in state.all_participants():
        if participant.last_power_gain_tick <= 0 or t <= participant.last_power_gain_tick + timeout:
            continue
        points = round(participant.current_battle_power_points)
        if points > 0:
            state.engine.notify(participant.settlement_uid,
                                f"Your last battle earned you {points} power points.")
            logger.info("Battle summary for %s: %d points", participant.name, points)
            sent += 1
        participant.current_battle_power_points = 0.0
        participant.last_power_gain_tick        = 0
    return sent
