# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
coalitions.py — Balancing merges between hierarchies.

manage_coalitions(state, t)
    When one team holds at least half of all participants, every other team
    merges under the strongest remaining suzerain and the coalition is set at
    war with, and paired as rival of, the dominant team.

apply_challenge_system_balance(state)
    Opening split: participants whose name carries a challenger keyword are
    merged into one team, everyone else into another, and the two go to war.
"""

import logging

from .engine import DiplomacyStatus
from .rivals import assign_new_target_for_team

logger = logging.getLogger(__name__)


def find_dominant_team(state):
    total = len(state.participants)
    for team in state.all_teams():
        if team.get_member_count() >= total / 2:
            return team
    return None


def manage_coalitions(state, t: int) -> bool:
    if not state.settings.enable_coalitions_against_leader:
        return False

    dominant = find_dominant_team(state)
    if dominant is None:
        logger.info("No dominant team, no coalition needed")
        return False

    others = [team for team in state.all_teams() if team.id != dominant.id]
    if len(others) <= 1:
        logger.info("Team %s dominates but there is nobody left to unite",
                    dominant.leader.name)
        return False

    # ties keep the later team, matching a left fold with a strict '>'
    head = others[0]
    for team in others[1:]:
        if not head.leader.power_points > team.leader.power_points:
            head = team
    logger.info("Team %s dominates, forming a coalition under %s",
                dominant.leader.name, head.leader.name)

    for team in others:
        if team.id == head.id:
            continue
        leader  = team.remove_leader()
        vassals = team.vassals
        for vassal in vassals:
            team.remove_subordinate(vassal)
        del state.teams[team.id]
        head.add_suzerain_and_vassals(leader, vassals)
        logger.info("Team %s (id %d) disbanded into the coalition", leader.name, team.id)

    head.set_war_status_with_all([dominant])
    assign_new_target_for_team(state, head, dominant)
    assign_new_target_for_team(state, dominant, head)

    state.announce(t, f"Team {dominant.leader.name} has grown too strong! The others "
                      f"unite in a coalition led by {head.leader.name} to stop them!")
    return True


def _is_challenger(name: str, keywords) -> bool:
    lowered = name.lower()
    return any(keyword.lower() in lowered for keyword in keywords)


def apply_challenge_system_balance(state, t: int = 0) -> bool:
    keywords    = state.settings.challenger_keywords
    challengers = [p for p in state.all_participants() if _is_challenger(p.name, keywords)]
    others      = [p for p in state.all_participants() if not _is_challenger(p.name, keywords)]
    if not challengers or not others:
        logger.info("Not enough participants on both sides, no challenge split")
        return False

    challengers.sort(key=lambda p: p.power_points, reverse=True)
    others.sort(key=lambda p: p.power_points, reverse=True)
    challenger_team = state.teams.get(challengers[0].team_id)
    other_team      = state.teams.get(others[0].team_id)
    if challenger_team is None or other_team is None:
        logger.error("Could not find the starting teams of %s and %s",
                     challengers[0].name, others[0].name)
        return False

    names = ' and '.join(p.name for p in challengers)
    state.announce(t, f"{names} challenged the system and will be punished!")

    for side, head in ((challengers[1:], challenger_team), (others[1:], other_team)):
        for participant in side:
            old_team = state.team_of(participant)
            if old_team is not None and old_team.id != head.id:
                old_team.remove_leader()
                del state.teams[old_team.id]
            head.add_subordinate(participant)

    state.ledger.set_between(challenger_team.get_members(), other_team.get_members(),
                             DiplomacyStatus.WAR)
    logger.info("Challenge split done: %d teams remain", len(state.teams))
    return True
