# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
rivals.py — Symmetric rival ("target") pairing between teams.

Every team that is not under truce should face exactly one rival team, and
the relation is mutual.  Pairs that are already mutual survive a re-pairing
pass untouched; everything else is cleared, shuffled and paired off two at a
time.  An odd team out waits for the next pass.

A participant's target_id points at the rival team's suzerain; the rival team
is found through that participant's team_id, so it stays valid while the
rival suzerain is a member of that team.

Public API:
    check_and_reassign_targets(state, t)
    assign_new_target_for_team(state, team, target_team_or_None)
    target_team_of(state, participant)    → Team | None
"""

import logging

logger = logging.getLogger(__name__)


def target_team_of(state, participant):
    if participant.target_id is None:
        return None
    target = state.participants.get(participant.target_id)
    if target is None:
        return None
    return state.teams.get(target.team_id)


def _rival_team_id(state, team):
    rival = target_team_of(state, team.leader)
    return rival.id if rival is not None else None


def check_and_reassign_targets(state, t: int) -> bool:
    """Re-pair teams.  Returns True when any team got a new rival."""
    if not state.settings.enable_target_system:
        return False

    all_teams = state.all_teams()
    eligible  = {team.id: team for team in all_teams if team.truce_until_tick <= t}
    changed   = False

    # Teams under truce lose any rival they still carry.
    for team in all_teams:
        if team.id not in eligible and team.leader.target_id is not None:
            logger.info("Team %s is under truce until %d, clearing its target",
                        team.leader.name, team.truce_until_tick)
            changed |= assign_new_target_for_team(state, team, None)

    # 1. Keep pairs that are already mutual.
    kept: set = set()
    for team_a in eligible.values():
        if team_a.id in kept:
            continue
        b_id = _rival_team_id(state, team_a)
        team_b = eligible.get(b_id) if b_id is not None else None
        if team_b is not None and team_b.id != team_a.id \
                and _rival_team_id(state, team_b) == team_a.id:
            kept.add(team_a.id)
            kept.add(team_b.id)

    to_reassign = [team for team in eligible.values() if team.id not in kept]
    if not to_reassign:
        logger.info("All targets are symmetric, nothing to reassign")
        return changed

    # 2. Drop stale one-sided targets.
    for team in to_reassign:
        if team.leader.target_id is not None:
            changed |= assign_new_target_for_team(state, team, None)

    # 3. Fisher-Yates with the host's randomizer, then pair off from the end.
    for i in range(len(to_reassign) - 1, 0, -1):
        j = state.engine.random_int(0, i)
        to_reassign[i], to_reassign[j] = to_reassign[j], to_reassign[i]

    while len(to_reassign) >= 2:
        team_a = to_reassign.pop()
        team_b = to_reassign.pop()
        logger.info("New rival pair: %s vs %s", team_a.leader.name, team_b.leader.name)
        changed |= assign_new_target_for_team(state, team_a, team_b)
        changed |= assign_new_target_for_team(state, team_b, team_a)

    if to_reassign:
        logger.info("Team %s is left without a pair until the next pass",
                    to_reassign[0].leader.name)
    return changed


def assign_new_target_for_team(state, team, target_team) -> bool:
    """Point every member of *team* at *target_team* (or at nothing).

    Notifies both sides, but only when the target actually changes.
    """
    new_target = target_team.leader if target_team is not None else None
    new_id     = new_target.id if new_target is not None else None
    if team.leader.target_id == new_id:
        return False

    for member in team.get_members():
        member.target_id = new_id

    if target_team is not None:
        logger.info("Team %s (id %d) now targets team %s (id %d)",
                    team.leader.name, team.id, target_team.leader.name, target_team.id)
        for member in team.get_members():
            state.engine.notify(member.settlement_uid,
                                f"Your new target: team {target_team.leader.name}!")
        for member in target_team.get_members():
            state.engine.notify(member.settlement_uid,
                                f"You have become the target of team {team.leader.name}!")
    else:
        logger.info("Team %s (id %d) no longer has a target", team.leader.name, team.id)
    return True
