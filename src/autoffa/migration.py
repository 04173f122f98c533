# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
migration.py — Defeat detection, conquest, and truce bookkeeping.

Call order inside one scheduling cycle:
    check_for_defeated_participants(state)          (defeats phase)
    process_team_migrations(state, t)               (migrations phase)
    manage_peace_treaties(state, t)                 (truce phase)
    manage_participant_peace_treaties(state, t)     (truce phase)

Conquest rules
──────────────
  The victor is whoever, outside the defeated's own team, has dealt the most
  damage to the defeated's castle.  Without a victor the castle is simply
  rebuilt in place.

  Suzerain defeated, weaken_snowball_effect on:
      the suzerain alone joins the victor's team; each former vassal founds
      a fresh one-member team at war with everyone not under a truce; the old
      team is gone.
  Suzerain defeated, weaken_snowball_effect off:
      the whole team joins the victor's team.
  Vassal defeated:
      the vassal alone changes sides; its old team carries on.

  Whoever changed sides then gets a temporary truce (or the whole victor team
  does, with truce_scope='team').
"""

import logging

from .config import TICKS_PER_SECOND
from .engine import DiplomacyStatus
from .rivals import assign_new_target_for_team, check_and_reassign_targets

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Defeat detection
# ══════════════════════════════════════════════════════════════════════════

def check_for_defeated_participants(state) -> int:
    newly_defeated = 0
    for participant in state.all_participants():
        if not participant.is_defeated and not state.engine.castle_alive(participant.settlement_uid):
            participant.is_defeated = True
            newly_defeated += 1
            logger.info("Participant %s was defeated (castle destroyed)", participant.name)
    return newly_defeated


def find_winner_for(state, defeated):
    best_damage = 0.0
    winner      = None
    for participant in state.all_participants():
        if participant.team_id == defeated.team_id:
            continue
        damage = participant.castle_damage_dealt_to.get(defeated.id, 0.0)
        if damage > best_damage:
            best_damage = damage
            winner      = participant
    return winner


# ══════════════════════════════════════════════════════════════════════════
# Migrations
# ══════════════════════════════════════════════════════════════════════════

def process_team_migrations(state, t: int) -> bool:
    """Resolve every defeated participant once.  Returns True if anyone moved."""
    defeated_ids = [p.id for p in state.all_participants() if p.is_defeated]
    if not defeated_ids:
        return False
    logger.info("Processing migrations for %d defeated participants: %s",
                len(defeated_ids), ', '.join(state.name_of(pid) for pid in defeated_ids))

    migrated_any = False
    for pid in defeated_ids:
        defeated = state.participants[pid]
        if not defeated.is_defeated:
            # already handled as part of another team this pass
            continue
        if _resolve_defeat(state, defeated, t):
            migrated_any = True

    if migrated_any:
        logger.info("Team membership changed, reassigning targets")
        check_and_reassign_targets(state, t)
    return migrated_any


def _resolve_defeat(state, defeated, t: int) -> bool:
    loser_team = state.team_of(defeated)
    if loser_team is None:
        logger.error("No team (id %s) found for defeated participant %s",
                     defeated.team_id, defeated.name)
        return False

    winner = find_winner_for(state, defeated)
    if winner is None:
        logger.warning("No winner for defeated participant %s, rebuilding castle",
                       defeated.name)
        defeated.respawn_castle()
        defeated.is_defeated = False
        return False

    winner_team = state.team_of(winner)
    if winner_team is None:
        logger.error("No team (id %s) found for winner %s", winner.team_id, winner.name)
        return False

    settings = state.settings
    if defeated.is_suzerain():
        if settings.weaken_snowball_effect:
            acquired = _take_suzerain_only(state, defeated, loser_team, winner, winner_team, t)
        else:
            acquired = _absorb_whole_team(state, defeated, loser_team, winner, winner_team, t)
    else:
        acquired = _take_vassal(state, defeated, loser_team, winner, winner_team, t)

    for member in acquired:
        member.is_defeated = False
    _start_truce(state, winner_team, acquired, t)
    return True


def _take_suzerain_only(state, defeated, loser_team, winner, winner_team, t: int) -> list:
    freed = loser_team.vassals
    winner_team.share_spoils(defeated, state.settings.leader_spoils_fraction)

    loser_team.remove_leader()
    for vassal in freed:
        loser_team.remove_subordinate(vassal)
    del state.teams[loser_team.id]

    winner_team.add_subordinate(defeated)

    for vassal in freed:
        new_team = state.new_team(vassal)
        assign_new_target_for_team(state, new_team, None)
        declare_war_outside_truces(state, new_team, t)
        logger.info("Former vassal %s now leads its own team %d", vassal.name, new_team.id)

    state.announce(t, f"{winner.name} crushed {defeated.name}! "
                      f"{defeated.name} bows to {winner_team.leader.name} and "
                      f"{len(freed)} former vassal(s) go free.")
    return [defeated]


def _absorb_whole_team(state, defeated, loser_team, winner, winner_team, t: int) -> list:
    settings = state.settings
    losers   = loser_team.get_members()
    for member in losers:
        fraction = (settings.leader_spoils_fraction if member.is_suzerain()
                    else settings.vassal_spoils_fraction)
        winner_team.share_spoils(member, fraction)

    vassals = loser_team.vassals
    loser_team.remove_leader()
    for vassal in vassals:
        loser_team.remove_subordinate(vassal)
    del state.teams[loser_team.id]

    winner_team.add_suzerain_and_vassals(defeated, vassals)
    state.announce(t, f"{winner.name} conquered the kingdom of {defeated.name}! "
                      f"The whole team joins the victor.")
    return losers


def _take_vassal(state, defeated, loser_team, winner, winner_team, t: int) -> list:
    winner_team.share_spoils(defeated, state.settings.vassal_spoils_fraction)
    loser_team.remove_subordinate(defeated)
    winner_team.add_subordinate(defeated)
    state.announce(t, f"{winner.name} captured the vassal {defeated.name} "
                      f"from {loser_team.leader.name}!")
    return [defeated]


# ══════════════════════════════════════════════════════════════════════════
# Truces
# ══════════════════════════════════════════════════════════════════════════

def is_under_truce(state, participant, t: int) -> bool:
    """True while a personal or team truce still protects *participant* at tick t."""
    if state.participant_truce_until.get(participant.id, 0) >= t:
        return True
    team = state.team_of(participant)
    return team is not None and team.truce_until_tick >= t


def declare_war_outside_truces(state, team, t: int) -> None:
    """Put *team* at war with every other team, leaving running truces neutral."""
    members = team.get_members()
    for other_team in state.all_teams():
        if other_team.id == team.id:
            continue
        for mine in members:
            for theirs in other_team.get_members():
                protected = is_under_truce(state, mine, t) or is_under_truce(state, theirs, t)
                state.ledger.set(mine, theirs, DiplomacyStatus.NEUTRAL if protected
                                 else DiplomacyStatus.WAR)


def _start_truce(state, winner_team, acquired: list, t: int) -> None:
    minutes = round(state.settings.temporary_peace_duration_ticks / TICKS_PER_SECOND / 60)
    if state.settings.truce_scope == 'team':
        start_team_truce(state, winner_team, t)
        state.announce(t, f"Team {winner_team.leader.name} gets a {minutes} min truce to recover.")
    elif acquired:
        start_temporary_peace_for_participants(state, acquired, t)
        state.announce(t, f"The new settlements of team {winner_team.leader.name} "
                          f"get a {minutes} min truce to recover.")


def start_temporary_peace_for_participants(state, participants: list, t: int) -> None:
    duration = state.settings.temporary_peace_duration_ticks
    everyone = state.all_participants()
    for protected in participants:
        logger.info("Temporary peace for %s for %d ticks", protected.name, duration)
        for other in everyone:
            if other.id == protected.id:
                continue
            status = (DiplomacyStatus.ALLIANCE if other.team_id == protected.team_id
                      else DiplomacyStatus.NEUTRAL)
            state.ledger.set(protected, other, status)
        state.participant_truce_until[protected.id] = t + duration


def start_team_truce(state, team, t: int) -> None:
    team.truce_until_tick = t + state.settings.temporary_peace_duration_ticks
    team.set_peace_status_with_all(state.all_teams())
    assign_new_target_for_team(state, team, None)


def manage_peace_treaties(state, t: int) -> int:
    """End expired team truces: the team is at war with everyone again."""
    ended = 0
    all_teams = state.all_teams()
    for team in all_teams:
        if team.truce_until_tick > 0 and t > team.truce_until_tick:
            team.truce_until_tick = 0
            ended += 1
            team.set_war_status_with_all(all_teams)
            state.announce(t, f"The truce of team {team.leader.name} is over! "
                              f"They are back in the fight!")
    return ended


def manage_participant_peace_treaties(state, t: int) -> int:
    """End expired individual truces, restoring team diplomacy for that player."""
    if not state.participant_truce_until:
        return 0

    expired = []
    for pid, until in list(state.participant_truce_until.items()):
        if t <= until:
            continue
        expired.append(pid)
        participant = state.participants.get(pid)
        if participant is None or participant.is_defeated:
            logger.warning("Participant %s missing or defeated, dropping its truce", pid)
            continue
        if state.team_of(participant) is None:
            logger.error("No team found for %s (team id %s) when its truce ended",
                         participant.name, participant.team_id)
            continue

        for other in state.all_participants():
            # truces expiring on this same tick are ended here too
            if other.id == participant.id or is_under_truce(state, other, t):
                continue
            status = (DiplomacyStatus.ALLIANCE if other.team_id == participant.team_id
                      else DiplomacyStatus.WAR)
            state.ledger.set(participant, other, status)
        state.announce(t, f"{participant.name} is back in the fight!")

    for pid in expired:
        del state.participant_truce_until[pid]
    return len(expired)
