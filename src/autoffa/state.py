# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
state.py — Everything one match owns, in one place.

SimulationState holds the participant and team registries, the diplomacy
ledger, per-participant truce deadlines and the scheduler-level timers.  Every
phase function takes the state as its first argument; nothing is kept in
module globals.
"""

import logging
import math

from .config import FfaSettings
from .diplomacy import DiplomacyLedger
from .engine import HostEngine
from .participant import Participant
from .team import Team

logger = logging.getLogger(__name__)

_EVENT_LOG_MAX = 2000   # older lines are dropped; the dashboard shows the tail


class SimulationState:
    def __init__(self, engine: HostEngine, settings: FfaSettings):
        self.engine   = engine
        self.settings = settings
        self.ledger   = DiplomacyLedger(engine)

        self.participants: dict = {}   # participant id → Participant
        self.teams:        dict = {}   # team id → Team
        self.uid_to_participant_id: dict = {}

        # participant id → tick the individual truce ends
        self.participant_truce_until: dict = {}

        self.bounty_participant_id  = None
        self.next_bounty_check_tick = 0
        self.initial_peace_end_tick = 0
        self.is_game_finished       = False
        self.winner_team_id         = None

        # victim unit kind → power points per hit point
        self.power_per_hp_cache: dict = {}
        self.map_linear_size = 100.0

        self.event_log: list = []

    # ══════════════════════════════════════════════════════════════════════
    # Construction
    # ══════════════════════════════════════════════════════════════════════

    def setup_participants_and_teams(self) -> None:
        """Create one participant and one single-member team per settlement.

        Ids are handed out in sorted settlement-uid order so a given map
        always numbers its players the same way.
        """
        width, height = self.engine.map_size()
        self.map_linear_size = math.sqrt(2) * math.sqrt(width * height)
        if self.map_linear_size <= 1:
            logger.warning("Could not determine map size (%s), distance factor "
                           "falls back to 100", self.map_linear_size)
            self.map_linear_size = 100.0

        infos = sorted(self.engine.list_settlements(), key=lambda s: s.uid)
        for pid, info in enumerate(infos):
            participant = Participant(pid, info.uid, info.name, info.castle_cell,
                                      self.engine, self.settings)
            self.participants[pid] = participant
            self.uid_to_participant_id[info.uid] = pid
            self.teams[pid] = Team(pid, participant, self.settings, self.ledger)
            self.engine.protect_castle(info.uid)
        logger.info("Set up %d participants", len(self.participants))

    def new_team(self, leader) -> Team:
        """Found a team led by *leader*, reusing its id when that id is free."""
        team_id = leader.id if leader.id not in self.teams else self._next_team_id()
        team    = Team(team_id, leader, self.settings, self.ledger)
        self.teams[team_id] = team
        return team

    def _next_team_id(self) -> int:
        used = set(self.teams) | set(self.participants)
        return max(used, default=-1) + 1

    # ══════════════════════════════════════════════════════════════════════
    # Lookups
    # ══════════════════════════════════════════════════════════════════════

    def participant_by_uid(self, uid: str):
        pid = self.uid_to_participant_id.get(uid)
        return self.participants.get(pid) if pid is not None else None

    def team_of(self, participant):
        return self.teams.get(participant.team_id)

    def all_participants(self) -> list:
        return list(self.participants.values())

    def all_teams(self) -> list:
        return list(self.teams.values())

    def name_of(self, pid) -> str:
        p = self.participants.get(pid)
        return p.name if p else '—'

    def membership_counts(self) -> dict:
        """participant id → number of teams claiming it (should always be 1)."""
        counts = {pid: 0 for pid in self.participants}
        for team in self.teams.values():
            for member in team.get_members():
                counts[member.id] = counts.get(member.id, 0) + 1
        return counts

    # ══════════════════════════════════════════════════════════════════════
    # Event log
    # ══════════════════════════════════════════════════════════════════════

    def record(self, t: int, msg: str) -> str:
        line = f"Tick {t:04d}: {msg}"
        self.event_log.append(line)
        if len(self.event_log) > _EVENT_LOG_MAX:
            del self.event_log[:len(self.event_log) - _EVENT_LOG_MAX]
        logger.info(line)
        return line

    def announce(self, t: int, msg: str) -> None:
        """Broadcast to every player and keep it in the event log."""
        self.engine.broadcast(msg)
        self.record(t, msg)
