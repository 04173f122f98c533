# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
diplomacy.py — Symmetric diplomacy ledger between participants.

The host engine stores diplomacy per direction; the ledger is the only code
that writes it and always writes both directions, so reads are symmetric no
matter which side asks.

Public API:
    ledger.get(a, b)                       → DiplomacyStatus
    ledger.set(a, b, status)               → None
    ledger.set_between(group_a, group_b, status)
    ledger.establish_peace_among_all(participants)
    ledger.declare_war_among_all(participants)
    ledger.invalidate()
"""

import logging

from .engine import DiplomacyStatus, HostEngine

logger = logging.getLogger(__name__)


def _pair_key(a, b) -> tuple:
    return (a.id, b.id) if a.id <= b.id else (b.id, a.id)


class DiplomacyLedger:
    def __init__(self, engine: HostEngine):
        self.engine = engine
        # (low_id, high_id) → DiplomacyStatus
        self._cache: dict = {}

    def get(self, a, b) -> DiplomacyStatus:
        key    = _pair_key(a, b)
        status = self._cache.get(key)
        if status is None:
            status = self.engine.get_diplomacy(a.settlement_uid, b.settlement_uid)
            self._cache[key] = status
        return status

    def set(self, a, b, status: DiplomacyStatus) -> None:
        if a.id == b.id:
            return
        self.engine.set_diplomacy(a.settlement_uid, b.settlement_uid, status)
        self.engine.set_diplomacy(b.settlement_uid, a.settlement_uid, status)
        self._cache[_pair_key(a, b)] = status

    def set_between(self, group_a, group_b, status: DiplomacyStatus) -> None:
        """Apply *status* to every cross pair of the two groups."""
        for a in group_a:
            for b in group_b:
                if a.id != b.id:
                    self.set(a, b, status)

    def establish_peace_among_all(self, participants: list) -> None:
        self._set_among_all(participants, DiplomacyStatus.NEUTRAL)

    def declare_war_among_all(self, participants: list) -> None:
        self._set_among_all(participants, DiplomacyStatus.WAR)

    def _set_among_all(self, participants: list, status: DiplomacyStatus) -> None:
        for i in range(len(participants)):
            for j in range(i + 1, len(participants)):
                self.set(participants[i], participants[j], status)
        logger.info("Diplomacy '%s' set among %d participants",
                    status.value, len(participants))

    def invalidate(self) -> None:
        self._cache.clear()
