# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
team.py — A suzerain plus its vassals, the unit of diplomatic action.

A Team owns its membership and everything that flows inside it: tribute
recipients, generosity, promotion of a stronger vassal, spoils of victory,
and the diplomacy fan-out to every member when the team as a whole changes
stance.
"""

import logging

from .config import FfaSettings
from .diplomacy import DiplomacyLedger
from .engine import DiplomacyStatus, Resources

logger = logging.getLogger(__name__)


class Team:
    def __init__(self, team_id: int, leader, settings: FfaSettings,
                 ledger: DiplomacyLedger):
        self.id               = team_id
        self.truce_until_tick = 0
        self.settings         = settings
        self.ledger           = ledger
        self._leader          = leader
        self._vassals: dict   = {}     # participant id → Participant

        leader.team_id     = team_id
        leader.suzerain_id = None
        logger.info("Team %d created with suzerain %s", team_id, leader.name)

    def __repr__(self) -> str:
        leader = self._leader.name if self._leader is not None else None
        return f"Team({self.id}, leader={leader!r}, members={self.get_member_count()})"

    @property
    def leader(self):
        return self._leader

    @property
    def engine(self):
        return self.ledger.engine

    @property
    def vassals(self) -> list:
        return list(self._vassals.values())

    def get_members(self) -> list:
        if self._leader is None:
            return self.vassals
        return [self._leader] + self.vassals

    def get_member_count(self) -> int:
        return (1 if self._leader is not None else 0) + len(self._vassals)

    def has_member(self, participant) -> bool:
        return ((self._leader is not None and self._leader.id == participant.id)
                or participant.id in self._vassals)

    def is_empty(self) -> bool:
        return self.get_member_count() == 0

    def get_power(self) -> float:
        return sum(m.get_current_power() for m in self.get_members())

    # ══════════════════════════════════════════════════════════════════════
    # Membership
    # ══════════════════════════════════════════════════════════════════════

    def add_subordinate(self, vassal) -> None:
        logger.info("[Team %d] Adding vassal %s (id %d) under %s",
                    self.id, vassal.name, vassal.id, self._leader.name)
        self._vassals[vassal.id] = vassal
        vassal.team_id     = self.id
        vassal.suzerain_id = self._leader.id
        vassal.target_id   = self._leader.target_id

        self._ally_with_members(vassal)

        if vassal.is_defeated:
            logger.info("[Team %d] Vassal %s was defeated, respawning castle",
                        self.id, vassal.name)
            vassal.respawn_castle()
            self.engine.notify(
                vassal.settlement_uid,
                f"Your new suzerain, {self._leader.name}, welcomes you. "
                f"You have been granted a new castle.")

    def add_suzerain_and_vassals(self, former_suzerain, former_vassals: list) -> None:
        logger.info("[Team %d] Absorbing the team of %s", self.id, former_suzerain.name)
        self.add_subordinate(former_suzerain)
        for vassal in former_vassals:
            self.add_subordinate(vassal)

    def remove_subordinate(self, vassal) -> bool:
        if vassal.id not in self._vassals:
            return False
        logger.info("[Team %d] Removing vassal %s", self.id, vassal.name)
        del self._vassals[vassal.id]
        vassal.suzerain_id = None
        return True

    def remove_leader(self):
        """Detach the leader; the team keeps its vassals until they are moved."""
        leader = self._leader
        if leader is not None:
            logger.info("[Team %d] Removing suzerain %s", self.id, leader.name)
            self._leader = None
        return leader

    def _ally_with_members(self, new_member) -> None:
        for member in self.get_members():
            if member.id != new_member.id:
                self.ledger.set(new_member, member, DiplomacyStatus.ALLIANCE)

    # ══════════════════════════════════════════════════════════════════════
    # Promotion
    # ══════════════════════════════════════════════════════════════════════

    def promote_if_stronger(self) -> bool:
        """Hand leadership to the strongest member if it clearly outranks the leader."""
        if self._leader is None:
            return False
        strongest = self._leader
        for member in self.vassals:
            if member.power_points > strongest.power_points:
                strongest = member

        if strongest.id == self._leader.id:
            return False
        if strongest.power_points <= self._leader.power_points + self.settings.promotion_margin:
            return False

        old = self._leader
        logger.info("[Team %d] %s (%d points) replaces %s (%d points) as suzerain",
                    self.id, strongest.name, round(strongest.power_points),
                    old.name, round(old.power_points))
        self._change_suzerain(strongest)
        self.engine.broadcast(f"Suzerain {old.name} yields to the more "
                              f"influential {strongest.name}!")
        return True

    def _change_suzerain(self, new_suzerain) -> None:
        old = self._leader
        del self._vassals[new_suzerain.id]
        new_suzerain.suzerain_id = None
        self._vassals[old.id] = old
        self._leader = new_suzerain
        for vassal in self.vassals:
            vassal.suzerain_id = new_suzerain.id
            vassal.target_id   = new_suzerain.target_id

    # ══════════════════════════════════════════════════════════════════════
    # Economy
    # ══════════════════════════════════════════════════════════════════════

    def collect_tributes(self, exchange_enabled: bool) -> list:
        """Ask every vassal for tribute; returns the vassals that paid."""
        paid = []
        for vassal in self.vassals:
            if vassal.pay_tribute(self._leader, exchange_enabled):
                paid.append(vassal)
        return paid

    def distribute_generosity(self, exchange_enabled: bool) -> bool:
        if not self._vassals or self._leader is None:
            return False

        threshold = self.settings.suzerain_generosity_threshold
        held      = self.engine.resources(self._leader.settlement_uid)
        surplus   = Resources(max(0, held.gold   - threshold),
                              max(0, held.metal  - threshold),
                              max(0, held.lumber - threshold))
        if not surplus.any_material():
            return False

        n     = len(self._vassals)
        share = Resources(surplus.gold // n, surplus.metal // n, surplus.lumber // n)
        if not share.any_material():
            logger.info("[Team %d] Generosity share per vassal is too small", self.id)
            return False

        limit       = self.settings.vassal_resource_limit
        total_given = Resources()
        for vassal in self.vassals:
            vheld   = self.engine.resources(vassal.settlement_uid)
            payment = Resources(max(0, min(share.gold,   limit - vheld.gold)),
                                max(0, min(share.metal,  limit - vheld.metal)),
                                max(0, min(share.lumber, limit - vheld.lumber)))
            if not payment.any_material():
                continue
            logger.info("[Team %d] -> %s receives %dG %dM %dL", self.id, vassal.name,
                        payment.gold, payment.metal, payment.lumber)
            vassal.receive_resources(payment)
            total_given = total_given + payment

            if exchange_enabled:
                points = payment.material_total() * self.settings.power_points_exchange_rate
                moved  = min(vassal.power_points, points)
                if moved > 0:
                    vassal.power_points        -= moved
                    self._leader.power_points  += moved
                    vassal.points_from_generosity       -= moved
                    self._leader.points_from_generosity += moved

        if not total_given.any_material():
            return False
        self.engine.take_resources(self._leader.settlement_uid, total_given)
        logger.info("[Team %d] %s distributed %dG %dM %dL in total", self.id,
                    self._leader.name, total_given.gold, total_given.metal,
                    total_given.lumber)
        return True

    def share_spoils(self, defeated, taken_fraction: float) -> float:
        """Move *taken_fraction* of the defeated's power to this team's members.

        Each member's cut is proportional to its damage credit against the
        defeated, counted as at least 1 so bystanders still get a share.
        Returns the amount distributed.
        """
        distributed = defeated.power_points * taken_fraction
        defeated.power_points -= distributed

        members = self.get_members()
        credits = [max(1.0, m.damage_dealt_to.get(defeated.id, 0.0)) for m in members]
        total   = sum(credits)
        logger.info("[Team %d] Sharing %d points of %s (team damage %d)", self.id,
                    round(distributed), defeated.name, round(total))

        for member, credit in zip(members, credits):
            ratio = credit / total
            gain  = distributed * ratio
            member.power_points += gain
            self.engine.notify(
                member.settlement_uid,
                f"For the victory over {defeated.name} you gain {round(gain)} power "
                f"points (your share is {round(ratio * 100)}%).")
            member.damage_dealt_to[defeated.id]        = 0.0
            member.castle_damage_dealt_to[defeated.id] = 0.0
        return distributed

    # ══════════════════════════════════════════════════════════════════════
    # Team-wide diplomacy
    # ══════════════════════════════════════════════════════════════════════

    def set_peace_status_with_all(self, teams) -> None:
        logger.info("[Team %d] Making peace with all teams", self.id)
        self._set_diplomacy_with_all(teams, DiplomacyStatus.NEUTRAL)

    def set_war_status_with_all(self, teams) -> None:
        logger.info("[Team %d] Declaring war on all teams", self.id)
        self._set_diplomacy_with_all(teams, DiplomacyStatus.WAR)

    def _set_diplomacy_with_all(self, teams, status: DiplomacyStatus) -> None:
        members = self.get_members()
        for other in teams:
            if other.id == self.id:
                continue
            self.ledger.set_between(members, other.get_members(), status)
