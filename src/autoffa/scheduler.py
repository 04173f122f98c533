# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
scheduler.py — The Auto FFA phase scheduler and host entry points.

The host calls:
    on_first_run()          once, before the first tick
    on_every_tick(t)        once per game tick, t starting at 1
    on_unit_damage(event)   for every damage application, between ticks

Timeline
────────
  tick 1                  initialise participants, teams, diplomacy, rivals
  ticks 500 … 4750        rule announcements
  initial_peace_end_tick  war breaks out between all teams (once)
  t ≥ warmup_ticks        exactly one phase per tick, chosen by t % cycle_period

Phase offsets inside a cycle (see config.TICK_OFFSET):
  11 tributes · 22 generosity · 33 migrations · 44 truce expiry ·
  66 promotions · 77 rewards · 88 defeats · 95 bounty · 96 rival check ·
  97 coalitions · 98 battle summaries · 99 game end
"""

import logging

from . import coalitions, combat, economy, migration, rivals
from .config import TICKS_PER_SECOND, FfaSettings
from .engine import DamageEvent, DiplomacyStatus, HostEngine
from .state import SimulationState

logger = logging.getLogger(__name__)


class AutoFfaScheduler:
    def __init__(self, engine: HostEngine, settings: FfaSettings = None):
        self.engine   = engine
        self.settings = settings if settings is not None else FfaSettings()
        self.state    = SimulationState(engine, self.settings)
        self.current_tick = 0

        # Power exchange is switched off for one cycle after a promotion so a
        # fresh suzerain is not immediately flipped back by the exchange.
        self.exchange_enabled      = self.settings.enable_power_points_exchange
        self._exchange_suppressed  = False

        offsets = self.settings.phase_offsets()
        self._phases = {
            offsets['tributes']:         self._phase_tributes,
            offsets['generosity']:       self._phase_generosity,
            offsets['migrations']:       self._phase_migrations,
            offsets['peace_treaties']:   self._phase_peace_treaties,
            offsets['promotions']:       self._phase_promotions,
            offsets['rewards']:          self._phase_rewards,
            offsets['defeats']:          self._phase_defeats,
            offsets['bounty']:           self._phase_bounty,
            offsets['targets']:          self._phase_targets,
            offsets['coalitions']:       self._phase_coalitions,
            offsets['battle_summaries']: self._phase_battle_summaries,
            offsets['game_end']:         self._phase_game_end,
        }

    # ══════════════════════════════════════════════════════════════════════
    # Host entry points
    # ══════════════════════════════════════════════════════════════════════

    def on_first_run(self) -> None:
        self.engine.broadcast("Welcome to Auto FFA!\nEvery settlement for itself! "
                              "Destroy an enemy castle to make them your vassal.")

    def on_every_tick(self, t: int) -> None:
        self.current_tick = t
        state = self.state
        if state.is_game_finished:
            return
        if t == 1:
            self.initialize(t)
            return

        if state.initial_peace_end_tick > 0 and t >= state.initial_peace_end_tick:
            self.end_initial_peace(t)
            state.initial_peace_end_tick = 0

        self.display_initial_messages(t)
        if t < self.settings.warmup_ticks:
            return

        phase = self._phases.get(t % self.settings.cycle_period)
        if phase is not None:
            phase(t)

    def on_unit_damage(self, event: DamageEvent) -> float:
        if self.state.is_game_finished:
            return 0.0
        return combat.on_unit_damage(self.state, event, self.current_tick)

    # ══════════════════════════════════════════════════════════════════════
    # Initialisation
    # ══════════════════════════════════════════════════════════════════════

    def initialize(self, t: int = 1) -> None:
        state    = self.state
        settings = self.settings
        logger.info("Initialising Auto FFA")

        state.setup_participants_and_teams()
        everyone = state.all_participants()
        if settings.enable_initial_peace_period:
            state.ledger.establish_peace_among_all(everyone)
        else:
            state.ledger.declare_war_among_all(everyone)

        rivals.check_and_reassign_targets(state, t)
        if settings.is_challenge_system_enabled:
            if coalitions.apply_challenge_system_balance(state, t):
                rivals.check_and_reassign_targets(state, t)

        if settings.enable_initial_peace_period:
            state.initial_peace_end_tick = settings.initial_peace_duration_ticks
        if settings.enable_bounty_on_leader:
            state.next_bounty_check_tick = (state.initial_peace_end_tick
                                            + settings.bounty_check_interval_ticks)
        state.record(t, f"Auto FFA initialised with {len(state.participants)} participants")

    def end_initial_peace(self, t: int) -> None:
        everyone = self.state.all_participants()
        for i, a in enumerate(everyone):
            for b in everyone[i + 1:]:
                if a.team_id != b.team_id:
                    self.state.ledger.set(a, b, DiplomacyStatus.WAR)
        self.state.announce(t, "Preparation time is over! The war begins!")

    def display_initial_messages(self, t: int) -> None:
        message = self._rule_message(t)
        if message:
            self.engine.broadcast(message)
            self.state.record(t, message.splitlines()[0])

    def _rule_message(self, t: int) -> str:
        s = self.settings
        if t == TICKS_PER_SECOND * 10:
            return ("Rules of the game:\n"
                    "\t1. Everyone is at war with everyone.\n"
                    "\t2. Destroy an enemy castle to make its owner your vassal.")
        if t == TICKS_PER_SECOND * 30:
            return (f"\t3. The defeated changes sides and joins the victor's team.\n"
                    f"\t4. Vassals pay tribute (resources above {s.vassal_resource_limit} "
                    f"+ {s.tribute_resource_coeff:.0%} of power points) to their suzerain.\n"
                    f"\t5. Vassals keep at most {s.vassal_population_limit} "
                    f"+ {s.tribute_population_coeff:.1%} of power points free people.")
        if t == TICKS_PER_SECOND * 50:
            return (f"\t6. After a victory the newcomers get a "
                    f"{s.temporary_peace_duration_ticks / TICKS_PER_SECOND / 60:g} min truce.\n"
                    f"\t7. When the truce ends you are at war with everyone again.\n"
                    f"\t8. A suzerain shares resources above "
                    f"{s.suzerain_generosity_threshold} with their vassals.")
        if t == TICKS_PER_SECOND * 70:
            return (f"\t9. The most influential member of a team becomes its suzerain.\n"
                    f"\t10. After taxes you receive {s.power_points_reward_percentage:.0%} "
                    f"of your power points as resources.\n"
                    f"\t11. Damage against neutral units is refunded.")
        if t == TICKS_PER_SECOND * 85:
            return self._mechanics_message()
        if t == TICKS_PER_SECOND * 95:
            return "The rules are set. Let the battle begin!"
        return ''

    def _mechanics_message(self) -> str:
        s     = self.settings
        lines = ["Enabled mechanics:"]
        if s.is_challenge_system_enabled:
            lines.append("\t- Challenge the system: named challengers unite against everyone else.")
        if s.enable_target_system:
            lines.append("\t- Rivals: teams are paired; hitting your rival earns bonus points.")
        if s.enable_bounty_on_leader:
            lines.append("\t- Bounty: hitting the power leader earns bonus points.")
        if s.enable_coalitions_against_leader:
            lines.append("\t- Coalitions: weaker teams unite against a dominant one.")
        if s.weaken_snowball_effect:
            lines.append("\t- No snowball: when a suzerain falls, their vassals go free.")
        if s.enable_power_points_exchange:
            lines.append("\t- Exchange: suzerains and vassals trade power points with resources.")
        if s.enable_battle_summary_messages:
            lines.append("\t- Battle summaries: hear what each battle earned you.")
        if s.enable_initial_peace_period:
            lines.append(f"\t- Initial peace: "
                         f"{s.initial_peace_duration_ticks / TICKS_PER_SECOND / 60:g} min to build up.")
        return "\n".join(lines)

    # ══════════════════════════════════════════════════════════════════════
    # Phases
    # ══════════════════════════════════════════════════════════════════════

    def _phase_tributes(self, t: int) -> None:
        economy.process_vassal_tributes(self.state, self.exchange_enabled)

    def _phase_generosity(self, t: int) -> None:
        economy.process_suzerain_generosity(self.state, self.exchange_enabled)

    def _phase_migrations(self, t: int) -> None:
        migration.process_team_migrations(self.state, t)

    def _phase_peace_treaties(self, t: int) -> None:
        migration.manage_peace_treaties(self.state, t)
        migration.manage_participant_peace_treaties(self.state, t)

    def _phase_promotions(self, t: int) -> None:
        self.promote_new_suzerains(t)

    def _phase_rewards(self, t: int) -> None:
        economy.process_power_point_rewards(self.state, t)

    def _phase_defeats(self, t: int) -> None:
        migration.check_for_defeated_participants(self.state)

    def _phase_bounty(self, t: int) -> None:
        economy.check_for_bounty(self.state, t)

    def _phase_targets(self, t: int) -> None:
        rivals.check_and_reassign_targets(self.state, t)

    def _phase_coalitions(self, t: int) -> None:
        coalitions.manage_coalitions(self.state, t)

    def _phase_battle_summaries(self, t: int) -> None:
        economy.check_battle_summaries(self.state, t)

    def _phase_game_end(self, t: int) -> None:
        self.check_for_game_end(t)

    # ── Promotions ─────────────────────────────────────────────────────────

    def promote_new_suzerains(self, t: int) -> int:
        if self._exchange_suppressed:
            self.exchange_enabled     = self.settings.enable_power_points_exchange
            self._exchange_suppressed = False
            logger.info("Power exchange restored to %s", self.exchange_enabled)

        promotions = 0
        for team in self.state.all_teams():
            if team.promote_if_stronger():
                promotions += 1
                self.state.record(t, f"New suzerain in team {team.id}: {team.leader.name}")

        if promotions:
            if self.exchange_enabled:
                self.exchange_enabled     = False
                self._exchange_suppressed = True
                logger.info("Power exchange suspended for one cycle after %d promotion(s)",
                            promotions)
            rivals.check_and_reassign_targets(self.state, t)
        return promotions

    # ── Game end ───────────────────────────────────────────────────────────

    def check_for_game_end(self, t: int) -> bool:
        state = self.state
        if state.is_game_finished or len(state.teams) != 1:
            return False

        winner = next(iter(state.teams.values()))
        state.is_game_finished = True
        state.winner_team_id   = winner.id
        state.announce(t, f"{winner.leader.name} is now the sole ruler of these lands!")

        for participant in state.all_participants():
            if participant.team_id == winner.id:
                self.engine.force_victory(participant.settlement_uid)
            else:
                self.engine.force_defeat(participant.settlement_uid)
        return True
