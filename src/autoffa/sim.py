# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
sim.py — Headless Auto FFA match on the in-memory sandbox host.

Run with:  python -m autoffa --ticks 60000 --players 8 --seed 7

Each tick
─────────
  1. settlements earn a little income (every INCOME_EVERY ticks)
  2. random skirmishes between hostile participants feed the combat hook;
     a share of the hits land on the victim's castle
  3. the scheduler runs whatever phase the tick selects
  4. a dashboard snapshot is written every DASHBOARD_WRITE_EVERY ticks

The full log goes to logs/run_<timestamp>.txt; the terminal only shows
progress lines, warnings and the final report.
"""

import argparse
import logging
import pathlib
import sys
import time
from datetime import datetime

from . import dashboard_bridge
from .config import FfaSettings
from .engine import DamageEvent, DiplomacyStatus, Resources
from .rivals import target_team_of
from .sandbox import SandboxEngine
from .scheduler import AutoFfaScheduler

logger = logging.getLogger(__name__)

DEFAULT_TICKS   = 60_000
DEFAULT_PLAYERS = 8
INCOME_EVERY    = 100
SKIRMISH_CHANCE = 0.35   # per tick
CASTLE_HIT_SHARE = 0.3
RIVAL_FOCUS     = 0.6    # chance an attack goes against the rival team

_NAMES = [
    'Aldric', 'Brenna', 'Cedric', 'Dagny', 'Eirik', 'Freya', 'Gunnar', 'Hilde',
    'Ivar', 'Jorunn', 'Knut', 'Liv', 'Magnus', 'Nanna', 'Olaf', 'Ragna',
]


# ══════════════════════════════════════════════════════════════════════════
# Setup
# ══════════════════════════════════════════════════════════════════════════

def parse_args(argv=None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog='autoffa', description='Headless Auto FFA match.')
    p.add_argument('--ticks',   type=int, default=DEFAULT_TICKS)
    p.add_argument('--players', type=int, default=DEFAULT_PLAYERS)
    p.add_argument('--seed',    type=int, default=None)
    p.add_argument('--map-size', type=int, default=96)
    p.add_argument('--truce-scope', choices=('participant', 'team'), default=None)
    p.add_argument('--full-absorption', action='store_true',
                   help='a defeated suzerain brings their whole team along')
    p.add_argument('--no-initial-peace', action='store_true')
    p.add_argument('--no-targets', action='store_true')
    p.add_argument('--no-coalitions', action='store_true')
    p.add_argument('--no-dashboard', action='store_true',
                   help='skip writing dashboard_data.json')
    p.add_argument('--log-dir', default='logs')
    return p.parse_args(argv)


def settings_from_args(args: argparse.Namespace) -> FfaSettings:
    overrides = {}
    if args.truce_scope:
        overrides['truce_scope'] = args.truce_scope
    if args.full_absorption:
        overrides['weaken_snowball_effect'] = False
    if args.no_initial_peace:
        overrides['enable_initial_peace_period'] = False
    if args.no_targets:
        overrides['enable_target_system'] = False
    if args.no_coalitions:
        overrides['enable_coalitions_against_leader'] = False
    return FfaSettings().with_overrides(**overrides)


def build_sandbox(players: int, map_size: int, seed=None) -> SandboxEngine:
    engine = SandboxEngine(map_size, map_size, seed=seed)
    rng    = engine.rng
    for i in range(players):
        name = _NAMES[i % len(_NAMES)] + ('' if i < len(_NAMES) else f' {i // len(_NAMES) + 1}')
        cell = (rng.randrange(4, map_size - 4), rng.randrange(4, map_size - 4))
        units = [Resources(100, 50, 0, 1) for _ in range(rng.randint(3, 8))]
        engine.add_settlement(f's{i:02d}', name, cell,
                              Resources(rng.randint(400, 1200), rng.randint(200, 800),
                                        rng.randint(300, 900), rng.randint(5, 20)),
                              units)
    return engine


def setup_logging(log_dir: str) -> tuple:
    pathlib.Path(log_dir).mkdir(exist_ok=True)
    ts       = datetime.now().strftime('%Y%m%d_%H%M%S')
    log_path = pathlib.Path(log_dir) / f'run_{ts}.txt'

    root = logging.getLogger()
    root.setLevel(logging.INFO)
    file_handler = logging.FileHandler(log_path, encoding='utf-8')
    file_handler.setFormatter(logging.Formatter('%(asctime)s %(name)s %(levelname)s %(message)s'))
    console = logging.StreamHandler(sys.stdout)
    console.setLevel(logging.WARNING)
    console.setFormatter(logging.Formatter('  ⚠ %(name)s: %(message)s'))
    root.addHandler(file_handler)
    root.addHandler(console)
    return log_path, [file_handler, console]


# ══════════════════════════════════════════════════════════════════════════
# Per-tick world activity
# ══════════════════════════════════════════════════════════════════════════

def grant_income(engine: SandboxEngine) -> None:
    rng = engine.rng
    for uid in engine.settlements:
        engine.add_resources(uid, Resources(rng.randint(20, 80), rng.randint(10, 50),
                                            rng.randint(15, 60), rng.randint(0, 1)))


def _pick_victim(state, attacker, rng):
    standing = [p for p in state.all_participants()
                if p.id != attacker.id and not p.is_defeated
                and state.engine.castle_alive(p.settlement_uid)]
    rival_team = target_team_of(state, attacker)
    if rival_team is not None and rng.random() < RIVAL_FOCUS:
        rivals = [p for p in standing if p.team_id == rival_team.id]
        if rivals:
            return rng.choice(rivals)
    hostile = [p for p in standing if state.ledger.get(attacker, p) is DiplomacyStatus.WAR]
    return rng.choice(hostile) if hostile else None


def skirmish(scheduler: AutoFfaScheduler, engine: SandboxEngine) -> float:
    """One random hit between hostile participants; returns the power credited."""
    state = scheduler.state
    rng   = engine.rng
    if rng.random() >= SKIRMISH_CHANCE:
        return 0.0
    active = [p for p in state.all_participants() if not p.is_defeated]
    if len(active) < 2:
        return 0.0

    attacker = rng.choice(active)
    victim   = _pick_victim(state, attacker, rng)
    if victim is None:
        return 0.0

    hit_castle = rng.random() < CASTLE_HIT_SHARE
    ax, ay     = engine.castle_cell(victim.settlement_uid)
    event = DamageEvent(
        attacker_uid=attacker.settlement_uid,
        victim_uid=victim.settlement_uid,
        damage=float(rng.randint(10, 60)),
        hit_castle=hit_castle,
        unit_kind='castle' if hit_castle else 'footman',
        unit_value=2000.0 if hit_castle else 150.0,
        max_health=4000.0 if hit_castle else 100.0,
        attacker_cell=(ax + rng.randint(-3, 3), ay + rng.randint(-3, 3)),
    )
    if hit_castle:
        engine.damage_castle(victim.settlement_uid, event.damage)
    return scheduler.on_unit_damage(event)


# ══════════════════════════════════════════════════════════════════════════
# Report
# ══════════════════════════════════════════════════════════════════════════

def final_report(state, t: int) -> None:
    print(f"\n{'═' * 60}")
    print(f"  AUTO FFA — final report after {t} ticks")
    print(f"{'═' * 60}")
    if state.winner_team_id is not None:
        print(f"  Winner: team {state.teams[state.winner_team_id].leader.name}")
    else:
        print(f"  No winner yet, {len(state.teams)} teams still standing")

    teams = sorted(state.all_teams(), key=lambda tm: tm.get_member_count(), reverse=True)
    for team in teams:
        print(f"\n  Team {team.leader.name}  ({team.get_member_count()} members)")
        for m in sorted(team.get_members(), key=lambda p: p.power_points, reverse=True):
            role = 'suzerain' if m.is_suzerain() else 'vassal'
            print(f"    {m.name:<14} {role:<9} {m.power_points:9.1f} pts")

    print(f"\n  Last events:")
    for line in state.event_log[-10:]:
        print(f"    {line}")


# ══════════════════════════════════════════════════════════════════════════
# Main loop
# ══════════════════════════════════════════════════════════════════════════

def run(argv=None) -> AutoFfaScheduler:
    args     = parse_args(argv)
    settings = settings_from_args(args)
    log_path, handlers = setup_logging(args.log_dir)
    logger.info("Match settings: %s", settings)
    print(f"Log → {log_path}")
    print(f"Running {args.ticks}-tick Auto FFA with {args.players} players\n")

    engine    = build_sandbox(args.players, args.map_size, args.seed)
    scheduler = AutoFfaScheduler(engine, settings)
    state     = scheduler.state
    dashboard_bridge.reset_history()
    scheduler.on_first_run()

    tick_times: list = []
    width = len(str(args.ticks))
    t = 0
    try:
        for t in range(1, args.ticks + 1):
            t0 = time.time()
            if t % INCOME_EVERY == 0:
                grant_income(engine)
            if t > 1:
                skirmish(scheduler, engine)
            scheduler.on_every_tick(t)
            tick_times.append(time.time() - t0)

            if not args.no_dashboard and t % dashboard_bridge.DASHBOARD_WRITE_EVERY == 0:
                dashboard_bridge.write_dashboard_snapshot(state, t, tick_times)

            if t % 5000 == 0:
                print(f"  [{t:{width}d}/{args.ticks}]  Teams:{len(state.teams):2d}  "
                      f"Truces:{len(state.participant_truce_until):2d}  "
                      f"Bounty:{state.name_of(state.bounty_participant_id)}")
            if state.is_game_finished:
                break
    except KeyboardInterrupt:
        print("\n\n[Match interrupted by user]\n")
    finally:
        if not args.no_dashboard and t:
            dashboard_bridge.write_dashboard_snapshot(state, t, tick_times)
        final_report(state, t)
        print(f"\nFull log saved → {log_path}")
        root = logging.getLogger()
        for handler in handlers:
            root.removeHandler(handler)
            handler.close()
    return scheduler


# ══════════════════════════════════════════════════════════════════════════
if __name__ == '__main__':
    run()
