"""
dashboard_bridge.py — Periodic JSON snapshot writer for the Streamlit live dashboard.

Call write_dashboard_snapshot() from sim.py every DASHBOARD_WRITE_EVERY ticks.
Uses an atomic rename-swap so the dashboard process never reads a half-written file.

No Streamlit dependency; this runs inside the match driver process.
"""

import collections
import json
import os
import pathlib

from .engine import DiplomacyStatus

# ── Configuration ─────────────────────────────────────────────────────────
DASHBOARD_WRITE_EVERY: int          = 100                   # one cycle
DASHBOARD_DATA_PATH:   pathlib.Path = pathlib.Path("dashboard_data.json")

_POWER_HISTORY_MAX = 200   # last 200 snapshots → 20 000 ticks at interval=100

# Matrix cell codes, read by charts.build_diplomacy_heatmap
DIPLOMACY_CODE: dict = {
    DiplomacyStatus.WAR:      -1,
    DiplomacyStatus.NEUTRAL:   0,
    DiplomacyStatus.ALLIANCE:  1,
}

# ── Rolling power history (module-level, survives across calls) ───────────
_power_history: collections.deque = collections.deque(maxlen=_POWER_HISTORY_MAX)


def reset_history() -> None:
    """Forget the rolling power history (new match in the same process)."""
    _power_history.clear()


# ──────────────────────────────────────────────────────────────────────────
# Helpers
# ──────────────────────────────────────────────────────────────────────────

def _tick_rate(tick_times: list) -> float:
    """Ticks per second averaged over the last 100 recorded tick durations."""
    if not tick_times:
        return 0.0
    recent = tick_times[-100:]
    total  = sum(recent)
    return round(len(recent) / total, 2) if total > 0 else 0.0


def _team_row(state, team, t: int) -> dict:
    rival = None
    if team.leader is not None and team.leader.target_id is not None:
        rival = state.name_of(team.leader.target_id)
    return {
        'id':          team.id,
        'leader':      team.leader.name if team.leader is not None else None,
        'size':        team.get_member_count(),
        'power':       round(sum(m.power_points for m in team.get_members()), 1),
        'rival':       rival,
        'truce_left':  max(0, team.truce_until_tick - t),
        'members':     [m.name for m in team.get_members()],
    }


def _participant_row(state, p, t: int) -> dict:
    return {
        'id':          p.id,
        'name':        p.name,
        'team_id':     p.team_id,
        'suzerain':    state.name_of(p.suzerain_id) if p.suzerain_id is not None else None,
        'power':       round(p.power_points, 1),
        'defeated':    p.is_defeated,
        'bounty':      p.id == state.bounty_participant_id,
        'truce_left':  max(0, state.participant_truce_until.get(p.id, t) - t),
    }


def diplomacy_matrix(state) -> list:
    """Square list-of-lists of DIPLOMACY_CODE values, indexed by participant id order."""
    everyone = sorted(state.all_participants(), key=lambda p: p.id)
    matrix   = []
    for a in everyone:
        row = []
        for b in everyone:
            row.append(DIPLOMACY_CODE[DiplomacyStatus.ALLIANCE] if a.id == b.id
                       else DIPLOMACY_CODE[state.ledger.get(a, b)])
        matrix.append(row)
    return matrix


# ──────────────────────────────────────────────────────────────────────────
# Main API
# ──────────────────────────────────────────────────────────────────────────

def build_snapshot(state, t: int, tick_times: list = None) -> dict:
    teams = [_team_row(state, team, t) for team in state.all_teams()]
    teams.sort(key=lambda x: (x['size'], x['power']), reverse=True)

    _power_history.append({
        'tick':  t,
        'power': {p.name: round(p.power_points, 1) for p in state.all_participants()},
    })

    return {
        'tick':          t,
        'tick_rate':     _tick_rate(tick_times or []),
        'finished':      state.is_game_finished,
        'winner':        (state.teams[state.winner_team_id].leader.name
                          if state.winner_team_id in state.teams else None),
        'bounty':        (state.name_of(state.bounty_participant_id)
                          if state.bounty_participant_id is not None else None),
        'teams':         teams,
        'participants':  [_participant_row(state, p, t) for p in state.all_participants()],
        'names':         [p.name for p in sorted(state.all_participants(), key=lambda p: p.id)],
        'diplomacy':     diplomacy_matrix(state),
        'power_history': list(_power_history),
        'event_tail':    state.event_log[-40:],     # last 40 events for the live feed
    }


def write_dashboard_snapshot(state, t: int, tick_times: list = None,
                             path: pathlib.Path = None) -> pathlib.Path:
    """Serialise the match state and write it atomically.

    The write goes to a .tmp file first; os.replace() then performs an atomic rename
    so the dashboard reader never sees a partial JSON file.
    """
    target = pathlib.Path(path) if path is not None else DASHBOARD_DATA_PATH
    snap   = build_snapshot(state, t, tick_times)

    tmp = target.with_suffix('.tmp')
    tmp.write_text(json.dumps(snap, separators=(',', ':')), encoding='utf-8')
    os.replace(tmp, target)
    return target
