# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
config.py — Tuning constants for the Auto FFA simulation core.

The module-level constants are the defaults; FfaSettings bundles them into an
immutable value object that is handed to every component at construction.
The run driver maps CLI flags onto FfaSettings.with_overrides().
"""

from dataclasses import dataclass, replace

# ── Timing ───────────────────────────────────────────────────────────────
TICKS_PER_SECOND   = 50
CYCLE_PERIOD       = 100        # ticks per scheduling cycle
WARMUP_TICKS       = 50 * 100   # no phase runs before the rules are announced

# ── Starting state ───────────────────────────────────────────────────────
INITIAL_POWER_POINTS = 100.0

# ── Vassal economy ───────────────────────────────────────────────────────
VASSAL_RESOURCE_LIMIT      = 1000   # per-resource amount a vassal may keep
VASSAL_POPULATION_LIMIT    = 10     # free people a vassal may keep
TRIBUTE_RESOURCE_COEFF     = 0.1    # extra resource limit per power point
TRIBUTE_POPULATION_COEFF   = 0.002  # extra population limit per power point
SUZERAIN_GENEROSITY_THRESHOLD = 5000

ENABLE_POWER_POINTS_EXCHANGE = True
POWER_POINTS_EXCHANGE_RATE   = 0.01  # power points per resource unit moved

# ── Rewards ──────────────────────────────────────────────────────────────
POWER_POINTS_REWARD_PERCENTAGE = 0.1
REWARD_MIN_POWER               = 10.0
POPULATION_WEIGHT              = 50   # one free person is worth this much

# ── Hierarchy ────────────────────────────────────────────────────────────
PROMOTION_MARGIN        = 10.0
LEADER_SPOILS_FRACTION  = 0.20
VASSAL_SPOILS_FRACTION  = 0.10
WEAKEN_SNOWBALL_EFFECT  = True     # leader falls alone, vassals go free
TRUCE_SCOPE             = 'participant'   # 'participant' | 'team'
TEMPORARY_PEACE_DURATION_TICKS = TICKS_PER_SECOND * 60 * 3

# ── Combat accrual ───────────────────────────────────────────────────────
POWER_POINT_PER_HP_COEFF        = 0.01
POWER_POINT_COEFF_BY_MAX_DISTANCE = 2.0
RESPAWN_SEARCH_RADIUS           = 32

# ── Optional mechanics ───────────────────────────────────────────────────
ENABLE_INITIAL_PEACE_PERIOD  = True
INITIAL_PEACE_DURATION_TICKS = TICKS_PER_SECOND * 60 * 5

ENABLE_TARGET_SYSTEM          = True
TARGET_POWER_POINTS_MULTIPLIER = 1.5

ENABLE_BOUNTY_ON_LEADER        = True
BOUNTY_POWER_POINTS_MULTIPLIER = 2.0
BOUNTY_CHECK_INTERVAL_TICKS    = TICKS_PER_SECOND * 60 * 2

ENABLE_COALITIONS_AGAINST_LEADER = True

ENABLE_BATTLE_SUMMARY_MESSAGES = True
BATTLE_SUMMARY_TIMEOUT_TICKS   = TICKS_PER_SECOND * 10

IS_CHALLENGE_SYSTEM_ENABLED = False
CHALLENGER_KEYWORDS         = ('князъ', 'повелитель')


# ══════════════════════════════════════════════════════════════════════════
# Phase offsets inside one scheduling cycle
# ══════════════════════════════════════════════════════════════════════════

TICK_OFFSET = {
    'tributes':         11,
    'generosity':       22,
    'migrations':       33,
    'peace_treaties':   44,
    'promotions':       66,
    'rewards':          77,
    'defeats':          88,
    'bounty':           95,
    'targets':          96,
    'coalitions':       97,
    'battle_summaries': 98,
    'game_end':         99,
}


@dataclass(frozen=True)
class FfaSettings:
    """Immutable tuning for one match."""

    cycle_period:        int   = CYCLE_PERIOD
    warmup_ticks:        int   = WARMUP_TICKS
    initial_power_points: float = INITIAL_POWER_POINTS

    vassal_resource_limit:         int   = VASSAL_RESOURCE_LIMIT
    vassal_population_limit:       int   = VASSAL_POPULATION_LIMIT
    tribute_resource_coeff:        float = TRIBUTE_RESOURCE_COEFF
    tribute_population_coeff:      float = TRIBUTE_POPULATION_COEFF
    suzerain_generosity_threshold: int   = SUZERAIN_GENEROSITY_THRESHOLD
    enable_power_points_exchange:  bool  = ENABLE_POWER_POINTS_EXCHANGE
    power_points_exchange_rate:    float = POWER_POINTS_EXCHANGE_RATE

    power_points_reward_percentage: float = POWER_POINTS_REWARD_PERCENTAGE
    reward_min_power:               float = REWARD_MIN_POWER
    population_weight:              int   = POPULATION_WEIGHT

    promotion_margin:       float = PROMOTION_MARGIN
    leader_spoils_fraction: float = LEADER_SPOILS_FRACTION
    vassal_spoils_fraction: float = VASSAL_SPOILS_FRACTION
    weaken_snowball_effect: bool  = WEAKEN_SNOWBALL_EFFECT
    truce_scope:            str   = TRUCE_SCOPE
    temporary_peace_duration_ticks: int = TEMPORARY_PEACE_DURATION_TICKS

    power_point_per_hp_coeff:          float = POWER_POINT_PER_HP_COEFF
    power_point_coeff_by_max_distance: float = POWER_POINT_COEFF_BY_MAX_DISTANCE
    respawn_search_radius:             int   = RESPAWN_SEARCH_RADIUS

    enable_initial_peace_period:  bool = ENABLE_INITIAL_PEACE_PERIOD
    initial_peace_duration_ticks: int  = INITIAL_PEACE_DURATION_TICKS

    enable_target_system:           bool  = ENABLE_TARGET_SYSTEM
    target_power_points_multiplier: float = TARGET_POWER_POINTS_MULTIPLIER

    enable_bounty_on_leader:        bool  = ENABLE_BOUNTY_ON_LEADER
    bounty_power_points_multiplier: float = BOUNTY_POWER_POINTS_MULTIPLIER
    bounty_check_interval_ticks:    int   = BOUNTY_CHECK_INTERVAL_TICKS

    enable_coalitions_against_leader: bool = ENABLE_COALITIONS_AGAINST_LEADER

    enable_battle_summary_messages: bool = ENABLE_BATTLE_SUMMARY_MESSAGES
    battle_summary_timeout_ticks:   int  = BATTLE_SUMMARY_TIMEOUT_TICKS

    is_challenge_system_enabled: bool  = IS_CHALLENGE_SYSTEM_ENABLED
    challenger_keywords:         tuple = CHALLENGER_KEYWORDS

    # (phase, offset) pairs; a dict is accepted and frozen on construction
    tick_offsets: tuple = tuple(TICK_OFFSET.items())

    def __post_init__(self) -> None:
        if self.truce_scope not in ('participant', 'team'):
            raise ValueError(f"truce_scope must be 'participant' or 'team', "
                             f"got {self.truce_scope!r}")
        object.__setattr__(self, 'tick_offsets', tuple(dict(self.tick_offsets).items()))
        offsets = [offset for _, offset in self.tick_offsets]
        if len(set(offsets)) != len(offsets):
            raise ValueError("phase offsets must be unique within a cycle")
        if any(not 0 <= o < self.cycle_period for o in offsets):
            raise ValueError("phase offsets must lie inside the cycle period")

    def with_overrides(self, **overrides) -> 'FfaSettings':
        """Return a copy with the given fields replaced."""
        return replace(self, **overrides)

    def phase_offsets(self) -> dict:
        """Phase name → offset, as a fresh dict."""
        return dict(self.tick_offsets)
