# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
autoffa — Free-for-all vassalage simulation core.

Hosts implement engine.HostEngine and drive scheduler.AutoFfaScheduler;
sandbox.SandboxEngine is the in-memory host used by the match driver.
"""

from .config import FfaSettings
from .engine import DamageEvent, DiplomacyStatus, HostEngine, Resources, SettlementInfo
from .sandbox import SandboxEngine
from .scheduler import AutoFfaScheduler
from .state import SimulationState

__all__ = [
    'AutoFfaScheduler', 'DamageEvent', 'DiplomacyStatus', 'FfaSettings',
    'HostEngine', 'Resources', 'SandboxEngine', 'SettlementInfo', 'SimulationState',
]
