"""
conftest.py — shared fixtures for the autoffa test suite.

Every fixture builds on SandboxEngine; no host game is needed.
"""

import pytest

from autoffa.config import FfaSettings
from autoffa.sandbox import SandboxEngine
from autoffa.state import SimulationState

NAMES = ['Alpha', 'Bravo', 'Charlie', 'Delta', 'Echo', 'Foxtrot', 'Golf', 'Hotel']


def build_engine(names=None, seed=7, size=64) -> SandboxEngine:
    engine = SandboxEngine(size, size, seed=seed)
    for i, name in enumerate(names or NAMES[:4]):
        engine.add_settlement(f's{i}', name, (8 + 6 * i, 8 + 6 * i))
    return engine


def build_state(n=4, settings=None, names=None, seed=7) -> SimulationState:
    """A set-up match where every participant leads its own team, all at war."""
    engine = build_engine(names or NAMES[:n], seed=seed)
    state  = SimulationState(engine, settings or FfaSettings())
    state.setup_participants_and_teams()
    state.ledger.declare_war_among_all(state.all_participants())
    return state


def join(state, leader, vassal) -> None:
    """Move a solo *vassal* under *leader*'s team, dissolving its own team."""
    old = state.team_of(vassal)
    old.remove_leader()
    del state.teams[old.id]
    state.team_of(leader).add_subordinate(vassal)


@pytest.fixture
def make_state():
    return build_state


@pytest.fixture
def make_engine():
    return build_engine


@pytest.fixture
def join_team():
    return join


@pytest.fixture
def state():
    return build_state()


@pytest.fixture
def players(state):
    """The four participants of the default state, in id order."""
    return [state.participants[i] for i in range(4)]
