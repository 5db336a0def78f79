"""
Shared pytest fixtures for the decision engine tests.
"""
import random

import pytest
from pygame.math import Vector2

from entities import CombatSnapshot, FighterStatus, FighterView
from systems import FrameAdvantageTracker, StateQuery
from tactics import DefensiveTactics, OffensiveTactics, PolicyState, SpacingTactics
from tactics.context import TacticalContext


def _make_fighter(fighter_id="bot", x=700.0, y=500.0, **overrides):
    facing = overrides.pop("facing", -1 if fighter_id == "bot" else 1)
    velocity = overrides.pop("velocity", (0, 0))
    return FighterView(
        id=fighter_id,
        position=Vector2(x, y),
        velocity=Vector2(velocity),
        facing=facing,
        **overrides,
    )


def _make_snapshot(*fighters, frame=100):
    if not fighters:
        fighters = (_make_fighter("bot", 700), _make_fighter("player", 300))
    return CombatSnapshot(frame=frame, fighters=fighters)


@pytest.fixture
def make_fighter():
    """Factory: make_fighter(id, x, **FighterView fields)."""
    return _make_fighter


@pytest.fixture
def make_snapshot():
    """Factory: make_snapshot(*fighters, frame=100)."""
    return _make_snapshot


@pytest.fixture
def attacking():
    """FighterView overrides for an opponent with an active high attack."""
    return {"status": FighterStatus.ATTACK, "current_move": "hp", "active_hitboxes": 1}


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def query():
    return StateQuery()


@pytest.fixture
def frames(query):
    return FrameAdvantageTracker(query)


@pytest.fixture
def defensive(query, frames, rng):
    return DefensiveTactics(query, frames, rng)


@pytest.fixture
def offensive(query, frames, rng):
    return OffensiveTactics(query, frames, rng)


@pytest.fixture
def spacing(query, frames, rng):
    return SpacingTactics(query, frames, rng)


@pytest.fixture
def make_context(query):
    """Factory: make_context(actor, opponent, frame=100, advantage=0, memory=None)."""
    def build(actor, opponent, frame=100, advantage=0, memory=None):
        snapshot = _make_snapshot(actor, opponent, frame=frame)
        distance = query.distance(actor, opponent)
        return TacticalContext(
            snapshot=snapshot,
            actor=actor,
            opponent=opponent,
            distance=distance,
            range=query.range_for(distance),
            advantage=advantage,
            memory=memory if memory is not None else PolicyState(),
        )
    return build
