"""
Shared fixtures: a hand-driven clock, seeded randomness and small sessions.
"""

import random

import pytest

from snake_arcade.config import GameConfig
from snake_arcade.model import Board, Food
from snake_arcade.session import GameSession
from snake_arcade.storage import MemoryScoreStore


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start: float = 1_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> float:
        self.now += ms
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def board():
    return Board(10, 10)


@pytest.fixture
def food(board, rng, clock):
    return Food(board, rng=rng, clock=clock)


@pytest.fixture
def store():
    return MemoryScoreStore()


@pytest.fixture
def make_session(clock, store):
    """Factory for sessions that never upgrade food unless asked to."""

    def _make(columns=10, rows=10, seed=7, **overrides):
        overrides.setdefault("special_base_chance", 0.0)
        overrides.setdefault("special_max_chance", 0.0)
        config = GameConfig(columns=columns, rows=rows, **overrides)
        return GameSession(config, store=store, rng=random.Random(seed), clock=clock)

    return _make
