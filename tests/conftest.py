"""Shared pytest fixtures for the skill-trials test suite.

Provides a virtual clock, a seeded generator, a fixed-value random
stand-in for pinning down random draws, and a helper that builds a
mini-game attempt wired to mock continuations.
"""

from __future__ import annotations

import sys
from pathlib import Path
from unittest import mock

import numpy as np
import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from src.clock import ManualTimerSource  # noqa: E402


class FixedRandom:
    """Generator stand-in that always draws the same values.

    ``random()`` returns ``value``; ``integers()`` returns ``index``
    (or an array of it when ``size`` is given); ``permutation(n)`` is
    the identity.
    """

    def __init__(self, value: float = 0.5, index: int = 0) -> None:
        self.value = value
        self.index = index

    def random(self, size=None):
        if size is None:
            return self.value
        return np.full(size, self.value)

    def integers(self, low, high=None, size=None):
        if size is None:
            return self.index
        return np.full(size, self.index, dtype=np.int64)

    def permutation(self, n):
        return np.arange(n)


@pytest.fixture
def clock() -> ManualTimerSource:
    """Virtual clock starting at 0 ms with 60 Hz frames."""
    return ManualTimerSource()


@pytest.fixture
def rng() -> np.random.Generator:
    """Seeded generator for reproducible draws."""
    return np.random.default_rng(1234)


@pytest.fixture
def fixed_random() -> FixedRandom:
    """Random stand-in whose draws all sit at the middle of their range."""
    return FixedRandom()


@pytest.fixture
def make_game(clock):
    """Factory: ``make_game(cls, rng, **kwargs) -> (game, on_win, on_lose)``.

    The game is built on the ``clock`` fixture and started.
    """

    def _make(cls, rng, start: bool = True, **kwargs):
        on_win = mock.Mock(name="on_win")
        on_lose = mock.Mock(name="on_lose")
        game = cls(clock, rng, on_win, on_lose, **kwargs)
        if start:
            game.start()
        return game, on_win, on_lose

    return _make


@pytest.fixture
def random_at():
    """The :class:`FixedRandom` class, for tests that need other values."""
    return FixedRandom
