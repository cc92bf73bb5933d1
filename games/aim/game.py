"""Aim mini-game.

A target jumps to a random spot after every hit.  The player has
``AIM_TIME_LIMIT`` seconds, counted down once per second, to land
``AIM_TARGET_HITS`` hits.
"""

from __future__ import annotations

import logging
from typing import Any

from src.trials import GameId, MiniGame
from src.trials.constants import (
    AIM_TARGET_HITS,
    AIM_TIME_LIMIT,
    AIM_X_RANGE,
    AIM_Y_RANGE,
    COUNTDOWN_TICK_MS,
)

logger = logging.getLogger(__name__)


class AimGame(MiniGame):
    """Hit-count-under-timer test.

    The result is decided exactly once, when the countdown reaches zero.
    Hits have no cooldown.
    """

    game_id = GameId.AIM

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.hits = 0
        self.time_left = AIM_TIME_LIMIT
        self.position: tuple[float, float] = (50.0, 50.0)
        self._countdown = None
        self._move_target()

    def _on_start(self) -> None:
        self._countdown = self._timers.call_every(COUNTDOWN_TICK_MS, self._tick)

    def _tick(self) -> None:
        if self.time_left <= 1:
            self.time_left = 0
            self._countdown.cancel()
            self._evaluate()
        else:
            self.time_left -= 1

    def _evaluate(self) -> None:
        details = f"Hits: {self.hits}."
        if self.hits >= AIM_TARGET_HITS:
            self._win(details)
        else:
            self._lose(details)

    def _move_target(self) -> None:
        x_lo, x_hi = AIM_X_RANGE
        y_lo, y_hi = AIM_Y_RANGE
        self.position = (
            x_lo + float(self._rng.random()) * (x_hi - x_lo),
            y_lo + float(self._rng.random()) * (y_hi - y_lo),
        )

    def hit(self) -> None:
        """Register a hit on the target."""
        if not self.accepting_input:
            return
        self.hits += 1
        self._move_target()

    def snapshot(self) -> dict[str, Any]:
        state = self._base_snapshot()
        state.update(
            hits=self.hits,
            time_left=self.time_left,
            position=self.position,
            target_hits=AIM_TARGET_HITS,
        )
        return state
