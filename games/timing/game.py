"""Timing-slider mini-game.

A marker sweeps back and forth across ``[0, 1]``, one full sweep every
``TIMING_SWEEP_MS``, advanced once per animation frame.  The player
stops it once; landing within ``TIMING_WINDOW`` of the target wins.
"""

from __future__ import annotations

import logging
import math
from typing import Any

from src.clock import TimerHandle
from src.trials import GameId, MiniGame
from src.trials.constants import TIMING_SWEEP_MS, TIMING_TARGET_RANGE, TIMING_WINDOW

logger = logging.getLogger(__name__)


def within_window(position: float, target: float, window: float = TIMING_WINDOW) -> bool:
    """Whether ``position`` lands within ``window`` of ``target``.

    The boundary is inclusive; distances that differ from ``window`` only
    by floating-point error count as inside.
    """
    distance = abs(position - target)
    return distance <= window or math.isclose(distance, window, rel_tol=1e-9, abs_tol=1e-12)


class TimingGame(MiniGame):
    """Stop-the-slider precision test."""

    game_id = GameId.TIMING

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        lo, hi = TIMING_TARGET_RANGE
        self.target = lo + float(self._rng.random()) * (hi - lo)
        self.position = 0.0
        self.direction = 1
        self.stopped = False
        self._last_frame: float | None = None
        self._frame: TimerHandle | None = None

    def _on_start(self) -> None:
        self._last_frame = self._timers.now()
        self._frame = self._timers.request_frame(self._tick)

    def _tick(self, timestamp: float) -> None:
        delta = timestamp - self._last_frame
        self._last_frame = timestamp
        position = self.position + (delta / TIMING_SWEEP_MS) * self.direction
        if position >= 1.0:
            position = 1.0
            self.direction = -1
        if position <= 0.0:
            position = 0.0
            self.direction = 1
        self.position = position
        self._frame = self._timers.request_frame(self._tick)

    def stop(self) -> None:
        """Freeze the slider and score it.  Only the first call counts."""
        if self.stopped or not self.accepting_input:
            return
        self.stopped = True
        if self._frame is not None:
            self._frame.cancel()
        if within_window(self.position, self.target):
            self._win("Perfect timing!")
        else:
            self._lose("Missed the sweet spot.")

    def snapshot(self) -> dict[str, Any]:
        state = self._base_snapshot()
        state.update(
            position=self.position,
            target=self.target,
            stopped=self.stopped,
            window=TIMING_WINDOW,
        )
        return state
