"""Maze mini-game.

The player walks a freshly carved maze from ``(1, 1)`` to
``(size-2, size-2)`` with arrow keys or WASD while a 1 Hz countdown
runs.  Reaching the exit resolves on elapsed time against
``MAZE_TARGET_TIME``; running out of time is a loss.
"""

from __future__ import annotations

import logging
from typing import Any

from src.clock import TimerHandle
from src.trials import GameId, MiniGame
from src.trials.constants import (
    COUNTDOWN_TICK_MS,
    MAZE_SIZE,
    MAZE_TARGET_TIME,
    MAZE_TIME_LIMIT,
)

from .grid import Cell, generate_maze, is_open

logger = logging.getLogger(__name__)

KEY_DIRECTIONS: dict[str, Cell] = {
    "arrowup": (-1, 0),
    "w": (-1, 0),
    "arrowdown": (1, 0),
    "s": (1, 0),
    "arrowleft": (0, -1),
    "a": (0, -1),
    "arrowright": (0, 1),
    "d": (0, 1),
}


class MazeGame(MiniGame):
    """Maze escape against the clock.

    Parameters
    ----------
    size : int
        Grid side length (odd).  Default is ``MAZE_SIZE``.
    time_limit : int
        Countdown start in seconds.  Default is ``MAZE_TIME_LIMIT``.
    target_time : int
        Maximum elapsed seconds for a win.  Default is
        ``MAZE_TARGET_TIME``.
    """

    game_id = GameId.MAZE

    def __init__(
        self,
        *args: Any,
        size: int = MAZE_SIZE,
        time_limit: int = MAZE_TIME_LIMIT,
        target_time: int = MAZE_TARGET_TIME,
        **kwargs: Any,
    ) -> None:
        super().__init__(*args, **kwargs)
        self.size = size
        self.time_limit = time_limit
        self.target_time = target_time
        self.grid = generate_maze(size, self._rng)
        self.player: Cell = (1, 1)
        self.exit: Cell = (size - 2, size - 2)
        self.moves = 0
        self.time_left = time_limit
        self._countdown: TimerHandle | None = None

    def _on_start(self) -> None:
        self._countdown = self._timers.call_every(COUNTDOWN_TICK_MS, self._tick)

    def _tick(self) -> None:
        if self.time_left <= 1:
            self.time_left = 0
            self._countdown.cancel()
        else:
            self.time_left -= 1
        self._update()

    def press_key(self, key: str) -> bool:
        """Handle a key press.  Returns True if the key maps to a direction."""
        delta = KEY_DIRECTIONS.get(key.lower())
        if delta is None:
            return False
        self.move(*delta)
        return True

    def move(self, d_row: int, d_col: int) -> bool:
        """Try a one-cell move.  Returns True if the player moved."""
        if not self.accepting_input:
            return False
        target = (self.player[0] + d_row, self.player[1] + d_col)
        if not is_open(self.grid, target):
            return False
        self.player = target
        self.moves += 1
        self._update()
        return True

    def _update(self) -> None:
        # Exit first: reaching it on the tick the clock expires still wins.
        if self.player == self.exit:
            elapsed = self.time_limit - self.time_left
            summary = f"Maze cleared in {self.moves} moves and {elapsed}s."
            if elapsed <= self.target_time:
                self._win(f"{summary} Beat the target time!")
            else:
                self._lose(f"{summary} Too slow (need ≤ {self.target_time}s).")
            return
        if self.time_left == 0:
            self._lose("Time ran out.")

    def snapshot(self) -> dict[str, Any]:
        state = self._base_snapshot()
        state.update(
            size=self.size,
            grid=self.grid.tolist(),
            player=self.player,
            exit=self.exit,
            moves=self.moves,
            time_left=self.time_left,
            target_time=self.target_time,
        )
        return state
