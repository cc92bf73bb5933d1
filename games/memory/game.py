"""Memory mini-game.

A five-tile sequence on a 3x3 board is played back once, then the
player repeats it.  Input is locked during playback; the first wrong
tile ends the attempt.
"""

from __future__ import annotations

import logging
from typing import Any

from src.trials import GameId, MiniGame
from src.trials.constants import (
    MEMORY_FIRST_REVEAL_MS,
    MEMORY_REVEAL_DURATION_MS,
    MEMORY_REVEAL_STAGGER_MS,
    MEMORY_SEQUENCE_LENGTH,
    MEMORY_TILE_COUNT,
)

logger = logging.getLogger(__name__)


class MemoryGame(MiniGame):
    """Sequence-recall test.

    Playback timeline: reveal ``i`` starts at
    ``MEMORY_FIRST_REVEAL_MS + i * MEMORY_REVEAL_STAGGER_MS`` and lasts
    ``MEMORY_REVEAL_DURATION_MS``.  ``ready`` flips to True when the last
    reveal ends.
    """

    game_id = GameId.MEMORY

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.sequence: list[int] = [
            int(tile) for tile in self._rng.integers(0, MEMORY_TILE_COUNT, size=MEMORY_SEQUENCE_LENGTH)
        ]
        self.step = 0
        self.active_tile: int | None = None
        self.ready = False

    def _on_start(self) -> None:
        delay = MEMORY_FIRST_REVEAL_MS
        for index, tile in enumerate(self.sequence):
            self._timers.call_later(delay, lambda i=index, t=tile: self._reveal(i, t))
            delay += MEMORY_REVEAL_STAGGER_MS

    @property
    def playback_ms(self) -> int:
        """Time from start until input unlocks."""
        return (
            MEMORY_FIRST_REVEAL_MS
            + (len(self.sequence) - 1) * MEMORY_REVEAL_STAGGER_MS
            + MEMORY_REVEAL_DURATION_MS
        )

    def _reveal(self, index: int, tile: int) -> None:
        self.active_tile = tile
        self._timers.call_later(MEMORY_REVEAL_DURATION_MS, lambda: self._hide(index))

    def _hide(self, index: int) -> None:
        self.active_tile = None
        if index == len(self.sequence) - 1:
            self.ready = True
            logger.debug("Memory playback finished, input unlocked")

    def pick(self, tile: int) -> None:
        """Press ``tile`` (0-8)."""
        if not self.accepting_input or not self.ready:
            return
        if tile != self.sequence[self.step]:
            self._lose("Pattern break. Try again!")
            return
        if self.step + 1 == len(self.sequence):
            self._win("Memory streak complete.")
        else:
            self.step += 1

    def snapshot(self) -> dict[str, Any]:
        state = self._base_snapshot()
        state.update(
            active_tile=self.active_tile,
            ready=self.ready,
            step=self.step,
            length=len(self.sequence),
        )
        return state
