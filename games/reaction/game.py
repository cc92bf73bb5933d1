"""Reaction mini-game.

States::

    idle -> waiting -> ready     (click: win/loss on elapsed time)
                    -> too_soon  (click while waiting: loss)

The pad turns ready after a random hold of 1200-3000 ms.  The reaction
time is measured from that moment to the first click.
"""

from __future__ import annotations

import enum
import logging
from typing import Any

from src.trials import GameId, MiniGame
from src.trials.constants import (
    REACTION_DELAY_JITTER_MS,
    REACTION_MIN_DELAY_MS,
    REACTION_TARGET_MS,
)

logger = logging.getLogger(__name__)


class ReactionStatus(str, enum.Enum):
    IDLE = "idle"
    WAITING = "waiting"
    READY = "ready"
    TOO_SOON = "tooSoon"


class ReactionGame(MiniGame):
    """Single-click reaction test.

    A click while the pad is still waiting is an immediate loss; a click
    once it is ready wins when the reaction time is at most
    ``REACTION_TARGET_MS``.
    """

    game_id = GameId.REACTION

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.status = ReactionStatus.IDLE
        self.delay_ms: float | None = None
        self.reaction_ms: float | None = None
        self._ready_at: float | None = None

    def _on_start(self) -> None:
        self.delay_ms = REACTION_MIN_DELAY_MS + float(self._rng.random()) * REACTION_DELAY_JITTER_MS
        self.status = ReactionStatus.WAITING
        self._timers.call_later(self.delay_ms, self._go)
        logger.debug("Reaction pad goes green in %.0fms", self.delay_ms)

    def _go(self) -> None:
        self._ready_at = self._timers.now()
        self.status = ReactionStatus.READY

    def click(self) -> None:
        """Register a click on the pad."""
        if not self.accepting_input:
            return
        if self.status is ReactionStatus.WAITING:
            self.status = ReactionStatus.TOO_SOON
            self._lose("Too soon! Wait for green.")
            return
        if self.status is ReactionStatus.READY:
            self.reaction_ms = self._timers.now() - self._ready_at
            details = f"Reaction time: {round(self.reaction_ms)}ms."
            if self.reaction_ms <= REACTION_TARGET_MS:
                self._win(details)
            else:
                self._lose(details)

    def snapshot(self) -> dict[str, Any]:
        state = self._base_snapshot()
        state.update(
            status=self.status.value,
            reaction_ms=None if self.reaction_ms is None else round(self.reaction_ms),
            target_ms=REACTION_TARGET_MS,
        )
        return state
