"""Base MiniGame abstract class.

Every skill-check mini-game inherits from this ABC.  An instance is one
*attempt*: it is built with a timer source, a random generator and two
continuations (``on_win`` / ``on_lose``), started with :meth:`start`,
and ends by invoking exactly one continuation exactly once.  All timers
it registers live in a private :class:`~src.clock.TimerScope`, which is
closed on the terminal outcome and on :meth:`cancel`.
"""

from __future__ import annotations

import enum
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any, ClassVar

import numpy as np

from src.clock import TimerScope, TimerSource

logger = logging.getLogger(__name__)

Continuation = Callable[[str | None], None]


class GameId(str, enum.Enum):
    """Identifier of every mini-game kind."""

    REACTION = "reaction"
    TYPING = "typing"
    MEMORY = "memory"
    AIM = "aim"
    TIMING = "timing"
    MAZE = "maze"


class Outcome(str, enum.Enum):
    """Terminal result of one attempt."""

    WIN = "win"
    LOSS = "loss"


class MiniGame(ABC):
    """Abstract base class for all mini-games.

    Subclasses implement :meth:`_on_start` (arm timers, draw random
    state) and :meth:`snapshot`, and call :meth:`_win` / :meth:`_lose`
    when the attempt resolves.  Input methods on subclasses must return
    early when :attr:`accepting_input` is False.

    Parameters
    ----------
    timers : TimerSource
        Clock used for every delay, countdown and frame update.
    rng : np.random.Generator
        Source of all randomness for this attempt.
    on_win : callable
        Continuation invoked with the detail text on a win.
    on_lose : callable
        Continuation invoked with the detail text on a loss.
    """

    game_id: ClassVar[GameId]

    def __init__(
        self,
        timers: TimerSource,
        rng: np.random.Generator,
        on_win: Continuation,
        on_lose: Continuation,
    ) -> None:
        self._timers = TimerScope(timers, name=f"{self.game_id.value}-attempt")
        self._rng = rng
        self._on_win = on_win
        self._on_lose = on_lose
        self._started = False
        self._cancelled = False
        self._outcome: Outcome | None = None
        self._details: str | None = None
        self._started_at: float | None = None
        self._finished_at: float | None = None

    # -- Lifecycle -----------------------------------------------------

    def start(self) -> None:
        """Begin the attempt.  Calling it more than once is a no-op."""
        if self._started or self._cancelled:
            return
        self._started = True
        self._started_at = self._timers.now()
        logger.debug("Starting %s attempt", self.game_id.value)
        self._on_start()

    def cancel(self) -> None:
        """Discard the attempt: cancel every timer, silence all inputs."""
        if self._cancelled:
            return
        self._cancelled = True
        self._timers.close()

    @abstractmethod
    def _on_start(self) -> None:
        """Arm timers and initialise per-attempt state."""

    @abstractmethod
    def snapshot(self) -> dict[str, Any]:
        """Return presentation state as a plain dict."""

    # -- State ---------------------------------------------------------

    @property
    def started(self) -> bool:
        return self._started

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def finished(self) -> bool:
        return self._outcome is not None

    @property
    def outcome(self) -> Outcome | None:
        return self._outcome

    @property
    def details(self) -> str | None:
        return self._details

    @property
    def accepting_input(self) -> bool:
        """True while the attempt is running and has not resolved."""
        return self._started and not self._cancelled and self._outcome is None

    @property
    def duration_ms(self) -> float | None:
        """Clock time from start to the terminal outcome, if both happened."""
        if self._started_at is None or self._finished_at is None:
            return None
        return self._finished_at - self._started_at

    # -- Terminal transitions ------------------------------------------

    def _win(self, details: str | None = None) -> None:
        self._finish(Outcome.WIN, details)

    def _lose(self, details: str | None = None) -> None:
        self._finish(Outcome.LOSS, details)

    def _finish(self, outcome: Outcome, details: str | None) -> None:
        if self._outcome is not None or self._cancelled:
            logger.warning(
                "Ignoring %s for %s attempt: already %s",
                outcome.value,
                self.game_id.value,
                "cancelled" if self._cancelled else self._outcome.value,
            )
            return
        self._outcome = outcome
        self._details = details
        self._finished_at = self._timers.now()
        # Nothing from this attempt may fire once the outcome is out.
        self._timers.close()
        logger.info("%s attempt resolved: %s (%s)", self.game_id.value, outcome.value, details)
        if outcome is Outcome.WIN:
            self._on_win(details)
        else:
            self._on_lose(details)

    def _base_snapshot(self) -> dict[str, Any]:
        return {
            "game_id": self.game_id.value,
            "finished": self.finished,
            "outcome": self._outcome.value if self._outcome else None,
            "details": self._details,
        }

    def __repr__(self) -> str:
        if self._cancelled:
            status = "cancelled"
        elif self._outcome is not None:
            status = self._outcome.value
        elif self._started:
            status = "running"
        else:
            status = "new"
        return f"<{type(self).__name__}({status})>"
