"""Typing mini-game.

The player types one phrase drawn from ``PHRASES``.  The clock starts on
the first keystroke and the attempt resolves the moment the input equals
the phrase exactly; speed is scored in words per minute with the usual
five-characters-per-word convention.
"""

from __future__ import annotations

import logging
from typing import Any

from src.trials import GameId, MiniGame
from src.trials.constants import (
    CHARS_PER_WORD,
    PHRASES,
    TYPING_MIN_ELAPSED_S,
    TYPING_TARGET_WPM,
)

logger = logging.getLogger(__name__)


def words_per_minute(char_count: int, elapsed_ms: float) -> float:
    """Typing speed rounded to one decimal.

    Parameters
    ----------
    char_count : int
        Length of the typed phrase, spaces included.
    elapsed_ms : float
        Time from first keystroke to completion.

    Returns
    -------
    float
        ``(char_count / 5) / minutes``, with elapsed time floored at
        ``TYPING_MIN_ELAPSED_S``.
    """
    elapsed_minutes = max(TYPING_MIN_ELAPSED_S, elapsed_ms / 1000.0) / 60.0
    return round((char_count / CHARS_PER_WORD) / elapsed_minutes, 1)


class TypingGame(MiniGame):
    """Type-the-phrase speed test."""

    game_id = GameId.TYPING

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.phrase: str = PHRASES[int(self._rng.integers(len(PHRASES)))]
        self.value = ""
        self.wpm: float | None = None
        self._typing_started_at: float | None = None

    def _on_start(self) -> None:
        # Nothing is timed until the first keystroke.
        pass

    @property
    def progress(self) -> int:
        """Percent of the phrase length typed so far, capped at 100."""
        return min(100, round(len(self.value) / len(self.phrase) * 100))

    def type_text(self, value: str) -> None:
        """Replace the input with ``value`` (one input-change event)."""
        if not self.accepting_input:
            return
        if self._typing_started_at is None and value:
            self._typing_started_at = self._timers.now()
        self.value = value
        if value != self.phrase:
            return

        elapsed = self._timers.now() - self._typing_started_at
        self.wpm = words_per_minute(len(self.phrase), elapsed)
        details = f"Speed: {self.wpm} WPM."
        if self.wpm >= TYPING_TARGET_WPM:
            self._win(details)
        else:
            self._lose(details)

    def snapshot(self) -> dict[str, Any]:
        state = self._base_snapshot()
        state.update(
            phrase=self.phrase,
            value=self.value,
            progress=self.progress,
            wpm=self.wpm,
            target_wpm=TYPING_TARGET_WPM,
        )
        return state
