"""Trial session -- run ordering, retries, scoring and screen transitions.

A :class:`TrialSession` owns everything shared across mini-games: the
shuffled order, the current index, the committed results, the single
pending result and the live attempt.  Mini-games never touch this state;
they only call the two continuations the session hands them.

Screen flow::

    home --start_run--> game --outcome--> result --lock_in--> game | final
                         ^                  |
                         +----retry---------+
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any

import numpy as np

from games import GameDefinition, get_game_definition
from src.clock import TimerSource
from src.reporting import RunReportBuilder
from src.trials import GameId, MiniGame, Outcome
from src.trials.constants import (
    FINAL_MESSAGE_LOCKED,
    FINAL_MESSAGE_UNLOCKED,
    FINAL_WIN_THRESHOLD,
)

logger = logging.getLogger(__name__)

RUN_ROSTER: tuple[GameId, ...] = (
    GameId.REACTION,
    GameId.TYPING,
    GameId.MEMORY,
    GameId.AIM,
    GameId.TIMING,
)


class Screen(str, enum.Enum):
    HOME = "home"
    GAME = "game"
    RESULT = "result"
    FINAL = "final"


@dataclass(frozen=True)
class PendingResult:
    """Outcome of the latest attempt, awaiting lock-in or retry."""

    game_id: GameId
    outcome: Outcome
    details: str | None = None


def shuffle_order(items: tuple[GameId, ...], rng: np.random.Generator) -> list[GameId]:
    """Fisher-Yates shuffle of ``items`` driven by ``rng``."""
    order = list(items)
    for i in range(len(order) - 1, 0, -1):
        j = int(rng.integers(0, i + 1))
        order[i], order[j] = order[j], order[i]
    return order


class TrialSession:
    """Orchestrates one player's runs through the skill trials.

    Parameters
    ----------
    timers : TimerSource
        Clock shared by every attempt.
    rng : np.random.Generator or None
        Random source for the shuffle and every attempt.  If None, one is
        created from ``seed``.
    seed : int or None
        Seed used when ``rng`` is None.  Recorded in run reports.
    roster : tuple[GameId, ...]
        Games played in each run.  Default is the five run games.
    win_threshold : int
        Wins needed to unlock the final message.
    """

    def __init__(
        self,
        timers: TimerSource,
        rng: np.random.Generator | None = None,
        seed: int | None = None,
        roster: tuple[GameId, ...] = RUN_ROSTER,
        win_threshold: int = FINAL_WIN_THRESHOLD,
    ) -> None:
        roster = tuple(GameId(g) for g in roster)
        if not roster:
            raise ValueError("roster must contain at least one game")
        if len(set(roster)) != len(roster):
            raise ValueError(f"roster must not repeat games, got {[g.value for g in roster]}")
        self.timers = timers
        self.seed = seed
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.roster = roster
        self.win_threshold = win_threshold
        self._definitions: dict[GameId, GameDefinition] = {
            gid: get_game_definition(gid) for gid in self.roster
        }

        self._screen = Screen.HOME
        self._order: list[GameId] = []
        self._index = 0
        self._results: dict[GameId, Outcome | None] = self._empty_results()
        self._pending: PendingResult | None = None
        self._game: MiniGame | None = None
        self._attempt_serial = 0
        self._report: RunReportBuilder | None = None

    # -- Entry points --------------------------------------------------

    def start_run(self) -> None:
        """Reset everything, shuffle a new order and start its first game."""
        self._discard_game()
        self._order = shuffle_order(self.roster, self.rng)
        self._results = self._empty_results()
        self._pending = None
        self._index = 0
        self._report = RunReportBuilder(
            [gid.value for gid in self._order],
            seed=self.seed,
            win_threshold=self.win_threshold,
        )
        logger.info("Run started: order=%s", [gid.value for gid in self._order])
        self._launch_current()

    def retry_current(self) -> bool:
        """Throw away the pending result (or running attempt) and replay.

        Returns
        -------
        bool
            False if there is no current game to retry.
        """
        if self._screen not in (Screen.GAME, Screen.RESULT):
            logger.debug("retry_current ignored on %s screen", self._screen.value)
            return False
        self._pending = None
        logger.info("Retrying %s", self.current_game_id.value)
        self._launch_current()
        return True

    def lock_in_pending(self) -> bool:
        """Commit the pending outcome and move to the next game or finish.

        Returns
        -------
        bool
            False if there was nothing pending.
        """
        pending = self._pending
        if pending is None:
            logger.debug("lock_in_pending ignored: nothing pending")
            return False
        self._results[pending.game_id] = pending.outcome
        self._pending = None
        if self._report is not None:
            self._report.lock_in(pending.game_id.value, pending.outcome.value)
        self._discard_game()
        logger.info(
            "Locked in %s for %s (wins=%d, losses=%d)",
            pending.outcome.value,
            pending.game_id.value,
            self.wins,
            self.losses,
        )

        if self._index + 1 >= len(self._order):
            self._screen = Screen.FINAL
            logger.info(
                "Run finished: %d/%d wins, %s",
                self.wins,
                len(self._order),
                "unlocked" if self.passed else "locked",
            )
        else:
            self._index += 1
            self._launch_current()
        return True

    def reset_to_home(self) -> None:
        """Abandon the run and return to the home screen."""
        self._discard_game()
        self._order = []
        self._index = 0
        self._results = self._empty_results()
        self._pending = None
        self._report = None
        self._screen = Screen.HOME
        logger.info("Returned home")

    # -- Outputs -------------------------------------------------------

    @property
    def screen(self) -> Screen:
        return self._screen

    @property
    def order(self) -> list[GameId]:
        return list(self._order)

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def current_game_id(self) -> GameId | None:
        if not self._order:
            return None
        return self._order[self._index]

    @property
    def current_definition(self) -> GameDefinition | None:
        gid = self.current_game_id
        return self._definitions[gid] if gid is not None else None

    @property
    def current_game(self) -> MiniGame | None:
        """Latest attempt: running on the game screen, resolved on the result screen."""
        return self._game

    @property
    def results(self) -> dict[GameId, Outcome | None]:
        return dict(self._results)

    @property
    def pending(self) -> PendingResult | None:
        return self._pending

    @property
    def wins(self) -> int:
        return sum(1 for value in self._results.values() if value is Outcome.WIN)

    @property
    def losses(self) -> int:
        return sum(1 for value in self._results.values() if value is Outcome.LOSS)

    @property
    def passed(self) -> bool:
        return self.wins >= self.win_threshold

    @property
    def final_message(self) -> str | None:
        if self._screen is not Screen.FINAL:
            return None
        return FINAL_MESSAGE_UNLOCKED if self.passed else FINAL_MESSAGE_LOCKED

    @property
    def round_label(self) -> str:
        """``"Round: n/N"`` counter shown in the score bar."""
        shown = self._index + 1 if self._order else 0
        return f"{shown}/{len(self.roster)}"

    @property
    def report(self) -> RunReportBuilder | None:
        """Report builder of the current run, None before the first run."""
        return self._report

    def snapshot(self) -> dict[str, Any]:
        """Everything a presentation shell needs to draw the current screen."""
        definition = self.current_definition
        pending = self._pending
        return {
            "screen": self._screen.value,
            "round": self.round_label,
            "order": [gid.value for gid in self._order],
            "current_game": None
            if definition is None
            else {"id": definition.id.value, "name": definition.name, "tagline": definition.tagline},
            "game_state": self._game.snapshot() if self._game is not None else None,
            "results": {gid.value: (o.value if o else None) for gid, o in self._results.items()},
            "wins": self.wins,
            "losses": self.losses,
            "pending": None
            if pending is None
            else {
                "game_id": pending.game_id.value,
                "outcome": pending.outcome.value,
                "details": pending.details,
            },
            "passed": self.passed if self._screen is Screen.FINAL else None,
            "final_message": self.final_message,
        }

    # -- Internals -----------------------------------------------------

    def _empty_results(self) -> dict[GameId, Outcome | None]:
        return {gid: None for gid in self.roster}

    def _launch_current(self) -> None:
        # The old attempt's timers must be gone before the new one exists.
        self._discard_game()
        gid = self.current_game_id
        self._attempt_serial += 1
        serial = self._attempt_serial
        self._game = self._definitions[gid].create(
            self.timers,
            self.rng,
            on_win=lambda details: self._on_outcome(serial, Outcome.WIN, details),
            on_lose=lambda details: self._on_outcome(serial, Outcome.LOSS, details),
        )
        self._screen = Screen.GAME
        logger.debug("Launching %s (attempt serial %d)", gid.value, serial)
        self._game.start()

    def _discard_game(self) -> None:
        if self._game is not None:
            self._game.cancel()
            self._game = None

    def _on_outcome(self, serial: int, outcome: Outcome, details: str | None) -> None:
        if serial != self._attempt_serial or self._screen is not Screen.GAME:
            logger.warning("Ignoring stale %s from superseded attempt %d", outcome.value, serial)
            return
        game = self._game
        gid = self.current_game_id
        self._pending = PendingResult(gid, outcome, details)
        if self._report is not None:
            self._report.add_attempt(
                gid.value,
                outcome.value,
                details,
                duration_ms=game.duration_ms if game is not None else None,
            )
        self._screen = Screen.RESULT
