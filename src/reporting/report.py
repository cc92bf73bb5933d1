"""Run report generation -- structured JSON records of trial runs.

Every finished attempt produces an ``AttemptReport``; the
``RunReportBuilder`` collects them for one run, marks which ones were
locked in, and computes a run-level summary.

JSON schema::

    {
        "run_id": "uuid",
        "timestamp": "ISO-8601",
        "seed": 1234,
        "order": ["memory", "aim", "reaction", "timing", "typing"],
        "attempts": [
            {
                "game_id": "memory",
                "attempt": 1,
                "outcome": "loss",
                "details": "Pattern break. Try again!",
                "duration_ms": 3120.0,
                "locked_in": false
            }
        ],
        "results": {"memory": "win", "aim": null, ...},
        "summary": {
            "wins": 3,
            "losses": 2,
            "committed": 5,
            "total_attempts": 7,
            "retries": 2,
            "passed": true,
            "attempts_per_game": {"memory": 2, ...}
        }
    }
"""

from __future__ import annotations

import json
import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import numpy as np

from src.trials.constants import FINAL_WIN_THRESHOLD


def _json_default(obj: Any) -> Any:
    """Handle numpy types during JSON serialisation."""
    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, np.floating):
        return float(obj)
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


@dataclass
class AttemptReport:
    """Serialisable record of one finished attempt.

    Attributes
    ----------
    game_id : str
        Mini-game identifier.
    attempt : int
        1-based attempt number for this game within the run.
    outcome : str
        ``"win"`` or ``"loss"``.
    details : str | None
        Detail text reported by the mini-game.
    duration_ms : float | None
        Clock time from attempt start to outcome.
    locked_in : bool
        Whether this attempt's outcome was committed.
    """

    game_id: str
    attempt: int
    outcome: str
    details: str | None = None
    duration_ms: float | None = None
    locked_in: bool = False


@dataclass
class RunReport:
    """Aggregated record of one run.

    Attributes
    ----------
    run_id : str
        UUID for this run.
    timestamp : str
        ISO-8601 timestamp of run start.
    seed : int | None
        Seed of the random generator, when known.
    order : list[str]
        Shuffled game order.
    attempts : list[AttemptReport]
        Every finished attempt, in play order.
    results : dict[str, str | None]
        Committed outcome per game.
    summary : dict[str, Any]
        Aggregated summary statistics.
    """

    run_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    seed: int | None = None
    order: list[str] = field(default_factory=list)
    attempts: list[AttemptReport] = field(default_factory=list)
    results: dict[str, str | None] = field(default_factory=dict)
    summary: dict[str, Any] = field(default_factory=dict)


class RunReportBuilder:
    """Builds and persists the report of a single run.

    Parameters
    ----------
    order : list[str]
        Shuffled game order of the run.
    seed : int or None
        Seed of the run's random generator, if any.
    win_threshold : int
        Wins needed for the run to pass.
    """

    def __init__(
        self,
        order: list[str],
        seed: int | None = None,
        win_threshold: int = FINAL_WIN_THRESHOLD,
    ) -> None:
        self.win_threshold = win_threshold
        self._report = RunReport(
            seed=seed,
            order=list(order),
            results={game_id: None for game_id in order},
        )
        self._attempt_counts: dict[str, int] = {}

    @property
    def report(self) -> RunReport:
        """Return the report being built (read-only access)."""
        return self._report

    def add_attempt(
        self,
        game_id: str,
        outcome: str,
        details: str | None = None,
        duration_ms: float | None = None,
    ) -> AttemptReport:
        """Record a finished attempt and return its entry."""
        count = self._attempt_counts.get(game_id, 0) + 1
        self._attempt_counts[game_id] = count
        entry = AttemptReport(
            game_id=game_id,
            attempt=count,
            outcome=outcome,
            details=details,
            duration_ms=duration_ms,
        )
        self._report.attempts.append(entry)
        return entry

    def lock_in(self, game_id: str, outcome: str) -> None:
        """Commit ``outcome`` for ``game_id`` and flag its latest attempt."""
        self._report.results[game_id] = outcome
        for entry in reversed(self._report.attempts):
            if entry.game_id == game_id:
                entry.locked_in = True
                break

    def compute_summary(self) -> dict[str, Any]:
        """Compute summary statistics for the run.

        Returns
        -------
        dict[str, Any]
            Summary dict with keys: ``wins``, ``losses``, ``committed``,
            ``total_attempts``, ``retries``, ``passed`` and
            ``attempts_per_game``.
        """
        results = self._report.results
        wins = sum(1 for value in results.values() if value == "win")
        losses = sum(1 for value in results.values() if value == "loss")
        total = len(self._report.attempts)
        return {
            "wins": wins,
            "losses": losses,
            "committed": wins + losses,
            "total_attempts": total,
            "retries": total - sum(1 for a in self._report.attempts if a.attempt == 1),
            "passed": wins >= self.win_threshold,
            "attempts_per_game": dict(self._attempt_counts),
        }

    def save(self, output_dir: str | Path, filename: str | None = None) -> Path:
        """Serialise the run report to a JSON file.

        Creates the output directory if it does not exist.  The summary
        is computed automatically before writing.

        Parameters
        ----------
        output_dir : str or Path
            Directory to write to.
        filename : str, optional
            Output filename.  If ``None``, uses ``"run_{run_id[:8]}.json"``.

        Returns
        -------
        Path
            Path to the written JSON file.
        """
        self._report.summary = self.compute_summary()

        if filename is None:
            filename = f"run_{self._report.run_id[:8]}.json"

        out_dir = Path(output_dir)
        out_dir.mkdir(parents=True, exist_ok=True)
        out_path = out_dir / filename

        with open(out_path, "w", encoding="utf-8") as fh:
            json.dump(asdict(self._report), fh, indent=2, default=_json_default)

        return out_path

    def to_dict(self) -> dict[str, Any]:
        """Convert the run report to a plain dict."""
        self._report.summary = self.compute_summary()
        return asdict(self._report)
