"""Trial runner -- headless auto-play of complete runs.

Drives :class:`~src.orchestrator.session.TrialSession` with a
:class:`~src.policies.skill_policy.SkillPolicy` on a virtual clock:
every attempt is played by the simulated player, losses are retried
until the per-game retry budget is spent, and each finished run yields
a JSON-serialisable :class:`~src.reporting.RunReport`.
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np

from src.clock import ManualTimerSource
from src.clock.manual import DEFAULT_FRAME_INTERVAL_MS
from src.policies.skill_policy import SkillPolicy, SkillProfile
from src.reporting import RunReport
from src.trials import GameId, Outcome

from .config import TrialRunnerConfig
from .session import RUN_ROSTER, Screen, TrialSession

logger = logging.getLogger(__name__)

# Stream id mixed into the seed of the simulated player's generator.
_PLAYER_STREAM = 1


class TrialRunner:
    """Plays N runs of the skill trials with a simulated player.

    Parameters
    ----------
    n_runs : int
        Number of runs to play.
    seed : int or None
        Base seed.  Run ``i`` seeds its game generator with ``seed + i``
        and its player generator with ``[seed + i, 1]``.
    max_retries : int
        Losses of a game are retried this many times per run before the
        loss is locked in.
    profile : SkillProfile or None
        Skill of the simulated player.
    roster : tuple[GameId, ...]
        Games played in each run.
    frame_interval_ms : float
        Virtual frame period.
    output_dir : str or Path or None
        If set, each run report is saved there as JSON.
    """

    def __init__(
        self,
        n_runs: int = 1,
        seed: int | None = None,
        max_retries: int = 2,
        profile: SkillProfile | None = None,
        roster: tuple[GameId, ...] = RUN_ROSTER,
        frame_interval_ms: float = DEFAULT_FRAME_INTERVAL_MS,
        output_dir: str | Path | None = None,
    ) -> None:
        if n_runs < 1:
            raise ValueError(f"n_runs must be >= 1, got {n_runs}")
        if max_retries < 0:
            raise ValueError(f"max_retries must be >= 0, got {max_retries}")
        self.n_runs = n_runs
        self.seed = seed
        self.max_retries = max_retries
        self.profile = profile or SkillProfile()
        self.roster = tuple(GameId(g) for g in roster)
        self.frame_interval_ms = frame_interval_ms
        self.output_dir = Path(output_dir) if output_dir is not None else None
        self.saved_paths: list[Path] = []

    @classmethod
    def from_config(cls, config: TrialRunnerConfig) -> TrialRunner:
        """Build a runner from a loaded :class:`TrialRunnerConfig`."""
        roster = tuple(GameId(g) for g in config.roster) if config.roster else RUN_ROSTER
        return cls(
            n_runs=config.n_runs,
            seed=config.seed,
            max_retries=config.max_retries,
            profile=config.skill_profile(),
            roster=roster,
            frame_interval_ms=config.frame_interval_ms,
            output_dir=config.output_dir,
        )

    def run(self) -> list[RunReport]:
        """Play every run and return their reports in order."""
        reports: list[RunReport] = []
        for run_idx in range(self.n_runs):
            logger.info("Starting run %d/%d", run_idx + 1, self.n_runs)
            report = self.run_once(run_idx)
            reports.append(report)
            logger.info(
                "Run %d: %d/%d wins in %d attempts, %s",
                run_idx + 1,
                report.summary["wins"],
                len(report.order),
                report.summary["total_attempts"],
                "passed" if report.summary["passed"] else "failed",
            )

        passed = sum(1 for r in reports if r.summary["passed"])
        logger.info("Finished %d runs: %d passed", len(reports), passed)
        return reports

    def run_once(self, run_idx: int = 0) -> RunReport:
        """Play a single run to the final screen.

        Returns
        -------
        RunReport
            The finished run's report with its summary filled in.
        """
        run_seed = None if self.seed is None else self.seed + run_idx
        clock = ManualTimerSource(frame_interval_ms=self.frame_interval_ms)
        session = TrialSession(clock, seed=run_seed, roster=self.roster)
        player_rng = np.random.default_rng(
            None if run_seed is None else [run_seed, _PLAYER_STREAM]
        )
        policy = SkillPolicy(self.profile, rng=player_rng)
        retries_left = {gid: self.max_retries for gid in self.roster}

        session.start_run()
        while session.screen is not Screen.FINAL:
            if session.screen is Screen.GAME:
                policy.play(session.current_game, clock)
            elif session.screen is Screen.RESULT:
                pending = session.pending
                if pending.outcome is Outcome.LOSS and retries_left[pending.game_id] > 0:
                    retries_left[pending.game_id] -= 1
                    session.retry_current()
                else:
                    session.lock_in_pending()
            else:
                raise RuntimeError(f"Unexpected screen {session.screen.value} mid-run")

        builder = session.report
        builder.report.summary = builder.compute_summary()
        if self.output_dir is not None:
            path = builder.save(self.output_dir)
            self.saved_paths.append(path)
            logger.info("Report saved to %s", path)
        return builder.report
