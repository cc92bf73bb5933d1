#!/usr/bin/env python
"""CLI entry point -- play N headless trial runs and write JSON reports.

Runs the skill trials with a simulated player on a virtual clock::

    # Defaults from configs/trials.yaml:
    python scripts/run_trials.py

    # Ten seeded runs with a slower typist and no retries:
    python scripts/run_trials.py --runs 10 --seed 7 \\
        --max-retries 0 --typing-wpm 40

    # Include the maze in the roster:
    python scripts/run_trials.py --roster reaction typing memory aim timing maze
"""

from __future__ import annotations

import argparse
import logging
import sys

logger = logging.getLogger(__name__)

GAME_CHOICES = ["reaction", "typing", "memory", "aim", "timing", "maze"]


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Parameters
    ----------
    argv : list[str] or None
        Command-line arguments.  If None, uses ``sys.argv[1:]``.

    Returns
    -------
    argparse.Namespace
        Parsed arguments.  Options left as None fall back to the config.
    """
    parser = argparse.ArgumentParser(
        description="Play N skill-trial runs with a simulated player and report results.",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to runner config YAML (default: configs/trials.yaml)",
    )

    def _positive_int(value: str) -> int:
        """Argparse type that enforces a positive integer (>= 1)."""
        ival = int(value)
        if ival < 1:
            raise argparse.ArgumentTypeError(f"--runs must be >= 1, got {ival}")
        return ival

    parser.add_argument(
        "--runs",
        type=_positive_int,
        default=None,
        help="Number of runs to play (overrides config)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Base seed; run i uses seed + i (overrides config)",
    )
    parser.add_argument(
        "--max-retries",
        type=int,
        default=None,
        help="Retries per game per run before a loss is locked in (overrides config)",
    )
    parser.add_argument(
        "--roster",
        nargs="+",
        choices=GAME_CHOICES,
        default=None,
        help="Games to play in each run (default: reaction typing memory aim timing)",
    )
    parser.add_argument(
        "--typing-wpm",
        type=float,
        default=None,
        help="Simulated typing speed (overrides profile)",
    )
    parser.add_argument(
        "--reaction-ms",
        type=float,
        default=None,
        help="Simulated mean reaction time (overrides profile)",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default=None,
        help="Directory for JSON run reports (overrides config)",
    )
    parser.add_argument(
        "--no-save",
        action="store_true",
        help="Keep reports in memory only",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable DEBUG logging",
    )
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace):
    """Load the runner config and apply command-line overrides."""
    from src.orchestrator.config import TrialRunnerConfig, load_runner_config

    config = load_runner_config(args.config) if args.config else _default_config()
    if args.runs is not None:
        config.n_runs = args.runs
    if args.seed is not None:
        config.seed = args.seed
    if args.max_retries is not None:
        if args.max_retries < 0:
            raise ValueError(f"--max-retries must be >= 0, got {args.max_retries}")
        config.max_retries = args.max_retries
    if args.roster is not None:
        config.roster = list(args.roster)
    if args.typing_wpm is not None:
        config.profile["typing_wpm"] = args.typing_wpm
    if args.reaction_ms is not None:
        config.profile["reaction_ms"] = args.reaction_ms
    if args.output_dir is not None:
        config.output_dir = args.output_dir
    if args.no_save:
        config.output_dir = None
    # Re-run validation on the overridden values.
    return TrialRunnerConfig(**vars(config))


def _default_config():
    from src.orchestrator.config import DEFAULT_CONFIG_PATH, TrialRunnerConfig, load_runner_config

    if DEFAULT_CONFIG_PATH.exists():
        return load_runner_config(DEFAULT_CONFIG_PATH)
    logger.warning("No config at %s, using built-in defaults", DEFAULT_CONFIG_PATH)
    return TrialRunnerConfig()


def main(argv: list[str] | None = None) -> int:
    """Play the trial runs.

    Parameters
    ----------
    argv : list[str] or None
        Command-line arguments.

    Returns
    -------
    int
        Exit code (0 on success).
    """
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
    )

    from src.orchestrator.trial_runner import TrialRunner

    config = build_config(args)
    runner = TrialRunner.from_config(config)
    reports = runner.run()

    # Print summary
    passed = sum(1 for r in reports if r.summary["passed"])
    attempts = sum(r.summary["total_attempts"] for r in reports)
    wins = sum(r.summary["wins"] for r in reports)
    print("\n--- Trial Summary ---")
    print(f"Runs:            {len(reports)}")
    print(f"Runs passed:     {passed}")
    print(f"Games won:       {wins}")
    print(f"Total attempts:  {attempts}")
    for path in runner.saved_paths:
        print(f"Report:          {path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
