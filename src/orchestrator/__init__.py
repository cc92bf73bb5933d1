"""Orchestrator module -- trial sessions and headless auto-play.

Provides ``TrialSession`` for run ordering, retries, scoring and screen
transitions, ``TrialRunner`` for playing complete runs with a simulated
player, and ``TrialRunnerConfig`` / ``load_runner_config`` for YAML
runner settings.
"""

from .config import TrialRunnerConfig, load_runner_config
from .session import RUN_ROSTER, PendingResult, Screen, TrialSession, shuffle_order
from .trial_runner import TrialRunner

__all__ = [
    "RUN_ROSTER",
    "PendingResult",
    "Screen",
    "TrialRunner",
    "TrialRunnerConfig",
    "TrialSession",
    "load_runner_config",
    "shuffle_order",
]
