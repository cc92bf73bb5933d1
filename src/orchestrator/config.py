"""Trial runner configuration data structures.

A :class:`TrialRunnerConfig` describes a headless auto-play session:
how many runs to play, how to seed them, how many retries the simulated
player may spend per game, how well it plays and where reports go.

Configs can be loaded from YAML files via :func:`load_runner_config`.
String values in YAML configs support environment variable expansion
using ``$VAR``, ``${VAR}`` or ``${VAR:-default}`` syntax, as well as
``~`` for the user home directory.
"""

from __future__ import annotations

import dataclasses
import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from src.clock.manual import DEFAULT_FRAME_INTERVAL_MS
from src.policies.skill_policy import SkillProfile
from src.trials import GameId

logger = logging.getLogger(__name__)

# Default config file.
DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent.parent / "configs" / "trials.yaml"

# Pattern matching $VAR or ${VAR} for environment variable expansion.
_ENV_VAR_RE = re.compile(r"\$\{([^}]+)\}|\$([A-Za-z_][A-Za-z0-9_]*)")

_NONE_STRINGS = ("", "none", "null")


@dataclass
class TrialRunnerConfig:
    """Declarative description of a headless trial session.

    Parameters
    ----------
    n_runs : int
        Number of full runs to play.
    seed : int, optional
        Base seed.  Run ``i`` uses ``seed + i``.  None draws fresh
        entropy for every run.
    max_retries : int
        Retries the simulated player may spend on each game per run.
    frame_interval_ms : float
        Virtual frame period used for animation-driven games.
    roster : list[str], optional
        Game ids to play.  None plays the default five-game roster.
    output_dir : str or Path, optional
        Directory for JSON run reports.  None keeps reports in memory.
    profile : dict[str, Any]
        Keyword overrides for :class:`~src.policies.skill_policy.SkillProfile`.
    """

    n_runs: int = 1
    seed: Optional[int] = None
    max_retries: int = 2
    frame_interval_ms: float = DEFAULT_FRAME_INTERVAL_MS
    roster: Optional[list[str]] = None
    output_dir: Optional[str | Path] = None
    profile: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Expanded env vars arrive as strings.
        if isinstance(self.seed, str):
            self.seed = None if self.seed.strip().lower() in _NONE_STRINGS else int(self.seed)
        self.n_runs = int(self.n_runs)
        self.max_retries = int(self.max_retries)
        self.frame_interval_ms = float(self.frame_interval_ms)
        if self.n_runs < 1:
            raise ValueError(f"n_runs must be >= 1, got {self.n_runs}")
        if self.max_retries < 0:
            raise ValueError(f"max_retries must be >= 0, got {self.max_retries}")
        if self.roster is not None:
            self.roster = [GameId(game).value for game in self.roster]
        if isinstance(self.output_dir, str):
            if self.output_dir.strip().lower() in _NONE_STRINGS:
                self.output_dir = None
            else:
                self.output_dir = Path(os.path.expanduser(self.output_dir))

    def skill_profile(self) -> SkillProfile:
        """Build the simulated player's :class:`SkillProfile`."""
        valid = {f.name for f in dataclasses.fields(SkillProfile)}
        unknown = set(self.profile) - valid
        if unknown:
            raise ValueError(
                f"Unknown skill profile fields: {sorted(unknown)}. "
                f"Valid fields: {sorted(valid)}"
            )
        return SkillProfile(**{key: float(value) for key, value in self.profile.items()})


def _expand_vars(value: str) -> str:
    """Expand ``$VAR`` and ``${VAR}`` references in a string.

    Undefined variables are left as-is (no error).
    """

    def _replace(match: re.Match) -> str:
        braced = match.group(1)
        bare = match.group(2)
        original: str = match.group(0) or ""

        if braced is not None:
            if ":-" in braced:
                var_name, default = braced.split(":-", 1)
                return os.environ.get(var_name, default)
            return os.environ.get(braced, original)

        return os.environ.get(bare or "", original)

    return _ENV_VAR_RE.sub(_replace, value)


def _expand_vars_recursive(data: Any) -> Any:
    """Expand environment variables in every string inside *data*."""
    if isinstance(data, str):
        return _expand_vars(data)
    if isinstance(data, dict):
        return {key: _expand_vars_recursive(value) for key, value in data.items()}
    if isinstance(data, list):
        return [_expand_vars_recursive(value) for value in data]
    return data


def load_runner_config(path: str | Path | None = None) -> TrialRunnerConfig:
    """Load a :class:`TrialRunnerConfig` from a YAML file.

    Parameters
    ----------
    path : str or Path, optional
        YAML file to read.  Default is ``configs/trials.yaml``.

    Returns
    -------
    TrialRunnerConfig

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    ValueError
        If the YAML is not a mapping or contains unknown or invalid
        fields.
    """
    config_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH

    if not config_path.exists():
        raise FileNotFoundError(f"No trial runner config found at {config_path}")

    logger.info("Loading trial runner config from %s", config_path)
    with open(config_path, "r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh)

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ValueError(
            f"Expected a YAML mapping in {config_path}, got {type(raw).__name__}"
        )

    raw = _expand_vars_recursive(raw)

    valid_fields = {f.name for f in dataclasses.fields(TrialRunnerConfig)}
    unknown = set(raw) - valid_fields
    if unknown:
        raise ValueError(
            f"Unknown fields in {config_path}: {sorted(unknown)}. "
            f"Valid fields: {sorted(valid_fields)}"
        )

    try:
        return TrialRunnerConfig(**raw)
    except TypeError as exc:
        raise ValueError(
            f"Invalid config in {config_path}: {exc}. "
            f"Valid fields: {sorted(valid_fields)}"
        ) from exc
