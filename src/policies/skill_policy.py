"""Scripted skill policies -- a simulated player for headless runs.

A :class:`SkillPolicy` plays one mini-game attempt to completion on a
:class:`~src.clock.ManualTimerSource`, using only what a human would
see (the game's public state) and the game's public input methods.  How
well it plays is set by a :class:`SkillProfile`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

import numpy as np

from games.maze import KEY_DIRECTIONS, shortest_path
from games.reaction import ReactionStatus
from src.clock import ManualTimerSource
from src.trials import GameId, MiniGame
from src.trials.constants import (
    MEMORY_REVEAL_DURATION_MS,
    MEMORY_REVEAL_STAGGER_MS,
    MEMORY_TILE_COUNT,
    TIMING_SWEEP_MS,
)

logger = logging.getLogger(__name__)

# Give up on an attempt after this much virtual time.
MAX_ATTEMPT_MS = 180_000.0

_MEMORY_DARK_GAP_MS = MEMORY_REVEAL_STAGGER_MS - MEMORY_REVEAL_DURATION_MS

_DELTA_TO_KEY = {delta: key for key, delta in KEY_DIRECTIONS.items() if key.startswith("arrow")}


@dataclass
class SkillProfile:
    """How fast and how accurately the simulated player performs.

    Attributes
    ----------
    reaction_ms : float
        Mean reaction time once the pad turns green.
    reaction_jitter_ms : float
        Standard deviation of the reaction time.
    jump_start_rate : float
        Probability of clicking before the pad turns green.
    typing_wpm : float
        Nominal typing speed.
    typing_jitter : float
        Relative spread of the per-keystroke interval.
    memory_slip_rate : float
        Probability of pressing a wrong tile at each recall step.
    memory_think_ms : float
        Pause before each recall press.
    aim_hit_interval_ms : float
        Mean time between hits.
    aim_jitter_ms : float
        Standard deviation of the time between hits.
    timing_error : float
        Standard deviation of where the player stops relative to target.
    maze_step_ms : float
        Mean time per maze move.
    """

    reaction_ms: float = 250.0
    reaction_jitter_ms: float = 40.0
    jump_start_rate: float = 0.05
    typing_wpm: float = 55.0
    typing_jitter: float = 0.2
    memory_slip_rate: float = 0.05
    memory_think_ms: float = 350.0
    aim_hit_interval_ms: float = 1000.0
    aim_jitter_ms: float = 200.0
    timing_error: float = 0.1
    maze_step_ms: float = 250.0

    def __post_init__(self) -> None:
        for name in ("jump_start_rate", "memory_slip_rate"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be in [0.0, 1.0], got {value}")
        if self.typing_wpm <= 0:
            raise ValueError(f"typing_wpm must be > 0, got {self.typing_wpm}")


class SkillPolicy:
    """Plays mini-game attempts like a player with a given skill profile.

    Parameters
    ----------
    profile : SkillProfile or None
        Player skill.  Default is ``SkillProfile()``.
    rng : np.random.Generator or None
        Randomness for the player's behaviour, kept separate from the
        games' own generator.
    """

    def __init__(
        self,
        profile: SkillProfile | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.profile = profile or SkillProfile()
        self._rng = rng if rng is not None else np.random.default_rng()
        self._players: dict[GameId, Callable[[MiniGame, ManualTimerSource], None]] = {
            GameId.REACTION: self._play_reaction,
            GameId.TYPING: self._play_typing,
            GameId.MEMORY: self._play_memory,
            GameId.AIM: self._play_aim,
            GameId.TIMING: self._play_timing,
            GameId.MAZE: self._play_maze,
        }

    def play(self, game: MiniGame, clock: ManualTimerSource) -> None:
        """Drive ``game`` until it resolves.

        Raises
        ------
        RuntimeError
            If the attempt is still unresolved after ``MAX_ATTEMPT_MS``.
        """
        deadline = clock.now() + MAX_ATTEMPT_MS
        self._players[game.game_id](game, clock)
        # Anything left open (e.g. a countdown) resolves on its own.
        while not game.finished and not game.cancelled and clock.now() < deadline:
            clock.advance(250.0)
        if not game.finished:
            raise RuntimeError(f"{game.game_id.value} attempt did not resolve")

    def _sample(self, mean: float, std: float, floor: float = 1.0) -> float:
        return max(floor, float(self._rng.normal(mean, std)))

    # -- Per-game players ----------------------------------------------

    def _play_reaction(self, game: MiniGame, clock: ManualTimerSource) -> None:
        if self._rng.random() < self.profile.jump_start_rate:
            clock.advance(float(self._rng.uniform(100.0, 1100.0)))
            game.click()
            return
        while game.status is not ReactionStatus.READY and not game.finished:
            clock.step_frames(1)
        clock.advance(self._sample(self.profile.reaction_ms, self.profile.reaction_jitter_ms))
        game.click()

    def _play_typing(self, game: MiniGame, clock: ManualTimerSource) -> None:
        per_char = 60_000.0 / (self.profile.typing_wpm * 5)
        phrase = game.phrase
        for i in range(1, len(phrase) + 1):
            if i > 1:
                clock.advance(self._sample(per_char, per_char * self.profile.typing_jitter))
            game.type_text(phrase[:i])

    def _play_memory(self, game: MiniGame, clock: ManualTimerSource) -> None:
        seen: list[int] = []
        previous = None
        # Sample at least twice per dark gap so no reveal is missed.
        step = min(clock.frame_interval_ms, _MEMORY_DARK_GAP_MS / 2)
        while not game.ready:
            clock.advance(step)
            if game.active_tile is not None and previous is None:
                seen.append(game.active_tile)
            previous = game.active_tile
        for tile in seen:
            clock.advance(self._sample(self.profile.memory_think_ms, 80.0))
            if self._rng.random() < self.profile.memory_slip_rate:
                offset = 1 + int(self._rng.integers(0, MEMORY_TILE_COUNT - 1))
                tile = (tile + offset) % MEMORY_TILE_COUNT
            game.pick(tile)
            if game.finished:
                return

    def _play_aim(self, game: MiniGame, clock: ManualTimerSource) -> None:
        while not game.finished:
            clock.advance(self._sample(self.profile.aim_hit_interval_ms, self.profile.aim_jitter_ms))
            game.hit()

    def _play_timing(self, game: MiniGame, clock: ManualTimerSource) -> None:
        aim_at = float(np.clip(game.target + self._rng.normal(0.0, self.profile.timing_error), 0.02, 0.98))
        # Give up after three full back-and-forth sweeps.
        for _ in range(int(3 * 2 * TIMING_SWEEP_MS / clock.frame_interval_ms)):
            clock.step_frames(1)
            if abs(game.position - aim_at) <= 0.01:
                break
        game.stop()

    def _play_maze(self, game: MiniGame, clock: ManualTimerSource) -> None:
        path = shortest_path(game.grid, game.player, game.exit)
        if path is None:
            logger.warning("Maze exit unreachable from %s", game.player)
            return
        for (r0, c0), (r1, c1) in zip(path, path[1:]):
            clock.advance(self._sample(self.profile.maze_step_ms, self.profile.maze_step_ms * 0.2))
            if game.finished:
                return
            game.press_key(_DELTA_TO_KEY[(r1 - r0, c1 - c0)])
