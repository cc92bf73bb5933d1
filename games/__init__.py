"""Mini-game plugins for the skill trials.

Each subdirectory under ``games/`` is a self-contained mini-game plugin
named after its :class:`~src.trials.GameId` value:

- :mod:`games.reaction` -- Reaction Rush
- :mod:`games.typing` -- Typing Sprint
- :mod:`games.memory` -- Memory Glow
- :mod:`games.aim` -- Heart Whack
- :mod:`games.timing` -- Timing Strike
- :mod:`games.maze` -- Maze Escape

Plugin Convention
-----------------
Each plugin's ``__init__.py`` must export these module-level attributes:

- ``game_class`` -- the :class:`~src.trials.MiniGame` subclass
- ``game_id`` -- the :class:`~src.trials.GameId` it implements
- ``display_name`` -- title shown on the game screen
- ``tagline`` -- one-line instructions
"""

from __future__ import annotations

import importlib
import types
from dataclasses import dataclass
from typing import Any

import numpy as np

from src.clock import TimerSource
from src.trials import Continuation, GameId, MiniGame

_REQUIRED_ATTRS = (
    "game_class",
    "game_id",
    "display_name",
    "tagline",
)


@dataclass(frozen=True)
class GameDefinition:
    """Static description of one mini-game kind.

    Attributes
    ----------
    id : GameId
        Identifier of the game.
    name : str
        Display name.
    tagline : str
        One-line instructions.
    game_class : type[MiniGame]
        Class instantiated for every attempt.
    """

    id: GameId
    name: str
    tagline: str
    game_class: type[MiniGame]

    def create(
        self,
        timers: TimerSource,
        rng: np.random.Generator,
        on_win: Continuation,
        on_lose: Continuation,
        **kwargs: Any,
    ) -> MiniGame:
        """Build a fresh, not yet started attempt."""
        return self.game_class(timers, rng, on_win, on_lose, **kwargs)


def load_game_plugin(name: str) -> types.ModuleType:
    """Dynamically load a mini-game plugin by directory name.

    Parameters
    ----------
    name : str
        Plugin directory name under ``games/`` (e.g. ``"reaction"``).

    Returns
    -------
    types.ModuleType
        The loaded plugin module.  Guaranteed to have the attributes
        ``game_class``, ``game_id``, ``display_name`` and ``tagline``.

    Raises
    ------
    ImportError
        If the plugin module cannot be imported.
    AttributeError
        If the plugin module is missing required attributes.
    """
    module = importlib.import_module(f"games.{name}")

    missing = [attr for attr in _REQUIRED_ATTRS if not hasattr(module, attr)]
    if missing:
        raise AttributeError(
            f"Game plugin 'games.{name}' is missing required attributes: "
            f"{', '.join(missing)}.  See games/__init__.py for the plugin convention."
        )

    return module


def get_game_definition(game_id: GameId | str) -> GameDefinition:
    """Load the plugin for ``game_id`` and describe it.

    Raises
    ------
    ValueError
        If ``game_id`` is not a known :class:`GameId`.
    """
    gid = GameId(game_id)
    plugin = load_game_plugin(gid.value)
    return GameDefinition(
        id=gid,
        name=plugin.display_name,
        tagline=plugin.tagline,
        game_class=plugin.game_class,
    )


def create_game(
    game_id: GameId | str,
    timers: TimerSource,
    rng: np.random.Generator,
    on_win: Continuation,
    on_lose: Continuation,
    **kwargs: Any,
) -> MiniGame:
    """Convenience wrapper: build a new attempt of ``game_id``.

    The returned game is not started; call ``start()`` on it, and
    ``cancel()`` to discard it.
    """
    return get_game_definition(game_id).create(timers, rng, on_win, on_lose, **kwargs)
