"""Trials module -- the shared mini-game contract and fixed benchmarks.

Each mini-game is a :class:`MiniGame` subclass living in its own plugin
package under ``games/``; this module holds what they have in common:
the :class:`GameId` and :class:`Outcome` enums, the attempt lifecycle,
and the benchmark constants.
"""

from .base import Continuation, GameId, MiniGame, Outcome

__all__ = [
    "Continuation",
    "GameId",
    "MiniGame",
    "Outcome",
]
