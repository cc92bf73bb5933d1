"""Reaction Rush -- click as soon as the pad turns green.

Plugin metadata (used by ``games.load_game_plugin()``)::

    from games import load_game_plugin
    plugin = load_game_plugin("reaction")
    game = plugin.game_class(timers, rng, on_win, on_lose)
"""

from games.reaction.game import ReactionGame, ReactionStatus

__all__ = ["ReactionGame", "ReactionStatus"]

# -- Plugin metadata (required by games.load_game_plugin) ------------------
game_class = ReactionGame
game_id = ReactionGame.game_id
display_name = "Reaction Rush"
tagline = "Click when the heart flashes green."
