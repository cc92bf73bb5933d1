"""Typing Sprint -- type the phrase fast and clean."""

from games.typing.game import TypingGame, words_per_minute

__all__ = ["TypingGame", "words_per_minute"]

# -- Plugin metadata (required by games.load_game_plugin) ------------------
game_class = TypingGame
game_id = TypingGame.game_id
display_name = "Typing Sprint"
tagline = "Type the phrase fast and clean."
