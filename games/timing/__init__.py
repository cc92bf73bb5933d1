"""Timing Strike -- stop the slider in the sweet spot."""

from games.timing.game import TimingGame, within_window

__all__ = ["TimingGame", "within_window"]

# -- Plugin metadata (required by games.load_game_plugin) ------------------
game_class = TimingGame
game_id = TimingGame.game_id
display_name = "Timing Strike"
tagline = "Stop the slider in the sweet spot."
