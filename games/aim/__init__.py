"""Heart Whack -- hit the hearts before the timer ends."""

from games.aim.game import AimGame

__all__ = ["AimGame"]

# -- Plugin metadata (required by games.load_game_plugin) ------------------
game_class = AimGame
game_id = AimGame.game_id
display_name = "Heart Whack"
tagline = "Hit the hearts before the timer ends."
