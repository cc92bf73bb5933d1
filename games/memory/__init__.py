"""Memory Glow -- repeat the sparkle pattern."""

from games.memory.game import MemoryGame

__all__ = ["MemoryGame"]

# -- Plugin metadata (required by games.load_game_plugin) ------------------
game_class = MemoryGame
game_id = MemoryGame.game_id
display_name = "Memory Glow"
tagline = "Repeat the sparkle pattern."
