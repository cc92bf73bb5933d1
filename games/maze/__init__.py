"""Maze Escape -- reach the star before the clock runs out.

Provides :class:`MazeGame` and the grid helpers in
:mod:`~games.maze.grid` (generation, reachability, shortest path).
"""

from games.maze.game import KEY_DIRECTIONS, MazeGame
from games.maze.grid import generate_maze, reachable_from, shortest_path

__all__ = [
    "KEY_DIRECTIONS",
    "MazeGame",
    "generate_maze",
    "reachable_from",
    "shortest_path",
]

# -- Plugin metadata (required by games.load_game_plugin) ------------------
game_class = MazeGame
game_id = MazeGame.game_id
display_name = "Maze Escape"
tagline = "Reach the star before time runs out."
