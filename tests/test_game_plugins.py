"""Tests for the game plugin loading system.

Verifies ``load_game_plugin()``, ``get_game_definition()`` and
``create_game()`` from the ``games`` package, including validation of
required attributes and error handling for missing/incomplete plugins.
"""

from __future__ import annotations

import types
from unittest import mock

import pytest

from games import GameDefinition, create_game, get_game_definition, load_game_plugin
from src.trials import GameId, MiniGame

ALL_GAMES = [gid.value for gid in GameId]


class TestLoadGamePlugin:
    """Tests for load_game_plugin()."""

    @pytest.mark.parametrize("name", ALL_GAMES)
    def test_loads_every_plugin(self, name):
        """Every game id has a plugin with all required attrs."""
        plugin = load_game_plugin(name)

        assert isinstance(plugin, types.ModuleType)
        assert hasattr(plugin, "game_class")
        assert hasattr(plugin, "game_id")
        assert hasattr(plugin, "display_name")
        assert hasattr(plugin, "tagline")

    @pytest.mark.parametrize("name", ALL_GAMES)
    def test_plugin_metadata_consistent(self, name):
        """Plugin game_id matches its directory and its class."""
        plugin = load_game_plugin(name)

        assert plugin.game_id is GameId(name)
        assert plugin.game_class.game_id is plugin.game_id
        assert issubclass(plugin.game_class, MiniGame)

    def test_display_names(self):
        """Display names match the game screen titles."""
        names = {name: load_game_plugin(name).display_name for name in ALL_GAMES}
        assert names == {
            "reaction": "Reaction Rush",
            "typing": "Typing Sprint",
            "memory": "Memory Glow",
            "aim": "Heart Whack",
            "timing": "Timing Strike",
            "maze": "Maze Escape",
        }

    def test_nonexistent_plugin_raises_import_error(self):
        """Loading a plugin that doesn't exist raises ImportError."""
        with pytest.raises(ImportError):
            load_game_plugin("nonexistent_game_xyz")

    def test_incomplete_plugin_raises_attribute_error(self):
        """A plugin missing required attributes raises AttributeError."""
        fake_module = types.ModuleType("games.fake_game")
        fake_module.game_class = object
        # Missing: game_id, display_name, tagline

        with mock.patch("games.importlib.import_module", return_value=fake_module):
            with pytest.raises(AttributeError, match="missing required attributes"):
                load_game_plugin("fake_game")

    def test_error_lists_missing_attrs(self):
        """The error message names every missing attribute."""
        fake_module = types.ModuleType("games.fake_game")
        fake_module.game_class = object
        fake_module.game_id = "fake"

        with mock.patch("games.importlib.import_module", return_value=fake_module):
            with pytest.raises(AttributeError, match="display_name, tagline"):
                load_game_plugin("fake_game")


class TestGameDefinition:
    """Tests for get_game_definition() and create_game()."""

    def test_definition_from_string(self):
        """A plain string id resolves to a definition."""
        definition = get_game_definition("maze")

        assert isinstance(definition, GameDefinition)
        assert definition.id is GameId.MAZE
        assert definition.name == "Maze Escape"

    def test_unknown_id_raises(self):
        """An unknown game id raises ValueError."""
        with pytest.raises(ValueError):
            get_game_definition("pinball")

    def test_create_game_not_started(self, clock, rng):
        """create_game builds a fresh, unstarted attempt."""
        on_win, on_lose = mock.Mock(), mock.Mock()
        game = create_game(GameId.AIM, clock, rng, on_win, on_lose)

        assert game.game_id is GameId.AIM
        assert not game.started
        assert clock.pending == 0

    def test_create_passes_kwargs(self, clock, rng):
        """Extra keyword arguments reach the game constructor."""
        game = create_game("maze", clock, rng, mock.Mock(), mock.Mock(), size=7)
        assert game.size == 7
        assert game.grid.shape == (7, 7)
