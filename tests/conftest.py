"""Shared fixtures for the game tests."""

from __future__ import annotations

from typing import Iterable

import pytest

from blockfall.game.board import Board
from blockfall.game.events import GameEvent
from blockfall.game.tetris import GameConfig, TetrisGame
from tests.helpers import ScriptedRandomizer


@pytest.fixture
def board() -> Board:
    return Board(10, 20)


@pytest.fixture
def make_game():
    """Factory for a started game with a scripted piece sequence."""

    def _make(kinds: Iterable[str] = ("O",), **config) -> TetrisGame:
        game = TetrisGame(GameConfig(**config), ScriptedRandomizer(kinds))
        game.new_game()
        return game

    return _make


@pytest.fixture
def recorded_events():
    """Attach a catch-all listener to a game and return the list it fills."""

    def _attach(game: TetrisGame) -> list[GameEvent]:
        events: list[GameEvent] = []
        game.events.subscribe_all(events.append)
        return events

    return _attach
