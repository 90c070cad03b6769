"""Game logic: piece catalog, board, events, and game engine."""

from blockfall.game.pieces import PIECE_TYPES, PIECE_KINDS, Piece, instantiate, rotate_shape
from blockfall.game.board import Board
from blockfall.game.events import EventBus, EventType, GameEvent
from blockfall.game.randomizer import UniformRandomizer
from blockfall.game.tetris import (
    SCORE_TABLE,
    GameConfig,
    GameState,
    GameStatus,
    SaveStateError,
    TetrisGame,
)

__all__ = [
    "PIECE_TYPES",
    "PIECE_KINDS",
    "Piece",
    "instantiate",
    "rotate_shape",
    "Board",
    "EventBus",
    "EventType",
    "GameEvent",
    "UniformRandomizer",
    "SCORE_TABLE",
    "GameConfig",
    "GameState",
    "GameStatus",
    "SaveStateError",
    "TetrisGame",
]
