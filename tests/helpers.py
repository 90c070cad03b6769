"""Helpers shared by the test modules."""

from __future__ import annotations

import itertools
from typing import Iterable

import numpy as np

from blockfall.game.board import Board
from blockfall.game.pieces import Piece, instantiate


class ScriptedRandomizer:
    """Returns piece kinds from a fixed list, cycling forever."""

    def __init__(self, kinds: Iterable[str]) -> None:
        self._kinds = itertools.cycle(list(kinds))

    def random_kind(self) -> str:
        return next(self._kinds)


def fill_rows(board: Board, rows: Iterable[int], gap_cols: Iterable[int] = (), value: int = 7) -> None:
    """Fill whole rows with `value`, leaving `gap_cols` empty."""
    gaps = set(gap_cols)
    for r in rows:
        for c in range(board.width):
            board.grid[r, c] = 0 if c in gaps else value


def vertical_i(x: int, y: int = 0) -> Piece:
    piece = instantiate("I").rotated()
    piece.x, piece.y = x, y
    return piece


def shape(rows: list[list[int]]) -> np.ndarray:
    return np.array(rows, dtype=np.int8)
