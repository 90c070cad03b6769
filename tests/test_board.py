"""Tests for Board placement, locking and row clearing."""

from __future__ import annotations

import numpy as np
import pytest

from blockfall.game.board import Board
from blockfall.game.pieces import COLOR_SAGE, PIECE_KINDS, instantiate
from tests.helpers import fill_rows, shape


@pytest.mark.parametrize("kind", PIECE_KINDS)
def test_empty_board_accepts_every_in_bounds_placement(board, kind):
    s = instantiate(kind).shape
    rows, cols = s.shape
    for y in range(board.height - rows + 1):
        for x in range(board.width - cols + 1):
            assert board.is_valid_placement(s, x, y)


@pytest.mark.parametrize("kind", PIECE_KINDS)
def test_rejects_crossing_walls_and_floor(board, kind):
    s = instantiate(kind).shape
    rows, cols = s.shape

    assert not board.is_valid_placement(s, -1, 5)
    assert not board.is_valid_placement(s, board.width - cols + 1, 5)
    assert not board.is_valid_placement(s, 3, board.height - rows + 1)


def test_empty_shape_cells_may_hang_outside(board):
    padded = shape([[0, 1, 1], [0, 1, 1], [0, 0, 0]])

    assert board.is_valid_placement(padded, -1, 18)
    assert not board.is_valid_placement(padded, -1, 19)
    assert not board.is_valid_placement(shape([[0, 1, 0], [1, 1, 1]]), 0, 19)


def test_rejects_overlap_with_locked_cell(board):
    board.grid[10, 4] = 3
    o = instantiate("O").shape

    assert not board.is_valid_placement(o, 4, 9)
    assert not board.is_valid_placement(o, 3, 10)
    assert board.is_valid_placement(o, 5, 9)
    assert board.is_valid_placement(o, 4, 11)


def test_cells_above_top_only_check_columns(board):
    fill_rows(board, [0])
    i = instantiate("I").shape

    assert board.is_valid_placement(i, 3, -1)
    assert board.is_valid_placement(i, 0, -5)
    assert not board.is_valid_placement(i, -1, -1)
    assert not board.is_valid_placement(i, 7, -1)
    # The part that reaches row 0 does collide
    assert not board.is_valid_placement(instantiate("I").rotated().shape, 0, -3)


def test_lock_piece_writes_kind_id(board):
    piece = instantiate("O").moved(0, 18)
    board.lock_piece(piece)

    assert board.grid[18, 4] == board.grid[18, 5] == 2
    assert board.grid[19, 4] == board.grid[19, 5] == 2
    assert int((board.grid != 0).sum()) == 4


def test_lock_piece_drops_cells_above_board(board):
    piece = instantiate("T").moved(0, -1)
    board.lock_piece(piece)

    np.testing.assert_array_equal(board.grid[0, 4:7], [3, 3, 3])
    assert int((board.grid != 0).sum()) == 3


def test_clear_full_rows_three_and_four(board):
    for r in range(3):
        board.grid[r, r] = r + 1
    fill_rows(board, [3, 4])
    board.grid[10, 0] = 5
    board.grid[19, 9] = 6
    before = board.grid.copy()

    cleared = board.clear_full_rows()

    assert cleared == 2
    assert not board.grid[:2].any()
    np.testing.assert_array_equal(board.grid[2:5], before[0:3])
    np.testing.assert_array_equal(board.grid[5:], before[5:])
    assert board.grid.shape == (20, 10)


def test_clear_four_rows_at_once(board):
    fill_rows(board, range(16, 20))
    board.grid[15, 2] = 1

    assert board.clear_full_rows() == 4
    assert board.grid[19, 2] == 1
    assert int((board.grid != 0).sum()) == 1


def test_clear_non_adjacent_rows_keeps_order(board):
    fill_rows(board, [17, 19])
    board.grid[18, 0] = 4
    board.grid[16, 1] = 5

    assert board.clear_full_rows() == 2
    assert board.grid[19, 0] == 4
    assert board.grid[18, 1] == 5
    assert int((board.grid != 0).sum()) == 2


def test_clear_nothing(board):
    fill_rows(board, [19], gap_cols=[3])
    before = board.grid.copy()

    assert board.clear_full_rows() == 0
    np.testing.assert_array_equal(board.grid, before)


def test_colors(board):
    board.grid[19, 0] = 7

    colors = board.colors()
    assert colors[19][0] == COLOR_SAGE
    assert colors[19][1] is None
    assert len(colors) == 20 and len(colors[0]) == 10


def test_load_list_validates():
    board = Board(4, 2)
    board.load_list([[0, 1, 2, 3], [4, 5, 6, 7]])
    assert board.grid.dtype == np.int8

    with pytest.raises(ValueError):
        board.load_list([[0, 0, 0, 0]])
    with pytest.raises(ValueError):
        board.load_list([[0, 0, 0, 8], [0, 0, 0, 0]])
    with pytest.raises(ValueError):
        board.load_list([[0, 0, 0, -1], [0, 0, 0, 0]])


def test_reset(board):
    fill_rows(board, [5, 6])
    board.reset()

    assert not board.grid.any()
