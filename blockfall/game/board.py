"""
Board logic for the playing field.

The board is a 2D numpy array (height x width) of int8 values:
  - 0 = empty cell
  - 1-7 = id of the piece kind locked there (selects the cell's color)

Row 0 is the top. There is no hidden buffer zone: a piece may hang partly
above row 0, and those cells are only checked against the side walls.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from blockfall.game.pieces import PIECE_COLORS, Piece


class Board:
    """Fixed-size grid with collision testing, piece locking and row clearing.

    Attributes:
        width: Number of columns (default 10).
        height: Number of rows (default 20).
        grid: 2D numpy array of shape (height, width), dtype int8.
    """

    def __init__(self, width: int = 10, height: int = 20) -> None:
        """Initialize an empty board.

        Args:
            width: Number of columns.
            height: Number of rows.
        """
        self.width = width
        self.height = height
        self.grid = np.zeros((self.height, self.width), dtype=np.int8)

    def is_valid_placement(self, shape: np.ndarray, x: int, y: int) -> bool:
        """Check whether a shape with its top-left corner at (x, y) fits.

        A filled cell at absolute (col, row) = (x + j, y + i) is invalid if:
          - col < 0 or col >= width,
          - row >= height,
          - row >= 0 and the board cell is already occupied.
        Cells with row < 0 (above the board) only get the column check.

        Args:
            shape: 0/1 matrix of the piece.
            x: Column offset of the shape's top-left corner.
            y: Row offset of the shape's top-left corner.

        Returns:
            True if the placement is valid, False otherwise.
        """
        rows, cols = shape.shape
        for r in range(rows):
            for c in range(cols):
                if shape[r, c] == 0:
                    continue
                board_row = y + r
                board_col = x + c
                if board_col < 0 or board_col >= self.width:
                    return False
                if board_row >= self.height:
                    return False
                if board_row >= 0 and self.grid[board_row, board_col] != 0:
                    return False
        return True

    def lock_piece(self, piece: Piece) -> None:
        """Write a piece into the grid.

        Cells above the top row are dropped. Does NOT check validity first;
        the caller must only lock placements that passed is_valid_placement.

        Args:
            piece: The piece to commit.
        """
        piece_id = piece.id
        for col, row in piece.cells():
            if row >= 0:
                self.grid[row, col] = piece_id

    def clear_full_rows(self) -> int:
        """Remove all fully occupied rows and shift the rows above them down.

        Empty rows are inserted at the top, one per removed row, and the
        remaining rows keep their relative order.

        Returns:
            The number of rows cleared.
        """
        full = np.all(self.grid != 0, axis=1)
        cleared = int(full.sum())
        if cleared == 0:
            return 0

        remaining = self.grid[~full]
        empty_rows = np.zeros((cleared, self.width), dtype=np.int8)
        self.grid = np.vstack([empty_rows, remaining])
        return cleared

    def colors(self) -> list[list[str | None]]:
        """Return the grid as display colors, None for empty cells."""
        return [
            [PIECE_COLORS.get(int(v)) if v != 0 else None for v in row]
            for row in self.grid
        ]

    def to_list(self) -> list[list[int]]:
        return self.grid.tolist()

    def load_list(self, rows: Sequence[Sequence[int]]) -> None:
        """Replace the grid with saved rows.

        Raises:
            ValueError: Wrong dimensions or a value outside 0-7.
        """
        grid = np.array(rows, dtype=np.int64)
        if grid.shape != (self.height, self.width):
            raise ValueError(
                f"Board must be {self.height}x{self.width}, got shape {grid.shape}"
            )
        if grid.size and (grid.min() < 0 or grid.max() > len(PIECE_COLORS)):
            raise ValueError("Board cells must be piece ids between 0 and 7")
        self.grid = grid.astype(np.int8)

    def reset(self) -> None:
        """Clear the entire board, setting all cells to 0."""
        self.grid = np.zeros((self.height, self.width), dtype=np.int8)
