"""
Tetromino catalog, the active Piece, and the clockwise rotation transform.

Each of the 7 kinds has one base shape (spawn orientation) and a fixed
display color. Other orientations are produced on the fly by rotate_shape();
there is no rotation table and no wall-kick data.

Coordinate convention:
  - Shapes are 2D numpy arrays (int8) where 1 marks a filled cell.
  - On the board, row 0 is the top and row increases downward.
  - A piece's (x, y) is the board position of its shape's top-left corner.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator

import numpy as np

# =============================================================================
# Piece Colors
# =============================================================================

COLOR_MIST = "#A2B5C3"     # I
COLOR_UMBER = "#5D5337"    # O
COLOR_DEEP_TEAL = "#193A3E"  # T
COLOR_TEAL = "#4D757B"     # S
COLOR_STONE = "#ADA799"    # Z
COLOR_SLATE = "#7A8B99"    # J
COLOR_SAGE = "#8C9A7E"     # L

# =============================================================================
# Tetromino Definitions
# =============================================================================
# Base shapes use the smallest bounding box that fits the piece.

I_PIECE: dict = {
    "id": 1,
    "name": "I",
    "color": COLOR_MIST,
    "shape": np.array([[1, 1, 1, 1]], dtype=np.int8),
}

O_PIECE: dict = {
    "id": 2,
    "name": "O",
    "color": COLOR_UMBER,
    "shape": np.array([
        [1, 1],
        [1, 1],
    ], dtype=np.int8),
}

T_PIECE: dict = {
    "id": 3,
    "name": "T",
    "color": COLOR_DEEP_TEAL,
    "shape": np.array([
        [0, 1, 0],
        [1, 1, 1],
    ], dtype=np.int8),
}

S_PIECE: dict = {
    "id": 4,
    "name": "S",
    "color": COLOR_TEAL,
    "shape": np.array([
        [0, 1, 1],
        [1, 1, 0],
    ], dtype=np.int8),
}

Z_PIECE: dict = {
    "id": 5,
    "name": "Z",
    "color": COLOR_STONE,
    "shape": np.array([
        [1, 1, 0],
        [0, 1, 1],
    ], dtype=np.int8),
}

J_PIECE: dict = {
    "id": 6,
    "name": "J",
    "color": COLOR_SLATE,
    "shape": np.array([
        [1, 0, 0],
        [1, 1, 1],
    ], dtype=np.int8),
}

L_PIECE: dict = {
    "id": 7,
    "name": "L",
    "color": COLOR_SAGE,
    "shape": np.array([
        [0, 0, 1],
        [1, 1, 1],
    ], dtype=np.int8),
}

# Base shapes are shared by every instantiate() call.
for _piece in (I_PIECE, O_PIECE, T_PIECE, S_PIECE, Z_PIECE, J_PIECE, L_PIECE):
    _piece["shape"].setflags(write=False)

# =============================================================================
# Lookup tables
# =============================================================================

PIECE_TYPES: list[dict] = [I_PIECE, O_PIECE, T_PIECE, S_PIECE, Z_PIECE, J_PIECE, L_PIECE]

PIECE_KINDS: tuple[str, ...] = tuple(p["name"] for p in PIECE_TYPES)

PIECES_BY_NAME: dict[str, dict] = {p["name"]: p for p in PIECE_TYPES}

PIECE_COLORS: dict[int, str] = {p["id"]: p["color"] for p in PIECE_TYPES}


def rotate_shape(shape: np.ndarray) -> np.ndarray:
    """Rotate a shape matrix 90 degrees clockwise.

    rotated[j][rows - 1 - i] = shape[i][j], so a (rows x cols) matrix becomes
    (cols x rows). The input is left untouched.

    Args:
        shape: 2D 0/1 matrix.

    Returns:
        A new, contiguous int8 array.
    """
    return np.ascontiguousarray(np.rot90(shape, k=-1), dtype=np.int8)


@dataclass(eq=False)
class Piece:
    """The falling piece: kind, current shape, color and board offset.

    Attributes:
        kind: Piece name, one of PIECE_KINDS.
        shape: Current rotation state as a 0/1 int8 matrix.
        color: Display color of the kind.
        x: Column of the shape's top-left corner.
        y: Row of the shape's top-left corner (may be negative).
    """

    kind: str
    shape: np.ndarray
    color: str
    x: int = 0
    y: int = 0

    @property
    def id(self) -> int:
        return PIECES_BY_NAME[self.kind]["id"]

    @property
    def width(self) -> int:
        return int(self.shape.shape[1])

    @property
    def height(self) -> int:
        return int(self.shape.shape[0])

    def cells(self) -> Iterator[tuple[int, int]]:
        """Yield the absolute (x, y) board position of every filled cell."""
        for i, j in np.argwhere(self.shape != 0):
            yield self.x + int(j), self.y + int(i)

    def moved(self, dx: int, dy: int) -> "Piece":
        return Piece(self.kind, self.shape, self.color, self.x + dx, self.y + dy)

    def rotated(self) -> "Piece":
        """Return a copy rotated clockwise in place (same x, y, no kicks)."""
        return Piece(self.kind, rotate_shape(self.shape), self.color, self.x, self.y)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "shape": self.shape.tolist(),
            "color": self.color,
            "x": self.x,
            "y": self.y,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Piece":
        """Rebuild a piece saved by to_dict().

        Raises:
            KeyError: Unknown kind or missing field.
            ValueError: Shape is not a rotation of the kind's base shape.
        """
        kind = data["kind"]
        if kind not in PIECES_BY_NAME:
            raise KeyError(f"Unknown piece kind: {kind!r}")
        shape = np.array(data["shape"], dtype=np.int8)
        if shape.ndim != 2 or shape.size == 0 or not np.isin(shape, (0, 1)).all():
            raise ValueError(f"Invalid shape for piece {kind}: {data['shape']!r}")
        if not _is_rotation_of(shape, PIECES_BY_NAME[kind]["shape"]):
            raise ValueError(f"Shape is not a rotation of piece {kind}: {data['shape']!r}")
        return cls(
            kind=kind,
            shape=shape,
            color=str(data.get("color", PIECES_BY_NAME[kind]["color"])),
            x=int(data["x"]),
            y=int(data["y"]),
        )


def _is_rotation_of(shape: np.ndarray, base: np.ndarray) -> bool:
    rotation = base
    for _ in range(4):
        if np.array_equal(shape, rotation):
            return True
        rotation = rotate_shape(rotation)
    return False


def instantiate(kind: str, grid_width: int = 10) -> Piece:
    """Create a new piece of the given kind at its spawn position.

    The piece is horizontally centered (x = grid_width // 2 - width // 2)
    on the top row (y = 0).

    Args:
        kind: One of PIECE_KINDS.
        grid_width: Board width in columns.

    Returns:
        A Piece owning its own copy of the base shape.
    """
    definition = PIECES_BY_NAME[kind]
    shape = definition["shape"].copy()
    x = grid_width // 2 - shape.shape[1] // 2
    return Piece(kind=kind, shape=shape, color=definition["color"], x=x, y=0)
