"""Tests for the piece catalog, rotation and the randomizer."""

from __future__ import annotations

import numpy as np
import pytest

from blockfall.game.pieces import (
    PIECE_KINDS,
    PIECE_TYPES,
    PIECES_BY_NAME,
    Piece,
    instantiate,
    rotate_shape,
)
from blockfall.game.randomizer import UniformRandomizer
from tests.helpers import shape


def test_catalog_has_seven_tetrominoes():
    assert PIECE_KINDS == ("I", "O", "T", "S", "Z", "J", "L")
    assert [p["id"] for p in PIECE_TYPES] == [1, 2, 3, 4, 5, 6, 7]
    for piece in PIECE_TYPES:
        assert int(piece["shape"].sum()) == 4
        assert piece["color"].startswith("#")


@pytest.mark.parametrize("kind", PIECE_KINDS)
@pytest.mark.parametrize("width", [4, 10, 15])
def test_instantiate_spawns_inside_bounds_on_top_row(kind, width):
    piece = instantiate(kind, width)

    assert piece.y == 0
    assert piece.x == width // 2 - piece.width // 2
    for x, y in piece.cells():
        assert 0 <= x < width
        assert y >= 0


def test_instantiate_spawn_columns_on_default_board():
    assert instantiate("I").x == 3
    assert instantiate("O").x == 4
    assert instantiate("T").x == 4


def test_instantiate_copies_base_shape():
    piece = instantiate("T")
    piece.shape[0, 0] = 1

    assert PIECES_BY_NAME["T"]["shape"][0, 0] == 0
    assert instantiate("T").shape[0, 0] == 0


def test_instantiate_unknown_kind():
    with pytest.raises(KeyError):
        instantiate("X")


def test_rotate_t_clockwise():
    rotated = rotate_shape(shape([[0, 1, 0], [1, 1, 1]]))

    np.testing.assert_array_equal(rotated, shape([[1, 0], [1, 1], [1, 0]]))


def test_rotate_follows_index_transform():
    original = shape([[1, 0, 0], [1, 1, 1]])
    rotated = rotate_shape(original)
    rows, cols = original.shape

    assert rotated.shape == (cols, rows)
    for i in range(rows):
        for j in range(cols):
            assert rotated[j, rows - 1 - i] == original[i, j]


def test_rotate_does_not_modify_input():
    original = shape([[0, 1, 1], [1, 1, 0]])
    rotate_shape(original)

    np.testing.assert_array_equal(original, shape([[0, 1, 1], [1, 1, 0]]))


@pytest.mark.parametrize("kind", PIECE_KINDS)
def test_four_rotations_return_original(kind):
    base = instantiate(kind).shape
    s = base
    for _ in range(4):
        s = rotate_shape(s)
        assert int(s.sum()) == 4

    np.testing.assert_array_equal(s, base)


@pytest.mark.parametrize(
    "kind, distinct",
    [("O", 1), ("I", 2), ("S", 2), ("Z", 2), ("T", 4), ("J", 4), ("L", 4)],
)
def test_distinct_rotation_states(kind, distinct):
    states = []
    s = instantiate(kind).shape
    for _ in range(4):
        if not any(np.array_equal(s, seen) for seen in states):
            states.append(s)
        s = rotate_shape(s)

    assert len(states) == distinct


def test_piece_rotated_keeps_position():
    piece = instantiate("I")
    piece.x, piece.y = 2, 5
    rotated = piece.rotated()

    assert (rotated.x, rotated.y) == (2, 5)
    assert rotated.shape.shape == (4, 1)
    assert piece.shape.shape == (1, 4)


def test_piece_dict_round_trip():
    piece = instantiate("S").rotated().moved(1, -1)
    restored = Piece.from_dict(piece.to_dict())

    assert restored.to_dict() == piece.to_dict()
    assert restored.id == 4


def test_piece_from_dict_rejects_bad_data():
    good = instantiate("T").to_dict()

    with pytest.raises(KeyError):
        Piece.from_dict({**good, "kind": "Q"})
    with pytest.raises(ValueError):
        Piece.from_dict({**good, "shape": [[0, 2], [1, 1]]})
    with pytest.raises(ValueError):
        Piece.from_dict({**good, "shape": []})
    with pytest.raises(ValueError):
        Piece.from_dict({**good, "shape": [[1, 1, 1], [0, 0, 1]]})
    with pytest.raises(KeyError):
        Piece.from_dict({"kind": "T", "shape": good["shape"]})


def test_randomizer_only_returns_known_kinds_and_covers_all():
    rng = UniformRandomizer(seed=7)
    draws = [rng.random_kind() for _ in range(700)]

    assert set(draws) == set(PIECE_KINDS)


def test_randomizer_is_reproducible_with_seed():
    a = UniformRandomizer(seed=123)
    b = UniformRandomizer(seed=123)

    assert [a.random_kind() for _ in range(50)] == [b.random_kind() for _ in range(50)]


def test_randomizer_is_roughly_uniform():
    rng = UniformRandomizer(seed=2024)
    draws = [rng.random_kind() for _ in range(7000)]

    for kind in PIECE_KINDS:
        assert 800 < draws.count(kind) < 1200
