"""Piece-kind selection: an independent uniform draw per piece."""

from __future__ import annotations

import random

from blockfall.game.pieces import PIECE_KINDS


class UniformRandomizer:
    """Picks each piece kind with probability 1/7, independently every call.

    There is no bag and no repeat avoidance, so streaks and droughts happen.

    Args:
        seed: Optional seed for a reproducible sequence.
    """

    def __init__(self, seed: int | None = None) -> None:
        self._rng = random.Random(seed)

    def random_kind(self) -> str:
        return self._rng.choice(PIECE_KINDS)
