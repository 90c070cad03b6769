"""
Game orchestrator: state machine, gravity, scoring, levels and save/restore.

This module ties the Board, the piece catalog and a randomizer into the
playable game. A driver (the pygame play loop, a test, a bot) calls the
command methods and tick(dt) once per frame; the engine mutates its
GameState and publishes events on its EventBus. It never draws, plays sound
or touches storage.
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from typing import Any, Mapping, Protocol

from blockfall.game.board import Board
from blockfall.game.events import EventBus, EventType, GameEvent
from blockfall.game.pieces import Piece, instantiate
from blockfall.game.randomizer import UniformRandomizer


# NES-style scoring table: index = lines cleared by one lock (0-4)
SCORE_TABLE: list[int] = [0, 40, 100, 300, 1200]


class SaveStateError(ValueError):
    """A saved game could not be turned back into a GameState."""


class GameStatus(enum.Enum):
    READY = "ready"
    RUNNING = "running"
    PAUSED = "paused"
    GAME_OVER = "game_over"


class Randomizer(Protocol):
    def random_kind(self) -> str: ...


@dataclass
class GameConfig:
    """Tunable rules of a game.

    Attributes:
        grid_width: Board width in columns.
        grid_height: Board height in rows.
        fall_interval_ms: Gravity period at level 1.
        fall_interval_step_ms: How much faster gravity gets per level.
        min_fall_interval_ms: Fastest gravity period.
        lines_per_level: Lines needed to advance one level.
    """

    grid_width: int = 10
    grid_height: int = 20
    fall_interval_ms: float = 1000
    fall_interval_step_ms: float = 50
    min_fall_interval_ms: float = 50
    lines_per_level: int = 10

    def __post_init__(self) -> None:
        for name in ("grid_width", "grid_height", "fall_interval_ms", "lines_per_level"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)!r}")
        if self.fall_interval_step_ms < 0 or self.min_fall_interval_ms < 0:
            raise ValueError("Fall interval step and minimum must not be negative")

    @classmethod
    def from_dict(cls, config: Mapping[str, Any]) -> "GameConfig":
        """Build a config from a loaded YAML mapping, ignoring unrelated keys."""
        known = cls.__dataclass_fields__
        return cls(**{k: v for k, v in config.items() if k in known})


@dataclass
class GameState:
    """Everything needed to resume a game exactly where it was.

    Attributes:
        board: The locked cells.
        current_piece: Falling piece, None before the first spawn.
        next_piece: Preview piece, None before the first spawn.
        score: Points so far.
        lines: Total lines cleared.
        level: Current level (starts at 1).
        status: Ready, running, paused or game over.
        fall_accumulator: Milliseconds elapsed since the last gravity step.
        fall_interval_ms: Current gravity period.
        lines_this_level: Lines cleared since the last level-up.
    """

    board: Board
    current_piece: Piece | None = None
    next_piece: Piece | None = None
    score: int = 0
    lines: int = 0
    level: int = 1
    status: GameStatus = GameStatus.READY
    fall_accumulator: float = 0
    fall_interval_ms: float = 1000
    lines_this_level: int = 0

    @property
    def game_over(self) -> bool:
        return self.status is GameStatus.GAME_OVER

    @property
    def paused(self) -> bool:
        return self.status is GameStatus.PAUSED

    def to_dict(self) -> dict[str, Any]:
        """Plain JSON-compatible snapshot of the state."""
        return {
            "grid": self.board.to_list(),
            "current_piece": self.current_piece.to_dict() if self.current_piece else None,
            "next_piece": self.next_piece.to_dict() if self.next_piece else None,
            "score": self.score,
            "lines": self.lines,
            "level": self.level,
            "game_over": self.game_over,
            "paused": self.paused,
            "fall_accumulator": self.fall_accumulator,
            "fall_interval_ms": self.fall_interval_ms,
            "lines_this_level": self.lines_this_level,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], width: int, height: int) -> "GameState":
        """Rebuild a state saved by to_dict() on a width x height board.

        Raises:
            SaveStateError: Missing fields, wrong types or impossible values.
        """
        try:
            board = Board(width, height)
            board.load_list(data["grid"])
            current = data.get("current_piece")
            upcoming = data.get("next_piece")
            state = cls(
                board=board,
                current_piece=Piece.from_dict(current) if current else None,
                next_piece=Piece.from_dict(upcoming) if upcoming else None,
                score=int(data["score"]),
                lines=int(data["lines"]),
                level=int(data["level"]),
                fall_accumulator=float(data["fall_accumulator"]),
                fall_interval_ms=float(data["fall_interval_ms"]),
                lines_this_level=int(data["lines_this_level"]),
            )
            game_over = bool(data.get("game_over", False))
            paused = bool(data.get("paused", False))
        except (KeyError, TypeError, ValueError, OverflowError) as e:
            raise SaveStateError(f"Invalid saved game: {e}") from e

        if state.score < 0 or state.lines < 0 or state.lines_this_level < 0:
            raise SaveStateError("Score and line counters must not be negative")
        if state.level < 1:
            raise SaveStateError(f"Level must be at least 1, got {state.level}")
        if not (math.isfinite(state.fall_interval_ms) and math.isfinite(state.fall_accumulator)):
            raise SaveStateError("Fall timing must be finite")
        if state.fall_interval_ms <= 0:
            raise SaveStateError("Fall interval must be positive")
        if (state.current_piece is None) != (state.next_piece is None):
            raise SaveStateError("Saved game must have both pieces or neither")
        piece = state.current_piece
        if piece is not None and not game_over:
            if not board.is_valid_placement(piece.shape, piece.x, piece.y):
                raise SaveStateError(
                    f"Current piece does not fit the board at ({piece.x}, {piece.y})"
                )

        if game_over:
            state.status = GameStatus.GAME_OVER
        elif state.current_piece is None:
            state.status = GameStatus.READY
        elif paused:
            state.status = GameStatus.PAUSED
        else:
            state.status = GameStatus.RUNNING
        return state


class TetrisGame:
    """Falling-block game engine.

    All commands are no-ops (returning False / 0) unless the game is running
    with an active piece. Rotation is clockwise only and never kicks: a
    rotation that does not fit at the current position is simply rejected.

    Attributes:
        config: Rules in effect.
        randomizer: Source of piece kinds.
        events: Bus on which every game event is published.
        state: The mutable GameState (replaced by new_game() and restore()).
    """

    def __init__(
        self,
        config: GameConfig | None = None,
        randomizer: Randomizer | None = None,
        events: EventBus | None = None,
    ) -> None:
        """Create an engine in the READY state with an empty board.

        Args:
            config: Game rules; defaults to GameConfig().
            randomizer: Anything with random_kind(); defaults to a uniform draw.
            events: Bus to publish on; a new one is created if omitted.
        """
        self.config = config or GameConfig()
        self.randomizer = randomizer or UniformRandomizer()
        self.events = events or EventBus()
        self.state = self._fresh_state()

    @classmethod
    def from_saved(
        cls,
        data: Mapping[str, Any],
        config: GameConfig | None = None,
        randomizer: Randomizer | None = None,
    ) -> "TetrisGame":
        """Build an engine resumed from serialize() output.

        Raises:
            SaveStateError: The save cannot be restored.
        """
        game = cls(config, randomizer)
        game.restore(data)
        return game

    # ── Read-only views ──────────────────────────────────────────────────

    @property
    def board(self) -> Board:
        return self.state.board

    @property
    def current_piece(self) -> Piece | None:
        return self.state.current_piece

    @property
    def next_piece(self) -> Piece | None:
        return self.state.next_piece

    @property
    def status(self) -> GameStatus:
        return self.state.status

    @property
    def score(self) -> int:
        return self.state.score

    @property
    def lines(self) -> int:
        return self.state.lines

    @property
    def level(self) -> int:
        return self.state.level

    @property
    def game_over(self) -> bool:
        return self.state.game_over

    @property
    def paused(self) -> bool:
        return self.state.paused

    def get_state(self) -> dict[str, Any]:
        """Return a snapshot for renderers.

        Returns:
            Dict with keys:
              - board: list of rows of color strings (None = empty)
              - current_piece: piece dict (kind, shape, color, x, y) or None
              - next_piece: piece dict or None
              - score, lines, level: ints
              - paused, game_over: bools
              - status: GameStatus value string
        """
        s = self.state
        return {
            "board": s.board.colors(),
            "current_piece": s.current_piece.to_dict() if s.current_piece else None,
            "next_piece": s.next_piece.to_dict() if s.next_piece else None,
            "score": s.score,
            "lines": s.lines,
            "level": s.level,
            "paused": s.paused,
            "game_over": s.game_over,
            "status": s.status.value,
        }

    # ── Lifecycle ─────────────────────────────────────────────────────────

    def new_game(self) -> None:
        """Start a fresh game: empty board, level 1, two new pieces."""
        self.state = self._fresh_state()
        self.state.current_piece = self._draw_piece()
        self.state.next_piece = self._draw_piece()
        self.state.status = GameStatus.RUNNING
        self._emit(EventType.GAME_STARTED)

    def pause(self) -> bool:
        if self.state.status is not GameStatus.RUNNING:
            return False
        self.state.status = GameStatus.PAUSED
        self._emit(EventType.PAUSED)
        return True

    def resume(self) -> bool:
        if self.state.status is not GameStatus.PAUSED:
            return False
        self.state.status = GameStatus.RUNNING
        self._emit(EventType.RESUMED)
        return True

    def toggle_pause(self) -> bool:
        """Pause a running game or resume a paused one.

        Returns:
            True if the status changed.
        """
        if self.state.status is GameStatus.PAUSED:
            return self.resume()
        return self.pause()

    # ── Commands ──────────────────────────────────────────────────────────

    def move_left(self) -> bool:
        return self.move_horizontal(-1)

    def move_right(self) -> bool:
        return self.move_horizontal(1)

    def move_horizontal(self, dx: int) -> bool:
        """Try to shift the current piece one column.

        Args:
            dx: -1 for left, +1 for right.

        Returns:
            True if the piece moved.
        """
        if not self._accepts_input():
            return False
        if self._move(dx, 0):
            self._emit(EventType.PIECE_MOVED, dx=dx, dy=0)
            return True
        return False

    def soft_drop(self) -> bool:
        """Move the piece one row down, locking it if it cannot fall.

        Returns:
            True if the piece moved down, False if it locked (or nothing
            was done).
        """
        if not self._accepts_input():
            return False
        return self._step_down()

    def hard_drop(self) -> int:
        """Drop the piece as far as it goes and lock it once.

        Returns:
            Number of rows dropped.
        """
        if not self._accepts_input():
            return 0
        rows = 0
        while self._move(0, 1):
            rows += 1
        self._emit(EventType.PIECE_HARD_DROPPED, rows=rows)
        self._lock_current()
        return rows

    def rotate(self) -> bool:
        """Try to rotate the current piece clockwise without kicks.

        Returns:
            True if the rotated shape fit at the current position.
        """
        if not self._accepts_input():
            return False
        rotated = self.state.current_piece.rotated()
        if not self.board.is_valid_placement(rotated.shape, rotated.x, rotated.y):
            return False
        self.state.current_piece = rotated
        self._emit(EventType.PIECE_ROTATED)
        return True

    def tick(self, delta_ms: float) -> bool:
        """Advance gravity by delta_ms milliseconds.

        At most one gravity step happens per call; the fall interval is
        subtracted from the accumulator once when it is crossed.

        Returns:
            True if a gravity step (move down or lock) happened.
        """
        if not self._accepts_input():
            return False
        s = self.state
        s.fall_accumulator += delta_ms
        if s.fall_accumulator < s.fall_interval_ms:
            return False
        s.fall_accumulator -= s.fall_interval_ms
        self._step_down()
        return True

    # ── Persistence ───────────────────────────────────────────────────────

    def serialize(self) -> dict[str, Any]:
        """Return the full game state as JSON-compatible data."""
        return self.state.to_dict()

    def restore(self, data: Mapping[str, Any]) -> None:
        """Replace the whole game state with a serialize() snapshot.

        The current state is untouched if the snapshot is invalid.

        Raises:
            SaveStateError: The snapshot is malformed or does not fit
                this engine's board size.
        """
        if not isinstance(data, Mapping):
            raise SaveStateError(f"Saved game must be a mapping, got {type(data).__name__}")
        self.state = GameState.from_dict(
            data, self.config.grid_width, self.config.grid_height
        )

    # ── Internals ─────────────────────────────────────────────────────────

    def _fresh_state(self) -> GameState:
        return GameState(
            board=Board(self.config.grid_width, self.config.grid_height),
            fall_interval_ms=self.config.fall_interval_ms,
        )

    def _accepts_input(self) -> bool:
        return (
            self.state.status is GameStatus.RUNNING
            and self.state.current_piece is not None
        )

    def _draw_piece(self) -> Piece:
        return instantiate(self.randomizer.random_kind(), self.config.grid_width)

    def _move(self, dx: int, dy: int) -> bool:
        piece = self.state.current_piece
        if not self.board.is_valid_placement(piece.shape, piece.x + dx, piece.y + dy):
            return False
        self.state.current_piece = piece.moved(dx, dy)
        return True

    def _step_down(self) -> bool:
        """One gravity step: fall one row or lock.

        Returns:
            True if the piece fell, False if it locked.
        """
        if self._move(0, 1):
            return True
        self._lock_current()
        return False

    def _lock_current(self) -> None:
        """Lock the piece, clear rows, score, and spawn the next piece.

        Events go out once the whole sequence is done, so listeners always
        see a consistent state (the new piece already in play).
        """
        s = self.state
        s.board.lock_piece(s.current_piece)
        cleared = s.board.clear_full_rows()
        leveled_up = self._award_lines(cleared)

        s.current_piece = s.next_piece
        s.next_piece = self._draw_piece()
        piece = s.current_piece
        blocked = not s.board.is_valid_placement(piece.shape, piece.x, piece.y)
        if blocked:
            s.status = GameStatus.GAME_OVER

        self._emit(EventType.PIECE_LOCKED, lines=cleared)
        if cleared:
            self._emit(EventType.LINES_CLEARED, count=cleared, score=s.score)
        if leveled_up:
            self._emit(EventType.LEVEL_UP, level=s.level, fall_interval_ms=s.fall_interval_ms)
        if blocked:
            self._emit(EventType.GAME_OVER, score=s.score, lines=s.lines, level=s.level)

    def _award_lines(self, cleared: int) -> bool:
        """Apply scoring and leveling for one lock.

        Score uses the level in effect before any level-up from this clear.

        Returns:
            True if the level went up.
        """
        if cleared <= 0:
            return False
        s = self.state
        s.score += SCORE_TABLE[min(cleared, len(SCORE_TABLE) - 1)] * s.level
        s.lines += cleared
        s.lines_this_level += cleared

        if s.lines_this_level < self.config.lines_per_level:
            return False
        s.level += 1
        s.lines_this_level = 0
        s.fall_interval_ms = max(
            self.config.min_fall_interval_ms,
            s.fall_interval_ms - self.config.fall_interval_step_ms,
        )
        return True

    def _emit(self, event_type: EventType, **data: Any) -> None:
        self.events.emit(GameEvent(event_type, data))
