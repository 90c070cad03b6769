"""
Save/resume support.

The game is stored as one JSON document under a fixed key inside a small
key-value file, so other settings can share the file later. A missing file,
broken JSON or an absent key all mean "no save".
"""

from __future__ import annotations

import json
import pathlib
from typing import Any

from blockfall.game.events import EventType, GameEvent
from blockfall.game.tetris import SaveStateError, TetrisGame

DEFAULT_SAVE_PATH = pathlib.Path.home() / ".blockfall" / "save.json"
SAVE_KEY = "blockfall_game_state"


class SaveStore:
    """Durable key-value file holding at most one saved game.

    Args:
        path: JSON file to read and write.
        key: Entry under which the game state is kept.
    """

    def __init__(self, path: str | pathlib.Path = DEFAULT_SAVE_PATH, key: str = SAVE_KEY) -> None:
        self.path = pathlib.Path(path)
        self.key = key

    def save(self, state: dict[str, Any]) -> None:
        entries = self._read_entries()
        entries[self.key] = state
        self._write_entries(entries)

    def load(self) -> dict[str, Any] | None:
        """Return the saved state, or None if there is no usable save."""
        state = self._read_entries().get(self.key)
        return state if isinstance(state, dict) else None

    def has_save(self) -> bool:
        return self.load() is not None

    def clear(self) -> None:
        entries = self._read_entries()
        if self.key in entries:
            del entries[self.key]
            self._write_entries(entries)

    def _read_entries(self) -> dict[str, Any]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                entries = json.load(f)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            print(f"Ignoring unreadable save file {self.path}: {e}")
            return {}
        return entries if isinstance(entries, dict) else {}

    def _write_entries(self, entries: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(entries, f)
        tmp_path.replace(self.path)


class Autosaver:
    """Saves the game as it is played and drops the save on game over.

    A save happens after a lock that cleared lines when the total line count
    is a multiple of `interval`.

    Args:
        game: Engine to watch.
        store: Where to save.
        interval: Line-count period between saves.
    """

    def __init__(self, game: TetrisGame, store: SaveStore, interval: int = 3) -> None:
        if interval <= 0:
            raise ValueError(f"Autosave interval must be positive, got {interval}")
        self.game = game
        self.store = store
        self.interval = interval
        self.saves = 0
        game.events.subscribe(EventType.PIECE_LOCKED, self._on_locked)
        game.events.subscribe(EventType.GAME_OVER, self._on_game_over)

    def detach(self) -> None:
        self.game.events.unsubscribe(EventType.PIECE_LOCKED, self._on_locked)
        self.game.events.unsubscribe(EventType.GAME_OVER, self._on_game_over)

    def _on_locked(self, event: GameEvent) -> None:
        if self.game.game_over:
            return
        if event.data.get("lines", 0) > 0 and self.game.lines % self.interval == 0:
            self.store.save(self.game.serialize())
            self.saves += 1

    def _on_game_over(self, event: GameEvent) -> None:
        self.store.clear()


def restore_saved_game(game: TetrisGame, store: SaveStore) -> bool:
    """Resume `game` from the store if it holds a playable save.

    A save that cannot be restored, or one of a finished game, is removed.

    Returns:
        True if the game was restored, False if the caller should start fresh.
    """
    data = store.load()
    if data is None:
        return False
    try:
        game.restore(data)
    except SaveStateError as e:
        print(f"Discarding saved game: {e}")
        store.clear()
        return False
    if game.game_over or game.current_piece is None:
        store.clear()
        return False
    return True
