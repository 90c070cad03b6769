"""
Game events published by the engine.

Renderers, audio and the autosaver react to what happens in the game by
subscribing to an EventBus instead of being called from inside game logic.
"""

from __future__ import annotations

import enum
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Callable


class EventType(enum.Enum):
    GAME_STARTED = "game_started"
    PIECE_MOVED = "piece_moved"
    PIECE_ROTATED = "piece_rotated"
    PIECE_HARD_DROPPED = "piece_hard_dropped"
    PIECE_LOCKED = "piece_locked"
    LINES_CLEARED = "lines_cleared"
    LEVEL_UP = "level_up"
    GAME_OVER = "game_over"
    PAUSED = "paused"
    RESUMED = "resumed"


@dataclass(frozen=True)
class GameEvent:
    """Something that happened in the game.

    Attributes:
        type: What happened.
        data: Event payload, e.g. {"count": 4} for LINES_CLEARED or
            {"score": 1200} for GAME_OVER.
    """

    type: EventType
    data: dict[str, Any] = field(default_factory=dict)


Listener = Callable[[GameEvent], None]


class EventBus:
    """Synchronous publish/subscribe list.

    Listeners run in subscription order, inside emit(). Listeners for a
    specific type run before catch-all listeners.
    """

    def __init__(self) -> None:
        self._listeners: dict[EventType, list[Listener]] = defaultdict(list)
        self._catch_all: list[Listener] = []

    def subscribe(self, event_type: EventType, listener: Listener) -> None:
        self._listeners[event_type].append(listener)

    def subscribe_all(self, listener: Listener) -> None:
        self._catch_all.append(listener)

    def unsubscribe(self, event_type: EventType | None, listener: Listener) -> None:
        """Remove a listener; event_type None removes a catch-all listener.

        Raises:
            ValueError: The listener was never subscribed.
        """
        if event_type is None:
            self._catch_all.remove(listener)
        else:
            self._listeners[event_type].remove(listener)

    def emit(self, event: GameEvent) -> None:
        for listener in list(self._listeners.get(event.type, ())):
            listener(event)
        for listener in list(self._catch_all):
            listener(event)
