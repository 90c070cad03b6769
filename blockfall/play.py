"""
Keyboard play mode.

The loop reads pygame events, turns key presses into engine commands, feeds
the frame time to TetrisGame.tick() and redraws. Saving is left to an
Autosaver subscribed to the engine's events.
"""

from __future__ import annotations

import pathlib
from typing import Any, Callable

try:
    import pygame
except ImportError:
    pygame = None  # type: ignore[assignment]

from blockfall.game.events import EventType, GameEvent
from blockfall.game.randomizer import UniformRandomizer
from blockfall.game.tetris import GameConfig, TetrisGame
from blockfall.renderer import TetrisRenderer
from blockfall.storage import DEFAULT_SAVE_PATH, Autosaver, SaveStore, restore_saved_game


# ── Keyboard mapping ─────────────────────────────────────────────────────
# Arrow keys to move / rotate / soft drop, Space for hard drop
KEY_MAP: dict[int, Callable[[TetrisGame], Any]] = {}
if pygame is not None:
    KEY_MAP = {
        pygame.K_LEFT: TetrisGame.move_left,
        pygame.K_RIGHT: TetrisGame.move_right,
        pygame.K_DOWN: TetrisGame.soft_drop,
        pygame.K_UP: TetrisGame.rotate,
        pygame.K_SPACE: TetrisGame.hard_drop,
    }

# Held-key repeat (ms before first repeat, ms between repeats)
KEY_REPEAT_DELAY = 170
KEY_REPEAT_INTERVAL = 50


def _log_event(event: GameEvent) -> None:
    if event.type is EventType.LEVEL_UP:
        print(f"Level {event.data['level']} | fall interval {event.data['fall_interval_ms']:.0f} ms")
    elif event.type is EventType.GAME_OVER:
        print(
            f"Game over | Score: {event.data['score']} | Lines: {event.data['lines']}"
            f" | Level: {event.data['level']}"
        )


def play_manual(config: dict[str, Any], mode: str = "play") -> None:
    """Run the game in keyboard play mode.

    Controls:
      - Left/Right arrow: move piece
      - Down arrow: soft drop
      - Up arrow: rotate clockwise
      - Space: hard drop
      - P: pause / resume
      - Enter / N: new game, C: continue a saved game (title screen)
      - Escape / close window: quit

    Args:
        config: Config dict loaded from game.yaml.
        mode: 'play' resumes a save if there is one, 'continue' requires a
            save, 'new' discards any save and starts fresh.

    Raises:
        ImportError: pygame is not installed.
        RuntimeError: mode is 'continue' and there is no usable save.
    """
    if pygame is None:
        raise ImportError("pygame is required for play mode. Install it: pip install pygame")

    game_config = GameConfig.from_dict(config)
    store = SaveStore(pathlib.Path(config.get("save_path") or DEFAULT_SAVE_PATH).expanduser())
    game = TetrisGame(game_config, UniformRandomizer(config.get("seed")))
    game.events.subscribe_all(_log_event)
    Autosaver(game, store, interval=config.get("autosave_interval", 3))

    if mode == "new":
        store.clear()
    elif restore_saved_game(game, store):
        print(f"Resumed saved game from {store.path} (score {game.score}, level {game.level})")
        game.pause()
    elif mode == "continue":
        raise RuntimeError(f"No saved game found in {store.path}")

    renderer = TetrisRenderer(game, cell_size=config.get("cell_size", 30))
    # Window must exist before pygame.event.get() is used
    renderer.render(has_save=store.has_save())
    pygame.key.set_repeat(KEY_REPEAT_DELAY, KEY_REPEAT_INTERVAL)
    clock = pygame.time.Clock()
    fps = config.get("fps", 60)

    running = True
    while running:
        dt = clock.tick(fps)
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
                break
            if event.type != pygame.KEYDOWN:
                continue
            if event.key == pygame.K_ESCAPE:
                running = False
                break

            if event.key in (pygame.K_RETURN, pygame.K_n) and (game.game_over or game.current_piece is None):
                game.new_game()
            elif event.key == pygame.K_c and game.current_piece is None:
                if restore_saved_game(game, store):
                    print(f"Resumed saved game (score {game.score}, level {game.level})")
            elif event.key == pygame.K_p:
                game.toggle_pause()
            elif event.key in KEY_MAP:
                KEY_MAP[event.key](game)

        if not running:
            break

        game.tick(dt)
        renderer.render(has_save=game.current_piece is None and store.has_save())

    if not game.game_over and game.current_piece is not None:
        store.save(game.serialize())
        print(f"Game saved to {store.path}")
    renderer.close()
