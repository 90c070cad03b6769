"""
Pygame renderer for the game.

Draws the board, the falling piece, the next piece preview and a sidebar
with score / level / lines, plus overlays for the title, pause and game-over
screens. Everything is drawn from TetrisGame.get_state(), so the renderer
never reaches into engine internals.
"""

from __future__ import annotations

from typing import Any

try:
    import pygame
except ImportError:
    pygame = None  # type: ignore[assignment]

from blockfall.game.tetris import TetrisGame


# ── Color constants ───────────────────────────────────────────────────────
BACKGROUND_COLOR = (222, 225, 221)
GRID_LINE_COLOR = (200, 204, 199)
BORDER_COLOR = (25, 58, 62)
TEXT_COLOR = (25, 58, 62)
SIDEBAR_BG_COLOR = (238, 240, 236)
EMPTY_CELL_COLOR = (255, 255, 255)
OVERLAY_COLOR = (25, 58, 62, 170)
OVERLAY_TEXT_COLOR = (255, 255, 255)


def hex_to_rgb(color: str) -> tuple[int, int, int]:
    """Convert '#RRGGBB' to an (r, g, b) tuple."""
    c = pygame.Color(color)
    return c.r, c.g, c.b


class TetrisRenderer:
    """Pygame-based renderer for a TetrisGame.

    The window is divided into:
      - Left: board area (cell_size * grid_width) x (cell_size * grid_height)
      - Right: sidebar with next piece, score, level, lines

    Attributes:
        game: The TetrisGame being rendered.
        cell_size: Pixel size of each grid cell.
        screen: Pygame display surface (created on first render).
    """

    SIDEBAR_WIDTH_CELLS: int = 6

    def __init__(self, game: TetrisGame, cell_size: int = 30) -> None:
        """Set up sizes; the window opens on the first render() call.

        Args:
            game: The TetrisGame instance to render.
            cell_size: Size of each grid cell in pixels.
        """
        if pygame is None:
            raise ImportError("pygame is required for rendering. Install it: pip install pygame")

        self.game = game
        self.cell_size = cell_size

        self.board_pixel_width = cell_size * game.config.grid_width
        self.board_pixel_height = cell_size * game.config.grid_height
        self.sidebar_width = cell_size * self.SIDEBAR_WIDTH_CELLS
        self.window_width = self.board_pixel_width + self.sidebar_width
        self.window_height = self.board_pixel_height

        self.screen: pygame.Surface | None = None
        self._font: pygame.font.Font | None = None
        self._large_font: pygame.font.Font | None = None
        self._initialized: bool = False

    def render(self, has_save: bool = False) -> None:
        """Draw the current game state and flip the display.

        Args:
            has_save: Whether the title screen should offer to continue.
        """
        if not self._initialized:
            self._init_pygame()

        state = self.game.get_state()
        self.screen.fill(BACKGROUND_COLOR)
        self._draw_board(state["board"])
        if state["current_piece"] is not None:
            self._draw_piece(state["current_piece"])
        self._draw_sidebar(state)

        pygame.draw.rect(
            self.screen,
            BORDER_COLOR,
            (0, 0, self.board_pixel_width, self.board_pixel_height),
            2,
        )

        if state["status"] == "ready":
            lines = ["BLOCKFALL", "ENTER: new game"]
            if has_save:
                lines.append("C: continue")
            self._draw_overlay(lines)
        elif state["paused"]:
            self._draw_overlay(["PAUSED", "P to resume"])
        elif state["game_over"]:
            self._draw_overlay(["GAME OVER", f"Score: {state['score']}", "ENTER: play again"])

        pygame.display.flip()

    def _init_pygame(self) -> None:
        pygame.init()
        self.screen = pygame.display.set_mode((self.window_width, self.window_height))
        pygame.display.set_caption("Blockfall")
        self._font = pygame.font.SysFont("monospace", 20)
        self._large_font = pygame.font.SysFont("monospace", 32, bold=True)
        self._initialized = True

    def _draw_board(self, board: list[list[str | None]]) -> None:
        for row, cells in enumerate(board):
            for col, color in enumerate(cells):
                x = col * self.cell_size
                y = row * self.cell_size
                fill = hex_to_rgb(color) if color else EMPTY_CELL_COLOR
                pygame.draw.rect(self.screen, fill, (x, y, self.cell_size, self.cell_size))
                pygame.draw.rect(
                    self.screen, GRID_LINE_COLOR, (x, y, self.cell_size, self.cell_size), 1
                )

    def _draw_piece(self, piece: dict[str, Any]) -> None:
        """Draw the falling piece; rows above the board are skipped."""
        color = hex_to_rgb(piece["color"])
        for r, row in enumerate(piece["shape"]):
            for c, filled in enumerate(row):
                board_row = piece["y"] + r
                if not filled or board_row < 0:
                    continue
                self._draw_block(
                    (piece["x"] + c) * self.cell_size,
                    board_row * self.cell_size,
                    self.cell_size,
                    color,
                )

    def _draw_block(self, x: int, y: int, size: int, color: tuple[int, int, int]) -> None:
        pygame.draw.rect(self.screen, color, (x, y, size - 1, size - 1))
        darker = tuple(max(0, cv - 40) for cv in color)
        pygame.draw.rect(self.screen, darker, (x, y, size - 1, size - 1), 1)

    def _draw_sidebar(self, state: dict[str, Any]) -> None:
        sidebar_x = self.board_pixel_width
        pygame.draw.rect(
            self.screen,
            SIDEBAR_BG_COLOR,
            (sidebar_x, 0, self.sidebar_width, self.window_height),
        )

        x = sidebar_x + 15
        self._draw_piece_preview(state["next_piece"], x, 20, "NEXT")

        text_y = 180
        for label, value in (("SCORE", state["score"]), ("LEVEL", state["level"]), ("LINES", state["lines"])):
            self._draw_text(label, x, text_y)
            self._draw_text(str(value), x, text_y + 25)
            text_y += 65

    def _draw_piece_preview(
        self,
        piece: dict[str, Any] | None,
        x_offset: int,
        y_offset: int,
        label: str,
    ) -> None:
        """Draw a small piece preview centered in a box.

        Args:
            piece: Piece dict to preview, or None (draws an empty box).
            x_offset: Pixel X position for the preview box.
            y_offset: Pixel Y position for the label.
            label: Text above the box.
        """
        preview_cell = self.cell_size * 2 // 3
        box_size = preview_cell * 5

        self._draw_text(label, x_offset, y_offset)
        box_y = y_offset + 25
        pygame.draw.rect(self.screen, EMPTY_CELL_COLOR, (x_offset, box_y, box_size, box_size))
        pygame.draw.rect(self.screen, BORDER_COLOR, (x_offset, box_y, box_size, box_size), 1)

        if piece is None:
            return

        shape = piece["shape"]
        color = hex_to_rgb(piece["color"])
        offset_x = x_offset + (box_size - len(shape[0]) * preview_cell) // 2
        offset_y = box_y + (box_size - len(shape) * preview_cell) // 2
        for r, row in enumerate(shape):
            for c, filled in enumerate(row):
                if filled:
                    self._draw_block(
                        offset_x + c * preview_cell,
                        offset_y + r * preview_cell,
                        preview_cell,
                        color,
                    )

    def _draw_overlay(self, lines: list[str]) -> None:
        overlay = pygame.Surface((self.board_pixel_width, self.board_pixel_height), pygame.SRCALPHA)
        overlay.fill(OVERLAY_COLOR)
        self.screen.blit(overlay, (0, 0))

        cx = self.board_pixel_width // 2
        y = self.board_pixel_height // 2 - 40
        for i, line in enumerate(lines):
            font = self._large_font if i == 0 else self._font
            surface = font.render(line, True, OVERLAY_TEXT_COLOR)
            self.screen.blit(surface, (cx - surface.get_width() // 2, y))
            y += surface.get_height() + 12

    def _draw_text(self, text: str, x: int, y: int, color: tuple[int, int, int] = TEXT_COLOR) -> None:
        surface = self._font.render(text, True, color)
        self.screen.blit(surface, (x, y))

    def close(self) -> None:
        """Shut down Pygame and close the window."""
        if self._initialized:
            pygame.quit()
            self._initialized = False
