"""An overhead map of the level drawn over the screen."""

from __future__ import annotations

from typing import Optional, Sequence

from raycube.config import SCREEN_HEIGHT
from raycube.player import Player
from raycube.render import Frame

Grid = Sequence[Sequence[str]]

PLAYER_COLOR = 90000
BACKGROUND_SPRITE = "assets/sprites/handmap.xpm"

_TILE_COLORS = {
    "1": 7995649,
    "0": 5263440,
    "D": 15118117,
    "i": 15118117,
    "d": 5061133,
}
_RIGHT_MARGIN = 150
_WIDTH_CELLS = 10


def minimap_scale(height: int) -> int:
    """Size in pixels of one map cell for a map with ``height`` rows."""
    if height <= 0:
        raise ValueError(f"map height must be positive, got {height}")
    return int((SCREEN_HEIGHT // height) * 0.3)


def tile_color(tile: str) -> Optional[int]:
    """Minimap colour of a tile, or None for tiles left undrawn."""
    return _TILE_COLORS.get(tile)


def _draw_box(frame: Frame, top: int, left: int, scale: int, color: int) -> None:
    y0 = max(top + 1, 0)
    y1 = min(top + scale, frame.height)
    x0 = max(left + 1, 0)
    x1 = min(left + scale, frame.width - _RIGHT_MARGIN, frame.width)
    if y0 < y1 and x0 < x1:
        frame.pixels[y0:y1, x0:x1] = color


def draw_minimap(frame: Frame, grid: Grid, player: Player) -> None:
    """Draw every known tile as a box, then the player's cell on top.

    The caller supplies the background already painted into the frame.
    """
    height = len(grid)
    scale = minimap_scale(height)
    origin_y = frame.height // 2 - (height * scale) // 2
    origin_x = frame.width // 2 - (_WIDTH_CELLS * scale) // 2
    for row_index, row in enumerate(grid):
        for col_index, tile in enumerate(row):
            color = tile_color(tile)
            if color is not None:
                _draw_box(
                    frame,
                    origin_y + row_index * scale,
                    origin_x + col_index * scale,
                    scale,
                    color,
                )
    _draw_box(
        frame,
        int(player.x) * scale + origin_y,
        int(player.y) * scale + origin_x,
        scale,
        PLAYER_COLOR,
    )