"""Drawing wall slices, floor and ceiling into a frame buffer."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from os import PathLike
from typing import Mapping, Sequence, Union

import numpy as np

from raycube.config import SCREEN_HEIGHT, SCREEN_WIDTH, TEXTURE_H, TextureSlot
from raycube.fog import fog_ceiling, fog_floor, wall_fog
from raycube.player import Player
from raycube.raycast import RayHit, cast, texture_column
from raycube.scene import SceneError

Grid = Sequence[Sequence[str]]

DOOR_SPRITES = {
    TextureSlot.DOOR: "assets/sprites/door.xpm",
    TextureSlot.DOOR_MID: "assets/sprites/door_mid.xpm",
    TextureSlot.DOOR_SIDE: "assets/sprites/door_side.xpm",
}


@dataclass(frozen=True, eq=False)
class Texture:
    """A wall texture as a ``(height, width)`` array of ``0xRRGGBB`` values."""

    pixels: np.ndarray

    def __post_init__(self) -> None:
        array = np.asarray(self.pixels, dtype=np.uint32)
        if array.ndim != 2 or array.size == 0:
            raise ValueError("a texture needs a non-empty two-dimensional pixel array")
        object.__setattr__(self, "pixels", array)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    def pixel(self, x: int, y: int) -> int:
        """Colour at column ``x`` and row ``y``."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError((x, y))
        return int(self.pixels[y, x])


def load_texture(path: Union[str, "PathLike[str]"], label: str) -> Texture:
    """Load an image file as a texture; ``label`` names it in errors."""
    import pygame

    try:
        surface = pygame.image.load(str(path))
    except (pygame.error, OSError) as exc:
        raise SceneError(f"No texture created ({label})") from exc
    rgb = pygame.surfarray.array3d(surface).astype(np.uint32)
    packed = (rgb[..., 0] << 16) | (rgb[..., 1] << 8) | rgb[..., 2]
    return Texture(packed.T.copy())


@dataclass(eq=False)
class Frame:
    """A screen-sized buffer of ``0xRRGGBB`` pixels, indexed ``[row, column]``."""

    width: int = SCREEN_WIDTH
    height: int = SCREEN_HEIGHT
    pixels: np.ndarray = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"frame size must be positive, got {self.width}x{self.height}")
        self.pixels = np.zeros((self.height, self.width), dtype=np.uint32)

    def _check(self, x: int, y: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError((x, y))

    def put(self, x: int, y: int, color: int) -> None:
        """Set the pixel at column ``x`` and row ``y``."""
        self._check(x, y)
        self.pixels[y, x] = color & 0xFFFFFFFF

    def get(self, x: int, y: int) -> int:
        """Colour of the pixel at column ``x`` and row ``y``."""
        self._check(x, y)
        return int(self.pixels[y, x])

    def to_rgb(self) -> np.ndarray:
        """The frame as a ``(width, height, 3)`` array of 8-bit channels."""
        rgb = np.empty((self.width, self.height, 3), dtype=np.uint8)
        columns = self.pixels.T
        rgb[..., 0] = (columns >> 16) & 0xFF
        rgb[..., 1] = (columns >> 8) & 0xFF
        rgb[..., 2] = columns & 0xFF
        return rgb


def _cdiv2(value: int) -> int:
    return int(value / 2)


@lru_cache(maxsize=32)
def _backdrop(ceiling: int, floor: int, pitch: int, height: int) -> np.ndarray:
    """Ceiling and floor colours for every row of a column."""
    half = height // 2
    horizon = half + pitch
    ceiling_black = _cdiv2(half + (half - half // 2)) + pitch
    ceiling_fog = half // 2 - 100 + pitch
    floor_stop = half + half // 2 + pitch
    floor_black = _cdiv2(half + floor_stop + pitch)
    column = np.zeros(height, dtype=np.uint32)
    for row in range(height):
        if row < horizon:
            if row > ceiling_black:
                color = 0
            elif row >= ceiling_fog:
                color = fog_ceiling(ceiling, row, pitch)
            else:
                color = ceiling
        elif row < floor_black:
            color = 0
        elif row < floor_stop + 50:
            color = fog_floor(floor, row, pitch)
        else:
            color = floor
        column[row] = color & 0xFFFFFFFF
    column.setflags(write=False)
    return column


def _check_column(frame: Frame, column: int) -> None:
    if not 0 <= column < frame.width:
        raise IndexError(column)


def draw_floor_ceiling(
    frame: Frame,
    column: int,
    top: int,
    bottom: int,
    ceiling: int,
    floor: int,
    pitch: int = 0,
) -> None:
    """Paint the ceiling above ``top`` and the floor from ``bottom`` down."""
    _check_column(frame, column)
    backdrop = _backdrop(ceiling & 0xFFFFFF, floor & 0xFFFFFF, pitch, frame.height)
    horizon = frame.height // 2 + pitch
    ceiling_end = max(0, min(top, horizon, frame.height))
    frame.pixels[:ceiling_end, column] = backdrop[:ceiling_end]
    floor_start = max(0, horizon, bottom)
    if floor_start < frame.height:
        frame.pixels[floor_start:, column] = backdrop[floor_start:]


def wall_texture_slot(hit: RayHit) -> TextureSlot:
    """Texture to show for a hit: the door's own, or one chosen by the wall face."""
    if hit.slot is not None:
        return hit.slot
    if hit.side:
        return TextureSlot.EAST if hit.dir_y > 0 else TextureSlot.WEST
    return TextureSlot.NORTH if hit.dir_x > 0 else TextureSlot.SOUTH


def draw_wall(
    frame: Frame,
    hit: RayHit,
    player: Player,
    textures: Mapping[TextureSlot, Texture],
    column: int,
    pitch: int = 0,
) -> int:
    """Draw the textured, fogged wall slice of a hit; return the rows drawn."""
    _check_column(frame, column)
    count = hit.bottom - hit.top
    if count <= 0 or hit.line_height <= 0:
        return 0
    texture = textures[wall_texture_slot(hit)]
    step = TEXTURE_H / hit.line_height
    start = (hit.top - pitch - frame.height // 2 + hit.line_height // 2) * step
    positions = np.cumsum(np.concatenate(([start], np.full(count - 1, step))))
    tex_y = np.trunc(positions).astype(np.int64) & (TEXTURE_H - 1)
    tex_x = texture_column(hit, player) % texture.width
    colors = texture.pixels[tex_y % texture.height, tex_x]
    unique, inverse = np.unique(colors, return_inverse=True)
    fogged = np.array([wall_fog(int(color), hit.distance) for color in unique], dtype=np.uint32)
    first = hit.top + 1
    last = min(hit.bottom + 1, frame.height)
    frame.pixels[first:last, column] = fogged[inverse.reshape(-1)][: last - first]
    return count


def render_view(
    frame: Frame,
    grid: Grid,
    player: Player,
    textures: Mapping[TextureSlot, Texture],
    ceiling: int,
    floor: int,
    pitch: int = 0,
    doors: bool = False,
) -> int:
    """Draw the 3D view into the frame.

    Returns how many pixels of moving doors were drawn, so the caller can
    time the end of a door animation.
    """
    moving = 0
    for column in range(1, frame.width):
        hit = cast(grid, player, column, frame.width, pitch, doors)
        draw_floor_ceiling(frame, column, hit.top, hit.bottom, ceiling, floor, pitch)
        drawn = draw_wall(frame, hit, player, textures, column, pitch)
        if hit.mid_door:
            moving += drawn
    return moving