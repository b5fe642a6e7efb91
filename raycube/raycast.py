"""Casting one ray per screen column through the map grid (DDA)."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence

from raycube.config import (
    DOOR_CLOSED,
    DOOR_MOVING,
    SCREEN_HEIGHT,
    SCREEN_WIDTH,
    TEXTURE_W,
    WALL,
    TextureSlot,
)
from raycube.player import Player

Grid = Sequence[Sequence[str]]

_FAR = 1e30
_DOOR_SLOTS = {
    DOOR_CLOSED: TextureSlot.DOOR,
    DOOR_MOVING: TextureSlot.DOOR_MID,
}


@dataclass(frozen=True)
class RayHit:
    """Where a ray stopped and how tall its wall slice is on screen.

    ``side`` is False when an x boundary (a row edge) was crossed last and
    True for a y boundary. ``slot`` is set only for door hits; plain walls
    leave the texture choice to the renderer.
    """

    dir_x: float
    dir_y: float
    map_x: int
    map_y: int
    side: bool
    distance: float
    line_height: int
    top: int
    bottom: int
    tile: str
    door: bool = False
    mid_door: bool = False
    slot: Optional[TextureSlot] = None


def _tile(grid: Grid, row: int, col: int) -> str:
    """The cell's character; anything outside the grid counts as wall."""
    if row < 0 or col < 0 or row >= len(grid) or col >= len(grid[row]):
        return WALL
    return grid[row][col]


def camera_ray(player: Player, column: int, width: int = SCREEN_WIDTH) -> tuple[float, float]:
    """Direction of the ray through a screen column."""
    camera_x = 2 * column / float(width) - 1
    return (
        player.dir_x + player.plane_x * camera_x,
        player.dir_y + player.plane_y * camera_x,
    )


def wall_span(distance: float, height: int = SCREEN_HEIGHT, pitch: int = 0) -> tuple[int, int, int]:
    """Line height and the clamped top and bottom rows of a wall slice."""
    if distance <= 0:
        raise ValueError(f"distance must be positive, got {distance!r}")
    line_height = int(height / distance)
    half_line = line_height // 2
    top = -half_line + height // 2 + pitch
    bottom = half_line + height // 2 + pitch
    if top < 0:
        top = 0
    if bottom >= height:
        bottom = height - 1
    return line_height, top, bottom


def cast(
    grid: Grid,
    player: Player,
    column: int,
    width: int = SCREEN_WIDTH,
    pitch: int = 0,
    doors_enabled: bool = False,
) -> RayHit:
    """Walk a ray cell by cell until it meets a wall (or a door)."""
    dir_x, dir_y = camera_ray(player, column, width)
    map_x, map_y = int(player.x), int(player.y)
    delta_x = _FAR if dir_x == 0 else abs(1 / dir_x)
    delta_y = _FAR if dir_y == 0 else abs(1 / dir_y)

    if dir_x < 0:
        step_x = -1
        dist_x = (player.x - map_x) * delta_x
    else:
        step_x = 1
        dist_x = (map_x + 1.0 - player.x) * delta_x
    if dir_y < 0:
        step_y = -1
        dist_y = (player.y - map_y) * delta_y
    else:
        step_y = 1
        dist_y = (map_y + 1.0 - player.y) * delta_y

    side = False
    door = False
    mid_door = False
    slot: Optional[TextureSlot] = None
    while True:
        if dist_x < dist_y:
            dist_x += delta_x
            map_x += step_x
            side = False
        else:
            dist_y += delta_y
            map_y += step_y
            side = True
        tile = _tile(grid, map_x, map_y)
        if tile == WALL:
            break
        if doors_enabled and tile in _DOOR_SLOTS:
            # Doors sit half a cell deep; if the ray leaves the cell
            # sideways before reaching that plane it hits the frame.
            slot = _DOOR_SLOTS[tile]
            if not side:
                dist_x -= delta_x / 2
                if dist_x > dist_y:
                    dist_y += delta_y
                    side = True
                    slot = TextureSlot.DOOR_SIDE
                dist_x += delta_x
            else:
                dist_y -= delta_y / 2
                if dist_y > dist_x:
                    dist_x += delta_x
                    side = False
                    slot = TextureSlot.DOOR_SIDE
                dist_y += delta_y
            door = True
            mid_door = tile == DOOR_MOVING
            break

    distance = dist_y - delta_y if side else dist_x - delta_x
    line_height, top, bottom = wall_span(distance, SCREEN_HEIGHT, pitch)
    return RayHit(
        dir_x=dir_x,
        dir_y=dir_y,
        map_x=map_x,
        map_y=map_y,
        side=side,
        distance=distance,
        line_height=line_height,
        top=top,
        bottom=bottom,
        tile=tile,
        door=door,
        mid_door=mid_door,
        slot=slot,
    )


def texture_column(hit: RayHit, player: Player, tex_width: int = TEXTURE_W) -> int:
    """Column of the wall texture that the ray struck."""
    if not hit.side:
        wall_x = player.y + hit.distance * hit.dir_y
    else:
        wall_x = player.x + hit.distance * hit.dir_x
    wall_x -= math.floor(wall_x)
    tex_x = int(wall_x * tex_width)
    if not hit.side and hit.dir_x > 0:
        tex_x = tex_width - tex_x - 1
    if hit.side and hit.dir_y < 0:
        tex_x = tex_width - tex_x - 1
    return tex_x