"""Player position, facing, movement and view rotation."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence

from raycube.config import (
    EMPTY,
    MOUSE_PITCH,
    MOUSE_SENS,
    PITCH_LIMIT,
    PLAYER_SENS,
    PLAYER_SPEED,
)
from raycube.level import facing_vectors

Grid = Sequence[Sequence[str]]

_MOUSE_DEAD_ZONE = 10


def rotate_vector(x: float, y: float, angle: float) -> tuple[float, float]:
    """Rotate the vector ``(x, y)`` by ``angle`` radians."""
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    return x * cos_a - y * sin_a, x * sin_a + y * cos_a


def adjust_pitch(pitch: int, dy: int, step: int = MOUSE_PITCH) -> int:
    """Move the view pitch for a vertical mouse offset, clamped to the limit."""
    if dy < -_MOUSE_DEAD_ZONE:
        pitch += step
    elif dy > _MOUSE_DEAD_ZONE:
        pitch -= step
    return max(-PITCH_LIMIT, min(PITCH_LIMIT, pitch))


def _tile(grid: Grid, x: float, y: float) -> Optional[str]:
    row, col = int(x), int(y)
    if row < 0 or col < 0 or row >= len(grid) or col >= len(grid[row]):
        return None
    return grid[row][col]


@dataclass
class Player:
    """Position (row ``x``, column ``y``), direction and camera plane."""

    x: float
    y: float
    dir_x: float = 0.0
    dir_y: float = 0.0
    plane_x: float = 0.0
    plane_y: float = 0.0

    @classmethod
    def spawn(cls, row: int, col: int, facing: str) -> "Player":
        """Place a player in the middle of a cell, facing N, S, E or W."""
        dir_x, dir_y, plane_x, plane_y = facing_vectors(facing)
        return cls(row + 0.5, col + 0.5, dir_x, dir_y, plane_x, plane_y)

    def rotate(self, angle: float) -> None:
        """Turn the direction and camera plane by ``angle`` radians."""
        self.dir_x, self.dir_y = rotate_vector(self.dir_x, self.dir_y, angle)
        self.plane_x, self.plane_y = rotate_vector(self.plane_x, self.plane_y, angle)

    def look(self, left: bool) -> None:
        """Turn one keyboard step to the left or right."""
        self.rotate(PLAYER_SENS if left else -PLAYER_SENS)

    def mouse_look(self, dx: int, sensitivity: float = MOUSE_SENS) -> bool:
        """Turn for a horizontal mouse offset; True if the view turned."""
        if dx < -_MOUSE_DEAD_ZONE:
            self.rotate(sensitivity)
        elif dx > _MOUSE_DEAD_ZONE:
            self.rotate(-sensitivity)
        else:
            return False
        return True

    def _step(self, grid: Grid, dx: float, dy: float, passable: str) -> None:
        if _tile(grid, self.x + dx, self.y) in passable_set(passable):
            self.x += dx
        if _tile(grid, self.x, self.y + dy) in passable_set(passable):
            self.y += dy

    def move_forward(self, grid: Grid, passable: str = EMPTY) -> None:
        """Step along the view direction, sliding along blocking cells."""
        self._step(grid, self.dir_x * PLAYER_SPEED, self.dir_y * PLAYER_SPEED, passable)

    def move_backward(self, grid: Grid, passable: str = EMPTY) -> None:
        """Step against the view direction."""
        self._step(grid, -self.dir_x * PLAYER_SPEED, -self.dir_y * PLAYER_SPEED, passable)

    def strafe_left(self, grid: Grid, passable: str = EMPTY) -> None:
        """Step sideways to the left of the view direction."""
        self._step(grid, -self.dir_y * PLAYER_SPEED, self.dir_x * PLAYER_SPEED, passable)

    def strafe_right(self, grid: Grid, passable: str = EMPTY) -> None:
        """Step sideways to the right of the view direction."""
        self._step(grid, self.dir_y * PLAYER_SPEED, -self.dir_x * PLAYER_SPEED, passable)


def passable_set(passable: str) -> frozenset[str]:
    """The set of tile characters a player may enter."""
    return frozenset(passable)