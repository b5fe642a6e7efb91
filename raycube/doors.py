"""Opening and closing doors in front of the player."""

from __future__ import annotations

from dataclasses import dataclass
from typing import MutableSequence, Optional

from raycube.config import DOOR_CLOSED, DOOR_MOVING, DOOR_OPEN, PLAYER_SPEED
from raycube.player import Player

Grid = MutableSequence[MutableSequence[str]]

_REACH = PLAYER_SPEED * 5
_DOOR_TILES = frozenset((DOOR_CLOSED, DOOR_OPEN, DOOR_MOVING))


def _tile(grid: Grid, row: int, col: int) -> Optional[str]:
    if row < 0 or col < 0 or row >= len(grid) or col >= len(grid[row]):
        return None
    return grid[row][col]


@dataclass
class Doors:
    """State of the door currently being opened or closed."""

    mid_door: bool = False
    closing: bool = False
    in_y: bool = False
    target_x: int = 0
    target_y: int = 0

    def _start(self, grid: Grid, row: int, col: int) -> None:
        tile = _tile(grid, row, col)
        if tile == DOOR_CLOSED:
            grid[row][col] = DOOR_MOVING
            self.mid_door = True
            self.closing = False
        elif tile == DOOR_OPEN:
            grid[row][col] = DOOR_MOVING
            self.mid_door = True
            self.closing = True

    def _animate(self, grid: Grid, player: Player, new_x: float, new_y: float, in_y: bool) -> None:
        self.target_x = int(new_x)
        self.target_y = int(new_y)
        self.in_y = in_y
        if in_y:
            self._start(grid, self.target_x, int(player.y))
        else:
            self._start(grid, int(player.x), self.target_y)

    def interact(self, grid: Grid, player: Player) -> None:
        """Start moving a door within reach of the player's view direction."""
        if _tile(grid, int(player.x), int(player.y)) == DOOR_OPEN:
            return
        new_x = player.x + player.dir_x * _REACH
        new_y = player.y + player.dir_y * _REACH
        if _tile(grid, int(new_x), int(player.y)) in _DOOR_TILES:
            self._animate(grid, player, new_x, new_y, True)
        if _tile(grid, int(player.x), int(new_y)) in _DOOR_TILES:
            self._animate(grid, player, new_x, new_y, False)

    def finish(self, grid: Grid, player: Player) -> Optional[str]:
        """Complete a moving door; return the tile it became, or None."""
        if self.in_y:
            row, col = self.target_x, int(player.y)
        else:
            row, col = int(player.x), self.target_y
        if _tile(grid, row, col) != DOOR_MOVING:
            return None
        if not self.closing:
            grid[row][col] = DOOR_OPEN
        else:
            self.closing = False
            self.mid_door = False
            grid[row][col] = DOOR_CLOSED
        return grid[row][col]