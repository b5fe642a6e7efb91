"""The map grid of a scene: collection, player lookup and wall checks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from raycube.config import (
    EMPTY,
    MAX_MAP_HEIGHT,
    PLAYER_MARKS,
    VALID_CHARS,
    VOID,
    WALL,
)
from raycube.scene import SceneError, is_blank


def collect_map_lines(lines: Iterable[str], valid_chars: str = VALID_CHARS) -> list[str]:
    """Gather map rows, rejecting bad characters and text after a gap."""
    allowed = set(valid_chars)
    rows: list[str] = []
    found_empty = False
    for line in lines:
        blank = is_blank(line, False)
        if found_empty and not blank:
            raise SceneError("Error: Map has text after an empty line!")
        if blank:
            found_empty = True
            continue
        if not set(line) <= allowed:
            raise SceneError("Invalid character!")
        rows.append(line.rstrip("\n"))
        if len(rows) > MAX_MAP_HEIGHT:
            raise SceneError("Map too long")
    return rows


def count_players(rows: Iterable[str]) -> int:
    """Number of player start markers in the rows."""
    return sum(1 for row in rows for ch in row if ch in PLAYER_MARKS)


def find_player(rows: Sequence[str]) -> tuple[int, int, str]:
    """Row, column and facing of the first player start marker."""
    for row_index, row in enumerate(rows):
        for col_index, ch in enumerate(row):
            if ch in PLAYER_MARKS:
                return row_index, col_index, ch
    raise SceneError("No PLayer")


def facing_vectors(facing: str) -> tuple[float, float, float, float]:
    """Direction and camera plane ``(dir_x, dir_y, plane_x, plane_y)``."""
    vectors = {
        "N": (-1.0, 0.0, 0.0, 0.66),
        "S": (1.0, 0.0, 0.0, -0.66),
        "E": (0.0, 1.0, 0.66, 0.0),
        "W": (0.0, -1.0, -0.66, 0.0),
    }
    try:
        return vectors[facing]
    except KeyError:
        raise ValueError(f"unknown facing {facing!r}") from None


def check_enclosed(rows: Sequence[str], row: int, col: int) -> frozenset[tuple[int, int]]:
    """Flood from a cell and fail if the open area reaches the map's edge.

    Returns the set of non-wall cells reachable from the start.
    """
    height = len(rows)
    reached: set[tuple[int, int]] = set()
    pending = [(row, col)]
    while pending:
        r, c = pending.pop()
        if r < 0 or c < 0 or r >= height or c >= len(rows[r]) or rows[r][c] == VOID:
            raise SceneError("Invalid Map(Not Wall Closed)")
        if rows[r][c] == WALL or (r, c) in reached:
            continue
        reached.add((r, c))
        pending.extend(((r, c + 1), (r, c - 1), (r + 1, c), (r - 1, c)))
    return frozenset(reached)


@dataclass
class Level:
    """A validated map with the player's starting cell and facing."""

    grid: list[list[str]]
    start_row: int
    start_col: int
    facing: str

    @classmethod
    def from_lines(cls, lines: Iterable[str], valid_chars: str = VALID_CHARS) -> "Level":
        """Build a level from the map lines that follow the scene header."""
        rows = collect_map_lines(lines, valid_chars)
        if count_players(rows) != 1:
            raise SceneError("2 Player Position")
        row, col, facing = find_player(rows)
        grid = [list(line) for line in rows]
        grid[row][col] = EMPTY
        check_enclosed(["".join(cells) for cells in grid], row, col)
        return cls(grid=grid, start_row=row, start_col=col, facing=facing)

    @property
    def height(self) -> int:
        return len(self.grid)

    def tile(self, row: int, col: int) -> str:
        """The character at a cell; IndexError outside the grid."""
        if row < 0 or col < 0:
            raise IndexError((row, col))
        return self.grid[row][col]