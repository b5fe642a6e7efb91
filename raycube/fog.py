"""Distance and height based darkening of colours."""

from __future__ import annotations

from raycube.config import SCREEN_HEIGHT

_FOG_FACTOR = 0.9
_MAX_WALL_DISTANCE = 4.2
_WALL_FOG_STEP = 0.101
_ROW_STEP = 10
_MAX_TIMES = 18


def darken(color: int, factor: float, times: int) -> int:
    """Scale each channel of ``0xRRGGBB`` by ``factor``, ``times`` times over.

    A factor outside ``[0, 1]`` leaves the colour untouched.
    """
    if factor < 0 or factor > 1:
        return color
    red = (color >> 16) & 0xFF
    green = (color >> 8) & 0xFF
    blue = color & 0xFF
    for _ in range(times):
        red = int(red * factor)
        green = int(green * factor)
        blue = int(blue * factor)
    return (red << 16) | (green << 8) | blue


def fog_floor(color: int, row: int, pitch: int = 0) -> int:
    """Darken a floor colour by how close its screen row is to the horizon."""
    half = SCREEN_HEIGHT // 2
    stop = half + half // 2 + pitch
    times = 0
    while row < stop + 50 and times <= _MAX_TIMES:
        row += _ROW_STEP
        times += 1
    return darken(color, _FOG_FACTOR, times)


def fog_ceiling(color: int, row: int, pitch: int = 0) -> int:
    """Darken a ceiling colour by how close its screen row is to the horizon."""
    times = _MAX_TIMES
    while row < SCREEN_HEIGHT // 2 - 110 + pitch:
        row += _ROW_STEP
        times -= 1
    return darken(color, _FOG_FACTOR, times)


def wall_fog(color: int, distance: float) -> int:
    """Darken a wall colour by its distance; far walls turn black."""
    if distance > _MAX_WALL_DISTANCE:
        return 0
    times = 0
    reach = 1.0
    while reach < distance:
        reach += _WALL_FOG_STEP
        times += 1
    return darken(color, _FOG_FACTOR, times)