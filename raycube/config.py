"""Screen, movement and map constants shared across the game."""

from __future__ import annotations

from enum import IntEnum

FOV = 60
SCREEN_WIDTH = 1500
SCREEN_HEIGHT = 1000
BLOCK_SIZE = 64
PLAYER_SPEED = 0.2
PLAYER_SENS = 0.045
TEXTURE_W = 64
TEXTURE_H = 64

# Tunables for the mouse-look variant of the game.
MOUSE_SENS = 0.03
MOUSE_PITCH = 10
PITCH_LIMIT = 300

MAX_MAP_HEIGHT = 2000

# X11 key symbols.
KEY_ESC = 65307
KEY_ENTER = 65293
KEY_W = 119
KEY_A = 97
KEY_S = 115
KEY_D = 100
KEY_C = 99
KEY_V = 118
KEY_E = 101
KEY_M = 109
KEY_RIGHT = 65363
KEY_LEFT = 65361

WALL = "1"
EMPTY = "0"
VOID = " "
DOOR_CLOSED = "D"
DOOR_OPEN = "d"
DOOR_MOVING = "i"
PLAYER_MARKS = "NSEW"

VALID_CHARS = " 10NSWE\n"
BONUS_VALID_CHARS = " 10NSWED\n"


class TextureSlot(IntEnum):
    """Index of each texture in the loaded texture table."""

    NORTH = 0
    SOUTH = 1
    WEST = 2
    EAST = 3
    DOOR = 4
    DOOR_MID = 5
    DOOR_SIDE = 6