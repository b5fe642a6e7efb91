"""Reading and validating the header of a ``.cub`` scene description."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, Iterator, Optional, Sequence

logger = logging.getLogger(__name__)

_COLOR_CHARS = frozenset("0123456789, ")
_ATOI_SPACE = " \t\n\v\f\r"


class SceneError(Exception):
    """Raised when a scene file or its arguments are not acceptable."""


class Identifier(Enum):
    """Header line prefixes and the field each one sets."""

    NORTH = "NO "
    SOUTH = "SO "
    EAST = "EA "
    WEST = "WE "
    CEILING = "C "
    FLOOR = "F "

    @property
    def field(self) -> str:
        return self.name.lower()


@dataclass
class SceneHeader:
    """Texture paths and colours declared at the top of a scene file."""

    north: Optional[str] = None
    south: Optional[str] = None
    west: Optional[str] = None
    east: Optional[str] = None
    ceiling: Optional[str] = None
    floor: Optional[str] = None
    ceiling_color: int = 0
    floor_color: int = 0

    def _get(self, ident: Identifier) -> Optional[str]:
        return getattr(self, ident.field)

    def is_complete(self) -> bool:
        """True once every texture path and colour entry has been set."""
        return all(self._get(ident) is not None for ident in Identifier)

    def has_duplicate(self, line: str) -> bool:
        """True if the line mentions an identifier that is already set."""
        return any(
            ident.value in line and self._get(ident) is not None
            for ident in Identifier
        )

    def apply(self, line: str) -> bool:
        """Set the entry the line starts with; False if it names none."""
        for ident in Identifier:
            if line.startswith(ident.value):
                skip = len(ident.value) - 1
                setattr(self, ident.field, line[skip:].strip(" \n"))
                return True
        return False


def is_blank(line: str, allow_spaces: bool) -> bool:
    """True if the line holds only newlines (and spaces when allowed)."""
    allowed = " \n" if allow_spaces else "\n"
    return all(ch in allowed for ch in line)


def check_arguments(args: Sequence[str]) -> str:
    """Return the single scene path among the command-line arguments."""
    if len(args) > 1:
        raise SceneError("Error: Too Many Arguments!")
    if len(args) < 1:
        raise SceneError("Error: Not Enough Arguments!")
    return args[0]


def check_cub_path(path: str) -> Path:
    """Check that the path names an existing, readable ``.cub`` file."""
    dot = path.rfind(".")
    if not (dot > 0 and path[dot:] == ".cub" and path[dot - 1] != "/"):
        raise SceneError("Error: File not valid!")
    target = Path(path)
    if not target.is_file() or not os.access(target, os.R_OK):
        raise SceneError("Error: File does not exist!")
    return target


def describe_content(text: Optional[str]) -> Optional[str]:
    """Describe a first line that carries no content, or None if it has some."""
    if not text:
        return "Empty file"
    if all(ch == " " for ch in text):
        return "Only spaces"
    if all(ch == "\t" for ch in text):
        return "Only tabs"
    return None


def _atoi(text: str) -> int:
    rest = text.lstrip(_ATOI_SPACE)
    sign = 1
    if rest[:1] in ("+", "-"):
        sign = -1 if rest[0] == "-" else 1
        rest = rest[1:]
    digits = ""
    for ch in rest:
        if not ch.isdigit():
            break
        digits += ch
    return sign * int(digits) if digits else 0


def parse_color(text: str, kind: str) -> int:
    """Parse ``"R,G,B"`` into a packed ``0xRRGGBB`` integer."""
    invalid = f"Invalid {kind} colour!"
    if text.count(",") != 2:
        raise SceneError(invalid)
    parts = [part for part in text.split(",") if part]
    if len(parts) != 3 or not all(set(part) <= _COLOR_CHARS for part in parts):
        raise SceneError(invalid)
    red, green, blue = (_atoi(part) for part in parts)
    if min(red, green, blue) < 0:
        raise SceneError("Negative values")
    if max(red, green, blue) > 255:
        raise SceneError("Values too big, max is 255")
    return (red << 16) | (green << 8) | blue


def read_header(lines: Iterable[str]) -> tuple[SceneHeader, list[str]]:
    """Read header entries from the lines of a scene file.

    Returns the header and the remaining lines, starting with the first
    non-blank line after the header.
    """
    header = SceneHeader()
    source: Iterator[str] = iter(lines)
    line = next(source, None)
    note = describe_content(line)
    if note is not None:
        logger.warning(note)
    while line is not None and not header.is_complete():
        if not is_blank(line, True):
            if header.has_duplicate(line):
                raise SceneError("Error: duplicate textures")
            header.apply(line.strip(" "))
        line = next(source, None)
    while line is not None and is_blank(line, True):
        line = next(source, None)
    if line is None:
        raise SceneError("Not all textures")
    header.ceiling_color = parse_color(header.ceiling or "", "CEILING")
    header.floor_color = parse_color(header.floor or "", "FLOOR")
    return header, [line, *source]