"""Loading a scene, running the game loop and the command-line entry point."""

from __future__ import annotations

import sys
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional, Sequence, Union

from raycube.config import (
    BONUS_VALID_CHARS,
    DOOR_OPEN,
    EMPTY,
    KEY_A,
    KEY_D,
    KEY_E,
    KEY_ENTER,
    KEY_ESC,
    KEY_LEFT,
    KEY_M,
    KEY_RIGHT,
    KEY_S,
    KEY_W,
    SCREEN_HEIGHT,
    SCREEN_WIDTH,
    VALID_CHARS,
    TextureSlot,
)
from raycube.doors import Doors
from raycube.level import Level
from raycube.minimap import BACKGROUND_SPRITE, draw_minimap
from raycube.player import Player, adjust_pitch
from raycube.render import DOOR_SPRITES, Frame, Texture, load_texture, render_view
from raycube.scene import (
    SceneError,
    SceneHeader,
    check_arguments,
    check_cub_path,
    read_header,
)

LOGO_SPRITE = "assets/sprites/logo.xpm"
TEXT_SPRITE = "assets/sprites/text.xpm"

DOOR_ANIMATION_PIXELS = 100_000_000
QUIT_MESSAGE = "\n'ESC' pressed, game closed...\nThanks for playing!"

_LOGO_WIDTH = 514
_TEXT_TOP = 550


def _final_logo_top() -> int:
    top = -400.0
    last = top
    while top < 150:
        last = top
        top += 1.5
    return int(last)


_LOGO_TOP = _final_logo_top()


@dataclass
class Scene:
    """A parsed scene file: its header entries and its validated map."""

    path: Path
    header: SceneHeader
    level: Level
    bonus: bool = False

    @property
    def name(self) -> str:
        return self.path.name


def load_scene(path: Union[str, Path], bonus: bool = False) -> Scene:
    """Read and validate a ``.cub`` scene file."""
    target = Path(path)
    with target.open(encoding="utf-8") as handle:
        lines = handle.readlines()
    header, rest = read_header(lines)
    level = Level.from_lines(rest, BONUS_VALID_CHARS if bonus else VALID_CHARS)
    return Scene(path=target, header=header, level=level, bonus=bonus)


def format_map(scene: Scene) -> str:
    """The scene's name and map rows as printable text."""
    rows = "".join("".join(row) + "\n" for row in scene.level.grid)
    return f"map name: {scene.name}\n{rows}"


@dataclass
class FpsCounter:
    """Frames per second measured between consecutive ticks."""

    last: float = 0.0

    def tick(self, now: Optional[float] = None) -> float:
        """Record a frame at ``now`` (seconds) and return the frame rate."""
        if now is None:
            now = time.perf_counter()
        elapsed = now - self.last
        self.last = now
        return 1.0 / elapsed if elapsed > 0 else 0.0


def _paste(frame: Frame, texture: Texture, left: int, top: int) -> None:
    y0, x0 = max(top, 0), max(left, 0)
    y1 = min(top + texture.height, frame.height)
    x1 = min(left + texture.width, frame.width)
    if y0 < y1 and x0 < x1:
        frame.pixels[y0:y1, x0:x1] = texture.pixels[y0 - top:y1 - top, x0 - left:x1 - left]


@dataclass(eq=False)
class Game:
    """The running game: player state, input handling and frame drawing."""

    scene: Scene
    textures: Mapping[TextureSlot, Texture]
    bonus: bool = False
    sprites: Mapping[str, Texture] = field(default_factory=dict)
    door_pixels_limit: int = DOOR_ANIMATION_PIXELS

    def __post_init__(self) -> None:
        level = self.scene.level
        self.grid = level.grid
        self.player = Player.spawn(level.start_row, level.start_col, level.facing)
        self.doors = Doors()
        self.pitch = 0
        self.logged_in = not self.bonus
        self.show_minimap = False
        self.running = True
        self.pointer = (SCREEN_WIDTH // 2, SCREEN_HEIGHT // 2)
        self._door_pixels = 0

    @property
    def passable(self) -> str:
        return EMPTY + DOOR_OPEN if self.bonus else EMPTY

    def _press(self, key: int) -> None:
        if key == KEY_W:
            self.player.move_forward(self.grid, self.passable)
        if key == KEY_S:
            self.player.move_backward(self.grid, self.passable)
        if key == KEY_A:
            self.player.strafe_left(self.grid, self.passable)
        if key == KEY_D:
            self.player.strafe_right(self.grid, self.passable)
        if key == KEY_LEFT:
            self.player.look(True)
        if key == KEY_RIGHT:
            self.player.look(False)
        if self.bonus:
            if key == KEY_E:
                self.doors.interact(self.grid, self.player)
            if key == KEY_ENTER:
                self.logged_in = True

    def handle_key(self, key: int) -> None:
        """React to a pressed key, given as an X11 key symbol."""
        if key == KEY_ESC:
            print(QUIT_MESSAGE)
            self.running = False
            return
        if not self.bonus:
            self._press(key)
            return
        if not self.show_minimap:
            self._press(key)
        if key == KEY_M:
            self.show_minimap = True

    def release_key(self, key: int) -> None:
        """React to a released key."""
        if self.bonus and key == KEY_M:
            self.show_minimap = False

    def _intro(self) -> Frame:
        frame = Frame()
        logo = self.sprites.get("logo")
        if logo is not None:
            _paste(frame, logo, SCREEN_WIDTH // 2 - _LOGO_WIDTH // 2, _LOGO_TOP)
        text = self.sprites.get("text")
        if text is not None:
            _paste(frame, text, SCREEN_WIDTH // 2 - text.width // 2, _TEXT_TOP)
        return frame

    def _apply_pointer(self) -> None:
        center_x, center_y = SCREEN_WIDTH // 2, SCREEN_HEIGHT // 2
        dx = self.pointer[0] - center_x
        dy = self.pointer[1] - center_y
        self.player.mouse_look(dx)
        self.pitch = adjust_pitch(self.pitch, dy)
        self.pointer = (center_x, center_y)

    def frame(self) -> Frame:
        """Draw and return the next frame."""
        if not self.logged_in:
            return self._intro()
        frame = Frame()
        header = self.scene.header
        if not self.show_minimap:
            moving = render_view(
                frame,
                self.grid,
                self.player,
                self.textures,
                header.ceiling_color,
                header.floor_color,
                self.pitch,
                self.bonus,
            )
            if moving:
                self._door_pixels += moving
                if self._door_pixels >= self.door_pixels_limit:
                    self._door_pixels = 0
                    self.doors.finish(self.grid, self.player)
        else:
            background = self.sprites.get("handmap")
            if background is not None:
                _paste(frame, background, 0, 0)
            draw_minimap(frame, self.grid, self.player)
        if self.bonus:
            self._apply_pointer()
        return frame

    def run(self) -> None:
        """Open a window and run the game until it is closed."""
        import pygame

        specials = {
            pygame.K_ESCAPE: KEY_ESC,
            pygame.K_RETURN: KEY_ENTER,
            pygame.K_KP_ENTER: KEY_ENTER,
            pygame.K_LEFT: KEY_LEFT,
            pygame.K_RIGHT: KEY_RIGHT,
        }
        center = (SCREEN_WIDTH // 2, SCREEN_HEIGHT // 2)
        pygame.init()
        try:
            screen = pygame.display.set_mode((SCREEN_WIDTH, SCREEN_HEIGHT))
            pygame.display.set_caption("raycube")
            if self.bonus:
                pygame.mouse.set_visible(False)
            while self.running:
                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        self.running = False
                    elif event.type == pygame.KEYDOWN:
                        self.handle_key(specials.get(event.key, event.key))
                    elif event.type == pygame.KEYUP:
                        self.release_key(specials.get(event.key, event.key))
                if not self.running:
                    break
                track_mouse = self.bonus and self.logged_in
                if track_mouse:
                    self.pointer = pygame.mouse.get_pos()
                frame = self.frame()
                if track_mouse:
                    pygame.mouse.set_pos(center)
                pygame.surfarray.blit_array(screen, frame.to_rgb())
                pygame.display.flip()
        finally:
            pygame.quit()


def _load_textures(header: SceneHeader, bonus: bool) -> dict[TextureSlot, Texture]:
    wanted = [
        (TextureSlot.NORTH, header.north, "NORTH"),
        (TextureSlot.SOUTH, header.south, "SOUTH"),
        (TextureSlot.EAST, header.east, "EAST"),
        (TextureSlot.WEST, header.west, "WEST"),
    ]
    if bonus:
        wanted += [
            (TextureSlot.DOOR, DOOR_SPRITES[TextureSlot.DOOR], "DOOR"),
            (TextureSlot.DOOR_MID, DOOR_SPRITES[TextureSlot.DOOR_MID], "DOOR_MID"),
            (TextureSlot.DOOR_SIDE, DOOR_SPRITES[TextureSlot.DOOR_SIDE], "DOOR_SIDE"),
        ]
    return {slot: load_texture(path or "", label) for slot, path, label in wanted}


def _load_sprites() -> dict[str, Texture]:
    return {
        "logo": load_texture(LOGO_SPRITE, "LOGO"),
        "text": load_texture(TEXT_SPRITE, "TEXT"),
        "handmap": load_texture(BACKGROUND_SPRITE, "hand_map"),
    }


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the game on the scene file named on the command line."""
    args = list(sys.argv[1:] if argv is None else argv)
    bonus = False
    if args and args[0] == "--bonus":
        bonus = True
        args = args[1:]
    try:
        path = check_cub_path(check_arguments(args))
    except SceneError as exc:
        print(exc)
        return 1
    try:
        scene = load_scene(path, bonus)
        textures = _load_textures(scene.header, bonus)
        sprites = _load_sprites() if bonus else {}
    except SceneError as exc:
        # A rejected scene ends the game the same way quitting does.
        print(exc)
        return 0
    Game(scene, textures, bonus=bonus, sprites=sprites).run()
    return 0