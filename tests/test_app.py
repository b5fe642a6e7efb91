import math

import numpy as np
import pytest

from raycube.app import FpsCounter, Game, format_map, load_scene, main
from raycube.config import (
    KEY_ENTER,
    KEY_ESC,
    KEY_E,
    KEY_LEFT,
    KEY_M,
    KEY_W,
    MOUSE_PITCH,
    SCREEN_HEIGHT,
    SCREEN_WIDTH,
    TextureSlot,
)
from raycube.render import Texture
from raycube.scene import SceneError

HEADER = (
    "NO ./n.xpm\n"
    "SO ./s.xpm\n"
    "WE ./w.xpm\n"
    "EA ./e.xpm\n"
    "F 220,100,0\n"
    "C 225,30,0\n"
    "\n"
)

PLAIN_MAP = "111111\n100001\n10N001\n100001\n111111\n"
DOOR_MAP = "11111\n10001\n10D01\n10N01\n11111\n"


def _write(tmp_path, body, name="level.cub"):
    target = tmp_path / name
    target.write_text(HEADER + body, encoding="utf-8")
    return target


def _textures():
    return {
        slot: Texture(np.full((64, 64), 0x808080, dtype=np.uint32))
        for slot in TextureSlot
    }


def test_load_scene_reads_header_and_map(tmp_path):
    scene = load_scene(_write(tmp_path, PLAIN_MAP))
    assert scene.header.north == "./n.xpm"
    assert scene.header.west == "./w.xpm"
    assert scene.header.floor_color == 0xDC6400
    assert (scene.level.start_row, scene.level.start_col) == (2, 2)
    assert scene.level.facing == "N"
    assert scene.level.grid[2][2] == "0"


def test_doors_need_bonus_mode(tmp_path):
    path = _write(tmp_path, DOOR_MAP)
    with pytest.raises(SceneError, match="Invalid character!"):
        load_scene(path)
    scene = load_scene(path, bonus=True)
    assert scene.level.grid[2][2] == "D"


def test_format_map_lists_name_and_rows(tmp_path):
    scene = load_scene(_write(tmp_path, PLAIN_MAP))
    text = format_map(scene)
    lines = text.splitlines()
    assert lines[0] == "map name: level.cub"
    assert lines[1:] == ["".join(row) for row in scene.level.grid]


def test_fps_counter_measures_interval():
    counter = FpsCounter()
    counter.tick(1.0)
    assert counter.tick(1.25) == pytest.approx(4.0)
    assert counter.tick(1.25) == 0.0


def test_forward_movement_stops_at_wall(tmp_path):
    game = Game(load_scene(_write(tmp_path, PLAIN_MAP)), _textures())
    game.handle_key(KEY_W)
    assert game.player.x < 2.5
    assert game.player.y == 2.5
    for _ in range(20):
        game.handle_key(KEY_W)
    assert int(game.player.x) == 1


def test_escape_stops_the_game(tmp_path, capsys):
    game = Game(load_scene(_write(tmp_path, PLAIN_MAP)), _textures())
    game.handle_key(KEY_ESC)
    assert game.running is False
    assert "Thanks for playing!" in capsys.readouterr().out


def test_turning_keeps_direction_length(tmp_path):
    game = Game(load_scene(_write(tmp_path, PLAIN_MAP)), _textures())
    before = (game.player.dir_x, game.player.dir_y)
    game.handle_key(KEY_LEFT)
    after = (game.player.dir_x, game.player.dir_y)
    assert after != pytest.approx(before)
    assert math.hypot(*after) == pytest.approx(1.0)


def test_minimap_key_blocks_movement_until_released(tmp_path):
    game = Game(load_scene(_write(tmp_path, DOOR_MAP), bonus=True), _textures(), bonus=True)
    game.handle_key(KEY_M)
    assert game.show_minimap is True
    game.handle_key(KEY_LEFT)
    assert (game.player.dir_x, game.player.dir_y) == (-1.0, 0.0)
    game.release_key(KEY_M)
    assert game.show_minimap is False


def test_intro_until_enter(tmp_path):
    game = Game(load_scene(_write(tmp_path, DOOR_MAP), bonus=True), _textures(), bonus=True)
    assert int(game.frame().pixels.max()) == 0
    game.handle_key(KEY_ENTER)
    assert game.logged_in is True
    assert int(game.frame().pixels.max()) > 0


def test_frame_paints_ceiling_and_floor(tmp_path):
    scene = load_scene(_write(tmp_path, PLAIN_MAP))
    frame = Game(scene, _textures()).frame()
    assert frame.get(10, 0) == scene.header.ceiling_color
    assert frame.get(10, SCREEN_HEIGHT - 1) == scene.header.floor_color


def test_pointer_turns_view_and_tilts_pitch(tmp_path):
    game = Game(load_scene(_write(tmp_path, DOOR_MAP), bonus=True), _textures(), bonus=True)
    game.logged_in = True
    center = (SCREEN_WIDTH // 2, SCREEN_HEIGHT // 2)
    game.pointer = (center[0] + 50, center[1] - 50)
    game.frame()
    assert game.player.dir_y != 0.0
    assert game.pitch == MOUSE_PITCH
    assert game.pointer == center


def test_door_opens_after_animation(tmp_path):
    scene = load_scene(_write(tmp_path, DOOR_MAP), bonus=True)
    game = Game(scene, _textures(), bonus=True, door_pixels_limit=1)
    game.logged_in = True
    game.handle_key(KEY_E)
    assert game.grid[2][2] == "i"
    game.frame()
    assert game.grid[2][2] == "d"


def test_main_rejects_missing_argument(capsys):
    assert main([]) == 1
    assert "Not Enough Arguments" in capsys.readouterr().out


def test_main_rejects_bad_extension(tmp_path, capsys):
    target = tmp_path / "level.txt"
    target.write_text(HEADER + PLAIN_MAP, encoding="utf-8")
    assert main([str(target)]) == 1
    assert "Error: File not valid!" in capsys.readouterr().out


def test_main_reports_missing_texture(tmp_path, capsys, monkeypatch):
    monkeypatch.chdir(tmp_path)
    path = _write(tmp_path, PLAIN_MAP)
    assert main([str(path)]) == 0
    assert "No texture created (NORTH)" in capsys.readouterr().out