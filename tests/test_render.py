import numpy as np
import pygame
import pytest

from raycube.config import TextureSlot
from raycube.fog import fog_ceiling, fog_floor
from raycube.player import Player
from raycube.raycast import RayHit
from raycube.render import (
    Frame,
    Texture,
    draw_floor_ceiling,
    draw_wall,
    load_texture,
    render_view,
    wall_texture_slot,
)
from raycube.scene import SceneError


def _hit(**overrides):
    values = dict(
        dir_x=-1.0,
        dir_y=0.0,
        map_x=2,
        map_y=3,
        side=False,
        distance=1.0,
        line_height=1000,
        top=0,
        bottom=999,
        tile="1",
    )
    values.update(overrides)
    return RayHit(**values)


def _solid_textures(color):
    return {slot: Texture(np.full((64, 64), color)) for slot in TextureSlot}


def _room(rows):
    return [list(row) for row in rows]


ROOM = ["1111111"] + ["1000001"] * 5 + ["1111111"]


def test_frame_put_get_round_trip():
    frame = Frame(width=4, height=3)
    frame.put(3, 2, 0xABCDEF)
    assert frame.get(3, 2) == 0xABCDEF
    assert frame.get(0, 0) == 0


def test_frame_rejects_out_of_range():
    frame = Frame(width=4, height=3)
    with pytest.raises(IndexError):
        frame.put(4, 0, 1)
    with pytest.raises(IndexError):
        frame.get(0, -1)


def test_frame_rejects_bad_size():
    with pytest.raises(ValueError):
        Frame(width=0)


def test_frame_to_rgb_splits_channels():
    frame = Frame(width=2, height=2)
    frame.put(1, 0, (200 << 16) | (100 << 8) | 50)
    rgb = frame.to_rgb()
    assert rgb.shape == (2, 2, 3)
    assert tuple(rgb[1, 0]) == (200, 100, 50)


def test_texture_pixel_reads_row_and_column():
    texture = Texture(np.array([[1, 2], [3, 4]]))
    assert texture.pixel(1, 0) == 2
    assert texture.pixel(0, 1) == 3
    with pytest.raises(IndexError):
        texture.pixel(2, 0)


def test_texture_rejects_empty():
    with pytest.raises(ValueError):
        Texture(np.zeros((0, 0)))


def test_load_texture_round_trip(tmp_path):
    surface = pygame.Surface((3, 2))
    surface.fill((10, 20, 30))
    surface.set_at((2, 1), (200, 100, 50))
    path = tmp_path / "wall.bmp"
    pygame.image.save(surface, str(path))
    texture = load_texture(path, "NORTH")
    assert (texture.width, texture.height) == (3, 2)
    assert texture.pixel(2, 1) == (200 << 16) | (100 << 8) | 50
    assert texture.pixel(0, 0) == (10 << 16) | (20 << 8) | 30


def test_load_texture_missing_file(tmp_path):
    with pytest.raises(SceneError, match=r"\(NORTH\)"):
        load_texture(tmp_path / "missing.xpm", "NORTH")


@pytest.mark.parametrize(
    "overrides, slot",
    [
        (dict(side=True, dir_y=0.5), TextureSlot.EAST),
        (dict(side=True, dir_y=-0.5), TextureSlot.WEST),
        (dict(side=False, dir_x=0.5), TextureSlot.NORTH),
        (dict(side=False, dir_x=-0.5), TextureSlot.SOUTH),
        (dict(slot=TextureSlot.DOOR_SIDE, door=True), TextureSlot.DOOR_SIDE),
    ],
)
def test_wall_texture_slot(overrides, slot):
    assert wall_texture_slot(_hit(**overrides)) == slot


def test_draw_floor_ceiling_bands():
    frame = Frame(width=4)
    frame.pixels.fill(7)
    draw_floor_ceiling(frame, 2, 400, 600, 0xFFFFFF, 0x00FF00)
    assert frame.get(2, 0) == 0xFFFFFF
    assert frame.get(2, 200) == fog_ceiling(0xFFFFFF, 200)
    assert frame.get(2, 399) == 0
    assert frame.get(2, 400) == 7
    assert frame.get(2, 500) == 7
    assert frame.get(2, 610) == 0
    assert frame.get(2, 700) == fog_floor(0x00FF00, 700)
    assert frame.get(2, 999) == 0x00FF00
    assert frame.get(1, 0) == 7


def test_draw_floor_ceiling_rejects_bad_column():
    with pytest.raises(IndexError):
        draw_floor_ceiling(Frame(width=4), 4, 400, 600, 0, 0)


def test_draw_wall_near_fills_column():
    frame = Frame(width=8)
    frame.pixels.fill(7)
    player = Player(3.5, 3.5, -1.0, 0.0, 0.0, 0.66)
    drawn = draw_wall(frame, _hit(), player, _solid_textures(0x808080), 5)
    assert drawn == 999
    assert frame.get(5, 0) == 7
    assert frame.get(5, 1) == 0x808080
    assert frame.get(5, 999) == 0x808080


def test_draw_wall_far_is_black():
    frame = Frame(width=8)
    frame.pixels.fill(7)
    player = Player(3.5, 3.5, -1.0, 0.0, 0.0, 0.66)
    hit = _hit(distance=5.0, line_height=200, top=400, bottom=600)
    drawn = draw_wall(frame, hit, player, _solid_textures(0x808080), 5)
    assert drawn == 200
    assert np.all(frame.pixels[401:601, 5] == 0)
    assert frame.get(5, 400) == 7


def test_draw_wall_walks_texture_rows_in_order():
    gradient = np.repeat(np.arange(64)[:, None], 64, axis=1)
    textures = {slot: Texture(gradient) for slot in TextureSlot}
    frame = Frame(width=8)
    player = Player(3.5, 3.5, -1.0, 0.0, 0.0, 0.66)
    draw_wall(frame, _hit(), player, textures, 5)
    column = frame.pixels[1:1000, 5].astype(np.int64)
    assert column[0] == 0
    assert column.max() < 64
    assert np.all(np.diff(column) >= 0)


def test_render_view_draws_columns_after_first():
    frame = Frame(width=8)
    player = Player.spawn(3, 3, "N")
    moving = render_view(frame, _room(ROOM), player, _solid_textures(0x808080), 0x102030, 0x405060)
    assert moving == 0
    assert frame.get(0, 999) == 0
    assert frame.get(1, 999) == 0x405060
    assert frame.get(4, 0) == 0x102030


def test_render_view_counts_moving_door_pixels():
    rows = list(ROOM)
    rows[2] = "100i001"
    textures = _solid_textures(0x808080)
    player = Player.spawn(3, 3, "N")
    with_doors = render_view(Frame(width=8), _room(rows), player, textures, 0, 0, doors=True)
    without = render_view(Frame(width=8), _room(rows), player, textures, 0, 0)
    assert with_doors > 0
    assert without == 0