import random

import pytest

from platypus.constants import DIG_RADIUS, TILE_SIZE
from platypus.terrain import (
    EXPLORED_BRIGHTNESS,
    ActiveRect,
    Terrain,
    Tile,
    TileKind,
    TileStreamer,
    brightness,
    compute_active_rect,
    dig,
    generate_terrain,
    solid,
    tile_to_world_y,
    world_to_tile_y,
)

WIDTH = 20
HEIGHT = 12
SURFACE = 4


def flat_terrain() -> Terrain:
    tiles = []
    for y in range(HEIGHT):
        if y < SURFACE:
            kind = TileKind.SKY
        elif y == SURFACE:
            kind = TileKind.GRASS
        else:
            kind = TileKind.DIRT
        tiles.append([Tile(kind=kind, mine_time=0.25) for _ in range(WIDTH)])
    return Terrain(tiles=tiles, height_map=[SURFACE] * WIDTH)


def non_sky(terrain, rect):
    return {
        (x, y)
        for y in range(rect.min_y, rect.max_y + 1)
        for x in range(rect.min_x, rect.max_x + 1)
        if terrain.tiles[y][x].kind is not TileKind.SKY
    }


def test_row_zero_is_top():
    assert tile_to_world_y(HEIGHT, HEIGHT - 1) == 0.0
    assert world_to_tile_y(HEIGHT, 0.0) == HEIGHT - 1


@pytest.mark.parametrize("row", range(HEIGHT))
def test_tile_world_round_trip(row):
    assert world_to_tile_y(HEIGHT, tile_to_world_y(HEIGHT, row)) == row
    assert world_to_tile_y(HEIGHT, tile_to_world_y(HEIGHT, row) + TILE_SIZE * 0.5) == row


def test_solid_kinds_and_bounds():
    terrain = flat_terrain()
    assert solid(terrain, -1, 5)
    assert solid(terrain, 0, HEIGHT)
    assert solid(terrain, WIDTH, 5)
    assert not solid(terrain, 3, 0)
    assert solid(terrain, 3, SURFACE)
    terrain.tiles[6][3].kind = TileKind.AIR
    assert not solid(terrain, 3, 6)


def test_brightness_levels():
    assert brightness(Tile(visible=True)) == 1.0
    assert brightness(Tile(explored=True)) == EXPLORED_BRIGHTNESS
    assert brightness(Tile()) == 0.0


def test_width_and_height():
    terrain = flat_terrain()
    assert (terrain.width, terrain.height) == (WIDTH, HEIGHT)


def test_generate_is_deterministic():
    a = generate_terrain(64, 48, random.Random(7))
    b = generate_terrain(64, 48, random.Random(7))
    assert a.height_map == b.height_map
    assert [[t.kind for t in row] for row in a.tiles] == [
        [t.kind for t in row] for row in b.tiles
    ]


def test_generate_invariants():
    w, h = 300, 48
    terrain = generate_terrain(w, h, random.Random(3))
    assert (terrain.width, terrain.height) == (w, h)
    assert len(terrain.height_map) == w
    for x, surface in enumerate(terrain.height_map):
        assert 4 <= surface <= h - 10
        assert terrain.tiles[surface][x].kind in (TileKind.GRASS, TileKind.DIRT)
        for y in range(surface, h):
            assert terrain.tiles[y][x].kind is not TileKind.SKY
    expected_times = {
        TileKind.GRASS: 0.20,
        TileKind.DIRT: 0.25,
        TileKind.STONE: 0.50,
        TileKind.OBSIDIAN: 1.00,
    }
    for row in terrain.tiles:
        for tile in row:
            if tile.kind in expected_times:
                assert tile.mine_time == expected_times[tile.kind]
            else:
                assert tile.mine_time == 0.0


def test_generate_rejects_tiny_world():
    with pytest.raises(ValueError):
        generate_terrain(10, 13, random.Random(0))
    with pytest.raises(ValueError):
        generate_terrain(0, 40, random.Random(0))


def test_active_rect_stays_in_bounds():
    terrain = flat_terrain()
    rect = compute_active_rect(terrain, 1000.0, -500.0, 1280.0, 720.0)
    assert 0 <= rect.min_x <= rect.max_x <= WIDTH - 1
    assert 0 <= rect.min_y <= rect.max_y <= HEIGHT - 1


def test_active_rect_zero_view_is_margin_around_camera():
    terrain = generate_terrain(200, 100, random.Random(1))
    cam_x = 100 * TILE_SIZE
    cam_y = tile_to_world_y(100, 50)
    rect = compute_active_rect(terrain, cam_x, cam_y, 0.0, 0.0)
    assert rect.max_x - 100 == 100 - rect.min_x
    assert rect.max_y - 50 == 50 - rect.min_y
    assert rect.max_x > rect.min_x


def test_tiles_in_radius_within_distance():
    terrain = flat_terrain()
    wx, wy = 77.0, 41.0
    found = list(terrain.tiles_in_radius(wx, wy, DIG_RADIUS))
    assert found
    for x, y in found:
        dx = x * TILE_SIZE - wx
        dy = tile_to_world_y(HEIGHT, y) - wy
        assert dx * dx + dy * dy < DIG_RADIUS * DIG_RADIUS
        assert 0 <= x < WIDTH and 0 <= y < HEIGHT


def test_dig_clears_solid_and_marks_changed():
    terrain = flat_terrain()
    wx, wy = 10 * TILE_SIZE, tile_to_world_y(HEIGHT, SURFACE)
    cleared = dig(terrain, wx, wy)
    assert (10, SURFACE) in cleared
    assert list(terrain.changed_tiles) == cleared
    for x, y in cleared:
        assert terrain.tiles[y][x].kind is TileKind.AIR
    assert all(t.kind is TileKind.SKY for t in terrain.tiles[SURFACE - 1])
    assert terrain.tiles[SURFACE][0].kind is TileKind.GRASS


def test_color_and_z():
    terrain = flat_terrain()
    terrain.tiles[6][2].kind = TileKind.AIR
    color, z = terrain.color_and_z(2, 6)
    assert z == -1.0
    assert color == (0.0, 0.0, 0.0)

    terrain.tiles[7][2].kind = TileKind.STONE
    terrain.tiles[7][2].visible = True
    color, z = terrain.color_and_z(2, 7)
    assert z == 0.0
    assert color[0] == color[1] == color[2]
    assert 0.4 <= color[0] <= 0.6


def test_color_and_z_rejects_sky():
    terrain = flat_terrain()
    with pytest.raises(ValueError):
        terrain.color_and_z(0, 0)


def test_streamer_initial_fill_skips_sky():
    terrain = flat_terrain()
    streamer = TileStreamer(terrain)
    rect = ActiveRect(0, 9, 0, HEIGHT - 1)
    streamer.update(rect)
    assert set(streamer.sprites) == non_sky(terrain, rect)
    assert streamer.last_rect == rect


def test_streamer_recycles_sprites_when_scrolling():
    terrain = flat_terrain()
    streamer = TileStreamer(terrain)
    streamer.update(ActiveRect(0, 9, 0, HEIGHT - 1))
    before = {id(s) for s in streamer.sprites.values()}
    new = ActiveRect(5, 14, 0, HEIGHT - 1)
    streamer.update(new)
    assert set(streamer.sprites) == non_sky(terrain, new)
    assert {id(s) for s in streamer.sprites.values()} == before
    assert streamer.free == []
    assert all(s.visible for s in streamer.sprites.values())


def test_streamer_vertical_scroll_and_noop():
    terrain = flat_terrain()
    streamer = TileStreamer(terrain)
    streamer.update(ActiveRect(0, 5, 0, 7))
    new = ActiveRect(0, 5, 3, HEIGHT - 1)
    streamer.update(new)
    assert set(streamer.sprites) == non_sky(terrain, new)
    snapshot = dict(streamer.sprites)
    streamer.update(new)
    assert streamer.sprites == snapshot


def test_redraw_changed_updates_and_removes():
    terrain = flat_terrain()
    streamer = TileStreamer(terrain)
    streamer.update(ActiveRect(0, 9, 0, HEIGHT - 1))

    terrain.tiles[SURFACE][6].kind = TileKind.AIR
    terrain.mark_changed(6, SURFACE)
    terrain.tiles[SURFACE][7].kind = TileKind.SKY
    terrain.mark_changed(7, SURFACE)
    terrain.mark_changed(15, SURFACE + 1)

    assert streamer.redraw_changed() == 3
    assert not terrain.changed_tiles
    assert streamer.sprites[(6, SURFACE)].z == -1.0
    assert (7, SURFACE) not in streamer.sprites
    assert (15, SURFACE + 1) in streamer.sprites
    assert streamer.free == []