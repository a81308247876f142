from platypus.constants import TILE_SIZE
from platypus.terrain import ActiveRect, Terrain, Tile, TileKind, tile_to_world_y
from platypus.visibility import (
    ALWAYS_VISIBLE_DEPTH,
    Visibility,
    cast_light,
    compute_visible,
)


def _air_terrain(width, height):
    tiles = [[Tile(kind=TileKind.AIR) for _ in range(width)] for _ in range(height)]
    return Terrain(tiles=tiles, height_map=[0] * width)


def _world_of(terrain, tx, ty):
    return tx * TILE_SIZE + 1.0, tile_to_world_y(terrain.height, ty) + 1.0


NO_BAND = ActiveRect(0, 0, 0, 0)


def test_open_area_everything_visible():
    terrain = _air_terrain(20, 20)
    visible = compute_visible(terrain, 10, 10, NO_BAND)
    assert visible == {(x, y) for x in range(20) for y in range(20)}


def test_walls_block_sight():
    terrain = _air_terrain(30, 30)
    ring = [(15 + dx, 15 + dy) for dx in (-1, 0, 1) for dy in (-1, 0, 1) if dx or dy]
    for x, y in ring:
        terrain.tiles[y][x].kind = TileKind.STONE
    visible = compute_visible(terrain, 15, 15, NO_BAND)
    assert set(ring) <= visible
    assert (15, 15) in visible
    for x, y in visible:
        if x == 0:
            continue
        assert max(abs(x - 15), abs(y - 15)) <= 2
    assert (15, 20) not in visible


def test_surface_band_covers_rect_columns():
    terrain = _air_terrain(30, 30)
    ring = [(15 + dx, 15 + dy) for dx in (-1, 0, 1) for dy in (-1, 0, 1) if dx or dy]
    for x, y in ring:
        terrain.tiles[y][x].kind = TileKind.STONE
    visible = compute_visible(terrain, 15, 15, ActiveRect(3, 4, 0, 29))
    for x in (3, 4):
        for y in range(ALWAYS_VISIBLE_DEPTH + 1):
            assert (x, y) in visible
        assert (x, ALWAYS_VISIBLE_DEPTH + 1) not in visible


def test_cast_light_empty_when_slopes_inverted():
    terrain = _air_terrain(10, 10)
    out = set()
    cast_light(terrain, 5, 5, 1, 0.0, 1.0, 8, 1, 0, 0, 1, out)
    assert out == set()


def test_cast_light_stays_in_bounds():
    terrain = _air_terrain(10, 10)
    out = set()
    cast_light(terrain, 0, 0, 1, 1.0, 0.0, 48, 1, 0, 0, 1, out)
    assert out
    assert all(0 <= x < 10 and 0 <= y < 10 for x, y in out)


def test_recompute_marks_visible_and_explored():
    terrain = _air_terrain(100, 10)
    vis = Visibility(terrain, *_world_of(terrain, 5, 5))
    assert vis.tile == (5, 5)
    assert vis.recompute(NO_BAND) is True
    tile = terrain.tiles[5][5]
    assert tile.visible and tile.explored
    assert len(terrain.changed_tiles) == len(vis.visible)


def test_recompute_skipped_without_tile_change():
    terrain = _air_terrain(100, 10)
    vis = Visibility(terrain, *_world_of(terrain, 5, 5))
    vis.recompute(NO_BAND)
    queued = len(terrain.changed_tiles)
    assert vis.track(*_world_of(terrain, 5, 5)) is False
    assert vis.recompute(NO_BAND) is False
    assert len(terrain.changed_tiles) == queued


def test_moving_away_leaves_tiles_explored():
    terrain = _air_terrain(100, 10)
    vis = Visibility(terrain, *_world_of(terrain, 5, 5))
    vis.recompute(NO_BAND)
    assert vis.track(*_world_of(terrain, 95, 5)) is True
    assert vis.tile == (95, 5)
    assert vis.recompute(NO_BAND) is True
    left = terrain.tiles[5][5]
    assert left.visible is False
    assert left.explored is True
    assert terrain.tiles[5][95].visible is True
    assert all(tile_x > 5 or tile_x == 0 for tile_x, _ in vis.visible)