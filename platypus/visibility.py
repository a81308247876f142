"""Field of view and lighting by recursive shadow-casting, bounded by a radius."""

from __future__ import annotations

import math

from platypus.constants import TILE_SIZE
from platypus.terrain import ActiveRect, Terrain, world_to_tile_y

FOV_RADIUS = 48
LIGHT_BLEED_RADIUS = 1
ALWAYS_VISIBLE_DEPTH = 4

# (xx, xy, yx, yy) transforms mapping each octant onto the first
_OCTANTS = (
    (1, 0, 0, 1),
    (0, 1, 1, 0),
    (0, -1, 1, 0),
    (-1, 0, 0, 1),
    (-1, 0, 0, -1),
    (0, -1, -1, 0),
    (0, 1, -1, 0),
    (1, 0, 0, -1),
)

Cell = tuple[int, int]


def cast_light(
    terrain: Terrain,
    cx: int,
    cy: int,
    row: int,
    start_slope: float,
    end_slope: float,
    radius: int,
    xx: int,
    xy: int,
    yx: int,
    yy: int,
    out: set[Cell],
) -> None:
    """Add to ``out`` the tiles lit in one octant around (cx, cy)."""
    if start_slope < end_slope:
        return
    width, height = terrain.width, terrain.height
    radius_sq = radius * radius

    blocked = False
    new_start = 0.0

    for dist in range(row, radius + 1):
        dy = -dist
        for dx in range(-dist, 1):
            l_slope = (dx - 0.5) / (dy + 0.5)
            r_slope = (dx + 0.5) / (dy - 0.5)

            if r_slope > start_slope:
                continue
            if l_slope < end_slope:
                break

            tx = cx + dx * xx + dy * xy
            ty = cy + dx * yx + dy * yy
            if not (0 <= tx < width and 0 <= ty < height):
                continue

            if dx * dx + dy * dy <= radius_sq:
                out.add((tx, ty))

            opaque = terrain.tiles[ty][tx].kind.is_solid
            if blocked:
                if opaque:
                    new_start = r_slope
                else:
                    blocked = False
                    start_slope = new_start
            elif opaque:
                blocked = True
                new_start = r_slope
                cast_light(
                    terrain, cx, cy, dist + 1, start_slope, l_slope,
                    radius, xx, xy, yx, yy, out,
                )
        if blocked:
            break


def compute_visible(terrain: Terrain, px: int, py: int, rect: ActiveRect) -> set[Cell]:
    """Tiles lit from tile (px, py), with a light halo and the surface band of ``rect``."""
    width, height = terrain.width, terrain.height
    visible: set[Cell] = set()

    for xx, xy, yx, yy in _OCTANTS:
        cast_light(terrain, px, py, 1, 1.0, 0.0, FOV_RADIUS, xx, xy, yx, yy, visible)
    if 0 <= px < width and 0 <= py < height:
        visible.add((px, py))

    if LIGHT_BLEED_RADIUS > 0:
        span = range(-LIGHT_BLEED_RADIUS, LIGHT_BLEED_RADIUS + 1)
        halo = {
            (x + bx, y + by)
            for x, y in visible
            for by in span
            for bx in span
            if 0 <= x + bx < width and 0 <= y + by < height
        }
        visible |= halo

    for x in range(max(rect.min_x, 0), min(rect.max_x, width - 1) + 1):
        max_y = min(terrain.height_map[x] + ALWAYS_VISIBLE_DEPTH, height - 1)
        visible.update((x, y) for y in range(max_y + 1))

    return visible


def _tile_of(terrain: Terrain, world_x: float, world_y: float) -> Cell:
    return math.floor(world_x / TILE_SIZE), world_to_tile_y(terrain.height, world_y)


class Visibility:
    """Tracks the player's tile and keeps the terrain's lit tiles up to date."""

    def __init__(self, terrain: Terrain, world_x: float, world_y: float) -> None:
        self.terrain = terrain
        self.tile: Cell = _tile_of(terrain, world_x, world_y)
        self.visible: set[Cell] = set()
        self._dirty = True

    def track(self, x: float, y: float) -> bool:
        """Follow the player to world position (x, y); return True if its tile changed."""
        tile = _tile_of(self.terrain, x, y)
        if tile == self.tile:
            return False
        self.tile = tile
        self._dirty = True
        return True

    def recompute(self, rect: ActiveRect) -> bool:
        """Recompute the lit set if the player moved tiles; return whether it ran."""
        if not self._dirty:
            return False
        self._dirty = False

        terrain = self.terrain
        new_visible = compute_visible(terrain, self.tile[0], self.tile[1], rect)

        for x, y in self.visible - new_visible:
            terrain.tiles[y][x].visible = False
            terrain.mark_changed(x, y)
        for x, y in new_visible - self.visible:
            tile = terrain.tiles[y][x]
            tile.visible = True
            tile.explored = True
            terrain.mark_changed(x, y)

        self.visible = new_visible
        return True