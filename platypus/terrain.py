"""World generation, tile queries, digging and sprite streaming."""

from __future__ import annotations

import enum
import math
import random
from collections import deque
from dataclasses import dataclass, field
from typing import Iterator

from platypus.constants import (
    ACTIVE_MARGIN,
    COLOR_NOISE_SCALE,
    COLOR_VARIATION_LEVELS,
    COLOR_VARIATION_STRENGTH,
    DIG_RADIUS,
    TILE_SIZE,
)
from platypus.perlin import Perlin

Color = tuple[float, float, float]

# ---------------------------------------------------------------- knobs
MIN_CAVE_DEPTH = 8
BACKGROUND_BROWN: Color = (0.20, 0.10, 0.05)
EXPLORED_BRIGHTNESS = 0.25

OBSIDIAN_START_FRAC = 0.80
ISLAND_DENSITY = 256
ISLAND_RADIUS_MIN = 24
ISLAND_RADIUS_MAX = 48

CAVE_FREQ_X = 0.015
CAVE_FREQ_Y = 0.04
CAVE_THRESH = 0.15

RIFT_FREQ = 0.018
RIFT_THRESH = 0.75

DIRT_TO_STONE = 0.02
STONE_TO_OBSID = 0.01

GRASS_RATIO = 0.85

_HILL_FREQ = 0.01
_AMP_LOW = 5.0
_AMP_HIGH = 12.0
_CLIFF_FREQ = 0.12
_CLIFF_THRESH = 0.85
_CLIFF_STRENGTH = 18.0


class TileKind(enum.Enum):
    AIR = enum.auto()
    SKY = enum.auto()
    GRASS = enum.auto()
    DIRT = enum.auto()
    STONE = enum.auto()
    OBSIDIAN = enum.auto()

    @property
    def is_solid(self) -> bool:
        return self in _SOLID_KINDS


_SOLID_KINDS = frozenset(
    {TileKind.GRASS, TileKind.DIRT, TileKind.STONE, TileKind.OBSIDIAN}
)

_MINE_TIMES = {
    TileKind.GRASS: 0.20,
    TileKind.DIRT: 0.25,
    TileKind.STONE: 0.50,
    TileKind.OBSIDIAN: 1.00,
}

_BASE_COLORS: dict[TileKind, Color] = {
    TileKind.GRASS: (0.13, 0.70, 0.08),
    TileKind.DIRT: (0.55, 0.27, 0.07),
    TileKind.STONE: (0.50, 0.50, 0.50),
    TileKind.OBSIDIAN: (0.20, 0.05, 0.35),
}


@dataclass
class Tile:
    kind: TileKind = TileKind.AIR
    visible: bool = False
    explored: bool = False
    mine_time: float = 0.0


# ---------------------------------------------------------------- helpers
def tile_to_world_y(terrain_h: int, tile_y: int) -> float:
    """World y of a tile row; row 0 is the top of the map."""
    return (terrain_h - 1.0 - tile_y) * TILE_SIZE


def world_to_tile_y(terrain_h: int, world_y: float) -> int:
    """Tile row containing world height ``world_y``."""
    return int(terrain_h - 1.0 - math.floor(world_y / TILE_SIZE))


def _round_half_away(v: float) -> int:
    return int(math.copysign(math.floor(abs(v) + 0.5), v))


def brightness(tile: Tile) -> float:
    """Light level of a tile: lit, remembered, or unseen."""
    if tile.visible:
        return 1.0
    if tile.explored:
        return EXPLORED_BRIGHTNESS
    return 0.0


@dataclass
class Terrain:
    """The tile grid, indexed ``tiles[y][x]``, plus generation data."""

    tiles: list[list[Tile]]
    height_map: list[int]
    color_noise: Perlin = field(default_factory=Perlin)
    changed_tiles: deque[tuple[int, int]] = field(default_factory=deque)

    @property
    def width(self) -> int:
        return len(self.tiles[0]) if self.tiles else 0

    @property
    def height(self) -> int:
        return len(self.tiles)

    def mark_changed(self, x: int, y: int) -> None:
        """Queue tile (x, y) for redrawing."""
        self.changed_tiles.append((x, y))

    def tiles_in_radius(
        self, world_x: float, world_y: float, radius: float
    ) -> Iterator[tuple[int, int]]:
        """Yield in-bounds tiles whose origin lies strictly within ``radius``."""
        min_x = math.floor((world_x - radius) / TILE_SIZE)
        max_x = math.ceil((world_x + radius) / TILE_SIZE)
        min_y = world_to_tile_y(self.height, world_y + radius)
        max_y = world_to_tile_y(self.height, world_y - radius)
        r2 = radius * radius
        for ty in range(min_y, max_y + 1):
            if not 0 <= ty < self.height:
                continue
            dy = tile_to_world_y(self.height, ty) - world_y
            for tx in range(min_x, max_x + 1):
                if not 0 <= tx < self.width:
                    continue
                dx = tx * TILE_SIZE - world_x
                if dx * dx + dy * dy < r2:
                    yield tx, ty

    def color_and_z(self, x: int, y: int) -> tuple[Color, float]:
        """Tinted, lit colour and draw depth of the sprite for tile (x, y)."""
        tile = self.tiles[y][x]
        if tile.kind is TileKind.SKY:
            raise ValueError(f"sky tile ({x}, {y}) has no sprite")

        raw = self.color_noise.get(x * COLOR_NOISE_SCALE, y * COLOR_NOISE_SCALE)
        levels = COLOR_VARIATION_LEVELS
        step = min(max(math.floor((raw + 1.0) * 0.5 * levels), 0), levels - 1)
        norm = step / (levels - 1.0) * 2.0 - 1.0
        factor = 1.0 + norm * COLOR_VARIATION_STRENGTH

        if tile.kind is TileKind.AIR:
            base = BACKGROUND_BROWN
        else:
            base = tuple(c * factor for c in _BASE_COLORS[tile.kind])
        light = brightness(tile)
        color = tuple(min(max(c * light, 0.0), 1.0) for c in base)
        z = -1.0 if tile.kind is TileKind.AIR else 0.0
        return color, z  # type: ignore[return-value]


def solid(terrain: Terrain, tx: int, ty: int) -> bool:
    """Whether tile (tx, ty) blocks movement; outside the map counts as solid."""
    if not (0 <= tx < terrain.width and 0 <= ty < terrain.height):
        return True
    return terrain.tiles[ty][tx].kind.is_solid


# ---------------------------------------------------------------- generation
def _new_noise(rng: random.Random) -> Perlin:
    return Perlin(rng.getrandbits(32))


def _ground_kind(
    x: int, y: int, depth: int, height: int, rift_val: float, cave: Perlin
) -> TileKind:
    if depth < MIN_CAVE_DEPTH:
        return TileKind.STONE if depth > height // 4 else TileKind.DIRT
    if rift_val > RIFT_THRESH and depth > 3:
        return TileKind.AIR
    if cave.get(x * CAVE_FREQ_X, y * CAVE_FREQ_Y) > CAVE_THRESH:
        return TileKind.AIR
    if y >= int(height * OBSIDIAN_START_FRAC):
        return TileKind.OBSIDIAN
    if depth > height // 4:
        return TileKind.STONE
    return TileKind.DIRT


def generate_terrain(
    width: int, height: int, rng: random.Random | None = None
) -> Terrain:
    """Build a world: hills and cliffs, layered ground, caves, rifts and sky islands."""
    if width < 1:
        raise ValueError(f"world width must be positive, got {width}")
    if height < 14:
        raise ValueError(f"world height must be at least 14, got {height}")
    rng = rng if rng is not None else random.Random()

    hills = _new_noise(rng)
    cliffs = _new_noise(rng)
    base = height * 0.35
    height_map: list[int] = []
    for x in range(width):
        n = hills.get(x * _HILL_FREQ, 0.0)
        elev = base - n * (_AMP_HIGH if n >= 0.0 else _AMP_LOW)
        cliff = cliffs.get(x * _CLIFF_FREQ, 100.0)
        if abs(cliff) > _CLIFF_THRESH:
            elev -= math.copysign(1.0, cliff) * _CLIFF_STRENGTH
        height_map.append(int(min(max(elev, 4.0), float(height - 10))))

    tiles = [[Tile() for _ in range(width)] for _ in range(height)]
    cave = _new_noise(rng)
    rift = _new_noise(rng)

    for x, surface in enumerate(height_map):
        for y in range(surface):
            tiles[y][x].kind = TileKind.SKY
            tiles[y][x].mine_time = 0.0

        rift_val = rift.get(x * RIFT_FREQ, 0.0)
        for y in range(surface, height):
            depth = y - surface
            kind = _ground_kind(x, y, depth, height, rift_val, cave)
            if depth == 0:
                kind = TileKind.GRASS if rng.random() < GRASS_RATIO else TileKind.DIRT
            elif kind is TileKind.DIRT and rng.random() < DIRT_TO_STONE:
                kind = TileKind.STONE
            elif kind is TileKind.STONE and rng.random() < STONE_TO_OBSID:
                kind = TileKind.OBSIDIAN
            tiles[y][x].kind = kind
            tiles[y][x].mine_time = _MINE_TIMES.get(kind, 0.0)

    island_noise = _new_noise(rng)
    for _ in range(width // ISLAND_DENSITY):
        cx = rng.randrange(4, width - 4)
        top = height_map[cx] // 2
        if top <= 3:
            continue  # column too shallow to hold an island above it
        cy = rng.randrange(3, top)
        radius = float(rng.randint(ISLAND_RADIUS_MIN, ISLAND_RADIUS_MAX))
        vert = math.ceil(radius * 1.5)
        horiz = math.ceil(radius * 2.0)
        for iy in range(max(cy - vert, 0), min(cy + vert, height - 1) + 1):
            ny = (iy - cy) / radius * 2.0
            for ix in range(max(cx - horiz, 0), min(cx + horiz, width - 1) + 1):
                nx = (ix - cx) / radius
                d = nx * nx + ny * ny
                if d < 1.0 and island_noise.get(ix * 0.3, iy * 0.3) > -0.2:
                    outer = d > 0.7
                    tiles[iy][ix].kind = TileKind.DIRT if outer else TileKind.STONE
                    tiles[iy][ix].mine_time = 0.25 if outer else 0.50

    return Terrain(tiles=tiles, height_map=height_map, color_noise=_new_noise(rng))


# ---------------------------------------------------------------- active window
@dataclass(frozen=True)
class ActiveRect:
    """Inclusive tile rectangle kept alive around the camera."""

    min_x: int
    max_x: int
    min_y: int
    max_y: int


def compute_active_rect(
    terrain: Terrain, cam_x: float, cam_y: float, view_w: float, view_h: float
) -> ActiveRect:
    """Tiles covered by the view around the camera plus a margin, clamped to the map."""
    pad_x = math.ceil(view_w * 0.5 / TILE_SIZE) + ACTIVE_MARGIN
    pad_y = math.ceil(view_h * 0.5 / TILE_SIZE) + ACTIVE_MARGIN
    px = _round_half_away(cam_x / TILE_SIZE)
    py = world_to_tile_y(terrain.height, cam_y)

    def clamp(v: int, hi: int) -> int:
        return min(max(v, 0), hi)

    return ActiveRect(
        min_x=clamp(px - pad_x, terrain.width - 1),
        max_x=clamp(px + pad_x, terrain.width - 1),
        min_y=clamp(py - pad_y, terrain.height - 1),
        max_y=clamp(py + pad_y, terrain.height - 1),
    )


def dig(terrain: Terrain, world_x: float, world_y: float) -> list[tuple[int, int]]:
    """Clear every solid tile within the dig radius; return the tiles cleared."""
    cleared = [
        (tx, ty)
        for tx, ty in terrain.tiles_in_radius(world_x, world_y, DIG_RADIUS)
        if terrain.tiles[ty][tx].kind.is_solid
    ]
    for tx, ty in cleared:
        terrain.tiles[ty][tx].kind = TileKind.AIR
        terrain.mark_changed(tx, ty)
    return cleared


# ---------------------------------------------------------------- streaming
@dataclass
class _TileSprite:
    x: int
    y: int
    color: Color
    z: float
    visible: bool = True

    @property
    def world_x(self) -> float:
        return self.x * TILE_SIZE


class TileStreamer:
    """Keeps sprites for the tiles inside the active window, recycling old ones."""

    def __init__(self, terrain: Terrain) -> None:
        self.terrain = terrain
        self.sprites: dict[tuple[int, int], _TileSprite] = {}
        self.free: list[_TileSprite] = []
        self.last_rect: ActiveRect | None = None

    def _place(self, x: int, y: int) -> None:
        color, z = self.terrain.color_and_z(x, y)
        if self.free:
            sprite = self.free.pop()
            sprite.x, sprite.y, sprite.color, sprite.z = x, y, color, z
            sprite.visible = True
        else:
            sprite = _TileSprite(x, y, color, z)
        self.sprites[(x, y)] = sprite

    def _ensure(self, x: int, y: int) -> None:
        terrain = self.terrain
        if not (0 <= x < terrain.width and 0 <= y < terrain.height):
            return
        if (x, y) in self.sprites:
            return
        if terrain.tiles[y][x].kind is TileKind.SKY:
            return
        self._place(x, y)

    def _release(self, x: int, y: int) -> None:
        sprite = self.sprites.pop((x, y), None)
        if sprite is not None:
            sprite.visible = False
            self.free.append(sprite)

    def update(self, rect: ActiveRect) -> None:
        """Spawn sprites for stripes entering ``rect`` and pool those leaving it."""
        prev = self.last_rect
        if prev == rect:
            return
        new_xs = range(rect.min_x, rect.max_x + 1)
        new_ys = range(rect.min_y, rect.max_y + 1)

        if prev is None:
            for y in new_ys:
                for x in new_xs:
                    self._ensure(x, y)
            self.last_rect = rect
            return

        prev_xs = range(prev.min_x, prev.max_x + 1)
        prev_ys = range(prev.min_y, prev.max_y + 1)

        for x in new_xs:
            if x not in prev_xs:
                for y in new_ys:
                    self._ensure(x, y)
        for y in new_ys:
            if y not in prev_ys:
                for x in new_xs:
                    self._ensure(x, y)

        for x in prev_xs:
            if x not in new_xs:
                for y in prev_ys:
                    self._release(x, y)
        for y in prev_ys:
            if y not in new_ys:
                for x in prev_xs:
                    if x in new_xs:
                        self._release(x, y)
        self.last_rect = rect

    def redraw_changed(self) -> int:
        """Refresh sprites for every queued tile change; return how many were handled."""
        terrain = self.terrain
        count = 0
        while terrain.changed_tiles:
            x, y = terrain.changed_tiles.popleft()
            count += 1
            if terrain.tiles[y][x].kind is TileKind.SKY:
                self._release(x, y)
                continue
            sprite = self.sprites.get((x, y))
            if sprite is None:
                self._place(x, y)
            else:
                sprite.color, sprite.z = terrain.color_and_z(x, y)
                sprite.visible = True
        return count