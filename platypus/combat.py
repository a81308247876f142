"""Mining, block placement, gunfire, bullets and the particles they throw off."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass

from platypus.components import Bullet, Enemy, HeldItem, Particle
from platypus.constants import (
    BLOOD_COLOR,
    BLOOD_LIFETIME,
    BLOOD_RATE,
    BLOOD_SPEED_X,
    BLOOD_SPEED_Y,
    BULLET_DAMAGE,
    BULLET_LIFETIME,
    BULLET_SPEED,
    DEBRIS_LIFETIME,
    DEBRIS_RATE,
    DEBRIS_SPEED_X,
    DEBRIS_SPEED_Y,
    GRAVITY,
    HIT_BLOOD_LIFE,
    HIT_BLOOD_RATE,
    HIT_KNOCKBACK,
    HIT_KNOCKBACK_UP,
    MINING_RADIUS,
    PICKAXE_SPEED,
    PLAYER_HEIGHT,
    PLAYER_WIDTH,
    RECOIL_TIME,
    TILE_SIZE,
)
from platypus.terrain import (
    Terrain,
    TileKind,
    solid,
    tile_to_world_y,
    world_to_tile_y,
)

Color = tuple[float, float, float]
Point = tuple[float, float]
Cell = tuple[int, int]

# seconds between bullets while the trigger is held (about 12.5 rounds/s)
GUN_FIRE_INTERVAL = 0.12
# the pickaxe works in fixed frame-sized steps
MINE_STEP = 1.0 / 60.0
PLACED_STONE_MINE_TIME = 0.50
DEBRIS_SIZE = 2.5
BLOOD_SIZE = 4.0
HIT_BLOOD_SIZE = 3.0
HIT_BLOOD_SPEED_X = (-70.0, 70.0)
HIT_BLOOD_SPEED_Y = (20.0, 120.0)

MINE_HIGHLIGHT = (1.0, 0.0, 0.0, 0.4)
BUILD_HIGHLIGHT = (0.0, 1.0, 0.0, 0.4)

_HALF_W = PLAYER_WIDTH / 2.0
_HALF_H = PLAYER_HEIGHT / 2.0
_NEIGHBOURS = ((-1, 0), (1, 0), (0, -1), (0, 1))


def _round_half_away(v: float) -> int:
    return int(math.copysign(math.floor(abs(v) + 0.5), v))


def tile_color(kind: TileKind) -> Color:
    """Approximate colour of debris knocked out of a tile of ``kind``."""
    if kind is TileKind.DIRT:
        return (0.55, 0.27, 0.07)
    if kind is TileKind.STONE:
        return (0.50, 0.50, 0.50)
    return (1.0, 1.0, 1.0)


@dataclass
class Gun:
    """Automatic gun: fires one bullet per interval while the trigger is held."""

    interval: float = GUN_FIRE_INTERVAL
    cooldown: float = 0.0

    def update(
        self, dt: float, firing: bool, origin: Point, target: Point | None
    ) -> Bullet | None:
        """Advance the cooldown and return a new bullet aimed at ``target`` if one fires."""
        self.cooldown -= dt
        if not firing or self.cooldown > 0.0:
            return None
        self.cooldown = self.interval
        if target is None:
            return None
        dx = target[0] - origin[0]
        dy = target[1] - origin[1]
        length = math.hypot(dx, dy)
        if length == 0.0 or not math.isfinite(length):
            return None
        return Bullet(
            x=origin[0],
            y=origin[1],
            vx=dx / length * BULLET_SPEED,
            vy=dy / length * BULLET_SPEED,
            damage=BULLET_DAMAGE,
            life=BULLET_LIFETIME,
        )


def _burst(
    count: int,
    x: float,
    y: float,
    speed_x: tuple[float, float],
    speed_y: tuple[float, float],
    life: float,
    color: Color,
    size: float,
    rng: random.Random,
) -> list[Particle]:
    return [
        Particle(
            x=x,
            y=y,
            vx=rng.uniform(*speed_x),
            vy=rng.uniform(*speed_y),
            life=life,
            fade_time=DEBRIS_LIFETIME,
            color=color,
            size=size,
        )
        for _ in range(count)
    ]


def spawn_debris(
    terrain: Terrain, x: int, y: int, rng: random.Random | None = None
) -> list[Particle]:
    """Debris spray from tile (x, y), coloured after the tile's current kind."""
    rng = rng if rng is not None else random.Random()
    return _burst(
        DEBRIS_RATE,
        x * TILE_SIZE,
        tile_to_world_y(terrain.height, y),
        DEBRIS_SPEED_X,
        DEBRIS_SPEED_Y,
        DEBRIS_LIFETIME,
        tile_color(terrain.tiles[y][x].kind),
        DEBRIS_SIZE,
        rng,
    )


def spawn_blood(x: float, y: float, rng: random.Random | None = None) -> list[Particle]:
    """The large blood burst of a dying enemy."""
    rng = rng if rng is not None else random.Random()
    return _burst(
        BLOOD_RATE, x, y, BLOOD_SPEED_X, BLOOD_SPEED_Y,
        BLOOD_LIFETIME, BLOOD_COLOR, BLOOD_SIZE, rng,
    )


def spawn_hit_blood(x: float, y: float, rng: random.Random | None = None) -> list[Particle]:
    """The small blood puff of a bullet hit."""
    rng = rng if rng is not None else random.Random()
    return _burst(
        HIT_BLOOD_RATE, x, y, HIT_BLOOD_SPEED_X, HIT_BLOOD_SPEED_Y,
        HIT_BLOOD_LIFE, BLOOD_COLOR, HIT_BLOOD_SIZE, rng,
    )


def mine(
    terrain: Terrain, world_x: float, world_y: float, rng: random.Random | None = None
) -> list[Particle]:
    """Wear down solid tiles around the cursor for one frame; return debris of broken ones."""
    rng = rng if rng is not None else random.Random()
    debris: list[Particle] = []
    for tx, ty in list(terrain.tiles_in_radius(world_x, world_y, MINING_RADIUS)):
        tile = terrain.tiles[ty][tx]
        if not tile.kind.is_solid:
            continue
        tile.mine_time -= MINE_STEP * PICKAXE_SPEED
        if tile.mine_time <= 0.0:
            tile.kind = TileKind.AIR
            terrain.mark_changed(tx, ty)
            debris.extend(spawn_debris(terrain, tx, ty, rng))
    return debris


def _placement_target(terrain: Terrain, world_x: float, world_y: float) -> Cell | None:
    tx = math.floor(world_x / TILE_SIZE)
    ty = world_to_tile_y(terrain.height, world_y)
    if not (0 <= tx < terrain.width and 0 <= ty < terrain.height):
        return None
    if terrain.tiles[ty][tx].kind not in (TileKind.AIR, TileKind.SKY):
        return None
    if not any(solid(terrain, tx + dx, ty + dy) for dx, dy in _NEIGHBOURS):
        return None
    return tx, ty


def can_place_stone(terrain: Terrain, world_x: float, world_y: float) -> bool:
    """Whether the tile under the cursor is empty and touches something solid."""
    return _placement_target(terrain, world_x, world_y) is not None


def place_stone(terrain: Terrain, world_x: float, world_y: float) -> Cell | None:
    """Put a stone block under the cursor if allowed; return its tile or None."""
    target = _placement_target(terrain, world_x, world_y)
    if target is None:
        return None
    tx, ty = target
    tile = terrain.tiles[ty][tx]
    tile.kind = TileKind.STONE
    tile.mine_time = PLACED_STONE_MINE_TIME
    terrain.mark_changed(tx, ty)
    return target


def highlight_tiles(
    terrain: Terrain, item: HeldItem, world_x: float, world_y: float
) -> list[Cell]:
    """Tiles to outline under the cursor for the held item."""
    if item is HeldItem.PICKAXE:
        return [
            (tx, ty)
            for tx, ty in terrain.tiles_in_radius(world_x, world_y, MINING_RADIUS)
            if terrain.tiles[ty][tx].kind.is_solid
        ]
    if item is HeldItem.STONE_BLOCK:
        target = _placement_target(terrain, world_x, world_y)
        return [] if target is None else [target]
    return []


def _struck_enemy(enemies: list[Enemy], x: float, y: float) -> Enemy | None:
    return next(
        (
            enemy
            for enemy in enemies
            if enemy.alive
            and abs(enemy.body.x - x) <= _HALF_W
            and abs(enemy.body.y - y) <= _HALF_H
        ),
        None,
    )


def update_bullets(
    bullets: list[Bullet],
    enemies: list[Enemy],
    terrain: Terrain,
    dt: float,
    rng: random.Random | None = None,
) -> list[Particle]:
    """Fly bullets, resolve hits and deaths; return the blood particles produced.

    Spent bullets are removed from ``bullets`` and killed enemies from ``enemies``.
    """
    rng = rng if rng is not None else random.Random()
    particles: list[Particle] = []
    survivors: list[Bullet] = []

    for bullet in bullets:
        bullet.vy += GRAVITY * dt * 0.5
        bullet.x += bullet.vx * dt
        bullet.y += bullet.vy * dt
        bullet.life -= dt

        if bullet.life <= 0.0 or solid(
            terrain,
            _round_half_away(bullet.x / TILE_SIZE),
            world_to_tile_y(terrain.height, bullet.y),
        ):
            continue

        enemy = _struck_enemy(enemies, bullet.x, bullet.y)
        if enemy is None:
            survivors.append(bullet)
            continue

        body = enemy.body
        enemy.hp -= int(bullet.damage)
        enemy.recoil = RECOIL_TIME
        particles.extend(spawn_hit_blood(body.x, body.y, rng))
        body.vx = math.copysign(1.0, bullet.vx) * HIT_KNOCKBACK
        body.vy = max(body.vy, HIT_KNOCKBACK_UP)
        if not enemy.alive:
            particles.extend(spawn_blood(body.x, body.y, rng))

    bullets[:] = survivors
    enemies[:] = [enemy for enemy in enemies if enemy.alive]
    return particles


def update_particles(particles: list[Particle], dt: float) -> int:
    """Move and age particles, dropping expired ones; return how many expired."""
    before = len(particles)
    particles[:] = [p for p in particles if p.update(dt)]
    return before - len(particles)