"""Orc spawning, wake/sleep tagging, AI, physics and melee attacks."""

from __future__ import annotations

import math
import random

from platypus.components import Body, Enemy, Health
from platypus.constants import (
    AGGRO_RADIUS,
    COLLISION_STEPS,
    ENEMY_KEEP_AWAY,
    ENEMY_SPEED,
    GRAVITY,
    JUMP_SPEED,
    PLAYER_HEIGHT,
    PLAYER_WIDTH,
    TILE_SIZE,
)
from platypus.terrain import (
    ActiveRect,
    Terrain,
    solid,
    tile_to_world_y,
    world_to_tile_y,
)

# horizontal distance within which an orc can hit the player
STRIKE_RANGE = TILE_SIZE * 6.0
# distance at which an orc starts swinging (it may still miss)
ATTACK_RANGE = TILE_SIZE * 16.0
ATTACK_DAMAGE = 20.0
ATTACK_COOLDOWN = 3.0
ATTACK_JITTER = 0.4
# the swing lands on this sprite-sheet frame
STRIKE_FRAME = 3
# below this cooldown the idle sheet is shown again
ATTACK_POSE_END = 2.5

ENEMY_COUNT = 64

_HALF_W = PLAYER_WIDTH / 2.0
_HALF_H = PLAYER_HEIGHT / 2.0


def _signum(v: float) -> float:
    return math.copysign(1.0, v)


def spawn_enemies(
    terrain: Terrain, rng: random.Random | None = None, count: int = ENEMY_COUNT
) -> list[Enemy]:
    """Drop ``count`` orcs on the surface at random columns."""
    rng = rng if rng is not None else random.Random()
    enemies = []
    for _ in range(count):
        x_tile = rng.randrange(terrain.width)
        y_tile = terrain.height_map[x_tile]
        x = x_tile * TILE_SIZE
        y = tile_to_world_y(terrain.height, y_tile) + TILE_SIZE * 0.5 + PLAYER_HEIGHT * 0.5
        enemies.append(Enemy(body=Body(x=x, y=y)))
    return enemies


def is_inside(rect: ActiveRect, terrain: Terrain, x: float, y: float) -> bool:
    """Whether world point (x, y) lies in the tile rectangle ``rect``."""
    tx = math.floor(x / TILE_SIZE)
    ty = world_to_tile_y(terrain.height, y)
    return rect.min_x <= tx <= rect.max_x and rect.min_y <= ty <= rect.max_y


def update_active(
    enemies: list[Enemy], rect: ActiveRect, terrain: Terrain
) -> list[Enemy]:
    """Wake enemies inside ``rect`` and put the rest to sleep; return the awake ones."""
    for enemy in enemies:
        enemy.active = is_inside(rect, terrain, enemy.body.x, enemy.body.y)
    return [enemy for enemy in enemies if enemy.active]


def enemy_ai(enemy: Enemy, player_pos: tuple[float, float], rng: random.Random) -> None:
    """Steer an awake enemy: chase the player in range, otherwise wander."""
    if not enemy.active or enemy.recoil > 0.0:
        return
    body = enemy.body
    to_x = player_pos[0] - body.x
    to_y = player_pos[1] - body.y

    if math.hypot(to_x, to_y) < AGGRO_RADIUS:
        if abs(to_x) > ENEMY_KEEP_AWAY:
            body.vx = ENEMY_SPEED * _signum(to_x)
            body.facing = _signum(to_x)
        else:
            body.vx = 0.0
        if body.grounded and to_y > TILE_SIZE * 0.5 and rng.random() < 0.15:
            body.vy = JUMP_SPEED
        return

    if rng.random() < 0.02:
        body.vx = -ENEMY_SPEED if rng.random() < 0.5 else ENEMY_SPEED
        body.facing = _signum(body.vx)
    if body.grounded and rng.random() < 0.005:
        body.vy = JUMP_SPEED


def _rows_spanned(terrain: Terrain, y: float) -> range:
    top = world_to_tile_y(terrain.height, y + _HALF_H - 0.1)
    bottom = world_to_tile_y(terrain.height, y - _HALF_H + 0.1)
    return range(min(top, bottom), max(top, bottom) + 1)


def _cols_spanned(x: float) -> range:
    left = math.floor((x - _HALF_W + 0.1) / TILE_SIZE)
    right = math.floor((x + _HALF_W - 0.1) / TILE_SIZE)
    return range(left, right + 1)


def enemy_physics(enemy: Enemy, terrain: Terrain, dt: float) -> None:
    """Apply gravity and stepped tile collision to an awake enemy."""
    if not enemy.active:
        return
    body = enemy.body
    body.vy += GRAVITY * dt
    step_dt = dt / COLLISION_STEPS
    body.grounded = False

    for _ in range(COLLISION_STEPS):
        if body.vx != 0.0:
            new_x = body.x + body.vx * step_dt
            tx = math.floor((new_x + _signum(body.vx) * _HALF_W) / TILE_SIZE)
            if any(solid(terrain, tx, ty) for ty in _rows_spanned(terrain, body.y)):
                body.vx = 0.0
            else:
                body.x = new_x

        if body.vy != 0.0:
            new_y = body.y + body.vy * step_dt
            ty = world_to_tile_y(terrain.height, new_y + _signum(body.vy) * _HALF_H)
            if any(solid(terrain, tx, ty) for tx in _cols_spanned(body.x)):
                if body.vy < 0.0:
                    body.grounded = True
                body.vy = 0.0
            else:
                body.y = new_y

        # the stun timer runs down once per collision step
        if enemy.recoil > 0.0:
            enemy.recoil = max(enemy.recoil - dt, 0.0)


def enemy_attack(
    enemy: Enemy,
    player_pos: tuple[float, float],
    health: Health,
    rng: random.Random,
    dt: float,
) -> bool:
    """Run an awake enemy's swing cycle; return True if the blow hit the player."""
    if not enemy.active:
        return False
    if enemy.attack_cooldown > 0.0:
        enemy.attack_cooldown -= dt

    dx = abs(player_pos[0] - enemy.body.x)
    dy = abs(player_pos[1] - enemy.body.y)
    in_anim_range = dx <= ATTACK_RANGE and dy <= _HALF_H
    in_hit_range = dx <= STRIKE_RANGE and dy <= _HALF_H

    if in_anim_range and enemy.attack_cooldown <= 0.0:
        enemy.attacking = True
        enemy.attack_cooldown = ATTACK_COOLDOWN + rng.uniform(-ATTACK_JITTER, ATTACK_JITTER)
        enemy.hit_pending = True

    hit = False
    if enemy.hit_pending and enemy.animation.index == STRIKE_FRAME:
        if in_hit_range:
            health.damage(ATTACK_DAMAGE)
            hit = True
        enemy.hit_pending = False

    if enemy.attack_cooldown < ATTACK_POSE_END:
        enemy.attacking = False
    return hit