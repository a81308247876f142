"""Player spawning, input, stepped physics, jet-pack, dashing and regeneration."""

from __future__ import annotations

import math
import random

from platypus.components import Body, Dashing, HeldItem, Health, Inventory, Particle, Player
from platypus.constants import (
    COLLISION_STEPS,
    DASH_DECEL,
    DASH_DURATION,
    DASH_PUFF_LIFETIME,
    DASH_PUFF_RATE,
    DASH_PUFF_SIZE,
    DASH_SPEED,
    DASH_UPWARD_BOOST,
    EXHAUST_COLOR,
    EXHAUST_LIFETIME,
    EXHAUST_RATE,
    EXHAUST_SIZE,
    EXHAUST_SPEED_X,
    EXHAUST_SPEED_Y,
    FALL_DMG_FACTOR,
    GRAVITY,
    JET_ACCEL,
    JUMP_SPEED,
    MAX_STEP_HEIGHT,
    PLAYER_HEIGHT,
    PLAYER_WIDTH,
    SAFE_FALL_SPEED,
    TILE_SIZE,
    WALK_SPEED,
)
from platypus.terrain import Terrain, solid, tile_to_world_y, world_to_tile_y

# seconds without damage before health starts to regenerate
REGEN_DELAY = 5.0
DASH_PUFF_COLOR = (0.9, 0.9, 0.9)
# height above the surface tile at which the player appears
_SPAWN_LIFT = 4.0

_HALF_W = PLAYER_WIDTH / 2.0
_HALF_H = PLAYER_HEIGHT / 2.0


def _signum(v: float) -> float:
    return math.copysign(1.0, v)


def _rows_spanned(terrain: Terrain, y: float) -> range:
    top = world_to_tile_y(terrain.height, y + _HALF_H - 0.1)
    bottom = world_to_tile_y(terrain.height, y - _HALF_H + 0.1)
    return range(min(top, bottom), max(top, bottom) + 1)


def _cols_spanned(x: float) -> range:
    left = math.floor((x - _HALF_W + 0.1) / TILE_SIZE)
    right = math.floor((x + _HALF_W - 0.1) / TILE_SIZE)
    return range(left, right + 1)


def _column_blocked(terrain: Terrain, tx: int, y: float) -> bool:
    return any(solid(terrain, tx, ty) for ty in _rows_spanned(terrain, y))


def spawn_player(terrain: Terrain) -> Player:
    """Place a fresh player just above the surface in the middle of the world."""
    spawn_x = terrain.width // 2
    surface_row = terrain.height_map[spawn_x]
    y = (
        tile_to_world_y(terrain.height, surface_row)
        + TILE_SIZE * 0.5
        + PLAYER_HEIGHT * 0.5
        + _SPAWN_LIFT
    )
    return Player(body=Body(x=spawn_x * TILE_SIZE, y=y), inventory=Inventory(HeldItem.PICKAXE))


def select_item(inventory: Inventory, digit: int) -> HeldItem:
    """Select the item on hot-bar slot ``digit``; raises ValueError for an empty slot."""
    inventory.selected = HeldItem.from_slot(digit)
    return inventory.selected


def player_input(player: Player, left: bool, right: bool, jump: bool) -> None:
    """Apply walking (ignored while dashing) and a jump when grounded."""
    body = player.body
    if player.dashing is None:
        if left and not right:
            body.vx = -WALK_SPEED
            body.facing = -1.0
        elif right and not left:
            body.vx = WALK_SPEED
            body.facing = 1.0
        else:
            body.vx = 0.0
    if jump and body.grounded:
        body.vy = JUMP_SPEED


def _exhaust(body: Body, rng: random.Random) -> list[Particle]:
    return [
        Particle(
            x=body.x + rng.uniform(-2.0, 2.0),
            y=body.y - _HALF_H,
            vx=rng.uniform(*EXHAUST_SPEED_X),
            vy=rng.uniform(*EXHAUST_SPEED_Y),
            life=EXHAUST_LIFETIME,
            fade_time=EXHAUST_LIFETIME,
            color=EXHAUST_COLOR,
            size=EXHAUST_SIZE,
        )
        for _ in range(EXHAUST_RATE)
    ]


def player_physics(
    player: Player,
    terrain: Terrain,
    dt: float,
    jet_held: bool,
    rng: random.Random | None = None,
) -> list[Particle]:
    """Gravity, jet-pack, stepped collision with auto-step, and fall damage.

    Returns the exhaust particles emitted this frame.
    """
    rng = rng if rng is not None else random.Random()
    body = player.body

    body.vy += GRAVITY * dt
    if jet_held and not body.grounded:
        body.vy += JET_ACCEL * dt

    step_dt = dt / COLLISION_STEPS
    body.grounded = False
    landing_speed: float | None = None

    for _ in range(COLLISION_STEPS):
        if body.vx != 0.0:
            new_x = body.x + body.vx * step_dt
            tx = math.floor((new_x + _signum(body.vx) * _HALF_W) / TILE_SIZE)
            if _column_blocked(terrain, tx, body.y):
                lifted = body.y + MAX_STEP_HEIGHT
                if body.grounded and body.vy <= 0.0 and not _column_blocked(terrain, tx, lifted):
                    body.y = lifted
                    body.x = new_x
                    body.grounded = True
                else:
                    body.vx = 0.0
            else:
                body.x = new_x

        if body.vy != 0.0:
            new_y = body.y + body.vy * step_dt
            ty = world_to_tile_y(terrain.height, new_y + _signum(body.vy) * _HALF_H)
            if any(solid(terrain, tx, ty) for tx in _cols_spanned(body.x)):
                if body.vy < 0.0:
                    body.grounded = True
                    landing_speed = -body.vy
                body.vy = 0.0
            else:
                body.y = new_y

    if landing_speed is not None and landing_speed > SAFE_FALL_SPEED:
        player.health.damage((landing_speed - SAFE_FALL_SPEED) * FALL_DMG_FACTOR)

    if jet_held and not body.grounded:
        return _exhaust(body, rng)
    return []


def start_dash(player: Player, rng: random.Random | None = None) -> list[Particle]:
    """Launch a dash in the facing direction; return the puff particles.

    Does nothing while a dash is already under way.
    """
    if player.dashing is not None:
        return []
    rng = rng if rng is not None else random.Random()
    body = player.body
    direction = 1.0 if body.facing >= 0.0 else -1.0
    body.vx = DASH_SPEED * direction
    body.vy += DASH_UPWARD_BOOST

    puffs = [
        Particle(
            x=body.x - direction * PLAYER_WIDTH * 0.6 + rng.uniform(-2.0, 2.0),
            y=body.y - PLAYER_HEIGHT * 0.2 + rng.uniform(-2.0, 2.0),
            vx=-direction * rng.uniform(80.0, 140.0),
            vy=rng.uniform(-20.0, 40.0),
            life=DASH_PUFF_LIFETIME,
            # puffs fade on the same curve as jet-pack exhaust
            fade_time=EXHAUST_LIFETIME,
            color=DASH_PUFF_COLOR,
            size=DASH_PUFF_SIZE,
        )
        for _ in range(DASH_PUFF_RATE)
    ]
    player.dashing = Dashing(remaining=DASH_DURATION, direction=direction)
    return puffs


def update_dash(player: Player, dt: float) -> bool:
    """Hold dash speed during launch, then decelerate; return True while still dashing."""
    dash = player.dashing
    if dash is None:
        return False
    body = player.body
    if dash.remaining > 0.0:
        dash.remaining -= dt
        body.vx = DASH_SPEED * dash.direction
    else:
        body.vx -= dash.direction * DASH_DECEL * dt
        if _signum(body.vx) != dash.direction or abs(body.vx) <= WALK_SPEED:
            player.dashing = None
            return False
    return True


def regen_health(health: Health, dt: float) -> None:
    """Slowly restore health once no damage has been taken for a while."""
    if health.current < health.max:
        health.last_damage += dt
        if health.last_damage >= REGEN_DELAY:
            health.current = min(health.current + dt, health.max)
    else:
        health.last_damage = 0.0