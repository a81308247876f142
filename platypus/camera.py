"""Camera that follows the player, clamped to the world and snapped to pixels."""

from __future__ import annotations

import math

from platypus.constants import TILE_SIZE
from platypus.terrain import Terrain


def snap(v: float) -> float:
    """Round to the nearest whole pixel, halves away from zero."""
    return math.copysign(math.floor(abs(v) + 0.5), v)


def _clamp(v: float, lo: float, hi: float) -> float:
    if lo > hi:
        raise ValueError(f"view does not fit in the world ({lo} > {hi})")
    return min(max(v, lo), hi)


def follow(
    player_x: float, player_y: float, view_w: float, view_h: float, terrain: Terrain
) -> tuple[float, float]:
    """Camera centre for a player at (player_x, player_y), kept inside the world."""
    half_w = view_w * 0.5
    half_h = view_h * 0.5
    world_w = terrain.width * TILE_SIZE
    world_h = terrain.height * TILE_SIZE
    x = _clamp(player_x, half_w, world_w - half_w)
    y = _clamp(player_y, half_h, world_h - half_h)
    return snap(x), snap(y)