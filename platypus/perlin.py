"""Seeded two-dimensional gradient (Perlin) noise."""

from __future__ import annotations

import math
import random

_DIAG = 1.0 / math.sqrt(2.0)
_GRADIENTS = (
    (_DIAG, _DIAG),
    (-_DIAG, _DIAG),
    (_DIAG, -_DIAG),
    (-_DIAG, -_DIAG),
    (1.0, 0.0),
    (-1.0, 0.0),
    (0.0, 1.0),
    (0.0, -1.0),
)
# unit gradients in 2-D peak at sqrt(0.5); rescale to [-1, 1]
_SCALE = math.sqrt(2.0)


def _fade(t: float) -> float:
    return t * t * t * (t * (t * 6.0 - 15.0) + 10.0)


def _lerp(a: float, b: float, t: float) -> float:
    return a + t * (b - a)


class Perlin:
    """Perlin noise whose lattice is fixed by an integer seed."""

    def __init__(self, seed: int = 0) -> None:
        self.seed = seed
        table = list(range(256))
        random.Random(seed).shuffle(table)
        self._perm = table + table

    def _corner(self, ix: int, iy: int, dx: float, dy: float) -> float:
        perm = self._perm
        h = perm[perm[ix & 255] + (iy & 255)]
        gx, gy = _GRADIENTS[h & 7]
        return gx * dx + gy * dy

    def get(self, x: float, y: float) -> float:
        """Noise value at (x, y), in [-1, 1]; zero on integer lattice points."""
        x0 = math.floor(x)
        y0 = math.floor(y)
        fx = x - x0
        fy = y - y0
        u = _fade(fx)
        v = _fade(fy)

        n00 = self._corner(x0, y0, fx, fy)
        n10 = self._corner(x0 + 1, y0, fx - 1.0, fy)
        n01 = self._corner(x0, y0 + 1, fx, fy - 1.0)
        n11 = self._corner(x0 + 1, y0 + 1, fx - 1.0, fy - 1.0)

        value = _lerp(_lerp(n00, n10, u), _lerp(n01, n11, u), v) * _SCALE
        return min(max(value, -1.0), 1.0)