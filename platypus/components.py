"""Game object state shared by the player, enemies and effects."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from platypus.constants import (
    ANIMATION_FRAME_TIME,
    ANIMATION_FRAMES,
    ENEMY_HP,
)


class HeldItem(enum.Enum):
    """Item in the player's hands; the value is its hot-bar slot."""

    PICKAXE = 1
    GUN = 2
    STONE_BLOCK = 3

    @classmethod
    def from_slot(cls, slot: int) -> "HeldItem":
        """Return the item bound to hot-bar slot ``slot`` (1-3)."""
        try:
            return cls(slot)
        except ValueError:
            raise ValueError(f"no item in slot {slot!r}") from None


@dataclass
class Body:
    """Position, velocity and facing of a moving actor."""

    x: float
    y: float
    vx: float = 0.0
    vy: float = 0.0
    grounded: bool = False
    facing: float = 1.0  # +1 right, -1 left


@dataclass
class Health:
    current: float = 100.0
    max: float = 100.0
    # seconds since damage was last taken (drives regeneration)
    last_damage: float = 0.0

    def damage(self, amount: float) -> None:
        """Take ``amount`` damage, never dropping below zero."""
        self.current = max(self.current - amount, 0.0)
        self.last_damage = 0.0

    def fraction(self) -> float:
        """Health as a share of the maximum, clamped to [0, 1]."""
        if self.max <= 0:
            return 0.0
        return min(max(self.current / self.max, 0.0), 1.0)


@dataclass
class Dashing:
    remaining: float
    direction: float  # +1 right, -1 left


@dataclass
class Inventory:
    selected: HeldItem = HeldItem.PICKAXE


@dataclass
class Animation:
    """Sprite-sheet frame cycler driven by a repeating timer."""

    first: int = 0
    last: int = ANIMATION_FRAMES - 1
    frame_time: float = ANIMATION_FRAME_TIME
    index: int = 0
    elapsed: float = 0.0

    def tick(self, dt: float) -> bool:
        """Advance the timer; step one frame when it wraps. Returns whether it did."""
        self.elapsed += dt
        if self.elapsed < self.frame_time:
            return False
        self.elapsed %= self.frame_time
        self.index = self.first if self.index == self.last else self.index + 1
        return True


@dataclass
class Particle:
    """A short-lived sprite that drifts and fades (debris, blood, exhaust)."""

    x: float
    y: float
    vx: float
    vy: float
    life: float
    fade_time: float
    color: tuple[float, float, float] = (1.0, 1.0, 1.0)
    size: float = 2.5

    def update(self, dt: float) -> bool:
        """Move and age the particle; return True while it is still alive."""
        self.x += self.vx * dt
        self.y += self.vy * dt
        self.life -= dt
        return self.life > 0.0

    def alpha(self) -> float:
        """Opacity in [0, 1], proportional to remaining life over the fade time."""
        if self.fade_time <= 0:
            return 0.0
        return min(max(self.life / self.fade_time, 0.0), 1.0)


@dataclass
class Bullet:
    x: float
    y: float
    vx: float
    vy: float
    damage: float
    life: float


@dataclass
class Player:
    body: Body
    health: Health = field(default_factory=Health)
    inventory: Inventory = field(default_factory=Inventory)
    animation: Animation = field(default_factory=Animation)
    dashing: Dashing | None = None


@dataclass
class Enemy:
    body: Body
    hp: int = ENEMY_HP
    recoil: float = 0.0
    # seconds until the next swing is allowed
    attack_cooldown: float = 0.0
    # set when a swing begins; cleared once the striking frame lands
    hit_pending: bool = False
    # True while the attack sprite sheet is shown
    attacking: bool = False
    active: bool = False
    animation: Animation = field(default_factory=Animation)

    @property
    def alive(self) -> bool:
        return self.hp > 0