"""Game loop: world setup, per-frame update order, rendering and the HUD."""

from __future__ import annotations

import argparse
import random
from dataclasses import dataclass

import pygame

from platypus.camera import follow
from platypus.combat import (
    BUILD_HIGHLIGHT,
    MINE_HIGHLIGHT,
    Gun,
    highlight_tiles,
    mine,
    place_stone,
    update_bullets,
    update_particles,
)
from platypus.components import Health, HeldItem, Inventory, Particle
from platypus.constants import (
    PLAYER_HEIGHT,
    PLAYER_WIDTH,
    TILE_SIZE,
    WORLD_HEIGHT,
    WORLD_WIDTH,
)
from platypus.enemy import (
    ENEMY_COUNT,
    enemy_ai,
    enemy_attack,
    enemy_physics,
    spawn_enemies,
    update_active,
)
from platypus.player import (
    player_input,
    player_physics,
    regen_health,
    select_item,
    spawn_player,
    start_dash,
    update_dash,
)
from platypus.terrain import (
    TileStreamer,
    compute_active_rect,
    generate_terrain,
    tile_to_world_y,
)
from platypus.visibility import Visibility

Color = tuple[float, float, float]

WINDOW_SIZE = (1280, 720)
CLEAR_COLOR: Color = (0.18, 0.65, 1.0)

SLOT_COLOR: Color = (0.0, 1.0, 0.0)
SELECTED_SLOT_COLOR: Color = (0.0, 0.7, 0.0)
SLOT_SIZE = 24
SLOT_SPACING = 28
HUD_MARGIN = 10

HEALTH_BAR_SIZE = (200, 20)
HEALTH_BAR_BACKGROUND: Color = (0.2, 0.2, 0.2)
HEALTH_BAR_FILL: Color = (0.8, 0.0, 0.0)

PLAYER_COLOR: Color = (0.95, 0.85, 0.3)
ENEMY_COLOR: Color = (0.25, 0.55, 0.2)
ENEMY_ATTACK_COLOR: Color = (0.75, 0.35, 0.15)
BULLET_COLOR: Color = (1.0, 0.0, 0.0)
BULLET_SIZE = 8.0


@dataclass
class InputState:
    """What the player is doing during one frame."""

    left: bool = False
    right: bool = False
    jump: bool = False  # jump key pressed this frame
    jet: bool = False  # jump key held
    dash: bool = False  # dash key pressed this frame
    select: int | None = None  # hot-bar slot pressed this frame
    mouse_held: bool = False
    mouse_pressed: bool = False  # left button pressed this frame
    cursor: tuple[float, float] | None = None  # screen pixels, y down


def slot_colors(inventory: Inventory) -> dict[int, Color]:
    """Background colour of each hot-bar slot; the selected one is darker."""
    return {
        item.value: SELECTED_SLOT_COLOR if item is inventory.selected else SLOT_COLOR
        for item in HeldItem
    }


def health_bar_width(health: Health, full_width: float) -> float:
    """Width of the health-bar fill for a bar ``full_width`` wide."""
    return health.fraction() * full_width


def _rgb(color: Color) -> tuple[int, int, int]:
    r, g, b = (min(max(round(c * 255), 0), 255) for c in color)
    return r, g, b


def _rgba(color: tuple[float, ...], alpha: float) -> tuple[int, int, int, int]:
    r, g, b = _rgb((color[0], color[1], color[2]))
    return r, g, b, min(max(round(alpha * 255), 0), 255)


class Game:
    """A running world: terrain, player, enemies, projectiles and effects."""

    def __init__(
        self,
        width: int = WORLD_WIDTH,
        height: int = WORLD_HEIGHT,
        view_size: tuple[int, int] = WINDOW_SIZE,
        rng: random.Random | None = None,
        enemy_count: int = ENEMY_COUNT,
    ) -> None:
        self.rng = rng if rng is not None else random.Random()
        self.view_w, self.view_h = view_size
        self.terrain = generate_terrain(width, height, self.rng)
        self.player = spawn_player(self.terrain)
        self.enemies = spawn_enemies(self.terrain, self.rng, enemy_count)
        self.bullets = []
        self.particles: list[Particle] = []
        self.gun = Gun()
        self.highlights: list[tuple[int, int]] = []
        self.streamer = TileStreamer(self.terrain)

        body = self.player.body
        self.camera = follow(body.x, body.y, self.view_w, self.view_h, self.terrain)
        self.rect = compute_active_rect(
            self.terrain, self.camera[0], self.camera[1], self.view_w, self.view_h
        )
        self.visibility = Visibility(self.terrain, body.x, body.y)

    # ------------------------------------------------------------ coordinates
    def _screen_to_world(self, sx: float, sy: float) -> tuple[float, float]:
        cam_x, cam_y = self.camera
        return cam_x + sx - self.view_w * 0.5, cam_y - (sy - self.view_h * 0.5)

    def _to_screen(self, wx: float, wy: float) -> tuple[float, float]:
        cam_x, cam_y = self.camera
        return wx - cam_x + self.view_w * 0.5, self.view_h * 0.5 - (wy - cam_y)

    def _screen_rect(self, wx: float, wy: float, w: float, h: float) -> pygame.Rect:
        sx, sy = self._to_screen(wx, wy)
        return pygame.Rect(round(sx - w * 0.5), round(sy - h * 0.5), round(w), round(h))

    # ------------------------------------------------------------------ update
    def update(self, dt: float, inputs: InputState) -> None:
        """Advance the world by ``dt`` seconds under ``inputs``."""
        player = self.player
        body = player.body
        terrain = self.terrain
        rng = self.rng
        spawned: list[Particle] = []
        cursor = None if inputs.cursor is None else self._screen_to_world(*inputs.cursor)

        if inputs.select is not None:
            select_item(player.inventory, inputs.select)
        item = player.inventory.selected
        self.highlights = [] if cursor is None else highlight_tiles(terrain, item, *cursor)

        player_input(player, inputs.left, inputs.right, inputs.jump)
        if inputs.dash:
            spawned.extend(start_dash(player, rng))
        update_dash(player, dt)
        spawned.extend(player_physics(player, terrain, dt, inputs.jet, rng))

        if item is HeldItem.PICKAXE and inputs.mouse_held and cursor is not None:
            spawned.extend(mine(terrain, cursor[0], cursor[1], rng))
        if item is HeldItem.STONE_BLOCK and inputs.mouse_pressed and cursor is not None:
            place_stone(terrain, cursor[0], cursor[1])

        bullet = self.gun.update(
            dt, item is HeldItem.GUN and inputs.mouse_held, (body.x, body.y), cursor
        )
        if bullet is not None:
            self.bullets.append(bullet)
        spawned.extend(update_bullets(self.bullets, self.enemies, terrain, dt, rng))

        update_particles(self.particles, dt)
        self.particles.extend(spawned)
        player.animation.tick(dt)

        self.streamer.update(self.rect)
        self.streamer.redraw_changed()

        active = update_active(self.enemies, self.rect, terrain)
        player_pos = (body.x, body.y)
        for enemy in active:
            enemy_ai(enemy, player_pos, rng)
        for enemy in active:
            enemy_attack(enemy, player_pos, player.health, rng, dt)
        for enemy in active:
            enemy_physics(enemy, terrain, dt)
        for enemy in active:
            enemy.animation.tick(dt)

        regen_health(player.health, dt)
        self.visibility.track(body.x, body.y)

        self.camera = follow(body.x, body.y, self.view_w, self.view_h, terrain)
        self.rect = compute_active_rect(
            terrain, self.camera[0], self.camera[1], self.view_w, self.view_h
        )
        self.visibility.recompute(self.rect)

    # -------------------------------------------------------------------- draw
    def draw(self, surface: pygame.Surface) -> None:
        """Render the world and the HUD onto ``surface``."""
        surface.fill(_rgb(CLEAR_COLOR))
        height = self.terrain.height

        sprites = sorted(
            (s for s in self.streamer.sprites.values() if s.visible), key=lambda s: s.z
        )
        for sprite in sprites:
            rect = self._screen_rect(
                sprite.x * TILE_SIZE, tile_to_world_y(height, sprite.y), TILE_SIZE, TILE_SIZE
            )
            surface.fill(_rgb(sprite.color), rect)

        for enemy in self.enemies:
            if enemy.active:
                color = ENEMY_ATTACK_COLOR if enemy.attacking else ENEMY_COLOR
                rect = self._screen_rect(enemy.body.x, enemy.body.y, PLAYER_WIDTH, PLAYER_HEIGHT)
                surface.fill(_rgb(color), rect)

        body = self.player.body
        surface.fill(
            _rgb(PLAYER_COLOR),
            self._screen_rect(body.x, body.y, PLAYER_WIDTH, PLAYER_HEIGHT),
        )

        for bullet in self.bullets:
            surface.fill(
                _rgb(BULLET_COLOR),
                self._screen_rect(bullet.x, bullet.y, BULLET_SIZE, BULLET_SIZE),
            )

        overlay = pygame.Surface(surface.get_size(), pygame.SRCALPHA)
        for particle in self.particles:
            rect = self._screen_rect(particle.x, particle.y, particle.size, particle.size)
            pygame.draw.rect(overlay, _rgba(particle.color, particle.alpha()), rect)

        highlight = (
            BUILD_HIGHLIGHT
            if self.player.inventory.selected is HeldItem.STONE_BLOCK
            else MINE_HIGHLIGHT
        )
        for tx, ty in self.highlights:
            rect = self._screen_rect(
                tx * TILE_SIZE, tile_to_world_y(height, ty), TILE_SIZE, TILE_SIZE
            )
            pygame.draw.rect(overlay, _rgba(highlight, highlight[3]), rect)
        surface.blit(overlay, (0, 0))

        self._draw_hud(surface)

    def _draw_hud(self, surface: pygame.Surface) -> None:
        for slot, color in slot_colors(self.player.inventory).items():
            rect = pygame.Rect(
                HUD_MARGIN + (slot - 1) * SLOT_SPACING, HUD_MARGIN, SLOT_SIZE, SLOT_SIZE
            )
            surface.fill(_rgb(color), rect)

        bar_w, bar_h = HEALTH_BAR_SIZE
        left = surface.get_width() - HUD_MARGIN - bar_w
        surface.fill(_rgb(HEALTH_BAR_BACKGROUND), pygame.Rect(left, HUD_MARGIN, bar_w, bar_h))
        fill = round(health_bar_width(self.player.health, bar_w))
        if fill > 0:
            surface.fill(_rgb(HEALTH_BAR_FILL), pygame.Rect(left, HUD_MARGIN, fill, bar_h))


_DIGIT_KEYS = {pygame.K_1: 1, pygame.K_2: 2, pygame.K_3: 3}


def _poll_inputs(inputs: InputState) -> bool:
    """Fill ``inputs`` from pygame's event queue and state; return False on quit."""
    running = True
    for event in pygame.event.get():
        if event.type == pygame.QUIT:
            running = False
        elif event.type == pygame.KEYDOWN:
            if event.key == pygame.K_ESCAPE:
                pygame.display.toggle_fullscreen()
            elif event.key == pygame.K_SPACE:
                inputs.jump = True
            elif event.key in (pygame.K_LSHIFT, pygame.K_RSHIFT):
                inputs.dash = True
            elif event.key in _DIGIT_KEYS:
                inputs.select = _DIGIT_KEYS[event.key]
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            inputs.mouse_pressed = True

    keys = pygame.key.get_pressed()
    inputs.left = bool(keys[pygame.K_a])
    inputs.right = bool(keys[pygame.K_d])
    inputs.jet = bool(keys[pygame.K_SPACE])
    inputs.mouse_held = bool(pygame.mouse.get_pressed()[0])
    inputs.cursor = pygame.mouse.get_pos() if pygame.mouse.get_focused() else None
    return running


def main(argv: list[str] | None = None) -> int:
    """Open a window and run the game until it is closed."""
    parser = argparse.ArgumentParser(prog="platypus", description="Side-scrolling digging game.")
    parser.add_argument("--width", type=int, default=WORLD_WIDTH, help="world width in tiles")
    parser.add_argument("--height", type=int, default=WORLD_HEIGHT, help="world height in tiles")
    parser.add_argument("--seed", type=int, default=None, help="world seed")
    parser.add_argument("--enemies", type=int, default=ENEMY_COUNT, help="number of orcs")
    args = parser.parse_args(argv)

    pygame.init()
    try:
        screen = pygame.display.set_mode(WINDOW_SIZE)
        pygame.display.set_caption("platypus")
        game = Game(args.width, args.height, WINDOW_SIZE, random.Random(args.seed), args.enemies)
        clock = pygame.time.Clock()
        running = True
        while running:
            dt = clock.tick(60) / 1000.0
            inputs = InputState()
            running = _poll_inputs(inputs)
            if not running:
                break
            game.update(dt, inputs)
            game.draw(screen)
            pygame.display.flip()
    finally:
        pygame.quit()
    return 0