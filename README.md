# platypus

A two-dimensional side-scrolling sandbox game. You explore a large,
procedurally generated world of grass, dirt, stone and obsidian with caves,
rifts and floating sky islands, dig through it with a pickaxe, build with
stone blocks and fight wandering orcs with a gun.

## Installing

```
pip install .
```

This pulls in `pygame`, which draws the game and reads the keyboard and mouse.

## Playing

```
platypus
```

Options:

| Option            | Meaning                                   | Default |
|-------------------|-------------------------------------------|---------|
| `--width N`       | world width in tiles                      | 5120    |
| `--height N`      | world height in tiles                     | 1920    |
| `--seed N`        | seed for world generation and randomness  | random  |
| `--enemies N`     | number of orcs dropped on the surface     | 64      |

The window is 1280 × 720 pixels and tiles are 8 pixels wide, so the world
must be at least 160 tiles wide and 90 tiles tall; smaller worlds are refused
with a `ValueError`.

Controls:

| Key / button        | Action                                           |
|---------------------|--------------------------------------------------|
| `A` / `D`           | walk left / right                                |
| `Space`             | jump when on the ground; hold in the air to use the jet-pack |
| `Shift`             | dash in the direction you are facing             |
| `1`                 | select the pickaxe                               |
| `2`                 | select the gun                                   |
| `3`                 | select stone blocks                              |
| left mouse button   | hold to mine or shoot; click to place a block    |
| `Escape`            | toggle fullscreen                                |

With the pickaxe, the solid tiles within reach of the cursor are outlined in
red; with stone blocks, the tile under the cursor is outlined in green when a
block can go there (it must be empty and touch something solid).

The three green squares in the top-left corner show the inventory; the
selected slot is darker. The bar in the top-right corner shows your health.
Landing after a fast fall hurts, as do the orcs' swings; health slowly
regenerates once you have gone five seconds without taking damage. Bullets
knock orcs back and stun them; an orc dies after four hits.

Only what the player can see is lit. Tiles once seen stay dimly visible, and
the band from the sky down to just below the surface is always shown.
Orcs outside the area around the camera sleep until you come near.

## What it does not do

Everything is drawn as plain coloured rectangles: there is no sprite art and
no sound. The world is not saved. Reaching zero health does not end the game.

## Using the pieces

The game logic is independent of the display and can be driven directly:

- `platypus.terrain.generate_terrain` builds a `Terrain`; `solid`,
  `tile_to_world_y` and `world_to_tile_y` answer collision and coordinate
  questions about it, `dig` clears a circle of tiles, and `TileStreamer`
  keeps sprite records for the tiles inside an `ActiveRect`.
- `platypus.perlin.Perlin` is the seeded noise the generator uses.
- `platypus.visibility.compute_visible` runs the shadow-casting field of view;
  `Visibility` keeps the terrain's lit tiles up to date as the player moves.
- `platypus.camera.follow` places the camera inside the world.
- `platypus.player` and `platypus.enemy` step the player and the orcs.
- `platypus.combat` covers mining, placing stone, the `Gun`, bullets and
  particles.
- `platypus.game.Game` ties it together; `Game.update` advances one frame from
  an `InputState`, and `Game.draw` renders onto a pygame surface.

## Running the tests

```
pip install ".[test]"
pytest
```