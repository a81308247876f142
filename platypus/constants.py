"""World, physics, combat and particle tuning values."""

# ---------------------------------------------------------------- world size
TILE_SIZE = 8.0
RENDER_CHUNK = 32

CHUNK_WIDTH = 160
CHUNK_HEIGHT = 120

NUM_CHUNKS_X = 32
NUM_CHUNKS_Y = 16

WORLD_WIDTH = CHUNK_WIDTH * NUM_CHUNKS_X
WORLD_HEIGHT = CHUNK_HEIGHT * NUM_CHUNKS_Y

# overscan tiles beyond the viewport that stay alive
ACTIVE_MARGIN = 16

# ---------------------------------------------------- player physics/movement
PLAYER_WIDTH = TILE_SIZE
PLAYER_HEIGHT = 32.0
GRAVITY = -650.0
JUMP_SPEED = 250.0
JET_ACCEL = 1000.0
WALK_SPEED = 200.0
COLLISION_STEPS = 4
MAX_STEP_HEIGHT = TILE_SIZE

DASH_SPEED = WALK_SPEED * 3.0
DASH_DURATION = 0.1
DASH_UPWARD_BOOST = 180.0
DASH_DECEL = 1600.0
DASH_PUFF_RATE = 32
DASH_PUFF_LIFETIME = 0.60
DASH_PUFF_SIZE = 5.0

SAFE_FALL_SPEED = 500.0
FALL_DMG_FACTOR = 0.05

# ----------------------------------------------------------- jet-pack exhaust
EXHAUST_LIFETIME = 0.8
EXHAUST_RATE = 8
EXHAUST_SIZE = 3.0
EXHAUST_COLOR = (1.0, 0.6, 0.2)
EXHAUST_SPEED_Y = (-300.0, -120.0)
EXHAUST_SPEED_X = (-50.0, 50.0)

# ------------------------------------------------------------------- digging
DIG_RADIUS = 16.0

# -------------------------------------------------------- inventory & combat
PICKAXE_SPEED = 4.0
BULLET_SPEED = 800.0
BULLET_LIFETIME = 4.0
BULLET_DAMAGE = 25.0
MINING_RADIUS = DIG_RADIUS

# ------------------------------------------------------------ mining debris
DEBRIS_LIFETIME = 0.45
DEBRIS_RATE = 12
DEBRIS_SPEED_X = (-12.0, 12.0)
DEBRIS_SPEED_Y = (28.0, 60.0)

# ------------------------------------------------------------ enemy behaviour
AGGRO_RADIUS = 32.0 * TILE_SIZE
ENEMY_SPEED = WALK_SPEED * 0.8
ENEMY_KEEP_AWAY = 4.0 * TILE_SIZE
RECOIL_TIME = 2.0
ENEMY_HP = 100

# ----------------------------------------------------------- blood explosion
BLOOD_LIFETIME = 1.0
BLOOD_RATE = 48
BLOOD_SPEED_X = (-140.0, 240.0)
BLOOD_SPEED_Y = (60.0, 180.0)
BLOOD_COLOR = (0.8, 0.0, 0.0)

# --------------------------------------------------------------- hit feedback
HIT_KNOCKBACK = 240.0
HIT_KNOCKBACK_UP = 100.0
HIT_BLOOD_RATE = 16
HIT_BLOOD_LIFE = 1.2

# ------------------------------------------------------- terrain tint noise
COLOR_NOISE_SCALE = 0.05
COLOR_VARIATION_LEVELS = 4
COLOR_VARIATION_STRENGTH = 0.2

# ----------------------------------------------------------------- animation
ANIMATION_FRAME_TIME = 0.12
ANIMATION_FRAMES = 6
SPRITE_SCALE = 1.8