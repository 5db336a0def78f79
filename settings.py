"""
settings.py - Engine constants for the scripted opponent decision engine.

All tunable values live here so they're easy to tweak
and easy to reference from any module.
"""

# ── Simulation ────────────────────────────────────────────
FPS = 60

# ── Arena defaults (used when a snapshot carries no bounds) ──
ARENA_LEFT = 0
ARENA_RIGHT = 1000
ARENA_TOP = 0
ARENA_HEIGHT = 600
GROUND_LEVEL = 500

# ── Range buckets (horizontal pixels) ────────────────────
CLOSE_RANGE = 100              # close: < 100
MID_RANGE = 250                # mid: 100-249, far: >= 250
CORNER_THRESHOLD = 100         # cornered when this close to a bound
THROW_RANGE = 60

# ── Recovery / frame-data heuristics ─────────────────────
RECOVERY_HEURISTIC_FRAMES = 15 # assumed move length without a move table
COUNTER_HIT_WINDOW = 10        # move-frame limit for counter-hit reads
ADVANTAGE_NEUTRAL_BAND = 2     # |advantage| <= 2 counts as neutral
PUNISHABLE_RECOVERY = 6
PUNISHABLE_DISTANCE = 150
COMBO_WINDOW_FRAMES = 60
APPROACH_SPEED_THRESHOLD = 0.5 # px/frame toward the actor

# (recovery >=, distance <) per punish bucket, checked in order
PUNISH_HEAVY = (15, 80)
PUNISH_MEDIUM = (10, 100)
PUNISH_LIGHT = (6, 120)

# Startup estimates by move-name family when no move table is supplied
STARTUP_LIGHT = 4
STARTUP_HEAVY = 8
STARTUP_SPECIAL = 12
STARTUP_DEFAULT = 6
NOT_ATTACKING_IMPACT = 999
IMPACT_PX_PER_FRAME = 50

# ── Difficulty ────────────────────────────────────────────
MIN_DIFFICULTY = 1
MAX_DIFFICULTY = 10
DEFAULT_NOISE = 0.1

# ── Defensive tactics ─────────────────────────────────────
ANTI_AIR_CLOSE_RANGE = 120     # standing heavy inside this
ANTI_AIR_MID_RANGE = 200       # crouching heavy inside this
SPACING_DEAD_BAND = 30
BLOCK_HOLD_FRAMES = 3

# ── Offensive tactics ─────────────────────────────────────
DASH_RANGE = 200
WALK_RANGE = 120
APPROACH_JUMP_CHANCE = 0.15
FRAME_TRAP_WINDOW = (1, 4)     # opponent blockstun tail, inclusive
PRESSURE_CYCLE = 9

# ── Spacing tactics ───────────────────────────────────────
PROJECTILE_COOLDOWN_FRAMES = 60
PROJECTILE_MIN_RANGE = 200
PROJECTILE_MAX_RANGE = 500
OPTIMAL_ZONE_DISTANCE = 250

# ── Decision loop ─────────────────────────────────────────
REACTION_HISTORY_SIZE = 20
REPEAT_WINDOW = 6              # recent opponent moves checked for repeats
REPEAT_THRESHOLD = 3

# ── Pattern recognition ───────────────────────────────────
PATTERN_WINDOW = FPS           # one second of opponent tags
ALWAYS_DOES_MIN_SAMPLES = 10
FREQUENCY_WINDOW = 20

# ── Archetypes ────────────────────────────────────────────
STYLE_TAGS = ("defensive", "rushdown", "zoner", "mixup", "tutorial")
STYLE_SWITCH_FRAMES = 300      # Wildcard re-rolls its style this often
TEACHING_PHASE_FRAMES = 600    # Tutorial phase length
REWARD_WINDOW_FRAMES = 30      # Tutorial backs off this long after a punish
