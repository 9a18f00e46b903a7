"""
config.py — Shared constants and the immutable board configuration.
No imports from internal modules.
"""

from dataclasses import dataclass

# ── Window & Grid ─────────────────────────────────────────────────
COLS            = 30
ROWS            = 30
CELL            = 20
PANEL_H         = 60
MARGIN          = 10
FPS             = 60

# ── Colors ────────────────────────────────────────────────────────
BG          = (22,  33,  62)
GRID_COL    = (30,  44,  80)
SNAKE_COL   = (233, 69,  96)
SNAKE_DIM   = (15,  52,  96)
FOOD_COL    = (243, 156, 18)
BONUS_COL   = (231, 76,  60)
MEGA_COL    = (155, 89,  182)
SPEED_COL   = (52,  152, 219)
UI_COL      = (120, 120, 170)
BLACK       = (0,   0,   0)
PANEL_BG    = (12,  12,  20)
BORDER_COL  = (26,  26,  62)

# ── Gameplay ──────────────────────────────────────────────────────
INITIAL_LENGTH      = 3
BASE_POINTS         = 10
FOOD_SIZE           = 18
PLACEMENT_ATTEMPTS  = 100

MIN_TICK_MS         = 75     # score-derived floor
SPEED_STEP_MS       = 5      # faster by this much ...
SPEED_STEP_POINTS   = 100    # ... every this many points

SPECIAL_TTL_MS          = 10_000
SPECIAL_BASE_CHANCE     = 0.10
SPECIAL_CHANCE_PER_1000 = 0.05
SPECIAL_MAX_CHANCE      = 0.30

SPEED_BOOST_MS          = 5_000
SPEED_BOOST_DELTA_MS    = 50
SPEED_BOOST_FLOOR_MS    = 50

COLLISION_HISTORY       = 50

# variant tag -> point multiplier, size delta, colour, effect kind
FOOD_VARIANTS = {
    "normal": {"multiplier": 1, "size_delta": 0, "color": FOOD_COL,  "effect": None},
    "bonus":  {"multiplier": 2, "size_delta": 2, "color": BONUS_COL, "effect": None},
    "mega":   {"multiplier": 5, "size_delta": 4, "color": MEGA_COL,  "effect": None},
    "speed":  {"multiplier": 1, "size_delta": 0, "color": SPEED_COL, "effect": "speed"},
}

DIFFICULTIES = {
    "easy":   {"label": "EASY",   "tick_ms": 200},
    "medium": {"label": "NORMAL", "tick_ms": 150},
    "hard":   {"label": "HARD",   "tick_ms": 100},
    "expert": {"label": "EXPERT", "tick_ms": 75},
}
DEFAULT_DIFFICULTY = "medium"

# ── Game States ───────────────────────────────────────────────────
STATE_MENU    = "menu"
STATE_PLAYING = "playing"
STATE_PAUSED  = "paused"
STATE_OVER    = "over"


@dataclass(frozen=True)
class GameConfig:
    """Board and pacing settings, fixed for the lifetime of a session."""

    columns: int = COLS
    rows: int = ROWS
    base_tick_ms: int = DIFFICULTIES[DEFAULT_DIFFICULTY]["tick_ms"]
    base_points: int = BASE_POINTS
    initial_length: int = INITIAL_LENGTH
    min_tick_ms: int = MIN_TICK_MS
    speed_step_ms: int = SPEED_STEP_MS
    speed_step_points: int = SPEED_STEP_POINTS
    food_size: int = FOOD_SIZE
    placement_attempts: int = PLACEMENT_ATTEMPTS
    special_ttl_ms: int = SPECIAL_TTL_MS
    special_base_chance: float = SPECIAL_BASE_CHANCE
    special_chance_per_1000: float = SPECIAL_CHANCE_PER_1000
    special_max_chance: float = SPECIAL_MAX_CHANCE
    speed_boost_ms: int = SPEED_BOOST_MS
    speed_boost_delta_ms: int = SPEED_BOOST_DELTA_MS
    speed_boost_floor_ms: int = SPEED_BOOST_FLOOR_MS

    def __post_init__(self):
        if self.columns < 1 or self.rows < 1:
            raise ValueError(f"board must be at least 1x1, got {self.columns}x{self.rows}")
        if self.initial_length < 1:
            raise ValueError(f"initial_length must be >= 1, got {self.initial_length}")
        if self.base_tick_ms < 1 or self.min_tick_ms < 1:
            raise ValueError("tick intervals must be positive")
        if self.speed_step_points < 1:
            raise ValueError("speed_step_points must be positive")
        for name in ("special_base_chance", "special_max_chance"):
            if not 0.0 <= getattr(self, name) <= 1.0:
                raise ValueError(f"{name} must be a probability, got {getattr(self, name)}")

