"""
model.py — Model layer.

Owns the grid entities and their rules. Zero rendering, zero input handling,
no knowledge of the session state machine.

Classes:
    Position    — immutable (x, y) grid cell
    Direction   — the four unit steps, each with a named opposite
    Board       — board bounds arithmetic
    Snake       — body, direction, pending direction, pending growth
    Food        — the single item: placement, variants, expiry, consumption
"""

import logging
import random
import time
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Collection, Iterator, NamedTuple, Optional

from .config import (
    FOOD_VARIANTS, BASE_POINTS, FOOD_SIZE, INITIAL_LENGTH,
    PLACEMENT_ATTEMPTS, SPECIAL_TTL_MS,
    SPECIAL_BASE_CHANCE, SPECIAL_CHANCE_PER_1000, SPECIAL_MAX_CHANCE,
    SPEED_BOOST_MS, SPEED_BOOST_DELTA_MS,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


# ─────────────────────────── Position ────────────────────────────
class Position(NamedTuple):
    x: int
    y: int

    def moved(self, direction: "Direction") -> "Position":
        return Position(self.x + direction.x, self.y + direction.y)


# ─────────────────────────── Direction ───────────────────────────
class Direction(Enum):
    """Unit step on the grid. y grows downwards."""

    UP    = (0, -1)
    DOWN  = (0,  1)
    LEFT  = (-1, 0)
    RIGHT = (1,  0)

    @property
    def x(self) -> int:
        return self.value[0]

    @property
    def y(self) -> int:
        return self.value[1]

    @property
    def opposite(self) -> "Direction":
        return _OPPOSITES[self]

    def is_opposite(self, other: "Direction") -> bool:
        return self.opposite is other

    @classmethod
    def from_name(cls, name: str) -> "Direction":
        return cls[name.upper()]


_OPPOSITES = {
    Direction.UP:    Direction.DOWN,
    Direction.DOWN:  Direction.UP,
    Direction.LEFT:  Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}
ALL_DIRS = [Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT]


# ──────────────────────────── Board ──────────────────────────────
@dataclass(frozen=True)
class Board:
    columns: int
    rows: int

    @property
    def size(self) -> int:
        return self.columns * self.rows

    @property
    def center(self) -> Position:
        return Position(self.columns // 2, self.rows // 2)

    def contains(self, pos: Position) -> bool:
        return 0 <= pos.x < self.columns and 0 <= pos.y < self.rows

    def edge_of(self, pos: Position) -> Optional[str]:
        """Name of the edge `pos` lies beyond, or None when on the board."""
        if pos.x < 0:
            return "left"
        if pos.x >= self.columns:
            return "right"
        if pos.y < 0:
            return "top"
        if pos.y >= self.rows:
            return "bottom"
        return None

    def cells(self) -> Iterator[Position]:
        """Every cell, row-major."""
        for y in range(self.rows):
            for x in range(self.columns):
                yield Position(x, y)

    def distance_to_edges(self, pos: Position) -> dict:
        distances = {
            "left":   pos.x,
            "right":  self.columns - 1 - pos.x,
            "top":    pos.y,
            "bottom": self.rows - 1 - pos.y,
        }
        distances["nearest"] = min(distances.values())
        return distances


# ──────────────────────────── Snake ──────────────────────────────
class Snake:
    """
    The actor: a head-first body plus the queued direction and growth.

    `step()` is the only mutator of the body; everything else either
    queues intent for the next step or reads state.
    """

    def __init__(
        self,
        board: Board,
        initial_length: int = INITIAL_LENGTH,
        direction: Direction = Direction.RIGHT,
    ):
        length = max(1, initial_length)
        if length > board.columns:
            logger.warning(
                f"initial length {length} does not fit a {board.columns}-column board; "
                f"clamping to {board.columns}"
            )
            length = board.columns

        start = board.center
        # body trails leftwards from the head, so the head column must leave room
        start_x = min(max(start.x, length - 1), board.columns - 1)
        self.body: deque[Position] = deque(
            Position(start_x - i, start.y) for i in range(length)
        )
        self.direction: Direction = direction
        self.pending_direction: Direction = direction
        self.pending_growth: bool = False

    # ── Accessors ────────────────────────────────────────────────
    @property
    def head(self) -> Position:
        return self.body[0]

    @property
    def tail(self) -> Position:
        return self.body[-1]

    @property
    def length(self) -> int:
        return len(self.body)

    def occupied_cells(self) -> frozenset:
        return frozenset(self.body)

    # ── Commands ─────────────────────────────────────────────────
    def change_direction(self, new_dir: Direction) -> bool:
        """
        Queue a direction for the next step.

        Reversal is judged against the direction already applied, not the
        queued one, so two quick turns resolve over the next two steps.
        A later call before the next step replaces the queued direction.
        """
        if new_dir.is_opposite(self.direction):
            return False
        self.pending_direction = new_dir
        return True

    def request_growth(self) -> None:
        self.pending_growth = True

    def step(self) -> Position:
        """Advance one cell and return the new head."""
        self.direction = self.pending_direction
        new_head = self.head.moved(self.direction)
        self.body.appendleft(new_head)
        if self.pending_growth:
            self.pending_growth = False
        else:
            self.body.pop()
        return new_head

    # ── Queries ──────────────────────────────────────────────────
    def peek_next_head(self) -> Position:
        return self.head.moved(self.pending_direction)

    def occupies(self, pos: Position) -> bool:
        return pos in self.body

    def can_move(self, direction: Direction) -> bool:
        return not direction.is_opposite(self.direction)

    def validate(self, board: Optional[Board] = None) -> list[str]:
        """Integrity problems with the body; empty when healthy."""
        issues = []
        if not self.body:
            issues.append("snake body is empty")
        seen = set()
        for segment in self.body:
            if segment in seen:
                issues.append(f"duplicate segment at {segment.x},{segment.y}")
            seen.add(segment)
            if board is not None and not board.contains(segment):
                issues.append(f"segment off board at {segment.x},{segment.y}")
        return issues

    def debug_info(self) -> dict:
        return {
            "length": self.length,
            "head": self.head,
            "direction": self.direction.name,
            "pending_direction": self.pending_direction.name,
            "pending_growth": self.pending_growth,
        }


# ──────────────────────────── Food ───────────────────────────────
class FoodVariant(Enum):
    NORMAL = "normal"
    BONUS  = "bonus"
    MEGA   = "mega"
    SPEED  = "speed"


SPECIAL_VARIANTS = [FoodVariant.BONUS, FoodVariant.MEGA, FoodVariant.SPEED]


@dataclass(frozen=True)
class SpecialEffect:
    kind: str
    duration_ms: int
    interval_delta_ms: int


class Consumed(NamedTuple):
    points: int
    effect: Optional[SpecialEffect]


@dataclass(frozen=True)
class FoodDescriptor:
    """What the render sink needs to draw the item."""

    position: Position
    size: int
    color: tuple
    variant: FoodVariant
    age_ms: float


class Food:
    """
    The single item on the board.

    Inactive until placed; after consumption it stays inactive until the
    next `place()`. Special variants revert to normal in place after
    `ttl_ms` without being eaten.
    """

    def __init__(
        self,
        board: Board,
        rng: Optional[random.Random] = None,
        clock: Clock = monotonic_ms,
        base_points: int = BASE_POINTS,
        base_size: int = FOOD_SIZE,
        attempts: int = PLACEMENT_ATTEMPTS,
        ttl_ms: float = SPECIAL_TTL_MS,
        base_chance: float = SPECIAL_BASE_CHANCE,
        chance_per_1000: float = SPECIAL_CHANCE_PER_1000,
        max_chance: float = SPECIAL_MAX_CHANCE,
        boost_ms: int = SPEED_BOOST_MS,
        boost_delta_ms: int = SPEED_BOOST_DELTA_MS,
    ):
        self.board = board
        self._rng = rng or random.Random()
        self._clock = clock
        self.base_points = base_points
        self.base_size = base_size
        self.attempts = attempts
        self.ttl_ms = ttl_ms
        self.base_chance = base_chance
        self.chance_per_1000 = chance_per_1000
        self.max_chance = max_chance
        self.boost_ms = boost_ms
        self.boost_delta_ms = boost_delta_ms

        self.position: Optional[Position] = None
        self.spawned_at: float = 0.0
        self.special_since: float = 0.0
        self._reset_to_normal()

    # ── Accessors ────────────────────────────────────────────────
    @property
    def is_active(self) -> bool:
        return self.position is not None

    @property
    def age_ms(self) -> float:
        if not self.is_active:
            return 0.0
        return self._clock() - self.spawned_at

    # ── Placement ────────────────────────────────────────────────
    def place(self, forbidden: Collection[Position] = ()) -> bool:
        """
        Put the item on a free cell chosen uniformly at random.

        Falls back to a row-major scan after `attempts` misses. Returns
        False, leaving the item inactive, when every cell is forbidden.
        """
        blocked = set(forbidden)
        for _ in range(self.attempts):
            candidate = Position(
                self._rng.randrange(self.board.columns),
                self._rng.randrange(self.board.rows),
            )
            if candidate not in blocked:
                self._activate(candidate)
                return True

        for candidate in self.board.cells():
            if candidate not in blocked:
                self._activate(candidate)
                return True

        self.position = None
        self._reset_to_normal()
        logger.warning("No free cell left for food placement; food stays inactive")
        return False

    def place_at(self, pos: Position) -> bool:
        if not self.board.contains(pos):
            return False
        self._activate(pos)
        return True

    # ── Variants ─────────────────────────────────────────────────
    def upgrade_chance(self, score: int) -> float:
        chance = self.base_chance + (score / 1000) * self.chance_per_1000
        return min(chance, self.max_chance)

    def try_upgrade(self, score: int) -> bool:
        """Roll once for turning an active normal item into a special one."""
        if not self.is_active or self.variant is not FoodVariant.NORMAL:
            return False
        if self._rng.random() >= self.upgrade_chance(score):
            return False
        self.make_special(self._rng.choice(SPECIAL_VARIANTS))
        return True

    def make_special(self, variant: FoodVariant) -> None:
        traits = FOOD_VARIANTS[variant.value]
        self.variant = variant
        self.value = self.base_points * traits["multiplier"]
        self.size = self.base_size + traits["size_delta"]
        self.color = traits["color"]
        if traits["effect"] == "speed":
            self.effect = SpecialEffect("speed", self.boost_ms, self.boost_delta_ms)
        else:
            self.effect = None
        self.special_since = self._clock()
        logger.debug(f"Food at {self.position} became {variant.value} worth {self.value}")

    def has_expired(self) -> bool:
        if self.variant is FoodVariant.NORMAL or not self.is_active:
            return False
        return self._clock() - self.special_since > self.ttl_ms

    def expire(self) -> bool:
        """Revert an outlived special item to normal, keeping its cell."""
        if not self.has_expired():
            return False
        logger.debug(f"{self.variant.value} food at {self.position} expired")
        self._reset_to_normal()
        return True

    # ── Consumption ──────────────────────────────────────────────
    def consume(self) -> Consumed:
        if not self.is_active:
            return Consumed(0, None)
        eaten = Consumed(self.value, self.effect)
        self.position = None
        self._reset_to_normal()
        return eaten

    def render_descriptor(self) -> Optional[FoodDescriptor]:
        if not self.is_active:
            return None
        return FoodDescriptor(
            position=self.position,
            size=self.size,
            color=self.color,
            variant=self.variant,
            age_ms=self.age_ms,
        )

    # ── Private helpers ──────────────────────────────────────────
    def _activate(self, pos: Position) -> None:
        self.position = pos
        self.spawned_at = self._clock()
        self._reset_to_normal()

    def _reset_to_normal(self) -> None:
        traits = FOOD_VARIANTS[FoodVariant.NORMAL.value]
        self.variant: FoodVariant = FoodVariant.NORMAL
        self.value: int = self.base_points
        self.size: int = self.base_size
        self.color: tuple = traits["color"]
        self.effect: Optional[SpecialEffect] = None
