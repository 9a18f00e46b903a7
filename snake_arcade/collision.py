"""
collision.py — Collision classification.

Pure functions over read-only model objects. Every check runs on every
call; the caller decides precedence (lethal beats food).
"""

import logging
from collections import deque
from dataclasses import dataclass
from typing import Collection, Optional

from .config import COLLISION_HISTORY
from .model import ALL_DIRS, Board, Direction, Food, Position, Snake, SpecialEffect

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BoundaryHit:
    detected: bool = False
    side: Optional[str] = None


@dataclass(frozen=True)
class SelfHit:
    detected: bool = False
    segment_index: int = -1


@dataclass(frozen=True)
class FoodHit:
    detected: bool = False
    points: int = 0
    effect: Optional[SpecialEffect] = None


@dataclass(frozen=True)
class CollisionReport:
    position: Position
    boundary: BoundaryHit
    self_hit: SelfHit
    food: FoodHit

    @property
    def lethal(self) -> bool:
        return self.boundary.detected or self.self_hit.detected

    @property
    def any(self) -> bool:
        return self.lethal or self.food.detected

    @property
    def kinds(self) -> list[str]:
        kinds = []
        if self.boundary.detected:
            kinds.append("boundary")
        if self.self_hit.detected:
            kinds.append("self")
        if self.food.detected:
            kinds.append("food")
        return kinds


class CollisionLog:
    """Bounded history of non-empty reports, oldest dropped first."""

    def __init__(self, limit: int = COLLISION_HISTORY):
        self._entries: deque[tuple[float, CollisionReport]] = deque(maxlen=limit)

    def __len__(self) -> int:
        return len(self._entries)

    def record(self, report: CollisionReport, at: float) -> None:
        if report.any:
            self._entries.append((at, report))

    def history(self) -> list[tuple[float, CollisionReport]]:
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def statistics(self, recent: int = 10) -> dict:
        by_kind = {"boundary": 0, "self": 0, "food": 0}
        for _, report in self._entries:
            for kind in report.kinds:
                by_kind[kind] += 1
        return {
            "total": len(self._entries),
            "by_kind": by_kind,
            "recent": [report for _, report in list(self._entries)[-recent:]],
        }


def classify(snake: Snake, food: Food, board: Board) -> CollisionReport:
    """Classify the snake's current head against the board, its body and the food."""
    body = list(snake.body)
    return classify_position(snake.head, body[1:], food, board)


def predict(snake: Snake, food: Food, board: Board) -> CollisionReport:
    """
    Classify the head the next `step()` would produce, without moving.

    The tail cell is vacated by that step unless growth is pending.
    """
    body = list(snake.body)
    after_step = body if snake.pending_growth else body[:-1]
    return classify_position(snake.peek_next_head(), after_step, food, board, index_offset=0)


def classify_position(
    head: Position,
    others: Collection[Position],
    food: Food,
    board: Board,
    index_offset: int = 1,
) -> CollisionReport:
    """
    Core classifier. `others` is every body segment except `head`;
    `index_offset` maps positions in `others` back to body indices.
    """
    side = board.edge_of(head)
    boundary = BoundaryHit(side is not None, side)

    self_hit = SelfHit()
    for i, segment in enumerate(others):
        if segment == head:
            self_hit = SelfHit(True, i + index_offset)
            break

    food_hit = FoodHit()
    if food.is_active and food.position == head:
        food_hit = FoodHit(True, food.value, food.effect)

    report = CollisionReport(head, boundary, self_hit, food_hit)
    if report.any:
        logger.debug(
            f"Collision at {head}: boundary={boundary.side} "
            f"self={self_hit.segment_index} food={food_hit.points}"
        )
    return report


def is_position_safe(pos: Position, snake: Snake, board: Board) -> bool:
    """True when `pos` is on the board and not on the snake's body."""
    return board.contains(pos) and not snake.occupies(pos)


def safe_moves(snake: Snake, board: Board) -> list[Direction]:
    """Directions the snake may turn to whose next cell is safe right now."""
    moves = []
    for d in ALL_DIRS:
        if not snake.can_move(d):
            continue
        if is_position_safe(snake.head.moved(d), snake, board):
            moves.append(d)
    return moves
