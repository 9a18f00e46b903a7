"""
session.py — Simulation controller.

Owns one Snake, one Food and the menu → playing → paused → over state
machine. The host calls `update()` once per frame; the session decides
whether enough wall-clock time has passed to run a tick, so rendering can
run faster than the simulation.

Nothing here raises during play: invalid transitions are ignored, a full
board leaves the food inactive, and losing is just the STATE_OVER state.
"""

import logging
import random
from dataclasses import dataclass
from typing import Optional

from .collision import CollisionLog, CollisionReport, classify
from .config import (
    DIFFICULTIES, GameConfig,
    MIN_TICK_MS, SPEED_STEP_MS, SPEED_STEP_POINTS,
    STATE_MENU, STATE_PLAYING, STATE_PAUSED, STATE_OVER,
)
from .model import (
    Board, Clock, Direction, Food, FoodDescriptor, Snake,
    SpecialEffect, monotonic_ms,
)
from .storage import MemoryScoreStore, ScoreStore
from .timers import ScheduledEvent, Scheduler

logger = logging.getLogger(__name__)


def tick_interval_for_score(
    score: int,
    base_ms: int,
    step_ms: int = SPEED_STEP_MS,
    every: int = SPEED_STEP_POINTS,
    floor_ms: int = MIN_TICK_MS,
) -> int:
    """
    Milliseconds per tick for a given score.

    Drops by `step_ms` for every `every` points, never below `floor_ms`
    and never above `base_ms`.
    """
    reduction = (max(0, score) // every) * step_ms
    return max(min(floor_ms, base_ms), base_ms - reduction)


@dataclass(frozen=True)
class FrameSnapshot:
    """Read-only view of a session handed to the render sink each frame."""

    state: str
    score: int
    high_score: int
    new_high_score: bool
    body: tuple
    direction: Direction
    food: Optional[FoodDescriptor]
    tick_interval_ms: int
    speed_boost_active: bool
    difficulty: str
    columns: int
    rows: int
    death_reason: Optional[str]


class GameSession:
    """
    Top-level simulation state.

    `tick()` runs exactly one simulation step; `update()` is the frame
    callback that rate-limits ticks against `tick_interval_ms`.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        store: Optional[ScoreStore] = None,
        rng: Optional[random.Random] = None,
        clock: Clock = monotonic_ms,
        difficulty: Optional[str] = None,
    ):
        self.config = config or GameConfig()
        self.board = Board(self.config.columns, self.config.rows)
        self.store: ScoreStore = store if store is not None else MemoryScoreStore()
        self._rng = rng or random.Random()
        self._clock = clock
        self._scheduler = Scheduler()
        self._boost_event: Optional[ScheduledEvent] = None
        self._boost_delta_ms: int = 0

        self.difficulty: Optional[str] = difficulty if difficulty in DIFFICULTIES else None
        self.state: str = STATE_MENU
        self.score: int = 0
        self.high_score: int = self.store.get_high_score()
        self.new_high_score: bool = False
        self.death_reason: Optional[str] = None
        self.ticks: int = 0
        self.started_at: float = 0.0
        self.ended_at: float = 0.0
        self.base_tick_ms: int = self.config.base_tick_ms
        self.tick_interval_ms: int = self.config.base_tick_ms
        self._last_tick_at: float = 0.0
        self.collisions = CollisionLog()
        self._reset_entities()

    # ── Transitions ──────────────────────────────────────────────
    def start(self) -> bool:
        if self.state != STATE_MENU:
            return False
        self._begin()
        return True

    def restart(self) -> bool:
        """Full reset into a fresh game; never resumes the old one."""
        if self.state == STATE_MENU:
            return False
        self._begin()
        return True

    def pause(self) -> bool:
        if self.state != STATE_PLAYING:
            return False
        self.state = STATE_PAUSED
        logger.info(f"Game paused at score {self.score}")
        return True

    def resume(self) -> bool:
        if self.state != STATE_PAUSED:
            return False
        self.state = STATE_PLAYING
        # restart the tick timer so no tick is owed for the paused time
        self._last_tick_at = self._clock()
        logger.info("Game resumed")
        return True

    def toggle_pause(self) -> bool:
        if self.state == STATE_PLAYING:
            return self.pause()
        if self.state == STATE_PAUSED:
            return self.resume()
        return False

    def set_difficulty(self, name: str) -> bool:
        """Pick a speed preset for the next game. Ignored mid-game."""
        if name not in DIFFICULTIES or self.state in (STATE_PLAYING, STATE_PAUSED):
            return False
        self.difficulty = name
        return True

    # ── Input ────────────────────────────────────────────────────
    def change_direction(self, direction: Direction) -> bool:
        if self.state != STATE_PLAYING:
            return False
        return self.snake.change_direction(direction)

    # ── Loop ─────────────────────────────────────────────────────
    def update(self) -> bool:
        """Frame callback. Fires due timers, then ticks if one is owed."""
        now = self._clock()
        self._scheduler.run_due(now)
        if self.state != STATE_PLAYING:
            return False
        if now - self._last_tick_at < self.tick_interval_ms:
            return False
        self._last_tick_at = now
        self.tick()
        return True

    def tick(self) -> Optional[CollisionReport]:
        """Run one simulation step. No-op outside STATE_PLAYING."""
        if self.state != STATE_PLAYING:
            return None
        self.ticks += 1
        self.snake.step()
        report = classify(self.snake, self.food, self.board)
        self.collisions.record(report, self._clock())

        # a lethal step scores nothing, even if the head also landed on food
        if report.lethal:
            self._game_over(report)
            return report

        if report.food.detected:
            self._eat()

        self.food.expire()
        self.food.try_upgrade(self.score)
        self._refresh_speed()
        return report

    # ── Read-only views ──────────────────────────────────────────
    @property
    def speed_boost_active(self) -> bool:
        return self._boost_event is not None and self._boost_event.pending

    @property
    def difficulty_label(self) -> str:
        if self.difficulty is None:
            return "CUSTOM"
        return DIFFICULTIES[self.difficulty]["label"]

    def stats(self) -> dict:
        if self.state == STATE_MENU:
            play_ms = 0.0
        elif self.state == STATE_OVER:
            play_ms = self.ended_at - self.started_at
        else:
            play_ms = self._clock() - self.started_at
        return {
            "score": self.score,
            "high_score": self.high_score,
            "play_time_ms": play_ms,
            "ticks": self.ticks,
            "snake_length": self.snake.length,
            "tick_interval_ms": self.tick_interval_ms,
            "state": self.state,
            "difficulty": self.difficulty_label,
            "collisions": self.collisions.statistics(),
        }

    def snapshot(self) -> FrameSnapshot:
        return FrameSnapshot(
            state=self.state,
            score=self.score,
            high_score=self.high_score,
            new_high_score=self.new_high_score,
            body=tuple(self.snake.body),
            direction=self.snake.direction,
            food=self.food.render_descriptor(),
            tick_interval_ms=self.tick_interval_ms,
            speed_boost_active=self.speed_boost_active,
            difficulty=self.difficulty_label,
            columns=self.board.columns,
            rows=self.board.rows,
            death_reason=self.death_reason,
        )

    # ── Private helpers ──────────────────────────────────────────
    def _reset_entities(self) -> None:
        self._scheduler.cancel_all()
        self._boost_event = None
        self._boost_delta_ms = 0

        cfg = self.config
        self.snake = Snake(self.board, cfg.initial_length)
        self.food = Food(
            self.board,
            rng=self._rng,
            clock=self._clock,
            base_points=cfg.base_points,
            base_size=cfg.food_size,
            attempts=cfg.placement_attempts,
            ttl_ms=cfg.special_ttl_ms,
            base_chance=cfg.special_base_chance,
            chance_per_1000=cfg.special_chance_per_1000,
            max_chance=cfg.special_max_chance,
            boost_ms=cfg.speed_boost_ms,
            boost_delta_ms=cfg.speed_boost_delta_ms,
        )
        self.score = 0
        self.ticks = 0
        self.new_high_score = False
        self.death_reason = None
        if self.difficulty is not None:
            self.base_tick_ms = DIFFICULTIES[self.difficulty]["tick_ms"]
        else:
            self.base_tick_ms = cfg.base_tick_ms
        self.tick_interval_ms = self.base_tick_ms

    def _begin(self) -> None:
        self._reset_entities()
        self.food.place(self.snake.occupied_cells())
        now = self._clock()
        self.started_at = now
        self.ended_at = 0.0
        self._last_tick_at = now
        self.state = STATE_PLAYING
        logger.info(
            f"Game started on {self.board.columns}x{self.board.rows} board "
            f"at {self.tick_interval_ms} ms/tick"
        )

    def _eat(self) -> None:
        eaten = self.food.consume()
        self.score += eaten.points
        self.snake.request_growth()
        self.food.place(self.snake.occupied_cells())
        if eaten.effect is not None:
            self._apply_effect(eaten.effect)
        logger.debug(f"Food eaten for {eaten.points} points; score {self.score}")

    def _apply_effect(self, effect: SpecialEffect) -> None:
        if effect.kind == "speed":
            if self._boost_event is not None:
                self._boost_event.cancel()
            self._boost_delta_ms = effect.interval_delta_ms
            self._boost_event = self._scheduler.schedule(
                effect.duration_ms, self._end_speed_boost, self._clock(), label="speed-boost",
            )
            self._refresh_speed()
            logger.info(f"Speed boost for {effect.duration_ms} ms")
        else:
            logger.warning(f"Ignoring unknown food effect {effect.kind!r}")

    def _end_speed_boost(self) -> None:
        self._boost_event = None
        self._boost_delta_ms = 0
        self._refresh_speed()
        logger.info(f"Speed boost over; back to {self.tick_interval_ms} ms/tick")

    def _refresh_speed(self) -> None:
        cfg = self.config
        interval = tick_interval_for_score(
            self.score, self.base_tick_ms,
            cfg.speed_step_ms, cfg.speed_step_points, cfg.min_tick_ms,
        )
        if self.speed_boost_active:
            boosted = max(cfg.speed_boost_floor_ms, interval - self._boost_delta_ms)
            interval = min(interval, boosted)
        self.tick_interval_ms = interval

    def _game_over(self, report: CollisionReport) -> None:
        self.state = STATE_OVER
        self.ended_at = self._clock()
        if report.boundary.detected:
            self.death_reason = f"wall:{report.boundary.side}"
        else:
            self.death_reason = "self"

        # the store may hold a better score written by another session
        self.new_high_score = self.store.set_high_score(self.score)
        self.high_score = self.store.get_high_score()
        if self.new_high_score:
            logger.info(f"New high score: {self.score}")
        logger.info(f"Game over ({self.death_reason}) with score {self.score}")
