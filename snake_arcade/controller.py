"""
controller.py — Controller layer.

Responsibilities:
  - Own the pygame event loop.
  - Translate raw keyboard events into session commands.
  - Pause a running game when the window loses focus.
  - Drive the frame loop: let the session tick when due, ask the view to
    render every frame.
  - Remember the chosen difficulty between runs.
  - Know nothing about rendering details (that's the View's job).
  - Know nothing about game rules (that's the Session's job).

The controller is the only layer that imports pygame directly for events.
"""

import logging
import pygame

from .config import (
    FPS,
    STATE_MENU, STATE_PLAYING, STATE_PAUSED, STATE_OVER,
)
from .model import Direction
from .session import GameSession
from .view import GameView, window_size

logger = logging.getLogger(__name__)

DIRECTION_KEYS = {
    pygame.K_LEFT:  Direction.LEFT,
    pygame.K_RIGHT: Direction.RIGHT,
    pygame.K_UP:    Direction.UP,
    pygame.K_DOWN:  Direction.DOWN,
    pygame.K_a:     Direction.LEFT,
    pygame.K_d:     Direction.RIGHT,
    pygame.K_w:     Direction.UP,
    pygame.K_s:     Direction.DOWN,
}

DIFFICULTY_KEYS = {
    pygame.K_1: "easy",
    pygame.K_2: "medium",
    pygame.K_3: "hard",
    pygame.K_4: "expert",
}


class GameController:
    """
    Owns the main loop.
    Glues Session <-> View without them knowing about each other.
    """

    def __init__(self, session: GameSession):
        pygame.init()
        self.session = session
        self.screen = pygame.display.set_mode(window_size(session.board.columns, session.board.rows))
        pygame.display.set_caption("SNAKE")
        self.clock = pygame.time.Clock()
        self.view = GameView(self.screen, session.board.columns, session.board.rows)
        self.running = False

    # ── Public entry point ────────────────────────────────────────
    def run(self) -> None:
        """Run the frame loop until the player quits."""
        self.running = True
        while self.running:
            self.clock.tick(FPS)
            self._handle_events()
            if not self.running:
                break
            self.session.update()
            self.view.render(self.session.snapshot())
            pygame.display.flip()
        pygame.quit()
        logger.info(f"Exited with best score {self.session.high_score}")

    # ── Event dispatch ────────────────────────────────────────────
    def _handle_events(self) -> None:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.quit()
            elif event.type == pygame.KEYDOWN:
                self.handle_key(event.key)
            elif event.type == pygame.WINDOWFOCUSLOST:
                self.focus_lost()

    def focus_lost(self) -> None:
        if self.session.pause():
            logger.info("Window lost focus; game paused")

    def handle_key(self, key: int) -> None:
        # Q / Esc quit from any state
        if key in (pygame.K_q, pygame.K_ESCAPE):
            self.quit()
            return

        state = self.session.state

        if state == STATE_MENU:
            self._handle_menu_keys(key)
        elif state == STATE_PLAYING:
            self._handle_playing_keys(key)
        elif state == STATE_PAUSED:
            self._handle_paused_keys(key)
        elif state == STATE_OVER:
            self._handle_over_keys(key)

    # ── Per-state key handlers ────────────────────────────────────
    def _handle_menu_keys(self, key: int) -> None:
        if key in (pygame.K_RETURN, pygame.K_SPACE):
            self.session.start()
        self._handle_difficulty_keys(key)

    def _handle_playing_keys(self, key: int) -> None:
        if key in DIRECTION_KEYS:
            self.session.change_direction(DIRECTION_KEYS[key])
        elif key in (pygame.K_p, pygame.K_SPACE):
            self.session.pause()
        elif key == pygame.K_r:
            self.session.restart()

    def _handle_paused_keys(self, key: int) -> None:
        if key in (pygame.K_p, pygame.K_SPACE):
            self.session.resume()
        elif key == pygame.K_r:
            self.session.restart()

    def _handle_over_keys(self, key: int) -> None:
        if key in (pygame.K_r, pygame.K_SPACE, pygame.K_RETURN):
            self.session.restart()
        self._handle_difficulty_keys(key)

    def _handle_difficulty_keys(self, key: int) -> None:
        if key in DIFFICULTY_KEYS and self.session.set_difficulty(DIFFICULTY_KEYS[key]):
            settings = self.session.store.get_settings()
            settings["difficulty"] = DIFFICULTY_KEYS[key]
            self.session.store.set_settings(settings)

    # ── Utilities ─────────────────────────────────────────────────
    def quit(self) -> None:
        self.running = False
