"""
view.py — View layer.

Draws one frame from a FrameSnapshot. Never touches the session, so it
can run every display frame while the simulation ticks at its own pace.

  - Pre-rendered grid surface (drawn once, blitted every frame)
  - Food pulses and glows in its variant colour; size follows the variant
  - Snake fades from head colour to tail colour, eyes follow direction
  - HUD panel: score, best, speed, difficulty, boost badge
  - Overlays for menu, paused and game over

Public API:
    window_size(columns, rows)  — pixel size of the whole window
    GameView(screen, columns, rows)
    view.render(snapshot)       — draw the current frame (no flip)
"""

import math
import pygame

from .config import (
    CELL, PANEL_H, MARGIN,
    BG, GRID_COL, SNAKE_COL, SNAKE_DIM, FOOD_COL, SPEED_COL, UI_COL, BLACK,
    PANEL_BG, BORDER_COL,
    STATE_MENU, STATE_OVER, STATE_PAUSED,
)
from .model import FoodDescriptor
from .session import FrameSnapshot


def window_size(columns: int, rows: int) -> tuple[int, int]:
    return columns * CELL + 2 * MARGIN, PANEL_H + rows * CELL + 2 * MARGIN


# ─────────────────────── colour helpers ──────────────────────────
def _lerp_color(c1: tuple, c2: tuple, t: float) -> tuple:
    t = max(0.0, min(1.0, t))
    return tuple(int(c1[i] + (c2[i] - c1[i]) * t) for i in range(3))


def _with_alpha(color: tuple, alpha: int) -> tuple:
    return (*color[:3], max(0, min(255, alpha)))


def _brighten(color: tuple, factor: float) -> tuple:
    return tuple(min(255, int(c * factor)) for c in color[:3])


# ─────────────────────────── GameView ────────────────────────────
class GameView:
    """Renders the complete game frame from a FrameSnapshot."""

    def __init__(self, screen: pygame.Surface, columns: int, rows: int):
        self.screen = screen
        self.columns = columns
        self.rows = rows
        self.game_w = columns * CELL
        self.game_h = rows * CELL
        self.width, self.height = window_size(columns, rows)
        self.off_x = MARGIN
        self.off_y = PANEL_H + MARGIN
        self._init_fonts()
        self._build_static_surfaces()
        self._disp_score: float = 0.0
        self._anim_tick: int = 0

    # ── Main entry ───────────────────────────────────────────────
    def render(self, snap: FrameSnapshot) -> None:
        self._anim_tick += 1
        self._disp_score += (snap.score - self._disp_score) * 0.25

        self.screen.fill(BG)
        self.screen.blit(self._grid_surf, (self.off_x, self.off_y))

        self._draw_food(snap.food)
        if snap.state != STATE_MENU:
            self._draw_snake(snap)

        self._draw_border()
        self._draw_panel(snap)

        if snap.state == STATE_MENU:
            self._draw_menu_overlay(snap)
        elif snap.state == STATE_PAUSED:
            self._draw_paused_overlay()
        elif snap.state == STATE_OVER:
            self._draw_game_over_overlay(snap)

    # ── Static surface pre-builds ─────────────────────────────────
    def _build_static_surfaces(self) -> None:
        self._grid_surf = pygame.Surface((self.game_w, self.game_h), pygame.SRCALPHA)
        for x in range(self.columns + 1):
            pygame.draw.line(self._grid_surf, (*GRID_COL, 160),
                             (x * CELL, 0), (x * CELL, self.game_h))
        for y in range(self.rows + 1):
            pygame.draw.line(self._grid_surf, (*GRID_COL, 160),
                             (0, y * CELL), (self.game_w, y * CELL))

    def _cell_center(self, x: int, y: int) -> tuple[int, int]:
        return self.off_x + x * CELL + CELL // 2, self.off_y + y * CELL + CELL // 2

    # ── Food ─────────────────────────────────────────────────────
    def _draw_food(self, food: FoodDescriptor | None) -> None:
        if food is None:
            return
        pulse = 0.80 + 0.20 * math.sin(food.age_ms / 160.0)
        r = max(2, int(food.size / 2 * pulse))
        x, y = self._cell_center(*food.position)

        glow_r = r + 8
        glow = pygame.Surface((glow_r * 2, glow_r * 2), pygame.SRCALPHA)
        for gr in range(glow_r, r, -1):
            a = int(80 * (1 - (gr - r) / (glow_r - r)) * pulse)
            pygame.draw.circle(glow, _with_alpha(food.color, a), (glow_r, glow_r), gr)
        self.screen.blit(glow, (x - glow_r, y - glow_r))

        pygame.draw.circle(self.screen, food.color, (x, y), r)
        pygame.draw.circle(self.screen, _brighten(food.color, 1.5),
                           (x - max(1, r // 3), y - max(1, r // 3)),
                           max(1, r // 4))

    # ── Snake ────────────────────────────────────────────────────
    def _draw_snake(self, snap: FrameSnapshot) -> None:
        body = snap.body
        length = len(body)
        for i, (sx, sy) in enumerate(body):
            # colour fades from bright head to dim tail
            t = 1.0 - (i / max(length - 1, 1)) * 0.72
            color = _lerp_color(SNAKE_DIM, SNAKE_COL, t)
            shrink = 0 if i == 0 else 1
            rect = pygame.Rect(
                self.off_x + sx * CELL + shrink,
                self.off_y + sy * CELL + shrink,
                CELL - shrink * 2,
                CELL - shrink * 2,
            )
            if not self.screen.get_rect().colliderect(rect):
                continue
            radius = rect.width // 2 - 1 if i == 0 else rect.width // 4
            pygame.draw.rect(self.screen, color, rect, border_radius=max(1, radius))
        if body:
            self._draw_eyes(body[0], snap.direction.x, snap.direction.y)

    def _draw_eyes(self, head: tuple, dx: int, dy: int) -> None:
        cx, cy = self._cell_center(*head)
        px, py = -dy, dx  # perpendicular
        for sign in (+1, -1):
            ex = int(cx + dx * 4 + sign * px * 4)
            ey = int(cy + dy * 4 + sign * py * 4)
            pygame.draw.rect(self.screen, (230, 230, 230), (ex - 2, ey - 2, 4, 4))
            pygame.draw.rect(self.screen, BLACK, (ex - 1, ey - 1, 2, 2))

    # ── Border ───────────────────────────────────────────────────
    def _draw_border(self) -> None:
        pygame.draw.rect(self.screen, BORDER_COL,
                         (self.off_x - 1, self.off_y - 1, self.game_w + 2, self.game_h + 2), 1)

    # ── HUD Panel ────────────────────────────────────────────────
    def _draw_panel(self, snap: FrameSnapshot) -> None:
        pygame.draw.rect(self.screen, PANEL_BG, (0, 0, self.width, PANEL_H))
        pygame.draw.line(self.screen, BORDER_COL,
                         (0, PANEL_H - 1), (self.width, PANEL_H - 1), 1)

        self.screen.blit(self.font_small.render("SCORE", True, SNAKE_COL), (16, 6))
        self.screen.blit(
            self.font_big.render(str(int(round(self._disp_score))), True, SNAKE_COL), (16, 24),
        )

        best = self.font_small.render("BEST", True, FOOD_COL)
        self.screen.blit(best, best.get_rect(topright=(self.width - 16, 6)))
        best_val = self.font_big.render(str(snap.high_score), True, FOOD_COL)
        self.screen.blit(best_val, best_val.get_rect(topright=(self.width - 16, 24)))

        cx = self.width // 2
        diff = self.font_small.render(snap.difficulty, True, UI_COL)
        self.screen.blit(diff, diff.get_rect(center=(cx, 14)))
        speed = self.font_tiny.render(f"{snap.tick_interval_ms} MS/TICK", True, UI_COL)
        self.screen.blit(speed, speed.get_rect(center=(cx, 32)))

        if snap.speed_boost_active:
            badge = self.font_tiny.render("[ BOOST ]", True, SPEED_COL)
            self.screen.blit(badge, badge.get_rect(center=(cx, 48)))
        elif snap.state == STATE_PAUSED:
            badge = self.font_tiny.render("[ PAUSED ]", True, FOOD_COL)
            self.screen.blit(badge, badge.get_rect(center=(cx, 48)))

    # ── Overlay infrastructure ────────────────────────────────────
    def _draw_overlay_base(self) -> None:
        surf = pygame.Surface((self.game_w, self.game_h), pygame.SRCALPHA)
        surf.fill((5, 5, 12, 215))
        self.screen.blit(surf, (self.off_x, self.off_y))

    def _draw_title(self, title: str, color: tuple, cy: int) -> int:
        pulse = 0.82 + 0.18 * math.sin(self._anim_tick * 0.05)
        surf = self.font_title.render(title, True, _brighten(color, pulse))
        self.screen.blit(surf, surf.get_rect(center=(self.width // 2, cy + surf.get_height() // 2)))
        return cy + surf.get_height() + 14

    def _draw_text_line(self, text: str, color: tuple, cy: int, font: pygame.font.Font) -> int:
        surf = font.render(text, True, color)
        self.screen.blit(surf, surf.get_rect(center=(self.width // 2, cy)))
        return cy + surf.get_height() + 8

    # ── State overlays ────────────────────────────────────────────
    def _draw_menu_overlay(self, snap: FrameSnapshot) -> None:
        self._draw_overlay_base()
        cy = self.off_y + self.game_h // 4
        cy = self._draw_title("SNAKE", SNAKE_COL, cy)
        cy = self._draw_text_line(f"DIFFICULTY: {snap.difficulty}", FOOD_COL, cy, self.font_med)
        cy = self._draw_text_line("PRESS 1-4 TO CHANGE", UI_COL, cy, self.font_tiny)
        cy += 12
        cy = self._draw_text_line("ENTER / SPACE TO START", SNAKE_COL, cy, self.font_small)
        self._draw_text_line("ARROWS/WASD MOVE   P PAUSE   R RESTART   Q QUIT",
                             UI_COL, cy + 6, self.font_tiny)

    def _draw_paused_overlay(self) -> None:
        self._draw_overlay_base()
        cy = self.off_y + self.game_h // 2 - 36
        cy = self._draw_title("PAUSED", FOOD_COL, cy)
        self._draw_text_line("SPACE / P TO CONTINUE   R TO RESTART", UI_COL, cy, self.font_small)

    def _draw_game_over_overlay(self, snap: FrameSnapshot) -> None:
        self._draw_overlay_base()
        cy = self.off_y + self.game_h // 4
        if snap.new_high_score:
            cy = self._draw_title("NEW HIGH SCORE!", FOOD_COL, cy)
        else:
            cy = self._draw_title("GAME OVER", SNAKE_COL, cy)
        cy = self._draw_text_line(f"SCORE: {snap.score}", UI_COL, cy, self.font_med)
        cy = self._draw_text_line(f"BEST: {snap.high_score}", UI_COL, cy, self.font_small)
        cy += 10
        self._draw_text_line("R / ENTER TO PLAY AGAIN", SNAKE_COL, cy, self.font_small)

    # ── Font init ─────────────────────────────────────────────────
    def _init_fonts(self) -> None:
        specs = [
            ("font_title", "courier", 38, True),
            ("font_big",   "courier", 24, True),
            ("font_med",   "courier", 17, False),
            ("font_small", "courier", 13, True),
            ("font_tiny",  "courier", 11, False),
        ]
        for attr, name, size, bold in specs:
            try:
                setattr(self, attr, pygame.font.SysFont(name, size, bold=bold))
            except (pygame.error, OSError):
                setattr(self, attr, pygame.font.Font(None, size))
