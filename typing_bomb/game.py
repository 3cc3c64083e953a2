"""
Typing Bomb Squad — pygame front-end

Screens
- Mode select: LEFT/RIGHT picks English or Zhuyin, ENTER starts
- Play: type the key for each falling bomb before it reaches the floor
- Game over: type a name (optional), ENTER submits
- Scores: LEFT/RIGHT switches board, ENTER plays again

ESC or closing the window quits.
"""

from __future__ import annotations
import logging
from typing import List, Optional

import pygame

from . import catalog
from .audio import AudioCues
from .config import (BOMB_RADIUS, FIELD_H, FIELD_W, FPS, HUD_H, LOG_LEVEL,
                     NAME_MAX_LEN, POPUP_MS, WIN_H, WIN_W)
from .leaderboard import LeaderboardStore
from .session import ENDED, PLAYING, SELECT_MODE, GameSession

WHITE = (255, 255, 255)
BLACK = (0, 0, 0)
GRAY = (128, 128, 128)
DARK = (24, 26, 32)
RED = (220, 40, 40)
GREEN = (60, 200, 90)
BLUE = (40, 90, 220)
YELLOW = (240, 200, 40)

FIELD_X = (WIN_W - FIELD_W) // 2
FIELD_Y = HUD_H
MESSAGE_MS = 1500

MODE_LABELS = {catalog.EN: "English", catalog.ZH: "Zhuyin"}

# key rows of a standard keyboard; zh labels come from the catalog
KEYBOARD_LAYOUT: List[str] = [
    "`1234567890-=",
    "QWERTYUIOP[]",
    "ASDFGHJKL;'",
    "ZXCVBNM,./",
]

# fonts that carry bopomofo; SysFont falls back to the default font
CJK_FONTS = "notosanscjktc,notosanscjk,microsoftjhenghei,pingfangtc,heititc,arialunicodems"


def normalize_key(event: pygame.event.Event) -> Optional[str]:
    """Uppercased symbol for a KEYDOWN, or None for keys with no text."""
    ch = getattr(event, "unicode", "") or ""
    if len(ch) != 1 or not ch.isprintable() or ch.isspace():
        return None
    return ch.upper()


class Game:
    def __init__(self, session: Optional[GameSession] = None):
        self.win = pygame.display.set_mode((WIN_W, WIN_H))
        pygame.display.set_caption("Typing Bomb Squad")
        self.clock = pygame.time.Clock()
        self.font_big = pygame.font.SysFont(CJK_FONTS, 36, bold=True)
        self.font = pygame.font.SysFont(CJK_FONTS, 24, bold=True)
        self.font_small = pygame.font.SysFont(CJK_FONTS, 16)

        self.session = session or GameSession(LeaderboardStore(), AudioCues.from_assets())
        self.running = True

        self.mode_sel = 0
        self.name = ""
        self.view_mode = catalog.EN
        self._boards = {}

    # ----- loop -----
    def run(self):
        while self.running:
            dt_ms = self.clock.tick(FPS)
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    self.running = False
                elif event.type == pygame.KEYDOWN:
                    self.on_key(event)
            self.session.update(dt_ms)
            self.render()
        self.session.close()
        pygame.quit()

    def on_key(self, event: pygame.event.Event):
        s = self.session
        if event.key == pygame.K_ESCAPE:
            self.running = False
            return

        if s.phase == SELECT_MODE:
            if event.key in (pygame.K_LEFT, pygame.K_RIGHT):
                self.mode_sel = 1 - self.mode_sel
            elif event.key == pygame.K_RETURN:
                self.name = ""
                s.start(catalog.MODES[self.mode_sel])
            return

        if s.phase == PLAYING:
            key = normalize_key(event)
            if key is not None:
                s.press(key)
            return

        if s.phase == ENDED and not s.submitted:
            if event.key == pygame.K_RETURN:
                s.submit_score(self.name)
                self._boards.clear()
                self.view_mode = s.mode
            elif event.key == pygame.K_BACKSPACE:
                self.name = self.name[:-1]
            else:
                ch = getattr(event, "unicode", "")
                if ch and ch.isprintable() and len(self.name) < NAME_MAX_LEN:
                    self.name += ch
            return

        if s.phase == ENDED:
            if event.key in (pygame.K_LEFT, pygame.K_RIGHT):
                self.view_mode = catalog.ZH if self.view_mode == catalog.EN else catalog.EN
            elif event.key == pygame.K_RETURN:
                s.restart()

    # ----- drawing helpers -----
    def draw_center(self, y: int, text: str, font: pygame.font.Font, color=WHITE):
        surf = font.render(text, True, color)
        self.win.blit(surf, ((WIN_W - surf.get_width()) // 2, y))

    def draw_at(self, x: float, y: float, text: str, font: pygame.font.Font, color=WHITE):
        """Draw text centred on (x, y)."""
        surf = font.render(text, True, color)
        self.win.blit(surf, (int(x - surf.get_width() / 2), int(y - surf.get_height() / 2)))

    # ----- renders -----
    def render(self):
        self.win.fill(DARK)
        s = self.session
        if s.phase == SELECT_MODE:
            self.render_select()
        elif s.phase == PLAYING:
            self.render_play()
        elif not s.submitted:
            self.render_enter_name()
        else:
            self.render_scores()
        pygame.display.flip()

    def render_select(self):
        self.draw_center(120, "TYPING BOMB SQUAD", self.font_big, YELLOW)
        self.draw_center(200, "Select your practice mode:", self.font)
        for i, mode in enumerate(catalog.MODES):
            label = MODE_LABELS[mode]
            prefix = "> " if i == self.mode_sel else "  "
            color = YELLOW if i == self.mode_sel else GRAY
            self.draw_center(250 + i*40, prefix + label, self.font, color)
        self.draw_center(360, "ENTER to start", self.font_small, GRAY)

    def render_hud(self):
        s = self.session
        self.win.blit(self.font.render(f"LIVES {s.lives}", True, RED), (FIELD_X, 12))
        score = self.font.render(f"SCORE {s.score}", True, BLUE)
        self.win.blit(score, ((WIN_W - score.get_width()) // 2, 12))
        nxt = self.font_small.render(f"Next level {s.to_next_level}", True, GREEN)
        self.win.blit(nxt, (FIELD_X + FIELD_W - nxt.get_width(), 14))
        tier = self.font_small.render(s.tier.name, True, GRAY)
        self.win.blit(tier, (FIELD_X + FIELD_W - tier.get_width(), 38))

    def render_play(self):
        s = self.session
        self.render_hud()
        pygame.draw.rect(self.win, BLACK, (FIELD_X, FIELD_Y, FIELD_W, FIELD_H))
        pygame.draw.rect(self.win, GRAY, (FIELD_X, FIELD_Y, FIELD_W, FIELD_H), 2)

        clip = self.win.get_clip()
        self.win.set_clip(pygame.Rect(FIELD_X, FIELD_Y, FIELD_W, FIELD_H))
        for b in s.field.snapshot():
            bx, by = FIELD_X + b.x, FIELD_Y + b.y
            pygame.draw.circle(self.win, (60, 60, 60), (int(bx), int(by)), BOMB_RADIUS)
            pygame.draw.rect(self.win, GRAY, (int(bx) - 2, int(by) - 25, 4, 10))
            pygame.draw.circle(self.win, RED, (int(bx), int(by) - 25), 4)
            self.draw_at(bx, by, b.char, self.font, WHITE)

        for p in s.popups:
            age = POPUP_MS - (p.expires_at_ms - s.clock.now)
            rise = 40 * max(0.0, min(1.0, age / POPUP_MS))
            self.draw_at(FIELD_X + p.x, FIELD_Y + p.y - rise, p.text, self.font, GREEN)
        self.win.set_clip(clip)

        if s.message and (s.clock.now - s.message_t) < MESSAGE_MS:
            self.draw_center(FIELD_Y + FIELD_H // 2 - 20, s.message, self.font_big, YELLOW)

        self.render_keyboard(s.active_keys())

    def render_keyboard(self, active: set):
        mode = self.session.mode
        key_w, key_h, gap = 30, 34, 3
        y = FIELD_Y + FIELD_H + 12
        for row in KEYBOARD_LAYOUT:
            row_w = len(row) * (key_w + gap) - gap
            x = (WIN_W - row_w) // 2
            for key in row:
                lit = key in active
                rect = pygame.Rect(x, y, key_w, key_h)
                pygame.draw.rect(self.win, YELLOW if lit else (70, 70, 80), rect, border_radius=4)
                col = BLACK if lit else WHITE
                zh = catalog.glyph_for_key(mode, key) if mode == catalog.ZH else None
                if zh:
                    self.draw_at(rect.centerx, rect.top + 11, zh, self.font_small, col)
                    self.draw_at(rect.centerx, rect.bottom - 9, key, self.font_small, col)
                else:
                    self.draw_at(rect.centerx, rect.centery, key, self.font_small, col)
                x += key_w + gap
            y += key_h + gap

    def render_enter_name(self):
        s = self.session
        self.draw_center(140, "GAME OVER", self.font_big, RED)
        self.draw_center(200, f"Your score: {s.score}", self.font)
        self.draw_center(260, "Enter your name (optional):", self.font_small, GRAY)
        self.draw_center(290, (self.name or "") + "_", self.font, YELLOW)
        self.draw_center(350, "ENTER to submit", self.font_small, GRAY)

    def render_scores(self):
        self.draw_center(60, "LEADERBOARD", self.font_big, YELLOW)
        self.draw_center(110, f"< {MODE_LABELS[self.view_mode]} >", self.font, WHITE)
        if self.view_mode not in self._boards:
            self._boards[self.view_mode] = self.session.leaderboard(self.view_mode)
        board = self._boards[self.view_mode]
        if not board:
            self.draw_center(180, "No scores yet. Be the first!", self.font_small, GRAY)
        y = 160
        for i, e in enumerate(board):
            line = f"{i+1:>2}. {e.name:<{NAME_MAX_LEN}} {e.score:>5}  {e.timestamp.split(' ')[0]}"
            self.draw_center(y, line, self.font_small, WHITE)
            y += 26
        self.draw_center(y + 30, "ENTER to play again", self.font_small, GRAY)


def main():
    logging.basicConfig(level=LOG_LEVEL,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    pygame.init()
    Game().run()


if __name__ == "__main__":
    main()
