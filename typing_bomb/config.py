"""Tuning constants and paths for Typing Bomb Squad."""

from __future__ import annotations
import os
from pathlib import Path

# ===== Play field =====
FIELD_W, FIELD_H = 400, 500
BOMB_RADIUS = 20
FALL_STEP = 10            # units per fall tick
FALL_TICKS_PER_INTERVAL = 10
FLOOR_CHECK_MS = 100
POPUP_MS = 1000

# ===== Rules =====
START_LIVES = 10
CLEARS_PER_LEVEL = 50
SPAWN_SPACING = 2.5       # x BOMB_RADIUS
SPAWN_MAX_ATTEMPTS = 50

# ===== Scores =====
LEADERBOARD_SIZE = 10
NAME_MAX_LEN = 15
DEFAULT_NAME = "Anonymous"

# ===== Window =====
FPS = 60
HUD_H = 70
KEYBOARD_H = 170
WIN_W = FIELD_W + 40
WIN_H = HUD_H + FIELD_H + KEYBOARD_H

LOG_LEVEL = os.environ.get("TYPING_BOMB_LOG_LEVEL", "INFO").upper()


def save_path() -> Path:
    override = os.environ.get("TYPING_BOMB_SAVE")
    if override:
        return Path(override)
    return Path(os.environ.get("LOCALAPPDATA", ".")) / "TypingBomb" / "leaderboard.json"
