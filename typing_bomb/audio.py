"""Sound cues (hit / miss / gameover). Fire-and-forget: problems are logged, never raised."""

from __future__ import annotations
import logging
from pathlib import Path
from typing import Dict, Optional

import pygame

log = logging.getLogger(__name__)

HIT, MISS, GAMEOVER = "hit", "miss", "gameover"

SOUND_FILES = {
    HIT: "hit.ogg",
    MISS: "miss.ogg",
    GAMEOVER: "gameover.ogg",
}


def _find_asset_file(filename: str) -> Optional[Path]:
    """Look for an asset next to the package or under ./sounds, ./assets."""
    here = Path(__file__).resolve().parent
    candidates = [
        here / filename,
        here / "sounds" / filename,
        here / "assets" / filename,
        Path.cwd() / filename,
        Path.cwd() / "sounds" / filename,
        Path.cwd() / "assets" / filename,
    ]
    for c in candidates:
        if c.exists():
            return c
    return None


def load_sounds() -> Dict[str, "pygame.mixer.Sound"]:
    sounds: Dict[str, pygame.mixer.Sound] = {}
    try:
        if not pygame.mixer.get_init():
            pygame.mixer.init()
    except pygame.error as e:
        log.warning("[AUDIO] mixer unavailable, playing silently: %s", e)
        return sounds
    for cue, fn in SOUND_FILES.items():
        p = _find_asset_file(fn)
        if p is None:
            log.info("[AUDIO] %s not found, cue %r will be silent", fn, cue)
            continue
        try:
            sounds[cue] = pygame.mixer.Sound(str(p))
        except pygame.error as e:
            log.warning("[AUDIO] could not load %s: %s", p, e)
    return sounds


class AudioCues:
    def __init__(self, sounds: Optional[Dict[str, "pygame.mixer.Sound"]] = None):
        self.sounds = sounds if sounds is not None else {}

    @classmethod
    def from_assets(cls) -> "AudioCues":
        return cls(load_sounds())

    def __call__(self, cue: str) -> None:
        self.play(cue)

    def play(self, cue: str) -> None:
        sound = self.sounds.get(cue)
        if sound is None:
            log.debug("[AUDIO] sound %s not loaded", cue)
            return
        try:
            sound.stop()
            sound.play()
        except pygame.error as e:
            log.error("[AUDIO] error playing %s: %s", cue, e)
