"""Playable glyphs per mode and the physical key that clears each one.

Two modes:
  - "en": Latin letters and digits; the key is the glyph itself, uppercased.
  - "zh": Zhuyin (bopomofo) symbols; the key follows the standard Zhuyin
    keyboard layout, e.g. "ㄅ" is cleared with "1".
"""

from __future__ import annotations
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Set

from .errors import ConfigError

EN = "en"
ZH = "zh"
MODES = (EN, ZH)

CHAR_SETS: Mapping[str, str] = MappingProxyType({
    EN: "ABCDEFGHIJKLMNOPQRSTUVWXYZ1234567890",
    ZH: "ㄅㄆㄇㄈㄉㄊㄋㄌㄍㄎㄏㄐㄑㄒㄓㄔㄕㄖㄗㄘㄙㄧㄨㄩㄚㄛㄜㄝㄞㄟㄠㄡㄢㄣㄤㄥㄦ",
})

ZHUYIN_KEYS: Mapping[str, str] = MappingProxyType({
    "ㄅ": "1", "ㄆ": "Q", "ㄇ": "A", "ㄈ": "Z", "ㄉ": "2",
    "ㄊ": "W", "ㄋ": "S", "ㄌ": "X", "ㄍ": "E", "ㄎ": "D",
    "ㄏ": "C", "ㄐ": "R", "ㄑ": "F", "ㄒ": "V", "ㄓ": "5",
    "ㄔ": "T", "ㄕ": "G", "ㄖ": "B", "ㄗ": "Y", "ㄘ": "H",
    "ㄙ": "N", "ㄧ": "U", "ㄨ": "J", "ㄩ": "M", "ㄚ": "8",
    "ㄛ": "I", "ㄜ": "K", "ㄝ": ",", "ㄞ": "9", "ㄟ": "O",
    "ㄠ": "L", "ㄡ": ".", "ㄢ": "0", "ㄣ": "P", "ㄤ": ";",
    "ㄥ": "/", "ㄦ": "-",
    # tones
    "ˇ": "3", "ˋ": "4", "ˊ": "6", "˙": "7",
})

_KEY_TO_ZHUYIN: Dict[str, str] = {k: g for g, k in ZHUYIN_KEYS.items()}


def validate_catalogs() -> None:
    """Fail fast if any mode has no glyphs or a zh glyph has no key."""
    for mode in MODES:
        if not CHAR_SETS.get(mode):
            raise ConfigError(f"empty character catalog for mode {mode!r}")
    missing = [g for g in CHAR_SETS[ZH] if g not in ZHUYIN_KEYS]
    if missing:
        raise ConfigError(f"zhuyin glyphs without a key: {''.join(missing)}")


def check_mode(mode: str) -> str:
    if mode not in MODES:
        raise ConfigError(f"unknown mode {mode!r} (expected one of {', '.join(MODES)})")
    return mode


def chars_for(mode: str) -> str:
    return CHAR_SETS[check_mode(mode)]


def key_for(mode: str, glyph: str) -> Optional[str]:
    """Key symbol that clears `glyph`, or None when nothing can clear it."""
    if check_mode(mode) == EN:
        return glyph.upper()
    key = ZHUYIN_KEYS.get(glyph)
    return key.upper() if key is not None else None


def glyph_for_key(mode: str, key: str) -> Optional[str]:
    if check_mode(mode) == EN:
        return key.upper()
    return _KEY_TO_ZHUYIN.get(key.upper())


def active_keys(mode: str, glyphs: Iterable[str]) -> Set[str]:
    """Keys that would clear at least one of `glyphs` right now."""
    keys = set()
    for g in glyphs:
        k = key_for(mode, g)
        if k is not None:
            keys.add(k)
    return keys


validate_catalogs()
