from __future__ import annotations
import itertools
import random
from dataclasses import dataclass, replace
from typing import Iterator, List, Optional, Tuple

from . import catalog
from .config import BOMB_RADIUS, FIELD_H, FIELD_W
from .difficulty import Tier
from .spawn import plan_spawn

# process-wide so ids stay unique across fields and sessions
_bomb_ids = itertools.count()


@dataclass
class Bomb:
    id: int
    char: str
    x: float
    y: float = 0.0


class BombField:
    """Live bombs in spawn order (oldest first)."""

    def __init__(self, width: float = FIELD_W, height: float = FIELD_H,
                 bomb_radius: float = BOMB_RADIUS,
                 rng: Optional[random.Random] = None):
        self.width = width
        self.height = height
        self.bomb_radius = bomb_radius
        self.rng = rng or random.Random()
        self._bombs: List[Bomb] = []

    def __len__(self) -> int:
        return len(self._bombs)

    def __iter__(self) -> Iterator[Bomb]:
        return iter(self._bombs)

    def snapshot(self) -> Tuple[Bomb, ...]:
        """Copies for the renderer; changing them does not touch the field."""
        return tuple(replace(b) for b in self._bombs)

    def clear(self) -> None:
        self._bombs.clear()

    def add(self, bomb: Bomb) -> None:
        self._bombs.append(bomb)

    def advance(self, dy: float) -> None:
        for b in self._bombs:
            b.y += dy

    def resolve_hit(self, pressed_key: str, mode: str) -> Optional[Bomb]:
        """Remove and return the oldest bomb cleared by `pressed_key`."""
        key = pressed_key.upper()
        for i, b in enumerate(self._bombs):
            if catalog.key_for(mode, b.char) == key:
                return self._bombs.pop(i)
        return None

    def collect_floor_breaches(self, floor_y: float) -> List[Bomb]:
        limit = floor_y - self.bomb_radius
        breached = [b for b in self._bombs if b.y >= limit]
        if breached:
            self._bombs = [b for b in self._bombs if b.y < limit]
        return breached

    def spawn(self, mode: str, tier: Tier) -> List[Bomb]:
        chars = catalog.chars_for(mode)
        xs = plan_spawn(((b.x, b.y) for b in self._bombs), tier.bombs_per_wave,
                        self.width, self.bomb_radius, self.rng)
        wave = [Bomb(next(_bomb_ids), self.rng.choice(chars), x, 0.0) for x in xs]
        self._bombs.extend(wave)
        return wave
