from __future__ import annotations
from dataclasses import dataclass
from typing import Sequence, Tuple

from .errors import ConfigError


@dataclass(frozen=True)
class Tier:
    name: str
    fall_interval_ms: int
    spawn_interval_ms: int
    bombs_per_wave: int


TIERS: Tuple[Tier, ...] = (
    Tier("Very Easy", 2200, 2200, 1),
    Tier("Easy", 1800, 1800, 1),
    Tier("Normal", 1500, 1500, 2),
    Tier("Hard", 1200, 1200, 2),
    Tier("Very Hard", 1000, 1000, 3),
)


class DifficultyTrack:
    """Tier index that steps up once per threshold multiple of clears."""

    def __init__(self, tiers: Sequence[Tier] = TIERS):
        if not tiers:
            raise ConfigError("difficulty track needs at least one tier")
        for t in tiers:
            if t.fall_interval_ms <= 0 or t.spawn_interval_ms <= 0 or t.bombs_per_wave < 0:
                raise ConfigError(f"invalid tier {t!r}")
        self.tiers: Tuple[Tier, ...] = tuple(tiers)
        self.index = 0
        self._last_fired = 0

    @property
    def current(self) -> Tier:
        return self.tiers[self.index]

    @property
    def at_top(self) -> bool:
        return self.index >= len(self.tiers) - 1

    def reset(self) -> None:
        self.index = 0
        self._last_fired = 0

    def advance_if_eligible(self, cleared_count: int, threshold: int) -> int:
        if threshold <= 0:
            raise ConfigError("threshold must be positive")
        if cleared_count > 0 and cleared_count % threshold == 0 and cleared_count > self._last_fired:
            self._last_fired = cleared_count
            if not self.at_top:
                self.index += 1
        return self.index

    @staticmethod
    def to_next_level(cleared_count: int, threshold: int) -> int:
        return threshold - (cleared_count % threshold)
