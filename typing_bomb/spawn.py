from __future__ import annotations
import random
from typing import Iterable, List, Tuple

from .config import SPAWN_MAX_ATTEMPTS, SPAWN_SPACING


def dist2(a: Tuple[float, float], b: Tuple[float, float]) -> float:
    dx = a[0]-b[0]; dy = a[1]-b[1]
    return dx*dx + dy*dy


def plan_spawn(existing: Iterable[Tuple[float, float]], count: int, field_width: float,
               bomb_radius: float, rng: random.Random,
               max_attempts: int = SPAWN_MAX_ATTEMPTS) -> List[float]:
    """Pick x positions (at y=0) for up to `count` new bombs.

    `existing` are (x, y) centres of live bombs. A candidate closer than
    SPAWN_SPACING * bomb_radius to a live bomb or an earlier pick is redrawn;
    after `max_attempts` draws that bomb is left out, so the result may be
    shorter than `count`.
    """
    taken = list(existing)
    min_d2 = (bomb_radius * SPAWN_SPACING) ** 2
    lo, hi = bomb_radius, field_width - bomb_radius
    picked: List[float] = []
    for _ in range(count):
        for _attempt in range(max_attempts):
            x = rng.uniform(lo, hi)
            if all(dist2((x, 0.0), p) >= min_d2 for p in taken):
                picked.append(x)
                taken.append((x, 0.0))
                break
    return picked
