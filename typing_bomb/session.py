"""One player's run: mode choice, play, game over, score entry.

Phases follow SELECT_MODE -> PLAYING -> ENDED -> (restart) -> SELECT_MODE.
While PLAYING the session owns three repeating timers (fall, spawn, floor
check) and a key listener; all of them are released the moment it leaves
PLAYING. Score popups own their own one-shot timers.
"""

from __future__ import annotations
import itertools
import logging
import random
from dataclasses import dataclass, field as dc_field
from typing import Callable, Dict, List, Optional, Sequence, Set

from . import catalog
from .audio import GAMEOVER, HIT, MISS
from .config import (CLEARS_PER_LEVEL, FALL_STEP, FALL_TICKS_PER_INTERVAL,
                     FLOOR_CHECK_MS, POPUP_MS, START_LIVES)
from .difficulty import TIERS, DifficultyTrack, Tier
from .errors import ConfigError, SessionError
from .field import Bomb, BombField
from .leaderboard import LeaderboardEntry, LeaderboardStore, make_entry
from .timers import Scheduler, Timer

log = logging.getLogger(__name__)

SELECT_MODE = "SELECT_MODE"
PLAYING = "PLAYING"
ENDED = "ENDED"


@dataclass
class Popup:
    id: int
    x: float
    y: float
    text: str
    expires_at_ms: float
    timer: Optional[Timer] = dc_field(default=None, repr=False, compare=False)


class GameSession:
    def __init__(self, store: Optional[LeaderboardStore] = None,
                 cues: Optional[Callable[[str], None]] = None,
                 rng: Optional[random.Random] = None,
                 tiers: Sequence[Tier] = TIERS,
                 clears_per_level: int = CLEARS_PER_LEVEL,
                 clock: Optional[Scheduler] = None):
        self.store = store if store is not None else LeaderboardStore()
        self.cues = cues
        self.rng = rng or random.Random()
        self.clock = clock or Scheduler()
        self.track = DifficultyTrack(tiers)
        self.clears_per_level = clears_per_level
        self.field = BombField(rng=self.rng)

        self.phase = SELECT_MODE
        self.mode: Optional[str] = None
        self.score = 0
        self.lives = START_LIVES
        self.cleared = 0
        self.submitted = False
        self.board: List[LeaderboardEntry] = []

        self.popups: List[Popup] = []
        self._popup_ids = itertools.count()

        # brief on-screen message ("LEVEL UP ...")
        self.message: Optional[str] = None
        self.message_t = 0.0

        self.key_listener: Optional[Callable[[str], Optional[Bomb]]] = None
        self._timers: Dict[str, Timer] = {}

    # ----- read-only views -----
    @property
    def tier_index(self) -> int:
        return self.track.index

    @property
    def tier(self) -> Tier:
        return self.track.current

    @property
    def to_next_level(self) -> int:
        return self.track.to_next_level(self.cleared, self.clears_per_level)

    @property
    def running_timers(self) -> List[str]:
        return [name for name, t in self._timers.items() if t.active]

    def active_keys(self) -> Set[str]:
        if self.phase != PLAYING:
            return set()
        return catalog.active_keys(self.mode, (b.char for b in self.field))

    def leaderboard(self, mode: str) -> List[LeaderboardEntry]:
        return self.store.load(catalog.check_mode(mode))

    # ----- phase changes -----
    def start(self, mode: str) -> None:
        if self.phase == PLAYING:
            raise SessionError("a game is already running")
        if self.phase == ENDED:
            raise SessionError("restart() before starting a new game")
        if not catalog.chars_for(mode):
            raise ConfigError(f"no glyphs for mode {mode!r}")

        self.mode = mode
        self.score = 0
        self.lives = START_LIVES
        self.cleared = 0
        self.submitted = False
        self.board = []
        self.message = None
        self.track.reset()
        self.field.clear()
        self.dismiss_popups()

        self.phase = PLAYING
        self._arm_pace()
        self._timers["floor"] = self.clock.every(FLOOR_CHECK_MS, self._floor_check, "floor")
        self.key_listener = self._on_key
        log.info("[SESSION] started %s mode at %s", mode, self.tier.name)

    def _end(self) -> None:
        self._disarm()
        self.field.clear()
        self.phase = ENDED
        log.info("[SESSION] game over: score=%d cleared=%d tier=%s",
                 self.score, self.cleared, self.tier.name)
        self._cue(GAMEOVER)

    def submit_score(self, name: Optional[str] = None) -> List[LeaderboardEntry]:
        if self.phase != ENDED:
            raise SessionError("scores can only be submitted after a game ends")
        if self.submitted:
            raise SessionError("score already submitted")
        entry = make_entry(name, self.score)
        self.board = self.store.submit(self.mode, entry)
        self.submitted = True
        return self.board

    def restart(self) -> None:
        if self.phase != ENDED:
            raise SessionError("restart is only possible after a game ends")
        self.phase = SELECT_MODE
        self.mode = None
        self.track.reset()

    def close(self) -> None:
        """Release every timer, including popups (window closed).

        A running game is abandoned without a score; the session is back at
        mode selection and can start again.
        """
        self._disarm()
        self.clock.cancel_all()
        self.popups.clear()
        self.field.clear()
        if self.phase == PLAYING:
            self.phase = SELECT_MODE
            self.mode = None
            self.track.reset()

    # ----- timers -----
    def _arm_pace(self) -> None:
        for name in ("fall", "spawn"):
            t = self._timers.pop(name, None)
            if t is not None:
                t.cancel()
        tier = self.tier
        self._timers["fall"] = self.clock.every(
            tier.fall_interval_ms / FALL_TICKS_PER_INTERVAL, self._fall_tick, "fall")
        self._timers["spawn"] = self.clock.every(tier.spawn_interval_ms, self._spawn_tick, "spawn")

    def _disarm(self) -> None:
        for t in self._timers.values():
            t.cancel()
        self._timers.clear()
        self.key_listener = None

    def update(self, elapsed_ms: float) -> None:
        self.clock.advance(elapsed_ms)

    def _fall_tick(self) -> None:
        self.field.advance(FALL_STEP)

    def _spawn_tick(self) -> None:
        self.field.spawn(self.mode, self.tier)

    def _floor_check(self) -> None:
        breached = self.field.collect_floor_breaches(self.field.height)
        if not breached:
            return
        self.lives = max(0, self.lives - len(breached))
        log.debug("[SESSION] %d bomb(s) hit the floor, lives=%d", len(breached), self.lives)
        self._cue(MISS)
        self._check_game_over()

    def _check_game_over(self) -> None:
        if self.phase == PLAYING and self.lives <= 0:
            self._end()

    # ----- input -----
    def press(self, key: str) -> Optional[Bomb]:
        """Deliver one normalized key symbol; ignored unless a game is running."""
        if self.key_listener is None:
            return None
        return self.key_listener(key)

    def _on_key(self, key: str) -> Optional[Bomb]:
        bomb = self.field.resolve_hit(key, self.mode)
        if bomb is None:
            return None
        self.score += 1
        self.cleared += 1
        self._cue(HIT)
        self._add_popup(bomb.x, bomb.y, "+1")

        before = self.track.index
        if self.track.advance_if_eligible(self.cleared, self.clears_per_level) != before:
            self._arm_pace()
            self.message = f"LEVEL UP: {self.tier.name}"
            self.message_t = self.clock.now
            log.info("[SESSION] level completed, now %s", self.tier.name)
        return bomb

    # ----- popups -----
    def _add_popup(self, x: float, y: float, text: str) -> Popup:
        p = Popup(next(self._popup_ids), x, y, text, self.clock.now + POPUP_MS)
        p.timer = self.clock.after(POPUP_MS, lambda: self._drop_popup(p), "popup")
        self.popups.append(p)
        return p

    def _drop_popup(self, p: Popup) -> None:
        if p in self.popups:
            self.popups.remove(p)
        if p.timer is not None:
            p.timer.cancel()

    def dismiss_popups(self) -> None:
        for p in list(self.popups):
            self._drop_popup(p)

    # ----- collaborators -----
    def _cue(self, name: str) -> None:
        if self.cues is None:
            return
        try:
            self.cues(name)
        except Exception:
            log.exception("[AUDIO] cue %s failed", name)
