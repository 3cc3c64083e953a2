"""Top-10 score table per mode, persisted as JSON."""

from __future__ import annotations
import json
import logging
import time
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from .config import DEFAULT_NAME, LEADERBOARD_SIZE, NAME_MAX_LEN, save_path

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class LeaderboardEntry:
    name: str
    score: int
    timestamp: str


def clean_name(name: Optional[str]) -> str:
    name = (name or "").strip()[:NAME_MAX_LEN].strip()
    return name or DEFAULT_NAME


def make_entry(name: Optional[str], score: int, now: Optional[float] = None) -> LeaderboardEntry:
    stamp = time.strftime("%Y-%m-%d %H:%M:%S", time.localtime(now))
    return LeaderboardEntry(clean_name(name), int(score), stamp)


def rank(entries: Sequence[LeaderboardEntry], new: LeaderboardEntry,
         size: int = LEADERBOARD_SIZE) -> List[LeaderboardEntry]:
    """Append `new`, sort by score descending (ties keep insertion order), keep `size`."""
    board = list(entries)
    board.append(new)
    board.sort(key=lambda e: e.score, reverse=True)
    return board[:size]


def _key(mode: str) -> str:
    return f"leaderboard_{mode}"


class LeaderboardStore:
    """Key-value JSON file: {"leaderboard_en": [...], "leaderboard_zh": [...]}.

    Missing or damaged data reads as an empty board; failed writes are logged.
    Neither ever raises into the game.
    """

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path is not None else save_path()

    def _read_all(self) -> Dict:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            log.warning("[SCORES] could not read %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            log.warning("[SCORES] %s is not a JSON object, ignoring", self.path)
            return {}
        return data

    def load(self, mode: str) -> List[LeaderboardEntry]:
        raw = self._read_all().get(_key(mode), [])
        try:
            entries = [LeaderboardEntry(str(e["name"]), int(e["score"]), str(e["timestamp"]))
                       for e in raw]
        except (TypeError, KeyError, ValueError) as e:
            log.warning("[SCORES] corrupt %s board, starting empty: %s", mode, e)
            return []
        return entries[:LEADERBOARD_SIZE]

    def save(self, mode: str, entries: Sequence[LeaderboardEntry]) -> None:
        data = self._read_all()
        data[_key(mode)] = [asdict(e) for e in entries]
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
        except OSError as e:
            log.error("[SCORES] could not write %s: %s", self.path, e)

    def submit(self, mode: str, entry: LeaderboardEntry) -> List[LeaderboardEntry]:
        board = rank(self.load(mode), entry)
        self.save(mode, board)
        log.info("[SCORES] %s scored %d in %s mode", entry.name, entry.score, mode)
        return board
