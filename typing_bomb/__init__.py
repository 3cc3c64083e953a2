"""Typing Bomb Squad: a falling-bomb typing game for Latin and Zhuyin keyboards."""

from .catalog import EN, MODES, ZH, chars_for, key_for
from .difficulty import TIERS, DifficultyTrack, Tier
from .errors import ConfigError, SessionError
from .field import Bomb, BombField
from .leaderboard import LeaderboardEntry, LeaderboardStore
from .session import ENDED, PLAYING, SELECT_MODE, GameSession
from .spawn import plan_spawn
from .timers import Scheduler, Timer

__version__ = "1.0.0"
