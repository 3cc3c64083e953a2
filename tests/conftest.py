import os
import random
import sys

import pytest

# Make the repo root importable without installing the package
CURRENT_DIR = os.path.dirname(__file__)
REPO_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from typing_bomb.leaderboard import LeaderboardStore
from typing_bomb.session import GameSession


@pytest.fixture()
def rng():
    return random.Random(1234)


@pytest.fixture()
def store(tmp_path):
    return LeaderboardStore(tmp_path / "scores.json")


@pytest.fixture()
def cues():
    return []


@pytest.fixture()
def session(store, cues, rng):
    s = GameSession(store=store, cues=cues.append, rng=rng)
    yield s
    s.close()
