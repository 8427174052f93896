from spread_pickem import db  # noqa: F401 - imported for model imports

from .game import Game
from .leaderboard import LeaderboardEntry
from .participant import Participant
from .pick import Pick

__all__ = [
    "Participant",
    "Game",
    "Pick",
    "LeaderboardEntry",
]
