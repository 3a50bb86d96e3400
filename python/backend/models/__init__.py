from backend.models.errors import (
    CorruptedPersistedStateError,
    EmptyHistoryError,
    EmptyTowerError,
    HanoiError,
    InvalidMoveError,
    LevelCompleteError,
)
from backend.models.highscore import ScoreEntry, ScoreLedger
from backend.models.player import Player
from backend.models.towers import Move, Towers

__all__ = [
    "CorruptedPersistedStateError",
    "EmptyHistoryError",
    "EmptyTowerError",
    "HanoiError",
    "InvalidMoveError",
    "LevelCompleteError",
    "Move",
    "Player",
    "ScoreEntry",
    "ScoreLedger",
    "Towers",
]
