"""Default paths and game configuration.

The level mapping is ``disk_count = min_disks + level - 1``; with the
defaults that gives eight levels of 3..10 disks.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent  # python/
PROJECT_ROOT = ROOT.parent
DATA_DIR = PROJECT_ROOT / "data"
PROGRESS_FILENAME = "progress.json"

DEFAULT_PLAYER = "Player"


@dataclass(frozen=True)
class GameConfig:
    min_disks: int = 3
    max_level: int = 8
    leaderboard_size: int = 10

    def __post_init__(self) -> None:
        if self.min_disks < 1:
            raise ValueError(f"min_disks must be >= 1, got {self.min_disks}.")
        if self.max_level < 1:
            raise ValueError(f"max_level must be >= 1, got {self.max_level}.")
        if self.leaderboard_size < 1:
            raise ValueError(
                f"leaderboard_size must be >= 1, got {self.leaderboard_size}."
            )

    @property
    def max_disks(self) -> int:
        return self.min_disks + self.max_level - 1
