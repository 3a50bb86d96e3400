"""Level progression — disk counts, unlocking and completion."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from backend.config import GameConfig
from backend.models.highscore import ScoreEntry
from backend.models.player import Player

logger = logging.getLogger(__name__)


def optimal_moves(disk_count: int) -> int:
    """Minimum number of moves to solve *disk_count* disks: ``2**n - 1``."""
    if disk_count < 0:
        raise ValueError(f"Disk count must be >= 0, got {disk_count}.")
    return 2 ** disk_count - 1


def efficiency(disk_count: int, moves: int) -> int:
    """Percentage of optimal play, ``floor(optimal / moves * 100)``, capped at 100."""
    if moves < 1:
        raise ValueError(f"Moves must be positive, got {moves}.")
    return min(100, optimal_moves(disk_count) * 100 // moves)


@dataclass(frozen=True)
class Level:
    number: int
    disk_count: int

    @property
    def optimal_moves(self) -> int:
        return optimal_moves(self.disk_count)


@dataclass(frozen=True)
class LevelSummary:
    """One row of the game-completion table."""

    level: Level
    best: ScoreEntry | None

    @property
    def efficiency(self) -> int | None:
        if self.best is None:
            return None
        return efficiency(self.level.disk_count, self.best.moves)


class LevelManager:
    """Maps level numbers to disk counts and tracks a player's progress.

    Unlocking is strictly sequential: level N+1 opens once level N is in
    the player's completed set.
    """

    def __init__(self, config: GameConfig | None = None) -> None:
        self.config = config or GameConfig()

    @property
    def max_level(self) -> int:
        return self.config.max_level

    # -- mapping --------------------------------------------------------------

    def disk_count_for_level(self, level: int) -> int:
        self._check_range(level)
        return self.config.min_disks + level - 1

    def level(self, number: int) -> Level:
        return Level(number=number, disk_count=self.disk_count_for_level(number))

    def levels(self) -> list[Level]:
        return [self.level(n) for n in range(1, self.max_level + 1)]

    # -- unlocking ------------------------------------------------------------

    def is_unlocked(self, player: Player, level: int) -> bool:
        if not 1 <= level <= self.max_level:
            return False
        return level == 1 or (level - 1) in player.completed_levels

    def select_level(self, player: Player, level: int) -> bool:
        """Make *level* the player's current level if it is unlocked."""
        if not self.is_unlocked(player, level):
            return False
        player.current_level = level
        return True

    def advance(self, player: Player) -> bool:
        """Move to the next level. No-op at the top or if it is still locked."""
        nxt = player.current_level + 1
        if nxt > self.max_level or not self.is_unlocked(player, nxt):
            return False
        player.current_level = nxt
        return True

    def retreat(self, player: Player) -> bool:
        prev = player.current_level - 1
        if prev < 1:
            return False
        player.current_level = prev
        return True

    # -- completion -----------------------------------------------------------

    def mark_completed(self, player: Player, level: int) -> bool:
        """Record *level* as completed. Returns False if it already was."""
        self._check_range(level)
        if level in player.completed_levels:
            return False
        player.completed_levels.add(level)
        if level == player.highest_level and level < self.max_level:
            player.highest_level += 1
        logger.info("%s completed level %d", player.name, level)
        return True

    def all_completed(self, player: Player) -> bool:
        return all(n in player.completed_levels for n in range(1, self.max_level + 1))

    def summary(self, player: Player) -> list[LevelSummary]:
        return [
            LevelSummary(level=lvl, best=player.best_scores.get(lvl.number))
            for lvl in self.levels()
        ]

    # -- helpers --------------------------------------------------------------

    def _check_range(self, level: int) -> None:
        if not 1 <= level <= self.max_level:
            raise ValueError(f"Level must be in 1..{self.max_level}, got {level}.")
