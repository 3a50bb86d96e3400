"""Tracks the mutable state of a level in progress."""

from __future__ import annotations

from enum import StrEnum

from backend.models.errors import EmptyHistoryError
from backend.models.towers import TERMINAL_TOWER, Move, Towers


class Phase(StrEnum):
    IDLE = "idle"
    IN_PROGRESS = "in_progress"
    WON = "won"


class GameState:
    """Holds the towers, move counter, history, and elapsed time.

    Elapsed time is pushed in by the host; nothing here reads a clock.
    """

    def __init__(self, towers: Towers, disk_count: int | None = None) -> None:
        self.towers = towers
        self.disk_count: int = towers.disk_count if disk_count is None else disk_count
        self.moves: int = 0
        self.history: list[Move] = []
        self.phase = Phase.IDLE
        self.selected_tower: int | None = None
        self._elapsed: float = 0.0

    # -- time tracking --------------------------------------------------------

    @property
    def elapsed_time(self) -> float:
        return self._elapsed

    def tick(self, elapsed: float) -> None:
        if elapsed < 0:
            raise ValueError(f"Elapsed time must be non-negative, got {elapsed}.")
        if self.phase is Phase.IN_PROGRESS:
            self._elapsed = elapsed

    # -- moves ----------------------------------------------------------------

    def record(self, move: Move) -> None:
        self.history.append(move)
        self.moves += 1

    def take_last(self) -> Move:
        if not self.history:
            raise EmptyHistoryError()
        self.moves -= 1
        return self.history.pop()

    @property
    def is_solved(self) -> bool:
        return self.towers.height(TERMINAL_TOWER) == self.disk_count
