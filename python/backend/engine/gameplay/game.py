"""Core gameplay logic — applies moves, keeps undo history, detects the win."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from backend.engine import events
from backend.engine.events import GameEvent, Listener
from backend.engine.gamelevels import LevelManager, efficiency, optimal_moves
from backend.engine.gamerules import MoveRejection, MoveValidator
from backend.engine.gamestate import GameState, Phase
from backend.models.errors import EmptyTowerError, LevelCompleteError
from backend.models.towers import TOWER_COUNT, Move, Towers

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MoveResult:
    accepted: bool
    reason: MoveRejection | None = None
    move: Move | None = None


@dataclass(frozen=True)
class LevelStats:
    level: int | None
    disk_count: int
    moves: int
    elapsed_time: float
    optimal_moves: int
    efficiency: int | None


class GamePlay:
    """Orchestrates a single level session.

    Phases run Idle -> InProgress (first accepted move) -> Won (all disks
    on tower 2). Once won, nothing changes until ``init_level`` or
    ``reset_level``. The host owns the clock and feeds it in through
    ``tick``.
    """

    def __init__(self, levels: LevelManager, level: int = 1) -> None:
        self.levels = levels
        self._listeners: list[Listener] = []
        self.init_level(level)

    @classmethod
    def from_towers(
        cls, towers: Towers, levels: LevelManager | None = None
    ) -> "GamePlay":
        """Create a session from an arbitrary position (study mode, tests).

        ``reset_level`` returns to this position.
        """
        obj = object.__new__(cls)
        obj.levels = levels or LevelManager()
        obj._listeners = []
        obj.level = None
        obj._start = towers.copy()
        obj.state = GameState(towers.copy())
        return obj

    # -- level lifecycle ------------------------------------------------------

    def init_level(self, level: int) -> None:
        disk_count = self.levels.disk_count_for_level(level)
        self.level: int | None = level
        self._start = Towers.stacked(disk_count)
        self.state = GameState(self._start.copy(), disk_count)
        logger.debug("Level %d started with %d disks", level, disk_count)
        self._emit(events.level_started(level, disk_count))

    def reset_level(self) -> None:
        """Discard the current attempt, history included."""
        if self.level is not None:
            self.init_level(self.level)
            return
        self.state = GameState(self._start.copy())
        self._emit(events.level_started(None, self.state.disk_count))

    # -- listeners ------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register *listener* for engine events. Returns an unsubscribe callable."""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def _emit(self, event: GameEvent) -> None:
        for listener in list(self._listeners):
            listener(event)

    # -- host calls -----------------------------------------------------------

    def select_disk(self, tower: int) -> int | None:
        """Select the top disk of *tower*.

        Selecting the already-selected tower deselects it. Returns the
        selected disk, or None if nothing is selected afterwards.
        Raises ``EmptyTowerError`` (state unchanged) for an empty tower.
        """
        if self.is_won:
            return None
        if not 0 <= tower < TOWER_COUNT:
            raise ValueError(f"No tower {tower}.")

        if self.state.selected_tower == tower:
            self.state.selected_tower = None
            self._emit(events.disk_deselected(tower))
            return None

        disk = self.state.towers.top_disk(tower)
        if disk is None:
            raise EmptyTowerError(tower)
        self.state.selected_tower = tower
        self._emit(events.disk_selected(tower, disk))
        return disk

    def attempt_move(self, target: int) -> MoveResult:
        """Move the selected disk onto *target*. The selection is always cleared."""
        source = self.state.selected_tower
        self.state.selected_tower = None
        return self._apply(source, target)

    def move(self, source: int, target: int) -> MoveResult:
        """Move the top disk of *source* onto *target* in one call."""
        self.state.selected_tower = None
        return self._apply(source, target)

    def undo(self) -> Move:
        """Take back the last move.

        Raises ``EmptyHistoryError`` when there is nothing to undo and
        ``LevelCompleteError`` once the level is won; state is unchanged
        in both cases.
        """
        if self.is_won:
            raise LevelCompleteError("Level is complete; start a new level first.")
        move = self.state.take_last()

        # Replaying history backwards needs no validation.
        disk = self.state.towers.pop(move.target)
        self.state.towers.push(move.source, disk)
        self.state.selected_tower = None

        logger.debug("Undid disk %d %d->%d", move.disk, move.source, move.target)
        self._emit(events.move_undone(move, self.state.moves))
        return move

    def tick(self, elapsed: float) -> None:
        self.state.tick(elapsed)

    # -- queries --------------------------------------------------------------

    @property
    def towers(self) -> Towers:
        return self.state.towers.copy()

    @property
    def history(self) -> list[Move]:
        return list(self.state.history)

    @property
    def moves(self) -> int:
        return self.state.moves

    @property
    def elapsed_time(self) -> float:
        return self.state.elapsed_time

    @property
    def phase(self) -> Phase:
        return self.state.phase

    @property
    def is_won(self) -> bool:
        return self.state.phase is Phase.WON

    @property
    def selected_tower(self) -> int | None:
        return self.state.selected_tower

    @property
    def disk_count(self) -> int:
        return self.state.disk_count

    @property
    def optimal_moves(self) -> int:
        return optimal_moves(self.state.disk_count)

    @property
    def efficiency(self) -> int | None:
        if self.state.moves == 0:
            return None
        return efficiency(self.state.disk_count, self.state.moves)

    def stats(self) -> LevelStats:
        return LevelStats(
            level=self.level,
            disk_count=self.disk_count,
            moves=self.moves,
            elapsed_time=self.elapsed_time,
            optimal_moves=self.optimal_moves,
            efficiency=self.efficiency,
        )

    # -- helpers --------------------------------------------------------------

    def _apply(self, source: int | None, target: int) -> MoveResult:
        if self.is_won:
            return self._reject(MoveRejection.LEVEL_COMPLETE, source, target)
        if source is None:
            return self._reject(MoveRejection.NO_SELECTION, source, target)

        towers = self.state.towers
        disk = towers.top_disk(source) if 0 <= source < TOWER_COUNT else None
        reason = MoveValidator.check(disk or 0, source, target, towers)
        if reason is not None:
            return self._reject(reason, source, target)

        assert disk is not None
        towers.pop(source)
        towers.push(target, disk)
        move = Move(source=source, target=target, disk=disk)
        self.state.record(move)
        logger.debug("Moved disk %d %d->%d (move %d)", disk, source, target, self.state.moves)

        if self.state.phase is Phase.IDLE:
            self.state.phase = Phase.IN_PROGRESS
            self._emit(events.timer_started())
        self._emit(events.disk_moved(move, self.state.moves))

        if self.state.is_solved:
            self.state.phase = Phase.WON
            logger.info(
                "Level %s won in %d moves (optimal %d)",
                self.level, self.state.moves, self.optimal_moves,
            )
            self._emit(events.level_won(self.stats()))

        return MoveResult(accepted=True, move=move)

    def _reject(
        self, reason: MoveRejection, source: int | None, target: int
    ) -> MoveResult:
        logger.debug("Rejected move %s->%s: %s", source, target, reason.value)
        self._emit(events.invalid_move(reason.value, source, target))
        return MoveResult(accepted=False, reason=reason)
