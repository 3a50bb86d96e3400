"""Stacking rules — decides whether a proposed disk move is legal."""

from __future__ import annotations

from enum import StrEnum

from backend.models.errors import InvalidMoveError
from backend.models.towers import TOWER_COUNT, Towers


class MoveRejection(StrEnum):
    SAME_TOWER = "same_tower"
    INVALID_TOWER = "invalid_tower"
    EMPTY_SOURCE = "empty_source"
    NOT_TOP_DISK = "not_top_disk"
    LARGER_ON_SMALLER = "larger_on_smaller"
    # Reported by the engine rather than the rules.
    NO_SELECTION = "no_selection"
    LEVEL_COMPLETE = "level_complete"


class MoveValidator:
    """Stateless validator — all methods are static and side-effect free."""

    @staticmethod
    def check(
        disk: int, source: int, target: int, towers: Towers
    ) -> MoveRejection | None:
        """Return why moving *disk* from *source* to *target* is illegal.

        Returns None when the move is legal.
        """
        if not (0 <= source < TOWER_COUNT and 0 <= target < TOWER_COUNT):
            return MoveRejection.INVALID_TOWER
        if source == target:
            return MoveRejection.SAME_TOWER

        top = towers.top_disk(source)
        if top is None:
            return MoveRejection.EMPTY_SOURCE
        if disk != top:
            return MoveRejection.NOT_TOP_DISK

        target_top = towers.top_disk(target)
        if target_top is None:
            return None
        if disk < target_top:
            return None
        return MoveRejection.LARGER_ON_SMALLER

    @staticmethod
    def is_valid_move(disk: int, source: int, target: int, towers: Towers) -> bool:
        return MoveValidator.check(disk, source, target, towers) is None

    @staticmethod
    def ensure(disk: int, source: int, target: int, towers: Towers) -> None:
        """Like ``check`` but raises ``InvalidMoveError`` on a bad move."""
        reason = MoveValidator.check(disk, source, target, towers)
        if reason is not None:
            raise InvalidMoveError(reason.value)

    @staticmethod
    def legal_moves(towers: Towers) -> list[tuple[int, int]]:
        """Every (source, target) pair whose top disk may move."""
        moves: list[tuple[int, int]] = []
        for source in range(TOWER_COUNT):
            disk = towers.top_disk(source)
            if disk is None:
                continue
            for target in range(TOWER_COUNT):
                if MoveValidator.is_valid_move(disk, source, target, towers):
                    moves.append((source, target))
        return moves
