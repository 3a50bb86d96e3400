"""Error kinds raised by the Hanoi core.

None of these are fatal: hosts catch them and turn them into feedback
(a shake, a tooltip) or ignore them.
"""

from __future__ import annotations


class HanoiError(Exception):
    """Base class for all game errors."""


class EmptyTowerError(HanoiError):
    """Raised when taking a disk from a tower that has none."""

    def __init__(self, tower: int) -> None:
        super().__init__(f"Tower {tower} is empty.")
        self.tower = tower


class EmptyHistoryError(HanoiError):
    """Raised by ``undo`` when there is nothing to undo."""

    def __init__(self) -> None:
        super().__init__("No moves to undo.")


class InvalidMoveError(HanoiError):
    """A move that breaks the stacking rules.

    The engine reports rejected moves as results; this is only raised by
    the strict ``MoveValidator.ensure`` helper.
    """

    def __init__(self, reason: str) -> None:
        super().__init__(f"Invalid move: {reason}.")
        self.reason = reason


class LevelCompleteError(HanoiError):
    """Raised when mutating a session whose level is already won."""


class CorruptedPersistedStateError(HanoiError):
    """Saved progress could not be read back."""
