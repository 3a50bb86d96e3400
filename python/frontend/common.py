"""Bits shared by the frontends — the host clock and user-facing text."""

from __future__ import annotations

import time

from backend.engine.gamerules import MoveRejection

REJECTION_TEXT: dict[MoveRejection, str] = {
    MoveRejection.SAME_TOWER: "Pick a different tower.",
    MoveRejection.INVALID_TOWER: "There is no such tower.",
    MoveRejection.EMPTY_SOURCE: "That tower is empty.",
    MoveRejection.NOT_TOP_DISK: "Only the top disk can move.",
    MoveRejection.LARGER_ON_SMALLER: "A larger disk can't go on a smaller one.",
    MoveRejection.NO_SELECTION: "Select a disk first.",
    MoveRejection.LEVEL_COMPLETE: "Level complete! Start a new one.",
}


def format_time(seconds: float) -> str:
    m, s = divmod(int(seconds), 60)
    return f"{m:02d}:{s:02d}"


class Stopwatch:
    """Pausable wall-clock timer that the host pushes into ``GamePlay.tick``.

    Starts stopped at zero.
    """

    def __init__(self) -> None:
        self._start_time: float = 0.0
        self._elapsed_banked: float = 0.0
        self._running: bool = False

    @property
    def running(self) -> bool:
        return self._running

    @property
    def elapsed(self) -> float:
        if self._running:
            return self._elapsed_banked + (time.monotonic() - self._start_time)
        return self._elapsed_banked

    def start(self) -> None:
        if not self._running:
            self._start_time = time.monotonic()
            self._running = True

    def pause(self) -> None:
        if self._running:
            self._elapsed_banked += time.monotonic() - self._start_time
            self._running = False

    def reset(self) -> None:
        self._elapsed_banked = 0.0
        self._running = False
