"""
Engine events for host rendering and logging.
Events describe what happened inside a ``GamePlay`` call.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from backend.models.towers import Move


@dataclass
class GameEvent:
    """Base event class. All events have a type and payload."""
    type: str
    payload: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "payload": self.payload}


Listener = Callable[[GameEvent], None]


# ===== Event Type Constants =====

LEVEL_STARTED = "level_started"

DISK_SELECTED = "disk_selected"
DISK_DESELECTED = "disk_deselected"

DISK_MOVED = "disk_moved"
MOVE_UNDONE = "move_undone"
INVALID_MOVE = "invalid_move"

# First accepted move of a level; the host starts its clock.
TIMER_STARTED = "timer_started"

LEVEL_WON = "level_won"


# ===== Event Factory Functions =====

def level_started(level: int | None, disk_count: int) -> GameEvent:
    return GameEvent(LEVEL_STARTED, {
        "level": level,
        "disk_count": disk_count,
    })


def disk_selected(tower: int, disk: int) -> GameEvent:
    return GameEvent(DISK_SELECTED, {"tower": tower, "disk": disk})


def disk_deselected(tower: int) -> GameEvent:
    return GameEvent(DISK_DESELECTED, {"tower": tower})


def disk_moved(move: Move, moves: int) -> GameEvent:
    return GameEvent(DISK_MOVED, {
        "move": move,
        "moves": moves,
    })


def move_undone(move: Move, moves: int) -> GameEvent:
    return GameEvent(MOVE_UNDONE, {
        "move": move,
        "moves": moves,
    })


def invalid_move(reason: str, source: int | None, target: int) -> GameEvent:
    return GameEvent(INVALID_MOVE, {
        "reason": reason,
        "source": source,
        "target": target,
    })


def timer_started() -> GameEvent:
    return GameEvent(TIMER_STARTED, {})


def level_won(stats: Any) -> GameEvent:
    return GameEvent(LEVEL_WON, {"stats": stats})
