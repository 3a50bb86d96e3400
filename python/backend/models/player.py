"""Player identity and level progress."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from backend.models.highscore import ScoreEntry

MAX_NAME_LENGTH = 15


def normalise_name(name: str, max_length: int = MAX_NAME_LENGTH) -> str:
    """Strip *name* and check it is a usable player name."""
    cleaned = name.strip()
    if not cleaned:
        raise ValueError("Player name must not be empty.")
    if len(cleaned) > max_length:
        raise ValueError(
            f"Player name must be at most {max_length} characters, "
            f"got {len(cleaned)}."
        )
    return cleaned


@dataclass
class Player:
    """A named player and their progress through the levels.

    ``best_scores`` holds the player's personal best per level. It is
    kept here because the leaderboard only retains the global top ten.
    """

    name: str
    current_level: int = 1
    highest_level: int = 1
    completed_levels: set[int] = field(default_factory=set)
    sound_enabled: bool = True
    best_scores: dict[int, ScoreEntry] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.name = normalise_name(self.name)

    def record_best(self, level: int, entry: ScoreEntry) -> bool:
        """Keep *entry* if it beats the stored best. Returns True if kept."""
        best = self.best_scores.get(level)
        if best is not None and not entry.beats(best):
            return False
        self.best_scores[level] = entry
        return True

    # -- serialisation --------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "current_level": self.current_level,
            "highest_level": self.highest_level,
            "completed_levels": sorted(self.completed_levels),
            "sound_enabled": self.sound_enabled,
            "best_scores": {
                str(level): entry.to_dict()
                for level, entry in sorted(self.best_scores.items())
            },
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Player:
        return cls(
            name=data["name"],
            current_level=int(data.get("current_level", 1)),
            highest_level=int(data.get("highest_level", 1)),
            completed_levels={int(n) for n in data.get("completed_levels", [])},
            sound_enabled=bool(data.get("sound_enabled", True)),
            best_scores={
                int(level): ScoreEntry(**raw)
                for level, raw in data.get("best_scores", {}).items()
            },
        )
