"""Leaderboard entries and per-level ranking."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any

DEFAULT_CAPACITY = 10


def _is_int(value: Any) -> bool:
    # bool is an int subclass; True must not count as one move.
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class ScoreEntry:
    player: str
    moves: int
    time: float
    date: str

    def __post_init__(self) -> None:
        if not isinstance(self.player, str) or not self.player:
            raise ValueError("Score entry needs a player name.")
        if not _is_int(self.moves) or self.moves < 1:
            raise ValueError(f"Moves must be a positive integer, got {self.moves!r}.")
        if not (_is_int(self.time) or isinstance(self.time, float)):
            raise ValueError(f"Time must be a number, got {self.time!r}.")
        if self.time < 0:
            raise ValueError(f"Time must be non-negative, got {self.time}.")

    @classmethod
    def now(cls, player: str, moves: int, time: float) -> ScoreEntry:
        return cls(
            player=player,
            moves=moves,
            time=round(time, 2),
            date=datetime.now().strftime("%Y-%m-%d %H:%M"),
        )

    @property
    def rank_key(self) -> tuple[int, float]:
        return (self.moves, self.time)

    def beats(self, other: ScoreEntry) -> bool:
        """Fewer moves wins; equal moves fall back to the lower time."""
        return self.rank_key < other.rank_key

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class ScoreLedger:
    """Bounded top-N leaderboard per level, one entry per player.

    Entries are kept sorted by ``(moves, time)``. A player's entry is
    only replaced by a strictly better one. Anything that falls below
    the top *capacity* after sorting is dropped, even if it was the
    player's only entry.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError(f"Capacity must be positive, got {capacity}.")
        self.capacity = capacity
        self._scores: dict[int, list[ScoreEntry]] = {}

    # -- updates --------------------------------------------------------------

    def record_score(self, level: int, entry: ScoreEntry) -> bool:
        """Insert *entry* for *level*.

        Returns True if the player's retained entry for the level is now
        *entry*, False if it was not better than their existing one or
        did not make the top list.
        """
        entries = self._scores.setdefault(level, [])
        for i, existing in enumerate(entries):
            if existing.player == entry.player:
                if not entry.beats(existing):
                    return False
                entries[i] = entry
                break
        else:
            entries.append(entry)

        entries.sort(key=lambda e: e.rank_key)
        del entries[self.capacity:]
        return entry in entries

    # -- queries --------------------------------------------------------------

    def scores_for(self, level: int) -> list[ScoreEntry]:
        return list(self._scores.get(level, []))

    def best_score_for(self, level: int, player: str) -> ScoreEntry | None:
        for entry in self._scores.get(level, []):
            if entry.player == player:
                return entry
        return None

    def rank_of(self, level: int, player: str) -> int | None:
        """1-based leaderboard position of *player*, or None."""
        for i, entry in enumerate(self._scores.get(level, []), 1):
            if entry.player == player:
                return i
        return None

    def levels(self) -> list[int]:
        return sorted(k for k, v in self._scores.items() if v)

    # -- serialisation --------------------------------------------------------

    def to_dict(self) -> dict[str, list[dict[str, Any]]]:
        return {
            str(level): [e.to_dict() for e in entries]
            for level, entries in sorted(self._scores.items())
        }

    @classmethod
    def from_dict(
        cls, data: dict[str, list[dict[str, Any]]], capacity: int = DEFAULT_CAPACITY
    ) -> ScoreLedger:
        """Rebuild a ledger, re-applying the ranking rules to every entry.

        Raises ``KeyError``/``TypeError``/``ValueError`` on malformed data.
        """
        ledger = cls(capacity)
        for level_key, entries in data.items():
            level = int(level_key)
            for raw in entries:
                ledger.record_score(level, ScoreEntry(**raw))
        return ledger
