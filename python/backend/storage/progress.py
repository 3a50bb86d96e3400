"""Progress persistence — players and the leaderboard in one JSON file."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from backend.config import DEFAULT_PLAYER, GameConfig
from backend.models.errors import CorruptedPersistedStateError
from backend.models.highscore import ScoreLedger
from backend.models.player import Player, normalise_name

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1


class ProgressStore:
    """Loads, saves, and hands out player records and the leaderboard.

    A file that cannot be read back is moved aside as ``*.corrupt`` and
    the store starts over from defaults.
    """

    def __init__(self, filepath: Path, config: GameConfig | None = None) -> None:
        self.filepath = filepath
        self.config = config or GameConfig()
        self.recovered_from_corruption = False
        self._reset()
        self._load()

    # -- persistence ----------------------------------------------------------

    def _reset(self) -> None:
        self.ledger = ScoreLedger(self.config.leaderboard_size)
        self.active_player: str | None = None
        self._players: dict[str, Player] = {}

    def _load(self) -> None:
        if not self.filepath.exists():
            return
        try:
            self._read()
        except CorruptedPersistedStateError as exc:
            logger.warning("Discarding unreadable progress file %s: %s", self.filepath, exc)
            self._quarantine()
            self._reset()
            self.recovered_from_corruption = True

    def _read(self) -> None:
        try:
            data = json.loads(self.filepath.read_text(encoding="utf-8"))
            if not isinstance(data, dict):
                raise CorruptedPersistedStateError("top-level value is not an object")
            version = data.get("version")
            if version != SCHEMA_VERSION:
                raise CorruptedPersistedStateError(f"unsupported version {version!r}")

            players: dict[str, Player] = {}
            for raw in data.get("players", {}).values():
                player = Player.from_dict(raw)
                self._sanitise(player)
                players[player.name] = player
            top = self.config.max_level
            boards = {
                key: entries
                for key, entries in data.get("leaderboard", {}).items()
                if 1 <= int(key) <= top
            }
            ledger = ScoreLedger.from_dict(boards, self.config.leaderboard_size)
            active = data.get("active_player")
            if active is not None and not isinstance(active, str):
                raise CorruptedPersistedStateError("active_player is not a name")
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as exc:
            raise CorruptedPersistedStateError(str(exc)) from exc

        self._players = players
        self.ledger = ledger
        self.active_player = active if active in players else None
        logger.debug("Loaded progress for %d player(s) from %s", len(players), self.filepath)

    def _quarantine(self) -> None:
        target = self.filepath.with_name(self.filepath.name + ".corrupt")
        try:
            self.filepath.replace(target)
        except OSError as exc:
            logger.warning("Could not move %s aside: %s", self.filepath, exc)

    def save(self) -> None:
        self.filepath.parent.mkdir(parents=True, exist_ok=True)
        data = {
            "version": SCHEMA_VERSION,
            "active_player": self.active_player,
            "players": {name: p.to_dict() for name, p in sorted(self._players.items())},
            "leaderboard": self.ledger.to_dict(),
        }
        tmp = self.filepath.with_name(self.filepath.name + ".tmp")
        tmp.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
        tmp.replace(self.filepath)
        logger.debug("Saved progress to %s", self.filepath)

    # -- players --------------------------------------------------------------

    def player(self, name: str) -> Player:
        """Return the record for *name*, creating it if needed."""
        key = normalise_name(name)
        if key not in self._players:
            self._players[key] = Player(name=key)
            logger.info("Created player %s", key)
        return self._players[key]

    def players(self) -> list[str]:
        return sorted(self._players)

    def current_player(self) -> Player:
        return self.player(self.active_player or DEFAULT_PLAYER)

    def switch_player(self, name: str) -> Player:
        player = self.player(name)
        self.active_player = player.name
        self.save()
        return player

    # -- helpers --------------------------------------------------------------

    def _sanitise(self, player: Player) -> None:
        """Clamp a loaded record to the configured levels."""
        top = self.config.max_level
        player.completed_levels = {n for n in player.completed_levels if 1 <= n <= top}
        player.best_scores = {
            n: e for n, e in player.best_scores.items() if 1 <= n <= top
        }
        player.highest_level = min(max(player.highest_level, 1), top)
        player.current_level = min(max(player.current_level, 1), top)
