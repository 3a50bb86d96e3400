"""Host-owned session: ties the engine to player progress and the leaderboard."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from backend.engine import events
from backend.engine.events import GameEvent
from backend.engine.gamelevels import LevelManager
from backend.engine.gameplay import GamePlay, LevelStats
from backend.engine.gamesolver import Solver
from backend.engine.gamesolver.solver import Step
from backend.models.highscore import ScoreEntry
from backend.models.player import Player
from backend.storage import ProgressStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WinRecord:
    """What a finished level changed in the player's records.

    Attempts that used a hint are not scored: ``entry`` is None and
    nothing was recorded.
    """

    stats: LevelStats
    entry: ScoreEntry | None
    personal_best: bool
    newly_completed: bool
    rank: int | None
    game_complete: bool
    scored: bool = True


class GameSession:
    """One player's session: the active level plus persisted progress.

    Wins are recorded through the engine's ``LEVEL_WON`` event, so any
    host that drives ``game`` gets scoring and unlocking for free.
    """

    def __init__(self, store: ProgressStore, player: str | None = None) -> None:
        self.store = store
        self.levels = LevelManager(store.config)
        self.player: Player = (
            store.switch_player(player) if player else store.current_player()
        )
        self.game: GamePlay | None = None
        self.last_win: WinRecord | None = None
        self.assisted = False

    # -- levels ---------------------------------------------------------------

    def start_level(self, level: int | None = None) -> GamePlay:
        """Start *level* (default: the player's current level).

        Raises ``ValueError`` if the level is out of range or locked.
        """
        number = self.player.current_level if level is None else level
        if not self.levels.is_unlocked(self.player, number):
            raise ValueError(f"Level {number} is locked for {self.player.name}.")
        self.player.current_level = number
        self.last_win = None
        self.assisted = False
        self.game = GamePlay(self.levels, number)
        self.game.subscribe(self._on_event)
        self.store.save()
        return self.game

    def reset_level(self) -> GamePlay:
        if self.game is None:
            return self.start_level()
        self.last_win = None
        self.assisted = False
        self.game.reset_level()
        return self.game

    def hint(self) -> Step | None:
        """Play the best next move for the player. The attempt becomes unscored.

        Returns the move played, or None if there was nothing to do.
        """
        game = self.game
        if game is None or game.is_won:
            return None
        step = Solver.hint(game.state.towers)
        if step is None:
            return None
        self.assisted = True
        game.move(*step)
        return step

    def next_level(self) -> bool:
        if not self.levels.advance(self.player):
            return False
        self.start_level()
        return True

    def previous_level(self) -> bool:
        if not self.levels.retreat(self.player):
            return False
        self.start_level()
        return True

    # -- player ---------------------------------------------------------------

    def switch_player(self, name: str) -> Player:
        self.player = self.store.switch_player(name)
        self.game = None
        self.last_win = None
        logger.info("Switched to player %s", self.player.name)
        return self.player

    def toggle_sound(self) -> bool:
        self.player.sound_enabled = not self.player.sound_enabled
        self.store.save()
        return self.player.sound_enabled

    # -- events ---------------------------------------------------------------

    def _on_event(self, event: GameEvent) -> None:
        if event.type == events.LEVEL_WON:
            self._record_win(event.payload["stats"])

    def _record_win(self, stats: LevelStats) -> None:
        if stats.level is None:
            return
        player = self.player
        if self.assisted:
            self.last_win = WinRecord(
                stats=stats,
                entry=None,
                personal_best=False,
                newly_completed=False,
                rank=None,
                game_complete=self.levels.all_completed(player),
                scored=False,
            )
            logger.info("%s finished level %d with hints; not scored", player.name, stats.level)
            return
        entry = ScoreEntry.now(player.name, stats.moves, stats.elapsed_time)

        personal_best = player.record_best(stats.level, entry)
        newly_completed = self.levels.mark_completed(player, stats.level)
        self.store.ledger.record_score(stats.level, entry)
        self.store.save()

        self.last_win = WinRecord(
            stats=stats,
            entry=entry,
            personal_best=personal_best,
            newly_completed=newly_completed,
            rank=self.store.ledger.rank_of(stats.level, player.name),
            game_complete=self.levels.all_completed(player),
        )
        logger.info(
            "%s finished level %d: %d moves, %.1fs, efficiency %s%%",
            player.name, stats.level, stats.moves, stats.elapsed_time, stats.efficiency,
        )
