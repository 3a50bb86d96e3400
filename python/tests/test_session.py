"""Game session — wins flow into personal bests, unlocking and the leaderboard."""

from __future__ import annotations

from pathlib import Path

import pytest

from backend.engine.session import GameSession
from backend.storage import ProgressStore

OPTIMAL_3 = [(0, 2), (0, 1), (2, 1), (0, 2), (1, 0), (1, 2), (0, 2)]


@pytest.fixture
def store(tmp_path: Path) -> ProgressStore:
    return ProgressStore(tmp_path / "progress.json")


def _win_level_one(session: GameSession, extra: int = 0) -> None:
    game = session.start_level(1)
    for _ in range(extra):
        game.move(0, 1)
        game.move(1, 0)
    for i, (source, target) in enumerate(OPTIMAL_3):
        assert game.move(source, target).accepted
        if i == 0:
            game.tick(4.0)


def test_new_session_uses_named_player(store: ProgressStore) -> None:
    session = GameSession(store, "Ada")
    assert session.player.name == "Ada"
    assert store.active_player == "Ada"


def test_locked_level_cannot_start(store: ProgressStore) -> None:
    session = GameSession(store, "Ada")
    with pytest.raises(ValueError):
        session.start_level(2)


def test_win_is_recorded(store: ProgressStore) -> None:
    session = GameSession(store, "Ada")
    _win_level_one(session)

    win = session.last_win
    assert win is not None
    assert win.stats.moves == 7
    assert win.stats.efficiency == 100
    assert win.personal_best
    assert win.newly_completed
    assert win.rank == 1
    assert not win.game_complete
    assert win.entry.time == 4.0

    assert session.player.completed_levels == {1}
    assert session.player.highest_level == 2
    assert store.ledger.best_score_for(1, "Ada").moves == 7


def test_win_is_saved(store: ProgressStore) -> None:
    session = GameSession(store, "Ada")
    _win_level_one(session)
    reloaded = ProgressStore(store.filepath)
    assert reloaded.player("Ada").completed_levels == {1}
    assert reloaded.ledger.rank_of(1, "Ada") == 1


def test_worse_replay_keeps_best(store: ProgressStore) -> None:
    session = GameSession(store, "Ada")
    _win_level_one(session)
    _win_level_one(session, extra=1)

    win = session.last_win
    assert win.stats.moves == 9
    assert not win.personal_best
    assert not win.newly_completed
    assert store.ledger.best_score_for(1, "Ada").moves == 7


def test_next_level_after_win(store: ProgressStore) -> None:
    session = GameSession(store, "Ada")
    assert not session.next_level()
    _win_level_one(session)
    assert session.next_level()
    assert session.game.level == 2
    assert session.game.disk_count == 4
    assert session.previous_level()
    assert session.game.level == 1


def test_reset_clears_last_win(store: ProgressStore) -> None:
    session = GameSession(store, "Ada")
    _win_level_one(session)
    session.reset_level()
    assert session.last_win is None
    assert session.game.moves == 0


def test_switch_player_keeps_progress_apart(store: ProgressStore) -> None:
    session = GameSession(store, "Ada")
    _win_level_one(session)
    session.switch_player("Bob")

    assert session.game is None
    assert session.player.completed_levels == set()
    assert store.player("Ada").completed_levels == {1}


def test_toggle_sound(store: ProgressStore) -> None:
    session = GameSession(store, "Ada")
    assert session.toggle_sound() is False
    assert ProgressStore(store.filepath).player("Ada").sound_enabled is False


def test_hint_plays_the_next_move(store: ProgressStore) -> None:
    session = GameSession(store, "Ada")
    session.start_level(1)
    assert session.hint() == (0, 2)
    assert session.game.moves == 1
    assert session.assisted


def test_hinted_win_is_not_scored(store: ProgressStore) -> None:
    session = GameSession(store, "Ada")
    session.start_level(1)
    while session.hint() is not None:
        pass

    win = session.last_win
    assert session.game.is_won
    assert win is not None
    assert not win.scored
    assert win.entry is None
    assert win.rank is None
    assert session.player.completed_levels == set()
    assert session.player.best_scores == {}
    assert store.ledger.scores_for(1) == []
    assert not session.next_level()


def test_reset_makes_the_attempt_scored_again(store: ProgressStore) -> None:
    session = GameSession(store, "Ada")
    session.start_level(1)
    session.hint()
    session.reset_level()
    assert not session.assisted
    _win_level_one(session)
    assert session.last_win.scored
    assert store.ledger.rank_of(1, "Ada") == 1


def test_hint_without_a_game(store: ProgressStore) -> None:
    assert GameSession(store, "Ada").hint() is None
