"""Move engine — selection, moves, undo, win detection and events.

The random-walk tests replay long sequences of arbitrary host input
through the engine and check the stacking rule after every call.
"""

from __future__ import annotations

import random

import pytest

from backend.engine import events
from backend.engine.events import GameEvent
from backend.engine.gamelevels import LevelManager
from backend.engine.gameplay import GamePlay
from backend.engine.gamerules import MoveRejection
from backend.engine.gamestate import Phase
from backend.models.errors import EmptyHistoryError, EmptyTowerError, LevelCompleteError
from backend.models.towers import Move, Towers

OPTIMAL_3 = [(0, 2), (0, 1), (2, 1), (0, 2), (1, 0), (1, 2), (0, 2)]


@pytest.fixture
def game() -> GamePlay:
    return GamePlay(LevelManager(), level=1)


def _recorder(game: GamePlay) -> list[GameEvent]:
    seen: list[GameEvent] = []
    game.subscribe(seen.append)
    return seen


def _play(game: GamePlay, steps: list[tuple[int, int]]) -> None:
    for source, target in steps:
        game.select_disk(source)
        result = game.attempt_move(target)
        assert result.accepted, (source, target, result.reason)


def _assert_consistent(game: GamePlay) -> None:
    towers = game.towers
    assert towers.is_ordered()
    assert sorted(d for peg in towers.pegs for d in peg) == list(range(1, game.disk_count + 1))
    assert game.moves == len(game.history)


# -- level start --------------------------------------------------------------


def test_level_one_starts_with_three_disks(game: GamePlay) -> None:
    assert game.towers.pegs == [[3, 2, 1], [], []]
    assert game.moves == 0
    assert game.phase is Phase.IDLE
    assert game.history == []
    assert game.efficiency is None
    assert game.optimal_moves == 7


def test_init_level_sets_disk_count(game: GamePlay) -> None:
    seen = _recorder(game)
    game.init_level(4)
    assert game.towers.pegs[0] == [6, 5, 4, 3, 2, 1]
    assert seen[-1].type == events.LEVEL_STARTED
    assert seen[-1].payload == {"level": 4, "disk_count": 6}


def test_init_level_out_of_range(game: GamePlay) -> None:
    with pytest.raises(ValueError):
        game.init_level(9)


# -- selection ----------------------------------------------------------------


def test_select_then_deselect(game: GamePlay) -> None:
    seen = _recorder(game)
    assert game.select_disk(0) == 1
    assert game.selected_tower == 0
    assert game.select_disk(0) is None
    assert game.selected_tower is None
    assert [e.type for e in seen] == [events.DISK_SELECTED, events.DISK_DESELECTED]


def test_select_empty_tower_raises(game: GamePlay) -> None:
    with pytest.raises(EmptyTowerError):
        game.select_disk(1)
    assert game.selected_tower is None
    assert game.moves == 0


def test_attempt_without_selection_is_rejected(game: GamePlay) -> None:
    seen = _recorder(game)
    result = game.attempt_move(1)
    assert not result.accepted
    assert result.reason is MoveRejection.NO_SELECTION
    assert seen[-1].type == events.INVALID_MOVE
    assert seen[-1].payload["reason"] == "no_selection"


# -- moves --------------------------------------------------------------------


def test_valid_move_updates_state(game: GamePlay) -> None:
    seen = _recorder(game)
    game.select_disk(0)
    result = game.attempt_move(2)

    assert result.accepted
    assert result.move == Move(source=0, target=2, disk=1)
    assert game.towers.pegs == [[3, 2], [], [1]]
    assert game.moves == 1
    assert game.phase is Phase.IN_PROGRESS
    assert game.selected_tower is None
    assert [e.type for e in seen] == [
        events.DISK_SELECTED, events.TIMER_STARTED, events.DISK_MOVED,
    ]
    assert seen[-1].payload["moves"] == 1


def test_timer_starts_only_once(game: GamePlay) -> None:
    seen = _recorder(game)
    _play(game, OPTIMAL_3[:3])
    assert [e.type for e in seen].count(events.TIMER_STARTED) == 1


def test_invalid_move_leaves_state_alone(game: GamePlay) -> None:
    _play(game, [(0, 2)])
    before = game.towers.as_lists()
    game.select_disk(0)
    result = game.attempt_move(2)

    assert not result.accepted
    assert result.reason is MoveRejection.LARGER_ON_SMALLER
    assert game.towers.pegs == before
    assert game.moves == 1
    assert game.selected_tower is None


def test_same_tower_clears_selection(game: GamePlay) -> None:
    game.select_disk(0)
    result = game.move(0, 0)
    assert result.reason is MoveRejection.SAME_TOWER
    assert game.selected_tower is None


def test_move_from_empty_tower(game: GamePlay) -> None:
    assert game.move(1, 2).reason is MoveRejection.EMPTY_SOURCE


def test_move_to_missing_tower(game: GamePlay) -> None:
    assert game.move(0, 5).reason is MoveRejection.INVALID_TOWER


# -- undo ---------------------------------------------------------------------


def test_move_then_undo_restores_position(game: GamePlay) -> None:
    _play(game, OPTIMAL_3[:3])
    before = game.towers.as_lists()
    history = game.history

    game.select_disk(0)
    assert game.attempt_move(2).accepted
    undone = game.undo()

    assert undone == Move(source=0, target=2, disk=3)
    assert game.towers.pegs == before
    assert game.moves == 3
    assert game.history == history


def test_undo_emits_event(game: GamePlay) -> None:
    _play(game, [(0, 1)])
    seen = _recorder(game)
    game.undo()
    assert seen[-1].type == events.MOVE_UNDONE
    assert seen[-1].payload["moves"] == 0


def test_undo_back_to_start_stays_in_progress(game: GamePlay) -> None:
    _play(game, [(0, 1)])
    game.undo()
    assert game.moves == 0
    assert game.phase is Phase.IN_PROGRESS


def test_undo_with_no_history(game: GamePlay) -> None:
    with pytest.raises(EmptyHistoryError):
        game.undo()
    assert game.towers.pegs == [[3, 2, 1], [], []]
    assert game.moves == 0


def test_undo_clears_selection(game: GamePlay) -> None:
    _play(game, [(0, 1)])
    game.select_disk(1)
    game.undo()
    assert game.selected_tower is None


# -- winning ------------------------------------------------------------------


def test_optimal_solution_wins(game: GamePlay) -> None:
    seen = _recorder(game)
    _play(game, OPTIMAL_3)

    assert game.is_won
    assert game.phase is Phase.WON
    assert game.towers.pegs == [[], [], [3, 2, 1]]
    assert game.moves == 7
    assert game.efficiency == 100

    won = [e for e in seen if e.type == events.LEVEL_WON]
    assert len(won) == 1
    stats = won[0].payload["stats"]
    assert stats.level == 1
    assert stats.moves == 7
    assert stats.optimal_moves == 7
    assert stats.efficiency == 100


def test_stacking_on_middle_tower_does_not_win(game: GamePlay) -> None:
    _play(game, [(0, 1), (0, 2), (1, 2), (0, 1), (2, 0), (2, 1), (0, 1)])
    assert game.towers.pegs == [[], [3, 2, 1], []]
    assert not game.is_won


def test_won_level_is_frozen(game: GamePlay) -> None:
    _play(game, OPTIMAL_3)
    seen = _recorder(game)

    assert game.select_disk(2) is None
    result = game.move(2, 0)
    assert result.reason is MoveRejection.LEVEL_COMPLETE
    with pytest.raises(LevelCompleteError):
        game.undo()
    game.tick(99.0)

    assert game.towers.pegs == [[], [], [3, 2, 1]]
    assert game.moves == 7
    assert [e.type for e in seen] == [events.INVALID_MOVE]


def test_reset_after_win(game: GamePlay) -> None:
    _play(game, OPTIMAL_3)
    game.reset_level()
    assert game.phase is Phase.IDLE
    assert game.moves == 0
    assert game.history == []
    assert game.towers.pegs == [[3, 2, 1], [], []]


def test_efficiency_below_optimal(game: GamePlay) -> None:
    _play(game, [(0, 1), (1, 0)] + OPTIMAL_3)
    assert game.is_won
    assert game.moves == 9
    assert game.efficiency == 77


# -- time ---------------------------------------------------------------------


def test_tick_ignored_before_first_move(game: GamePlay) -> None:
    game.tick(5.0)
    assert game.elapsed_time == 0.0


def test_tick_updates_while_in_progress(game: GamePlay) -> None:
    _play(game, [(0, 2)])
    game.tick(3.5)
    assert game.elapsed_time == 3.5


def test_tick_rejects_negative(game: GamePlay) -> None:
    with pytest.raises(ValueError):
        game.tick(-1.0)


def test_stats_carry_elapsed_time(game: GamePlay) -> None:
    _play(game, OPTIMAL_3[:-1])
    game.tick(12.25)
    _play(game, OPTIMAL_3[-1:])
    assert game.stats().elapsed_time == 12.25


# -- listeners ----------------------------------------------------------------


def test_unsubscribe(game: GamePlay) -> None:
    seen: list[GameEvent] = []
    unsubscribe = game.subscribe(seen.append)
    game.select_disk(0)
    unsubscribe()
    game.select_disk(0)
    assert len(seen) == 1


def test_event_serialises() -> None:
    event = events.invalid_move("same_tower", 1, 1)
    assert event.to_dict() == {
        "type": "invalid_move",
        "payload": {"reason": "same_tower", "source": 1, "target": 1},
    }


# -- study positions ----------------------------------------------------------


def test_from_towers_plays_arbitrary_position() -> None:
    game = GamePlay.from_towers(Towers(pegs=[[], [2], [3, 1]]))
    assert game.level is None
    _play(game, [(2, 0), (1, 2), (0, 2)])
    assert game.is_won
    game.reset_level()
    assert game.towers.pegs == [[], [2], [3, 1]]


# -- random walks -------------------------------------------------------------


@pytest.mark.parametrize("seed", range(10))
def test_random_input_never_breaks_stacking(seed: int) -> None:
    rng = random.Random(seed)
    game = GamePlay(LevelManager(), level=2)
    for _ in range(300):
        action = rng.random()
        if action < 0.1:
            try:
                game.undo()
            except EmptyHistoryError:
                pass
        elif action < 0.5:
            try:
                game.select_disk(rng.randrange(3))
            except EmptyTowerError:
                pass
        else:
            game.attempt_move(rng.randrange(3))
        _assert_consistent(game)
        if game.is_won:
            break


@pytest.mark.parametrize("seed", range(5))
def test_undo_all_returns_to_start(seed: int) -> None:
    rng = random.Random(seed)
    game = GamePlay(LevelManager(), level=1)
    for _ in range(40):
        game.move(rng.randrange(3), rng.randrange(3))
        if game.is_won:
            game.reset_level()
    while game.history:
        game.undo()
    assert game.towers.pegs == [[3, 2, 1], [], []]
    assert game.moves == 0
