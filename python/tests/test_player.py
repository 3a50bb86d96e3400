"""Player records and name rules."""

from __future__ import annotations

import pytest

from backend.models.highscore import ScoreEntry
from backend.models.player import Player, normalise_name


def test_normalise_strips_whitespace() -> None:
    assert normalise_name("  Ada ") == "Ada"


@pytest.mark.parametrize("name", ["", "   ", "x" * 16])
def test_normalise_rejects(name: str) -> None:
    with pytest.raises(ValueError):
        normalise_name(name)


def test_new_player_defaults() -> None:
    player = Player(name="Ada")
    assert player.current_level == 1
    assert player.highest_level == 1
    assert player.completed_levels == set()
    assert player.sound_enabled


def test_record_best_keeps_the_better_score() -> None:
    player = Player(name="Ada")
    assert player.record_best(1, ScoreEntry("Ada", 9, 30.0, "d"))
    assert not player.record_best(1, ScoreEntry("Ada", 11, 5.0, "d"))
    assert player.record_best(1, ScoreEntry("Ada", 7, 40.0, "d"))
    assert player.best_scores[1].moves == 7


def test_dict_round_trip() -> None:
    player = Player(name="Ada", current_level=2, highest_level=3, completed_levels={1, 2})
    player.record_best(2, ScoreEntry("Ada", 20, 42.5, "2024-05-01 12:00"))
    restored = Player.from_dict(player.to_dict())
    assert restored == player
    assert player.to_dict()["best_scores"].keys() == {"2"}
