"""Tower model — construction, queries and the empty-tower error."""

from __future__ import annotations

import pytest

from backend.models.errors import EmptyTowerError
from backend.models.towers import Move, Towers


def test_stacked_puts_every_disk_on_one_tower() -> None:
    towers = Towers.stacked(3)
    assert towers.pegs == [[3, 2, 1], [], []]
    assert towers.disk_count == 3
    assert towers.top_disk(0) == 1
    assert towers.top_disk(1) is None


def test_stacked_on_another_tower() -> None:
    assert Towers.stacked(2, tower=2).pegs == [[], [], [2, 1]]


@pytest.mark.parametrize("disk_count, tower", [(-1, 0), (3, 3), (3, -1)])
def test_stacked_rejects_bad_arguments(disk_count: int, tower: int) -> None:
    with pytest.raises(ValueError):
        Towers.stacked(disk_count, tower)


def test_push_and_pop_work_on_the_top() -> None:
    towers = Towers.stacked(3)
    disk = towers.pop(0)
    towers.push(2, disk)
    assert disk == 1
    assert towers.pegs == [[3, 2], [], [1]]
    assert towers.height(2) == 1


def test_pop_empty_tower_raises() -> None:
    towers = Towers.stacked(3)
    with pytest.raises(EmptyTowerError) as exc_info:
        towers.pop(1)
    assert exc_info.value.tower == 1
    assert towers.pegs == [[3, 2, 1], [], []]


def test_container_does_not_enforce_ordering() -> None:
    towers = Towers.stacked(2)
    towers.push(1, towers.pop(0))
    towers.push(1, towers.pop(0))  # disk 2 onto disk 1
    assert not towers.is_ordered()


def test_copy_is_independent() -> None:
    towers = Towers.stacked(3)
    clone = towers.copy()
    clone.push(1, clone.pop(0))
    assert towers.pegs == [[3, 2, 1], [], []]
    assert towers.as_lists() is not towers.pegs


def test_move_reversed() -> None:
    move = Move(source=0, target=2, disk=1)
    assert move.reversed() == Move(source=2, target=0, disk=1)
