"""Move validator — every rule, checked against hand-built positions."""

from __future__ import annotations

import pytest

from backend.engine.gamerules import MoveRejection, MoveValidator
from backend.models.errors import InvalidMoveError
from backend.models.towers import Towers


def _towers(*pegs: list[int]) -> Towers:
    return Towers(pegs=[list(p) for p in pegs])


@pytest.mark.parametrize(
    "pegs, disk, source, target, expected",
    [
        # same tower
        (([3, 2, 1], [], []), 1, 0, 0, MoveRejection.SAME_TOWER),
        # tower index out of range
        (([3, 2, 1], [], []), 1, 0, 3, MoveRejection.INVALID_TOWER),
        (([3, 2, 1], [], []), 1, -1, 2, MoveRejection.INVALID_TOWER),
        # empty source
        (([3, 2, 1], [], []), 1, 1, 2, MoveRejection.EMPTY_SOURCE),
        # only the top disk moves
        (([3, 2, 1], [], []), 2, 0, 2, MoveRejection.NOT_TOP_DISK),
        # larger on smaller
        (([3, 2], [], [1]), 2, 0, 2, MoveRejection.LARGER_ON_SMALLER),
        # empty target is always fine
        (([3, 2, 1], [], []), 1, 0, 1, None),
        # smaller on larger
        (([3, 1], [2], []), 1, 0, 1, None),
    ],
)
def test_check(
    pegs: tuple[list[int], ...],
    disk: int,
    source: int,
    target: int,
    expected: MoveRejection | None,
) -> None:
    towers = _towers(*pegs)
    assert MoveValidator.check(disk, source, target, towers) is expected
    assert MoveValidator.is_valid_move(disk, source, target, towers) is (expected is None)


def test_validation_has_no_side_effects() -> None:
    towers = _towers([3, 2, 1], [], [])
    MoveValidator.is_valid_move(1, 0, 2, towers)
    assert towers.pegs == [[3, 2, 1], [], []]


def test_ensure_raises_with_reason() -> None:
    towers = _towers([3, 2], [], [1])
    with pytest.raises(InvalidMoveError) as exc_info:
        MoveValidator.ensure(2, 0, 2, towers)
    assert exc_info.value.reason == "larger_on_smaller"
    MoveValidator.ensure(2, 0, 1, towers)


def test_legal_moves_from_start() -> None:
    assert MoveValidator.legal_moves(Towers.stacked(3)) == [(0, 1), (0, 2)]


def test_legal_moves_mid_game() -> None:
    towers = _towers([3], [2], [1])
    assert sorted(MoveValidator.legal_moves(towers)) == [(1, 0), (2, 0), (2, 1)]
