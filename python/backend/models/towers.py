"""Tower model for the Towers of Hanoi game."""

from __future__ import annotations

from dataclasses import dataclass

from backend.models.errors import EmptyTowerError

TOWER_COUNT = 3
TERMINAL_TOWER = 2


@dataclass(frozen=True)
class Move:
    """A single recorded disk move."""

    source: int
    target: int
    disk: int

    def reversed(self) -> Move:
        return Move(source=self.target, target=self.source, disk=self.disk)


@dataclass
class Towers:
    """Three pegs of disks.

    Each peg is a list of disk sizes from bottom to top, so the last
    element is the only disk that can move. Sizes run 1..N with 1 the
    smallest. This is a plain container: the stacking rule is enforced
    by ``MoveValidator``, not here.
    """

    pegs: list[list[int]]

    # -- construction helpers -------------------------------------------------

    @classmethod
    def stacked(cls, disk_count: int, tower: int = 0) -> Towers:
        """Return all *disk_count* disks stacked on *tower*.

        Example::

            Towers.stacked(3).pegs == [[3, 2, 1], [], []]
        """
        if disk_count < 0:
            raise ValueError(f"Disk count must be >= 0, got {disk_count}.")
        if not 0 <= tower < TOWER_COUNT:
            raise ValueError(f"No tower {tower}.")
        pegs: list[list[int]] = [[] for _ in range(TOWER_COUNT)]
        pegs[tower] = list(range(disk_count, 0, -1))
        return cls(pegs=pegs)

    # -- queries --------------------------------------------------------------

    def top_disk(self, tower: int) -> int | None:
        peg = self.pegs[tower]
        return peg[-1] if peg else None

    def height(self, tower: int) -> int:
        return len(self.pegs[tower])

    @property
    def disk_count(self) -> int:
        return sum(len(peg) for peg in self.pegs)

    def is_ordered(self) -> bool:
        """Check that every peg is strictly decreasing bottom to top."""
        return all(
            all(a > b for a, b in zip(peg, peg[1:])) for peg in self.pegs
        )

    # -- mutation -------------------------------------------------------------

    def push(self, tower: int, disk: int) -> None:
        self.pegs[tower].append(disk)

    def pop(self, tower: int) -> int:
        peg = self.pegs[tower]
        if not peg:
            raise EmptyTowerError(tower)
        return peg.pop()

    def copy(self) -> Towers:
        return Towers(pegs=[peg[:] for peg in self.pegs])

    def as_lists(self) -> list[list[int]]:
        return [peg[:] for peg in self.pegs]
