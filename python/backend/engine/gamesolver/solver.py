"""Towers of Hanoi solver."""

from __future__ import annotations

from collections.abc import Iterator

from backend.models.towers import TERMINAL_TOWER, TOWER_COUNT, Towers

Step = tuple[int, int]


class Solver:
    """Stateless solver — all methods are static."""

    @staticmethod
    def classic(disk_count: int, source: int = 0, spare: int = 1, target: int = 2) -> list[Step]:
        """The textbook ``2**n - 1`` move sequence for a full tower."""
        return list(Solver._classic(disk_count, source, spare, target))

    @staticmethod
    def solve(towers: Towers, target: int = TERMINAL_TOWER) -> list[Step]:
        """Return the shortest move list that gathers every disk on *target*.

        Works from any legal position; returns ``[]`` if already solved.
        Raises ``ValueError`` if the position breaks the stacking rule.
        """
        if not towers.is_ordered():
            raise ValueError("Position is not a legal Hanoi position.")
        position: dict[int, int] = {}
        for tower, peg in enumerate(towers.pegs):
            for disk in peg:
                position[disk] = tower
        if sorted(position) != list(range(1, len(position) + 1)):
            raise ValueError("Disk sizes must run 1..N.")

        steps: list[Step] = []
        if position:
            Solver._gather(position, max(position), target, steps)
        return steps

    @staticmethod
    def hint(towers: Towers, target: int = TERMINAL_TOWER) -> Step | None:
        """Return the single best next move, or ``None`` if solved."""
        steps = Solver.solve(towers, target)
        return steps[0] if steps else None

    # -- helpers --------------------------------------------------------------

    @staticmethod
    def _classic(n: int, source: int, spare: int, target: int) -> Iterator[Step]:
        if n <= 0:
            return
        yield from Solver._classic(n - 1, source, target, spare)
        yield source, target
        yield from Solver._classic(n - 1, spare, source, target)

    @staticmethod
    def _gather(position: dict[int, int], disk: int, target: int, steps: list[Step]) -> None:
        """Bring *disk* and every smaller disk onto *target*, largest first."""
        if disk < 1:
            return
        current = position[disk]
        if current == target:
            Solver._gather(position, disk - 1, target, steps)
            return
        spare = TOWER_COUNT - current - target  # the third peg (0+1+2 == 3)
        Solver._gather(position, disk - 1, spare, steps)
        steps.append((current, target))
        position[disk] = target
        Solver._gather(position, disk - 1, target, steps)
