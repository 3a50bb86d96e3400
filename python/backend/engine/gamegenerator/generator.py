"""Generates start positions and scrambled study positions."""

from __future__ import annotations

import random

from backend.engine.gamerules import MoveValidator
from backend.models.towers import TERMINAL_TOWER, Towers


class GameGenerator:
    """Creates legal positions by walking random valid moves from the start."""

    @staticmethod
    def start(disk_count: int) -> Towers:
        """Return the opening position (every disk on tower 0)."""
        return Towers.stacked(disk_count)

    @staticmethod
    def scramble(
        towers: Towers, steps: int | None = None, rng: random.Random | None = None
    ) -> None:
        """Scramble *towers* in-place using random legal moves."""
        rng = rng or random.Random()
        num_steps = towers.disk_count * 20 if steps is None else steps
        prev: tuple[int, int] | None = None

        for _ in range(num_steps):
            options = MoveValidator.legal_moves(towers)
            # Don't immediately undo the previous step.
            if prev is not None:
                back = (prev[1], prev[0])
                if back in options and len(options) > 1:
                    options.remove(back)
            if not options:
                return
            source, target = rng.choice(options)
            towers.push(target, towers.pop(source))
            prev = (source, target)

    @staticmethod
    def generate(disk_count: int, rng: random.Random | None = None) -> Towers:
        """Return a random legal position that is not already solved."""
        if disk_count < 1:
            raise ValueError(f"Disk count must be >= 1, got {disk_count}.")
        rng = rng or random.Random()
        while True:
            towers = GameGenerator.start(disk_count)
            GameGenerator.scramble(towers, rng=rng)
            if towers.height(TERMINAL_TOWER) != disk_count:
                return towers
