#!/usr/bin/env python3
"""Towers of Hanoi.

Usage::

    python main.py                      # interactive menu
    python main.py -f rich -p Ada       # Rich terminal as player "Ada"
    python main.py -f pygame -l 3       # Pygame GUI, starting on level 3
    python main.py --scores             # view the leaderboard
"""

import importlib
import logging
import sys
from enum import StrEnum
from pathlib import Path
from typing import Optional

import typer

ROOT = Path(__file__).resolve().parent  # python/

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from backend.config import DATA_DIR, PROGRESS_FILENAME, GameConfig  # noqa: E402
from backend.logging_config import setup_logging  # noqa: E402


# -- frontend registry -------------------------------------------------------


class Frontend(StrEnum):
    rich = "rich"
    pygame = "pygame"


class LogLevel(StrEnum):
    debug = "debug"
    info = "info"
    warning = "warning"
    error = "error"


_RUNNERS = {
    Frontend.rich: "frontend.cli.rich.app",
    Frontend.pygame: "frontend.gui.pygame.app",
}


# -- helpers ------------------------------------------------------------------


def _print_highscores(data_dir: Path, config: GameConfig) -> None:
    from backend.engine.gamelevels import LevelManager
    from backend.storage import ProgressStore
    from frontend.common import format_time

    store = ProgressStore(data_dir / PROGRESS_FILENAME, config)
    levels = LevelManager(config)
    played = store.ledger.levels()

    print("\n  === HIGH SCORES ===")
    if not played:
        print("  No high scores yet.\n")
        return
    for number in played:
        lvl = levels.level(number)
        print(f"\n  --- Level {number} ({lvl.disk_count} disks, optimal {lvl.optimal_moves}) ---")
        for i, e in enumerate(store.ledger.scores_for(number), 1):
            print(
                f"  {i:>2}. {e.player:<15} {e.moves:>5} moves  "
                f"{format_time(e.time):>6}  ({e.date})"
            )
    print()


def _menu_loop(data_dir: Path, config: GameConfig, player: Optional[str]) -> None:
    while True:
        print()
        print("  ====================================")
        print("       T O W E R S   O F   H A N O I  ")
        print("  ====================================")
        print()
        print("  1.  Play  (Rich Terminal)")
        print("  2.  Play  (Pygame GUI)")
        print("  3.  View High Scores")
        print("  0.  Quit")
        print()

        choice = input("  Select: ").strip()

        if choice == "0":
            print("\n  Goodbye!\n")
            return

        if choice in ("1", "2"):
            frontend = Frontend.rich if choice == "1" else Frontend.pygame
            mod = importlib.import_module(_RUNNERS[frontend])
            mod.run(data_dir=data_dir, config=config, player=player)

        elif choice == "3":
            _print_highscores(data_dir, config)

        else:
            print("  Unknown option.")


# -- CLI entry point ----------------------------------------------------------

app = typer.Typer(add_completion=False)


@app.command()
def main(
    frontend: Optional[Frontend] = typer.Option(
        None, "-f", "--frontend",
        help="Frontend to launch. Omit for interactive menu.",
    ),
    player: Optional[str] = typer.Option(
        None, "-p", "--player",
        help="Play as this player (created if new).",
    ),
    level: Optional[int] = typer.Option(
        None, "-l", "--level",
        min=1,
        help="Start on this level if it is unlocked.",
    ),
    scores: bool = typer.Option(
        False, "--scores",
        help="Show high scores and exit.",
    ),
    data_dir: Path = typer.Option(
        DATA_DIR, "--data-dir",
        envvar="HANOI_DATA_DIR",
        help="Directory holding saved progress.",
    ),
    min_disks: int = typer.Option(
        3, "--min-disks",
        min=1, max=10,
        help="Disks on level 1.",
    ),
    levels: int = typer.Option(
        8, "--levels",
        min=1, max=12,
        help="Number of levels.",
    ),
    log_level: LogLevel = typer.Option(
        LogLevel.warning, "--log-level",
        help="Logging verbosity.",
    ),
    log_file: Optional[Path] = typer.Option(
        None, "--log-file",
        help="Also write logs to this file.",
    ),
) -> None:
    """Towers of Hanoi."""
    setup_logging(getattr(logging, log_level.value.upper()), log_file)
    config = GameConfig(min_disks=min_disks, max_level=levels)

    if level is not None and level > config.max_level:
        raise typer.BadParameter(
            f"Level must be at most {config.max_level}.", param_hint="--level"
        )

    if player is not None:
        from backend.models.player import normalise_name

        try:
            player = normalise_name(player)
        except ValueError as exc:
            raise typer.BadParameter(str(exc), param_hint="--player")

    if scores:
        _print_highscores(data_dir, config)
        return

    if frontend is None:
        _menu_loop(data_dir, config, player)
        return

    mod = importlib.import_module(_RUNNERS[frontend])
    mod.run(data_dir=data_dir, config=config, player=player, level=level)


if __name__ == "__main__":
    app()
