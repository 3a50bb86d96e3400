"""Rich terminal frontend — towers, tables, colours, and panels.

Uses the ``rich`` library for styled output and the shared single-key
input handler.  Includes a built-in menu for level selection, play,
study, the leaderboard and switching players.
"""

from __future__ import annotations

import logging
import sys
import time
from pathlib import Path

import rich.box
from rich.align import Align
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from backend.config import PROGRESS_FILENAME, GameConfig
from backend.engine import events
from backend.engine.events import GameEvent
from backend.engine.gamegenerator import GameGenerator
from backend.engine.gamerules import MoveRejection
from backend.engine.gameplay import GamePlay
from backend.engine.gamesolver import Solver
from backend.engine.session import GameSession
from backend.models.errors import EmptyHistoryError, EmptyTowerError, LevelCompleteError
from backend.models.towers import Towers
from backend.storage import ProgressStore
from frontend.cli.input_handler import get_key, get_key_timeout
from frontend.common import REJECTION_TEXT, Stopwatch, format_time

logger = logging.getLogger(__name__)

console = Console()

_DISK_STYLES = [
    "bold red", "bold yellow", "bold green", "bold cyan", "bold blue",
    "bold magenta", "bright_red", "bright_yellow", "bright_green", "bright_cyan",
]

_TOWER_KEYS = {"1": 0, "2": 1, "3": 2}


# -- tower rendering ----------------------------------------------------------


def _render_towers(towers: Towers, disk_count: int, selected: int | None = None) -> Table:
    """Return a Rich Table with one column per tower."""
    width = 2 * disk_count + 1
    table = Table(
        show_header=True,
        show_edge=True,
        box=rich.box.HEAVY,
        border_style="bright_blue",
        padding=(0, 1),
    )
    for i in range(3):
        style = "bold black on green" if i == selected else "bold"
        table.add_column(f"[{style}] {i + 1} [/]", width=width, justify="center")

    for row in range(disk_count - 1, -1, -1):
        cells: list[Text] = []
        for tower, peg in enumerate(towers.pegs):
            if row < len(peg):
                disk = peg[row]
                style = _DISK_STYLES[(disk - 1) % len(_DISK_STYLES)]
                if tower == selected and row == len(peg) - 1:
                    style = "reverse " + style
                cells.append(Text("█" * (2 * disk - 1), style=style))
            else:
                cells.append(Text("│", style="dim"))
        table.add_row(*cells)

    return table


# -- host state ---------------------------------------------------------------


class _Host:
    """Keeps the clock and status line in step with engine events."""

    def __init__(self) -> None:
        self.clock = Stopwatch()
        self.status = ""

    def attach(self, game: GamePlay) -> GamePlay:
        self.clock.reset()
        self.status = ""
        game.subscribe(self.on_event)
        return game

    def on_event(self, event: GameEvent) -> None:
        if event.type == events.TIMER_STARTED:
            self.clock.start()
        elif event.type == events.LEVEL_WON:
            self.clock.pause()
        elif event.type == events.LEVEL_STARTED:
            self.clock.reset()
        elif event.type == events.INVALID_MOVE:
            self.status = f"[red]{_rejection(event.payload['reason'])}[/red]"
        elif event.type == events.MOVE_UNDONE:
            move = event.payload["move"]
            self.status = (
                f"[cyan]Undid[/cyan] disk {move.disk}: "
                f"{move.source + 1} → {move.target + 1}"
            )


def _rejection(reason: str) -> str:
    return REJECTION_TEXT.get(MoveRejection(reason), reason)


def _press_tower(game: GamePlay, host: _Host, tower: int) -> None:
    """Select on the first press, move on the second."""
    selected = game.selected_tower
    if selected is None or selected == tower:
        try:
            game.select_disk(tower)
        except EmptyTowerError:
            host.status = f"[yellow]Tower {tower + 1} is empty.[/yellow]"
        return
    game.tick(host.clock.elapsed)
    game.attempt_move(tower)


def _undo(game: GamePlay, host: _Host) -> None:
    try:
        game.undo()
    except EmptyHistoryError:
        host.status = "[yellow]Nothing to undo.[/yellow]"
    except LevelCompleteError:
        host.status = "[yellow]Level already complete.[/yellow]"


# -- solver helpers -----------------------------------------------------------


def _hint_text(step: tuple[int, int] | None) -> str:
    if step is None:
        return "[green]Already solved![/green]"
    source, target = step
    return f"[cyan]Hint:[/cyan] moved [bold]{source + 1} → {target + 1}[/bold]"


def _apply_hint(game: GamePlay, host: _Host) -> str:
    step = Solver.hint(game.state.towers)
    if step is not None:
        game.tick(host.clock.elapsed)
        game.move(*step)
    return _hint_text(step)


def _auto_solve(game: GamePlay, host: _Host) -> str:
    steps = Solver.solve(game.state.towers)
    if not steps:
        return "[green]Already solved![/green]"

    for i, (source, target) in enumerate(steps):
        game.move(source, target)
        console.clear()
        table = _render_towers(game.state.towers, game.disk_count)

        progress = Text()
        progress.append(f"  Solving… move {i + 1}/{len(steps)} ", style="bold cyan")
        progress.append(f"({source + 1} → {target + 1})", style="dim")

        panel = Panel(
            Align.center(table),
            title=f"[bold cyan]Auto-Solve  {game.disk_count} disks[/bold cyan]",
            border_style="cyan",
            padding=(1, 2),
        )
        console.print()
        console.print(Align.center(panel))
        console.print(Align.center(progress))
        sys.stdout.flush()
        time.sleep(max(0.02, 0.6 / len(steps)))

    return f"[bold green]Solved in {len(steps)} moves![/bold green]"


# -- menu screen --------------------------------------------------------------


def _draw_menu(session: GameSession, sel_level: int) -> None:
    """Draw the main menu."""
    console.clear()
    player = session.player

    levels = Text()
    for lvl in session.levels.levels():
        n = lvl.number
        if n > 1:
            levels.append(" ")
        if n == sel_level:
            levels.append(f" {n} ", style="bold black on green")
        elif n in player.completed_levels:
            levels.append(f" {n}✓", style="green")
        elif session.levels.is_unlocked(player, n):
            levels.append(f" {n} ", style="white")
        else:
            levels.append(f" {n} ", style="dim strike")

    lvl = session.levels.level(sel_level)
    detail = Text(
        f"  Level {sel_level}: {lvl.disk_count} disks, best possible {lvl.optimal_moves} moves",
        style="dim",
    )
    nav = Text("  ← →  change level", style="dim")

    opts = Text()
    opts.append("  1", style="bold cyan")
    opts.append("  Play    ")
    opts.append("2", style="bold yellow")
    opts.append("  Study    ")
    opts.append("L", style="dim bold")
    opts.append("  Scores    ", style="dim")
    opts.append("P", style="dim bold")
    opts.append("  Player    ", style="dim")
    opts.append("S", style="dim bold")
    opts.append(f"  Sound {'on' if player.sound_enabled else 'off'}    ", style="dim")
    opts.append("Q", style="dim bold")
    opts.append("  Quit", style="dim")

    who = Text()
    who.append("  Player: ", style="dim")
    who.append(player.name, style="bold yellow")
    who.append(
        f"   ({len(player.completed_levels)}/{session.levels.max_level} levels completed)",
        style="dim",
    )

    body = Group(
        Align.center(who),
        Text(""),
        Align.center(levels),
        Align.center(detail),
        Align.center(nav),
        Text(""),
        Align.center(opts),
        Text(""),
    )

    panel = Panel(
        body,
        title="[bold]T O W E R S   O F   H A N O I[/bold]",
        border_style="bright_blue",
        padding=(1, 4),
    )

    console.print()
    console.print(Align.center(panel))


def _ask_player(session: GameSession) -> None:
    console.clear()
    name = console.input("\n  [bold]Player name:[/bold] ").strip()
    if not name:
        return
    try:
        session.switch_player(name)
    except ValueError as exc:
        console.print(f"  [red]{exc}[/red]")
        time.sleep(1.0)


# -- game screens -------------------------------------------------------------


def _draw_game(game: GamePlay, host: _Host, title: str, study: bool = False) -> None:
    console.clear()

    table = _render_towers(game.state.towers, game.disk_count, game.selected_tower)

    stats = Text()
    stats.append("  Moves: ", style="dim")
    stats.append(str(game.moves), style="bold yellow")
    stats.append(f" / {game.optimal_moves}", style="dim")
    if not study:
        stats.append("    Time: ", style="dim")
        stats.append(format_time(host.clock.elapsed), style="bold yellow")

    controls = Text()
    controls.append("  1 2 3", style="bold cyan")
    controls.append("  pick / drop   ", style="dim")
    controls.append("U", style="bold cyan")
    controls.append("  undo   ", style="dim")
    controls.append("N", style="bold cyan")
    controls.append("  hint   ", style="dim")
    if study:
        controls.append("V", style="bold cyan")
        controls.append("  solve   ", style="dim")
        controls.append("R", style="bold yellow")
        controls.append("  scramble   ", style="dim")
    else:
        controls.append("R", style="bold cyan")
        controls.append("  restart   ", style="dim")
        controls.append("←→", style="bold cyan")
        controls.append("  level   ", style="dim")
    controls.append("Q", style="bold cyan")
    controls.append("  back", style="dim")

    panel = Panel(
        Align.center(table),
        title=title,
        border_style="yellow" if study else "bright_blue",
        padding=(1, 2),
    )

    console.print()
    console.print(Align.center(panel))
    # Save cursor position right before the stats line so _update_time()
    # can later restore to this exact spot and overwrite only this line.
    sys.stdout.write("\033[s")
    sys.stdout.flush()
    console.print(Align.center(stats))
    if host.status:
        console.print(Align.center(Text.from_markup(f"  {host.status}")))
    console.print(Align.center(controls))


def _update_time(game: GamePlay, host: _Host) -> None:
    """Overwrite just the stats line using the saved cursor position.

    Uses raw ANSI codes (bypassing Rich) so only the single stats
    line is repainted — no flicker from a full redraw.
    """
    _DIM = "\033[2m"
    _YB = "\033[33;1m"
    _RS = "\033[0m"

    clock = format_time(host.clock.elapsed)
    stats_raw = (
        f"{_DIM}Moves: {_RS}{_YB}{game.moves}{_RS}{_DIM} / {game.optimal_moves}{_RS}"
        f"    {_DIM}Time: {_RS}{_YB}{clock}{_RS}"
    )

    # Centre the visible text to match what Rich would produce.
    visible_len = len(f"Moves: {game.moves} / {game.optimal_moves}    Time: {clock}")
    pad = max(0, (console.width - visible_len) // 2)

    sys.stdout.write(f"\033[u\033[K{' ' * pad}{stats_raw}")
    sys.stdout.flush()


def _draw_win(session: GameSession) -> None:
    console.clear()
    game = session.game
    record = session.last_win
    assert game is not None and record is not None
    stats = record.stats

    table = _render_towers(game.state.towers, game.disk_count)

    congrats = Text()
    congrats.append("\n  ★ ", style="bold yellow")
    congrats.append(f"LEVEL {stats.level} COMPLETE!", style="bold green")
    congrats.append(" ★\n", style="bold yellow")

    info = Table.grid(padding=(0, 2))
    info.add_column(style="dim", justify="right")
    info.add_column(style="bold yellow")
    info.add_row("Moves", str(stats.moves))
    info.add_row("Optimal", str(stats.optimal_moves))
    info.add_row("Efficiency", f"{stats.efficiency}%")
    info.add_row("Time", format_time(stats.elapsed_time))
    if not record.scored:
        info.add_row("", "[yellow]Hint used: not scored[/yellow]")
    if record.rank is not None:
        info.add_row("Leaderboard", f"#{record.rank}")
    if record.personal_best:
        info.add_row("", "[green]New personal best![/green]")

    group = Group(Align.center(table), Align.center(congrats), Align.center(info))
    panel = Panel(
        group,
        title=f"[bold green]Level {stats.level}  {stats.disk_count} disks[/bold green]",
        border_style="bold green",
        padding=(1, 2),
    )

    console.print()
    console.print(Align.center(panel))


def _draw_completion(session: GameSession) -> None:
    """Every level done — per-level best results for the player."""
    console.clear()
    table = Table(
        title=f"All levels complete, {session.player.name}!",
        title_style="bold green",
        box=rich.box.ROUNDED,
        border_style="green",
    )
    table.add_column("Level", justify="right")
    table.add_column("Moves", justify="right", style="yellow")
    table.add_column("Optimal", justify="right", style="dim")
    table.add_column("Efficiency", justify="right", style="cyan")
    table.add_column("Time", justify="right", style="yellow")

    for row in session.levels.summary(session.player):
        if row.best is None:
            table.add_row(str(row.level.number), "-", str(row.level.optimal_moves), "-", "-")
        else:
            table.add_row(
                str(row.level.number),
                str(row.best.moves),
                str(row.level.optimal_moves),
                f"{row.efficiency}%",
                format_time(row.best.time),
            )

    console.print()
    console.print(Align.center(table))
    console.print(Align.center(Text("\n  Press any key to go back.\n", style="dim")))
    get_key()


def _draw_highscores(session: GameSession, level: int) -> None:
    """Leaderboard for one level, the active player highlighted."""
    console.clear()
    ledger = session.store.ledger
    lvl = session.levels.level(level)

    hs_table = Table(
        title=f"Level {level}  ({lvl.disk_count} disks, optimal {lvl.optimal_moves})",
        title_style="bold cyan",
        box=rich.box.ROUNDED,
        border_style="dim",
        show_lines=False,
    )
    hs_table.add_column("#", justify="right", style="dim", width=3)
    hs_table.add_column("Player")
    hs_table.add_column("Moves", justify="right", style="yellow")
    hs_table.add_column("Time", justify="right", style="yellow")
    hs_table.add_column("Date", style="dim")

    scores = ledger.scores_for(level)
    for i, e in enumerate(scores, 1):
        you = e.player == session.player.name
        hs_table.add_row(
            str(i),
            f"{e.player} (You)" if you else e.player,
            str(e.moves),
            format_time(e.time),
            e.date,
            style="bold green" if you else None,
        )

    body: Table | Text = hs_table if scores else Text("No entries yet.", style="dim")
    panel = Panel(
        Align.center(body),
        title="[bold]HIGH  SCORES[/bold]",
        border_style="bright_blue",
        padding=(1, 2),
    )

    console.print()
    console.print(Align.center(panel))
    console.print(
        Align.center(Text("\n  ← → level    any other key: back\n", style="dim"))
    )


def _scores_loop(session: GameSession, level: int) -> None:
    while True:
        _draw_highscores(session, level)
        key = get_key()
        if key == "left":
            level = max(1, level - 1)
        elif key == "right":
            level = min(session.levels.max_level, level + 1)
        else:
            return


# -- game loops ---------------------------------------------------------------


def _play_game(session: GameSession, level: int) -> None:
    """Play mode — scored, levels unlock as they are completed."""
    host = _Host()
    game = host.attach(session.start_level(level))

    while True:
        while not game.is_won:
            title = (
                f"[bold cyan]Level {game.level}  "
                f"{game.disk_count} disks[/bold cyan]"
            )
            _draw_game(game, host, title)
            host.status = ""

            # Wait for input with a short timeout so the clock keeps ticking.
            while True:
                key = get_key_timeout(0.5)
                if key is not None:
                    break
                game.tick(host.clock.elapsed)
                _update_time(game, host)

            if key in _TOWER_KEYS:
                _press_tower(game, host, _TOWER_KEYS[key])
            elif key == "undo":
                _undo(game, host)
            elif key == "hint":
                game.tick(host.clock.elapsed)
                step = session.hint()
                host.status = _hint_text(step)
                if step is not None:
                    host.status += " [dim](not scored)[/dim]"
            elif key == "restart":
                session.reset_level()
            elif key in ("left", "right"):
                moved = (
                    session.next_level() if key == "right" else session.previous_level()
                )
                if moved:
                    game = host.attach(session.game)  # type: ignore[arg-type]
                else:
                    host.status = "[yellow]That level is locked.[/yellow]"
            elif key == "quit":
                return

        # -- win ---------------------------------------------------------------
        record = session.last_win
        _draw_win(session)
        if record is not None and record.game_complete and record.newly_completed:
            _draw_completion(session)
            _draw_win(session)

        has_next = session.levels.is_unlocked(session.player, game.level + 1)  # type: ignore[operator]
        prompt = "\n  Press R to play again, "
        if has_next:
            prompt += "Enter for the next level, "
        prompt += "Q to go back.\n"
        console.print(Align.center(Text(prompt, style="dim")))

        while True:
            key = get_key()
            if key == "restart":
                session.reset_level()
                break
            if key in ("enter", "right") and has_next:
                session.next_level()
                game = host.attach(session.game)  # type: ignore[arg-type]
                break
            if key == "quit":
                return


def _study_game(session: GameSession, level: int) -> None:
    """Study mode — random legal position, hint/solve available, unscored."""
    host = _Host()
    disk_count = session.levels.disk_count_for_level(level)
    game = host.attach(GamePlay.from_towers(GameGenerator.generate(disk_count), session.levels))
    title = f"[bold yellow]Study  {disk_count} disks[/bold yellow]"

    while True:
        _draw_game(game, host, title, study=True)
        host.status = ""
        key = get_key()

        if key in _TOWER_KEYS:
            _press_tower(game, host, _TOWER_KEYS[key])
            if game.is_won:
                host.status = f"[bold green]Solved in {game.moves} moves![/bold green]"
        elif key == "undo":
            _undo(game, host)
        elif key == "restart":
            game = host.attach(
                GamePlay.from_towers(GameGenerator.generate(disk_count), session.levels)
            )
            host.status = "[yellow]Scrambled![/yellow]"
        elif key == "hint":
            host.status = _apply_hint(game, host)
        elif key == "solve":
            host.status = _auto_solve(game, host)
        elif key == "quit":
            return


# -- menu loop ----------------------------------------------------------------


def _menu_loop(session: GameSession) -> None:
    sel_level = session.player.current_level

    while True:
        _draw_menu(session, sel_level)
        key = get_key()

        if key == "quit":
            console.clear()
            console.print(Align.center(Text("\nGoodbye!\n", style="bold cyan")))
            return
        elif key == "left":
            sel_level = max(1, sel_level - 1)
        elif key == "right":
            if session.levels.is_unlocked(session.player, sel_level + 1):
                sel_level += 1
        elif key in ("1", "enter"):
            _play_game(session, sel_level)
            sel_level = session.player.current_level
        elif key == "2":
            _study_game(session, sel_level)
        elif key == "scores":
            _scores_loop(session, sel_level)
        elif key == "player":
            _ask_player(session)
            sel_level = session.player.current_level
        elif key == "sound":
            session.toggle_sound()


# -- public entry point -------------------------------------------------------


def run(
    data_dir: Path,
    config: GameConfig | None = None,
    player: str | None = None,
    level: int | None = None,
) -> None:
    """Launch the Rich CLI with interactive menu."""
    store = ProgressStore(data_dir / PROGRESS_FILENAME, config)
    if store.recovered_from_corruption:
        console.print("[yellow]Saved progress was unreadable and has been reset.[/yellow]")

    if player is None and store.active_player is None:
        console.clear()
        player = console.input("\n  [bold]Welcome! Player name:[/bold] ").strip() or None
    session = GameSession(store, player)

    if level is not None:
        if not session.levels.select_level(session.player, level):
            logger.warning("Level %d is not unlocked for %s", level, session.player.name)
    _menu_loop(session)
