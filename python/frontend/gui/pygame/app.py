"""Pygame GUI frontend — fully self-contained.

Includes main menu with level selection, gameplay with click-to-pick
and click-to-drop towers, win screen, completion table and the
leaderboard.  No terminal interaction required.
"""

from __future__ import annotations

import enum
import logging
from pathlib import Path

import pygame

from backend.config import DATA_DIR, PROGRESS_FILENAME, GameConfig
from backend.engine import events
from backend.engine.events import GameEvent
from backend.engine.gamerules import MoveRejection
from backend.engine.session import GameSession
from backend.models.errors import EmptyHistoryError, EmptyTowerError, LevelCompleteError
from backend.storage import ProgressStore
from frontend.common import REJECTION_TEXT, Stopwatch, format_time

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Catppuccin Mocha palette
# ---------------------------------------------------------------------------
COL_BASE = (30, 30, 46)
COL_MANTLE = (24, 24, 37)
COL_SURFACE0 = (49, 50, 68)
COL_SURFACE1 = (69, 71, 90)
COL_OVERLAY0 = (108, 112, 134)
COL_TEXT = (205, 214, 244)
COL_SUBTEXT = (166, 173, 200)
COL_BLUE = (137, 180, 250)
COL_LAVENDER = (180, 190, 254)
COL_GREEN = (166, 227, 161)
COL_PINK = (245, 194, 231)
COL_YELLOW = (249, 226, 175)
COL_RED = (243, 139, 168)

DISK_COLOURS = [
    COL_RED, (250, 179, 135), COL_YELLOW, COL_GREEN, (148, 226, 213),
    COL_BLUE, COL_LAVENDER, COL_PINK, (203, 166, 247), (242, 205, 205),
]

# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------
WIN_W, WIN_H = 720, 560
MARGIN = 20
TOWER_W = (WIN_W - 2 * MARGIN) // 3
BASE_Y = 380
DISK_H = 22
PEG_W = 8


# ---------------------------------------------------------------------------
# Screen enum
# ---------------------------------------------------------------------------
class _Screen(enum.Enum):
    MENU = "menu"
    PLAYING = "playing"
    WIN = "win"
    COMPLETE = "complete"
    SCORES = "scores"


# ---------------------------------------------------------------------------
# Simple clickable button
# ---------------------------------------------------------------------------
class _Btn:
    __slots__ = ("rect", "text", "font", "bg", "hover", "fg", "radius", "_hot")

    def __init__(
        self,
        rect: tuple[int, int, int, int],
        text: str,
        font: pygame.font.Font,
        *,
        bg: tuple = COL_SURFACE0,
        hover: tuple = COL_SURFACE1,
        fg: tuple = COL_TEXT,
        radius: int = 8,
    ) -> None:
        self.rect = pygame.Rect(rect)
        self.text = text
        self.font = font
        self.bg = bg
        self.hover = hover
        self.fg = fg
        self.radius = radius
        self._hot = False

    def draw(self, surf: pygame.Surface) -> None:
        c = self.hover if self._hot else self.bg
        pygame.draw.rect(surf, c, self.rect, border_radius=self.radius)
        lbl = self.font.render(self.text, True, self.fg)
        surf.blit(
            lbl,
            (
                self.rect.centerx - lbl.get_width() // 2,
                self.rect.centery - lbl.get_height() // 2,
            ),
        )

    def motion(self, pos: tuple[int, int]) -> None:
        self._hot = self.rect.collidepoint(pos)

    def hit(self, pos: tuple[int, int]) -> bool:
        return self.rect.collidepoint(pos)


# ---------------------------------------------------------------------------
# Centring helpers
# ---------------------------------------------------------------------------
def _cx(w: int) -> int:
    return (WIN_W - w) // 2


def _blit_center(surf: pygame.Surface, rendered: pygame.Surface, y: int) -> None:
    surf.blit(rendered, (_cx(rendered.get_width()), y))


def _tower_rect(tower: int) -> pygame.Rect:
    return pygame.Rect(MARGIN + tower * TOWER_W, 90, TOWER_W, BASE_Y - 90 + 14)


# ---------------------------------------------------------------------------
# Main application
# ---------------------------------------------------------------------------
class PygameApp:
    def __init__(self, session: GameSession) -> None:
        self._session = session
        self._sel_level = session.player.current_level
        self._stopwatch = Stopwatch()

        pygame.init()
        self._surf = pygame.display.set_mode((WIN_W, WIN_H))
        pygame.display.set_caption("Towers of Hanoi")
        self._clock = pygame.time.Clock()

        # Fonts
        self._f_big = pygame.font.SysFont("Helvetica", 38, bold=True)
        self._f_title = pygame.font.SysFont("Helvetica", 22, bold=True)
        self._f_body = pygame.font.SysFont("Helvetica", 16)
        self._f_btn = pygame.font.SysFont("Helvetica", 17, bold=True)
        self._f_btn_sm = pygame.font.SysFont("Helvetica", 14, bold=True)
        self._f_small = pygame.font.SysFont("Helvetica", 13)
        self._f_score = pygame.font.SysFont("Courier", 16)

        self._screen = _Screen.MENU
        self._status_msg = ""
        self._scores_level = self._sel_level

        self._build_menu_btns()
        self._build_game_btns()
        self._build_win_btns()
        self._back_btn = _Btn((_cx(180), WIN_H - 64, 180, 46), "B A C K", self._f_btn_sm)

    # ── buttons ─────────────────────────────────────────────────────────────

    def _build_menu_btns(self) -> None:
        levels = self._session.levels.levels()
        bw, gap = 64, 8
        total_w = len(levels) * bw + (len(levels) - 1) * gap
        sx = _cx(total_w)
        self._level_btns: dict[int, _Btn] = {
            lvl.number: _Btn((sx + i * (bw + gap), 230, bw, 46), str(lvl.number), self._f_btn)
            for i, lvl in enumerate(levels)
        }

        bw_lg = 220
        self._play_btn = _Btn(
            (_cx(bw_lg), 330, bw_lg, 50), "P L A Y", self._f_btn,
            bg=COL_BLUE, hover=COL_LAVENDER, fg=COL_BASE,
        )
        self._hs_btn = _Btn((_cx(bw_lg), 394, bw_lg, 42), "HIGH SCORES", self._f_btn_sm)
        self._quit_btn = _Btn(
            (_cx(bw_lg), 450, bw_lg, 42), "Q U I T", self._f_btn_sm,
            bg=COL_RED, hover=(255, 170, 185), fg=COL_BASE,
        )
        self._menu_all = [*self._level_btns.values(), self._play_btn, self._hs_btn, self._quit_btn]

    def _build_game_btns(self) -> None:
        bw, gap, y = 120, 10, BASE_Y + 50
        sx = _cx(4 * bw + 3 * gap)
        self._undo_btn = _Btn((sx, y, bw, 36), "UNDO (U)", self._f_btn_sm)
        self._reset_btn = _Btn(
            (sx + bw + gap, y, bw, 36), "RESET (R)", self._f_btn_sm,
            bg=COL_PINK, hover=(245, 210, 227), fg=COL_BASE,
        )
        self._hint_btn = _Btn(
            (sx + 2 * (bw + gap), y, bw, 36), "HINT (N)", self._f_btn_sm,
            bg=COL_YELLOW, hover=(255, 240, 200), fg=COL_BASE,
        )
        self._menu_btn = _Btn((sx + 3 * (bw + gap), y, bw, 36), "MENU (M)", self._f_btn_sm)
        self._game_btns = [self._undo_btn, self._reset_btn, self._hint_btn, self._menu_btn]

    def _build_win_btns(self) -> None:
        bw = 220
        self._win_next = _Btn(
            (_cx(bw), 360, bw, 50), "NEXT LEVEL", self._f_btn,
            bg=COL_GREEN, hover=(190, 240, 190), fg=COL_BASE,
        )
        self._win_again = _Btn((_cx(bw), 422, bw, 42), "PLAY AGAIN", self._f_btn_sm)
        self._win_menu = _Btn((_cx(bw), 476, bw, 42), "M E N U", self._f_btn_sm)

    # ── engine glue ─────────────────────────────────────────────────────────

    def _on_event(self, event: GameEvent) -> None:
        if event.type == events.TIMER_STARTED:
            self._stopwatch.start()
        elif event.type == events.LEVEL_STARTED:
            self._stopwatch.reset()
            self._status_msg = ""
        elif event.type == events.INVALID_MOVE:
            reason = MoveRejection(event.payload["reason"])
            self._status_msg = REJECTION_TEXT.get(reason, reason.value)
        elif event.type == events.LEVEL_WON:
            self._stopwatch.pause()
            record = self._session.last_win
            self._screen = (
                _Screen.COMPLETE
                if record is not None and record.game_complete and record.newly_completed
                else _Screen.WIN
            )

    def _start_game(self, level: int | None = None) -> None:
        game = self._session.start_level(level)
        # Subscribed after the session so ``last_win`` is set when we see LEVEL_WON.
        game.subscribe(self._on_event)
        self._stopwatch.reset()
        self._status_msg = ""
        self._screen = _Screen.PLAYING

    def _press_tower(self, tower: int) -> None:
        game = self._session.game
        assert game is not None
        selected = game.selected_tower
        if selected is None or selected == tower:
            try:
                game.select_disk(tower)
            except EmptyTowerError:
                self._status_msg = f"Tower {tower + 1} is empty."
            return
        game.tick(self._stopwatch.elapsed)
        if game.attempt_move(tower).accepted:
            self._status_msg = ""

    def _do_undo(self) -> None:
        game = self._session.game
        assert game is not None
        try:
            move = game.undo()
            self._status_msg = f"Undid {move.source + 1} → {move.target + 1}"
        except (EmptyHistoryError, LevelCompleteError) as exc:
            self._status_msg = str(exc)

    def _do_hint(self) -> None:
        game = self._session.game
        assert game is not None
        game.tick(self._stopwatch.elapsed)
        step = self._session.hint()
        if step is None:
            self._status_msg = "Already solved!"
            return
        self._status_msg = f"Hint: {step[0] + 1} → {step[1] + 1}  (not scored)"

    def _change_level(self, step: int) -> None:
        session = self._session
        moved = session.next_level() if step > 0 else session.previous_level()
        if moved:
            session.game.subscribe(self._on_event)  # type: ignore[union-attr]
            self._stopwatch.reset()
            self._status_msg = ""
        else:
            self._status_msg = "That level is locked."

    # ── drawing ─────────────────────────────────────────────────────────────

    def _draw_menu(self) -> None:
        self._surf.fill(COL_BASE)
        session = self._session
        player = session.player

        _blit_center(self._surf, self._f_big.render("TOWERS  OF  HANOI", True, COL_TEXT), 60)
        _blit_center(
            self._surf,
            self._f_body.render(f"Player: {player.name}", True, COL_PINK),
            120,
        )
        lvl = session.levels.level(self._sel_level)
        _blit_center(
            self._surf,
            self._f_body.render(
                f"Level {lvl.number}: {lvl.disk_count} disks, optimal {lvl.optimal_moves} moves",
                True,
                COL_SUBTEXT,
            ),
            196,
        )

        for n, btn in self._level_btns.items():
            unlocked = session.levels.is_unlocked(player, n)
            if n == self._sel_level:
                btn.bg, btn.fg = COL_BLUE, COL_BASE
            elif n in player.completed_levels:
                btn.bg, btn.fg = COL_GREEN, COL_BASE
            elif unlocked:
                btn.bg, btn.fg = COL_SURFACE0, COL_TEXT
            else:
                btn.bg, btn.fg = COL_MANTLE, COL_OVERLAY0
            btn.draw(self._surf)

        self._play_btn.draw(self._surf)
        self._hs_btn.draw(self._surf)
        self._quit_btn.draw(self._surf)

    def _draw_towers(self) -> None:
        game = self._session.game
        assert game is not None
        towers = game.state.towers
        max_w = TOWER_W - 20
        unit = max_w / max(1, game.disk_count)

        pygame.draw.rect(
            self._surf, COL_MANTLE,
            pygame.Rect(MARGIN, BASE_Y, WIN_W - 2 * MARGIN, 14), border_radius=4,
        )
        for t in range(3):
            area = _tower_rect(t)
            if t == game.selected_tower:
                pygame.draw.rect(self._surf, COL_SURFACE0, area, border_radius=10)
            pygame.draw.rect(
                self._surf, COL_SURFACE1,
                pygame.Rect(area.centerx - PEG_W // 2, 110, PEG_W, BASE_Y - 110),
                border_radius=3,
            )
            for i, disk in enumerate(towers.pegs[t]):
                w = int(unit * disk)
                rect = pygame.Rect(area.centerx - w // 2, BASE_Y - (i + 1) * DISK_H, w, DISK_H - 2)
                col = DISK_COLOURS[(disk - 1) % len(DISK_COLOURS)]
                if t == game.selected_tower and i == len(towers.pegs[t]) - 1:
                    rect.y -= 12
                pygame.draw.rect(self._surf, col, rect, border_radius=6)

    def _draw_game(self) -> None:
        self._surf.fill(COL_BASE)
        game = self._session.game
        assert game is not None

        _blit_center(
            self._surf,
            self._f_title.render(
                f"Level {game.level}  —  {game.disk_count} disks", True, COL_TEXT
            ),
            14,
        )
        _blit_center(
            self._surf,
            self._f_body.render(
                f"Moves: {game.moves} / {game.optimal_moves}    "
                f"Time: {format_time(self._stopwatch.elapsed)}",
                True,
                COL_PINK,
            ),
            48,
        )

        self._draw_towers()
        for btn in self._game_btns:
            btn.draw(self._surf)

        if self._status_msg:
            _blit_center(
                self._surf,
                self._f_small.render(self._status_msg, True, COL_YELLOW),
                BASE_Y + 22,
            )

        _blit_center(
            self._surf,
            self._f_small.render(
                "Click or 1/2/3  pick & drop     ← →  level     Esc  menu",
                True,
                COL_OVERLAY0,
            ),
            WIN_H - 30,
        )

    def _draw_win(self) -> None:
        self._surf.fill(COL_BASE)
        record = self._session.last_win
        assert record is not None
        stats = record.stats

        _blit_center(
            self._surf,
            self._f_big.render(f"★  LEVEL {stats.level} DONE  ★", True, COL_GREEN),
            60,
        )
        info = [
            (f"Moves:  {stats.moves}  (optimal {stats.optimal_moves})", COL_YELLOW),
            (f"Efficiency:  {stats.efficiency}%", COL_YELLOW),
            (f"Time:  {format_time(stats.elapsed_time)}", COL_YELLOW),
        ]
        if not record.scored:
            info.append(("Hint used: not scored", COL_PINK))
        if record.rank is not None:
            info.append((f"Leaderboard:  #{record.rank}", COL_SUBTEXT))
        if record.personal_best:
            info.append(("New personal best!", COL_GREEN))
        y = 140
        for txt, col in info:
            _blit_center(self._surf, self._f_title.render(txt, True, col), y)
            y += 40

        if self._has_next():
            self._win_next.draw(self._surf)
        self._win_again.draw(self._surf)
        self._win_menu.draw(self._surf)

    def _draw_complete(self) -> None:
        self._surf.fill(COL_BASE)
        session = self._session
        _blit_center(
            self._surf,
            self._f_big.render("ALL  LEVELS  COMPLETE", True, COL_GREEN),
            24,
        )
        y = 90
        header = f"{'Level':>5}   {'Moves':>6}   {'Optimal':>7}   {'Eff.':>5}   {'Time':>6}"
        self._surf.blit(self._f_score.render(header, True, COL_BLUE), (120, y))
        y += 28
        for row in session.levels.summary(session.player):
            if row.best is None:
                line = f"{row.level.number:>5}   {'-':>6}   {row.level.optimal_moves:>7}   {'-':>5}   {'-':>6}"
            else:
                line = (
                    f"{row.level.number:>5}   {row.best.moves:>6}   {row.level.optimal_moves:>7}"
                    f"   {row.efficiency:>4}%   {format_time(row.best.time):>6}"
                )
            self._surf.blit(self._f_score.render(line, True, COL_SUBTEXT), (120, y))
            y += 24
        self._back_btn.draw(self._surf)

    def _draw_scores(self) -> None:
        self._surf.fill(COL_BASE)
        session = self._session
        level = self._scores_level
        _blit_center(self._surf, self._f_big.render("HIGH  SCORES", True, COL_TEXT), 24)
        _blit_center(
            self._surf,
            self._f_btn_sm.render(
                f"←  Level {level}  ({session.levels.disk_count_for_level(level)} disks)  →",
                True,
                COL_BLUE,
            ),
            80,
        )

        scores = session.store.ledger.scores_for(level)
        y = 120
        if not scores:
            _blit_center(
                self._surf,
                self._f_body.render("No entries yet.", True, COL_OVERLAY0),
                y + 30,
            )
        for i, e in enumerate(scores, 1):
            you = e.player == session.player.name
            row = f"{i:>2}.  {e.player:<15}  {e.moves:>5} moves   {format_time(e.time)}   ({e.date})"
            col = COL_GREEN if you else COL_SUBTEXT
            self._surf.blit(self._f_score.render(row, True, col), (60, y))
            y += 26

        self._back_btn.draw(self._surf)

    # ── event handling ──────────────────────────────────────────────────────

    def _has_next(self) -> bool:
        game = self._session.game
        if game is None or game.level is None:
            return False
        return self._session.levels.is_unlocked(self._session.player, game.level + 1)

    def _ev_menu(self, ev: pygame.event.Event) -> bool:
        levels = self._session.levels
        player = self._session.player
        if ev.type == pygame.MOUSEMOTION:
            for b in self._menu_all:
                b.motion(ev.pos)
        elif ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 1:
            for n, b in self._level_btns.items():
                if b.hit(ev.pos) and levels.is_unlocked(player, n):
                    self._sel_level = n
                    return True
            if self._play_btn.hit(ev.pos):
                self._start_game(self._sel_level)
            elif self._hs_btn.hit(ev.pos):
                self._scores_level = self._sel_level
                self._screen = _Screen.SCORES
            elif self._quit_btn.hit(ev.pos):
                return False
        elif ev.type == pygame.KEYDOWN:
            if ev.key == pygame.K_RETURN:
                self._start_game(self._sel_level)
            elif ev.key == pygame.K_LEFT:
                self._sel_level = max(1, self._sel_level - 1)
            elif ev.key == pygame.K_RIGHT and levels.is_unlocked(player, self._sel_level + 1):
                self._sel_level += 1
            elif ev.key in (pygame.K_q, pygame.K_ESCAPE):
                return False
        return True

    def _ev_game(self, ev: pygame.event.Event) -> bool:
        if ev.type == pygame.MOUSEMOTION:
            for btn in self._game_btns:
                btn.motion(ev.pos)
        elif ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 1:
            if self._undo_btn.hit(ev.pos):
                self._do_undo()
            elif self._reset_btn.hit(ev.pos):
                self._session.reset_level()
            elif self._hint_btn.hit(ev.pos):
                self._do_hint()
            elif self._menu_btn.hit(ev.pos):
                self._screen = _Screen.MENU
            else:
                for t in range(3):
                    if _tower_rect(t).collidepoint(ev.pos):
                        self._press_tower(t)
                        break
        elif ev.type == pygame.KEYDOWN:
            _towers = {pygame.K_1: 0, pygame.K_2: 1, pygame.K_3: 2}
            if ev.key in _towers:
                self._press_tower(_towers[ev.key])
            elif ev.key in (pygame.K_u, pygame.K_z):
                self._do_undo()
            elif ev.key == pygame.K_r:
                self._session.reset_level()
            elif ev.key == pygame.K_n:
                self._do_hint()
            elif ev.key == pygame.K_LEFT:
                self._change_level(-1)
            elif ev.key == pygame.K_RIGHT:
                self._change_level(1)
            elif ev.key in (pygame.K_m, pygame.K_ESCAPE):
                self._sel_level = self._session.player.current_level
                self._screen = _Screen.MENU
        return True

    def _ev_win(self, ev: pygame.event.Event) -> bool:
        if ev.type == pygame.MOUSEMOTION:
            for b in (self._win_next, self._win_again, self._win_menu):
                b.motion(ev.pos)
        elif ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 1:
            if self._has_next() and self._win_next.hit(ev.pos):
                self._start_game(self._session.player.current_level + 1)
            elif self._win_again.hit(ev.pos):
                self._start_game()
            elif self._win_menu.hit(ev.pos):
                self._sel_level = self._session.player.current_level
                self._screen = _Screen.MENU
        elif ev.type == pygame.KEYDOWN:
            if ev.key == pygame.K_RETURN and self._has_next():
                self._start_game(self._session.player.current_level + 1)
            elif ev.key == pygame.K_r:
                self._start_game()
            elif ev.key in (pygame.K_m, pygame.K_ESCAPE):
                self._sel_level = self._session.player.current_level
                self._screen = _Screen.MENU
        return True

    def _ev_back(self, ev: pygame.event.Event) -> bool:
        if ev.type == pygame.MOUSEMOTION:
            self._back_btn.motion(ev.pos)
        elif ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 1:
            if self._back_btn.hit(ev.pos):
                self._screen = _Screen.MENU
        elif ev.type == pygame.KEYDOWN:
            if self._screen == _Screen.SCORES and ev.key == pygame.K_LEFT:
                self._scores_level = max(1, self._scores_level - 1)
            elif self._screen == _Screen.SCORES and ev.key == pygame.K_RIGHT:
                self._scores_level = min(self._session.levels.max_level, self._scores_level + 1)
            elif ev.key in (pygame.K_ESCAPE, pygame.K_BACKSPACE, pygame.K_m):
                self._screen = _Screen.MENU
        return True

    # ── main loop ───────────────────────────────────────────────────────────

    def run_loop(self) -> None:
        _dispatch = {
            _Screen.MENU: self._ev_menu,
            _Screen.PLAYING: self._ev_game,
            _Screen.WIN: self._ev_win,
            _Screen.COMPLETE: self._ev_back,
            _Screen.SCORES: self._ev_back,
        }
        _draw = {
            _Screen.MENU: self._draw_menu,
            _Screen.PLAYING: self._draw_game,
            _Screen.WIN: self._draw_win,
            _Screen.COMPLETE: self._draw_complete,
            _Screen.SCORES: self._draw_scores,
        }

        running = True
        while running:
            for ev in pygame.event.get():
                if ev.type == pygame.QUIT:
                    running = False
                    break
                handler = _dispatch.get(self._screen)
                if handler and not handler(ev):
                    running = False
                    break

            game = self._session.game
            if self._screen == _Screen.PLAYING and game is not None:
                game.tick(self._stopwatch.elapsed)

            drawer = _draw.get(self._screen)
            if drawer:
                drawer()
            pygame.display.flip()
            self._clock.tick(30)

        pygame.quit()


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------
def run(
    data_dir: Path = DATA_DIR,
    config: GameConfig | None = None,
    player: str | None = None,
    level: int | None = None,
) -> None:
    """Launch the Pygame GUI (opens directly to the menu)."""
    store = ProgressStore(data_dir / PROGRESS_FILENAME, config)
    session = GameSession(store, player)
    if level is not None and not session.levels.select_level(session.player, level):
        logger.warning("Level %d is not unlocked for %s", level, session.player.name)
    app = PygameApp(session)
    app.run_loop()
