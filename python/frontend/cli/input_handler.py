"""Single-keypress reader for the terminal frontend.

Keys are turned into action names (``"undo"``, ``"left"``...) so the
game loop never sees raw bytes. Digits pass through unchanged; they
pick towers. Works on macOS / Linux (termios) and Windows (msvcrt).
"""

from __future__ import annotations

import os
import sys
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager

# -- key table ----------------------------------------------------------------

_BINDINGS: dict[str, str] = {
    "quit": "qQ\x03",  # \x03 is Ctrl-C
    "restart": "rR",
    "undo": "uUzZ",
    "hint": "nN",
    "solve": "vV",
    "scores": "lL",
    "player": "pP",
    "sound": "sS",
    "help": "h?",
    "enter": "\r\n",
}

KEYMAP: dict[str, str] = {
    ch: action for action, chars in _BINDINGS.items() for ch in chars
}

_CSI_ARROWS = {"A": "up", "B": "down", "C": "right", "D": "left"}

ESCAPE_WAIT = 0.1


def resolve(ch: str) -> str:
    """Map one typed character to an action name.

    Unbound printable characters come back as themselves; anything else
    maps to ``""``.
    """
    if ch in KEYMAP:
        return KEYMAP[ch]
    return ch if ch.isprintable() else ""


def decode_escape(read_next: Callable[[], str | None]) -> str:
    """Finish an ``ESC`` sequence using *read_next* for the following bytes.

    *read_next* returns ``None`` when no byte arrives in time. A lone
    Escape counts as quit.
    """
    second = read_next()
    if second != "[":
        return "quit"
    third = read_next()
    return _CSI_ARROWS.get(third or "", "")


# -- platform readers ---------------------------------------------------------


@contextmanager
def _raw_mode(fd: int) -> Iterator[None]:
    import termios
    import tty

    saved = termios.tcgetattr(fd)
    try:
        tty.setraw(fd)
        yield
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, saved)


def _read_unix(timeout: float | None) -> str | None:
    import select

    fd = sys.stdin.fileno()

    def read_byte(wait: float | None) -> str | None:
        # os.read is unbuffered, so select() still sees the rest of an
        # escape sequence.
        ready, _, _ = select.select([fd], [], [], wait)
        if not ready:
            return None
        return os.read(fd, 1).decode("utf-8", errors="ignore")

    with _raw_mode(fd):
        ch = read_byte(timeout)
        if ch is None:
            return None
        if ch == "\x1b":
            return decode_escape(lambda: read_byte(ESCAPE_WAIT))
        return resolve(ch)


def _read_windows(timeout: float | None) -> str | None:
    import msvcrt  # type: ignore[import-not-found]

    if timeout is not None:
        deadline = time.monotonic() + timeout
        while not msvcrt.kbhit():
            if time.monotonic() >= deadline:
                return None
            time.sleep(0.02)

    ch = msvcrt.getwch()
    if ch in ("\x00", "\xe0"):
        # Extended key: arrows arrive as a second code.
        return {"H": "up", "P": "down", "M": "right", "K": "left"}.get(msvcrt.getwch(), "")
    if ch == "\x1b":
        return "quit"
    return resolve(ch)


_read = _read_windows if os.name == "nt" else _read_unix


# -- public API ---------------------------------------------------------------


def get_key() -> str:
    """Block until a key is pressed and return its action name.

    Besides the names in ``KEYMAP`` this can return ``"up"``,
    ``"down"``, ``"left"`` and ``"right"`` for the arrow keys, an
    unbound printable character (``"1"``) or ``""``.
    """
    action = _read(None)
    assert action is not None
    return action


def get_key_timeout(timeout: float) -> str | None:
    """Like ``get_key`` but gives up after *timeout* seconds with ``None``."""
    return _read(timeout)
