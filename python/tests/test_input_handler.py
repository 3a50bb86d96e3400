"""Key decoding for the terminal frontend (no terminal needed)."""

from __future__ import annotations

import pytest

from frontend.cli.input_handler import decode_escape, resolve


@pytest.mark.parametrize(
    "ch, action",
    [
        ("q", "quit"),
        ("\x03", "quit"),
        ("u", "undo"),
        ("Z", "undo"),
        ("n", "hint"),
        ("?", "help"),
        ("\r", "enter"),
        ("1", "1"),
        ("x", "x"),
        ("\x07", ""),
    ],
)
def test_resolve(ch: str, action: str) -> None:
    assert resolve(ch) == action


def _feed(*chars: str | None):
    it = iter(chars)
    return lambda: next(it, None)


@pytest.mark.parametrize(
    "rest, action",
    [
        (("[", "A"), "up"),
        (("[", "D"), "left"),
        (("[", "Z"), ""),
        (("[", None), ""),
        ((None,), "quit"),
        (("x",), "quit"),
    ],
)
def test_decode_escape(rest: tuple[str | None, ...], action: str) -> None:
    assert decode_escape(_feed(*rest)) == action
