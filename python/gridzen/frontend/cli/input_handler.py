"""Keyboard actions for the terminal frontend.

``read_key`` grabs one keypress in raw mode (termios on POSIX, msvcrt on
Windows) and ``decode`` turns the bytes it got into a ``Key`` action or,
for any other printable key, the lower-cased character itself.
"""

from __future__ import annotations

import os
import sys
import time
from enum import StrEnum


class Key(StrEnum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    TAP = "tap"
    GIVE_UP = "giveup"
    QUIT = "quit"


ESC = "\x1b"

_PLAIN: dict[str, Key] = {
    "w": Key.UP,
    "s": Key.DOWN,
    "a": Key.LEFT,
    "d": Key.RIGHT,
    " ": Key.TAP,
    "\r": Key.TAP,
    "\n": Key.TAP,
    "g": Key.GIVE_UP,
    "q": Key.QUIT,
    "\x03": Key.QUIT,
    ESC: Key.QUIT,
}

# final byte of ``ESC [ x`` / ``ESC O x`` and the msvcrt scan code after 0xE0
_ARROWS: dict[str, Key] = {
    "A": Key.UP, "B": Key.DOWN, "C": Key.RIGHT, "D": Key.LEFT,
    "H": Key.UP, "P": Key.DOWN, "M": Key.RIGHT, "K": Key.LEFT,
}


def decode(raw: str) -> str:
    """Map the characters of one keypress to an action.

    Returns a ``Key`` for game controls, the lower-cased character for
    any other printable key, or ``""`` for sequences nobody listens to.
    """
    if not raw:
        return ""
    if raw[0] in (ESC, "\xe0", "\x00") and len(raw) > 1:
        return _ARROWS.get(raw[-1], "")
    key = _PLAIN.get(raw.lower())
    if key is not None:
        return key
    return raw.lower() if len(raw) == 1 and raw.isprintable() else ""


def _read_posix(timeout: float | None) -> str | None:
    import select
    import termios
    import tty

    fd = sys.stdin.fileno()
    old = termios.tcgetattr(fd)
    try:
        tty.setraw(fd)
        ready, _, _ = select.select([fd], [], [], timeout)
        if not ready:
            return None
        raw = os.read(fd, 1).decode("utf-8", errors="ignore")
        # arrow keys arrive as a short burst after ESC
        while raw.startswith(ESC) and len(raw) < 3 and select.select([fd], [], [], 0.05)[0]:
            raw += os.read(fd, 1).decode("utf-8", errors="ignore")
        return raw
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old)


def _read_windows(timeout: float | None) -> str | None:
    import msvcrt  # type: ignore[import-not-found]

    end = None if timeout is None else time.monotonic() + timeout
    while not msvcrt.kbhit():
        if end is not None and time.monotonic() >= end:
            return None
        time.sleep(0.02)
    raw = msvcrt.getwch()
    if raw in ("\xe0", "\x00"):
        raw += msvcrt.getwch()
    return raw


def read_key(timeout: float | None = None) -> str | None:
    """Wait for one keypress and return its decoded action.

    Blocks forever when *timeout* is ``None``; otherwise returns ``None``
    if nothing was pressed within *timeout* seconds.
    """
    reader = _read_windows if os.name == "nt" else _read_posix
    raw = reader(timeout)
    return None if raw is None else decode(raw)
