"""Key decoding for the terminal frontend."""

from __future__ import annotations

import pytest

from gridzen.frontend.cli.input_handler import Key, decode


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("\x1b[A", Key.UP),
        ("\x1b[B", Key.DOWN),
        ("\x1b[C", Key.RIGHT),
        ("\x1b[D", Key.LEFT),
        ("\x1bOA", Key.UP),
        ("\xe0H", Key.UP),
        ("\xe0K", Key.LEFT),
        ("\x00M", Key.RIGHT),
    ],
)
def test_arrow_sequences(raw: str, expected: Key) -> None:
    assert decode(raw) == expected


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("w", Key.UP),
        ("S", Key.DOWN),
        ("a", Key.LEFT),
        ("D", Key.RIGHT),
        (" ", Key.TAP),
        ("\r", Key.TAP),
        ("G", Key.GIVE_UP),
        ("q", Key.QUIT),
        ("\x03", Key.QUIT),
        ("\x1b", Key.QUIT),
    ],
)
def test_game_controls(raw: str, expected: Key) -> None:
    assert decode(raw) == expected


def test_other_printable_keys_pass_through_lower_cased() -> None:
    assert decode("X") == "x"
    assert decode("3") == "3"


def test_unknown_sequences_decode_to_nothing() -> None:
    assert decode("") == ""
    assert decode("\x1b[Z") == ""
    assert decode("\x07") == ""


def test_actions_compare_as_strings() -> None:
    assert Key.GIVE_UP == "giveup"
    assert decode("g") in ("giveup",)
