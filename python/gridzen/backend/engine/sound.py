"""Sound cues the engine can ask a frontend to play."""

from __future__ import annotations

from enum import StrEnum
from typing import Protocol


class Sound(StrEnum):
    VICTORY = "victory"
    GAME_OVER = "gameover"


class SoundPlayer(Protocol):
    def play(self, sound: Sound) -> None: ...
