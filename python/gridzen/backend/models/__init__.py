from gridzen.backend.models.board import Board, Tile
from gridzen.backend.models.highscore import HighScoreEntry, HighScoreManager
from gridzen.backend.models.settings import SessionConfig, Settings

__all__ = [
    "Board",
    "HighScoreEntry",
    "HighScoreManager",
    "SessionConfig",
    "Settings",
    "Tile",
]
