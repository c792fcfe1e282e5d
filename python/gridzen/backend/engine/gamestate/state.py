"""The game session: phases, commands, and the notifications they emit."""

from __future__ import annotations

import logging
import random
from datetime import datetime
from enum import StrEnum
from typing import Callable

from gridzen.backend.engine.events import (
    EVENT_GRID_CHANGED,
    EVENT_GRID_SIZE_CHANGED,
    EVENT_MOVES_CHANGED,
    EVENT_PHASE_CHANGED,
    EVENT_PLAY_SOUND,
    EVENT_SCORES_CHANGED,
    EVENT_SELECTION_CHANGED,
    EVENT_SETTINGS_CHANGED,
    EVENT_TIME_CHANGED,
    EVENT_VALIDATION_FAILED,
    EventBus,
)
from gridzen.backend.engine.gameplay import GamePlay, MoveOutcome
from gridzen.backend.engine.gamestate.clock import SessionClock
from gridzen.backend.engine.sound import Sound, SoundPlayer
from gridzen.backend.models.board import Board
from gridzen.backend.models.highscore import HighScoreEntry, HighScoreManager, size_key
from gridzen.backend.models.settings import (
    DEFAULT_SIZE,
    SessionConfig,
    Settings,
    time_limit,
)
from gridzen.backend.storage.store import KeyValueStore

logger = logging.getLogger(__name__)

SPLASH_SECONDS = 3


class GamePhase(StrEnum):
    SPLASH = "splash"
    MENU = "menu"
    PLAYING = "playing"
    WON = "won"
    GAME_OVER = "gameOver"


_TRANSITIONS: dict[GamePhase, frozenset[GamePhase]] = {
    GamePhase.SPLASH: frozenset({GamePhase.MENU}),
    GamePhase.MENU: frozenset({GamePhase.PLAYING}),
    GamePhase.PLAYING: frozenset({GamePhase.WON, GamePhase.GAME_OVER, GamePhase.MENU}),
    GamePhase.WON: frozenset({GamePhase.MENU}),
    GamePhase.GAME_OVER: frozenset({GamePhase.MENU}),
}


def _today() -> str:
    return datetime.now().strftime("%Y-%m-%d")


class GameSession:
    """Owns the phase, the current game, the clock, scores, and settings.

    Frontends drive it with commands (``select_tile``, ``start_game``,
    ``give_up``, ``acknowledge``, ``tick`` ...) and listen on ``bus``
    for changes.  Commands that make no sense in the current phase are
    ignored and return ``False`` or ``None``.
    """

    def __init__(
        self,
        store: KeyValueStore,
        sound_player: SoundPlayer | None = None,
        rng: random.Random | None = None,
        splash_seconds: int = SPLASH_SECONDS,
        clock_date: Callable[[], str] = _today,
    ) -> None:
        self.store = store
        self.sound_player = sound_player
        self.bus = EventBus()
        self.settings = Settings.load(store)
        self.scores = HighScoreManager(store)
        self.clock = SessionClock()
        self.phase = GamePhase.SPLASH
        self.grid_size = DEFAULT_SIZE
        self.config: SessionConfig | None = None
        self.game: GamePlay | None = None
        self.last_result: HighScoreEntry | None = None
        self._rng = rng or random.Random()
        self._splash_left = splash_seconds
        self._clock_date = clock_date

    # -- queries --------------------------------------------------------------

    @property
    def board(self) -> Board | None:
        return self.game.board if self.game else None

    @property
    def moves(self) -> int:
        return self.game.moves if self.game else 0

    @property
    def selection(self) -> tuple[int, int] | None:
        return self.game.selection if self.game else None

    @property
    def time_left(self) -> int:
        return self.clock.time_left

    # -- phase handling -------------------------------------------------------

    def _set_phase(self, phase: GamePhase) -> bool:
        previous = self.phase
        if phase not in _TRANSITIONS[previous]:
            logger.debug("Ignoring transition %s -> %s", previous, phase)
            return False
        if previous == GamePhase.PLAYING:
            self.clock.stop()
        self.phase = phase
        logger.debug("Phase %s -> %s", previous, phase)
        self.bus.emit(EVENT_PHASE_CHANGED, self, phase=phase, previous=previous)
        return True

    def _play(self, sound: Sound) -> None:
        self.bus.emit(EVENT_PLAY_SOUND, self, sound=sound)
        if not (self.settings.sound_on and self.sound_player):
            return
        try:
            self.sound_player.play(sound)
        except Exception:
            logger.exception("Could not play %s sound", sound)

    # -- commands -------------------------------------------------------------

    def tick(self) -> None:
        """Advance one second: counts down the splash or the game clock."""
        if self.phase == GamePhase.SPLASH:
            self._splash_left -= 1
            if self._splash_left <= 0:
                self._set_phase(GamePhase.MENU)
            return
        if self.phase != GamePhase.PLAYING:
            return
        expired = self.clock.tick()
        self.bus.emit(EVENT_TIME_CHANGED, self, time_left=self.clock.time_left)
        if expired:
            logger.info("Time is up after %d moves", self.moves)
            self._set_phase(GamePhase.GAME_OVER)
            self._play(Sound.GAME_OVER)

    def skip_splash(self) -> bool:
        return self._set_phase(GamePhase.MENU) if self.phase == GamePhase.SPLASH else False

    def set_grid_size(self, size: int) -> bool:
        time_limit(size)
        if self.phase != GamePhase.MENU:
            return False
        self.grid_size = size
        self.bus.emit(EVENT_GRID_SIZE_CHANGED, self, size=size)
        return True

    def start_game(self, config: SessionConfig | None = None) -> bool:
        """Leave the menu and deal a fresh board.

        Without *config* the current grid size and saved player name are
        used.  An empty name is rejected with a ``validation_failed``
        notification.
        """
        if self.phase != GamePhase.MENU:
            return False
        if config is None:
            config = SessionConfig(self.grid_size, self.settings.player_name)

        name = config.player_name.strip()
        if not name:
            self.bus.emit(
                EVENT_VALIDATION_FAILED,
                self,
                field="player_name",
                message="Please enter your name to continue.",
            )
            return False

        self.config = SessionConfig(config.grid_size, name)
        if config.grid_size != self.grid_size:
            self.grid_size = config.grid_size
            self.bus.emit(EVENT_GRID_SIZE_CHANGED, self, size=self.grid_size)
        if name != self.settings.player_name:
            self.set_player_name(name)

        self.game = GamePlay.new(self.grid_size, self._rng)
        self.last_result = None
        self.clock.start(self.config.time_limit)
        self._set_phase(GamePhase.PLAYING)
        logger.info("%s started a %s game", name, size_key(self.grid_size))

        self.bus.emit(EVENT_GRID_CHANGED, self, board=self.game.board)
        self.bus.emit(EVENT_SELECTION_CHANGED, self, selection=None)
        self.bus.emit(EVENT_MOVES_CHANGED, self, moves=0)
        self.bus.emit(EVENT_TIME_CHANGED, self, time_left=self.clock.time_left)
        return True

    def select_tile(self, row: int, col: int) -> MoveOutcome | None:
        if self.phase != GamePhase.PLAYING or self.game is None:
            return None
        game = self.game
        outcome = game.select_tile(row, col)
        if outcome == MoveOutcome.SWAPPED:
            self.bus.emit(EVENT_GRID_CHANGED, self, board=game.board)
            self.bus.emit(EVENT_MOVES_CHANGED, self, moves=game.moves)
        self.bus.emit(EVENT_SELECTION_CHANGED, self, selection=game.selection)
        if outcome == MoveOutcome.SWAPPED and game.is_won:
            self._win()
        return outcome

    def _win(self) -> None:
        assert self.game is not None and self.config is not None
        entry = HighScoreEntry(
            name=self.config.player_name,
            moves=self.game.moves,
            time_remaining=self.clock.time_left,
            date=self._clock_date(),
        )
        self.last_result = entry
        self.scores.record_win(size_key(self.grid_size), entry)
        self._set_phase(GamePhase.WON)
        logger.info(
            "%s won %s in %d moves with %ds left",
            entry.name, size_key(self.grid_size), entry.moves, entry.time_remaining,
        )
        self.bus.emit(EVENT_SCORES_CHANGED, self, ledger=self.scores.ledger)
        self._play(Sound.VICTORY)

    def give_up(self) -> bool:
        if self.phase != GamePhase.PLAYING:
            return False
        self._set_phase(GamePhase.MENU)
        self._play(Sound.GAME_OVER)
        return True

    def acknowledge(self) -> bool:
        if self.phase not in (GamePhase.WON, GamePhase.GAME_OVER):
            return False
        return self._set_phase(GamePhase.MENU)

    def reset_high_scores(self) -> None:
        self.scores.reset()
        self.bus.emit(EVENT_SCORES_CHANGED, self, ledger=self.scores.ledger)

    # -- settings -------------------------------------------------------------

    def _save_settings(self) -> None:
        self.settings.save(self.store)
        self.bus.emit(EVENT_SETTINGS_CHANGED, self, settings=self.settings)

    def set_player_name(self, name: str) -> None:
        self.settings.player_name = name
        self._save_settings()

    def set_dark_mode(self, enabled: bool) -> None:
        self.settings.dark_mode = enabled
        self._save_settings()

    def set_sound_on(self, enabled: bool) -> None:
        self.settings.sound_on = enabled
        self._save_settings()
