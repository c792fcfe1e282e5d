"""Game session state machine, end to end through its commands and signals."""

from __future__ import annotations

import random
from collections import defaultdict

import pytest

from gridzen.backend.engine.events import (
    EVENT_GRID_CHANGED,
    EVENT_GRID_SIZE_CHANGED,
    EVENT_MOVES_CHANGED,
    EVENT_PHASE_CHANGED,
    EVENT_PLAY_SOUND,
    EVENT_SCORES_CHANGED,
    EVENT_SELECTION_CHANGED,
    EVENT_TIME_CHANGED,
    EVENT_VALIDATION_FAILED,
)
from gridzen.backend.engine.gamestate import GamePhase, GameSession
from gridzen.backend.engine.sound import Sound
from gridzen.backend.models.highscore import HighScoreEntry, HighScoreManager
from gridzen.backend.models.settings import KEY_PLAYER_NAME, SessionConfig
from gridzen.backend.storage.store import MemoryStore

from helpers import FailingStore, RecordingSoundPlayer, near_solved


class Recorder:
    """Collects every payload emitted on the session bus."""

    NAMES = (
        EVENT_PHASE_CHANGED,
        EVENT_GRID_CHANGED,
        EVENT_SELECTION_CHANGED,
        EVENT_MOVES_CHANGED,
        EVENT_TIME_CHANGED,
        EVENT_PLAY_SOUND,
        EVENT_VALIDATION_FAILED,
        EVENT_SCORES_CHANGED,
        EVENT_GRID_SIZE_CHANGED,
    )

    def __init__(self, session: GameSession) -> None:
        self.events: dict[str, list[dict]] = defaultdict(list)
        for name in self.NAMES:
            session.bus.subscribe(name, self._handler(name))

    def _handler(self, name: str):
        def handler(sender, **payload):
            self.events[name].append(payload)

        return handler

    def phases(self) -> list[GamePhase]:
        return [e["phase"] for e in self.events[EVENT_PHASE_CHANGED]]

    def sounds(self) -> list[Sound]:
        return [e["sound"] for e in self.events[EVENT_PLAY_SOUND]]


def _session(store=None, **kwargs) -> GameSession:
    kwargs.setdefault("rng", random.Random(7))
    kwargs.setdefault("clock_date", lambda: "2026-10-17")
    return GameSession(store if store is not None else MemoryStore(), **kwargs)


def _in_menu(store=None, **kwargs) -> GameSession:
    session = _session(store, **kwargs)
    session.skip_splash()
    return session


def _playing(name: str = "Ava", size: int = 3, **kwargs) -> GameSession:
    session = _in_menu(**kwargs)
    assert session.start_game(SessionConfig(size, name))
    return session


def _rig_one_swap_from_win(session: GameSession) -> None:
    game = session.game
    game.board = near_solved(game.target, 1, 2)


# -- splash & menu ------------------------------------------------------------


def test_splash_times_out_to_menu() -> None:
    session = _session(splash_seconds=3)
    recorder = Recorder(session)
    session.tick()
    session.tick()
    assert session.phase == GamePhase.SPLASH
    session.tick()
    assert session.phase == GamePhase.MENU
    assert recorder.phases() == [GamePhase.MENU]


def test_splash_ignores_game_commands() -> None:
    session = _session()
    assert session.start_game(SessionConfig(3, "Ava")) is False
    assert session.select_tile(0, 0) is None
    assert session.give_up() is False
    assert session.acknowledge() is False
    assert session.phase == GamePhase.SPLASH


def test_empty_name_is_rejected() -> None:
    session = _in_menu()
    recorder = Recorder(session)
    assert session.start_game(SessionConfig(3, "   ")) is False
    assert session.phase == GamePhase.MENU
    assert recorder.events[EVENT_VALIDATION_FAILED] == [
        {"field": "player_name", "message": "Please enter your name to continue."}
    ]
    assert recorder.phases() == []


def test_set_grid_size_only_in_menu() -> None:
    session = _in_menu()
    assert session.set_grid_size(5)
    assert session.grid_size == 5
    with pytest.raises(ValueError):
        session.set_grid_size(8)
    session.start_game(SessionConfig(5, "Ava"))
    assert session.set_grid_size(4) is False
    assert session.grid_size == 5


def test_start_game_defaults_to_saved_name_and_size() -> None:
    store = MemoryStore()
    store.set(KEY_PLAYER_NAME, "Bo")
    session = _in_menu(store)
    session.set_grid_size(4)
    assert session.start_game()
    assert session.config == SessionConfig(4, "Bo")
    assert session.time_left == 60


def test_start_game_with_new_size_announces_it() -> None:
    session = _in_menu()
    recorder = Recorder(session)
    assert session.start_game(SessionConfig(5, "Ava"))
    assert session.grid_size == 5
    assert recorder.events[EVENT_GRID_SIZE_CHANGED] == [{"size": 5}]


def test_start_game_with_same_size_is_quiet() -> None:
    session = _in_menu()
    recorder = Recorder(session)
    assert session.start_game(SessionConfig(session.grid_size, "Ava"))
    assert recorder.events[EVENT_GRID_SIZE_CHANGED] == []


# -- playing ------------------------------------------------------------------


def test_start_game_deals_board_and_clock() -> None:
    session = _in_menu()
    recorder = Recorder(session)
    assert session.start_game(SessionConfig(3, "  Ava "))
    assert session.phase == GamePhase.PLAYING
    assert session.time_left == 30
    assert session.moves == 0
    assert session.selection is None
    assert sorted(session.board.numbers()) == list(range(1, 10))
    assert recorder.phases() == [GamePhase.PLAYING]
    assert recorder.events[EVENT_TIME_CHANGED] == [{"time_left": 30}]
    assert recorder.events[EVENT_MOVES_CHANGED] == [{"moves": 0}]
    assert session.settings.player_name == "Ava"


def test_player_name_is_persisted() -> None:
    store = MemoryStore()
    session = _in_menu(store)
    session.start_game(SessionConfig(3, "Ava"))
    assert store.get(KEY_PLAYER_NAME) == "Ava"


def test_ticks_count_down_while_playing() -> None:
    session = _playing()
    recorder = Recorder(session)
    session.tick()
    session.tick()
    assert session.time_left == 28
    assert recorder.events[EVENT_TIME_CHANGED] == [{"time_left": 29}, {"time_left": 28}]


def test_selection_signals() -> None:
    session = _playing()
    recorder = Recorder(session)
    session.select_tile(0, 0)
    session.select_tile(0, 0)
    assert recorder.events[EVENT_SELECTION_CHANGED] == [
        {"selection": (0, 0)},
        {"selection": None},
    ]
    assert recorder.events[EVENT_MOVES_CHANGED] == []
    assert recorder.events[EVENT_GRID_CHANGED] == []


def test_timeout_goes_to_game_over_once() -> None:
    player = RecordingSoundPlayer()
    session = _playing(sound_player=player)
    session.set_sound_on(True)
    session.clock.time_left = 1
    recorder = Recorder(session)

    session.tick()
    assert session.phase == GamePhase.GAME_OVER
    assert session.time_left == 0

    session.tick()
    assert session.time_left == 0
    assert recorder.phases() == [GamePhase.GAME_OVER]
    assert recorder.sounds() == [Sound.GAME_OVER]
    assert player.played == [Sound.GAME_OVER]
    assert session.scores.ledger == {}


def test_taps_ignored_after_timeout() -> None:
    session = _playing()
    session.clock.time_left = 1
    session.tick()
    before = session.board.numbers()
    assert session.select_tile(0, 0) is None
    assert session.board.numbers() == before


def test_give_up_returns_to_menu_without_score() -> None:
    session = _playing()
    recorder = Recorder(session)
    assert session.give_up()
    assert session.phase == GamePhase.MENU
    assert not session.clock.running
    session.tick()
    assert session.time_left == 30
    assert recorder.sounds() == [Sound.GAME_OVER]
    assert session.scores.ledger == {}


def test_acknowledge_after_game_over() -> None:
    session = _playing()
    session.clock.time_left = 1
    session.tick()
    assert session.acknowledge()
    assert session.phase == GamePhase.MENU
    assert session.acknowledge() is False


# -- winning ------------------------------------------------------------------


def test_end_to_end_win() -> None:
    session = _in_menu()
    recorder = Recorder(session)
    assert session.start_game(SessionConfig(3, "Ava"))
    assert session.time_left == 30
    assert sorted(session.board.numbers()) == list(range(1, 10))

    session.tick()
    _rig_one_swap_from_win(session)
    session.select_tile(0, 0)
    session.select_tile(0, 1)

    assert session.phase == GamePhase.WON
    assert recorder.phases() == [GamePhase.PLAYING, GamePhase.WON]
    expected = HighScoreEntry(name="Ava", moves=1, time_remaining=29, date="2026-10-17")
    assert session.last_result == expected
    assert session.scores.ledger == {"3x3": [expected]}
    assert recorder.sounds() == [Sound.VICTORY]
    assert recorder.events[EVENT_SCORES_CHANGED] == [{"ledger": {"3x3": [expected]}}]


def test_win_stops_clock() -> None:
    session = _playing()
    _rig_one_swap_from_win(session)
    session.select_tile(0, 0)
    session.select_tile(0, 1)
    session.tick()
    assert session.time_left == 30
    assert session.select_tile(0, 0) is None
    assert session.acknowledge()
    assert session.phase == GamePhase.MENU


def test_win_is_persisted() -> None:
    store = MemoryStore()
    session = _in_menu(store)
    session.start_game(SessionConfig(3, "Ava"))
    _rig_one_swap_from_win(session)
    session.select_tile(0, 1)
    session.select_tile(0, 0)
    assert [e.moves for e in HighScoreManager(store).get_scores(3)] == [1]


def test_win_survives_failing_store() -> None:
    session = _in_menu(FailingStore())
    session.start_game(SessionConfig(3, "Ava"))
    _rig_one_swap_from_win(session)
    session.select_tile(0, 0)
    session.select_tile(0, 1)
    assert session.phase == GamePhase.WON
    assert [e.moves for e in session.scores.get_scores(3)] == [1]


def test_sound_player_only_used_when_enabled() -> None:
    player = RecordingSoundPlayer()
    session = _playing(sound_player=player)
    _rig_one_swap_from_win(session)
    session.select_tile(0, 0)
    session.select_tile(0, 1)
    assert player.played == []


def test_broken_sound_player_does_not_break_game() -> None:
    class Broken:
        def play(self, sound):
            raise RuntimeError("no audio device")

    session = _playing(sound_player=Broken())
    session.set_sound_on(True)
    assert session.give_up()
    assert session.phase == GamePhase.MENU


# -- scores & settings ---------------------------------------------------------


def test_reset_high_scores() -> None:
    store = MemoryStore()
    session = _in_menu(store)
    session.start_game(SessionConfig(3, "Ava"))
    _rig_one_swap_from_win(session)
    session.select_tile(0, 0)
    session.select_tile(0, 1)
    session.acknowledge()

    session.reset_high_scores()
    assert session.scores.ledger == {}
    assert HighScoreManager(store).load() == {}


def test_settings_toggles_persist() -> None:
    store = MemoryStore()
    session = _session(store)
    session.set_dark_mode(True)
    session.set_sound_on(True)
    reloaded = _session(store)
    assert reloaded.settings.dark_mode is True
    assert reloaded.settings.sound_on is True


def test_result_is_ready_when_won_phase_is_announced() -> None:
    session = _playing()
    seen = []

    def on_phase(sender, phase, previous):
        if phase == GamePhase.WON:
            seen.append((sender.last_result, sender.scores.get_scores(3)))

    session.bus.subscribe(EVENT_PHASE_CHANGED, on_phase)
    _rig_one_swap_from_win(session)
    session.select_tile(0, 0)
    session.select_tile(0, 1)

    assert len(seen) == 1
    result, scores = seen[0]
    assert result is not None
    assert result.moves == 1
    assert scores == [result]
