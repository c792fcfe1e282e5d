"""Change notifications emitted by the game session."""

from __future__ import annotations

from typing import Any, Callable

from blinker import Signal


class EventBus:
    """Simple event bus leveraging blinker Signal objects."""

    def __init__(self) -> None:
        self._signals: dict[str, Signal] = {}

    def subscribe(self, name: str, fn: Callable[..., Any]) -> None:
        sig = self._signals.setdefault(name, Signal(name))
        # Strong reference so lambdas and bound methods of short-lived views still fire.
        sig.connect(fn, weak=False)

    def unsubscribe(self, name: str, fn: Callable[..., Any]) -> None:
        sig = self._signals.get(name)
        if sig:
            sig.disconnect(fn)

    def emit(self, name: str, sender: Any = None, **payload: Any) -> None:
        sig = self._signals.get(name)
        if sig:
            sig.send(sender if sender is not None else self, **payload)


EVENT_PHASE_CHANGED = "phase_changed"          # payload: phase, previous
EVENT_GRID_CHANGED = "grid_changed"            # payload: board
EVENT_SELECTION_CHANGED = "selection_changed"  # payload: selection=(r,c)|None
EVENT_MOVES_CHANGED = "moves_changed"          # payload: moves=int
EVENT_TIME_CHANGED = "time_changed"            # payload: time_left=int
EVENT_PLAY_SOUND = "play_sound"                # payload: sound=Sound
EVENT_VALIDATION_FAILED = "validation_failed"  # payload: field=str, message=str
EVENT_SCORES_CHANGED = "scores_changed"        # payload: ledger=dict[str, list]
EVENT_SETTINGS_CHANGED = "settings_changed"    # payload: settings
EVENT_GRID_SIZE_CHANGED = "grid_size_changed"  # payload: size=int
