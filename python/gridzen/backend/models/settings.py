"""Session configuration and persisted player settings."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from gridzen.backend.storage.store import KeyValueStore, StoreError

logger = logging.getLogger(__name__)

# Seconds allowed per grid size.
TIME_LIMITS: dict[int, int] = {3: 30, 4: 60, 5: 90, 6: 120}
SUPPORTED_SIZES: tuple[int, ...] = tuple(TIME_LIMITS)
DEFAULT_SIZE = 3

KEY_PLAYER_NAME = "playername"
KEY_DARK_MODE = "darkMode"
KEY_SOUND_ON = "soundOn"


def time_limit(size: int) -> int:
    try:
        return TIME_LIMITS[size]
    except KeyError:
        raise ValueError(
            f"Unsupported grid size {size}; expected one of {SUPPORTED_SIZES}."
        ) from None


@dataclass(frozen=True)
class SessionConfig:
    grid_size: int
    player_name: str

    def __post_init__(self) -> None:
        time_limit(self.grid_size)

    @property
    def time_limit(self) -> int:
        return TIME_LIMITS[self.grid_size]


@dataclass
class Settings:
    player_name: str = ""
    dark_mode: bool = False
    sound_on: bool = False

    @classmethod
    def load(cls, store: KeyValueStore) -> Settings:
        """Read each setting, keeping the default for any that fail."""
        settings = cls()
        name = _read(store, KEY_PLAYER_NAME)
        if isinstance(name, str):
            settings.player_name = name
        dark = _read(store, KEY_DARK_MODE)
        if isinstance(dark, bool):
            settings.dark_mode = dark
        sound = _read(store, KEY_SOUND_ON)
        if isinstance(sound, bool):
            settings.sound_on = sound
        return settings

    def save(self, store: KeyValueStore) -> bool:
        ok = True
        for key, value in (
            (KEY_PLAYER_NAME, self.player_name),
            (KEY_DARK_MODE, self.dark_mode),
            (KEY_SOUND_ON, self.sound_on),
        ):
            ok = _write(store, key, value) and ok
        return ok


def _read(store: KeyValueStore, key: str) -> object:
    try:
        return store.get(key)
    except StoreError:
        logger.warning("Setting %r unreadable, using default", key, exc_info=True)
        return None


def _write(store: KeyValueStore, key: str, value: object) -> bool:
    try:
        store.set(key, value)
    except StoreError:
        logger.exception("Could not save setting %r", key)
        return False
    return True
