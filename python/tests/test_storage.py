"""Key-value stores and persisted settings."""

from __future__ import annotations

from pathlib import Path

import pytest

from gridzen.backend.models.settings import (
    KEY_DARK_MODE,
    SessionConfig,
    Settings,
    time_limit,
)
from gridzen.backend.storage.store import JsonFileStore, MemoryStore, StoreError

from helpers import FailingStore


def test_file_store_round_trip(tmp_path: Path) -> None:
    store = JsonFileStore(tmp_path / "data")
    assert store.get("soundOn") is None
    store.set("soundOn", True)
    assert (tmp_path / "data" / "soundOn.json").exists()
    assert JsonFileStore(tmp_path / "data").get("soundOn") is True
    store.remove("soundOn")
    assert store.get("soundOn") is None
    store.remove("soundOn")


def test_file_store_corrupt_blob_raises(tmp_path: Path) -> None:
    (tmp_path / "highscores.json").write_text("{oops")
    with pytest.raises(StoreError):
        JsonFileStore(tmp_path).get("highscores")


def test_file_store_unwritable_dir_raises(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("a file, not a directory")
    with pytest.raises(StoreError):
        JsonFileStore(blocker).set("darkMode", False)


def test_memory_store_rejects_unserialisable() -> None:
    with pytest.raises(StoreError):
        MemoryStore().set("x", object())


# -- settings -----------------------------------------------------------------


def test_settings_defaults(store: MemoryStore) -> None:
    assert Settings.load(store) == Settings(player_name="", dark_mode=False, sound_on=False)


def test_settings_round_trip(store: MemoryStore) -> None:
    assert Settings(player_name="Ava", dark_mode=True, sound_on=True).save(store)
    assert Settings.load(store) == Settings("Ava", True, True)


def test_settings_ignore_bad_values(store: MemoryStore) -> None:
    store.set(KEY_DARK_MODE, "yes please")
    assert Settings.load(store).dark_mode is False


def test_settings_survive_failing_store() -> None:
    store = FailingStore()
    assert Settings.load(store) == Settings()
    assert Settings(player_name="Ava").save(store) is False


@pytest.mark.parametrize(("size", "seconds"), [(3, 30), (4, 60), (5, 90), (6, 120)])
def test_time_limits(size: int, seconds: int) -> None:
    assert time_limit(size) == seconds
    assert SessionConfig(size, "Ava").time_limit == seconds


@pytest.mark.parametrize("size", [2, 7, 0])
def test_unsupported_sizes_rejected(size: int) -> None:
    with pytest.raises(ValueError):
        SessionConfig(size, "Ava")
