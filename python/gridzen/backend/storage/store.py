"""Key-value persistence for scores and settings.

Each key holds one JSON-serialisable value.  Stores raise ``StoreError``
for anything that goes wrong on disk so callers can fall back to
defaults without caring about the underlying cause.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """A value could not be read from or written to the store."""


class KeyValueStore(Protocol):
    def get(self, key: str) -> Any | None: ...

    def set(self, key: str, value: Any) -> None: ...

    def remove(self, key: str) -> None: ...


class JsonFileStore:
    """Stores every key as ``<directory>/<key>.json``."""

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Any | None:
        """Return the stored value, or ``None`` if the key was never written."""
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return json.loads(path.read_text())
        except (OSError, ValueError) as exc:
            raise StoreError(f"Could not read {path}: {exc}") from exc

    def set(self, key: str, value: Any) -> None:
        path = self._path(key)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(value, indent=2) + "\n")
        except (OSError, TypeError) as exc:
            raise StoreError(f"Could not write {path}: {exc}") from exc
        logger.debug("Saved %s", path)

    def remove(self, key: str) -> None:
        path = self._path(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise StoreError(f"Could not remove {path}: {exc}") from exc


class MemoryStore:
    """In-process store; values go through JSON so they behave like files."""

    def __init__(self) -> None:
        self.blobs: dict[str, str] = {}

    def get(self, key: str) -> Any | None:
        blob = self.blobs.get(key)
        if blob is None:
            return None
        try:
            return json.loads(blob)
        except ValueError as exc:
            raise StoreError(f"Corrupt value for {key!r}: {exc}") from exc

    def set(self, key: str, value: Any) -> None:
        try:
            self.blobs[key] = json.dumps(value)
        except TypeError as exc:
            raise StoreError(f"Cannot serialise {key!r}: {exc}") from exc

    def remove(self, key: str) -> None:
        self.blobs.pop(key, None)
