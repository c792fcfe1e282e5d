from gridzen.backend.storage.store import (
    JsonFileStore,
    KeyValueStore,
    MemoryStore,
    StoreError,
)

__all__ = ["JsonFileStore", "KeyValueStore", "MemoryStore", "StoreError"]
