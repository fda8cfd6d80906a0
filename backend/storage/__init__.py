"""Key-value storage backends."""

from backend.storage.key_value_store import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStore,
    StorageWriteError,
)

__all__ = ["InMemoryKeyValueStore", "JsonFileKeyValueStore", "KeyValueStore", "StorageWriteError"]
