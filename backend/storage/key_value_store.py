"""Key-value store port and adapters backing the persisted collections."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Protocol


logger = logging.getLogger(__name__)


class StorageWriteError(RuntimeError):
    """Raised when a store cannot durably write a value."""


class KeyValueStore(Protocol):
    def get_item(self, key: str) -> str | None:
        """Return the stored text for key, or None when absent."""

    def set_item(self, key: str, value: str) -> None:
        """Store text under key, replacing any previous value."""

    def remove_item(self, key: str) -> None:
        """Remove key if present."""


class InMemoryKeyValueStore:
    """In-memory store used by tests/dev."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class JsonFileKeyValueStore:
    """Durable store keeping every key in a single JSON object file.

    Writes go to a sibling .tmp file first and are moved into place with
    os.replace(), so the file always holds either the old or the new content.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError:
            logger.exception("kv_file_read_failed path=%s", self._path)
            return {}

        try:
            payload = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("kv_file_corrupt path=%s", self._path)
            return {}

        if not isinstance(payload, dict):
            logger.warning("kv_file_unexpected_shape path=%s type=%s", self._path, type(payload).__name__)
            return {}
        return {str(key): value for key, value in payload.items() if isinstance(value, str)}

    def _write_all(self, items: dict[str, str]) -> None:
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp, "w", encoding="utf-8") as handle:
                json.dump(items, handle, indent=2, ensure_ascii=False)
            os.replace(tmp, self._path)
        except OSError as exc:
            try:
                tmp.unlink(missing_ok=True)
            except OSError:
                logger.warning("kv_file_tmp_cleanup_failed path=%s", tmp)
            raise StorageWriteError(f"Could not write storage file {self._path}: {exc}") from exc

    def get_item(self, key: str) -> str | None:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        items = self._read_all()
        items[key] = value
        self._write_all(items)

    def remove_item(self, key: str) -> None:
        items = self._read_all()
        if key not in items:
            return
        del items[key]
        self._write_all(items)
