"""JSON persistence of whole collections on top of a key-value store."""

from __future__ import annotations

import json
import logging
from decimal import Decimal
from typing import Any

from backend.storage import KeyValueStore


logger = logging.getLogger(__name__)


TRANSACTIONS_COLLECTION = "transactions"
BUDGETS_COLLECTION = "budgets"


def _json_default(value: Any) -> Any:
    # Decimals only reach here from raw records kept verbatim after a failed load.
    if isinstance(value, Decimal):
        if value == value.to_integral_value() and abs(value) < Decimal("1e15"):
            return int(value)
        return float(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


class CollectionStore:
    """Load and save named collections as JSON arrays.

    A missing store (no storage backend in this execution context) behaves as
    an empty, read-only store: loads return [] and saves are skipped.
    """

    def __init__(self, store: KeyValueStore | None, *, key_prefix: str = "expense-tracker") -> None:
        self._store = store
        self._key_prefix = key_prefix

    @property
    def available(self) -> bool:
        return self._store is not None

    def storage_key(self, collection: str) -> str:
        return f"{self._key_prefix}-{collection}"

    def load(self, collection: str) -> list[dict[str, Any]]:
        """Return the stored records, or [] when absent, unavailable or corrupt."""
        if not self.available:
            return []

        key = self.storage_key(collection)
        raw = self._store.get_item(key)
        if not raw:
            return []

        try:
            payload = json.loads(raw, parse_float=Decimal)
        except json.JSONDecodeError as exc:
            logger.warning("collection_load_corrupt collection=%s key=%s error=%s", collection, key, exc)
            return []

        if not isinstance(payload, list):
            logger.warning(
                "collection_load_unexpected_shape collection=%s key=%s type=%s",
                collection,
                key,
                type(payload).__name__,
            )
            return []

        records = [item for item in payload if isinstance(item, dict)]
        if len(records) != len(payload):
            logger.warning(
                "collection_load_skipped_items collection=%s skipped=%s",
                collection,
                len(payload) - len(records),
            )
        return records

    def save(self, collection: str, records: list[dict[str, Any]]) -> None:
        """Replace the whole collection with records (JSON-ready dicts)."""
        if not self.available:
            logger.info("collection_save_skipped_no_storage collection=%s count=%s", collection, len(records))
            return

        payload = json.dumps(records, ensure_ascii=False, default=_json_default)
        self._store.set_item(self.storage_key(collection), payload)
