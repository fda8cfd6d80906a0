"""Generic read-modify-write repository over one persisted collection."""

from __future__ import annotations

import logging
from typing import Any, Callable, Generic, TypeVar, Union
from uuid import uuid4

from pydantic import BaseModel, ValidationError

from backend.repositories.collection_store import CollectionStore


logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)

# A loaded entry is either a validated record or the raw stored dict that
# failed validation. Raw entries are written back untouched on every save.
_Entry = Union[RecordT, dict[str, Any]]


def new_record_id() -> str:
    """Return a collision-free record identifier."""
    return str(uuid4())


class StoredRecordsRepository(Generic[RecordT]):
    """Collection-backed CRUD where every write saves the full collection.

    Stored records that no longer validate are hidden from reads but kept in
    place on writes, so an unrelated add, update or delete never erases them.
    """

    record_model: type[RecordT]
    collection: str

    def __init__(
        self,
        collection_store: CollectionStore,
        *,
        id_factory: Callable[[], str] = new_record_id,
    ) -> None:
        self._collection_store = collection_store
        self._id_factory = id_factory

    def _load_entries(self) -> list[_Entry]:
        entries: list[_Entry] = []
        for raw in self._collection_store.load(self.collection):
            try:
                entries.append(self.record_model.model_validate(raw))
            except ValidationError as exc:
                logger.warning(
                    "stored_record_invalid collection=%s record_id=%s errors=%s",
                    self.collection,
                    raw.get("id"),
                    exc.error_count(),
                )
                entries.append(raw)
        return entries

    def _save_entries(self, entries: list[_Entry]) -> None:
        self._collection_store.save(
            self.collection,
            [entry.model_dump(mode="json") if isinstance(entry, BaseModel) else entry for entry in entries],
        )

    @staticmethod
    def _entry_id(entry: _Entry) -> Any:
        return entry.id if isinstance(entry, BaseModel) else entry.get("id")

    def list(self) -> list[RecordT]:
        return [entry for entry in self._load_entries() if isinstance(entry, BaseModel)]

    def get(self, record_id: str) -> RecordT | None:
        return next((record for record in self.list() if record.id == record_id), None)

    def add(self, request: BaseModel) -> RecordT:
        entries = self._load_entries()
        existing_ids = {self._entry_id(entry) for entry in entries}
        record_id = self._id_factory()
        while record_id in existing_ids:
            record_id = self._id_factory()

        record = self.record_model.model_validate({**request.model_dump(), "id": record_id})
        entries.append(record)
        self._save_entries(entries)
        return record

    def update(self, record_id: str, changes: BaseModel) -> RecordT | None:
        entries = self._load_entries()
        for index, entry in enumerate(entries):
            if not isinstance(entry, BaseModel) or entry.id != record_id:
                continue

            updates = changes.model_dump(exclude_unset=True, exclude_none=True)
            updates.pop("id", None)
            updated = self.record_model.model_validate({**entry.model_dump(), **updates})
            entries[index] = updated
            self._save_entries(entries)
            return updated

        return None

    def delete(self, record_id: str) -> bool:
        entries = self._load_entries()
        kept = [
            entry for entry in entries if not isinstance(entry, BaseModel) or entry.id != record_id
        ]
        if len(kept) == len(entries):
            return False
        self._save_entries(kept)
        return True

    def replace_all(self, records: list[RecordT]) -> None:
        """Overwrite the collection, unreadable stored entries included."""
        self._save_entries(list(records))
