"""Unit tests for the stored transactions repository."""

from __future__ import annotations

import json
from datetime import date
from decimal import Decimal
from itertools import count

from backend.repositories.collection_store import CollectionStore
from backend.repositories.transactions_repository import StoredTransactionsRepository
from backend.storage import InMemoryKeyValueStore
from shared.models import Transaction, TransactionCreate, TransactionType, TransactionUpdate


def _repository(store: InMemoryKeyValueStore | None = None, **kwargs) -> StoredTransactionsRepository:
    return StoredTransactionsRepository(CollectionStore(store or InMemoryKeyValueStore()), **kwargs)


def _create(description: str = "Groceries", amount: str = "42.10") -> TransactionCreate:
    return TransactionCreate(
        amount=Decimal(amount),
        description=description,
        category="Food & Dining",
        date=date(2024, 1, 15),
        type=TransactionType.EXPENSE,
    )


def test_add_assigns_distinct_ids_in_rapid_succession() -> None:
    repository = _repository()

    first = repository.add(_create("first"))
    second = repository.add(_create("second"))

    assert first.id != second.id
    assert [item.id for item in repository.list()] == [first.id, second.id]


def test_add_retries_id_factory_on_collision() -> None:
    ids = iter(["dup", "dup", "fresh"])
    repository = _repository(id_factory=lambda: next(ids))

    repository.add(_create("first"))
    second = repository.add(_create("second"))

    assert second.id == "fresh"


def test_add_persists_json_with_verbatim_field_names() -> None:
    store = InMemoryKeyValueStore()
    counter = count(1)
    repository = _repository(store, id_factory=lambda: f"tx-{next(counter)}")

    repository.add(_create())

    assert store.get_item("expense-tracker-transactions") == (
        '[{"id": "tx-1", "amount": 42.1, "description": "Groceries", '
        '"category": "Food & Dining", "date": "2024-01-15", "type": "expense"}]'
    )


def test_list_round_trips_amounts_as_decimal() -> None:
    store = InMemoryKeyValueStore()
    repository = _repository(store)
    created = repository.add(_create(amount="0.10"))

    reloaded = _repository(store).get(created.id)

    assert reloaded == created
    assert reloaded.amount == Decimal("0.10")


def test_update_merges_fields_and_keeps_id() -> None:
    repository = _repository()
    created = repository.add(_create())

    updated = repository.update(created.id, TransactionUpdate(description="Market", amount=Decimal("50")))

    assert updated is not None
    assert updated.id == created.id
    assert updated.description == "Market"
    assert updated.amount == Decimal("50")
    assert updated.category == created.category
    assert repository.get(created.id) == updated


def test_update_unknown_id_returns_none_without_writing() -> None:
    store = InMemoryKeyValueStore()
    repository = _repository(store)
    repository.add(_create())
    before = store.get_item("expense-tracker-transactions")

    assert repository.update("missing", TransactionUpdate(description="x")) is None
    assert store.get_item("expense-tracker-transactions") == before


def test_delete_removes_only_target() -> None:
    repository = _repository()
    to_delete = repository.add(_create("a"))
    to_keep = repository.add(_create("b"))

    assert repository.delete(to_delete.id) is True
    assert [item.id for item in repository.list()] == [to_keep.id]


def test_delete_unknown_id_returns_false_and_leaves_collection_unchanged() -> None:
    store = InMemoryKeyValueStore()
    repository = _repository(store)
    repository.add(_create("a"))
    repository.add(_create("b"))
    before = store.get_item("expense-tracker-transactions")

    assert repository.delete("missing") is False
    assert store.get_item("expense-tracker-transactions") == before
    assert len(repository.list()) == 2


def test_replace_all_then_list_preserves_order() -> None:
    repository = _repository()
    records = [
        Transaction(
            id=str(index),
            amount=Decimal(index),
            description=f"item {index}",
            category="Other",
            date=date(2024, 2, index),
            type=TransactionType.EXPENSE,
        )
        for index in (3, 1, 2)
    ]

    repository.replace_all(records)

    assert repository.list() == records


def test_list_skips_invalid_stored_records(caplog) -> None:
    store = InMemoryKeyValueStore(
        {
            "expense-tracker-transactions": (
                '[{"id": "ok", "amount": 5, "description": "d", "category": "Other", '
                '"date": "2024-01-01", "type": "expense"}, '
                '{"id": "bad", "amount": "oops", "type": "transfer"}]'
            )
        }
    )

    listed = _repository(store).list()

    assert [item.id for item in listed] == ["ok"]
    assert "stored_record_invalid" in caplog.text


def test_repository_without_storage_backend_lists_nothing() -> None:
    repository = StoredTransactionsRepository(CollectionStore(None))

    repository.add(_create())

    assert repository.list() == []
    assert repository.delete("anything") is False


def test_writes_keep_unreadable_stored_records_in_place() -> None:
    legacy = {
        "id": "legacy",
        "amount": 12.5,
        "description": "Old import",
        "category": "Other",
        "date": "2023-12-30",
        "type": "expense",
        "notes": "kept from an earlier version",
    }
    readable = {
        "id": "ok",
        "amount": 5,
        "description": "d",
        "category": "Other",
        "date": "2024-01-01",
        "type": "expense",
    }
    store = InMemoryKeyValueStore({"expense-tracker-transactions": json.dumps([legacy, readable])})
    repository = _repository(store, id_factory=lambda: "new")

    repository.add(_create())
    repository.update("ok", TransactionUpdate(description="edited"))
    repository.delete("new")

    stored = json.loads(store.get_item("expense-tracker-transactions"))
    assert stored[0] == legacy
    assert [item["id"] for item in stored] == ["legacy", "ok"]
    assert stored[1]["description"] == "edited"
    assert [item.id for item in repository.list()] == ["ok"]


def test_delete_ignores_unreadable_record_with_matching_id() -> None:
    store = InMemoryKeyValueStore({"expense-tracker-transactions": '[{"id": "bad", "amount": "oops"}]'})

    assert _repository(store).delete("bad") is False
    assert store.get_item("expense-tracker-transactions") == '[{"id": "bad", "amount": "oops"}]'
