"""Unit tests for key-value store adapters."""

from __future__ import annotations

import json

import pytest

from backend.storage import InMemoryKeyValueStore, JsonFileKeyValueStore, StorageWriteError


def test_in_memory_store_get_set_remove() -> None:
    store = InMemoryKeyValueStore()

    assert store.get_item("missing") is None

    store.set_item("k", "v1")
    store.set_item("k", "v2")
    assert store.get_item("k") == "v2"

    store.remove_item("k")
    store.remove_item("k")
    assert store.get_item("k") is None


def test_json_file_store_persists_between_instances(tmp_path) -> None:
    path = tmp_path / "nested" / "storage.json"

    JsonFileKeyValueStore(path).set_item("expense-tracker-budgets", "[]")
    JsonFileKeyValueStore(path).set_item("expense-tracker-transactions", '[{"id": "1"}]')

    reopened = JsonFileKeyValueStore(path)
    assert reopened.get_item("expense-tracker-budgets") == "[]"
    assert reopened.get_item("expense-tracker-transactions") == '[{"id": "1"}]'
    assert not path.with_suffix(".json.tmp").exists()
    assert json.loads(path.read_text(encoding="utf-8")) == {
        "expense-tracker-budgets": "[]",
        "expense-tracker-transactions": '[{"id": "1"}]',
    }


def test_json_file_store_missing_file_reads_as_empty(tmp_path) -> None:
    store = JsonFileKeyValueStore(tmp_path / "absent.json")

    assert store.get_item("anything") is None
    store.remove_item("anything")
    assert not (tmp_path / "absent.json").exists()


def test_json_file_store_corrupt_file_reads_as_empty(tmp_path, caplog) -> None:
    path = tmp_path / "storage.json"
    path.write_text("{not json", encoding="utf-8")

    assert JsonFileKeyValueStore(path).get_item("k") is None
    assert "kv_file_corrupt" in caplog.text


def test_json_file_store_write_failure_raises_and_keeps_previous_file(tmp_path, monkeypatch) -> None:
    path = tmp_path / "storage.json"
    store = JsonFileKeyValueStore(path)
    store.set_item("k", "old")

    def _fail_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr("backend.storage.key_value_store.os.replace", _fail_replace)

    with pytest.raises(StorageWriteError):
        store.set_item("k", "new")

    assert store.get_item("k") == "old"
    assert not path.with_suffix(".json.tmp").exists()
