"""Transactions repository over the persisted `transactions` collection."""

from __future__ import annotations

from typing import Protocol

from backend.repositories.collection_store import TRANSACTIONS_COLLECTION
from backend.repositories.stored_repository import StoredRecordsRepository
from shared.models import Transaction, TransactionCreate, TransactionUpdate


class TransactionsRepository(Protocol):
    def list(self) -> list[Transaction]:
        """Return all transactions in stored order."""

    def get(self, record_id: str) -> Transaction | None:
        """Return one transaction or None."""

    def add(self, request: TransactionCreate) -> Transaction:
        """Persist a new transaction with a freshly assigned id."""

    def update(self, record_id: str, changes: TransactionUpdate) -> Transaction | None:
        """Merge changes into a transaction; None when the id is unknown."""

    def delete(self, record_id: str) -> bool:
        """Remove a transaction; False when the id is unknown."""

    def replace_all(self, records: list[Transaction]) -> None:
        """Overwrite the whole collection."""


class StoredTransactionsRepository(StoredRecordsRepository[Transaction]):
    """Transactions kept as one JSON array in the key-value store."""

    record_model = Transaction
    collection = TRANSACTIONS_COLLECTION
