"""Composition root for backend services."""

from __future__ import annotations

import logging

from backend.repositories.budgets_repository import StoredBudgetsRepository
from backend.repositories.collection_store import CollectionStore
from backend.repositories.transactions_repository import StoredTransactionsRepository
from backend.services.finance_service import FinanceService
from backend.storage import InMemoryKeyValueStore, JsonFileKeyValueStore, KeyValueStore
from shared import config


logger = logging.getLogger(__name__)


def build_key_value_store() -> KeyValueStore | None:
    """Return the configured store, or None when storage is disabled."""

    backend = config.storage_backend()
    if backend == "none":
        logger.info("storage_backend_disabled")
        return None
    if backend == "file":
        path = config.data_file()
        logger.info("storage_backend_file path=%s", path)
        return JsonFileKeyValueStore(path)
    return InMemoryKeyValueStore()


def build_finance_service(store: KeyValueStore | None = None) -> FinanceService:
    """Build the finance service over both persisted collections.

    Both repositories share one collection store so transactions and budgets
    live side by side under the same key prefix.
    """

    collection_store = CollectionStore(
        store if store is not None else build_key_value_store(),
        key_prefix=config.storage_key_prefix(),
    )
    return FinanceService(
        transactions_repository=StoredTransactionsRepository(collection_store),
        budgets_repository=StoredBudgetsRepository(collection_store),
    )
