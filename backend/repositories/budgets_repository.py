"""Budgets repository over the persisted `budgets` collection."""

from __future__ import annotations

from typing import Protocol

from backend.repositories.collection_store import BUDGETS_COLLECTION
from backend.repositories.stored_repository import StoredRecordsRepository
from shared.models import Budget, BudgetCreate, BudgetUpdate


class BudgetsRepository(Protocol):
    def list(self) -> list[Budget]:
        """Return all budgets in stored order."""

    def get(self, record_id: str) -> Budget | None:
        """Return one budget or None."""

    def add(self, request: BudgetCreate) -> Budget:
        """Persist a new budget with a freshly assigned id."""

    def update(self, record_id: str, changes: BudgetUpdate) -> Budget | None:
        """Merge changes into a budget; None when the id is unknown."""

    def delete(self, record_id: str) -> bool:
        """Remove a budget; False when the id is unknown."""

    def replace_all(self, records: list[Budget]) -> None:
        """Overwrite the whole collection."""


class StoredBudgetsRepository(StoredRecordsRepository[Budget]):
    """Budgets kept as one JSON array in the key-value store."""

    record_model = Budget
    collection = BUDGETS_COLLECTION
