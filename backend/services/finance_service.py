"""Finance service facade: validate input, persist records, build view models."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, Mapping

from backend.repositories.budgets_repository import BudgetsRepository
from backend.repositories.transactions_repository import TransactionsRepository
from backend.services import summary
from backend.services.validation import (
    InputValidationError,
    parse_budget_create,
    parse_budget_update,
    parse_transaction_create,
    parse_transaction_update,
)
from backend.storage import StorageWriteError
from shared.categories import list_categories
from shared.date_utils import current_month_str, month_key, parse_month, today
from shared.models import (
    Budget,
    BudgetComparison,
    BudgetOverview,
    Category,
    DashboardSummary,
    ServiceError,
    ServiceErrorCode,
    Transaction,
    TransactionFilters,
)


logger = logging.getLogger(__name__)


def _validation_error(exc: InputValidationError) -> ServiceError:
    return ServiceError(
        code=ServiceErrorCode.VALIDATION_ERROR,
        message="Invalid input",
        field_errors=exc.field_errors,
    )


def _not_found(kind: str, record_id: str) -> ServiceError:
    return ServiceError(code=ServiceErrorCode.NOT_FOUND, message=f"{kind} not found: {record_id}")


def _storage_error(exc: StorageWriteError) -> ServiceError:
    return ServiceError(code=ServiceErrorCode.STORAGE_ERROR, message=str(exc))


@dataclass(slots=True)
class FinanceService:
    transactions_repository: TransactionsRepository
    budgets_repository: BudgetsRepository
    clock: Callable[[], date] = field(default=today)

    def current_month(self) -> str:
        return current_month_str(self.clock())

    def _resolve_month(self, month: str | None) -> str | ServiceError:
        if month is None:
            return self.current_month()
        if parse_month(month) is None or len(month.strip()) != 7:
            return ServiceError(
                code=ServiceErrorCode.VALIDATION_ERROR,
                message="Invalid month",
                field_errors={"month": "Month must use the YYYY-MM format"},
            )
        return month.strip()

    # Dashboard

    def get_dashboard_summary(self) -> DashboardSummary:
        return summary.summarize(self.transactions_repository.list(), today=self.clock())

    # Transactions

    def list_transactions(self, filters: TransactionFilters | None = None) -> list[Transaction]:
        transactions = self.transactions_repository.list()
        if filters is None:
            return transactions
        if filters.month is not None:
            transactions = [item for item in transactions if month_key(item.date) == filters.month]
        if filters.type is not None:
            transactions = [item for item in transactions if item.type == filters.type]
        if filters.category is not None:
            transactions = [item for item in transactions if item.category == filters.category]
        return transactions

    def get_transaction(self, transaction_id: str) -> Transaction | ServiceError:
        transaction = self.transactions_repository.get(transaction_id)
        if transaction is None:
            return _not_found("Transaction", transaction_id)
        return transaction

    def create_transaction(self, payload: Mapping[str, Any]) -> Transaction | ServiceError:
        try:
            request = parse_transaction_create(payload)
        except InputValidationError as exc:
            logger.info("transaction_create_rejected fields=%s", sorted(exc.field_errors))
            return _validation_error(exc)

        try:
            transaction = self.transactions_repository.add(request)
        except StorageWriteError as exc:
            logger.exception("transaction_create_storage_failed")
            return _storage_error(exc)

        logger.info("transaction_created id=%s type=%s", transaction.id, transaction.type.value)
        return transaction

    def update_transaction(self, transaction_id: str, payload: Mapping[str, Any]) -> Transaction | ServiceError:
        try:
            changes = parse_transaction_update(payload)
        except InputValidationError as exc:
            logger.info("transaction_update_rejected id=%s fields=%s", transaction_id, sorted(exc.field_errors))
            return _validation_error(exc)

        try:
            updated = self.transactions_repository.update(transaction_id, changes)
        except StorageWriteError as exc:
            logger.exception("transaction_update_storage_failed id=%s", transaction_id)
            return _storage_error(exc)

        if updated is None:
            return _not_found("Transaction", transaction_id)
        return updated

    def delete_transaction(self, transaction_id: str) -> bool | ServiceError:
        try:
            deleted = self.transactions_repository.delete(transaction_id)
        except StorageWriteError as exc:
            logger.exception("transaction_delete_storage_failed id=%s", transaction_id)
            return _storage_error(exc)

        if not deleted:
            return _not_found("Transaction", transaction_id)
        logger.info("transaction_deleted id=%s", transaction_id)
        return True

    # Budgets

    def list_budgets(self, month: str | None = None) -> list[Budget] | ServiceError:
        budgets = self.budgets_repository.list()
        if month is None:
            return budgets
        resolved = self._resolve_month(month)
        if isinstance(resolved, ServiceError):
            return resolved
        return [budget for budget in budgets if budget.month == resolved]

    def create_budget(self, payload: Mapping[str, Any]) -> Budget | ServiceError:
        try:
            request = parse_budget_create(payload)
        except InputValidationError as exc:
            logger.info("budget_create_rejected fields=%s", sorted(exc.field_errors))
            return _validation_error(exc)

        try:
            budget = self.budgets_repository.add(request)
        except StorageWriteError as exc:
            logger.exception("budget_create_storage_failed")
            return _storage_error(exc)

        logger.info("budget_created id=%s category=%s month=%s", budget.id, budget.category, budget.month)
        return budget

    def update_budget(self, budget_id: str, payload: Mapping[str, Any]) -> Budget | ServiceError:
        try:
            changes = parse_budget_update(payload)
        except InputValidationError as exc:
            logger.info("budget_update_rejected id=%s fields=%s", budget_id, sorted(exc.field_errors))
            return _validation_error(exc)

        try:
            updated = self.budgets_repository.update(budget_id, changes)
        except StorageWriteError as exc:
            logger.exception("budget_update_storage_failed id=%s", budget_id)
            return _storage_error(exc)

        if updated is None:
            return _not_found("Budget", budget_id)
        return updated

    def delete_budget(self, budget_id: str) -> bool | ServiceError:
        try:
            deleted = self.budgets_repository.delete(budget_id)
        except StorageWriteError as exc:
            logger.exception("budget_delete_storage_failed id=%s", budget_id)
            return _storage_error(exc)

        if not deleted:
            return _not_found("Budget", budget_id)
        logger.info("budget_deleted id=%s", budget_id)
        return True

    def compare_budgets(self, month: str | None = None) -> list[BudgetComparison] | ServiceError:
        resolved = self._resolve_month(month)
        if isinstance(resolved, ServiceError):
            return resolved
        return summary.compare_budgets(
            self.transactions_repository.list(),
            self.budgets_repository.list(),
            resolved,
        )

    def get_budget_overview(self, month: str | None = None) -> BudgetOverview | ServiceError:
        resolved = self._resolve_month(month)
        if isinstance(resolved, ServiceError):
            return resolved
        return summary.budget_overview(
            self.transactions_repository.list(),
            self.budgets_repository.list(),
            resolved,
        )

    # Categories

    def list_categories(self, *, budgetable_only: bool = False) -> list[Category]:
        return list_categories(budgetable_only=budgetable_only)
