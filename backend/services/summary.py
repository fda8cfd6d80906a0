"""Aggregation engine: derive dashboard and budget views from records.

Every function here is pure. Inputs are never mutated and nothing touches
storage; callers load the records and pass them in.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date
from decimal import Decimal, ROUND_HALF_UP

from shared.categories import get_category_color
from shared.date_utils import month_key, month_label, today as _today, trailing_months
from shared.models import (
    Budget,
    BudgetComparison,
    BudgetOverview,
    BudgetStatus,
    CategoryExpense,
    DashboardSummary,
    MonthlyExpense,
    Transaction,
    TransactionType,
)


TREND_MONTHS = 6
RECENT_TRANSACTIONS_LIMIT = 5
BUDGET_ON_TRACK_MAX_PERCENT = Decimal("60")
BUDGET_WARNING_MAX_PERCENT = Decimal("80")

_ZERO = Decimal("0")


def _sum_amounts(transactions: Iterable[Transaction]) -> Decimal:
    return sum((transaction.amount for transaction in transactions), _ZERO)


def _expenses(transactions: Iterable[Transaction]) -> list[Transaction]:
    return [transaction for transaction in transactions if transaction.type == TransactionType.EXPENSE]


def monthly_expense_series(
    transactions: Sequence[Transaction],
    *,
    reference: date,
    months: int = TREND_MONTHS,
) -> list[MonthlyExpense]:
    """Expense totals for the trailing months ending at reference, oldest first."""
    totals: dict[str, Decimal] = {}
    for transaction in _expenses(transactions):
        key = month_key(transaction.date)
        totals[key] = totals.get(key, _ZERO) + transaction.amount

    return [
        MonthlyExpense(
            month=month_label(first_day),
            month_key=month_key(first_day),
            amount=totals.get(month_key(first_day), _ZERO),
        )
        for first_day in trailing_months(reference, months)
    ]


def category_breakdown(transactions: Sequence[Transaction]) -> list[CategoryExpense]:
    """Expense totals per category, largest first; ties keep first-seen order."""
    totals: dict[str, Decimal] = {}
    for transaction in _expenses(transactions):
        totals[transaction.category] = totals.get(transaction.category, _ZERO) + transaction.amount

    ordered = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    return [
        CategoryExpense(category=category, amount=amount, color=get_category_color(category))
        for category, amount in ordered
    ]


def recent_transactions(
    transactions: Sequence[Transaction],
    *,
    limit: int = RECENT_TRANSACTIONS_LIMIT,
) -> list[Transaction]:
    # sorted() is stable with reverse=True, so same-day records keep stored order
    return sorted(transactions, key=lambda transaction: transaction.date, reverse=True)[:limit]


def summarize(transactions: Sequence[Transaction], *, today: date | None = None) -> DashboardSummary:
    """Compute the dashboard view model from the full transaction list."""

    reference = today or _today()
    total_income = _sum_amounts(
        transaction for transaction in transactions if transaction.type == TransactionType.INCOME
    )
    total_expenses = _sum_amounts(_expenses(transactions))

    return DashboardSummary(
        total_expenses=total_expenses,
        total_income=total_income,
        balance=total_income - total_expenses,
        monthly_expenses=monthly_expense_series(transactions, reference=reference),
        category_breakdown=category_breakdown(transactions),
        recent_transactions=recent_transactions(transactions),
    )


def _budget_status(percent_used: Decimal) -> BudgetStatus:
    if percent_used <= BUDGET_ON_TRACK_MAX_PERCENT:
        return BudgetStatus.ON_TRACK
    if percent_used <= BUDGET_WARNING_MAX_PERCENT:
        return BudgetStatus.WARNING
    return BudgetStatus.OVER


def compare_budgets(
    transactions: Sequence[Transaction],
    budgets: Sequence[Budget],
    month: str,
) -> list[BudgetComparison]:
    """Budget vs. actual spending for every budget of the given YYYY-MM month."""

    spent_by_category: dict[str, Decimal] = {}
    for transaction in _expenses(transactions):
        if month_key(transaction.date) != month:
            continue
        spent_by_category[transaction.category] = (
            spent_by_category.get(transaction.category, _ZERO) + transaction.amount
        )

    comparisons: list[BudgetComparison] = []
    for budget in budgets:
        if budget.month != month:
            continue
        spent = spent_by_category.get(budget.category, _ZERO)
        ratio = spent / budget.amount * Decimal("100")
        comparisons.append(
            BudgetComparison(
                budget_id=budget.id,
                category=budget.category,
                budgeted=budget.amount,
                spent=spent,
                remaining=max(_ZERO, budget.amount - spent),
                color=get_category_color(budget.category),
                percent_used=ratio.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP),
                status=_budget_status(ratio),
            )
        )
    return comparisons


def budget_overview(
    transactions: Sequence[Transaction],
    budgets: Sequence[Budget],
    month: str,
) -> BudgetOverview:
    items = compare_budgets(transactions, budgets, month)
    return BudgetOverview(
        month=month,
        items=items,
        total_budgeted=sum((item.budgeted for item in items), _ZERO),
        total_spent=sum((item.spent for item in items), _ZERO),
        total_remaining=sum((item.remaining for item in items), _ZERO),
    )
