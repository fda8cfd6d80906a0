"""Tests for dashboard PDF rendering."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from backend.reporting import DashboardReportData, generate_dashboard_report_pdf
from backend.services.summary import budget_overview, summarize
from shared.models import Budget, Transaction, TransactionType


def _transaction(tx_id: str, amount: str, category: str, day: date, tx_type: TransactionType) -> Transaction:
    return Transaction(
        id=tx_id,
        amount=Decimal(amount),
        description=f"{category} entry",
        category=category,
        date=day,
        type=tx_type,
    )


def test_generate_report_with_empty_data_returns_pdf() -> None:
    reference = date(2024, 5, 20)
    data = DashboardReportData(
        summary=summarize([], today=reference),
        budget_overview=budget_overview([], [], "2024-05"),
        generated_on=reference,
    )

    pdf_bytes = generate_dashboard_report_pdf(data)

    assert pdf_bytes.startswith(b"%PDF")


def test_generate_report_with_populated_data_returns_pdf() -> None:
    reference = date(2024, 5, 20)
    transactions = [
        _transaction("1", "2500", "Income", date(2024, 5, 1), TransactionType.INCOME),
        _transaction("2", "82.40", "Food & Dining", date(2024, 5, 3), TransactionType.EXPENSE),
        _transaction("3", "45", "Transportation", date(2024, 4, 12), TransactionType.EXPENSE),
        _transaction("4", "120.99", "Shopping", date(2024, 3, 8), TransactionType.EXPENSE),
        _transaction("5", "30", "Pet supplies", date(2024, 5, 15), TransactionType.EXPENSE),
    ]
    budgets = [Budget(id="b1", category="Food & Dining", amount=Decimal("60"), month="2024-05")]
    data = DashboardReportData(
        summary=summarize(transactions, today=reference),
        budget_overview=budget_overview(transactions, budgets, "2024-05"),
        currency="EUR",
        generated_on=reference,
    )

    pdf_bytes = generate_dashboard_report_pdf(data)

    assert pdf_bytes.startswith(b"%PDF")
    assert len(pdf_bytes) > 1000
