"""Pydantic contracts shared across storage, services and the HTTP API."""

from __future__ import annotations

import re
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, field_validator


MONTH_PATTERN = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


def _decimal_to_json_number(value: Decimal) -> int | float:
    if value == value.to_integral_value():
        return int(value)
    return float(value)


# Amounts stay Decimal in memory and are written as plain numeric literals.
Amount = Annotated[
    Decimal,
    PlainSerializer(_decimal_to_json_number, return_type=int | float, when_used="json"),
]
DateValue = date

# Amounts are bounded so they survive the JSON number round trip exactly.
AMOUNT_MAX_DIGITS = 15
AMOUNT_DECIMAL_PLACES = 2


def _validate_month(value: str | None) -> str | None:
    if value is None:
        return value
    cleaned = value.strip()
    if not MONTH_PATTERN.match(cleaned):
        raise ValueError("Month must use the YYYY-MM format")
    return cleaned


class TransactionType(str, Enum):
    """Kind of a transaction."""

    INCOME = "income"
    EXPENSE = "expense"


class Category(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str
    name: str
    color: str
    icon: str


class Transaction(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str = Field(min_length=1)
    amount: Amount = Field(ge=0, max_digits=AMOUNT_MAX_DIGITS, decimal_places=AMOUNT_DECIMAL_PLACES)
    description: str
    category: str
    date: date
    type: TransactionType


class TransactionCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    amount: Amount = Field(gt=0, max_digits=AMOUNT_MAX_DIGITS, decimal_places=AMOUNT_DECIMAL_PLACES)
    description: str = Field(min_length=1)
    category: str = Field(min_length=1)
    date: date
    type: TransactionType


class TransactionUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    amount: Amount | None = None
    description: str | None = None
    category: str | None = None
    date: DateValue | None = None
    type: TransactionType | None = None


class TransactionFilters(BaseModel):
    model_config = ConfigDict(extra="forbid")

    month: str | None = None
    type: TransactionType | None = None
    category: str | None = None

    @field_validator("month")
    @classmethod
    def validate_month(cls, value: str | None) -> str | None:
        return _validate_month(value)


class BudgetFilters(BaseModel):
    model_config = ConfigDict(extra="forbid")

    month: str | None = None

    @field_validator("month")
    @classmethod
    def validate_month(cls, value: str | None) -> str | None:
        return _validate_month(value)


class Budget(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str = Field(min_length=1)
    category: str
    amount: Amount = Field(gt=0, max_digits=AMOUNT_MAX_DIGITS, decimal_places=AMOUNT_DECIMAL_PLACES)
    month: str

    @field_validator("month")
    @classmethod
    def validate_month(cls, value: str) -> str:
        return _validate_month(value)


class BudgetCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    category: str = Field(min_length=1)
    amount: Amount = Field(gt=0, max_digits=AMOUNT_MAX_DIGITS, decimal_places=AMOUNT_DECIMAL_PLACES)
    month: str

    @field_validator("month")
    @classmethod
    def validate_month(cls, value: str) -> str:
        return _validate_month(value)


class BudgetUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    category: str | None = None
    amount: Amount | None = None
    month: str | None = None

    @field_validator("month")
    @classmethod
    def validate_month(cls, value: str | None) -> str | None:
        return _validate_month(value)


class MonthlyExpense(BaseModel):
    model_config = ConfigDict(extra="forbid")

    month: str
    month_key: str
    amount: Amount


class CategoryExpense(BaseModel):
    model_config = ConfigDict(extra="forbid")

    category: str
    amount: Amount
    color: str


class DashboardSummary(BaseModel):
    model_config = ConfigDict(extra="forbid")

    total_expenses: Amount
    total_income: Amount
    balance: Amount
    monthly_expenses: list[MonthlyExpense]
    category_breakdown: list[CategoryExpense]
    recent_transactions: list[Transaction]


class BudgetStatus(str, Enum):
    """Spending level of a budget, following the progress bar thresholds."""

    ON_TRACK = "on_track"
    WARNING = "warning"
    OVER = "over"


class BudgetComparison(BaseModel):
    model_config = ConfigDict(extra="forbid")

    budget_id: str
    category: str
    budgeted: Amount
    spent: Amount
    remaining: Amount
    color: str
    percent_used: Amount
    status: BudgetStatus


class BudgetOverview(BaseModel):
    model_config = ConfigDict(extra="forbid")

    month: str
    items: list[BudgetComparison]
    total_budgeted: Amount
    total_spent: Amount
    total_remaining: Amount


class ServiceErrorCode(str, Enum):
    """Stable error codes returned by the finance service."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    STORAGE_ERROR = "STORAGE_ERROR"


class ServiceError(BaseModel):
    model_config = ConfigDict(extra="forbid")

    code: ServiceErrorCode
    message: str
    field_errors: dict[str, str] = Field(default_factory=dict)
