"""Unit tests for input-boundary validation."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from backend.services.validation import (
    AMOUNT_MESSAGE,
    AMOUNT_PRECISION_MESSAGE,
    CATEGORY_MESSAGE,
    DATE_FORMAT_MESSAGE,
    DESCRIPTION_MESSAGE,
    MONTH_FORMAT_MESSAGE,
    MONTH_REQUIRED_MESSAGE,
    TYPE_MESSAGE,
    UNKNOWN_FIELD_MESSAGE,
    InputValidationError,
    parse_budget_create,
    parse_budget_update,
    parse_transaction_create,
    parse_transaction_update,
)
from shared.models import TransactionType


def test_parse_transaction_create_accepts_form_payload() -> None:
    request = parse_transaction_create(
        {
            "amount": "19.99",
            "description": "Cinema",
            "category": "Entertainment",
            "date": "2024-04-12",
            "type": "expense",
        }
    )

    assert request.amount == Decimal("19.99")
    assert request.date == date(2024, 4, 12)
    assert request.type == TransactionType.EXPENSE


def test_parse_transaction_create_collects_every_field_error() -> None:
    with pytest.raises(InputValidationError) as exc_info:
        parse_transaction_create({"amount": "0", "description": "  ", "date": "12/04/2024", "type": "transfer"})

    assert exc_info.value.field_errors == {
        "amount": AMOUNT_MESSAGE,
        "description": DESCRIPTION_MESSAGE,
        "category": CATEGORY_MESSAGE,
        "date": DATE_FORMAT_MESSAGE,
        "type": TYPE_MESSAGE,
    }


@pytest.mark.parametrize("amount", [None, "", "abc", "-5", "NaN", "Infinity", True])
def test_parse_transaction_create_rejects_non_positive_or_unparseable_amount(amount) -> None:
    payload = {
        "amount": amount,
        "description": "x",
        "category": "Other",
        "date": "2024-04-12",
        "type": "income",
    }

    with pytest.raises(InputValidationError) as exc_info:
        parse_transaction_create(payload)

    assert exc_info.value.field_errors == {"amount": AMOUNT_MESSAGE}


def test_parse_transaction_create_flags_unknown_fields() -> None:
    with pytest.raises(InputValidationError) as exc_info:
        parse_transaction_create(
            {
                "id": "forged",
                "amount": 5,
                "description": "x",
                "category": "Other",
                "date": "2024-04-12",
                "type": "income",
            }
        )

    assert exc_info.value.field_errors == {"id": UNKNOWN_FIELD_MESSAGE}


def test_parse_transaction_update_only_checks_present_fields() -> None:
    changes = parse_transaction_update({"description": "Renamed"})

    assert changes.description == "Renamed"
    assert changes.amount is None

    with pytest.raises(InputValidationError) as exc_info:
        parse_transaction_update({"amount": -1})
    assert exc_info.value.field_errors == {"amount": AMOUNT_MESSAGE}


def test_parse_budget_create_requires_category_amount_and_month() -> None:
    with pytest.raises(InputValidationError) as exc_info:
        parse_budget_create({"category": "", "amount": "0"})

    assert exc_info.value.field_errors == {
        "category": CATEGORY_MESSAGE,
        "amount": AMOUNT_MESSAGE,
        "month": MONTH_REQUIRED_MESSAGE,
    }


@pytest.mark.parametrize("month", ["2024-13", "2024-1", "24-01", "2024/01"])
def test_parse_budget_create_rejects_bad_month(month) -> None:
    with pytest.raises(InputValidationError) as exc_info:
        parse_budget_create({"category": "Travel", "amount": 100, "month": month})

    assert exc_info.value.field_errors == {"month": MONTH_FORMAT_MESSAGE}


def test_parse_budget_update_accepts_partial_payload() -> None:
    changes = parse_budget_update({"month": "2024-08"})

    assert changes.month == "2024-08"
    assert changes.category is None


@pytest.mark.parametrize("amount", ["12345678901234567.89", "10000000000000", "1e-400", "1e5000", "0.001"])
def test_parse_transaction_create_rejects_amounts_that_cannot_be_stored_exactly(amount) -> None:
    payload = {
        "amount": amount,
        "description": "x",
        "category": "Other",
        "date": "2024-04-12",
        "type": "expense",
    }

    with pytest.raises(InputValidationError) as exc_info:
        parse_transaction_create(payload)

    assert exc_info.value.field_errors == {"amount": AMOUNT_PRECISION_MESSAGE}


def test_parse_amount_accepts_largest_storable_value() -> None:
    request = parse_budget_create({"category": "Travel", "amount": "9999999999999.99", "month": "2024-05"})

    assert request.amount == Decimal("9999999999999.99")


def test_parse_budget_update_bounds_amount() -> None:
    with pytest.raises(InputValidationError) as exc_info:
        parse_budget_update({"amount": "1e5000"})

    assert exc_info.value.field_errors == {"amount": AMOUNT_PRECISION_MESSAGE}


@pytest.mark.parametrize("value", [[], {}, ["expense"], 1])
def test_parse_transaction_create_rejects_non_string_type(value) -> None:
    payload = {
        "amount": "5",
        "description": "x",
        "category": "Other",
        "date": "2024-04-12",
        "type": value,
    }

    with pytest.raises(InputValidationError) as exc_info:
        parse_transaction_create(payload)

    assert exc_info.value.field_errors == {"type": TYPE_MESSAGE}
