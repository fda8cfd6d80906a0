"""Input-boundary validation for transaction and budget payloads.

Field problems are collected as human-readable messages keyed by field name so
a form can show all of them at once. Nothing is written while any remain.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Mapping

from pydantic import BaseModel, ValidationError

from shared.date_utils import parse_date, parse_month
from shared.models import (
    AMOUNT_DECIMAL_PLACES,
    AMOUNT_MAX_DIGITS,
    BudgetCreate,
    BudgetUpdate,
    TransactionCreate,
    TransactionType,
    TransactionUpdate,
)


AMOUNT_MESSAGE = "Amount must be greater than 0"
AMOUNT_PRECISION_MESSAGE = "Amount must have at most 2 decimal places and 13 whole digits"
CATEGORY_MESSAGE = "Category is required"
DESCRIPTION_MESSAGE = "Description is required"
DATE_REQUIRED_MESSAGE = "Date is required"
DATE_FORMAT_MESSAGE = "Date must use the YYYY-MM-DD format"
MONTH_REQUIRED_MESSAGE = "Month is required"
MONTH_FORMAT_MESSAGE = "Month must use the YYYY-MM format"
TYPE_MESSAGE = "Type must be income or expense"
UNKNOWN_FIELD_MESSAGE = "Unknown field"

_TRANSACTION_TYPES = {member.value for member in TransactionType}
_AMOUNT_STEP = Decimal(1).scaleb(-AMOUNT_DECIMAL_PLACES)
_AMOUNT_LIMIT = Decimal(1).scaleb(AMOUNT_MAX_DIGITS - AMOUNT_DECIMAL_PLACES)


class InputValidationError(ValueError):
    """Raised when a payload has one or more invalid fields."""

    def __init__(self, field_errors: dict[str, str]) -> None:
        super().__init__("; ".join(f"{field}: {message}" for field, message in field_errors.items()))
        self.field_errors = field_errors


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _parse_amount(value: Any) -> Decimal | None:
    if isinstance(value, bool) or value is None:
        return None
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        return None
    if not amount.is_finite():
        return None
    return amount


def _check_amount(payload: Mapping[str, Any], errors: dict[str, str], *, required: bool) -> None:
    if "amount" not in payload and not required:
        return
    amount = _parse_amount(payload.get("amount"))
    if amount is None or amount <= 0:
        errors["amount"] = AMOUNT_MESSAGE
    elif amount >= _AMOUNT_LIMIT or amount.quantize(_AMOUNT_STEP) != amount:
        errors["amount"] = AMOUNT_PRECISION_MESSAGE


def _check_required_text(
    payload: Mapping[str, Any],
    errors: dict[str, str],
    field_name: str,
    message: str,
    *,
    required: bool,
) -> None:
    if field_name not in payload and not required:
        return
    value = payload.get(field_name)
    if _is_blank(value) or not isinstance(value, str):
        errors[field_name] = message


def _check_date(payload: Mapping[str, Any], errors: dict[str, str], *, required: bool) -> None:
    if "date" not in payload and not required:
        return
    value = payload.get("date")
    if _is_blank(value):
        errors["date"] = DATE_REQUIRED_MESSAGE
    elif not isinstance(value, str) or parse_date(value) is None:
        errors["date"] = DATE_FORMAT_MESSAGE


def _check_month(payload: Mapping[str, Any], errors: dict[str, str], *, required: bool) -> None:
    if "month" not in payload and not required:
        return
    value = payload.get("month")
    if _is_blank(value):
        errors["month"] = MONTH_REQUIRED_MESSAGE
    elif not isinstance(value, str) or parse_month(value) is None or len(value.strip()) != 7:
        errors["month"] = MONTH_FORMAT_MESSAGE


def _check_type(payload: Mapping[str, Any], errors: dict[str, str], *, required: bool) -> None:
    if "type" not in payload and not required:
        return
    value = payload.get("type")
    if not isinstance(value, str) or value not in _TRANSACTION_TYPES:
        errors["type"] = TYPE_MESSAGE


def _field_errors_from_validation_error(exc: ValidationError) -> dict[str, str]:
    field_errors: dict[str, str] = {}
    for error in exc.errors():
        location = error.get("loc") or ("__root__",)
        field_name = str(location[0])
        if error.get("type") == "extra_forbidden":
            field_errors.setdefault(field_name, UNKNOWN_FIELD_MESSAGE)
        else:
            field_errors.setdefault(field_name, str(error.get("msg") or "Invalid value"))
    return field_errors


def _build(model: type[BaseModel], payload: Mapping[str, Any], errors: dict[str, str]) -> Any:
    unknown_fields = sorted(set(payload) - set(model.model_fields))
    for field_name in unknown_fields:
        errors.setdefault(field_name, UNKNOWN_FIELD_MESSAGE)
    if errors:
        raise InputValidationError(errors)

    data = dict(payload)
    if data.get("amount") is not None:
        data["amount"] = _parse_amount(data["amount"]).quantize(_AMOUNT_STEP)
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise InputValidationError(_field_errors_from_validation_error(exc)) from exc


def parse_transaction_create(payload: Mapping[str, Any]) -> TransactionCreate:
    errors: dict[str, str] = {}
    _check_amount(payload, errors, required=True)
    _check_required_text(payload, errors, "description", DESCRIPTION_MESSAGE, required=True)
    _check_required_text(payload, errors, "category", CATEGORY_MESSAGE, required=True)
    _check_date(payload, errors, required=True)
    _check_type(payload, errors, required=True)
    return _build(TransactionCreate, payload, errors)


def parse_transaction_update(payload: Mapping[str, Any]) -> TransactionUpdate:
    """Validate a partial edit; only the fields present are checked."""
    errors: dict[str, str] = {}
    _check_amount(payload, errors, required=False)
    _check_required_text(payload, errors, "description", DESCRIPTION_MESSAGE, required=False)
    _check_required_text(payload, errors, "category", CATEGORY_MESSAGE, required=False)
    _check_date(payload, errors, required=False)
    _check_type(payload, errors, required=False)
    return _build(TransactionUpdate, payload, errors)


def parse_budget_create(payload: Mapping[str, Any]) -> BudgetCreate:
    errors: dict[str, str] = {}
    _check_required_text(payload, errors, "category", CATEGORY_MESSAGE, required=True)
    _check_amount(payload, errors, required=True)
    _check_month(payload, errors, required=True)
    return _build(BudgetCreate, payload, errors)


def parse_budget_update(payload: Mapping[str, Any]) -> BudgetUpdate:
    errors: dict[str, str] = {}
    _check_required_text(payload, errors, "category", CATEGORY_MESSAGE, required=False)
    _check_amount(payload, errors, required=False)
    _check_month(payload, errors, required=False)
    return _build(BudgetUpdate, payload, errors)
