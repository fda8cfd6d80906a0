"""Calendar month helpers used by aggregation and validation."""

from __future__ import annotations

from datetime import date, datetime

DATE_FORMAT = "%Y-%m-%d"
MONTH_FORMAT = "%Y-%m"

_MONTH_ABBREVIATIONS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def today() -> date:
    return date.today()


def month_key(value: date) -> str:
    """Return the YYYY-MM key of a date."""
    return value.strftime(MONTH_FORMAT)


def current_month_str(reference: date | None = None) -> str:
    return month_key(reference or today())


def parse_month(month_str: str) -> date | None:
    """Return the first day of the given YYYY-MM month string."""
    if not month_str:
        return None
    try:
        return datetime.strptime(month_str.strip(), MONTH_FORMAT).date()
    except ValueError:
        return None


def parse_date(date_str: str) -> date | None:
    """Parse a YYYY-MM-DD string, returning None on failure."""
    if not date_str:
        return None
    try:
        return datetime.strptime(date_str.strip(), DATE_FORMAT).date()
    except ValueError:
        return None


def shift_month(value: date, months: int) -> date:
    """Return the first day of the month `months` away from `value`."""
    index = value.month - 1 + months
    return date(value.year + index // 12, index % 12 + 1, 1)


def trailing_months(reference: date, count: int) -> list[date]:
    """Return first days of the `count` months ending at `reference`, oldest first."""
    return [shift_month(reference, -offset) for offset in range(count - 1, -1, -1)]


def month_label(value: date) -> str:
    """Short English label, e.g. 'Jan 2024', independent of the process locale."""
    return f"{_MONTH_ABBREVIATIONS[value.month - 1]} {value.year}"
