"""
Time-Window Filter

Narrows a transaction collection by calendar month. A transaction's `date`
string is its only temporal key; `created_at` is never used here.

Month keys use the canonical form YYYY-MM. Transactions with a missing or
malformed date never match any window and never raise.
"""

import re
from datetime import date, datetime
from typing import Iterable, Optional, Union

from budget_tracker.models.transaction import Transaction

_MONTH_KEY_RE = re.compile(r"^(\d{4})-(\d{2})$")
_DATE_PREFIX_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})")

_MONTH_ABBR = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def parse_month_key(month_key: str) -> tuple[int, int]:
    """Split a YYYY-MM key into (year, month). Raises ValueError if malformed."""
    match = _MONTH_KEY_RE.match(month_key or "")
    if not match:
        raise ValueError(f"Invalid month key: {month_key!r} (expected YYYY-MM)")
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month in key: {month_key!r}")
    return year, month


def format_month_key(year: int, month: int) -> str:
    return f"{year:04d}-{month:02d}"


def month_key_of(value: Union[str, date, datetime, None]) -> Optional[str]:
    """
    Month key for a date-like value.

    Strings must start with a real calendar date (YYYY-MM-DD); anything
    else gives None.
    """
    if isinstance(value, (date, datetime)):
        return format_month_key(value.year, value.month)
    if not isinstance(value, str):
        return None
    match = _DATE_PREFIX_RE.match(value)
    if not match:
        return None
    try:
        parsed = date(int(match.group(1)), int(match.group(2)), int(match.group(3)))
    except ValueError:
        return None
    return format_month_key(parsed.year, parsed.month)


def current_month_key(today: Optional[date] = None) -> str:
    return month_key_of(today or date.today())


def shift_month(month_key: str, offset: int) -> str:
    """Move a month key forward (positive) or backward (negative)."""
    year, month = parse_month_key(month_key)
    index = year * 12 + (month - 1) + offset
    return format_month_key(index // 12, index % 12 + 1)


def month_label(month_key: str) -> str:
    """Display label for a month key, e.g. '2024-06' -> 'Jun 2024'."""
    year, month = parse_month_key(month_key)
    return f"{_MONTH_ABBR[month - 1]} {year}"


def select_month(
    transactions: Iterable[Transaction],
    month_key: str,
) -> list[Transaction]:
    """
    Every transaction dated inside the given month, in input order.

    An invalid or empty month key simply matches nothing. Undated
    transactions never match any month.
    """
    if not month_key:
        return []
    return [t for t in transactions if month_key_of(t.date) == month_key]


def trailing_months(
    reference_date: Union[date, datetime, str],
    count: int = 12,
) -> list[str]:
    """
    `count` consecutive month keys ending at the month of `reference_date`,
    oldest first.
    """
    if count < 0:
        raise ValueError("count must be non-negative")
    end_key = month_key_of(reference_date)
    if end_key is None:
        raise ValueError(f"Invalid reference date: {reference_date!r}")
    return [shift_month(end_key, -offset) for offset in range(count - 1, -1, -1)]


def group_by_month(transactions: Iterable[Transaction]) -> dict[str, list[Transaction]]:
    """Bucket transactions by month key; undated ones are left out."""
    buckets: dict[str, list[Transaction]] = {}
    for t in transactions:
        key = month_key_of(t.date)
        if key is None:
            continue
        buckets.setdefault(key, []).append(t)
    return buckets
