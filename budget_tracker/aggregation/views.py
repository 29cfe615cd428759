"""
Derived-View Recompute Policy

Every view is rebuilt in full from the live transaction list each time it
is asked for: on every selected-month change and after every add/delete.
Nothing is cached between calls, so there is nothing to invalidate.

At personal-finance scale (low thousands of records) a full pass is far
below a millisecond. If volumes ever grow, per-month running totals kept
up to date on add/delete could replace `build_snapshot`, as long as the
results stay identical.
"""

from datetime import date, datetime
from typing import Optional, Sequence, Union

from budget_tracker.aggregation.aggregator import (
    DEFAULT_SERIES_MONTHS,
    category_shares,
    category_totals,
    monthly_series,
    period_summary,
)
from budget_tracker.aggregation.windows import month_key_of, select_month
from budget_tracker.config.categories import Category
from budget_tracker.models.summary import DashboardSnapshot
from budget_tracker.models.transaction import Transaction

DEFAULT_RECENT_LIMIT = 20


def recent_transactions(
    transactions: Sequence[Transaction],
    limit: int = DEFAULT_RECENT_LIMIT,
) -> list[Transaction]:
    """The newest `limit` transactions of a newest-first list."""
    if limit <= 0:
        return []
    return list(transactions[:limit])


def build_snapshot(
    transactions: Sequence[Transaction],
    month_key: str,
    reference_date: Union[date, datetime, str],
    *,
    months: int = DEFAULT_SERIES_MONTHS,
    recent_limit: int = DEFAULT_RECENT_LIMIT,
    registry: Optional[Sequence[Category]] = None,
) -> DashboardSnapshot:
    """
    Compute every dashboard view in one full pass.

    `month_key` selects the month for the summary and category views;
    `reference_date` anchors the trailing series (normally today).
    """
    selected = select_month(transactions, month_key)
    return DashboardSnapshot(
        month_key=month_key,
        reference_month_key=month_key_of(reference_date),
        summary=period_summary(selected),
        category_totals=category_totals(selected),
        category_shares=category_shares(selected, registry),
        monthly_series=monthly_series(transactions, reference_date, months),
        recent_transactions=recent_transactions(transactions, recent_limit),
    )
