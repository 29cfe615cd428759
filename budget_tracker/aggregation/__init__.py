"""Aggregation package: time windows, aggregates and the recompute policy."""

from budget_tracker.aggregation.aggregator import (
    DEFAULT_SERIES_MONTHS,
    bar_width,
    category_shares,
    category_totals,
    month_summary,
    monthly_series,
    percentage,
    period_summary,
)
from budget_tracker.aggregation.views import build_snapshot, recent_transactions
from budget_tracker.aggregation.windows import (
    current_month_key,
    month_key_of,
    month_label,
    select_month,
    shift_month,
    trailing_months,
)

__all__ = [
    "DEFAULT_SERIES_MONTHS",
    "bar_width",
    "category_shares",
    "category_totals",
    "month_summary",
    "monthly_series",
    "percentage",
    "period_summary",
    "build_snapshot",
    "recent_transactions",
    "current_month_key",
    "month_key_of",
    "month_label",
    "select_month",
    "shift_month",
    "trailing_months",
]
