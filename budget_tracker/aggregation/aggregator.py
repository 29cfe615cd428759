"""
Transaction Aggregator

DESIGN DECISION: Aggregation is DETERMINISTIC and STATELESS.
Every function here is a pure function of its inputs: no caching, no
hidden state, nothing read from storage. The caller decides which
transactions to pass in (usually a month selected by the window filter).

Malformed records never raise:
- an unusable amount contributes zero
- a missing date keeps the record out of every month window
- an unknown type counts as neither income nor expense
"""

from datetime import date, datetime
from typing import Iterable, Optional, Sequence, Union

from budget_tracker.aggregation.windows import (
    group_by_month,
    month_label,
    select_month,
    trailing_months,
)
from budget_tracker.config.categories import CATEGORIES, Category
from budget_tracker.models.summary import (
    CategoryShare,
    CategoryTotals,
    MonthlyEntry,
    PeriodSummary,
)
from budget_tracker.models.transaction import Transaction

DEFAULT_SERIES_MONTHS = 12


def category_totals(transactions: Iterable[Transaction]) -> CategoryTotals:
    """
    Sum expense amounts per category.

    Only expenses count. Unknown category ids keep their own key; display
    resolution happens downstream. Records without a category or with a
    zero amount are skipped, so a category with no spending is absent
    rather than present with 0.
    """
    totals: CategoryTotals = {}
    for t in transactions:
        if not t.is_expense or not t.category:
            continue
        amount = t.effective_amount
        if amount <= 0:
            continue
        totals[t.category] = totals.get(t.category, 0.0) + amount
    return totals


def period_summary(transactions: Iterable[Transaction]) -> PeriodSummary:
    """Income, expenses and balance over an already filtered set."""
    income = 0.0
    expenses = 0.0
    for t in transactions:
        if t.is_income:
            income += t.effective_amount
        elif t.is_expense:
            expenses += t.effective_amount
    return PeriodSummary(income=income, expenses=expenses, balance=income - expenses)


def month_summary(transactions: Iterable[Transaction], month_key: str) -> PeriodSummary:
    return period_summary(select_month(transactions, month_key))


def monthly_series(
    all_transactions: Sequence[Transaction],
    reference_date: Union[date, datetime, str],
    months: int = DEFAULT_SERIES_MONTHS,
) -> list[MonthlyEntry]:
    """
    Trailing income/expense/net series ending at the month of `reference_date`.

    Always one entry per month, oldest first. Months without activity are
    zero-filled, never omitted.
    """
    buckets = group_by_month(all_transactions)
    series = []
    for key in trailing_months(reference_date, months):
        summary = period_summary(buckets.get(key, []))
        series.append(MonthlyEntry(
            month_key=key,
            month_label=month_label(key),
            income=summary.income,
            expenses=summary.expenses,
            net=summary.balance,
        ))
    return series


def percentage(category_amount: float, total_expenses: float) -> float:
    """Share of total expenses, in percent. Not clamped."""
    if total_expenses > 0:
        return category_amount / total_expenses * 100
    return 0.0


def bar_width(pct: float) -> float:
    """Display-bar width for a percentage, clamped to [0, 100]."""
    return min(max(pct, 0.0), 100.0)


def category_shares(
    transactions: Iterable[Transaction],
    registry: Optional[Sequence[Category]] = None,
) -> list[CategoryShare]:
    """
    One row per registry category, in registry order, for one month's
    transactions.

    Percentages are relative to the month's total expenses, including
    expenses booked under ids that are not in the registry.
    """
    transactions = list(transactions)
    totals = category_totals(transactions)
    total_expenses = period_summary(transactions).expenses

    rows = []
    for category in registry if registry is not None else CATEGORIES:
        total = totals.get(category.id, 0.0)
        pct = percentage(total, total_expenses)
        rows.append(CategoryShare(
            category=category,
            total=total,
            percentage=pct,
            bar_width=bar_width(pct),
        ))
    return rows
