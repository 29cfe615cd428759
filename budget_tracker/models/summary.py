"""
Aggregate View Models

Derived structures computed from the transaction collection.
They are NEVER persisted; every one of them is rebuilt on demand from the
live store plus a selected month.
"""

from typing import Optional

from pydantic import BaseModel, Field

from budget_tracker.config.categories import Category
from budget_tracker.models.transaction import Transaction


# category id -> summed expense amount for one month
CategoryTotals = dict[str, float]


class PeriodSummary(BaseModel):
    """Income, expenses and balance for one month."""

    income: float = Field(default=0.0, ge=0)
    expenses: float = Field(default=0.0, ge=0)
    balance: float = Field(
        default=0.0,
        description="income - expenses; may be negative"
    )


class MonthlyEntry(BaseModel):
    """One month of the trailing trend series."""

    month_key: str = Field(
        ...,
        pattern=r"^\d{4}-\d{2}$",
        description="Month as YYYY-MM"
    )
    month_label: str = Field(
        ...,
        description="Display label, e.g. 'Jun 2024'"
    )
    income: float = 0.0
    expenses: float = 0.0
    net: float = 0.0


class CategoryShare(BaseModel):
    """
    One row of the category summary.

    `percentage` is the raw share of the month's expenses and is reported
    as-is; only `bar_width` is clamped to [0, 100].
    """

    category: Category
    total: float = 0.0
    percentage: float = 0.0
    bar_width: float = Field(default=0.0, ge=0, le=100)

    @property
    def has_spending(self) -> bool:
        return self.total > 0


class DashboardSnapshot(BaseModel):
    """Every derived view for one selected month, computed in one pass."""

    month_key: str
    reference_month_key: Optional[str] = None
    summary: PeriodSummary
    category_totals: CategoryTotals = Field(default_factory=dict)
    category_shares: list[CategoryShare] = Field(default_factory=list)
    monthly_series: list[MonthlyEntry] = Field(default_factory=list)
    recent_transactions: list[Transaction] = Field(default_factory=list)
