"""
Budget Tracker - Transaction Aggregation Engine

Records personal income and expense transactions and derives the views a
dashboard needs: monthly summary, category breakdown and a trailing
12-month trend, all computed from locally persisted data.

DESIGN PRINCIPLES:
1. Views are pure functions of the stored transactions
2. Only invalid input is reported as an error; bad stored data degrades
3. Storage layer is swappable
"""

from budget_tracker.engine import BudgetEngine, create_engine
from budget_tracker.errors import (
    BudgetTrackerError,
    CorruptPersistedDataError,
    ValidationError,
)
from budget_tracker.store import TransactionStore

__version__ = "1.0.0"

__all__ = [
    "BudgetEngine",
    "BudgetTrackerError",
    "CorruptPersistedDataError",
    "TransactionStore",
    "ValidationError",
    "create_engine",
]
