"""Shared fixtures: in-memory storage, a fixed clock and ready-made stores."""

from datetime import date, datetime, timedelta, timezone
from itertools import count

import pytest

from budget_tracker.engine import BudgetEngine
from budget_tracker.models.transaction import Transaction
from budget_tracker.services.storage import InMemoryStorage
from budget_tracker.store import TransactionStore

TODAY = date(2024, 6, 20)


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def clock():
    """A clock that moves forward one second per call."""
    start = datetime(2024, 6, 20, 9, 0, tzinfo=timezone.utc)
    ticks = count()
    return lambda: start + timedelta(seconds=next(ticks))


@pytest.fixture
def store(storage, clock):
    ids = count(1)
    return TransactionStore(
        storage,
        clock=clock,
        id_factory=lambda: f"tx-{next(ids)}",
    )


@pytest.fixture
def engine(store):
    return BudgetEngine(store, today=lambda: TODAY)


def make_transaction(
    id: str,
    amount,
    type: str = "expense",
    category: str = "food",
    date: str = "2024-06-15",
    description: str = "test",
) -> Transaction:
    return Transaction(
        id=id,
        amount=amount,
        type=type,
        category=category,
        date=date,
        description=description,
    )
