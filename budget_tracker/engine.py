"""
Budget Engine

This module ties the components together and is the API the presentation
layer talks to:

1. Mutations (add/delete) go through the TransactionStore, which persists
   after each successful change.
2. Views (summary, category totals, trend series) are recomputed in full
   from the live store on every call.

DESIGN DECISION: The engine owns its store explicitly. There is no global
collection; create as many independent engines as needed (tests do).
"""

from datetime import date, datetime
from typing import Callable, Optional, Union

from budget_tracker.aggregation import (
    DEFAULT_SERIES_MONTHS,
    build_snapshot,
    category_shares,
    category_totals,
    current_month_key,
    monthly_series,
    period_summary,
    recent_transactions,
    select_month,
)
from budget_tracker.audit import AuditLogger, configure_logging
from budget_tracker.config import CATEGORIES, Settings, get_settings
from budget_tracker.models.summary import (
    CategoryShare,
    CategoryTotals,
    DashboardSnapshot,
    MonthlyEntry,
    PeriodSummary,
)
from budget_tracker.models.transaction import Transaction, TransactionDraft
from budget_tracker.services.storage import (
    InMemoryStorage,
    JsonFileStorage,
    KeyValueStorageInterface,
)
from budget_tracker.store import DEFAULT_STORAGE_KEY, TransactionStore
from budget_tracker.validation import DraftInput

DateLike = Union[date, datetime, str]


class BudgetEngine:
    """
    Facade over the transaction store and the aggregation functions.

    `add_transaction` raises ValidationError for a rejected draft, and the
    trend views raise ValueError for a `reference_date` that is not a date.
    Everything else degrades to a neutral result. The trend series always
    covers the trailing 12 months.
    """

    def __init__(
        self,
        store: TransactionStore,
        *,
        recent_limit: int = 20,
        default_category: str = "food",
        today: Callable[[], date] = date.today,
    ):
        self._store = store
        self._recent_limit = recent_limit
        self._default_category = default_category
        self._today = today

    @classmethod
    def open(
        cls,
        storage: Optional[KeyValueStorageInterface] = None,
        settings: Optional[Settings] = None,
        *,
        audit_logger: Optional[AuditLogger] = None,
        today: Callable[[], date] = date.today,
    ) -> "BudgetEngine":
        """
        Build an engine and load persisted transactions once.

        Without an explicit storage, the backend configured in settings is
        used.
        """
        settings = settings or get_settings()
        storage_settings = settings.storage
        app_settings = settings.app

        if storage is None:
            if storage_settings.backend == "memory":
                storage = InMemoryStorage()
            else:
                storage = JsonFileStorage(storage_settings.data_dir)

        store = TransactionStore(
            storage,
            key=storage_settings.transactions_key or DEFAULT_STORAGE_KEY,
            audit_logger=audit_logger,
        )
        store.load_from_persistence()
        return cls(
            store,
            recent_limit=app_settings.recent_limit,
            default_category=app_settings.default_category,
            today=today,
        )

    @property
    def store(self) -> TransactionStore:
        return self._store

    def current_month(self) -> str:
        return current_month_key(self._today())

    def blank_draft(self) -> dict:
        """Default form values for a new transaction."""
        return TransactionDraft.blank(
            today=self._today(),
            default_category=self._default_category,
        )

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add_transaction(self, draft: DraftInput) -> Transaction:
        """
        Record a new transaction.

        Raises:
            ValidationError: the draft was rejected; nothing changed.
        """
        return self._store.add(draft)

    def delete_transaction(self, transaction_id: str) -> None:
        self._store.remove(transaction_id)

    # -------------------------------------------------------------------------
    # Views (recomputed on every call)
    # -------------------------------------------------------------------------

    def list_transactions(self) -> list[Transaction]:
        return self._store.list()

    def recent_transactions(self, limit: Optional[int] = None) -> list[Transaction]:
        return recent_transactions(
            self._store.list(),
            self._recent_limit if limit is None else limit,
        )

    def get_category_totals(self, month_key: str) -> CategoryTotals:
        return category_totals(select_month(self._store.list(), month_key))

    def get_period_summary(self, month_key: str) -> PeriodSummary:
        return period_summary(select_month(self._store.list(), month_key))

    def get_category_shares(self, month_key: str) -> list[CategoryShare]:
        return category_shares(select_month(self._store.list(), month_key), CATEGORIES)

    def get_monthly_series(
        self,
        reference_date: Optional[DateLike] = None,
    ) -> list[MonthlyEntry]:
        """
        Income, expenses and net for the 12 months ending at `reference_date`
        (default: today).

        Raises:
            ValueError: `reference_date` is not a date or YYYY-MM-DD string.
        """
        return monthly_series(
            self._store.list(),
            reference_date or self._today(),
            DEFAULT_SERIES_MONTHS,
        )

    def get_snapshot(
        self,
        month_key: Optional[str] = None,
        reference_date: Optional[DateLike] = None,
    ) -> DashboardSnapshot:
        """
        Every dashboard view for one month in a single recompute.

        Raises:
            ValueError: `reference_date` is not a date or YYYY-MM-DD string.
        """
        return build_snapshot(
            self._store.list(),
            month_key or self.current_month(),
            reference_date or self._today(),
            months=DEFAULT_SERIES_MONTHS,
            recent_limit=self._recent_limit,
            registry=CATEGORIES,
        )


def create_engine(settings: Optional[Settings] = None) -> BudgetEngine:
    """
    Application entry point: configure logging from settings and open the
    engine on the configured storage.
    """
    settings = settings or get_settings()
    app_settings = settings.app
    configure_logging(app_settings.log_level, app_settings.json_logs)
    return BudgetEngine.open(settings=settings)
