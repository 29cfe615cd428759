"""
Exception hierarchy for the budget tracker.

DESIGN DECISION: Only ValidationError is meant to reach callers of the
engine. Everything else (corrupt persisted data, storage failures) is
caught inside the store and recovered with a defined fallback.
"""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from budget_tracker.models.transaction import ValidationIssue


class BudgetTrackerError(Exception):
    """Base exception for the budget tracker."""
    pass


class ValidationError(BudgetTrackerError):
    """
    A transaction draft was rejected.

    The store is left unmodified. Callers should surface the issues to the
    user and must not retry automatically.
    """

    def __init__(
        self,
        message: str,
        issues: Optional[list["ValidationIssue"]] = None,
    ):
        super().__init__(message)
        self.issues = issues or []

    @property
    def fields(self) -> list[str]:
        """Fields that failed validation, in issue order."""
        return [issue.field for issue in self.issues]


class CorruptPersistedDataError(BudgetTrackerError):
    """Persisted transaction data could not be parsed or had the wrong shape."""
    pass
