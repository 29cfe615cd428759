"""
Data Models Package

This package contains all Pydantic models used by the budget tracker.
All data flowing through the engine must conform to these schemas.
"""

from budget_tracker.models.transaction import (
    Transaction,
    TransactionDraft,
    TransactionType,
    ValidationIssue,
    ValidationResult,
    coerce_amount,
    coerce_date_string,
)
from budget_tracker.models.summary import (
    CategoryShare,
    CategoryTotals,
    DashboardSnapshot,
    MonthlyEntry,
    PeriodSummary,
)
from budget_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Transaction models
    "Transaction",
    "TransactionDraft",
    "TransactionType",
    "ValidationIssue",
    "ValidationResult",
    "coerce_amount",
    "coerce_date_string",
    # Aggregate views
    "CategoryShare",
    "CategoryTotals",
    "DashboardSnapshot",
    "MonthlyEntry",
    "PeriodSummary",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
