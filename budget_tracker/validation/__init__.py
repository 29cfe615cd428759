"""Draft validation package."""

from budget_tracker.validation.validator import DraftInput, TransactionValidator

__all__ = ["DraftInput", "TransactionValidator"]
