"""
Tests for the Pydantic models.

Test strategy:
1. Unit tests for individual components (models, validators, aggregates)
2. Integration tests for flows (store + engine on in-memory storage)
3. No real files outside pytest's tmp_path
"""

import math
from datetime import date, datetime, timezone

import pytest

from budget_tracker.models import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
    PeriodSummary,
    Transaction,
    TransactionDraft,
    TransactionType,
    ValidationIssue,
    ValidationResult,
    coerce_amount,
    coerce_date_string,
)


class TestCoercion:
    """Tests for the lenient coercion helpers."""

    @pytest.mark.parametrize("raw, expected", [
        (12.5, 12.5),
        (0, 0.0),
        ("250.50", 250.5),
        ("  7 ", 7.0),
    ])
    def test_coerce_amount_accepts_numbers(self, raw, expected):
        """Numbers and numeric strings become floats."""
        assert coerce_amount(raw) == expected

    @pytest.mark.parametrize("raw", [
        None, "", "abc", float("nan"), float("inf"), -3, True, [1], {"a": 1},
    ])
    def test_coerce_amount_rejects_unusable_values(self, raw):
        """Anything that is not a finite non-negative number becomes None."""
        assert coerce_amount(raw) is None

    def test_coerce_date_string(self):
        """Date strings are normalised; malformed ones give None."""
        assert coerce_date_string("2024-06-15") == "2024-06-15"
        assert coerce_date_string("2024-06-15T10:00:00Z") == "2024-06-15"
        assert coerce_date_string(date(2024, 1, 2)) == "2024-01-02"
        assert coerce_date_string("2024-02-30") is None
        assert coerce_date_string("June 15") is None
        assert coerce_date_string(20240615) is None
        assert coerce_date_string(None) is None


class TestTransactionModel:
    """Tests for the Transaction model."""

    def test_transaction_creation(self):
        """Test Transaction model creation."""
        t = Transaction(
            id="1",
            amount=1000,
            type="income",
            category="salary",
            description="June salary",
            date="2024-06-01",
        )
        assert t.amount == 1000.0
        assert t.type == TransactionType.INCOME
        assert t.is_income is True
        assert t.signed_amount == 1000.0

    def test_transaction_is_frozen(self):
        """Transactions cannot be edited after creation."""
        t = Transaction(id="1", amount=5, type="expense", date="2024-06-01")
        with pytest.raises(ValueError):
            t.amount = 10

    def test_numeric_id_is_coerced_to_string(self):
        """Older data stored millisecond timestamps as ids."""
        t = Transaction(id=1717236000000, amount=1, type="expense")
        assert t.id == "1717236000000"

    def test_missing_id_is_rejected(self):
        """A record without an id is not a transaction."""
        with pytest.raises(ValueError):
            Transaction.model_validate({"amount": 1, "type": "expense"})

    def test_malformed_fields_are_neutralised(self):
        """Bad stored fields load as neutral values instead of failing."""
        t = Transaction.model_validate({
            "id": "x",
            "amount": "not a number",
            "type": "transfer",
            "category": 42,
            "description": None,
            "date": "yesterday",
            "timestamp": "garbage",
        })
        assert t.amount is None
        assert t.effective_amount == 0.0
        assert t.type is None
        assert t.signed_amount == 0.0
        assert t.category == "42"
        assert t.description == ""
        assert t.date is None
        assert t.created_at is None

    def test_to_record_uses_persisted_field_names(self):
        """The creation time is stored under 'timestamp'."""
        created = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
        t = Transaction(
            id="1",
            amount=10,
            type="expense",
            category="food",
            description="Lunch",
            date="2024-06-01",
            created_at=created,
        )
        record = t.to_record()
        assert record == {
            "id": "1",
            "amount": 10.0,
            "type": "expense",
            "category": "food",
            "description": "Lunch",
            "date": "2024-06-01",
            "timestamp": "2024-06-01T12:00:00+00:00",
        }
        assert Transaction.model_validate(record) == t

    def test_javascript_timestamp_is_parsed(self):
        """ISO timestamps with a trailing Z load as UTC datetimes."""
        t = Transaction.model_validate({
            "id": "1", "timestamp": "2024-06-01T12:00:00.000Z",
        })
        assert t.created_at == datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


class TestTransactionDraft:
    """Tests for the strict TransactionDraft model."""

    def test_draft_parses_form_text(self):
        """Amounts typed into a form arrive as strings."""
        draft = TransactionDraft(
            amount="250.50",
            type="expense",
            category="food",
            description="  Groceries  ",
            date="2024-06-15",
        )
        assert draft.amount == 250.5
        assert draft.description == "Groceries"
        assert draft.date == date(2024, 6, 15)

    def test_draft_defaults(self):
        """Type defaults to expense and category to food."""
        draft = TransactionDraft(amount=1, description="x", date="2024-06-15")
        assert draft.type == TransactionType.EXPENSE
        assert draft.category == "food"

    @pytest.mark.parametrize("amount", ["", "abc", -1, float("nan"), float("inf"), None])
    def test_draft_rejects_bad_amounts(self, amount):
        """Missing, non-numeric, negative and non-finite amounts are rejected."""
        with pytest.raises(ValueError):
            TransactionDraft(amount=amount, description="x", date="2024-06-15")

    def test_draft_accepts_zero_amount(self):
        """Zero is a valid non-negative amount."""
        draft = TransactionDraft(amount="0", description="x", date="2024-06-15")
        assert draft.amount == 0.0

    def test_draft_rejects_blank_description(self):
        """Descriptions are required."""
        with pytest.raises(ValueError):
            TransactionDraft(amount=1, description="   ", date="2024-06-15")

    def test_draft_accepts_long_text(self):
        """Descriptions and category ids have no upper length bound."""
        draft = TransactionDraft(
            amount=1,
            category="c" * 80,
            description="x" * 201,
            date="2024-06-15",
        )
        assert len(draft.description) == 201
        assert len(draft.category) == 80

    def test_draft_requires_date(self):
        """Dates are required."""
        with pytest.raises(ValueError):
            TransactionDraft(amount=1, description="x")

    def test_blank_form_values(self):
        """The blank form is an expense in the default category dated today."""
        blank = TransactionDraft.blank(today=date(2024, 6, 20))
        assert blank == {
            "amount": "",
            "type": "expense",
            "category": "food",
            "description": "",
            "date": "2024-06-20",
        }

    def test_to_transaction(self):
        """Stamping a draft produces a well-formed transaction."""
        draft = TransactionDraft(amount=3, description="Bus", category="transport", date="2024-06-02")
        created = datetime(2024, 6, 2, tzinfo=timezone.utc)
        t = draft.to_transaction(transaction_id="abc", created_at=created)
        assert t.id == "abc"
        assert t.date == "2024-06-02"
        assert t.created_at == created
        assert t.category == "transport"

    def test_to_transaction_generates_ids(self):
        """Without an explicit id a fresh one is generated."""
        draft = TransactionDraft(amount=3, description="Bus", date="2024-06-02")
        assert draft.to_transaction().id != draft.to_transaction().id


class TestSummaryModels:
    """Tests for aggregate view models."""

    def test_period_summary_defaults_to_zero(self):
        summary = PeriodSummary()
        assert (summary.income, summary.expenses, summary.balance) == (0.0, 0.0, 0.0)

    def test_period_summary_allows_negative_balance(self):
        summary = PeriodSummary(income=10, expenses=30, balance=-20)
        assert math.isclose(summary.balance, -20)


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.STORE_LOADED,
            description="Loaded 3 transactions",
        )
        assert event.event_type == AuditEventType.STORE_LOADED
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEventBuilder.transaction_added(
            transaction_id="tx-1",
            transaction_type="expense",
            amount=12.5,
            category="food",
        )
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "transaction_added"
        assert log_dict["entity_id"] == "tx-1"
        assert log_dict["details"]["category"] == "food"
        assert log_dict["is_user_action"] is True
        assert event.description == "Transaction added: expense 12.50"

    def test_persist_failed_is_an_error(self):
        """Write failures are recorded with error severity."""
        event = AuditEventBuilder.persist_failed("budgetTransactions", "disk full", 3)
        assert event.severity == AuditSeverity.ERROR
        assert event.error_message == "disk full"
        assert event.details == {"count": 3}

    def test_corrupt_data_discarded_is_a_warning(self):
        event = AuditEventBuilder.corrupt_data_discarded("budgetTransactions", "Not valid JSON")
        assert event.severity == AuditSeverity.WARNING
        assert event.event_type == AuditEventType.CORRUPT_DATA_DISCARDED


class TestValidationResult:
    """Tests for ValidationResult model."""

    def test_validation_result_has_errors(self):
        """Test has_errors property."""
        result = ValidationResult(
            schema_valid=False,
            semantic_valid=False,
            is_valid=False,
            issues=[
                ValidationIssue(
                    field="amount",
                    issue_type="missing",
                    message="Amount is required",
                    severity="error",
                ),
            ],
        )
        assert result.has_errors is True
        assert result.error_count == 1

    def test_validation_result_warnings_only(self):
        """Test that warnings don't count as errors."""
        result = ValidationResult(
            schema_valid=True,
            semantic_valid=True,
            is_valid=True,
            issues=[
                ValidationIssue(
                    field="category",
                    issue_type="category_mismatch",
                    message="Category mismatch",
                    severity="warning",
                ),
            ],
        )
        assert result.has_errors is False
        assert result.error_count == 0

    def test_validation_issue_severity_pattern(self):
        """Only error, warning and info severities exist."""
        with pytest.raises(ValueError):
            ValidationIssue(field="x", issue_type="y", message="z", severity="fatal")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
