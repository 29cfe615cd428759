"""
Transaction Models

These models define the schemas for transactions flowing through the engine.
Two flavours exist:

1. TransactionDraft - STRICT. What a user submits. Invalid input is rejected.
2. Transaction - LENIENT when loaded. Records read back from storage may
   carry malformed fields; those are coerced to neutral values instead of
   failing the whole load.

DESIGN DECISION: The sign of an amount is carried by `type`, never by the
stored value. Amounts are always non-negative magnitudes.
"""

import math
import datetime as dt
from enum import Enum
from typing import Any, Optional
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
)


# =============================================================================
# ENUMS
# =============================================================================

class TransactionType(str, Enum):
    """Direction of a transaction."""
    INCOME = "income"
    EXPENSE = "expense"


# =============================================================================
# COERCION HELPERS
# =============================================================================

def coerce_amount(value: Any) -> Optional[float]:
    """
    Coerce a raw amount to a finite non-negative float.

    Numeric strings are accepted. Anything else (None, text, NaN, infinity,
    negative numbers, booleans) yields None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(amount) or amount < 0:
        return None
    return amount


def coerce_date_string(value: Any) -> Optional[str]:
    """Return the ISO date string for a date-like value, or None if malformed."""
    if isinstance(value, dt.datetime):
        return value.date().isoformat()
    if isinstance(value, dt.date):
        return value.isoformat()
    if not isinstance(value, str):
        return None
    text = value.strip()
    if len(text) < 10:
        return None
    try:
        return dt.date.fromisoformat(text[:10]).isoformat()
    except ValueError:
        return None


def utc_now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


# =============================================================================
# TRANSACTION
# =============================================================================

class Transaction(BaseModel):
    """
    A single recorded income or expense event.

    Immutable once created. Only `add` creates these and only `remove`
    destroys them.

    The persisted form keeps the established field names, including the
    creation timestamp under `timestamp`, so data written by earlier
    versions of the app loads unchanged.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Opaque unique identifier"
    )
    amount: Optional[float] = Field(
        default=None,
        description="Non-negative magnitude; None when the stored value was unusable"
    )
    type: Optional[TransactionType] = Field(
        default=None,
        description="income or expense; None when the stored value was unknown"
    )
    category: Optional[str] = Field(
        default=None,
        description="Category id (not checked against the registry)"
    )
    description: str = Field(
        default="",
        description="Free-text label"
    )
    date: Optional[str] = Field(
        default=None,
        description="Calendar date as YYYY-MM-DD; the only temporal key for windowing"
    )
    created_at: Optional[dt.datetime] = Field(
        default=None,
        alias="timestamp",
        description="Creation time, only used for listing order"
    )

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        """Older data used numeric millisecond ids."""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("amount", mode="before")
    @classmethod
    def lenient_amount(cls, v: Any) -> Optional[float]:
        return coerce_amount(v)

    @field_validator("type", mode="before")
    @classmethod
    def lenient_type(cls, v: Any) -> Optional[str]:
        if isinstance(v, TransactionType):
            return v
        if v in (TransactionType.INCOME.value, TransactionType.EXPENSE.value):
            return v
        return None

    @field_validator("category", mode="before")
    @classmethod
    def lenient_category(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        return str(v)

    @field_validator("description", mode="before")
    @classmethod
    def lenient_description(cls, v: Any) -> str:
        if v is None:
            return ""
        return str(v)

    @field_validator("date", mode="before")
    @classmethod
    def lenient_date(cls, v: Any) -> Optional[str]:
        return coerce_date_string(v)

    @field_validator("created_at", mode="before")
    @classmethod
    def lenient_created_at(cls, v: Any) -> Any:
        if isinstance(v, dt.datetime):
            return v
        if isinstance(v, str):
            try:
                return dt.datetime.fromisoformat(v.replace("Z", "+00:00"))
            except ValueError:
                return None
        return None

    @field_serializer("created_at")
    def serialize_created_at(self, v: Optional[dt.datetime]) -> Optional[str]:
        return v.isoformat() if v else None

    @property
    def effective_amount(self) -> float:
        """Amount used in aggregation; unusable amounts contribute zero."""
        return self.amount if self.amount is not None else 0.0

    @property
    def is_income(self) -> bool:
        return self.type == TransactionType.INCOME

    @property
    def is_expense(self) -> bool:
        return self.type == TransactionType.EXPENSE

    @property
    def signed_amount(self) -> float:
        """Amount with the sign implied by `type` (zero for unknown types)."""
        if self.is_income:
            return self.effective_amount
        if self.is_expense:
            return -self.effective_amount
        return 0.0

    def to_record(self) -> dict:
        """Convert to the JSON-ready dict that is persisted."""
        return self.model_dump(mode="json", by_alias=True)


class TransactionDraft(BaseModel):
    """
    User input for a new transaction.

    STRICT: a draft that passes validation always produces a well-formed
    Transaction. Amounts arrive as form text, so numeric strings are parsed.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    amount: float = Field(
        ...,
        ge=0,
        allow_inf_nan=False,
        description="Non-negative amount"
    )
    type: TransactionType = Field(
        default=TransactionType.EXPENSE,
        description="income or expense"
    )
    category: str = Field(
        default="food",
        min_length=1,
        description="Category id"
    )
    description: str = Field(
        ...,
        min_length=1,
        description="What the money was for"
    )
    date: dt.date = Field(
        ...,
        description="Calendar date of the transaction"
    )

    @field_validator("amount", mode="before")
    @classmethod
    def parse_amount_text(cls, v: Any) -> Any:
        """Empty form fields count as missing."""
        if isinstance(v, str):
            v = v.strip()
            if not v:
                return None
        if isinstance(v, bool):
            return None
        return v

    @classmethod
    def blank(
        cls,
        today: Optional[dt.date] = None,
        default_category: str = "food",
    ) -> dict:
        """
        Default form values: an expense in the default category dated today.

        Returned as a dict because amount and description are still empty.
        """
        return {
            "amount": "",
            "type": TransactionType.EXPENSE.value,
            "category": default_category,
            "description": "",
            "date": (today or dt.date.today()).isoformat(),
        }

    def to_transaction(
        self,
        transaction_id: Optional[str] = None,
        created_at: Optional[dt.datetime] = None,
    ) -> Transaction:
        """Stamp the draft with an id and creation time."""
        return Transaction(
            id=transaction_id or str(uuid4()),
            amount=self.amount,
            type=self.type,
            category=self.category,
            description=self.description,
            date=self.date.isoformat(),
            created_at=created_at or utc_now(),
        )


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_value', 'category_mismatch')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )


class ValidationResult(BaseModel):
    """
    Result of the two-stage draft validation.

    Stage 1: Schema validation (types, required fields)
    Stage 2: Semantic validation (category eligibility, unknown categories)
    """

    validated_at: dt.datetime = Field(
        default_factory=utc_now
    )
    schema_valid: bool = Field(
        ...,
        description="Did schema validation pass?"
    )
    semantic_valid: bool = Field(
        ...,
        description="Did semantic validation pass?"
    )
    is_valid: bool = Field(
        ...,
        description="Overall validation result"
    )
    draft: Optional[TransactionDraft] = Field(
        default=None,
        description="The parsed draft when schema validation passed"
    )
    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All validation issues found"
    )
    warnings: list[str] = Field(
        default_factory=list,
        description="Non-blocking warnings"
    )

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")
