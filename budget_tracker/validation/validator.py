"""
Two-Stage Draft Validation

STAGE 1 - SCHEMA VALIDATION:
- Required field presence (amount, description, date)
- Amount parses as a finite, non-negative number
- Type is income or expense
- Failures here are errors: the draft is rejected

STAGE 2 - SEMANTIC VALIDATION:
- Category exists in the registry
- Category is eligible for the transaction type
- Failures here are WARNINGS only. Stored data never has to respect the
  registry, so the engine must not refuse a draft because of it.

IMPORTANT: Validation NEVER silently fixes issues. It reports them.
"""

from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from budget_tracker.config.categories import get_category
from budget_tracker.models.transaction import (
    TransactionDraft,
    ValidationIssue,
    ValidationResult,
)

DraftInput = Union[TransactionDraft, Mapping[str, Any]]

# field -> (message when missing, message when invalid, suggested fix)
_FIELD_MESSAGES = {
    "amount": (
        "Amount is required",
        "Amount must be a non-negative number",
        "Enter an amount such as 12.50",
    ),
    "description": (
        "Description is required",
        "Description must be non-empty text",
        "Describe what the money was for",
    ),
    "date": (
        "Date is required",
        "Date must be a valid calendar date (YYYY-MM-DD)",
        "Pick a date",
    ),
    "type": (
        "Type is required",
        "Type must be 'income' or 'expense'",
        None,
    ),
    "category": (
        "Category is required",
        "Category id is invalid",
        "Pick a category from the list",
    ),
}


class TransactionValidator:
    """
    Validates transaction drafts through a two-stage pipeline.

    Stage 1: Schema validation (builds the TransactionDraft)
    Stage 2: Semantic validation (registry checks, warnings only)
    """

    def _issue_from_error(self, error: dict) -> ValidationIssue:
        loc = error.get("loc") or ()
        field = str(loc[0]) if loc else "draft"
        raw = error.get("input")
        is_missing = error.get("type") == "missing" or raw is None or (
            isinstance(raw, str) and not raw.strip()
        )
        missing_msg, invalid_msg, fix = _FIELD_MESSAGES.get(
            field,
            (f"{field} is required", f"{field} is invalid", None),
        )
        if field == "draft":
            return ValidationIssue(
                field="draft",
                issue_type="invalid_value",
                message="Transaction input must be a set of form fields",
                severity="error",
            )
        return ValidationIssue(
            field=field,
            issue_type="missing" if is_missing else "invalid_value",
            message=missing_msg if is_missing else invalid_msg,
            severity="error",
            suggested_fix=fix,
        )

    def _validate_schema(
        self,
        draft: Any,
    ) -> tuple[Optional[TransactionDraft], list[ValidationIssue]]:
        """
        Stage 1: Schema validation.

        Returns: (parsed_draft_or_None, list_of_issues)
        """
        if isinstance(draft, TransactionDraft):
            return draft, []
        try:
            parsed = TransactionDraft.model_validate(
                dict(draft) if isinstance(draft, Mapping) else draft
            )
        except PydanticValidationError as e:
            issues = []
            seen = set()
            for error in e.errors():
                issue = self._issue_from_error(error)
                if issue.field in seen:
                    continue
                seen.add(issue.field)
                issues.append(issue)
            return None, issues
        return parsed, []

    def _validate_semantic(self, draft: TransactionDraft) -> list[ValidationIssue]:
        """
        Stage 2: Semantic validation.

        Checks:
        - Unknown category ids
        - Category eligibility for the transaction type
        """
        issues = []
        category = get_category(draft.category)

        if category is None:
            issues.append(ValidationIssue(
                field="category",
                issue_type="unknown_category",
                message=f"Category '{draft.category}' is not in the category list",
                severity="warning",
                suggested_fix="It will be shown with a neutral colour",
            ))
        elif not category.accepts(draft.type):
            issues.append(ValidationIssue(
                field="category",
                issue_type="category_mismatch",
                message=(
                    f"Category '{category.name}' is not usually used "
                    f"for {draft.type.value} transactions"
                ),
                severity="warning",
                suggested_fix="Please verify the category and type",
            ))

        return issues

    def validate(self, draft: DraftInput) -> ValidationResult:
        """
        Run the full two-stage validation pipeline.

        Args:
            draft: A TransactionDraft or a mapping of raw form fields

        Returns:
            ValidationResult with all issues found and, when stage 1
            passed, the parsed draft
        """
        all_issues = []

        parsed, schema_issues = self._validate_schema(draft)
        all_issues.extend(schema_issues)
        schema_valid = parsed is not None

        # Only run stage 2 if stage 1 passes
        semantic_valid = False
        if parsed is not None:
            semantic_issues = self._validate_semantic(parsed)
            all_issues.extend(semantic_issues)
            semantic_valid = not any(i.severity == "error" for i in semantic_issues)

        warnings = [i.message for i in all_issues if i.severity == "warning"]

        return ValidationResult(
            schema_valid=schema_valid,
            semantic_valid=semantic_valid,
            is_valid=schema_valid and semantic_valid,
            draft=parsed,
            issues=all_issues,
            warnings=warnings,
        )

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """Summary of validation results for showing next to the form."""
        if result.is_valid and not result.warnings:
            return "All checks passed."

        lines = []
        for issue in result.issues:
            if issue.severity == "error":
                lines.append(f"• {issue.message}")
        for warning in result.warnings:
            lines.append(f"⚠️ {warning}")
        return "\n".join(lines)
