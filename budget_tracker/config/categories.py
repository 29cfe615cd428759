"""
Category Registry

Static configuration: the fixed, ordered list of categories with their
display metadata. Read-only at runtime and never persisted.

DESIGN DECISION: Transactions are not validated against this list when they
are stored. Stale or unknown ids must still render, so lookups go through
`resolve_category`, which falls back to a neutral entry.
"""

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict

FALLBACK_COLOR = "#E0E0E0"
FALLBACK_ICON = "📦"
UNKNOWN_NAME = "Unknown"


class Category(BaseModel):
    """A category entry with display metadata and type eligibility."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    color: str
    icon: str
    income_eligible: bool = False
    expense_eligible: bool = True

    def accepts(self, transaction_type: Union[str, object]) -> bool:
        """Is this category offered for the given transaction type?"""
        value = getattr(transaction_type, "value", transaction_type)
        if value == "income":
            return self.income_eligible
        if value == "expense":
            return self.expense_eligible
        return False


INCOME_CATEGORY_IDS = frozenset({"salary", "freelance", "investment"})
BOTH_CATEGORY_IDS = frozenset({"other"})


def _entry(category_id: str, name: str, color: str, icon: str) -> Category:
    return Category(
        id=category_id,
        name=name,
        color=color,
        icon=icon,
        income_eligible=category_id in INCOME_CATEGORY_IDS or category_id in BOTH_CATEGORY_IDS,
        expense_eligible=category_id not in INCOME_CATEGORY_IDS,
    )


CATEGORIES: tuple[Category, ...] = (
    _entry("food", "Food & Dining", "#FFB3BA", "🍕"),
    _entry("transport", "Transportation", "#BAFFC9", "🚗"),
    _entry("entertainment", "Entertainment", "#BAE1FF", "🎬"),
    _entry("bills", "Bills & Utilities", "#FFFFBA", "📄"),
    _entry("shopping", "Shopping", "#FFDFBA", "🛍️"),
    _entry("health", "Health & Fitness", "#E0BBE4", "💊"),
    _entry("education", "Education", "#FFC9DE", "📚"),
    _entry("other", "Other", "#D4EDDA", "📦"),
    _entry("salary", "Salary", "#D1ECF1", "💰"),
    _entry("freelance", "Freelance", "#F8D7DA", "💻"),
    _entry("investment", "Investment", "#FFEAA7", "📈"),
)

_BY_ID = {category.id: category for category in CATEGORIES}


def get_category(category_id: Optional[str]) -> Optional[Category]:
    """Look up a registry entry; None for unknown ids."""
    if category_id is None:
        return None
    return _BY_ID.get(category_id)


def resolve_category(category_id: Optional[str]) -> Category:
    """
    Look up a registry entry, falling back to a neutral display entry.

    The fallback keeps the raw id as its name so stale categories stay
    recognisable; an empty id is shown as "Unknown".
    """
    category = get_category(category_id)
    if category is not None:
        return category
    return Category(
        id=category_id or "",
        name=category_id or UNKNOWN_NAME,
        color=FALLBACK_COLOR,
        icon=FALLBACK_ICON,
        income_eligible=False,
        expense_eligible=False,
    )


def categories_for_type(transaction_type: Union[str, object]) -> list[Category]:
    """Categories offered by the input form for a transaction type."""
    return [category for category in CATEGORIES if category.accepts(transaction_type)]


def is_known_category(category_id: Optional[str]) -> bool:
    return get_category(category_id) is not None
