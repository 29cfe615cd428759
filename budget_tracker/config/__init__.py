"""Configuration package."""

from budget_tracker.config.categories import (
    CATEGORIES,
    Category,
    categories_for_type,
    get_category,
    is_known_category,
    resolve_category,
)
from budget_tracker.config.settings import (
    AppSettings,
    Settings,
    StorageSettings,
    get_settings,
)

__all__ = [
    "CATEGORIES",
    "Category",
    "categories_for_type",
    "get_category",
    "is_known_category",
    "resolve_category",
    "AppSettings",
    "Settings",
    "StorageSettings",
    "get_settings",
]
