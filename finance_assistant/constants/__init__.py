"""Constants package for the finance assistant."""

from .categories import (
    EXPENSE_CATEGORIES,
    INCOME_CATEGORIES,
    INCOME_CATEGORY,
    OTHER_CATEGORY,
    get_category_names,
    get_default_categories,
    is_default_category,
)

__all__ = [
    "EXPENSE_CATEGORIES",
    "INCOME_CATEGORIES",
    "INCOME_CATEGORY",
    "OTHER_CATEGORY",
    "get_category_names",
    "get_default_categories",
    "is_default_category",
]
