"""Centralized category constants for the finance assistant.

This module holds the fixed category taxonomy that every user starts with.
Custom categories live in the per-user store (see ``finance_assistant.categories``)
and never change these defaults.
"""

from typing import Final, TypedDict

# Labels shared by the classifier and the import paths
INCOME_CATEGORY: Final = "Income"
OTHER_CATEGORY: Final = "Other"

# Default expense categories, in display order
EXPENSE_CATEGORIES: Final[tuple[str, ...]] = (
    "Food & Dining",
    "Transportation",
    "Shopping",
    "Entertainment",
    "Bills & Utilities",
    "Healthcare",
    "Health & Fitness",
    "Education",
    "Travel",
    "Personal Care",
    "Home & Garden",
    "Insurance",
    "Taxes",
    "Business",
    "Gifts & Donations",
    OTHER_CATEGORY,
)

# Default income categories, in display order
INCOME_CATEGORIES: Final[tuple[str, ...]] = (
    "Salary",
    "Freelance",
    "Business",
    "Investment",
    "Rental",
    "Bonus",
    "Gift",
    "Refund",
    OTHER_CATEGORY,
)


class DefaultCategories(TypedDict):
    """Type definition for the default taxonomy."""

    expense: list[str]
    income: list[str]


def get_default_categories() -> DefaultCategories:
    """Get a copy of the default category taxonomy.

    Returns:
        Dictionary with ``expense`` and ``income`` category name lists
    """
    return {"expense": list(EXPENSE_CATEGORIES), "income": list(INCOME_CATEGORIES)}


def get_category_names(kind: str) -> tuple[str, ...]:
    """Get the default category names for a transaction kind.

    Args:
        kind: Either ``"expense"`` or ``"income"``

    Returns:
        Tuple of category names

    Raises:
        ValueError: If kind is not a known transaction kind
    """
    if kind == "expense":
        return EXPENSE_CATEGORIES
    if kind == "income":
        return INCOME_CATEGORIES
    raise ValueError(f"Unknown transaction kind: {kind}")


def is_default_category(name: str, kind: str) -> bool:
    """Check whether a name is part of the default taxonomy (case-insensitive)."""
    target = name.strip().lower()
    return any(category.lower() == target for category in get_category_names(kind))
