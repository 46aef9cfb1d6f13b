"""Keyword-based category classifier for merchant names and descriptions."""

from finance_assistant.constants.categories import OTHER_CATEGORY

# Evaluated top to bottom, first match wins. Groups overlap ("amazon" vs
# "amazon prime"), so the order is part of the behavior.
CATEGORY_RULES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Food & Dining", ("grocery", "food", "supermarket", "market")),
    ("Transportation", ("gas", "fuel", "shell", "exxon")),
    ("Shopping", ("amazon", "walmart", "target", "costco")),
    ("Food & Dining", ("restaurant", "cafe", "pizza", "burger")),
    ("Transportation", ("uber", "lyft", "taxi")),
    ("Entertainment", ("netflix", "spotify", "hulu", "amazon prime")),
    ("Health & Fitness", ("gym", "fitness", "planet fitness")),
)


def classify(text: str | None) -> str:
    """Map a merchant name or description to a spending category.

    Args:
        text: Free text such as a merchant name or a bank description

    Returns:
        The category of the first matching keyword group, or ``"Other"``
    """
    name = (text or "").lower()
    for category, keywords in CATEGORY_RULES:
        if any(keyword in name for keyword in keywords):
            return category
    return OTHER_CATEGORY
