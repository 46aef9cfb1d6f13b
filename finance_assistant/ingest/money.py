"""Monetary token parsing and income keyword detection."""

from decimal import Decimal, InvalidOperation
import re
from typing import NamedTuple

# Currency symbols and thousands separators removed before parsing
CURRENCY_NOISE_PATTERN = re.compile(r"[$,₹]")

# Leading decimal number, trailing text is ignored
LEADING_NUMBER_PATTERN = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+))")

TABULAR_INCOME_KEYWORDS: tuple[str, ...] = ("deposit", "salary", "payment received", "credit", "refund")
STATEMENT_INCOME_KEYWORDS: tuple[str, ...] = ("deposit", "payment received", "credit")


class ParsedAmount(NamedTuple):
    """A parsed monetary token.

    ``amount`` is always the absolute value. ``signed`` keeps the parsed sign for
    callers that derive polarity from it.
    """

    amount: Decimal
    signed: Decimal
    has_plus_sign: bool


def strip_currency(value: str) -> str:
    """Remove currency symbols and thousands separators."""
    return CURRENCY_NOISE_PATTERN.sub("", value)


def parse_amount(value: object) -> ParsedAmount | None:
    """Parse a currency-formatted string such as ``"-$1,234.50"``.

    Args:
        value: Raw token, usually a string from OCR, CSV or PDF text

    Returns:
        ParsedAmount, or None when the token holds no parseable number
    """
    if value is None:
        return None

    raw = str(value)
    match = LEADING_NUMBER_PATTERN.match(strip_currency(raw))
    if not match:
        return None

    try:
        signed = Decimal(match.group(1))
    except InvalidOperation:
        return None

    return ParsedAmount(amount=abs(signed), signed=signed, has_plus_sign="+" in raw)


def mentions_income(description: str, keywords: tuple[str, ...]) -> bool:
    """Check whether a description contains any of the given income keywords."""
    text = description.lower()
    return any(keyword in text for keyword in keywords)
