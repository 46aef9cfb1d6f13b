"""Normalization of loosely-named CSV rows into transactions."""

from collections.abc import Iterable, Mapping
import logging
from typing import Any

from finance_assistant.constants.categories import INCOME_CATEGORY

from .categorizer import classify
from .dates import parse_flexible_date
from .models import NormalizedTransaction, PaymentMethod, TransactionKind
from .money import TABULAR_INCOME_KEYWORDS, mentions_income, parse_amount

logger = logging.getLogger(__name__)

# Column aliases per logical field, first non-empty alias wins
DATE_COLUMNS = ("date", "transaction_date", "transactiondate")
DESCRIPTION_COLUMNS = ("description", "memo", "note", "merchant")
AMOUNT_COLUMNS = ("amount", "transaction_amount", "transactionamount")
CATEGORY_COLUMNS = ("category", "transaction_category", "transactioncategory")


def normalize_header(name: str) -> str:
    """Normalize a column header for alias lookup."""
    return name.strip().lower()


def _clean_row(row: Mapping[Any, Any]) -> dict[str, Any]:
    # csv.DictReader stores overflow cells under a None key
    return {normalize_header(str(key)): value for key, value in row.items() if key is not None}


def _pick(row: Mapping[str, Any], aliases: tuple[str, ...]) -> Any:
    for alias in aliases:
        value = row.get(alias)
        if value:
            return value
    return None


def normalize_row(row: Mapping[Any, Any]) -> NormalizedTransaction | None:
    """Normalize one CSV row.

    Args:
        row: Column name to value mapping; names are matched case- and
            whitespace-insensitively

    Returns:
        NormalizedTransaction, or None when the row lacks a date, description or
        amount, or the amount is not a positive number
    """
    cleaned = _clean_row(row)

    date_field = _pick(cleaned, DATE_COLUMNS)
    description_field = _pick(cleaned, DESCRIPTION_COLUMNS)
    amount_field = _pick(cleaned, AMOUNT_COLUMNS)
    category_field = _pick(cleaned, CATEGORY_COLUMNS)

    if not (date_field and description_field and amount_field):
        return None

    parsed_date = parse_flexible_date(str(date_field))

    parsed_amount = parse_amount(amount_field)
    if parsed_amount is None:
        return None

    description = str(description_field).strip()
    is_income = parsed_amount.signed > 0 or mentions_income(description, TABULAR_INCOME_KEYWORDS)

    if category_field and str(category_field).strip():
        category = str(category_field).strip()
    elif is_income:
        category = INCOME_CATEGORY
    else:
        category = classify(description)

    if parsed_amount.amount <= 0 or not description:
        return None

    return NormalizedTransaction(
        date=parsed_date,
        description=description,
        amount=parsed_amount.amount,
        kind=TransactionKind.INCOME if is_income else TransactionKind.EXPENSE,
        category=category,
        payment_method=PaymentMethod.BANK_TRANSFER,
    )


def normalize_rows(rows: Iterable[Mapping[Any, Any]]) -> list[NormalizedTransaction]:
    """Normalize a stream of CSV rows, skipping rows that yield no transaction.

    A failure while processing one row is logged and that row is skipped; it never
    aborts the import. Errors raised by the row stream itself propagate.
    """
    transactions = []
    skipped = 0

    for row_number, row in enumerate(rows, 1):
        try:
            transaction = normalize_row(row)
        except Exception as e:
            logger.error(f"Error processing CSV row {row_number}: {e} - {row!r}")
            transaction = None

        if transaction is None:
            logger.debug(f"Skipping CSV row {row_number}")
            skipped += 1
            continue
        transactions.append(transaction)

    logger.info(f"Normalized {len(transactions)} CSV rows ({skipped} skipped)")
    return transactions
