"""Line-by-line transaction extraction from PDF bank statement text."""

from datetime import datetime
import logging
import re

from finance_assistant.constants.categories import INCOME_CATEGORY

from .categorizer import classify
from .models import NormalizedTransaction, PaymentMethod, TransactionKind
from .money import STATEMENT_INCOME_KEYWORDS, mentions_income, parse_amount

logger = logging.getLogger(__name__)

_AMOUNT_TOKEN = r"([+-]?\$?₹?[0-9,]+\.?[0-9]*)"

# (date + minimal description + amount) patterns, tried in order; first match wins per line
STATEMENT_LINE_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"(\d{1,2}/\d{1,2}/\d{4})\s+(.+?)\s+" + _AMOUNT_TOKEN), "%m/%d/%Y"),
    (re.compile(r"(\d{1,2}-\d{1,2}-\d{4})\s+(.+?)\s+" + _AMOUNT_TOKEN), "%m-%d-%Y"),
    (re.compile(r"(\d{4}-\d{1,2}-\d{1,2})\s+(.+?)\s+" + _AMOUNT_TOKEN), "%Y-%m-%d"),
)


def parse_statement_line(line: str) -> NormalizedTransaction | None:
    """Parse one statement line into a transaction.

    Only the first matching pattern is considered. The line is skipped when its
    date is not a real calendar date, its amount is not positive, or its
    description is empty.
    """
    for pattern, date_format in STATEMENT_LINE_PATTERNS:
        match = pattern.search(line)
        if not match:
            continue

        date_token, description, amount_token = match.group(1), match.group(2).strip(), match.group(3)
        try:
            transaction_date = datetime.strptime(date_token, date_format).date()
        except ValueError:
            logger.debug(f"Skipping statement line with invalid date: {line}")
            return None

        parsed_amount = parse_amount(amount_token)
        if parsed_amount is None or parsed_amount.amount <= 0 or not description:
            logger.debug(f"Skipping statement line without a usable amount: {line}")
            return None

        is_income = parsed_amount.has_plus_sign or mentions_income(description, STATEMENT_INCOME_KEYWORDS)
        return NormalizedTransaction(
            date=transaction_date,
            description=description,
            amount=parsed_amount.amount,
            kind=TransactionKind.INCOME if is_income else TransactionKind.EXPENSE,
            category=INCOME_CATEGORY if is_income else classify(description),
            payment_method=PaymentMethod.BANK_TRANSFER,
        )
    return None


def extract_statement_transactions(text: str) -> list[NormalizedTransaction]:
    """Extract transactions from the text of a bank statement.

    Args:
        text: Plain text extracted from a PDF statement

    Returns:
        Transactions in line order; unmatched lines are skipped silently
    """
    lines = [line.strip() for line in text.split("\n") if line.strip()]
    transactions = []
    for line in lines:
        transaction = parse_statement_line(line)
        if transaction is not None:
            transactions.append(transaction)

    logger.info(f"Extracted {len(transactions)} transactions from {len(lines)} statement lines")
    return transactions
