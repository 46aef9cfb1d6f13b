"""Receipt parser for extracting structured data from OCR text.

This module has no dependencies on Flask or the OCR engine: it only interprets
text that has already been recognized, so it is reusable from the web
application, the CLI and tests.
"""

from decimal import Decimal
import logging
import re

from .categorizer import classify
from .dates import find_first_date
from .models import ExtractedReceiptData, LineItem, NormalizedTransaction, PaymentMethod, TransactionKind

logger = logging.getLogger(__name__)

MERCHANT_NAME_MAX_LENGTH = 50
UNKNOWN_MERCHANT = "Unknown Merchant"

# Every match on every line is a candidate; the largest value is taken as the total
TOTAL_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"total[:\s]*\$?([0-9]+\.?[0-9]*)", re.IGNORECASE),
    re.compile(r"amount[:\s]*\$?([0-9]+\.?[0-9]*)", re.IGNORECASE),
    re.compile(r"\$([0-9]+\.?[0-9]*)\s*total", re.IGNORECASE),
    re.compile(r"\$([0-9]+\.[0-9]{2})"),
    re.compile(r"grand\s*total[:\s]*\$?([0-9]+\.?[0-9]*)", re.IGNORECASE),
    re.compile(r"final\s*total[:\s]*\$?([0-9]+\.?[0-9]*)", re.IGNORECASE),
)

# "label amount": intentionally permissive
LINE_ITEM_PATTERN = re.compile(r"(.+?)\s+\$?([0-9]+\.?[0-9]*)")


class ReceiptParser:
    """Line-oriented receipt parser."""

    def parse(self, raw_text: str) -> ExtractedReceiptData:
        """Parse receipt data from OCR text.

        Partial or garbage text is never an error; it yields low-confidence data
        (zero total, empty merchant name, today's date).

        Args:
            raw_text: Raw text extracted from OCR

        Returns:
            ExtractedReceiptData with parsed fields
        """
        lines = [line.strip() for line in raw_text.split("\n") if line.strip()]
        logger.debug(f"Parsing receipt text with {len(lines)} non-empty lines")

        if not lines:
            logger.warning("No lines found in OCR text - returning empty receipt data")

        merchant_name = self._extract_merchant_name(lines)
        receipt_data = ExtractedReceiptData(
            total=self._extract_total(lines),
            merchant_name=merchant_name,
            date=find_first_date(lines),
            items=self._extract_items(lines),
            category=classify(merchant_name),
            raw_text=raw_text,
        )

        logger.debug(
            f"Extracted receipt: merchant={receipt_data.merchant_name!r}, total={receipt_data.total}, "
            f"date={receipt_data.date}, items={len(receipt_data.items)}, category={receipt_data.category}"
        )
        return receipt_data

    def _extract_total(self, lines: list[str]) -> Decimal:
        """Return the largest amount matched by any total pattern on any line."""
        total = Decimal("0")
        for line in lines:
            for pattern in TOTAL_PATTERNS:
                match = pattern.search(line)
                if not match:
                    continue
                amount = Decimal(match.group(1))
                if amount > total:
                    total = amount
        return total

    def _extract_merchant_name(self, lines: list[str]) -> str:
        # Store name is conventionally printed at the top
        if not lines:
            return ""
        return lines[0][:MERCHANT_NAME_MAX_LENGTH]

    def _extract_items(self, lines: list[str]) -> list[LineItem]:
        items = []
        for line in lines:
            match = LINE_ITEM_PATTERN.search(line)
            if not match:
                continue
            amount = Decimal(match.group(2))
            if amount > 0:
                items.append(LineItem(name=match.group(1).strip(), amount=amount))
        return items


def suggest_transaction(receipt_data: ExtractedReceiptData) -> NormalizedTransaction:
    """Build the single expense suggested for a scanned receipt.

    The amount may be zero when no total was found; callers show it for review
    instead of saving it.
    """
    return NormalizedTransaction(
        date=receipt_data.date,
        description=f"Receipt from {receipt_data.merchant_name or UNKNOWN_MERCHANT}",
        amount=receipt_data.total,
        kind=TransactionKind.EXPENSE,
        category=receipt_data.category,
        payment_method=PaymentMethod.CREDIT_CARD,
    )
