"""Value objects produced by the ingestion pipeline."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum

from finance_assistant.constants.categories import OTHER_CATEGORY


class TransactionKind(str, Enum):
    """Polarity of a transaction."""

    INCOME = "income"
    EXPENSE = "expense"


class PaymentMethod(str, Enum):
    """Payment methods accepted by the transaction store."""

    CASH = "cash"
    CREDIT_CARD = "credit_card"
    DEBIT_CARD = "debit_card"
    BANK_TRANSFER = "bank_transfer"
    DIGITAL_WALLET = "digital_wallet"
    CHECK = "check"
    OTHER = "other"


@dataclass(frozen=True)
class NormalizedTransaction:
    """Canonical transaction record shared by all ingestion paths.

    Amounts are always absolute values; polarity lives in ``kind``.
    """

    date: date
    description: str
    amount: Decimal
    kind: TransactionKind
    category: str
    payment_method: PaymentMethod = PaymentMethod.BANK_TRANSFER

    @property
    def is_income(self) -> bool:
        return self.kind is TransactionKind.INCOME


@dataclass(frozen=True)
class LineItem:
    """A candidate receipt line item. Heuristic, may be a false positive."""

    name: str
    amount: Decimal


@dataclass
class ExtractedReceiptData:
    """Structured data extracted from a receipt's OCR text."""

    total: Decimal = Decimal("0")
    merchant_name: str = ""
    date: date = field(default_factory=date.today)
    items: list[LineItem] = field(default_factory=list)
    category: str = OTHER_CATEGORY
    raw_text: str = ""


@dataclass
class ReceiptScan:
    """Result of the receipt path: extracted fields plus one suggested transaction."""

    extracted: ExtractedReceiptData
    suggested: NormalizedTransaction


@dataclass
class ImportBatch:
    """Result of the CSV and PDF paths."""

    source: str  # "csv" or "pdf"
    transactions: list[NormalizedTransaction] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.transactions)
