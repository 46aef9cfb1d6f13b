"""Document ingestion pipeline.

Turns OCR text, CSV rows and PDF statement text into normalized transactions.
Nothing in this package depends on Flask, Tesseract or PyMuPDF.
"""

from .categorizer import classify
from .dispatcher import IngestionDispatcher
from .exceptions import (
    CsvDecodeFailure,
    IngestionError,
    OcrFailure,
    PdfExtractionFailure,
    UnsupportedMediaType,
)
from .models import (
    ExtractedReceiptData,
    ImportBatch,
    LineItem,
    NormalizedTransaction,
    PaymentMethod,
    ReceiptScan,
    TransactionKind,
)

__all__ = [
    "classify",
    "IngestionDispatcher",
    "CsvDecodeFailure",
    "IngestionError",
    "OcrFailure",
    "PdfExtractionFailure",
    "UnsupportedMediaType",
    "ExtractedReceiptData",
    "ImportBatch",
    "LineItem",
    "NormalizedTransaction",
    "PaymentMethod",
    "ReceiptScan",
    "TransactionKind",
]
