"""Routes an uploaded file to the receipt, CSV or statement extractor."""

from collections.abc import Callable, Iterator
from contextlib import contextmanager
import logging
import os
import tempfile

from .csv_rows import iter_csv_rows
from .exceptions import OcrFailure, PdfExtractionFailure, UnsupportedMediaType
from .models import ImportBatch, ReceiptScan
from .receipts import ReceiptParser, suggest_transaction
from .statements import extract_statement_transactions
from .tabular import normalize_rows

logger = logging.getLogger(__name__)

CSV_MEDIA_TYPE = "text/csv"
PDF_MEDIA_TYPE = "application/pdf"
IMAGE_MEDIA_PREFIX = "image/"


@contextmanager
def scoped_upload(data: bytes, suffix: str = "", directory: str | None = None) -> Iterator[str]:
    """Write bytes to a temporary file that is deleted when the block exits, even on error."""
    if directory:
        os.makedirs(directory, exist_ok=True)
    fd, path = tempfile.mkstemp(suffix=suffix, dir=directory)
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
        yield path
    finally:
        if os.path.exists(path):
            os.unlink(path)


class IngestionDispatcher:
    """Dispatch uploaded files by declared media type.

    The OCR and PDF engines are injected so the dispatcher stays independent of
    Tesseract and PyMuPDF.

    Args:
        recognize: OCR collaborator, image path -> text
        extract_text: PDF collaborator, PDF bytes -> text
        upload_folder: Directory for scoped temporary files (system default if None)
    """

    def __init__(
        self,
        recognize: Callable[[str], str],
        extract_text: Callable[[bytes], str],
        upload_folder: str | None = None,
        receipt_parser: ReceiptParser | None = None,
    ) -> None:
        self._recognize = recognize
        self._extract_text = extract_text
        self.upload_folder = upload_folder
        self.receipt_parser = receipt_parser or ReceiptParser()

    def dispatch(self, media_type: str | None, file_name: str | None, data: bytes) -> ReceiptScan | ImportBatch:
        """Process one uploaded file.

        Args:
            media_type: Declared MIME type, parameters such as charset are ignored
            file_name: Original file name
            data: File content

        Returns:
            ReceiptScan for images, ImportBatch for CSV and PDF files

        Raises:
            UnsupportedMediaType: If the file is not an image, PDF or CSV
            OcrFailure: If the OCR engine fails
            PdfExtractionFailure: If the PDF engine fails
            CsvDecodeFailure: If the CSV bytes cannot be read
        """
        base_type = (media_type or "").split(";")[0].strip().lower()
        name = file_name or ""
        logger.info(f"Dispatching upload '{name}' ({base_type or 'no media type'}, {len(data)} bytes)")

        if base_type == CSV_MEDIA_TYPE or name.lower().endswith(".csv"):
            return self.import_csv(data)
        if base_type == PDF_MEDIA_TYPE:
            return self.import_statement(data)
        if base_type.startswith(IMAGE_MEDIA_PREFIX):
            return self.scan_receipt(data, name)

        raise UnsupportedMediaType(media_type, file_name)

    def import_csv(self, data: bytes) -> ImportBatch:
        return ImportBatch(source="csv", transactions=normalize_rows(iter_csv_rows(data)))

    def import_statement(self, data: bytes) -> ImportBatch:
        try:
            text = self._extract_text(data)
        except PdfExtractionFailure:
            raise
        except Exception as e:
            logger.error(f"PDF parsing error: {e}")
            raise PdfExtractionFailure(str(e)) from e

        return ImportBatch(source="pdf", transactions=extract_statement_transactions(text))

    def scan_receipt(self, data: bytes, file_name: str = "") -> ReceiptScan:
        suffix = os.path.splitext(file_name)[1].lower()
        with scoped_upload(data, suffix=suffix, directory=self.upload_folder) as image_path:
            try:
                text = self._recognize(image_path)
            except OcrFailure:
                raise
            except Exception as e:
                logger.error(f"OCR extraction error: {e}")
                raise OcrFailure(str(e)) from e

        extracted = self.receipt_parser.parse(text)
        return ReceiptScan(extracted=extracted, suggested=suggest_transaction(extracted))
