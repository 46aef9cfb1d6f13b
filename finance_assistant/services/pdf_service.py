"""Plain-text extraction from PDF statements using PyMuPDF."""

import logging

import fitz  # PyMuPDF

from finance_assistant.ingest.exceptions import PdfExtractionFailure

logger = logging.getLogger(__name__)


class PDFTextService:
    """Extracts the text layer of every page of a PDF."""

    def extract_text(self, pdf_bytes: bytes) -> str:
        """Extract text from all pages, joined with newlines.

        Raises:
            PdfExtractionFailure: If the bytes are not a readable PDF
        """
        try:
            doc = fitz.open(stream=pdf_bytes, filetype="pdf")
        except (RuntimeError, ValueError) as e:
            logger.error(f"Failed to open PDF: {e}")
            raise PdfExtractionFailure(str(e)) from e

        try:
            text_parts = [page.get_text() for page in doc]
        except RuntimeError as e:
            logger.error(f"PDF text extraction failed: {e}")
            raise PdfExtractionFailure(str(e)) from e
        finally:
            doc.close()

        result = "\n".join(part.strip() for part in text_parts if part)
        logger.debug(f"Extracted {len(result)} characters from {len(text_parts)} PDF pages")
        return result
