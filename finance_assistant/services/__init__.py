"""Adapters for the external OCR and PDF engines."""

from .ocr_service import OCRService, get_ocr_service
from .pdf_service import PDFTextService

__all__ = ["OCRService", "get_ocr_service", "PDFTextService"]
