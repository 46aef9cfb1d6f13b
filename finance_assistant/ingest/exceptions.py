"""Custom exceptions for document ingestion."""


class IngestionError(Exception):
    """Base exception for errors that abort processing of a whole upload."""

    status_code = 500
    code = "INGESTION_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        """Convert exception to dictionary for API responses."""
        return {"code": self.code, "message": self.message}


class UnsupportedMediaType(IngestionError):
    """Raised when the declared file type is not an image, PDF or CSV."""

    status_code = 400
    code = "UNSUPPORTED_MEDIA_TYPE"

    def __init__(self, media_type: str | None, file_name: str | None = None):
        self.media_type = media_type
        self.file_name = file_name
        message = (
            f"File type {media_type or 'unknown'} is not supported. " "Please use JPG, PNG, PDF, or CSV files."
        )
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert exception to dictionary for API responses."""
        return {
            "code": self.code,
            "message": self.message,
            "media_type": self.media_type,
            "file_name": self.file_name,
        }


class OcrFailure(IngestionError):
    """Raised when the OCR engine fails to recognize an image."""

    code = "OCR_FAILURE"

    def __init__(self, engine_message: str):
        self.engine_message = engine_message
        super().__init__(f"Failed to extract data from receipt: {engine_message}")


class PdfExtractionFailure(IngestionError):
    """Raised when the PDF text engine fails to read a document."""

    code = "PDF_EXTRACTION_FAILURE"

    def __init__(self, engine_message: str):
        self.engine_message = engine_message
        super().__init__(f"Failed to parse PDF transaction history: {engine_message}")


class CsvDecodeFailure(IngestionError):
    """Raised when uploaded CSV bytes cannot be decoded or tokenized."""

    status_code = 400
    code = "CSV_DECODE_FAILURE"

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Error reading CSV file: {reason}")
