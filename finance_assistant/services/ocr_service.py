"""OCR service for reading receipt images with Tesseract OCR."""

import logging
from typing import cast

from flask import current_app
from PIL import Image, ImageEnhance, ImageFilter
import pytesseract

from finance_assistant.ingest.exceptions import OcrFailure

logger = logging.getLogger(__name__)

MAX_IMAGE_SIZE = 2000
CONTRAST_FACTOR = 1.5

TESSERACT_INSTALL_HINT = (
    "Please install Tesseract OCR:\n"
    "  Linux: sudo apt-get install tesseract-ocr\n"
    "  macOS: brew install tesseract"
)


class OCRService:
    """Service for extracting text from receipt images using Tesseract OCR."""

    def __init__(
        self,
        tesseract_cmd: str | None = None,
        language: str = "eng",
        tesseract_config: str = "--oem 3 --psm 6",
        enabled: bool = True,
    ) -> None:
        self.language = language
        self.tesseract_config = tesseract_config
        self.enabled = enabled

        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd

        if self.enabled:
            try:
                pytesseract.get_tesseract_version()
                logger.info("Tesseract OCR initialized successfully")
            except pytesseract.TesseractNotFoundError:
                logger.error(f"Tesseract OCR binary not found. {TESSERACT_INSTALL_HINT}")
                self.enabled = False

    def recognize(self, image_path: str) -> str:
        """Extract raw text from an image file.

        Args:
            image_path: Path of the stored upload

        Returns:
            Recognized text

        Raises:
            OcrFailure: If OCR is disabled, the image cannot be opened, or Tesseract fails
        """
        if not self.enabled:
            raise OcrFailure(f"OCR is disabled. {TESSERACT_INSTALL_HINT}")

        try:
            with Image.open(image_path) as img:
                processed = self._preprocess_image(img)
        except OSError as e:
            logger.error(f"Failed to open image: {e}")
            raise OcrFailure(f"Unsupported image format: {e}") from e

        try:
            text = cast(str, pytesseract.image_to_string(processed, lang=self.language, config=self.tesseract_config))
        except (pytesseract.TesseractError, RuntimeError) as e:
            logger.error(f"Tesseract OCR failed: {e}")
            raise OcrFailure(str(e)) from e

        logger.debug(f"Extracted {len(text)} characters using OCR")
        return text

    def _preprocess_image(self, img: Image.Image) -> Image.Image:
        """Preprocess image to improve OCR accuracy."""
        # Convert to RGB if necessary (handles RGBA, P, etc.)
        if img.mode != "RGB":
            img = img.convert("RGB")

        if max(img.size) > MAX_IMAGE_SIZE:
            ratio = MAX_IMAGE_SIZE / max(img.size)
            new_size = (int(img.size[0] * ratio), int(img.size[1] * ratio))
            logger.debug(f"Resizing image from {img.size} to {new_size}")
            img = img.resize(new_size, Image.Resampling.LANCZOS)

        img = img.convert("L")
        img = ImageEnhance.Contrast(img).enhance(CONTRAST_FACTOR)
        return img.filter(ImageFilter.SHARPEN)


def get_ocr_service() -> OCRService:
    """Return the app's OCR service, building it from configuration on first use."""
    service = current_app.extensions.get("ocr_service")
    if service is None:
        config = current_app.config
        service = OCRService(
            tesseract_cmd=config.get("TESSERACT_CMD"),
            language=config.get("OCR_LANGUAGE", "eng"),
            tesseract_config=config.get("OCR_TESSERACT_CONFIG", "--oem 3 --psm 6"),
            enabled=config.get("OCR_ENABLED", True),
        )
        current_app.extensions["ocr_service"] = service
    return service
