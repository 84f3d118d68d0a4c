"""Tesseract OCR engine wrapper for travel documents.

Turns raw document bytes (images or PDFs) into recognized plain text.
"""

import io

import pytesseract
from PIL import Image, UnidentifiedImageError

from travel_ocr.exceptions import RecognitionError
from travel_ocr.utils.config import OCRConfig
from travel_ocr.utils.logger import get_logger

from .pdf_handler import PDFHandler, is_pdf

logger = get_logger(__name__)

PAGE_SEPARATOR = "\n\n--- Page Break ---\n\n"


class TesseractEngine:
    """Wrapper around Tesseract OCR for document text recognition.

    Args:
        config: OCR configuration (binary path, language, segmentation
            mode, PDF resolution, character whitelist).
    """

    def __init__(self, config: OCRConfig | None = None) -> None:
        self.config = config or OCRConfig()
        if self.config.tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = self.config.tesseract_cmd
        self.pdf_handler = PDFHandler(dpi=self.config.pdf_dpi)

    def _tesseract_config(self) -> str:
        config = f"--psm {self.config.psm}"
        if self.config.char_whitelist:
            whitelist = self.config.char_whitelist.replace("\n", "")
            config += f" -c tessedit_char_whitelist='{whitelist}'"
        return config

    def _load_images(self, data: bytes) -> list[Image.Image]:
        if is_pdf(data):
            return self.pdf_handler.pdf_to_images(data)
        try:
            image = Image.open(io.BytesIO(data))
            image.load()
        except (UnidentifiedImageError, OSError) as exc:
            raise RecognitionError(f"Unsupported image data: {exc}") from exc
        return [image]

    def recognize(self, data: bytes) -> str:
        """Recognize text in a document.

        Args:
            data: Raw image or PDF bytes.

        Returns:
            Recognized plain text; pages are joined with a separator.

        Raises:
            RecognitionError: If the bytes cannot be decoded or Tesseract fails.
        """
        images = self._load_images(data)
        config = self._tesseract_config()

        pages: list[str] = []
        for image in images:
            try:
                pages.append(
                    pytesseract.image_to_string(
                        image, lang=self.config.default_lang, config=config
                    )
                )
            except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError) as exc:
                raise RecognitionError(f"Tesseract failed: {exc}") from exc

        text = PAGE_SEPARATOR.join(pages)
        logger.info("OCR extracted %d characters from %d page(s)", len(text), len(pages))
        return text
