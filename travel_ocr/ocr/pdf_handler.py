"""PDF to image conversion for multi-page ticket processing.

Rasterizes PDF bytes into PIL images so each page can be passed to
the OCR engine.
"""

from PIL import Image
from pdf2image import convert_from_bytes

from travel_ocr.exceptions import RecognitionError
from travel_ocr.utils.logger import get_logger

logger = get_logger(__name__)

PDF_MAGIC = b"%PDF"


def is_pdf(data: bytes) -> bool:
    """Return True when the bytes look like a PDF document."""
    return data[:4] == PDF_MAGIC


class PDFHandler:
    """Handles PDF to image conversion for OCR processing.

    Args:
        dpi: Resolution for PDF rendering. Higher values produce
            better OCR results but use more memory.
    """

    def __init__(self, dpi: int = 300) -> None:
        self.dpi = dpi

    def pdf_to_images(self, pdf_bytes: bytes) -> list[Image.Image]:
        """Convert PDF bytes to a list of page images.

        Args:
            pdf_bytes: Raw PDF bytes.

        Returns:
            One PIL image per page.

        Raises:
            RecognitionError: If PDF conversion fails.
        """
        try:
            images = convert_from_bytes(pdf_bytes, dpi=self.dpi)
        except Exception as exc:
            raise RecognitionError(f"PDF conversion failed: {exc}") from exc

        logger.info("Converted PDF to %d images at %d DPI", len(images), self.dpi)
        return images
