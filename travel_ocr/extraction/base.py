"""Shared contract and text-document flow for field extractors."""

from typing import Protocol

from travel_ocr.documents.models import DocumentRef, ExtractionOutcome
from travel_ocr.exceptions import TravelOCRError
from travel_ocr.utils.logger import get_logger

from .keyword_validator import KeywordValidator

logger = get_logger(__name__)


class DocumentExtractor(Protocol):
    """Anything that turns a processing unit into an extraction outcome."""

    def extract(self, unit) -> ExtractionOutcome: ...


class Fetcher(Protocol):
    def fetch(self, url: str) -> bytes: ...


class TextRecognizer(Protocol):
    def recognize(self, data: bytes) -> str: ...


class TextDocumentExtractor:
    """Fetch, recognize, validate, then parse a single text document.

    Subclasses provide the document label, the keyword set, the essential
    fields and ``parse_fields``.

    Args:
        fetcher: Downloads document bytes.
        recognizer: OCR engine producing plain text.
        min_keyword_hits: Keyword hits required to accept the text.
    """

    label: str = "document"
    keywords: tuple[str, ...] = ()
    essential_fields: tuple[str, ...] = ()

    def __init__(
        self,
        fetcher: Fetcher,
        recognizer: TextRecognizer,
        min_keyword_hits: int = 3,
    ) -> None:
        self.fetcher = fetcher
        self.recognizer = recognizer
        self.validator = KeywordValidator(self.keywords, min_hits=min_keyword_hits)

    def parse_fields(self, text: str) -> dict[str, str]:
        raise NotImplementedError

    def extract(self, unit) -> ExtractionOutcome:
        """Extract fields from the unit's document.

        Args:
            unit: A unit exposing ``primary_document``, or a bare
                ``DocumentRef``.

        Returns:
            ``success`` with the parsed fields, ``invalid`` when the text is
            not a document of this class, or ``error`` when fetching or
            recognition failed.
        """
        doc: DocumentRef = getattr(unit, "primary_document", unit)
        logger.info("Processing %s %s", self.label, doc.document_id)

        try:
            text = self.recognizer.recognize(self.fetcher.fetch(doc.source_url))
        except TravelOCRError as exc:
            logger.error("%s OCR failed for %s: %s", self.label.capitalize(), doc.document_id, exc)
            return ExtractionOutcome.error(str(exc))

        return self.extract_text(text)

    def extract_text(self, text: str) -> ExtractionOutcome:
        """Validate and parse already recognized text."""
        check = self.validator.validate(text)
        if not check.is_valid:
            logger.warning(
                "Text does not look like a %s (%d keyword hits)", self.label, len(check.hits)
            )
            return ExtractionOutcome.invalid(
                f"Text does not contain {self.label} information", raw_text=text
            )

        fields = self.parse_fields(text)
        if not any(name in fields for name in self.essential_fields):
            logger.warning(
                "Could not extract essential %s information (%s)",
                self.label,
                " or ".join(self.essential_fields),
            )

        return ExtractionOutcome.success(fields, raw_text=text)
