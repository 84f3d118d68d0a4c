"""Keyword-presence check that recognized text belongs to a document class."""

from dataclasses import dataclass

from travel_ocr.utils.logger import get_logger

logger = get_logger(__name__)

FLIGHT_KEYWORDS: tuple[str, ...] = (
    "pnr",
    "booking reference",
    "flight",
    "airline",
    "departure",
    "arrival",
    "passenger",
    "ticket",
    "boarding",
    "gate",
    "seat",
    "airport",
)

HOTEL_KEYWORDS: tuple[str, ...] = (
    "hotel",
    "booking",
    "reservation",
    "check-in",
    "check-out",
    "check in",
    "check out",
    "guest",
    "room",
    "accommodation",
    "confirmation",
    "villa",
    "host",
)


@dataclass
class KeywordCheck:
    """Outcome of a keyword validation."""

    is_valid: bool
    hits: list[str]


class KeywordValidator:
    """Accepts text containing enough distinct domain keywords.

    Args:
        keywords: Lower-case keywords of the document class.
        min_hits: Minimum number of distinct keywords required.
    """

    def __init__(self, keywords: tuple[str, ...], min_hits: int = 3) -> None:
        self.keywords = keywords
        self.min_hits = min_hits

    def validate(self, text: str) -> KeywordCheck:
        """Count keyword hits in the lower-cased text.

        Args:
            text: Recognized document text.

        Returns:
            Whether the text qualifies, with the keywords found.
        """
        lower_text = text.lower()
        hits = [keyword for keyword in self.keywords if keyword in lower_text]
        logger.debug("Keyword hits %d/%d: %s", len(hits), self.min_hits, hits)
        return KeywordCheck(is_valid=len(hits) >= self.min_hits, hits=hits)
