"""Fuzzy mapping of an extracted name to a batch traveler."""

from dataclasses import dataclass

from travel_ocr.documents.models import Traveler
from travel_ocr.utils.logger import get_logger

logger = get_logger(__name__)

EXACT_SCORE = 1.0
CONTAINMENT_SCORE = 0.8
DEFAULT_THRESHOLD = 0.6


def normalize_name(name: str) -> str:
    """Lower-case a name and collapse its whitespace."""
    return " ".join(name.lower().split())


def name_similarity(a: str, b: str) -> float:
    """Score how likely two names refer to the same person.

    1.0 for equal normalized names, 0.8 when one contains the other,
    otherwise the share of ``a``'s tokens found in ``b`` relative to the
    longer token list. Empty names score 0.0.

    Args:
        a: Name extracted from a document.
        b: Known traveler name.

    Returns:
        Similarity in ``[0, 1]``.
    """
    n1 = normalize_name(a)
    n2 = normalize_name(b)
    if not n1 or not n2:
        return 0.0

    if n1 == n2:
        return EXACT_SCORE
    if n1 in n2 or n2 in n1:
        return CONTAINMENT_SCORE

    words1 = n1.split(" ")
    words2 = n2.split(" ")
    common = [w for w in words1 if w in words2]
    return len(common) / max(len(words1), len(words2))


@dataclass(frozen=True)
class MatchCandidate:
    """A traveler scored against an extracted name."""

    traveler_id: str
    score: float


class IdentityMatcher:
    """Resolves extracted names to travelers by similarity.

    Args:
        threshold: Minimum score a traveler needs to be accepted.
    """

    def __init__(self, threshold: float = DEFAULT_THRESHOLD) -> None:
        self.threshold = threshold

    def best_candidate(
        self, extracted_name: str | None, travelers: list[Traveler]
    ) -> MatchCandidate | None:
        """Return the highest-scoring traveler above the threshold.

        Travelers are scanned in order and only a strictly greater score
        replaces the current best, so ties keep the earliest traveler.
        """
        if not extracted_name or not travelers:
            return None

        best: MatchCandidate | None = None
        for traveler in travelers:
            score = name_similarity(extracted_name, traveler.traveler_name)
            if score >= self.threshold and (best is None or score > best.score):
                best = MatchCandidate(traveler.traveler_id, score)
        return best

    def match(self, extracted_name: str | None, travelers: list[Traveler]) -> str | None:
        """Map an extracted name to a traveler id.

        Args:
            extracted_name: Passenger or guest name read from a document.
            travelers: Travelers of the batch, in submission order.

        Returns:
            The matched traveler id, or ``None``.
        """
        best = self.best_candidate(extracted_name, travelers)
        if best:
            logger.info(
                "Mapped ticket (%s) to traveler %s with score %.2f",
                extracted_name,
                best.traveler_id,
                best.score,
            )
            return best.traveler_id

        logger.warning("Could not map ticket (%s) to any traveler", extracted_name)
        return None
