"""Exception hierarchy for the travel document OCR service.

Adapters raise these; extractors turn them into error outcomes and the
orchestrator turns anything else into a failed processing unit.
"""

from typing import Any


class TravelOCRError(Exception):
    """Base exception carrying optional debugging context."""

    def __init__(self, message: str, **context: Any) -> None:
        self.message = message
        self.context = context
        super().__init__(message)

    def __str__(self) -> str:
        if self.context:
            context_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


class DocumentFetchError(TravelOCRError):
    """Document bytes could not be downloaded from their source URL."""


class RecognitionError(TravelOCRError):
    """The OCR engine failed to produce text for a document."""


class VerificationError(TravelOCRError):
    """The identity-document verification API failed or answered badly."""


class InvalidStateTransitionError(TravelOCRError):
    """A processing unit attempted an illegal state change."""

    def __init__(self, current: str, new: str, allowed: list[str]) -> None:
        self.current = current
        self.new = new
        self.allowed = allowed
        super().__init__(
            f"Invalid transition from '{current}' to '{new}'",
            allowed=allowed,
        )
