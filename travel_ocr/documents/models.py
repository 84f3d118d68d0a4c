"""Domain types for a document batch.

Document references, travelers, processing units, and extraction
outcomes. Everything here is scoped to a single batch run.
"""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class DocumentKind(StrEnum):
    """Kinds of travel documents accepted in a batch."""

    PASSPORT_FRONT = "passport_front"
    PASSPORT_BACK = "passport_back"
    FLIGHT = "flight"
    HOTEL = "hotel"


class UnitType(StrEnum):
    """Discriminator shared by progress events and result reports."""

    PASSPORT = "passport"
    FLIGHT = "flight"
    HOTEL = "hotel"


@dataclass(frozen=True)
class DocumentRef:
    """A remotely fetchable document uploaded for a traveler."""

    document_id: str
    traveler_id: str
    traveler_name: str
    source_url: str
    document_kind: str


@dataclass(frozen=True)
class Traveler:
    """A traveler known to the batch."""

    traveler_id: str
    traveler_name: str


def derive_travelers(documents: list[DocumentRef]) -> list[Traveler]:
    """Collect distinct travelers in order of first appearance.

    Args:
        documents: All document references of a batch.

    Returns:
        One ``Traveler`` per distinct ``(traveler_id, traveler_name)`` pair.
    """
    seen: dict[tuple[str, str], Traveler] = {}
    for doc in documents:
        key = (doc.traveler_id, doc.traveler_name)
        if key not in seen:
            seen[key] = Traveler(doc.traveler_id, doc.traveler_name)
    return list(seen.values())


@dataclass(frozen=True)
class PassportUnit:
    """A traveler's passport front and back, processed together."""

    traveler_id: str
    front: DocumentRef
    back: DocumentRef

    unit_type = UnitType.PASSPORT

    @property
    def primary_document(self) -> DocumentRef:
        return self.front

    @property
    def document_ids(self) -> tuple[str, ...]:
        return (self.front.document_id, self.back.document_id)


@dataclass(frozen=True)
class UnpairedPassportUnit:
    """A passport side whose counterpart was never uploaded.

    Only produced when the grouper is configured to report unpaired
    sides instead of dropping them.
    """

    traveler_id: str
    doc: DocumentRef

    unit_type = UnitType.PASSPORT

    @property
    def primary_document(self) -> DocumentRef:
        return self.doc

    @property
    def document_ids(self) -> tuple[str, ...]:
        return (self.doc.document_id,)

    @property
    def missing_side(self) -> str:
        if self.doc.document_kind == DocumentKind.PASSPORT_FRONT:
            return "back"
        return "front"


@dataclass(frozen=True)
class FlightUnit:
    """A single flight ticket."""

    doc: DocumentRef

    unit_type = UnitType.FLIGHT

    @property
    def traveler_id(self) -> str:
        return self.doc.traveler_id

    @property
    def primary_document(self) -> DocumentRef:
        return self.doc

    @property
    def document_ids(self) -> tuple[str, ...]:
        return (self.doc.document_id,)


@dataclass(frozen=True)
class HotelUnit:
    """A single hotel booking."""

    doc: DocumentRef

    unit_type = UnitType.HOTEL

    @property
    def traveler_id(self) -> str:
        return self.doc.traveler_id

    @property
    def primary_document(self) -> DocumentRef:
        return self.doc

    @property
    def document_ids(self) -> tuple[str, ...]:
        return (self.doc.document_id,)


ProcessingUnit = PassportUnit | UnpairedPassportUnit | FlightUnit | HotelUnit


class ExtractionStatus(StrEnum):
    """Outcome of extracting one processing unit."""

    SUCCESS = "success"
    INVALID = "invalid"
    ERROR = "error"


@dataclass
class ExtractionOutcome:
    """Result of running an extractor over a processing unit.

    ``fields`` only holds keys that were actually extracted; an absent key
    means the field was not found.
    """

    status: ExtractionStatus
    fields: dict[str, str] = field(default_factory=dict)
    raw_text: str | None = None
    error_message: str | None = None

    @classmethod
    def success(
        cls, fields: dict[str, str], raw_text: str | None = None
    ) -> "ExtractionOutcome":
        return cls(ExtractionStatus.SUCCESS, dict(fields), raw_text=raw_text)

    @classmethod
    def invalid(cls, message: str, raw_text: str | None = None) -> "ExtractionOutcome":
        return cls(ExtractionStatus.INVALID, raw_text=raw_text, error_message=message)

    @classmethod
    def error(cls, message: str) -> "ExtractionOutcome":
        return cls(ExtractionStatus.ERROR, error_message=message)

    @property
    def succeeded(self) -> bool:
        return self.status == ExtractionStatus.SUCCESS

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-ready dict, leaving out absent values."""
        data: dict[str, Any] = {"status": self.status.value, "fields": dict(self.fields)}
        if self.raw_text is not None:
            data["raw_text"] = self.raw_text
        if self.error_message is not None:
            data["error_message"] = self.error_message
        return data


@dataclass(frozen=True)
class Batch:
    """A batch of documents submitted together under one identifier."""

    batch_id: str
    documents: list[DocumentRef]
