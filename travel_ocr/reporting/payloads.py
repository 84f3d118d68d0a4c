"""Pydantic schemas for outbound progress events and result reports."""

from datetime import datetime, timezone
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ProgressStatus(StrEnum):
    """Status values published on the progress channel."""

    PROCESSING = "processing"
    MAPPED = "mapped"
    FAILED = "failed"


class OcrStatus(StrEnum):
    """Final OCR status reported to the system of record."""

    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class ProgressEvent(BaseModel):
    """One status update for a document of a batch."""

    batch_id: str
    traveler_id: str
    traveler_name: str
    document_id: str
    document_kind: str
    status: ProgressStatus
    fields: dict[str, str] | None = None
    error: str | None = None
    timestamp: datetime = Field(default_factory=_utc_now)

    def to_json(self) -> str:
        return self.model_dump_json(exclude_none=True)


class OcrResultPayload(BaseModel):
    """Body posted to the result webhook for one processing unit."""

    traveler_id: str
    ticket_type: str
    document_id: str | None = None
    passport_front_doc_id: str | None = None
    passport_back_doc_id: str | None = None
    ocr_status: OcrStatus
    ocr_extracted_data: dict[str, Any]
    mapped_to_traveler_id: str | None = None

    def to_json(self) -> str:
        return self.model_dump_json(exclude_none=True)
