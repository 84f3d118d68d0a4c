"""Pydantic request/response schemas for the FastAPI endpoints."""

from pydantic import BaseModel, Field

from travel_ocr.documents.models import Batch, DocumentKind, DocumentRef


class DocumentItem(BaseModel):
    """One uploaded document in a processing request."""

    traveller_id: str = Field(min_length=1)
    traveller_name: str
    document_id: str = Field(min_length=1)
    file_url: str = Field(min_length=1)
    document_type: DocumentKind

    def to_ref(self) -> DocumentRef:
        return DocumentRef(
            document_id=self.document_id,
            traveler_id=self.traveller_id,
            traveler_name=self.traveller_name,
            source_url=self.file_url,
            document_kind=self.document_type.value,
        )


class ProcessDocumentsRequest(BaseModel):
    """Request body for batch document processing."""

    order_id: str
    documents: list[DocumentItem]

    def to_batch(self) -> Batch:
        return Batch(self.order_id, [doc.to_ref() for doc in self.documents])


class ProcessDocumentsResponse(BaseModel):
    """Acknowledgement returned before processing starts."""

    status: str = "accepted"
    message: str
    order_id: str


class HealthResponse(BaseModel):
    """Response schema for the health check endpoint."""

    status: str
    service: str
    tesseract_available: bool
