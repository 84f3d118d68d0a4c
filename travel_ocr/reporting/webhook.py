"""Reports each processing unit's final outcome to the system of record."""

import requests

from travel_ocr.documents.models import ExtractionOutcome, PassportUnit, ProcessingUnit, UnitType
from travel_ocr.utils.logger import get_logger

from .payloads import OcrResultPayload, OcrStatus

logger = get_logger(__name__)


def build_payload(
    unit: ProcessingUnit,
    outcome: ExtractionOutcome,
    traveler_id: str,
) -> OcrResultPayload:
    """Build the webhook body for a unit.

    Args:
        unit: The processing unit that reached a terminal state.
        outcome: Its extraction outcome.
        traveler_id: Traveler the result belongs to (the resolved match
            for flight and hotel units).

    Returns:
        The payload to post.
    """
    payload = OcrResultPayload(
        traveler_id=traveler_id,
        ticket_type=unit.unit_type.value,
        ocr_status=OcrStatus.COMPLETED if outcome.succeeded else OcrStatus.FAILED,
        ocr_extracted_data=outcome.to_dict(),
    )

    if isinstance(unit, PassportUnit):
        payload.passport_front_doc_id = unit.front.document_id
        payload.passport_back_doc_id = unit.back.document_id
    else:
        payload.document_id = unit.primary_document.document_id
        if unit.unit_type != UnitType.PASSPORT:
            payload.mapped_to_traveler_id = traveler_id
    return payload


class ResultReporter:
    """Posts OCR results to ``{base_url}/order/{batch_id}/ocr-results``.

    Args:
        base_url: Base URL of the system of record.
        timeout: Request timeout in seconds.
        session: Optional requests session to reuse connections.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def endpoint(self, batch_id: str) -> str:
        return f"{self.base_url}/order/{batch_id}/ocr-results"

    def report(
        self,
        batch_id: str,
        unit: ProcessingUnit,
        outcome: ExtractionOutcome,
        traveler_id: str,
    ) -> bool:
        """Send a unit's result. Failures are logged, never raised or retried.

        Returns:
            True when the backend acknowledged with a 2xx status.
        """
        payload = build_payload(unit, outcome, traveler_id)
        ticket_type = payload.ticket_type

        try:
            response = self.session.post(
                self.endpoint(batch_id),
                data=payload.to_json(),
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as exc:
            logger.error("Error updating main backend with %s: %s", ticket_type, exc)
            return False

        if not response.ok:
            logger.warning(
                "Failed to update main backend with %s: %s - %s",
                ticket_type,
                response.status_code,
                response.text[:200],
            )
            return False

        logger.info("Updated main backend with %s OCR for traveler %s", ticket_type, traveler_id)
        return True
