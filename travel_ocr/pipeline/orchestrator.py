"""Batch orchestration.

Each processing unit of a batch runs independently through
``pending -> processing -> mapped | failed``. A unit emits one
``processing`` event before extraction and one terminal event after it,
then its outcome is reported. Failures never leave their unit.
"""

from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import asdict, dataclass, field
from typing import Any

from travel_ocr.documents.grouper import DocumentGrouper
from travel_ocr.documents.models import (
    Batch,
    ExtractionOutcome,
    ProcessingUnit,
    Traveler,
    UnitType,
    UnpairedPassportUnit,
    derive_travelers,
)
from travel_ocr.extraction.base import DocumentExtractor
from travel_ocr.matching.identity_matcher import IdentityMatcher
from travel_ocr.reporting.payloads import ProgressStatus
from travel_ocr.reporting.progress import ProgressBroadcaster
from travel_ocr.reporting.webhook import ResultReporter
from travel_ocr.utils.logger import get_logger

from .state import UnitState, UnitStateMachine

logger = get_logger(__name__)

# Extracted field holding the person's name, per unit type.
NAME_FIELDS: dict[UnitType, str] = {
    UnitType.FLIGHT: "passenger_name",
    UnitType.HOTEL: "guest_name",
}


@dataclass
class UnitResult:
    """Final state of one processing unit."""

    unit_type: str
    document_ids: tuple[str, ...]
    traveler_id: str
    state: str
    fields: dict[str, str] = field(default_factory=dict)
    error: str | None = None
    reported: bool = False


@dataclass
class BatchSummary:
    """Aggregate of every unit outcome in a batch."""

    batch_id: str
    results: list[UnitResult] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def mapped(self) -> int:
        return sum(1 for r in self.results if r.state == UnitState.MAPPED)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if r.state == UnitState.FAILED)

    def to_dict(self) -> dict[str, Any]:
        return {
            "batch_id": self.batch_id,
            "total": self.total,
            "mapped": self.mapped,
            "failed": self.failed,
            "results": [asdict(r) for r in self.results],
        }


class BatchOrchestrator:
    """Runs document batches through extraction, matching and reporting.

    Args:
        extractors: Extractor per unit type.
        matcher: Resolves flight and hotel names to travelers.
        broadcaster: Publishes per-document progress.
        reporter: Posts final unit outcomes. ``None`` disables reporting.
        grouper: Turns a batch's documents into processing units.
        max_concurrency: Units processed in parallel within a batch.
        max_parallel_batches: Batches processed in parallel by ``submit``.
    """

    def __init__(
        self,
        extractors: dict[UnitType, DocumentExtractor],
        matcher: IdentityMatcher,
        broadcaster: ProgressBroadcaster,
        reporter: ResultReporter | None = None,
        grouper: DocumentGrouper | None = None,
        max_concurrency: int = 4,
        max_parallel_batches: int = 2,
    ) -> None:
        self.extractors = extractors
        self.matcher = matcher
        self.broadcaster = broadcaster
        self.reporter = reporter
        self.grouper = grouper or DocumentGrouper()
        self.max_concurrency = max_concurrency
        self._batch_executor = ThreadPoolExecutor(
            max_workers=max_parallel_batches, thread_name_prefix="ocr-batch"
        )

    def submit(self, batch: Batch) -> Future:
        """Queue a batch for background processing and return immediately."""
        logger.info("Queued batch %s with %d documents", batch.batch_id, len(batch.documents))
        future = self._batch_executor.submit(self.run_batch, batch)
        future.add_done_callback(self._log_batch_failure)
        return future

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting batches and optionally wait for queued ones."""
        self._batch_executor.shutdown(wait=wait)

    @staticmethod
    def _log_batch_failure(future: Future) -> None:
        exc = future.exception()
        if exc is not None:
            logger.error("Batch processing crashed: %s", exc, exc_info=exc)

    def run_batch(self, batch: Batch) -> BatchSummary:
        """Run every unit of a batch to a terminal state.

        Args:
            batch: Batch identifier and its document references.

        Returns:
            Summary with one result per processing unit.
        """
        units = self.grouper.group(batch.documents)
        travelers = derive_travelers(batch.documents)
        logger.info(
            "Processing batch %s: %d units for %d travelers",
            batch.batch_id,
            len(units),
            len(travelers),
        )

        summary = BatchSummary(batch.batch_id)
        if not units:
            return summary

        workers = min(self.max_concurrency, len(units))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="ocr-unit") as pool:
            futures = [
                pool.submit(self.process_unit, batch.batch_id, unit, travelers) for unit in units
            ]
            summary.results = [f.result() for f in futures]

        logger.info(
            "Batch %s complete: %d mapped, %d failed",
            batch.batch_id,
            summary.mapped,
            summary.failed,
        )
        return summary

    def process_unit(
        self,
        batch_id: str,
        unit: ProcessingUnit,
        travelers: list[Traveler],
    ) -> UnitResult:
        """Drive one unit to a terminal state, then report it.

        Never raises; any exception inside the unit ends it as ``failed``.
        """
        doc = unit.primary_document
        machine = UnitStateMachine(f"{unit.unit_type}:{doc.document_id}")

        machine.transition(UnitState.PROCESSING)
        self._broadcast(batch_id, unit, doc.traveler_id, doc.traveler_name, ProgressStatus.PROCESSING)

        try:
            outcome = self._extract(unit)
        except Exception as exc:
            logger.exception("Unexpected error processing %s %s", unit.unit_type, doc.document_id)
            outcome = ExtractionOutcome.error(str(exc) or exc.__class__.__name__)

        traveler_id, traveler_name = unit.traveler_id, doc.traveler_name
        if outcome.succeeded:
            try:
                traveler_id, traveler_name = self._resolve_traveler(unit, outcome, travelers)
            except Exception as exc:
                logger.exception("Matching failed for %s %s", unit.unit_type, doc.document_id)
                outcome = ExtractionOutcome.error(str(exc) or exc.__class__.__name__)

        if outcome.succeeded:
            machine.transition(UnitState.MAPPED)
            self._broadcast(
                batch_id,
                unit,
                traveler_id,
                traveler_name,
                ProgressStatus.MAPPED,
                fields=outcome.fields,
            )
        else:
            machine.transition(UnitState.FAILED)
            self._broadcast(
                batch_id,
                unit,
                traveler_id,
                traveler_name,
                ProgressStatus.FAILED,
                error=outcome.error_message,
            )

        result = UnitResult(
            unit_type=unit.unit_type.value,
            document_ids=unit.document_ids,
            traveler_id=traveler_id,
            state=machine.state.value,
            fields=dict(outcome.fields),
            error=outcome.error_message,
        )
        result.reported = self._report(batch_id, unit, outcome, traveler_id)
        return result

    def _extract(self, unit: ProcessingUnit) -> ExtractionOutcome:
        if isinstance(unit, UnpairedPassportUnit):
            return ExtractionOutcome.error(f"Missing passport {unit.missing_side}")

        extractor = self.extractors.get(unit.unit_type)
        if extractor is None:
            return ExtractionOutcome.error(f"No extractor configured for {unit.unit_type}")
        return extractor.extract(unit)

    def _resolve_traveler(
        self,
        unit: ProcessingUnit,
        outcome: ExtractionOutcome,
        travelers: list[Traveler],
    ) -> tuple[str, str]:
        """Pick the traveler a successful unit belongs to.

        Passport units already belong to their uploader. Flight and hotel
        units are matched by name and fall back to the uploader when no
        traveler scores above the threshold.
        """
        doc = unit.primary_document
        name_field = NAME_FIELDS.get(unit.unit_type)
        if name_field is None:
            return unit.traveler_id, doc.traveler_name

        matched_id = self.matcher.match(outcome.fields.get(name_field), list(travelers))
        if matched_id is None:
            return doc.traveler_id, doc.traveler_name

        for traveler in travelers:
            if traveler.traveler_id == matched_id:
                return traveler.traveler_id, traveler.traveler_name
        return matched_id, doc.traveler_name

    def _broadcast(
        self,
        batch_id: str,
        unit: ProcessingUnit,
        traveler_id: str,
        traveler_name: str,
        status: ProgressStatus,
        fields: dict[str, str] | None = None,
        error: str | None = None,
    ) -> None:
        try:
            self.broadcaster.broadcast(
                batch_id=batch_id,
                traveler_id=traveler_id,
                traveler_name=traveler_name,
                document_id=unit.primary_document.document_id,
                document_kind=unit.unit_type.value,
                status=status,
                fields=fields,
                error=error,
            )
        except Exception:
            logger.exception("Could not build progress event for %s", unit.unit_type)

    def _report(
        self,
        batch_id: str,
        unit: ProcessingUnit,
        outcome: ExtractionOutcome,
        traveler_id: str,
    ) -> bool:
        if self.reporter is None:
            return False
        try:
            return self.reporter.report(batch_id, unit, outcome, traveler_id)
        except Exception:
            logger.exception("Result reporting crashed for %s", unit.unit_type)
            return False
