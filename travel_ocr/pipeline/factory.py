"""Wires configured adapters into a batch orchestrator."""

from travel_ocr.documents.grouper import DocumentGrouper
from travel_ocr.documents.models import UnitType
from travel_ocr.extraction.flight_extractor import FlightExtractor
from travel_ocr.extraction.hotel_extractor import HotelExtractor
from travel_ocr.extraction.passport_extractor import PassportExtractor
from travel_ocr.matching.identity_matcher import IdentityMatcher
from travel_ocr.ocr.tesseract_engine import TesseractEngine
from travel_ocr.ocr.verification_client import IdentityVerificationClient
from travel_ocr.reporting.progress import (
    InMemoryPublisher,
    ProgressBroadcaster,
    ProgressPublisher,
    RedisPublisher,
)
from travel_ocr.reporting.webhook import ResultReporter
from travel_ocr.storage.fetcher import DocumentFetcher
from travel_ocr.utils.config import AppConfig

from .orchestrator import BatchOrchestrator


def build_publisher(config: AppConfig) -> ProgressPublisher:
    if config.progress.enabled:
        return RedisPublisher(config.progress.redis_url)
    return InMemoryPublisher()


def build_orchestrator(
    config: AppConfig,
    publisher: ProgressPublisher | None = None,
    report: bool = True,
) -> BatchOrchestrator:
    """Create an orchestrator from application configuration.

    Args:
        config: Application configuration.
        publisher: Progress transport; built from ``config.progress`` if omitted.
        report: Whether to post unit outcomes to the result webhook.

    Returns:
        A ready-to-use orchestrator.
    """
    fetcher = DocumentFetcher(timeout=config.fetch.timeout_s)
    engine = TesseractEngine(config.ocr)
    min_hits = config.pipeline.min_keyword_hits

    extractors = {
        UnitType.PASSPORT: PassportExtractor(
            fetcher, IdentityVerificationClient(config.verification)
        ),
        UnitType.FLIGHT: FlightExtractor(fetcher, engine, min_keyword_hits=min_hits),
        UnitType.HOTEL: HotelExtractor(fetcher, engine, min_keyword_hits=min_hits),
    }

    reporter = None
    if report:
        reporter = ResultReporter(
            config.reporting.backend_url, timeout=config.reporting.timeout_s
        )

    return BatchOrchestrator(
        extractors=extractors,
        matcher=IdentityMatcher(config.pipeline.name_match_threshold),
        broadcaster=ProgressBroadcaster(
            publisher or build_publisher(config), config.progress.channel_prefix
        ),
        reporter=reporter,
        grouper=DocumentGrouper(config.pipeline.unpaired_passport_policy),
        max_concurrency=config.pipeline.max_concurrency,
        max_parallel_batches=config.pipeline.max_parallel_batches,
    )
