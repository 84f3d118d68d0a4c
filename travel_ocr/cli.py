"""Command-line interface for local document extraction and archive runs.

Provides subcommands for extracting a single flight ticket or hotel
booking, running a traveler archive through the full batch pipeline,
and starting the API server.
"""

import argparse
import json
import sys
import tempfile
from pathlib import Path

from travel_ocr.documents.archive import load_archive
from travel_ocr.documents.models import Batch, ExtractionOutcome
from travel_ocr.extraction.base import TextDocumentExtractor
from travel_ocr.extraction.flight_extractor import FlightExtractor
from travel_ocr.extraction.hotel_extractor import HotelExtractor
from travel_ocr.ocr.tesseract_engine import TesseractEngine
from travel_ocr.pipeline.factory import build_orchestrator
from travel_ocr.reporting.progress import InMemoryPublisher
from travel_ocr.storage.fetcher import DocumentFetcher
from travel_ocr.utils.config import AppConfig, load_config
from travel_ocr.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)

_EXTRACTORS: dict[str, type[TextDocumentExtractor]] = {
    "flight": FlightExtractor,
    "hotel": HotelExtractor,
}
_TEXT_EXTENSIONS = (".txt",)


def extract_single(file_path: Path, kind: str, config: AppConfig) -> ExtractionOutcome:
    """Run one text extractor over a local file.

    Plain-text files are parsed as-is; anything else goes through OCR.

    Args:
        file_path: Image, PDF or text file.
        kind: ``flight`` or ``hotel``.
        config: Application configuration.

    Returns:
        The extraction outcome.
    """
    engine = TesseractEngine(config.ocr)
    extractor = _EXTRACTORS[kind](
        DocumentFetcher(config.fetch.timeout_s),
        engine,
        min_keyword_hits=config.pipeline.min_keyword_hits,
    )

    if file_path.suffix.lower() in _TEXT_EXTENSIONS:
        return extractor.extract_text(file_path.read_text())
    return extractor.extract_text(engine.recognize(file_path.read_bytes()))


def run_archive(
    zip_path: Path,
    batch_id: str,
    config: AppConfig,
    report: bool = False,
) -> dict[str, object]:
    """Run every document of a traveler archive through the batch pipeline.

    Progress events are kept in memory and counted in the result.

    Args:
        zip_path: ZIP archive with one folder per traveler.
        batch_id: Identifier used for progress channels and reports.
        config: Application configuration.
        report: Whether to post results to the configured backend.

    Returns:
        Batch summary plus the number of published progress events.
    """
    publisher = InMemoryPublisher()
    orchestrator = build_orchestrator(config, publisher=publisher, report=report)

    try:
        with tempfile.TemporaryDirectory(prefix="travel-ocr-") as workdir:
            documents = load_archive(zip_path, Path(workdir))
            summary = orchestrator.run_batch(Batch(batch_id, documents))
    finally:
        orchestrator.shutdown()

    result = summary.to_dict()
    result["progress_events"] = sum(len(m) for m in publisher.messages.values())
    return result


def _write_output(payload: dict, output: Path | None) -> None:
    output_str = json.dumps(payload, indent=2)
    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(output_str)
        print(f"Output written to {output}")
    else:
        print(output_str)


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and dispatch to the appropriate command.

    Args:
        argv: Command-line arguments (defaults to sys.argv).
    """
    parser = argparse.ArgumentParser(
        description="Travel Document OCR",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-c", "--config", type=Path, help="YAML configuration file")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    extract_parser = subparsers.add_parser("extract", help="Extract one ticket or booking")
    extract_parser.add_argument("file", type=Path, help="Document file to process")
    extract_parser.add_argument(
        "-k", "--kind", choices=sorted(_EXTRACTORS), required=True, help="Document kind"
    )
    extract_parser.add_argument("-o", "--output", type=Path, help="Output JSON file")

    archive_parser = subparsers.add_parser(
        "run-archive", help="Process a ZIP of traveler folders"
    )
    archive_parser.add_argument("archive", type=Path, help="ZIP archive to process")
    archive_parser.add_argument("--batch-id", required=True, help="Batch identifier")
    archive_parser.add_argument(
        "--report", action="store_true", help="Post results to the configured backend"
    )
    archive_parser.add_argument("-o", "--output", type=Path, help="Output JSON file")

    subparsers.add_parser("serve", help="Start the API server")

    args = parser.parse_args(argv)

    config = load_config(args.config)
    setup_logging(config.log_level)

    if args.command == "extract":
        if not args.file.exists():
            print(f"Error: {args.file} does not exist", file=sys.stderr)
            sys.exit(1)
        outcome = extract_single(args.file, args.kind, config)
        _write_output(outcome.to_dict(), args.output)
    elif args.command == "run-archive":
        if not args.archive.is_file():
            print(f"Error: {args.archive} is not a file", file=sys.stderr)
            sys.exit(1)
        _write_output(
            run_archive(args.archive, args.batch_id, config, args.report), args.output
        )
    elif args.command == "serve":
        from travel_ocr.main import main as serve

        serve(args.config)
    else:
        parser.print_help()
        sys.exit(0)


if __name__ == "__main__":
    main()
