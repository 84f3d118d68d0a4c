"""Shared test fixtures for the travel document OCR test suite."""

from collections.abc import Callable
from pathlib import Path

import pytest

from travel_ocr.documents.models import DocumentRef

FLIGHT_TICKET_TEXT = """IndiGo Flight Ticket
PNR: SISCPF
Passenger Information
Mr Rahul Sharma
Flight 6E 1402
Departure
21 Apr 2025 06:20 hrs
BOM - Chhatrapati Shivaji Maharaj International Airport
Arrival
23 Apr 2025 21:55 hrs
AUH - Abu Dhabi International Airport
"""

HOTEL_BOOKING_TEXT = """Ocean Pearl Hotel
Booking Confirmation
Confirmation Number: HTL48213X
Guest Name: Priya Nair
Check-in: 21 Apr 2025
Check-out: 23 Apr 2025
Check-in time: 3:00 pm
Check-out time: 11:00 am
Address: Marina Walk, Dubai
Room: Deluxe King
"""


@pytest.fixture
def flight_text() -> str:
    """Recognized text of a typical flight ticket."""
    return FLIGHT_TICKET_TEXT


@pytest.fixture
def hotel_text() -> str:
    """Recognized text of a typical hotel booking."""
    return HOTEL_BOOKING_TEXT


@pytest.fixture
def make_doc() -> Callable[..., DocumentRef]:
    """Factory for document references with sensible defaults."""

    def _make(
        document_id: str,
        kind: str,
        traveler_id: str = "t1",
        traveler_name: str = "Rahul Sharma",
    ) -> DocumentRef:
        return DocumentRef(
            document_id=document_id,
            traveler_id=traveler_id,
            traveler_name=traveler_name,
            source_url=f"https://files.example.com/{document_id}",
            document_kind=kind,
        )

    return _make


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def config_dir(project_root: Path) -> Path:
    """Return the configs directory path."""
    return project_root / "configs"
