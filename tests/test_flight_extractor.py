"""Tests for flight ticket extraction."""

from unittest.mock import MagicMock

from travel_ocr.documents.models import ExtractionStatus, FlightUnit
from travel_ocr.exceptions import DocumentFetchError
from travel_ocr.extraction.flight_extractor import (
    FLIGHT_FIELDS,
    FLIGHT_NUMBER_CASCADE,
    PNR_CASCADE,
    FlightExtractor,
    derive_airline,
    extract_airports,
    extract_flight_fields,
)
from travel_ocr.extraction.patterns import first_match


class TestExtractFlightFields:
    """Tests for extract_flight_fields on recognized text."""

    def test_typical_ticket(self, flight_text: str) -> None:
        fields = extract_flight_fields(flight_text)

        expected = {
            "pnr": "SISCPF",
            "flight_number": "6E1402",
            "airline": "6E",
            "departure_date": "21 Apr 2025",
            "arrival_date": "23 Apr 2025",
            "departure_time": "06:20 hrs",
            "arrival_time": "21:55 hrs",
            "departure_airport": "BOM",
            "arrival_airport": "AUH",
        }
        assert expected.items() <= fields.items()
        assert fields["passenger_name"] == "Rahul Sharma"
        assert fields["from"] == "Chhatrapati Shivaji Maharaj International Airport"
        assert fields["to"] == "Abu Dhabi International Airport"

    def test_only_known_keys(self, flight_text: str) -> None:
        assert set(extract_flight_fields(flight_text)) <= set(FLIGHT_FIELDS)

    def test_missing_fields_are_absent(self) -> None:
        fields = extract_flight_fields("Flight ticket for passenger at the airport")
        assert "pnr" not in fields
        assert "departure_date" not in fields

    def test_titled_name_preferred_over_section_text(self) -> None:
        text = "Passenger Information\nPayment Status Complete\nMs Priya Nair\n"
        assert extract_flight_fields(text)["passenger_name"] == "Priya Nair"


class TestFlightCascades:
    """Tests for individual flight field cascades."""

    def test_labeled_pnr_is_case_insensitive(self) -> None:
        text = "IndiGo Flight ticket\nBoarding pass\npnr: sisc9f\nFLIGHT 6E 1402\n"
        assert extract_flight_fields(text)["pnr"] == "SISC9F"

    def test_pnr_fallback_skips_numeric_tokens(self) -> None:
        assert first_match(PNR_CASCADE, "Amount 123456\nRef X7K9QZ") == "X7K9QZ"

    def test_pnr_fallback_ignores_durations(self) -> None:
        assert first_match(PNR_CASCADE, "ABC123 hrs") is None

    def test_flight_number_rejects_month_year(self) -> None:
        assert first_match(FLIGHT_NUMBER_CASCADE, "APR 2025 EK 512") == "EK512"

    def test_derive_airline(self) -> None:
        assert derive_airline("6E1402") == "6E"
        assert derive_airline("EK512") == "EK"
        assert derive_airline("1234") is None

    def test_route_codes(self) -> None:
        assert extract_airports("Route BOM to AUH") == {
            "departure_airport": "BOM",
            "from": "BOM",
            "arrival_airport": "AUH",
            "to": "AUH",
        }

    def test_bare_airport_names_without_codes(self) -> None:
        text = (
            "Departure: Chhatrapati Shivaji International Airport\n"
            "Arrival: Abu Dhabi International Airport\n"
        )
        fields = extract_airports(text)

        assert fields == {
            "from": "Chhatrapati Shivaji International Airport",
            "to": "Abu Dhabi International Airport",
        }


class TestFlightExtractor:
    """Tests for the full fetch, recognize and parse flow."""

    def setup_method(self) -> None:
        self.fetcher = MagicMock()
        self.fetcher.fetch.return_value = b"image-bytes"
        self.recognizer = MagicMock()
        self.extractor = FlightExtractor(self.fetcher, self.recognizer)

    def test_success(self, make_doc, flight_text: str) -> None:
        self.recognizer.recognize.return_value = flight_text
        doc = make_doc("fl1", "flight")

        outcome = self.extractor.extract(FlightUnit(doc))

        assert outcome.status == ExtractionStatus.SUCCESS
        assert outcome.fields["pnr"] == "SISCPF"
        assert outcome.raw_text == flight_text
        self.fetcher.fetch.assert_called_once_with(doc.source_url)
        self.recognizer.recognize.assert_called_once_with(b"image-bytes")

    def test_invalid_when_keywords_missing(self, make_doc) -> None:
        self.recognizer.recognize.return_value = "Grocery receipt, milk, bread"

        outcome = self.extractor.extract(FlightUnit(make_doc("fl1", "flight")))

        assert outcome.status == ExtractionStatus.INVALID
        assert outcome.error_message == "Text does not contain flight ticket information"
        assert outcome.fields == {}

    def test_fetch_failure_is_error_outcome(self, make_doc) -> None:
        self.fetcher.fetch.side_effect = DocumentFetchError("Failed to download document")

        outcome = self.extractor.extract(FlightUnit(make_doc("fl1", "flight")))

        assert outcome.status == ExtractionStatus.ERROR
        assert "Failed to download document" in outcome.error_message
        self.recognizer.recognize.assert_not_called()
