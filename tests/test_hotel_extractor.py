"""Tests for hotel booking extraction."""

from unittest.mock import MagicMock

from travel_ocr.documents.models import ExtractionStatus, HotelUnit
from travel_ocr.exceptions import RecognitionError
from travel_ocr.extraction.hotel_extractor import (
    CONFIRMATION_CASCADE,
    HOTEL_FIELDS,
    HotelExtractor,
    extract_hotel_fields,
)
from travel_ocr.extraction.patterns import first_match


class TestExtractHotelFields:
    """Tests for extract_hotel_fields on recognized text."""

    def test_typical_booking(self, hotel_text: str) -> None:
        fields = extract_hotel_fields(hotel_text)

        assert fields == {
            "guest_name": "Priya Nair",
            "hotel_name": "Ocean Pearl Hotel",
            "confirmation_code": "HTL48213X",
            "booking_reference": "HTL48213X",
            "check_in_date": "21 Apr 2025",
            "check_out_date": "23 Apr 2025",
            "check_in_time": "3:00 PM",
            "check_out_time": "11:00 AM",
            "place": "Marina Walk, Dubai",
            "address": "Marina Walk, Dubai",
        }

    def test_only_known_keys(self, hotel_text: str) -> None:
        assert set(extract_hotel_fields(hotel_text)) <= set(HOTEL_FIELDS)

    def test_unlabeled_dates_assigned_in_document_order(self) -> None:
        text = "Your reservation\n12 May 2025 to 15 May 2025\n"
        fields = extract_hotel_fields(text)

        assert fields["check_in_date"] == "12 May 2025"
        assert fields["check_out_date"] == "15 May 2025"

    def test_lone_labeled_check_out_does_not_become_check_in(self) -> None:
        text = "Ocean Pearl Hotel\nReservation for guest\nRoom 4\nCheck-out: 23 Apr 2025\n"
        fields = extract_hotel_fields(text)

        assert fields["check_out_date"] == "23 Apr 2025"
        assert "check_in_date" not in fields

    def test_unlabeled_date_fills_missing_side(self) -> None:
        text = "Check-in: 21 Apr 2025\nDeparting 23 Apr 2025\n"
        fields = extract_hotel_fields(text)

        assert fields["check_in_date"] == "21 Apr 2025"
        assert fields["check_out_date"] == "23 Apr 2025"

    def test_weekday_dates(self) -> None:
        text = "Check-in: Mon, Apr 21\nCheck-out: Wed, Apr 23\n"
        fields = extract_hotel_fields(text)

        assert fields["check_in_date"] == "Mon, Apr 21"
        assert fields["check_out_date"] == "Wed, Apr 23"

    def test_whos_coming_guest(self) -> None:
        fields = extract_hotel_fields("Who's coming\nPriya Nair\n2 adults\n")
        assert fields["guest_name"] == "Priya Nair"


class TestConfirmationCascade:
    """Tests for the confirmation code cascade."""

    def test_generic_code_skips_amounts(self) -> None:
        text = "Total 12345678 paid\nRef 4X8K2L9PQ\n"
        assert first_match(CONFIRMATION_CASCADE, text) == "4X8K2L9PQ"

    def test_generic_code_skips_words(self) -> None:
        assert first_match(CONFIRMATION_CASCADE, "WELCOME TO PARADISE") is None


class TestHotelExtractor:
    """Tests for the full fetch, recognize and parse flow."""

    def setup_method(self) -> None:
        self.fetcher = MagicMock()
        self.fetcher.fetch.return_value = b"%PDF-1.4"
        self.recognizer = MagicMock()
        self.extractor = HotelExtractor(self.fetcher, self.recognizer)

    def test_success(self, make_doc, hotel_text: str) -> None:
        self.recognizer.recognize.return_value = hotel_text

        outcome = self.extractor.extract(HotelUnit(make_doc("h1", "hotel")))

        assert outcome.succeeded
        assert outcome.fields["hotel_name"] == "Ocean Pearl Hotel"

    def test_invalid_text(self, make_doc) -> None:
        self.recognizer.recognize.return_value = "PNR ABC123 flight departure"

        outcome = self.extractor.extract(HotelUnit(make_doc("h1", "hotel")))

        assert outcome.status == ExtractionStatus.INVALID
        assert outcome.error_message == "Text does not contain hotel booking information"

    def test_recognition_failure(self, make_doc) -> None:
        self.recognizer.recognize.side_effect = RecognitionError("Tesseract failed")

        outcome = self.extractor.extract(HotelUnit(make_doc("h1", "hotel")))

        assert outcome.status == ExtractionStatus.ERROR
        assert outcome.error_message == "Tesseract failed"

    def test_custom_keyword_threshold(self) -> None:
        extractor = HotelExtractor(self.fetcher, self.recognizer, min_keyword_hits=1)
        assert extractor.extract_text("Villa Azure").succeeded
