"""Tests for grouping batch documents into processing units."""

import pytest

from travel_ocr.documents.grouper import DocumentGrouper
from travel_ocr.documents.models import (
    FlightUnit,
    HotelUnit,
    PassportUnit,
    Traveler,
    UnpairedPassportUnit,
    derive_travelers,
)


class TestDocumentGrouper:
    """Tests for DocumentGrouper.group."""

    def setup_method(self) -> None:
        self.grouper = DocumentGrouper()

    def test_pairs_front_and_back_per_traveler(self, make_doc) -> None:
        docs = [
            make_doc("b1", "passport_back", traveler_id="t1"),
            make_doc("f2", "passport_front", traveler_id="t2"),
            make_doc("f1", "passport_front", traveler_id="t1"),
            make_doc("b2", "passport_back", traveler_id="t2"),
        ]
        units = self.grouper.group(docs)

        assert len(units) == 2
        assert all(isinstance(u, PassportUnit) for u in units)
        assert units[0].traveler_id == "t1"
        assert units[0].front.document_id == "f1"
        assert units[0].back.document_id == "b1"
        assert units[1].document_ids == ("f2", "b2")

    def test_lone_side_is_dropped(self, make_doc) -> None:
        units = self.grouper.group([make_doc("f1", "passport_front")])
        assert units == []

    def test_sides_of_different_travelers_never_pair(self, make_doc) -> None:
        docs = [
            make_doc("f1", "passport_front", traveler_id="t1"),
            make_doc("b2", "passport_back", traveler_id="t2"),
        ]
        assert self.grouper.group(docs) == []

    def test_every_flight_and_hotel_is_its_own_unit(self, make_doc) -> None:
        docs = [
            make_doc("h1", "hotel"),
            make_doc("fl1", "flight"),
            make_doc("fl2", "flight"),
        ]
        units = self.grouper.group(docs)

        assert [type(u) for u in units] == [FlightUnit, FlightUnit, HotelUnit]
        assert [u.primary_document.document_id for u in units] == ["fl1", "fl2", "h1"]

    def test_unsupported_kind_is_skipped(self, make_doc) -> None:
        units = self.grouper.group([make_doc("x", "visa"), make_doc("fl", "flight")])
        assert len(units) == 1
        assert isinstance(units[0], FlightUnit)

    def test_fail_policy_keeps_lone_side(self, make_doc) -> None:
        grouper = DocumentGrouper(unpaired_policy="fail")
        units = grouper.group([make_doc("b1", "passport_back", traveler_id="t9")])

        assert len(units) == 1
        unit = units[0]
        assert isinstance(unit, UnpairedPassportUnit)
        assert unit.traveler_id == "t9"
        assert unit.missing_side == "front"

    def test_unknown_policy_rejected(self) -> None:
        with pytest.raises(ValueError):
            DocumentGrouper(unpaired_policy="retry")


class TestDeriveTravelers:
    """Tests for collecting the batch's travelers."""

    def test_distinct_in_first_seen_order(self, make_doc) -> None:
        docs = [
            make_doc("a", "flight", traveler_id="t2", traveler_name="Priya Nair"),
            make_doc("b", "hotel", traveler_id="t1", traveler_name="Rahul Sharma"),
            make_doc("c", "passport_front", traveler_id="t2", traveler_name="Priya Nair"),
        ]
        assert derive_travelers(docs) == [
            Traveler("t2", "Priya Nair"),
            Traveler("t1", "Rahul Sharma"),
        ]
