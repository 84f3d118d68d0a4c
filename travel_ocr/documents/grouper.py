"""Partitions a document batch into processing units.

Passport sides are paired per traveler; every flight ticket and hotel
booking becomes its own unit.
"""

from typing import Literal

from travel_ocr.utils.logger import get_logger

from .models import (
    DocumentKind,
    DocumentRef,
    FlightUnit,
    HotelUnit,
    PassportUnit,
    ProcessingUnit,
    UnpairedPassportUnit,
)

logger = get_logger(__name__)

UnpairedPolicy = Literal["drop", "fail"]


class DocumentGrouper:
    """Groups document references into processing units.

    Args:
        unpaired_policy: What to do with a passport side whose counterpart
            is missing. ``"drop"`` skips it silently; ``"fail"`` emits an
            ``UnpairedPassportUnit`` so the orchestrator reports it as failed.
    """

    def __init__(self, unpaired_policy: UnpairedPolicy = "drop") -> None:
        if unpaired_policy not in ("drop", "fail"):
            raise ValueError(f"Unknown unpaired passport policy: {unpaired_policy}")
        self.unpaired_policy = unpaired_policy

    def group(self, documents: list[DocumentRef]) -> list[ProcessingUnit]:
        """Build processing units from a batch's documents.

        Passport units come first (in traveler first-seen order), then
        flight units, then hotel units, each in input order.

        Args:
            documents: Document references of a single batch.

        Returns:
            Processing units ready for orchestration.
        """
        passport_sides: dict[str, dict[str, DocumentRef]] = {}
        flights: list[FlightUnit] = []
        hotels: list[HotelUnit] = []

        for doc in documents:
            kind = doc.document_kind
            if kind in (DocumentKind.PASSPORT_FRONT, DocumentKind.PASSPORT_BACK):
                passport_sides.setdefault(doc.traveler_id, {})[kind] = doc
            elif kind == DocumentKind.FLIGHT:
                flights.append(FlightUnit(doc))
            elif kind == DocumentKind.HOTEL:
                hotels.append(HotelUnit(doc))
            else:
                logger.warning(
                    "Skipping document %s with unsupported kind %r",
                    doc.document_id,
                    kind,
                )

        units: list[ProcessingUnit] = []
        for traveler_id, sides in passport_sides.items():
            front = sides.get(DocumentKind.PASSPORT_FRONT)
            back = sides.get(DocumentKind.PASSPORT_BACK)
            if front and back:
                units.append(PassportUnit(traveler_id, front, back))
                continue

            lone = front or back
            if self.unpaired_policy == "fail":
                units.append(UnpairedPassportUnit(traveler_id, lone))
            else:
                logger.info(
                    "Passport for traveler %s has only its %s side, skipping",
                    traveler_id,
                    "front" if front else "back",
                )

        units.extend(flights)
        units.extend(hotels)

        logger.info(
            "Grouped %d documents into %d units (%d flight, %d hotel)",
            len(documents),
            len(units),
            len(flights),
            len(hotels),
        )
        return units
