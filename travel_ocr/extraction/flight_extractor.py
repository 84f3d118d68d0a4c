"""Flight ticket field extraction.

Validates recognized ticket text against flight vocabulary, then pulls
PNR, passenger, flight, schedule, and airport fields through ordered
regex cascades.
"""

import re
from dataclasses import dataclass

from .base import TextDocumentExtractor
from .keyword_validator import FLIGHT_KEYWORDS
from .patterns import (
    DAY_MONTH_YEAR,
    FULL_NAME,
    NAME_WORD,
    NUMERIC_DATE,
    TITLE,
    FieldPattern,
    assign_positionally,
    collect_in_order,
    contains_any,
    first_match,
    pattern,
)

FLIGHT_FIELDS: tuple[str, ...] = (
    "pnr",
    "passenger_name",
    "flight_number",
    "airline",
    "departure_date",
    "arrival_date",
    "departure_time",
    "arrival_time",
    "departure_airport",
    "arrival_airport",
    "from",
    "to",
)

# Phrases OCR tends to hand back in place of a passenger name.
NAME_FALSE_POSITIVES: tuple[str, ...] = (
    "Information",
    "Booking Reference",
    "Payment Status",
    "Complete",
    "Abu Dhabi",
    "Mumbai",
    "Travel Time",
)

AIRLINE_CODE = r"(?:[A-Z]{2,3}|[A-Z][0-9]|[0-9][A-Z])"

_MONTH_PREFIX = re.compile(r"^(?:JAN|FEB|MAR|APR|MAY|JUN|JUL|AUG|SEP|OCT|NOV|DEC)\d")
_AIRLINE_PREFIX = re.compile(r"^([A-Z0-9]{2,3}?)\d{3,4}$")


def _upper(match: re.Match) -> str:
    return match.group(1).strip().upper()


def _compact_upper(match: re.Match) -> str:
    return re.sub(r"\s", "", match.group(1)).upper()


def _is_numeric(value: str) -> bool:
    return value.isdigit()


def _reject_flight_number(value: str) -> bool:
    return value.isdigit() or len(value) < 4 or bool(_MONTH_PREFIX.match(value))


_reject_name = contains_any(NAME_FALSE_POSITIVES)


PNR_CASCADE: list[FieldPattern] = [
    pattern(
        r"\b(?i:pnr|booking\s+reference)\b[\s:#.\-]*((?i:[A-Z0-9]{6}))\b",
        postprocess=_upper,
    ),
    pattern(
        r"\b([A-Z0-9]{6})\b(?![ \t]*(?i:hrs|hours|am|pm)\b)",
        postprocess=_upper,
        reject=_is_numeric,
    ),
]

PASSENGER_NAME_CASCADE: list[FieldPattern] = [
    pattern(rf"\b{TITLE}\b\.?[ \t]+{FULL_NAME}", reject=_reject_name),
    pattern(
        rf"(?i:passenger\s+information)\s+(?:{NAME_WORD}[ \t]+)?{FULL_NAME}",
        reject=_reject_name,
    ),
    pattern(
        rf"\b(?i:passenger(?:[ \t]+name)?|name)\b[ \t]*[:\-]?[ \t]*{FULL_NAME}",
        reject=_reject_name,
    ),
]

PASSENGER_NAME_PROXIMITY: list[FieldPattern] = [
    pattern(
        rf"(?i:passenger\s+information)[\s\S]{{0,100}}?"
        rf"(?:\b{TITLE}\b[ \t.]*)?(?!{TITLE}\b)\b({NAME_WORD}[ \t]+{NAME_WORD})"
    ),
]

FLIGHT_NUMBER_CASCADE: list[FieldPattern] = [
    pattern(
        rf"\b(?i:flight)(?:[ \t]+(?i:number|no\.?))?[ \t:#.]*({AIRLINE_CODE}[ \t]?\d{{3,4}})\b",
        postprocess=_compact_upper,
        reject=_reject_flight_number,
    ),
    pattern(
        rf"\b({AIRLINE_CODE}[ \t]?\d{{3,4}})\b",
        postprocess=_compact_upper,
        reject=_reject_flight_number,
    ),
]

DATE_PATTERNS: list[FieldPattern] = [
    pattern(rf"\b({DAY_MONTH_YEAR})\b"),
    pattern(rf"\b({NUMERIC_DATE})\b"),
]

TIME_PATTERNS: list[FieldPattern] = [
    pattern(r"\b(\d{1,2}:\d{2}(?:[ \t]*(?i:hrs|hours|am|pm)\b)?)"),
]

_CODED_AIRPORT = re.compile(r"\b([A-Z]{3})[ \t]+[-–][ \t]+([A-Z][A-Za-z .']*?Airport)\b")
_ROUTE = re.compile(r"\b([A-Z]{3})[ \t]+(?i:to)[ \t]+([A-Z]{3})\b")
_AIRPORT_NAME = re.compile(r"\b([A-Z][A-Za-z.']*(?:[ \t]+[A-Z][A-Za-z.']*)*[ \t]+Airport)\b")


@dataclass(frozen=True)
class AirportMention:
    """An airport code found in the text, with its name when printed."""

    start: int
    end: int
    code: str
    name: str | None = None


def find_airport_mentions(text: str) -> list[AirportMention]:
    """Collect ``CODE - Name`` and ``CODE to CODE`` mentions in document order."""
    mentions: list[AirportMention] = []

    for match in _CODED_AIRPORT.finditer(text):
        mentions.append(
            AirportMention(match.start(), match.end(), match.group(1), match.group(2).strip())
        )

    for match in _ROUTE.finditer(text):
        mentions.append(AirportMention(match.start(1), match.end(1), match.group(1)))
        mentions.append(AirportMention(match.start(2), match.end(2), match.group(2)))

    mentions.sort(key=lambda m: m.start)
    ordered: list[AirportMention] = []
    for mention in mentions:
        if ordered and mention.start < ordered[-1].end:
            continue
        ordered.append(mention)
    return ordered


def extract_airports(text: str) -> dict[str, str]:
    """Resolve departure and arrival airports.

    The first coded mention is the departure and the second the arrival.
    Without any coded mention, bare ``... Airport`` names are used for
    ``from``/``to`` and the codes stay absent.
    """
    fields: dict[str, str] = {}
    mentions = find_airport_mentions(text)

    if mentions:
        names = {m.code: m.name for m in mentions if m.name}
        for mention, code_key, name_key in zip(
            mentions[:2], ("departure_airport", "arrival_airport"), ("from", "to")
        ):
            fields[code_key] = mention.code
            fields[name_key] = mention.name or names.get(mention.code) or mention.code
        return fields

    airport_names: list[str] = []
    for match in _AIRPORT_NAME.finditer(text):
        name = match.group(1).strip()
        if name not in airport_names:
            airport_names.append(name)
    if airport_names:
        fields["from"] = airport_names[0]
    if len(airport_names) >= 2:
        fields["to"] = airport_names[1]
    return fields


def derive_airline(flight_number: str) -> str | None:
    """Return the carrier designator leading a flight number."""
    match = _AIRLINE_PREFIX.match(flight_number)
    return match.group(1) if match else None


def extract_flight_fields(text: str) -> dict[str, str]:
    """Extract flight ticket fields from recognized text.

    Args:
        text: Recognized ticket text.

    Returns:
        Fields that were found, keyed by names from ``FLIGHT_FIELDS``.
    """
    fields: dict[str, str] = {}

    pnr = first_match(PNR_CASCADE, text)
    if pnr:
        fields["pnr"] = pnr

    name = first_match(PASSENGER_NAME_CASCADE, text) or first_match(
        PASSENGER_NAME_PROXIMITY, text
    )
    if name:
        fields["passenger_name"] = name

    flight_number = first_match(FLIGHT_NUMBER_CASCADE, text)
    if flight_number:
        fields["flight_number"] = flight_number
        airline = derive_airline(flight_number)
        if airline:
            fields["airline"] = airline

    fields.update(
        assign_positionally(
            collect_in_order(DATE_PATTERNS, text), "departure_date", "arrival_date"
        )
    )
    fields.update(
        assign_positionally(
            collect_in_order(TIME_PATTERNS, text), "departure_time", "arrival_time"
        )
    )
    fields.update(extract_airports(text))

    return {key: fields[key] for key in FLIGHT_FIELDS if key in fields}


class FlightExtractor(TextDocumentExtractor):
    """Extracts structured data from flight tickets."""

    label = "flight ticket"
    keywords = FLIGHT_KEYWORDS
    essential_fields = ("pnr", "passenger_name")

    def parse_fields(self, text: str) -> dict[str, str]:
        return extract_flight_fields(text)
