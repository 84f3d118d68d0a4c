"""Hotel booking field extraction.

Validates recognized booking text against accommodation vocabulary,
then extracts property, confirmation, stay dates and times, location
and lead guest through ordered regex cascades.
"""

import re

from .base import TextDocumentExtractor
from .keyword_validator import HOTEL_KEYWORDS
from .patterns import (
    DAY_MONTH_YEAR,
    FULL_NAME,
    MONTHS,
    NAME_WORD,
    NUMERIC_DATE,
    TITLE,
    FieldPattern,
    assign_positionally,
    collect_in_order,
    contains_any,
    first_match,
    first_occurrence,
    pattern,
)

HOTEL_FIELDS: tuple[str, ...] = (
    "guest_name",
    "hotel_name",
    "confirmation_code",
    "booking_reference",
    "check_in_date",
    "check_out_date",
    "check_in_time",
    "check_out_time",
    "place",
    "address",
)

PROPERTY_SUFFIX = r"(?:Villa|Hotel|Resort|Lodge|Inn|Suites|Palace)"
WEEKDAY_MONTH_DAY = rf"(?i:mon|tue|wed|thu|fri|sat|sun)[a-z]*,[ \t]+{MONTHS}[ \t]+\d{{1,2}}"
ANY_DATE = rf"(?:{DAY_MONTH_YEAR}|{NUMERIC_DATE}|{WEEKDAY_MONTH_DAY})"
CLOCK = r"\d{1,2}:\d{2}(?:[ \t]*(?i:am|pm)\b)?"
CHECK_IN = r"\b(?i:check[- ]?in)"
CHECK_OUT = r"\b(?i:check[- ]?out)"

GUEST_FALSE_POSITIVES: tuple[str, ...] = (
    "Information",
    "Details",
    "Your Host",
    "Check In",
    "Check Out",
    "Booking",
    "Reservation",
)

_AM_PM = re.compile(r"(\d{1,2}:\d{2})\s*(am|pm)", re.IGNORECASE)


def _clean(match: re.Match) -> str:
    return " ".join(match.group(1).split()).rstrip(".,")


def _upper(match: re.Match) -> str:
    return match.group(1).strip().upper()


def _clock(match: re.Match) -> str:
    value = " ".join(match.group(1).split())
    return _AM_PM.sub(lambda m: f"{m.group(1)} {m.group(2).upper()}", value)


def _is_alphabetic(value: str) -> bool:
    return value.isalpha()


_reject_guest = contains_any(GUEST_FALSE_POSITIVES)
_reject_property_word = contains_any(("villa", "hotel"))


HOTEL_NAME_CASCADE: list[FieldPattern] = [
    pattern(
        r"\b(?i:hotel[ \t]+name|property(?:[ \t]+name)?|hotel)[ \t]*:[ \t]*([^\n]+)",
        postprocess=_clean,
    ),
    pattern(
        rf"\A\s*((?:[A-Za-z0-9&']+[ \t]+)+(?i:{PROPERTY_SUFFIX}))\b",
        postprocess=_clean,
    ),
    pattern(
        rf"\b((?:[A-Z0-9][A-Za-z0-9&']*[ \t]+)+{PROPERTY_SUFFIX})\b",
        postprocess=_clean,
    ),
]

CONFIRMATION_CASCADE: list[FieldPattern] = [
    pattern(
        r"\b(?i:confirmation[ \t]+(?:code|number|no))\b[ \t]*[:#.\-]?[ \t]*([A-Z0-9]{6,12})\b",
        postprocess=_upper,
    ),
    pattern(
        r"\b(?i:booking[ \t]+(?:reference|id|number))\b[ \t]*[:#.\-]?[ \t]*([A-Z0-9]{6,12})\b",
        postprocess=_upper,
    ),
    pattern(
        r"\b(?i:reservation[ \t]+(?:id|number|code))\b[ \t]*[:#.\-]?[ \t]*([A-Z0-9]{6,12})\b",
        postprocess=_upper,
    ),
    pattern(
        r"\b([A-Z0-9]{8,12})\b(?![ \t]*(?i:paid|amount|guests?)\b)",
        postprocess=_upper,
        reject=_is_alphabetic,
    ),
]

CHECK_IN_DATE_CASCADE: list[FieldPattern] = [
    pattern(rf"{CHECK_IN}(?:[ \t]+(?i:date))?[ \t]*:?[ \t]*({ANY_DATE})", postprocess=_clean),
]

CHECK_OUT_DATE_CASCADE: list[FieldPattern] = [
    pattern(rf"{CHECK_OUT}(?:[ \t]+(?i:date))?[ \t]*:?[ \t]*({ANY_DATE})", postprocess=_clean),
]

DATE_PATTERNS: list[FieldPattern] = [
    pattern(rf"\b({DAY_MONTH_YEAR})\b", postprocess=_clean),
    pattern(rf"\b({NUMERIC_DATE})\b", postprocess=_clean),
    pattern(rf"\b({WEEKDAY_MONTH_DAY})\b", postprocess=_clean),
]

CHECK_IN_TIME_CASCADE: list[FieldPattern] = [
    pattern(rf"{CHECK_IN}(?:[ \t]+(?i:time))?[ \t]*:?[ \t]*({CLOCK})", postprocess=_clock),
]

CHECK_OUT_TIME_CASCADE: list[FieldPattern] = [
    pattern(rf"{CHECK_OUT}(?:[ \t]+(?i:time))?[ \t]*:?[ \t]*({CLOCK})", postprocess=_clock),
]

TIME_PATTERNS: list[FieldPattern] = [
    pattern(rf"\b({CLOCK})", postprocess=_clock),
]

PLACE_CASCADE: list[FieldPattern] = [
    pattern(
        r"\b(?i:address|location)[ \t]*:[ \t]*([^\n]+)",
        postprocess=_clean,
        reject=_reject_property_word,
    ),
    pattern(
        r"\b((?:[A-Z][A-Za-z]*[ \t]+)*(?:Hills|City|Dubai|Abu Dhabi|Emirates))\b",
        postprocess=_clean,
        reject=_reject_property_word,
    ),
    pattern(
        r"\b([A-Z][A-Za-z ,]*?(?:United Arab Emirates|UAE|USA|UK))\b",
        postprocess=_clean,
        reject=_reject_property_word,
    ),
]

GUEST_NAME_CASCADE: list[FieldPattern] = [
    pattern(rf"(?i:who['’]?s[ \t]+coming)\s+{FULL_NAME}", reject=_reject_guest),
    pattern(
        rf"\b(?i:(?:lead[ \t]+|primary[ \t]+)?guest(?:[ \t]+name)?s?)[ \t]*:[ \t]*{FULL_NAME}",
        reject=_reject_guest,
    ),
    pattern(rf"\b{TITLE}\b\.?[ \t]+{FULL_NAME}", reject=_reject_guest),
]

GUEST_NAME_PROXIMITY: list[FieldPattern] = [
    pattern(
        rf"(?i:guest[ \t]+(?:details|information))[\s\S]{{0,100}}?"
        rf"(?:\b{TITLE}\b[ \t.]*)?(?!{TITLE}\b)\b({NAME_WORD}[ \t]+{NAME_WORD})"
    ),
]


def _stay_pair(
    text: str,
    in_cascade: list[FieldPattern],
    out_cascade: list[FieldPattern],
    positional: list[FieldPattern],
    in_key: str,
    out_key: str,
) -> dict[str, str]:
    """Resolve a check-in/check-out pair.

    Labeled values win. Unlabeled occurrences fill the remaining keys in
    document order; a labeled span never fills the other key.
    """
    labeled = {
        in_key: first_occurrence(in_cascade, text),
        out_key: first_occurrence(out_cascade, text),
    }
    spans = [found for found in labeled.values() if found]
    unlabeled = [
        occ
        for occ in collect_in_order(positional, text)
        if not any(occ.overlaps(span) for span in spans)
    ]

    if not spans:
        return assign_positionally(unlabeled, in_key, out_key)

    fields: dict[str, str] = {}
    for key, found in labeled.items():
        if found:
            fields[key] = found.value
        elif unlabeled:
            fields[key] = unlabeled.pop(0).value
    return fields


def extract_hotel_fields(text: str) -> dict[str, str]:
    """Extract hotel booking fields from recognized text.

    Args:
        text: Recognized booking text.

    Returns:
        Fields that were found, keyed by names from ``HOTEL_FIELDS``.
    """
    fields: dict[str, str] = {}

    hotel_name = first_match(HOTEL_NAME_CASCADE, text)
    if hotel_name:
        fields["hotel_name"] = hotel_name

    code = first_match(CONFIRMATION_CASCADE, text)
    if code:
        fields["confirmation_code"] = code
        fields["booking_reference"] = code

    fields.update(
        _stay_pair(
            text,
            CHECK_IN_DATE_CASCADE,
            CHECK_OUT_DATE_CASCADE,
            DATE_PATTERNS,
            "check_in_date",
            "check_out_date",
        )
    )
    fields.update(
        _stay_pair(
            text,
            CHECK_IN_TIME_CASCADE,
            CHECK_OUT_TIME_CASCADE,
            TIME_PATTERNS,
            "check_in_time",
            "check_out_time",
        )
    )

    place = first_match(PLACE_CASCADE, text)
    if place:
        fields["place"] = place
        fields["address"] = place

    guest = first_match(GUEST_NAME_CASCADE, text) or first_match(GUEST_NAME_PROXIMITY, text)
    if guest:
        fields["guest_name"] = guest

    return {key: fields[key] for key in HOTEL_FIELDS if key in fields}


class HotelExtractor(TextDocumentExtractor):
    """Extracts structured data from hotel bookings."""

    label = "hotel booking"
    keywords = HOTEL_KEYWORDS
    essential_fields = ("hotel_name", "confirmation_code")

    def parse_fields(self, text: str) -> dict[str, str]:
        return extract_hotel_fields(text)
