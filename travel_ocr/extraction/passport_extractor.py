"""Passport extraction through the identity-document verification API.

The API response is trusted as authoritative; there is no local
validation stage.
"""

import json
from typing import Any, Protocol

from travel_ocr.documents.models import ExtractionOutcome, PassportUnit
from travel_ocr.exceptions import TravelOCRError
from travel_ocr.utils.logger import get_logger

from .base import Fetcher

logger = get_logger(__name__)

PASSPORT_FIELDS: tuple[str, ...] = (
    "full_name",
    "passport_number",
    "date_of_birth",
    "expiry_date",
    "nationality",
    "place_of_birth",
    "gender",
)

# Response keys tried, in order, for each passport field.
FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "full_name": ("full_name", "name", "passport_holder_name"),
    "passport_number": ("passport_number", "passport_no"),
    "date_of_birth": ("date_of_birth", "dob"),
    "expiry_date": ("expiry_date", "expiration_date"),
    "nationality": ("nationality", "country"),
    "place_of_birth": ("place_of_birth",),
    "gender": ("gender", "sex"),
}


class PassportVerifier(Protocol):
    def verify_passport(self, front: bytes, back: bytes) -> dict[str, Any]: ...


def _as_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def flatten_response(data: Any, prefix: str = "") -> dict[str, str]:
    """Flatten nested objects and lists into dotted string keys.

    ``{"data": {"name": "X"}, "tags": ["a"]}`` becomes
    ``{"data.name": "X", "tags.0": "a"}``. Blank and null leaves are dropped.
    """
    if isinstance(data, dict):
        items = ((str(key), value) for key, value in data.items())
    elif isinstance(data, list):
        items = ((str(index), value) for index, value in enumerate(data))
    else:
        value = _as_text(data)
        return {prefix: value} if value is not None and prefix else {}

    flat: dict[str, str] = {}
    for key, value in items:
        flat.update(flatten_response(value, f"{prefix}.{key}" if prefix else key))
    return flat


def _lookup(flat: dict[str, str], alias: str) -> str | None:
    if alias in flat:
        return flat[alias]
    suffix = f".{alias}"
    for key, value in flat.items():
        if key.endswith(suffix):
            return value
    return None


def map_passport_response(result: dict[str, Any]) -> dict[str, str]:
    """Map a verification API response onto passport fields.

    The response is flattened first, so fields nested under an envelope
    such as ``data.passport_data`` are found. Known fields are resolved
    through ``FIELD_ALIASES``, preferring a top-level key over a nested
    one. Every other response field is passed through under its dotted key.

    Args:
        result: JSON object returned by the API.

    Returns:
        Flat string mapping of the extracted fields.
    """
    flat = flatten_response(result)

    fields: dict[str, str] = {}
    for field_name, aliases in FIELD_ALIASES.items():
        for alias in aliases:
            value = _lookup(flat, alias)
            if value is not None:
                fields[field_name] = value
                break

    for key, value in flat.items():
        fields.setdefault(key, value)
    return fields


class PassportExtractor:
    """Extracts passport data from a front/back image pair.

    Args:
        fetcher: Downloads the two images.
        verifier: Identity-document verification client.
    """

    def __init__(self, fetcher: Fetcher, verifier: PassportVerifier) -> None:
        self.fetcher = fetcher
        self.verifier = verifier

    def extract(self, unit: PassportUnit) -> ExtractionOutcome:
        """Extract passport fields for a traveler's passport pair.

        Args:
            unit: Passport unit holding both sides.

        Returns:
            ``success`` with mapped fields, or ``error`` on any download or
            API failure.
        """
        logger.info(
            "Processing passport for traveler %s (front=%s, back=%s)",
            unit.traveler_id,
            unit.front.document_id,
            unit.back.document_id,
        )
        try:
            front = self.fetcher.fetch(unit.front.source_url)
            back = self.fetcher.fetch(unit.back.source_url)
            result = self.verifier.verify_passport(front, back)
        except TravelOCRError as exc:
            logger.error("Passport OCR failed for traveler %s: %s", unit.traveler_id, exc)
            return ExtractionOutcome.error(str(exc))

        fields = map_passport_response(result)
        logger.info("Passport OCR completed with %d fields", len(fields))
        return ExtractionOutcome.success(fields, raw_text=json.dumps(result, default=str))
