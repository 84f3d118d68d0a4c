"""Prioritized regex cascades for field extraction.

A cascade is an ordered list of ``FieldPattern`` entries. The first
pattern that yields an accepted match wins; later entries are fallbacks
and are never merged with earlier results.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass, field

Postprocess = Callable[[re.Match], str]
Reject = Callable[[str], bool]

# Shared regex fragments
TITLE = r"(?i:mr|ms|mrs|miss|mstr|dr)"
NAME_WORD = r"[A-Z](?:[a-z]+|[A-Z]+)"
FULL_NAME = rf"({NAME_WORD}(?:[ \t]+{NAME_WORD})+)"
MONTHS = r"(?i:(?:jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)[a-z]*)"
DAY_MONTH_YEAR = rf"\d{{1,2}}[ \t]+{MONTHS}[ \t,]+\d{{4}}"
NUMERIC_DATE = r"\d{1,2}[/\-]\d{1,2}[/\-]\d{2,4}"


def _group_one(match: re.Match) -> str:
    value = match.group(1) if match.re.groups else match.group(0)
    return value.strip()


def _never(_: str) -> bool:
    return False


@dataclass(frozen=True)
class FieldPattern:
    """One entry of a field cascade.

    Attributes:
        regex: Compiled pattern to search for.
        postprocess: Turns a match into the field value. Defaults to the
            first capture group (or the whole match), stripped.
        reject: Predicate on the post-processed value; a rejected match is
            skipped and the next match is tried.
    """

    regex: re.Pattern
    postprocess: Postprocess = field(default=_group_one)
    reject: Reject = field(default=_never)


def pattern(
    regex: str,
    flags: int = 0,
    postprocess: Postprocess = _group_one,
    reject: Reject = _never,
) -> FieldPattern:
    """Compile a regex into a ``FieldPattern``."""
    return FieldPattern(re.compile(regex, flags), postprocess, reject)


def first_match(cascade: list[FieldPattern], text: str) -> str | None:
    """Run a cascade and return the first accepted value.

    Patterns are tried in priority order; within a pattern, matches are
    tried in document order.

    Args:
        cascade: Prioritized pattern list.
        text: Text to search.

    Returns:
        The accepted value, or ``None`` if no pattern produced one.
    """
    found = first_occurrence(cascade, text)
    return found.value if found else None


@dataclass(frozen=True)
class Occurrence:
    """A value found at a position in the text."""

    start: int
    end: int
    value: str

    def overlaps(self, other: "Occurrence") -> bool:
        return self.start < other.end and other.start < self.end


def first_occurrence(cascade: list[FieldPattern], text: str) -> Occurrence | None:
    """Like ``first_match`` but keeps the span of the winning match."""
    for entry in cascade:
        for match in entry.regex.finditer(text):
            value = entry.postprocess(match)
            if value and not entry.reject(value):
                return Occurrence(match.start(), match.end(), value)
    return None


def collect_in_order(patterns: list[FieldPattern], text: str) -> list[Occurrence]:
    """Collect every match of several patterns in document order.

    Matches overlapping an earlier accepted match are dropped, so the
    same span is never counted twice by different patterns.

    Args:
        patterns: Patterns whose matches are pooled together.
        text: Text to search.

    Returns:
        Non-overlapping occurrences sorted by position.
    """
    found: list[Occurrence] = []
    for entry in patterns:
        for match in entry.regex.finditer(text):
            value = entry.postprocess(match)
            if value and not entry.reject(value):
                found.append(Occurrence(match.start(), match.end(), value))

    found.sort(key=lambda o: (o.start, -o.end))
    ordered: list[Occurrence] = []
    for occurrence in found:
        if ordered and occurrence.start < ordered[-1].end:
            continue
        ordered.append(occurrence)
    return ordered


def assign_positionally(
    occurrences: list[Occurrence], first_key: str, second_key: str
) -> dict[str, str]:
    """Map the first and second occurrence onto two field names.

    This is a document-order approximation, not a chronological
    comparison: whatever is printed first becomes ``first_key``.
    """
    fields: dict[str, str] = {}
    if len(occurrences) >= 1:
        fields[first_key] = occurrences[0].value
    if len(occurrences) >= 2:
        fields[second_key] = occurrences[1].value
    return fields


def contains_any(phrases: tuple[str, ...]) -> Reject:
    """Build a case-insensitive reject predicate for denylisted phrases."""
    lowered = tuple(phrase.lower() for phrase in phrases)

    def _reject(value: str) -> bool:
        value = value.lower()
        return any(phrase in value for phrase in lowered)

    return _reject
