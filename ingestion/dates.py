"""
ingestion/dates.py

Date pattern matching for the supported textual date layouts.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date

from app.domain.sales import DateFormat

MIN_YEAR = 1900
MAX_YEAR = 2100  # exclusive


@dataclass(frozen=True)
class DatePattern:
    """
    Anchored and free-text regexes for one date layout.

    ``order`` names which regex group holds year, month and day.
    """

    date_format: DateFormat
    anchored: re.Pattern[str]
    embedded: re.Pattern[str]
    order: tuple[int, int, int]

    def build(self, match: re.Match[str]) -> date | None:
        year_group, month_group, day_group = self.order
        year = int(match.group(year_group))
        month = int(match.group(month_group))
        day = int(match.group(day_group))
        if not MIN_YEAR <= year < MAX_YEAR:
            return None
        try:
            return date(year, month, day)
        except ValueError:
            return None


def _pattern(date_format: DateFormat, body: str, order: tuple[int, int, int]) -> DatePattern:
    return DatePattern(
        date_format=date_format,
        anchored=re.compile(rf"^{body}$"),
        embedded=re.compile(rf"\b{body}\b"),
        order=order,
    )


# Fixed priority order used for detection and fallback parsing.
DATE_PATTERNS: tuple[DatePattern, ...] = (
    _pattern(DateFormat.ISO, r"(\d{4})-(\d{1,2})-(\d{1,2})", (1, 2, 3)),
    _pattern(DateFormat.DAY_FIRST_DASH, r"(\d{1,2})-(\d{1,2})-(\d{4})", (3, 2, 1)),
    _pattern(DateFormat.DAY_FIRST_SLASH, r"(\d{1,2})/(\d{1,2})/(\d{4})", (3, 2, 1)),
    _pattern(DateFormat.YEAR_FIRST_SLASH, r"(\d{4})/(\d{1,2})/(\d{1,2})", (1, 2, 3)),
    _pattern(DateFormat.DAY_FIRST_DOT, r"(\d{1,2})\.(\d{1,2})\.(\d{4})", (3, 2, 1)),
)

_PATTERN_BY_FORMAT: dict[DateFormat, DatePattern] = {
    pattern.date_format: pattern for pattern in DATE_PATTERNS
}


def _ordered_patterns(preferred: DateFormat | None) -> list[DatePattern]:
    if preferred is None:
        return list(DATE_PATTERNS)
    first = _PATTERN_BY_FORMAT[preferred]
    return [first, *(pattern for pattern in DATE_PATTERNS if pattern is not first)]


def detect_date_format(value: str) -> DateFormat | None:
    """
    Return the first layout whose anchored pattern matches ``value``.
    """

    cleaned = value.strip()
    for pattern in DATE_PATTERNS:
        if pattern.anchored.match(cleaned):
            return pattern.date_format
    return None


def is_date_like(value: str) -> bool:
    return detect_date_format(value) is not None


def parse_date(value: str, preferred: DateFormat | None = None) -> date | None:
    """
    Parse a date cell, trying ``preferred`` first and then the other layouts.

    Returns None for unmatched text, impossible calendar dates, and years
    outside [1900, 2100).
    """

    cleaned = value.strip()
    for pattern in _ordered_patterns(preferred):
        match = pattern.anchored.match(cleaned)
        if match is None:
            continue
        parsed = pattern.build(match)
        if parsed is not None:
            return parsed
    return None


def search_date(text: str) -> tuple[date, tuple[int, int]] | None:
    """
    Find the first parseable date anywhere in ``text``.

    Returns the date and the (start, end) span of the matched substring.
    """

    for pattern in DATE_PATTERNS:
        for match in pattern.embedded.finditer(text):
            parsed = pattern.build(match)
            if parsed is not None:
                return parsed, match.span()
    return None
