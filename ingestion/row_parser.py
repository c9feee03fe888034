"""
ingestion/row_parser.py

Turns raw data lines into SalesRecord values or row-level ParseError values.

Every data line yields exactly one of the two; nothing in here aborts a file.
"""

from __future__ import annotations

import csv
import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import Callable, Sequence

from app.config import AnalysisSettings, get_analysis_settings
from app.domain.sales import DateFormat, DetectedFormat, ParseError, ParseResult, SalesRecord
from ingestion.amounts import parse_amount
from ingestion.dates import parse_date, search_date
from ingestion.format_detector import FormatDetector, split_data_lines
from ingestion.tokenizer import split_line, whitespace_tokens

logger = logging.getLogger(__name__)

_CURRENCY_NUMBER = re.compile(r"€?\d+(?:[.,]\d+)*")
_EURO_AND_WHITESPACE = re.compile(r"[€\s]+")


@dataclass(frozen=True)
class ExtractedFields:
    date: date
    location: str
    amount: float


# A single-column strategy returns the extracted fields or None when it does
# not apply to the line.
SingleColumnStrategy = Callable[[str, DateFormat], "ExtractedFields | None"]


def _positive_amount(token: str) -> float | None:
    amount = parse_amount(token)
    if amount is None or amount <= 0:
        return None
    return amount


def date_first_strategy(text: str, preferred: DateFormat) -> ExtractedFields | None:
    """
    ``<date> <location ...> <amount>``: the amount is the first positive
    number scanning right-to-left, down to the third token.
    """

    tokens = whitespace_tokens(text)
    if len(tokens) < 3:
        return None
    parsed_date = parse_date(tokens[0], preferred)
    if parsed_date is None:
        return None

    for index in range(len(tokens) - 1, 1, -1):
        amount = _positive_amount(tokens[index])
        if amount is None:
            continue
        location = " ".join(tokens[1:index])
        if location:
            return ExtractedFields(date=parsed_date, location=location, amount=amount)
    return None


def embedded_date_strategy(text: str, preferred: DateFormat) -> ExtractedFields | None:
    """
    ``<location ...> <date> <amount> ...``: a date token in a middle position,
    the amount is the first positive number after it and every other token
    forms the location.
    """

    tokens = whitespace_tokens(text)
    if len(tokens) < 3:
        return None

    for date_index in range(1, len(tokens) - 1):
        parsed_date = parse_date(tokens[date_index], preferred)
        if parsed_date is None:
            continue
        for amount_index in range(date_index + 1, len(tokens)):
            amount = _positive_amount(tokens[amount_index])
            if amount is None:
                continue
            location = " ".join(
                token
                for index, token in enumerate(tokens)
                if index not in (date_index, amount_index)
            )
            if location:
                return ExtractedFields(date=parsed_date, location=location, amount=amount)
    return None


def pattern_scan_strategy(text: str, preferred: DateFormat) -> ExtractedFields | None:
    """
    Free-text fallback: any supported date anywhere in the line, then the last
    currency-like number in what is left.
    """

    found = search_date(text)
    if found is None:
        return None
    parsed_date, (start, end) = found
    remainder = f"{text[:start]} {text[end:]}".strip()

    numbers = list(_CURRENCY_NUMBER.finditer(remainder))
    if not numbers:
        return None
    last = numbers[-1]
    amount = _positive_amount(last.group(0))
    if amount is None:
        return None

    location = _EURO_AND_WHITESPACE.sub(" ", remainder[: last.start()] + " " + remainder[last.end() :]).strip()
    if not location:
        return None
    return ExtractedFields(date=parsed_date, location=location, amount=amount)


SINGLE_COLUMN_STRATEGIES: tuple[SingleColumnStrategy, ...] = (
    date_first_strategy,
    embedded_date_strategy,
    pattern_scan_strategy,
)


class RowParser:
    """
    Parses data lines according to a DetectedFormat.
    """

    def __init__(
        self,
        settings: AnalysisSettings | None = None,
        strategies: Sequence[SingleColumnStrategy] = SINGLE_COLUMN_STRATEGIES,
    ) -> None:
        self._settings = settings or get_analysis_settings()
        self._strategies = tuple(strategies)

    def parse_rows(self, data_lines: Sequence[str], detected_format: DetectedFormat) -> ParseResult:
        records: list[SalesRecord] = []
        errors: list[ParseError] = []

        for position, line in enumerate(data_lines, start=1):
            outcome = self.parse_line(line, position, detected_format)
            if isinstance(outcome, SalesRecord):
                records.append(outcome)
            else:
                errors.append(outcome)

        self._log_errors(errors)
        logger.info(
            "Parsed sales rows total=%d records=%d errors=%d separator=%s",
            len(data_lines),
            len(records),
            len(errors),
            detected_format.separator.value,
        )
        return ParseResult(
            records=tuple(records),
            errors=tuple(errors),
            detected_format=detected_format,
        )

    def parse_line(
        self,
        line: str,
        row_index: int,
        detected_format: DetectedFormat,
    ) -> SalesRecord | ParseError:
        try:
            cells = split_line(line, detected_format.separator)
        except csv.Error as exc:
            return ParseError(row_index, f"Unreadable row: {exc}", line)

        if len(cells) == 1:
            return self._parse_single_column(cells[0], line, row_index, detected_format.date_format)

        if len(cells) < 3:
            return ParseError(
                row_index,
                f"Insufficient columns ({len(cells)} found, 3 expected)",
                line,
            )

        mapping = detected_format.column_mapping
        date_text = _cell(cells, mapping.date_index)
        location = _cell(cells, mapping.location_index)
        amount_text = _cell(cells, mapping.amount_index)
        if not date_text or not location or not amount_text:
            return ParseError(row_index, "Empty values found", line)

        parsed_date = parse_date(date_text, detected_format.date_format)
        if parsed_date is None:
            return ParseError(row_index, f"Invalid date '{date_text}'", line)

        amount = parse_amount(amount_text)
        if amount is None:
            return ParseError(row_index, f"Invalid amount '{amount_text}'", line)
        if amount < 0:
            return ParseError(row_index, f"Negative amount '{amount_text}'", line)

        return SalesRecord(
            date=parsed_date,
            location=location,
            amount=amount,
            source_row_index=row_index,
            raw_line=line,
        )

    def _parse_single_column(
        self,
        text: str,
        line: str,
        row_index: int,
        preferred: DateFormat,
    ) -> SalesRecord | ParseError:
        text = text.strip()
        if text:
            for strategy in self._strategies:
                extracted = strategy(text, preferred)
                if extracted is not None:
                    return SalesRecord(
                        date=extracted.date,
                        location=extracted.location.strip(),
                        amount=extracted.amount,
                        source_row_index=row_index,
                        raw_line=line,
                    )
        return ParseError(row_index, f"Could not split single column '{text}'", line)

    def _log_errors(self, errors: Sequence[ParseError]) -> None:
        if not errors or not self._settings.log_parse_errors:
            return
        limit = self._settings.max_logged_parse_errors
        for error in errors[:limit]:
            logger.warning("Row parse failed row=%d reason=%s", error.row_index, error.message)
        if len(errors) > limit:
            logger.warning("Suppressed %d further row parse errors", len(errors) - limit)


def _cell(cells: Sequence[str], index: int) -> str:
    if 0 <= index < len(cells):
        return cells[index].strip()
    return ""


def split_lines(text: str) -> list[str]:
    """
    Split a payload into non-blank lines, accepting any newline convention.
    """

    return [line for line in text.splitlines() if line.strip()]


def parse_sales_text(
    text: str,
    *,
    settings: AnalysisSettings | None = None,
    detector: FormatDetector | None = None,
) -> ParseResult:
    """
    Detect the format of ``text`` and parse every data line.
    """

    lines = split_lines(text)
    detected = (detector or FormatDetector()).detect(lines)
    data_lines = split_data_lines(lines, detected)
    return RowParser(settings=settings).parse_rows(data_lines, detected)


__all__ = [
    "ExtractedFields",
    "RowParser",
    "SINGLE_COLUMN_STRATEGIES",
    "date_first_strategy",
    "embedded_date_strategy",
    "parse_sales_text",
    "pattern_scan_strategy",
    "split_lines",
]
