"""
ingestion/format_detector.py

Best-effort sniffing of separator, header row, column roles and date layout
for loosely structured sales files.

Detection never raises: when no signal is found it falls back to a comma
separated, headerless, ISO-dated layout.
"""

from __future__ import annotations

import csv
import logging
from collections import Counter
from dataclasses import dataclass
from typing import Sequence

from app.domain.sales import ColumnMapping, ColumnRole, DateFormat, DetectedFormat, Separator
from ingestion.amounts import is_amount_like
from ingestion.dates import detect_date_format, is_date_like
from ingestion.tokenizer import split_line, whitespace_tokens

logger = logging.getLogger(__name__)

SAMPLE_SIZE = 5
DATE_SAMPLE_SIZE = 3
MIN_SEPARATOR_OCCURRENCES = 2.0
MIN_TOKENS_FOR_SINGLE_COLUMN = 3.0

CANDIDATE_SEPARATORS: tuple[Separator, ...] = (
    Separator.COMMA,
    Separator.SEMICOLON,
    Separator.TAB,
    Separator.PIPE,
)

HEADER_VOCABULARY: dict[ColumnRole, tuple[str, ...]] = {
    ColumnRole.DATE: ("datum", "date", "dag", "day", "tijd", "time"),
    ColumnRole.LOCATION: ("locatie", "location", "plaats", "place", "spot", "adres", "address"),
    ColumnRole.AMOUNT: ("omzet", "revenue", "amount", "bedrag", "waarde", "value", "euro", "eur", "€"),
}


@dataclass(frozen=True)
class SeparatorScore:
    """
    Column statistics of one candidate separator over the sample lines.
    """

    separator: Separator
    average_occurrences: float
    consistency: float


class FormatDetector:
    """
    Infers the physical layout of a sales file from its first lines.
    """

    def detect(self, lines: Sequence[str]) -> DetectedFormat:
        """
        Detect separator, header presence, column mapping and date format.

        Args:
            lines: Non-blank raw lines of the file, header line included.
        """

        lines = [line for line in lines if line.strip()]
        if not lines:
            return DetectedFormat()

        separator = self.detect_separator(lines)
        has_headers = self.detect_headers(lines[0], separator)
        data_sample = lines[1 : SAMPLE_SIZE + 1] if has_headers else lines[:SAMPLE_SIZE]

        if separator is Separator.SINGLE_COLUMN:
            mapping = ColumnMapping()
            column_order: tuple[ColumnRole, ...] = (ColumnRole.COMBINED,)
            date_format = self._detect_embedded_date_format(data_sample)
        else:
            mapping = self.detect_column_mapping(lines[0], data_sample, separator, has_headers)
            width = max((len(self._safe_split(line, separator)) for line in data_sample), default=3)
            column_order = tuple(mapping.role_of(index) for index in range(max(width, 3)))
            date_format = self.detect_date_format(data_sample, separator, mapping.date_index)

        detected = DetectedFormat(
            separator=separator,
            has_headers=has_headers,
            date_format=date_format,
            column_order=column_order,
            column_mapping=mapping,
        )
        logger.debug(
            "Detected sales format separator=%s has_headers=%s date_format=%s mapping=%s",
            detected.separator.value,
            detected.has_headers,
            detected.date_format.value,
            detected.column_mapping,
        )
        return detected

    # ------------------------------------------------------------------
    # Separator
    # ------------------------------------------------------------------

    def detect_separator(self, lines: Sequence[str]) -> Separator:
        sample = list(lines[:SAMPLE_SIZE])
        if not sample:
            return Separator.COMMA

        average_tokens = sum(len(whitespace_tokens(line)) for line in sample) / len(sample)
        has_no_candidate = all(
            candidate.delimiter not in line
            for candidate in CANDIDATE_SEPARATORS
            for line in sample
        )
        if has_no_candidate and average_tokens >= MIN_TOKENS_FOR_SINGLE_COLUMN:
            return Separator.SINGLE_COLUMN

        scores = [self._score_separator(sample, candidate) for candidate in CANDIDATE_SEPARATORS]
        qualifying = [score for score in scores if score.average_occurrences >= MIN_SEPARATOR_OCCURRENCES]
        if qualifying:
            best = max(
                qualifying,
                key=lambda score: (score.consistency, score.average_occurrences),
            )
            return best.separator

        if any("  " in line or "\t" in line for line in sample):
            return Separator.SPACE

        if average_tokens >= MIN_TOKENS_FOR_SINGLE_COLUMN:
            return Separator.SINGLE_COLUMN

        return Separator.COMMA

    def _score_separator(self, sample: list[str], separator: Separator) -> SeparatorScore:
        column_counts = [len(self._safe_split(line, separator)) for line in sample]
        modal_count, _ = Counter(column_counts).most_common(1)[0]
        consistent = sum(1 for count in column_counts if count == modal_count)
        return SeparatorScore(
            separator=separator,
            average_occurrences=sum(count - 1 for count in column_counts) / len(sample),
            consistency=consistent / len(sample),
        )

    # ------------------------------------------------------------------
    # Headers and column roles
    # ------------------------------------------------------------------

    def detect_headers(self, first_line: str, separator: Separator) -> bool:
        """
        A first line is a header when it names a known column and holds no date.
        """

        if separator is Separator.SINGLE_COLUMN:
            tokens = whitespace_tokens(first_line)
        else:
            tokens = self._safe_split(first_line, separator)

        if any(is_date_like(token) for token in tokens):
            return False
        return any(
            self._matches_vocabulary(token, words)
            for token in tokens
            for words in HEADER_VOCABULARY.values()
        )

    def detect_column_mapping(
        self,
        first_line: str,
        data_sample: Sequence[str],
        separator: Separator,
        has_headers: bool,
    ) -> ColumnMapping:
        if has_headers:
            mapping = self._mapping_from_headers(self._safe_split(first_line, separator))
            if mapping is not None:
                return mapping
        return self.guess_column_mapping(data_sample, separator)

    def _mapping_from_headers(self, headers: list[str]) -> ColumnMapping | None:
        used: set[int] = set()
        resolved: dict[ColumnRole, int] = {}
        for role, words in HEADER_VOCABULARY.items():
            for index, header in enumerate(headers):
                if index in used:
                    continue
                if self._matches_vocabulary(header, words):
                    resolved[role] = index
                    used.add(index)
                    break
        if len(resolved) != len(HEADER_VOCABULARY):
            return None
        return ColumnMapping(
            date_index=resolved[ColumnRole.DATE],
            location_index=resolved[ColumnRole.LOCATION],
            amount_index=resolved[ColumnRole.AMOUNT],
        )

    def guess_column_mapping(self, data_sample: Sequence[str], separator: Separator) -> ColumnMapping:
        """
        Score every column index over the sample and assign roles.

        The date column has the highest share of date-like cells; the amount
        column the highest share of numeric cells among the others; location
        is the first column left over.
        """

        rows = [self._safe_split(line, separator) for line in data_sample]
        if not rows or len(rows[0]) < 3:
            return ColumnMapping()

        width = len(rows[0])
        date_scores = [self._column_share(rows, index, is_date_like) for index in range(width)]
        amount_scores = [self._column_share(rows, index, is_amount_like) for index in range(width)]

        date_index = _argmax(date_scores, excluded=set())
        amount_index = _argmax(amount_scores, excluded={date_index})
        location_index = next(
            index for index in range(width) if index not in (date_index, amount_index)
        )
        return ColumnMapping(
            date_index=date_index,
            location_index=location_index,
            amount_index=amount_index,
        )

    # ------------------------------------------------------------------
    # Date format
    # ------------------------------------------------------------------

    def detect_date_format(
        self,
        data_sample: Sequence[str],
        separator: Separator,
        date_index: int,
    ) -> DateFormat:
        cells: list[str] = []
        for line in data_sample:
            row = self._safe_split(line, separator)
            if date_index < len(row) and row[date_index]:
                cells.append(row[date_index])
            if len(cells) >= DATE_SAMPLE_SIZE:
                break

        for cell in cells:
            detected = detect_date_format(cell)
            if detected is not None:
                return detected
        return DateFormat.ISO

    def _detect_embedded_date_format(self, data_sample: Sequence[str]) -> DateFormat:
        for line in data_sample[:DATE_SAMPLE_SIZE]:
            for token in whitespace_tokens(line):
                detected = detect_date_format(token)
                if detected is not None:
                    return detected
        return DateFormat.ISO

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _safe_split(line: str, separator: Separator) -> list[str]:
        try:
            return split_line(line, separator)
        except csv.Error:
            delimiter = separator.delimiter
            if delimiter is None:
                return [line.strip()]
            return [cell.strip() for cell in line.split(delimiter)]

    @staticmethod
    def _matches_vocabulary(token: str, words: tuple[str, ...]) -> bool:
        lowered = token.strip().lower()
        return bool(lowered) and any(word in lowered for word in words)

    @staticmethod
    def _column_share(rows: list[list[str]], index: int, predicate) -> float:
        matches = sum(1 for row in rows if index < len(row) and row[index] and predicate(row[index]))
        return matches / len(rows)


def _argmax(scores: list[float], *, excluded: set[int]) -> int:
    best_index = -1
    best_score = float("-inf")
    for index, score in enumerate(scores):
        if index in excluded:
            continue
        if score > best_score:
            best_index = index
            best_score = score
    return best_index


def detect_format(lines: Sequence[str]) -> DetectedFormat:
    """
    Module-level convenience wrapper around :class:`FormatDetector`.
    """

    return FormatDetector().detect(lines)


def split_data_lines(lines: Sequence[str], detected: DetectedFormat) -> list[str]:
    """
    Return the data lines of ``lines``, dropping the header when detected.
    """

    non_blank = [line for line in lines if line.strip()]
    return non_blank[1:] if detected.has_headers else non_blank


__all__ = [
    "CANDIDATE_SEPARATORS",
    "HEADER_VOCABULARY",
    "FormatDetector",
    "SeparatorScore",
    "detect_format",
    "split_data_lines",
]
