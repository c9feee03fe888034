"""
app/domain/sales.py

Domain models shared by the sales ingestion and analysis flow.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from enum import Enum


class Separator(str, Enum):
    """
    Physical field separator detected in an uploaded sales file.
    """

    COMMA = "comma"
    SEMICOLON = "semicolon"
    TAB = "tab"
    PIPE = "pipe"
    SPACE = "space"
    SINGLE_COLUMN = "single-column"

    @property
    def delimiter(self) -> str | None:
        """Literal delimiter character, or None for whitespace based layouts."""
        return _DELIMITERS.get(self)


_DELIMITERS: dict[Separator, str] = {
    Separator.COMMA: ",",
    Separator.SEMICOLON: ";",
    Separator.TAB: "\t",
    Separator.PIPE: "|",
}


class DateFormat(str, Enum):
    """
    Supported textual date layouts.
    """

    ISO = "YYYY-MM-DD"
    DAY_FIRST_DASH = "DD-MM-YYYY"
    DAY_FIRST_SLASH = "DD/MM/YYYY"
    YEAR_FIRST_SLASH = "YYYY/MM/DD"
    DAY_FIRST_DOT = "DD.MM.YYYY"


class ColumnRole(str, Enum):
    DATE = "date"
    LOCATION = "location"
    AMOUNT = "amount"
    COMBINED = "combined"
    UNUSED = "unused"


@dataclass(frozen=True)
class ColumnMapping:
    """
    Column indices holding the date, location and amount fields.
    """

    date_index: int = 0
    location_index: int = 1
    amount_index: int = 2

    def role_of(self, index: int) -> ColumnRole:
        if index == self.date_index:
            return ColumnRole.DATE
        if index == self.location_index:
            return ColumnRole.LOCATION
        if index == self.amount_index:
            return ColumnRole.AMOUNT
        return ColumnRole.UNUSED


@dataclass(frozen=True)
class DetectedFormat:
    """
    Best-effort description of an uploaded file's physical layout.
    """

    separator: Separator = Separator.COMMA
    has_headers: bool = False
    date_format: DateFormat = DateFormat.ISO
    column_order: tuple[ColumnRole, ...] = (
        ColumnRole.DATE,
        ColumnRole.LOCATION,
        ColumnRole.AMOUNT,
    )
    column_mapping: ColumnMapping = field(default_factory=ColumnMapping)


@dataclass(frozen=True)
class SalesRecord:
    """
    One parsed (date, location, amount) sales line.
    """

    date: date
    location: str
    amount: float
    source_row_index: int
    raw_line: str

    @property
    def iso_date(self) -> str:
        return self.date.isoformat()

    @property
    def anchored_at(self) -> datetime:
        """UTC noon on the sales date, safe against timezone rollover."""
        return datetime.combine(self.date, time(12, 0), tzinfo=timezone.utc)

    @property
    def weekday(self) -> int:
        """Weekday number with 0 = Sunday ... 6 = Saturday."""
        return (self.date.weekday() + 1) % 7


@dataclass(frozen=True)
class ParseError:
    """
    One data line that could not be turned into a sales record.
    """

    row_index: int
    message: str
    raw_line: str | None = None


@dataclass(frozen=True)
class ParseResult:
    """
    Outcome of parsing a complete sales payload.

    ``records`` and ``errors`` together account for every data line.
    """

    records: tuple[SalesRecord, ...]
    errors: tuple[ParseError, ...]
    detected_format: DetectedFormat

    @property
    def total_rows(self) -> int:
        return len(self.records) + len(self.errors)

    @property
    def successful_rows(self) -> int:
        return len(self.records)

    @property
    def error_rows(self) -> int:
        return len(self.errors)
