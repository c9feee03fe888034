"""
tests/test_row_parser.py

Pytest unit tests for RowParser and the single-column strategies.

Every data line must end up as exactly one record or one row error.
"""

from __future__ import annotations

import logging
from datetime import date

import pytest

from app.config import AnalysisSettings
from app.domain.sales import DateFormat, DetectedFormat, ParseError, SalesRecord, Separator
from ingestion.row_parser import (
    RowParser,
    date_first_strategy,
    embedded_date_strategy,
    parse_sales_text,
    pattern_scan_strategy,
    split_lines,
)


@pytest.fixture()
def parser() -> RowParser:
    return RowParser(settings=AnalysisSettings())


# ---------------------------------------------------------------------------
# Delimited files
# ---------------------------------------------------------------------------


class TestDelimitedFiles:
    def test_semicolon_file_with_european_amounts(self) -> None:
        result = parse_sales_text(
            "Datum;Locatie;Omzet\n"
            "15-01-2024;Dam Square;€1.234,56\n"
            "16-01-2024;Museumplein;€980,00\n",
            settings=AnalysisSettings(),
        )
        assert result.error_rows == 0
        assert [record.location for record in result.records] == ["Dam Square", "Museumplein"]
        assert result.records[0].date == date(2024, 1, 15)
        assert result.records[0].amount == pytest.approx(1234.56)
        assert result.records[1].amount == pytest.approx(980.0)

    def test_quoted_fields_keep_embedded_commas(self) -> None:
        result = parse_sales_text(
            '2024-01-15,"Dam Square, Amsterdam","1.234,56"\n'
            '2024-01-16,"Museumplein, Amsterdam","980,00"\n',
            settings=AnalysisSettings(),
        )
        assert result.error_rows == 0
        assert result.records[0].location == "Dam Square, Amsterdam"
        assert result.records[0].amount == pytest.approx(1234.56)

    def test_windows_line_endings(self) -> None:
        result = parse_sales_text(
            "date,location,amount\r\n2024-01-15,Dam Square,450\r\n2024-01-16,Museumplein,380\r\n",
            settings=AnalysisSettings(),
        )
        assert result.successful_rows == 2
        assert result.records[1].amount == 380.0

    def test_each_bad_line_becomes_one_error(self) -> None:
        result = parse_sales_text(
            "date,location,amount\n"
            "2024-01-15,Dam Square,450.50\n"
            "2024-13-45,Dam Square,100\n"
            "2024-01-16,Museumplein,abc\n"
            "2024-01-17,Museumplein,-50\n"
            "2024-01-18,Leidseplein\n"
            "2024-01-19,,100\n",
            settings=AnalysisSettings(),
        )

        assert result.total_rows == 6
        assert result.successful_rows == 1
        assert result.records[0].amount == pytest.approx(450.5)
        messages = {error.row_index: error.message for error in result.errors}
        assert messages == {
            2: "Invalid date '2024-13-45'",
            3: "Invalid amount 'abc'",
            4: "Negative amount '-50'",
            5: "Insufficient columns (2 found, 3 expected)",
            6: "Empty values found",
        }

    def test_source_row_index_counts_data_lines_from_one(self) -> None:
        result = parse_sales_text(
            "date,location,amount\n2024-01-15,Dam Square,450\n2024-01-16,Museumplein,380\n",
            settings=AnalysisSettings(),
        )
        assert [record.source_row_index for record in result.records] == [1, 2]

    def test_zero_amount_is_accepted(self, parser: RowParser) -> None:
        outcome = parser.parse_line("2024-01-15,Dam Square,0", 1, DetectedFormat())
        assert isinstance(outcome, SalesRecord)
        assert outcome.amount == 0.0


# ---------------------------------------------------------------------------
# Single-column files
# ---------------------------------------------------------------------------


class TestSingleColumn:
    def test_date_first_lines(self) -> None:
        result = parse_sales_text(
            "2024-01-15 Museumplein Amsterdam €450,50\n2024-01-16 Dam Square €380\n",
            settings=AnalysisSettings(),
        )
        assert result.detected_format.separator is Separator.SINGLE_COLUMN
        assert result.error_rows == 0
        first, second = result.records
        assert first.location == "Museumplein Amsterdam"
        assert first.amount == pytest.approx(450.5)
        assert second.location == "Dam Square"
        assert second.date == date(2024, 1, 16)

    def test_unsplittable_line(self, parser: RowParser) -> None:
        outcome = parser.parse_line(
            "just some words here",
            7,
            DetectedFormat(separator=Separator.SINGLE_COLUMN),
        )
        assert isinstance(outcome, ParseError)
        assert outcome.row_index == 7
        assert outcome.message == "Could not split single column 'just some words here'"
        assert outcome.raw_line == "just some words here"


class TestStrategies:
    def test_date_first(self) -> None:
        extracted = date_first_strategy("2024-01-15 Museumplein Amsterdam €450,50", DateFormat.ISO)
        assert extracted is not None
        assert extracted.location == "Museumplein Amsterdam"
        assert extracted.amount == pytest.approx(450.5)

    def test_date_first_needs_leading_date(self) -> None:
        assert date_first_strategy("Dam Square 2024-01-15 450", DateFormat.ISO) is None

    def test_embedded_date(self) -> None:
        extracted = embedded_date_strategy("Dam Square 2024-01-15 450", DateFormat.ISO)
        assert extracted is not None
        assert extracted.date == date(2024, 1, 15)
        assert extracted.location == "Dam Square"
        assert extracted.amount == 450.0

    def test_embedded_date_keeps_trailing_tokens_in_location(self) -> None:
        extracted = embedded_date_strategy("Dam 15-01-2024 450 Square", DateFormat.DAY_FIRST_DASH)
        assert extracted is not None
        assert extracted.location == "Dam Square"

    def test_pattern_scan(self) -> None:
        extracted = pattern_scan_strategy("Vondelpark:2024-01-15:€320", DateFormat.ISO)
        assert extracted is not None
        assert extracted.date == date(2024, 1, 15)
        assert extracted.amount == 320.0
        assert extracted.location.startswith("Vondelpark")

    def test_pattern_scan_without_amount(self) -> None:
        assert pattern_scan_strategy("Vondelpark:2024-01-15", DateFormat.ISO) is None


# ---------------------------------------------------------------------------
# Logging and helpers
# ---------------------------------------------------------------------------


class TestErrorLogging:
    def test_logged_errors_are_capped(self, caplog: pytest.LogCaptureFixture) -> None:
        parser = RowParser(settings=AnalysisSettings(max_logged_parse_errors=1))
        with caplog.at_level(logging.WARNING, logger="ingestion.row_parser"):
            parser.parse_rows(["bad", "worse", "worst"], DetectedFormat())

        warnings = [record.getMessage() for record in caplog.records if record.levelno == logging.WARNING]
        assert len(warnings) == 2
        assert warnings[0].startswith("Row parse failed row=1")
        assert warnings[1] == "Suppressed 2 further row parse errors"

    def test_logging_can_be_disabled(self, caplog: pytest.LogCaptureFixture) -> None:
        parser = RowParser(settings=AnalysisSettings(log_parse_errors=False))
        with caplog.at_level(logging.WARNING, logger="ingestion.row_parser"):
            result = parser.parse_rows(["bad"], DetectedFormat())
        assert result.error_rows == 1
        assert not [record for record in caplog.records if record.levelno == logging.WARNING]


def test_split_lines_drops_blank_lines() -> None:
    assert split_lines("a\r\n\r\nb\n  \nc") == ["a", "b", "c"]


def test_headerless_semicolon_line() -> None:
    result = parse_sales_text("15-01-2024;Dam Square;€1.234,56", settings=AnalysisSettings())
    assert result.detected_format.separator is Separator.SEMICOLON
    assert not result.detected_format.has_headers
    record = result.records[0]
    assert (record.date, record.location, record.amount) == (date(2024, 1, 15), "Dam Square", pytest.approx(1234.56))


def test_records_and_errors_account_for_every_line() -> None:
    text = "date,location,amount\n2024-01-15,Dam,100\n\nrubbish\n2024-01-16,Dam,x\n2024-01-17,Dam,90\n"
    result = parse_sales_text(text, settings=AnalysisSettings())
    assert result.total_rows == 4
    assert result.successful_rows + result.error_rows == 4


def test_amount_beyond_float_range_is_one_row_error() -> None:
    huge = "9" * 400
    result = parse_sales_text(
        "date,location,amount\n"
        "2024-01-15,Dam Square,450\n"
        "2024-01-16,Dam Square,1e400\n"
        f"2024-01-17,Museumplein,{huge}\n",
        settings=AnalysisSettings(),
    )

    assert result.total_rows == 3
    assert [record.amount for record in result.records] == [450.0]
    assert [(error.row_index, error.message) for error in result.errors] == [
        (2, "Invalid amount '1e400'"),
        (3, f"Invalid amount '{huge}'"),
    ]
