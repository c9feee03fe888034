"""
ingestion/tokenizer.py

Line splitting shared by format detection and row parsing.
"""

from __future__ import annotations

import csv
import re

from app.domain.sales import Separator

_SURROUNDING_QUOTES = re.compile(r"^[\"']|[\"']$")
_WHITESPACE = re.compile(r"\s+")


def clean_cell(value: str) -> str:
    """
    Trim a cell and drop one surrounding quote character on each side.
    """

    return _SURROUNDING_QUOTES.sub("", value.strip()).strip()


def split_delimited(line: str, delimiter: str) -> list[str]:
    """
    Split one line on ``delimiter`` honouring double-quoted fields.

    Raises csv.Error for lines the csv module refuses (e.g. NUL bytes).
    """

    rows = list(csv.reader([line], delimiter=delimiter, quotechar='"'))
    if not rows:
        return [""]
    return rows[0]


def split_line(line: str, separator: Separator) -> list[str]:
    """
    Split one raw line into cleaned cells for the given separator.
    """

    if separator is Separator.SINGLE_COLUMN:
        return [line.strip()]
    if separator is Separator.SPACE:
        return [cell for cell in _WHITESPACE.split(line.strip()) if cell]
    delimiter = separator.delimiter or ","
    return [clean_cell(cell) for cell in split_delimited(line, delimiter)]


def whitespace_tokens(line: str) -> list[str]:
    return [token for token in _WHITESPACE.split(line.strip()) if token]
