"""
ingestion/amounts.py

Currency amount normalization for European and US number layouts.
"""

from __future__ import annotations

import math
import re
from decimal import Decimal, InvalidOperation

_CURRENCY_PATTERN = re.compile(r"[€$£¥\s]|EUR|eur", re.UNICODE)
_AMOUNT_LIKE_STRIP = re.compile(r"[€$£¥,.\s]")
_DIGITS_ONLY = re.compile(r"^\d+$")


def strip_currency(value: str) -> str:
    return _CURRENCY_PATTERN.sub("", value)


def normalize_amount_text(value: str) -> str:
    """
    Rewrite an amount string into a plain ``1234.56`` layout.

    When both ``,`` and ``.`` are present, whichever comes last is the
    decimal separator. A lone ``,`` is decimal only when exactly one or two
    digits follow it. Repeated ``.`` without ``,`` are thousands separators.
    """

    cleaned = strip_currency(value)

    if "," in cleaned and "." in cleaned:
        if cleaned.rfind(",") > cleaned.rfind("."):
            return cleaned.replace(".", "").replace(",", ".")
        return cleaned.replace(",", "")

    if "," in cleaned:
        after_comma = cleaned[cleaned.index(",") + 1 :]
        if cleaned.count(",") == 1 and 1 <= len(after_comma) <= 2 and after_comma.isdigit():
            return cleaned.replace(",", ".")
        return cleaned.replace(",", "")

    if cleaned.count(".") > 1:
        return cleaned.replace(".", "")

    return cleaned


def parse_amount(value: str) -> float | None:
    """
    Parse a currency amount; returns None when the text is not a finite number.
    """

    normalized = normalize_amount_text(value)
    if not normalized:
        return None
    try:
        parsed = Decimal(normalized)
    except (InvalidOperation, ValueError):
        return None
    if not parsed.is_finite():
        return None
    amount = float(parsed)
    return amount if math.isfinite(amount) else None


def is_amount_like(value: str) -> bool:
    """
    True when ``value`` is only digits once currency symbols and separators go.
    """

    return bool(_DIGITS_ONLY.match(_AMOUNT_LIKE_STRIP.sub("", value)))
