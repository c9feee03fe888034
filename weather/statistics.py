"""
weather/statistics.py

Small numeric helpers for the correlation engine.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from analytics.rounding import round_half_up

MIN_CORRELATION_POINTS = 2


def pearson(x: Sequence[float], y: Sequence[float]) -> float:
    """
    Pearson correlation coefficient of two equally long series.

    Returns 0.0 for fewer than two points, mismatched lengths, or a series
    with zero variance.
    """

    if len(x) != len(y) or len(x) < MIN_CORRELATION_POINTS:
        return 0.0

    x_values = np.asarray(x, dtype=float)
    y_values = np.asarray(y, dtype=float)
    x_centered = x_values - x_values.mean()
    y_centered = y_values - y_values.mean()

    denominator = float(np.sqrt(np.sum(x_centered**2) * np.sum(y_centered**2)))
    if denominator == 0.0:
        return 0.0
    coefficient = float(np.sum(x_centered * y_centered)) / denominator
    return float(np.clip(coefficient, -1.0, 1.0))


def mean(values: Sequence[float], default: float = 0.0) -> float:
    if not values:
        return default
    return float(np.mean(np.asarray(values, dtype=float)))


def round_to_hundredths(value: float) -> float:
    return round_half_up(value * 100) / 100


__all__ = ["mean", "pearson", "round_half_up", "round_to_hundredths"]
