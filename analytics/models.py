"""
analytics/models.py

Aggregate statistics produced by the revenue analyzer.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class LocationStats:
    name: str
    total_revenue: float
    average_revenue: float
    transaction_count: int
    best_day: date
    worst_day: date


@dataclass(frozen=True)
class DayStats:
    """
    Revenue per weekday; ``weekday`` is 0 = Sunday ... 6 = Saturday.
    """

    weekday: int
    day_name: str
    total_revenue: float
    average_revenue: float
    transaction_count: int

    @property
    def is_weekend(self) -> bool:
        return self.weekday in (0, 6)


@dataclass(frozen=True)
class MonthStats:
    """
    Revenue per calendar month; ``month`` is a ``YYYY-MM`` key.
    """

    month: str
    month_name: str
    total_revenue: float
    average_revenue: float
    transaction_count: int


@dataclass(frozen=True)
class AnalysisSummary:
    total_revenue: float
    total_transactions: int
    average_revenue: float
    best_location: str
    worst_location: str
    start_date: date
    end_date: date


@dataclass(frozen=True)
class AnalysisResult:
    summary: AnalysisSummary
    locations: tuple[LocationStats, ...]
    day_of_week: tuple[DayStats, ...]
    monthly: tuple[MonthStats, ...]
    insights: tuple[str, ...]
