"""
analytics/revenue_analyzer.py

Aggregates parsed sales records into summary, location, weekday and month
statistics plus narrative insights.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Sequence

from analytics.insights import generate_insights
from analytics.models import AnalysisResult, AnalysisSummary, DayStats, LocationStats, MonthStats
from app.domain.errors import EmptyDatasetError
from app.domain.sales import SalesRecord

logger = logging.getLogger(__name__)

DAY_NAMES: tuple[str, ...] = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)

MONTH_NAMES: tuple[str, ...] = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


class RevenueAnalyzer:
    """
    Stateless revenue aggregation.

    Every call recomputes all statistics from the records passed in;
    duplicate (date, location) rows are summed, not merged.
    """

    def analyze(self, records: Sequence[SalesRecord]) -> AnalysisResult:
        """
        Build the full analysis result for ``records``.

        Raises:
            EmptyDatasetError: when ``records`` is empty.
        """

        if not records:
            raise EmptyDatasetError("No sales records to analyze.")

        total_revenue = sum(record.amount for record in records)
        total_transactions = len(records)
        average_revenue = total_revenue / total_transactions

        locations = self.location_stats(records)
        days = self.day_of_week_stats(records)
        months = self.monthly_stats(records)
        dates = sorted(record.date for record in records)

        summary = AnalysisSummary(
            total_revenue=total_revenue,
            total_transactions=total_transactions,
            average_revenue=average_revenue,
            best_location=locations[0].name,
            worst_location=locations[-1].name,
            start_date=dates[0],
            end_date=dates[-1],
        )
        insights = generate_insights(locations, days, months, total_revenue, total_transactions)

        logger.info(
            "Analyzed revenue records=%d locations=%d months=%d total=%.2f",
            total_transactions,
            len(locations),
            len(months),
            total_revenue,
        )
        return AnalysisResult(
            summary=summary,
            locations=tuple(locations),
            day_of_week=tuple(days),
            monthly=tuple(months),
            insights=tuple(insights),
        )

    @staticmethod
    def location_stats(records: Sequence[SalesRecord]) -> list[LocationStats]:
        grouped: dict[str, list[SalesRecord]] = defaultdict(list)
        for record in records:
            grouped[record.location.strip()].append(record)

        stats: list[LocationStats] = []
        for name, members in grouped.items():
            total = sum(member.amount for member in members)
            # Stable sort: among equal amounts the earliest row is best, the latest worst.
            by_revenue = sorted(members, key=lambda member: member.amount, reverse=True)
            stats.append(
                LocationStats(
                    name=name,
                    total_revenue=total,
                    average_revenue=total / len(members),
                    transaction_count=len(members),
                    best_day=by_revenue[0].date,
                    worst_day=by_revenue[-1].date,
                )
            )
        stats.sort(key=lambda location: location.average_revenue, reverse=True)
        return stats

    @staticmethod
    def day_of_week_stats(records: Sequence[SalesRecord]) -> list[DayStats]:
        grouped: dict[int, list[float]] = defaultdict(list)
        for record in records:
            grouped[record.weekday].append(record.amount)

        stats = [
            DayStats(
                weekday=weekday,
                day_name=DAY_NAMES[weekday],
                total_revenue=sum(amounts),
                average_revenue=sum(amounts) / len(amounts),
                transaction_count=len(amounts),
            )
            for weekday, amounts in grouped.items()
        ]
        stats.sort(key=lambda day: day.average_revenue, reverse=True)
        return stats

    @staticmethod
    def monthly_stats(records: Sequence[SalesRecord]) -> list[MonthStats]:
        grouped: dict[str, list[float]] = defaultdict(list)
        for record in records:
            grouped[f"{record.date.year:04d}-{record.date.month:02d}"].append(record.amount)

        stats: list[MonthStats] = []
        for month_key in sorted(grouped):
            amounts = grouped[month_key]
            year, month = month_key.split("-")
            stats.append(
                MonthStats(
                    month=month_key,
                    month_name=f"{MONTH_NAMES[int(month) - 1]} {year}",
                    total_revenue=sum(amounts),
                    average_revenue=sum(amounts) / len(amounts),
                    transaction_count=len(amounts),
                )
            )
        return stats


def analyze_records(records: Sequence[SalesRecord]) -> AnalysisResult:
    return RevenueAnalyzer().analyze(records)
