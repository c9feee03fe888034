"""
analytics/insights.py

Rule-based narrative insights over aggregated revenue statistics.

Each rule inspects the aggregates and contributes at most one sentence;
rule order is fixed so output is deterministic for a given dataset.
"""

from __future__ import annotations

from typing import Sequence

from analytics.models import DayStats, LocationStats, MonthStats
from analytics.rounding import round_half_up

LOCATION_GAP_PERCENT = 10.0
CONSISTENT_MIN_TRANSACTIONS = 3
CONSISTENT_FACTOR = 1.1
WEEKDAY_GAP_FACTOR = 1.15
WEEKEND_GAP_FACTOR = 1.1
MONTH_GAP_FACTOR = 1.2
HIGH_TRANSACTION_VALUE = 400.0
LOW_TRANSACTION_VALUE = 250.0

FALLBACK_INSIGHT = "Your data shows interesting patterns. More data will yield more specific insights."


def _euros(value: float) -> str:
    return f"€{round_half_up(value)}"


def location_gap_insight(locations: Sequence[LocationStats]) -> str | None:
    if len(locations) < 2:
        return None
    best, worst = locations[0], locations[-1]
    if best.average_revenue <= 0 or worst.average_revenue <= 0:
        return None
    difference = (best.average_revenue - worst.average_revenue) / worst.average_revenue * 100
    if difference <= LOCATION_GAP_PERCENT:
        return None
    return (
        f"{best.name} performs {round_half_up(difference)}% better than {worst.name} "
        f"({_euros(best.average_revenue)} vs {_euros(worst.average_revenue)} on average)."
    )


def consistent_performer_insight(
    locations: Sequence[LocationStats],
    global_average: float,
) -> str | None:
    if len(locations) < 2:
        return None
    for location in locations:
        if (
            location.transaction_count >= CONSISTENT_MIN_TRANSACTIONS
            and location.average_revenue > global_average * CONSISTENT_FACTOR
        ):
            return (
                f"{location.name} is a consistent top performer with "
                f"{location.transaction_count} sales days and above-average revenue."
            )
    return None


def weekday_gap_insight(days: Sequence[DayStats]) -> str | None:
    if len(days) < 2:
        return None
    best, worst = days[0], days[-1]
    if best.average_revenue <= worst.average_revenue * WEEKDAY_GAP_FACTOR:
        return None
    return (
        f"{best.day_name} is your best day ({_euros(best.average_revenue)} on average), "
        f"while {worst.day_name} brings in the least ({_euros(worst.average_revenue)} on average)."
    )


def weekend_insight(days: Sequence[DayStats]) -> str | None:
    """
    Compare the mean of weekend-day averages against weekday-day averages.
    """

    if len(days) < 2:
        return None
    weekend = [day.average_revenue for day in days if day.is_weekend]
    weekdays = [day.average_revenue for day in days if not day.is_weekend]
    if not weekend or not weekdays:
        return None

    weekend_average = sum(weekend) / len(weekend)
    weekday_average = sum(weekdays) / len(weekdays)
    if weekend_average > weekday_average * WEEKEND_GAP_FACTOR and weekday_average > 0:
        gap = (weekend_average - weekday_average) / weekday_average * 100
        return f"Weekends are {round_half_up(gap)}% more profitable than weekdays."
    if weekday_average > weekend_average * WEEKEND_GAP_FACTOR and weekend_average > 0:
        gap = (weekday_average - weekend_average) / weekend_average * 100
        return f"Weekdays are {round_half_up(gap)}% more profitable than weekends."
    return None


def month_gap_insight(months: Sequence[MonthStats]) -> str | None:
    if len(months) < 2:
        return None
    ranked = sorted(months, key=lambda month: month.average_revenue, reverse=True)
    best, worst = ranked[0], ranked[-1]
    if best.average_revenue <= worst.average_revenue * MONTH_GAP_FACTOR:
        return None
    return (
        f"{best.month_name} was your best month ({_euros(best.total_revenue)} total), "
        f"while {worst.month_name} scored lowest."
    )


def transaction_value_insight(average_transaction: float) -> str | None:
    if average_transaction > HIGH_TRANSACTION_VALUE:
        return (
            f"Your average transaction value of {_euros(average_transaction)} "
            "is above average for food trucks."
        )
    if average_transaction < LOW_TRANSACTION_VALUE:
        return (
            "There is room for improvement: your average transaction value is "
            f"{_euros(average_transaction)}. Consider optimising your menu or prices."
        )
    return None


def generate_insights(
    locations: Sequence[LocationStats],
    days: Sequence[DayStats],
    months: Sequence[MonthStats],
    total_revenue: float,
    total_transactions: int,
) -> list[str]:
    """
    Run every rule in order; fall back to a generic sentence when none fire.

    ``locations`` and ``days`` must be sorted by average revenue descending.
    """

    global_average = total_revenue / total_transactions if total_transactions else 0.0
    candidates = (
        location_gap_insight(locations),
        consistent_performer_insight(locations, global_average),
        weekday_gap_insight(days),
        weekend_insight(days),
        month_gap_insight(months),
        transaction_value_insight(global_average),
    )
    insights = [insight for insight in candidates if insight is not None]
    return insights or [FALLBACK_INSIGHT]
