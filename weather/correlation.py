"""
weather/correlation.py

Pure computation joining sales records with daily weather observations.

The engine performs no I/O; observations are supplied by the caller
(see ``weather.providers``).
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Iterable, Sequence

from analytics.rounding import round_half_up
from app.domain.errors import NoMatchingWeatherDataError
from app.domain.sales import SalesRecord
from weather.models import (
    ConditionImpact,
    ImpactDirection,
    JoinedDay,
    LocationWeatherAnalysis,
    PrecipitationCorrelation,
    TemperatureCorrelation,
    WeatherCorrelation,
    WeatherObservation,
)
from weather.scenarios import analyze_location_matrix
from weather.statistics import mean, pearson, round_to_hundredths

logger = logging.getLogger(__name__)

CORRELATION_THRESHOLD = 0.3
PRECIPITATION_DESCRIPTION_THRESHOLD = 25
CONDITION_DESCRIPTION_THRESHOLD = 25
MIN_CONDITION_DAYS = 2

# Half-open [min, max) buckets in Celsius, checked in this order.
TEMPERATURE_BUCKETS: tuple[tuple[int, int], ...] = tuple(
    (low, low + 5) for low in range(-5, 30, 5)
)


def join_observations(
    records: Sequence[SalesRecord],
    observations: Iterable[WeatherObservation],
) -> list[JoinedDay]:
    """
    Pair every record with the observation of its ISO date.

    Records without an observation are dropped; a later observation for the
    same date replaces an earlier one.

    Raises:
        NoMatchingWeatherDataError: when no record date has an observation.
    """

    by_date = {observation.date: observation for observation in observations}
    joined = [
        JoinedDay(
            location=record.location.strip(),
            revenue=record.amount,
            temperature=by_date[record.iso_date].temperature,
            precipitation=by_date[record.iso_date].precipitation,
            weather_main=by_date[record.iso_date].weather_main,
        )
        for record in records
        if record.iso_date in by_date
    ]
    if not joined:
        raise NoMatchingWeatherDataError("No matching weather data found for sales dates.")
    return joined


class WeatherCorrelationEngine:
    """
    Correlates revenue with temperature, precipitation and conditions.
    """

    def correlate(
        self,
        records: Sequence[SalesRecord],
        observations: Iterable[WeatherObservation],
    ) -> WeatherCorrelation:
        """
        Raises:
            NoMatchingWeatherDataError: when no record date has an observation.
        """

        joined = join_observations(records, observations)
        baseline = mean([day.revenue for day in joined])

        correlation = WeatherCorrelation(
            temperature=self.temperature_correlation(joined),
            precipitation=self.precipitation_correlation(joined, baseline),
            conditions=tuple(self.condition_impacts(joined, baseline)),
            matched_days=len(joined),
            baseline_revenue=baseline,
        )
        logger.info(
            "Correlated weather matched=%d of=%d temperature_r=%.2f conditions=%d",
            len(joined),
            len(records),
            correlation.temperature.correlation,
            len(correlation.conditions),
        )
        return correlation

    def analyze_locations(
        self,
        records: Sequence[SalesRecord],
        observations: Iterable[WeatherObservation],
    ) -> LocationWeatherAnalysis:
        """
        Build the per-location scenario matrix.

        Raises:
            NoMatchingWeatherDataError: when no record date has an observation.
        """

        analysis = analyze_location_matrix(join_observations(records, observations))
        logger.info(
            "Analyzed location weather sensitivity locations=%d average=%d",
            len(analysis.locations),
            analysis.overall.average_sensitivity,
        )
        return analysis

    # ------------------------------------------------------------------
    # Components
    # ------------------------------------------------------------------

    @staticmethod
    def temperature_correlation(joined: Sequence[JoinedDay]) -> TemperatureCorrelation:
        coefficient = pearson(
            [day.temperature for day in joined],
            [day.revenue for day in joined],
        )

        best_range = TEMPERATURE_BUCKETS[0]
        best_revenue = 0.0
        for low, high in TEMPERATURE_BUCKETS:
            bucket = [day.revenue for day in joined if low <= day.temperature < high]
            if not bucket:
                continue
            bucket_average = sum(bucket) / len(bucket)
            if bucket_average > best_revenue:
                best_revenue = bucket_average
                best_range = (low, high)

        if coefficient > CORRELATION_THRESHOLD:
            impact = ImpactDirection.POSITIVE
        elif coefficient < -CORRELATION_THRESHOLD:
            impact = ImpactDirection.NEGATIVE
        else:
            impact = ImpactDirection.NEUTRAL

        return TemperatureCorrelation(
            correlation=round_to_hundredths(coefficient),
            optimal_range=best_range,
            impact=impact,
        )

    @staticmethod
    def precipitation_correlation(joined: Sequence[JoinedDay], baseline: float) -> PrecipitationCorrelation:
        rainy = [day.revenue for day in joined if day.precipitation > 0]
        dry = [day.revenue for day in joined if day.precipitation == 0]
        if not rainy:
            return PrecipitationCorrelation(
                correlation=0.0,
                average_impact=0,
                description="No rain data available",
            )

        impact = mean(rainy) - mean(dry, default=baseline)
        relative = impact / baseline if baseline else 0.0
        if impact < -PRECIPITATION_DESCRIPTION_THRESHOLD:
            description = f"Rain lowers revenue by €{abs(round_half_up(impact))} on average"
        elif impact > PRECIPITATION_DESCRIPTION_THRESHOLD:
            description = f"Rain raises revenue by €{round_half_up(impact)} on average"
        else:
            description = "Rain has minimal impact on revenue"

        return PrecipitationCorrelation(
            correlation=round_to_hundredths(relative),
            average_impact=round_half_up(impact),
            description=description,
        )

    @staticmethod
    def condition_impacts(joined: Sequence[JoinedDay], baseline: float) -> list[ConditionImpact]:
        grouped: dict[str, list[float]] = defaultdict(list)
        for day in joined:
            grouped[day.weather_main].append(day.revenue)

        impacts: list[ConditionImpact] = []
        for condition, revenues in grouped.items():
            if len(revenues) < MIN_CONDITION_DAYS:
                continue
            average = sum(revenues) / len(revenues)
            delta = average - baseline
            impacts.append(
                ConditionImpact(
                    condition=condition,
                    average_revenue=round_half_up(average),
                    revenue_impact=round_half_up(delta),
                    transaction_count=len(revenues),
                    description=describe_condition(condition, delta),
                )
            )
        impacts.sort(key=lambda impact: impact.revenue_impact, reverse=True)
        return impacts


def describe_condition(condition: str, impact: float) -> str:
    magnitude = round_half_up(abs(impact))
    if magnitude < CONDITION_DESCRIPTION_THRESHOLD:
        return f"{condition} has a neutral impact on revenue"
    direction = "raises" if impact > 0 else "lowers"
    return f"{condition} {direction} revenue by €{magnitude} on average"
