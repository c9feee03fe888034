"""
weather/scenarios.py

Per-location 3x3 temperature x precipitation scenario matrix and the
weather sensitivity score derived from it.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Sequence

from analytics.rounding import round_half_up
from weather.models import (
    ImpactDirection,
    JoinedDay,
    LocationInsight,
    LocationWeatherAnalysis,
    LocationWeatherProfile,
    OverallSensitivity,
    PrecipitationBand,
    ScenarioStats,
    SensitivityLevel,
    TemperatureBand,
    scenario_key,
)

MIN_LOCATION_DAYS = 5
MIN_SCENARIO_DAYS = 2
MIN_QUALIFYING_SCENARIOS = 2
MAX_SENSITIVITY = 100

COLD_BELOW = 10.0
MILD_BELOW = 18.0
DRY_BELOW = 1.0
LIGHT_RAIN_BELOW = 5.0

UPLIFT_THRESHOLD = 15
DROP_THRESHOLD = -15
RAIN_IMPACT_THRESHOLD = 20

# Matrix cell order, warm to cold and dry to wet.
SCENARIO_ORDER: tuple[tuple[TemperatureBand, PrecipitationBand], ...] = tuple(
    (temperature, precipitation)
    for temperature in (TemperatureBand.WARM, TemperatureBand.MILD, TemperatureBand.KOUD)
    for precipitation in (PrecipitationBand.DROOG, PrecipitationBand.LICHT_NAT, PrecipitationBand.NAT)
)

SCENARIO_DESCRIPTIONS: dict[str, str] = {
    "warmDroog": "warm and dry weather (>18°C, <1mm)",
    "warmLichtNat": "warm weather with light rain (>18°C, 1-5mm)",
    "warmNat": "warm but wet weather (>18°C, >5mm)",
    "mildDroog": "mild and dry weather (10-18°C, <1mm)",
    "mildLichtNat": "mild weather with light rain (10-18°C, 1-5mm)",
    "mildNat": "mild but wet weather (10-18°C, >5mm)",
    "koudDroog": "cold and dry weather (<10°C, <1mm)",
    "koudLichtNat": "cold weather with light rain (<10°C, 1-5mm)",
    "koudNat": "cold and wet weather (<10°C, >5mm)",
}


def temperature_band(temperature: float) -> TemperatureBand:
    if temperature < COLD_BELOW:
        return TemperatureBand.KOUD
    if temperature < MILD_BELOW:
        return TemperatureBand.MILD
    return TemperatureBand.WARM


def precipitation_band(precipitation: float) -> PrecipitationBand:
    if precipitation < DRY_BELOW:
        return PrecipitationBand.DROOG
    if precipitation < LIGHT_RAIN_BELOW:
        return PrecipitationBand.LICHT_NAT
    return PrecipitationBand.NAT


def sensitivity_level(score: int) -> SensitivityLevel:
    if score < 20:
        return SensitivityLevel.LAAG
    if score < 40:
        return SensitivityLevel.MIDDEL
    return SensitivityLevel.HOOG


def sensitivity_score(best_average: float, worst_average: float, baseline: float) -> int:
    """
    Spread between best and worst scenario as a percentage of the baseline,
    capped at 100 after the division and never negative.
    """

    if baseline <= 0:
        return 0
    raw = (best_average - worst_average) / baseline * 100
    return max(0, round_half_up(min(float(MAX_SENSITIVITY), raw)))


def describe_scenario(key: str) -> str:
    return SCENARIO_DESCRIPTIONS.get(key, key)


def build_scenarios(days: Sequence[JoinedDay]) -> tuple[ScenarioStats, ...]:
    buckets: dict[tuple[TemperatureBand, PrecipitationBand], list[float]] = defaultdict(list)
    for day in days:
        buckets[(temperature_band(day.temperature), precipitation_band(day.precipitation))].append(
            day.revenue
        )

    scenarios: list[ScenarioStats] = []
    for temperature, precipitation in SCENARIO_ORDER:
        revenues = buckets.get((temperature, precipitation), [])
        total = sum(revenues)
        scenarios.append(
            ScenarioStats(
                temperature_band=temperature,
                precipitation_band=precipitation,
                count=len(revenues),
                average_revenue=total / len(revenues) if revenues else 0.0,
                total_revenue=total,
            )
        )
    return tuple(scenarios)


def location_insights(
    scenarios: Sequence[ScenarioStats],
    baseline: float,
    best: ScenarioStats,
    worst: ScenarioStats,
) -> list[LocationInsight]:
    if baseline <= 0:
        return []

    insights: list[LocationInsight] = []
    best_impact = round_half_up((best.average_revenue - baseline) / baseline * 100)
    if best_impact > UPLIFT_THRESHOLD:
        insights.append(
            LocationInsight(
                kind=ImpactDirection.POSITIVE,
                weather=best.scenario,
                message=(
                    f"Definitely go here in {describe_scenario(best.scenario)} "
                    f"(+{best_impact}% revenue)"
                ),
                impact=best_impact,
            )
        )

    worst_impact = round_half_up((worst.average_revenue - baseline) / baseline * 100)
    if worst_impact < DROP_THRESHOLD:
        insights.append(
            LocationInsight(
                kind=ImpactDirection.NEGATIVE,
                weather=worst.scenario,
                message=(
                    f"Avoid this location in {describe_scenario(worst.scenario)} "
                    f"({worst_impact}% revenue)"
                ),
                impact=worst_impact,
            )
        )

    dry = [s.average_revenue for s in scenarios if s.precipitation_band is PrecipitationBand.DROOG and s.count > 0]
    wet = [s.average_revenue for s in scenarios if s.precipitation_band is PrecipitationBand.NAT and s.count > 0]
    if dry and wet:
        dry_average = sum(dry) / len(dry)
        wet_average = sum(wet) / len(wet)
        if dry_average > 0:
            rain_impact = round_half_up((wet_average - dry_average) / dry_average * 100)
            if abs(rain_impact) > RAIN_IMPACT_THRESHOLD:
                if rain_impact > 0:
                    message = f"This location works well in the rain (+{rain_impact}% vs dry weather)"
                    kind = ImpactDirection.POSITIVE
                else:
                    message = f"Rain has a large impact here ({rain_impact}% vs dry weather)"
                    kind = ImpactDirection.NEGATIVE
                insights.append(
                    LocationInsight(kind=kind, weather="rain", message=message, impact=rain_impact)
                )

    return insights


def build_location_profile(location: str, days: Sequence[JoinedDay]) -> LocationWeatherProfile | None:
    """
    Build the scenario matrix for one location.

    Returns None when the location has too few joined days or too few
    scenarios with enough days to compare.
    """

    if len(days) < MIN_LOCATION_DAYS:
        return None

    scenarios = build_scenarios(days)
    qualifying = [stats for stats in scenarios if stats.count >= MIN_SCENARIO_DAYS]
    if len(qualifying) < MIN_QUALIFYING_SCENARIOS:
        return None

    best = qualifying[0]
    worst = qualifying[0]
    for stats in qualifying[1:]:
        if stats.average_revenue > best.average_revenue:
            best = stats
        if stats.average_revenue < worst.average_revenue:
            worst = stats

    baseline = sum(day.revenue for day in days) / len(days)
    score = sensitivity_score(best.average_revenue, worst.average_revenue, baseline)
    return LocationWeatherProfile(
        location=location,
        total_days=len(days),
        baseline_revenue=baseline,
        scenarios=scenarios,
        sensitivity_score=score,
        sensitivity_level=sensitivity_level(score),
        best_scenario=best.scenario,
        worst_scenario=worst.scenario,
        insights=tuple(location_insights(scenarios, baseline, best, worst)),
    )


def overall_sensitivity(profiles: Sequence[LocationWeatherProfile]) -> OverallSensitivity:
    if not profiles:
        return OverallSensitivity(average_sensitivity=0, most_sensitive=None, least_sensitive=None)

    most = profiles[0]
    least = profiles[0]
    for profile in profiles[1:]:
        if profile.sensitivity_score > most.sensitivity_score:
            most = profile
        if profile.sensitivity_score < least.sensitivity_score:
            least = profile

    average = round_half_up(sum(profile.sensitivity_score for profile in profiles) / len(profiles))
    return OverallSensitivity(
        average_sensitivity=average,
        most_sensitive=most.location,
        least_sensitive=least.location,
    )


def analyze_location_matrix(days: Sequence[JoinedDay]) -> LocationWeatherAnalysis:
    grouped: dict[str, list[JoinedDay]] = defaultdict(list)
    for day in days:
        grouped[day.location].append(day)

    profiles = [
        profile
        for profile in (build_location_profile(location, members) for location, members in grouped.items())
        if profile is not None
    ]
    return LocationWeatherAnalysis(locations=tuple(profiles), overall=overall_sensitivity(profiles))


__all__ = [
    "JoinedDay",
    "SCENARIO_ORDER",
    "analyze_location_matrix",
    "build_location_profile",
    "overall_sensitivity",
    "precipitation_band",
    "scenario_key",
    "sensitivity_level",
    "sensitivity_score",
    "temperature_band",
]
