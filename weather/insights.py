"""
weather/insights.py

Narrative sentences summarising a WeatherCorrelation.
"""

from __future__ import annotations

from weather.models import ImpactDirection, WeatherCorrelation

PRECIPITATION_NOTE_THRESHOLD = 25
CONDITION_NOTE_THRESHOLD = 25
CONDITION_SPREAD_THRESHOLD = 50
TOP_CONDITIONS = 3

FALLBACK_WEATHER_INSIGHT = "No significant weather influence found in your data."


def generate_weather_insights(correlation: WeatherCorrelation) -> list[str]:
    insights: list[str] = []

    temperature = correlation.temperature
    if temperature.impact is ImpactDirection.POSITIVE:
        insights.append(
            "Warmer weather has a positive impact on your revenue "
            f"(correlation: {temperature.correlation})"
        )
        low, high = temperature.optimal_range
        insights.append(f"Optimal temperature for sales: {low}°C - {high}°C")
    elif temperature.impact is ImpactDirection.NEGATIVE:
        insights.append(
            "Warmer weather has a negative impact on your revenue "
            f"(correlation: {temperature.correlation})"
        )

    if abs(correlation.precipitation.average_impact) > PRECIPITATION_NOTE_THRESHOLD:
        insights.append(correlation.precipitation.description)

    for condition in correlation.conditions[:TOP_CONDITIONS]:
        if abs(condition.revenue_impact) > CONDITION_NOTE_THRESHOLD:
            insights.append(condition.description)

    if correlation.conditions:
        spread = abs(correlation.conditions[0].revenue_impact - correlation.conditions[-1].revenue_impact)
        if spread > CONDITION_SPREAD_THRESHOLD:
            insights.append(
                "Weather conditions have a significant impact: "
                f"€{spread} difference between the best and worst weather"
            )

    return insights or [FALLBACK_WEATHER_INSIGHT]
