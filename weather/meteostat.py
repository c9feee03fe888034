"""
weather/meteostat.py

Maps Meteostat daily rows into WeatherObservation values.

Only the payload mapping lives here; fetching the rows is left to callers.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from analytics.rounding import round_half_up
from weather.models import WeatherObservation

logger = logging.getLogger(__name__)

DEFAULT_MIN_TEMPERATURE = 10.0
DEFAULT_MAX_TEMPERATURE = 20.0
DEFAULT_WIND_SPEED_KMH = 3.0
DEFAULT_PRESSURE_HPA = 1013.0
KMH_PER_MS = 3.6


def _number(row: Mapping[str, Any], key: str) -> float | None:
    value = row.get(key)
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _round_tenth(value: float) -> float:
    return round_half_up(value * 10) / 10


def map_condition(temperature: float, precipitation: float, snow: float) -> str:
    if snow > 0:
        return "Snow"
    if precipitation > 2.5:
        return "Rain"
    if precipitation > 0.5:
        return "Drizzle"
    if temperature > 25:
        return "Clear"
    if temperature < 0:
        return "Snow"
    return "Clouds"


def describe_conditions(temperature: float, precipitation: float, snow: float) -> str:
    if snow > 5:
        return "heavy snowfall"
    if snow > 0:
        return "snow"
    if precipitation > 10:
        return "heavy rain"
    if precipitation > 5:
        return "moderate rain"
    if precipitation > 1:
        return "light rain"
    if precipitation > 0.1:
        return "drizzle"
    if temperature > 30:
        return "very warm and sunny"
    if temperature > 25:
        return "warm and sunny"
    if temperature > 20:
        return "pleasant weather"
    if temperature > 15:
        return "mild weather"
    if temperature > 10:
        return "fresh weather"
    if temperature > 5:
        return "cold weather"
    if temperature < 0:
        return "freezing weather"
    return "cloudy"


def estimate_humidity(temperature: float, precipitation: float) -> float:
    if precipitation > 5:
        return 85.0
    if precipitation > 1:
        return 75.0
    if temperature > 25:
        return 50.0
    if temperature < 5:
        return 80.0
    return 65.0


def parse_meteostat_row(row: Mapping[str, Any]) -> WeatherObservation | None:
    """
    Convert one Meteostat daily row; returns None when the row has no date.

    ``tavg`` falls back to the mean of ``tmin``/``tmax``; ``wspd`` is
    converted from km/h to m/s.
    """

    raw_date = row.get("date")
    if not raw_date:
        return None

    temperature = _number(row, "tavg")
    if temperature is None:
        low = _number(row, "tmin")
        high = _number(row, "tmax")
        temperature = (
            (low if low is not None else DEFAULT_MIN_TEMPERATURE)
            + (high if high is not None else DEFAULT_MAX_TEMPERATURE)
        ) / 2
    precipitation = _number(row, "prcp") or 0.0
    snow = _number(row, "snow") or 0.0
    wind_speed_kmh = _number(row, "wspd")
    pressure = _number(row, "pres")

    return WeatherObservation(
        date=str(raw_date)[:10],
        temperature=_round_tenth(temperature),
        precipitation=_round_tenth(precipitation),
        humidity=estimate_humidity(temperature, precipitation),
        wind_speed=_round_tenth(
            (wind_speed_kmh if wind_speed_kmh is not None else DEFAULT_WIND_SPEED_KMH) / KMH_PER_MS
        ),
        pressure=float(round_half_up(pressure if pressure is not None else DEFAULT_PRESSURE_HPA)),
        weather_main=map_condition(temperature, precipitation, snow),
        weather_description=describe_conditions(temperature, precipitation, snow),
    )


def parse_meteostat_daily(rows: Iterable[Mapping[str, Any]]) -> list[WeatherObservation]:
    observations: list[WeatherObservation] = []
    skipped = 0
    for row in rows:
        observation = parse_meteostat_row(row)
        if observation is None:
            skipped += 1
            continue
        observations.append(observation)
    if skipped:
        logger.warning("Skipped Meteostat rows without a date count=%d", skipped)
    return observations
