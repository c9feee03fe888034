"""
weather/providers.py

Observation sources the correlation engine can be fed from.

Providers only hand back observations; they never compute correlations.
No provider here talks to the network.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Sequence

from analytics.rounding import round_half_up
from app.config import get_weather_settings
from app.domain.sales import SalesRecord
from weather.cache import ObservationCache
from weather.models import WeatherObservation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WeatherLocation:
    name: str
    latitude: float
    longitude: float

    @property
    def cache_key(self) -> str:
        return f"{self.latitude:.4f},{self.longitude:.4f}"


def default_location() -> WeatherLocation:
    settings = get_weather_settings()
    return WeatherLocation(
        name="Amsterdam",
        latitude=settings.default_latitude,
        longitude=settings.default_longitude,
    )


class WeatherProvider(ABC):
    """
    Narrow fetch contract used by the analysis pipeline.
    """

    name: str = "weather"

    @abstractmethod
    def fetch_observations(
        self,
        dates: Sequence[str],
        location: WeatherLocation,
    ) -> list[WeatherObservation]:
        """
        Return observations for the requested ISO dates.

        Dates without data are simply absent from the result.
        """


def collect_observations(
    records: Sequence[SalesRecord],
    provider: WeatherProvider,
    location: WeatherLocation | None = None,
) -> list[WeatherObservation]:
    """
    Fetch observations for every distinct sales date in one bulk call.
    """

    dates = sorted({record.iso_date for record in records})
    if not dates:
        return []
    target = location or default_location()
    observations = provider.fetch_observations(dates, target)
    logger.info(
        "Collected weather observations provider=%s requested=%d received=%d location=%s",
        provider.name,
        len(dates),
        len(observations),
        target.name,
    )
    return observations


class StaticWeatherProvider(WeatherProvider):
    """
    Serves a fixed list of observations, e.g. supplied alongside an upload.
    """

    name = "static"

    def __init__(self, observations: Iterable[WeatherObservation]) -> None:
        self._by_date = {observation.date: observation for observation in observations}

    def fetch_observations(
        self,
        dates: Sequence[str],
        location: WeatherLocation,
    ) -> list[WeatherObservation]:
        return [self._by_date[iso_date] for iso_date in dates if iso_date in self._by_date]


@dataclass(frozen=True)
class MonthlyClimate:
    average_temperature: float
    temperature_range: float
    rain_days: int
    average_rain: float


# 30-year Amsterdam monthly normals.
AMSTERDAM_CLIMATE: dict[int, MonthlyClimate] = {
    1: MonthlyClimate(4.2, 6, 17, 62),
    2: MonthlyClimate(4.8, 6, 13, 43),
    3: MonthlyClimate(7.8, 7, 14, 59),
    4: MonthlyClimate(11.0, 8, 13, 41),
    5: MonthlyClimate(15.0, 8, 13, 48),
    6: MonthlyClimate(17.9, 7, 14, 68),
    7: MonthlyClimate(19.8, 6, 14, 75),
    8: MonthlyClimate(19.6, 6, 14, 71),
    9: MonthlyClimate(16.5, 7, 15, 67),
    10: MonthlyClimate(12.3, 6, 17, 72),
    11: MonthlyClimate(7.6, 5, 18, 81),
    12: MonthlyClimate(4.9, 5, 17, 74),
}


def _seeded_random(seed: int) -> float:
    return ((seed * 9301 + 49297) % 233280) / 233280


def _round_tenth(value: float) -> float:
    return round_half_up(value * 10) / 10


class ClimateNormalsProvider(WeatherProvider):
    """
    Deterministic observations derived from monthly climate normals.

    The same date always yields the same observation, so results are
    reproducible without any live weather source.
    """

    name = "climate-normals"

    def __init__(self, climate: dict[int, MonthlyClimate] | None = None) -> None:
        self._climate = climate or AMSTERDAM_CLIMATE

    def fetch_observations(
        self,
        dates: Sequence[str],
        location: WeatherLocation,
    ) -> list[WeatherObservation]:
        return [self.observation_for(date.fromisoformat(iso_date)) for iso_date in dates]

    def observation_for(self, day: date) -> WeatherObservation:
        climate = self._climate[day.month]
        seed = day.year * 10000 + day.month * 100 + day.day

        variation = (_seeded_random(seed) - 0.5) * climate.temperature_range
        temperature = _round_tenth(climate.average_temperature + variation)

        rain_probability = climate.rain_days / 30
        is_rainy = _seeded_random(seed + 1) < rain_probability
        precipitation = (
            _round_tenth(_seeded_random(seed + 2) * climate.average_rain / 100) if is_rainy else 0.0
        )

        sky = _seeded_random(seed + 3)
        if precipitation > 0:
            if precipitation < 0.5:
                weather_main, description = "Drizzle", "light drizzle"
            elif precipitation < 2.5:
                weather_main, description = "Rain", "light rain"
            else:
                weather_main, description = "Rain", "moderate rain"
        elif temperature < 0:
            weather_main, description = "Clouds", "overcast clouds"
        elif temperature > 25 or sky < 0.3:
            weather_main, description = "Clear", "clear sky"
        elif sky < 0.6:
            weather_main, description = "Clouds", "few clouds"
        else:
            weather_main, description = "Clouds", "scattered clouds"

        humidity = round_half_up(60 + (_seeded_random(seed + 4) - 0.5) * 40)
        wind_speed = _round_tenth(_seeded_random(seed + 5) * 12)
        pressure = round_half_up(1013 + (_seeded_random(seed + 6) - 0.5) * 50)

        return WeatherObservation(
            date=day.isoformat(),
            temperature=temperature,
            precipitation=precipitation,
            humidity=float(max(20, min(100, humidity))),
            wind_speed=wind_speed,
            pressure=float(max(950, min(1050, pressure))),
            weather_main=weather_main,
            weather_description=description,
        )


class CachedWeatherProvider(WeatherProvider):
    """
    Wraps another provider and serves repeated dates from an ObservationCache.
    """

    def __init__(self, inner: WeatherProvider, cache: ObservationCache | None = None) -> None:
        self._inner = inner
        if cache is None:
            settings = get_weather_settings()
            cache = ObservationCache(
                max_entries=settings.cache_max_entries,
                ttl_seconds=settings.cache_ttl_seconds,
            )
        self._cache = cache
        self.name = f"cached-{inner.name}"

    @property
    def cache(self) -> ObservationCache:
        return self._cache

    def fetch_observations(
        self,
        dates: Sequence[str],
        location: WeatherLocation,
    ) -> list[WeatherObservation]:
        found: dict[str, WeatherObservation] = {}
        missing: list[str] = []
        for iso_date in dates:
            cached = self._cache.get((location.cache_key, iso_date))
            if cached is None:
                missing.append(iso_date)
            else:
                found[iso_date] = cached

        if missing:
            for observation in self._inner.fetch_observations(missing, location):
                self._cache.put((location.cache_key, observation.date), observation)
                found[observation.date] = observation

        logger.debug(
            "Weather cache lookup hits=%d misses=%d location=%s",
            len(dates) - len(missing),
            len(missing),
            location.name,
        )
        return [found[iso_date] for iso_date in dates if iso_date in found]
