"""
tests/test_weather_providers.py

Pytest unit tests for observation providers, the observation cache and the
Meteostat row mapping. No test touches the network.
"""

from __future__ import annotations

from datetime import date

import pytest

from factories import make_record
from weather.cache import ObservationCache
from weather.meteostat import map_condition, parse_meteostat_daily, parse_meteostat_row
from weather.models import WeatherObservation
from weather.providers import (
    AMSTERDAM_CLIMATE,
    CachedWeatherProvider,
    ClimateNormalsProvider,
    StaticWeatherProvider,
    WeatherLocation,
    WeatherProvider,
    collect_observations,
)

AMSTERDAM = WeatherLocation(name="Amsterdam", latitude=52.3676, longitude=4.9041)


class RecordingProvider(WeatherProvider):
    """Returns a fixed observation per requested date and records each call."""

    name = "recording"

    def __init__(self) -> None:
        self.calls: list[list[str]] = []

    def fetch_observations(self, dates, location):
        self.calls.append(list(dates))
        return [WeatherObservation(date=iso_date, temperature=15, precipitation=0) for iso_date in dates]


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def _observation(iso_date: str, temperature: float = 15) -> WeatherObservation:
    return WeatherObservation(date=iso_date, temperature=temperature, precipitation=0)


# ---------------------------------------------------------------------------
# Observations
# ---------------------------------------------------------------------------


class TestWeatherObservation:
    def test_from_camel_case_mapping(self) -> None:
        observation = WeatherObservation.from_mapping(
            {
                "date": "2024-06-01T00:00:00",
                "temperature": 20,
                "precipitation": 1.5,
                "windSpeed": 3,
                "weatherMain": "Rain",
                "weatherDescription": "light rain",
            }
        )
        assert observation.date == "2024-06-01"
        assert observation.wind_speed == 3.0
        assert observation.weather_main == "Rain"
        assert observation.humidity == 65.0

    def test_from_snake_case_mapping(self) -> None:
        observation = WeatherObservation.from_mapping(
            {"date": "2024-06-01", "temperature": 20, "wind_speed": 4, "weather_main": "Clear"}
        )
        assert observation.wind_speed == 4.0
        assert observation.to_dict()["weather_main"] == "Clear"

    def test_missing_temperature_raises(self) -> None:
        with pytest.raises(ValueError):
            WeatherObservation.from_mapping({"date": "2024-06-01"})


# ---------------------------------------------------------------------------
# Providers
# ---------------------------------------------------------------------------


class TestCollectObservations:
    def test_one_bulk_call_with_sorted_unique_dates(self) -> None:
        provider = RecordingProvider()
        records = [
            make_record("2024-06-02", "Dam Square", 400),
            make_record("2024-06-01", "Museumplein", 300),
            make_record("2024-06-02", "Museumplein", 350),
        ]

        observations = collect_observations(records, provider, AMSTERDAM)

        assert provider.calls == [["2024-06-01", "2024-06-02"]]
        assert len(observations) == 2

    def test_no_records_no_call(self) -> None:
        provider = RecordingProvider()
        assert collect_observations([], provider, AMSTERDAM) == []
        assert provider.calls == []


class TestStaticProvider:
    def test_returns_only_known_dates(self) -> None:
        provider = StaticWeatherProvider([_observation("2024-06-01"), _observation("2024-06-03")])
        result = provider.fetch_observations(["2024-06-03", "2024-06-02", "2024-06-01"], AMSTERDAM)
        assert [observation.date for observation in result] == ["2024-06-03", "2024-06-01"]


class TestClimateNormalsProvider:
    def test_same_date_same_observation(self) -> None:
        provider = ClimateNormalsProvider()
        assert provider.observation_for(date(2024, 1, 15)) == provider.observation_for(date(2024, 1, 15))

    def test_values_stay_within_monthly_normals(self) -> None:
        provider = ClimateNormalsProvider()
        january = AMSTERDAM_CLIMATE[1]
        for day in range(1, 32):
            observation = provider.observation_for(date(2024, 1, day))
            assert abs(observation.temperature - january.average_temperature) <= january.temperature_range / 2 + 0.05
            assert observation.precipitation >= 0
            assert 20 <= observation.humidity <= 100
            assert 950 <= observation.pressure <= 1050
            assert observation.weather_main in {"Clear", "Clouds", "Drizzle", "Rain"}

    def test_fetch_covers_every_requested_date(self) -> None:
        result = ClimateNormalsProvider().fetch_observations(["2024-06-01", "2024-06-02"], AMSTERDAM)
        assert [observation.date for observation in result] == ["2024-06-01", "2024-06-02"]


class TestCachedProvider:
    def test_repeated_dates_are_served_from_cache(self) -> None:
        inner = RecordingProvider()
        provider = CachedWeatherProvider(inner, ObservationCache(max_entries=10, ttl_seconds=60))

        provider.fetch_observations(["2024-06-01", "2024-06-02"], AMSTERDAM)
        provider.fetch_observations(["2024-06-01", "2024-06-02"], AMSTERDAM)
        result = provider.fetch_observations(["2024-06-02", "2024-06-03"], AMSTERDAM)

        assert inner.calls == [["2024-06-01", "2024-06-02"], ["2024-06-03"]]
        assert [observation.date for observation in result] == ["2024-06-02", "2024-06-03"]
        assert len(provider.cache) == 3
        assert provider.name == "cached-recording"

    def test_cache_is_keyed_by_location(self) -> None:
        inner = RecordingProvider()
        provider = CachedWeatherProvider(inner, ObservationCache(max_entries=10, ttl_seconds=60))
        utrecht = WeatherLocation(name="Utrecht", latitude=52.0907, longitude=5.1214)

        provider.fetch_observations(["2024-06-01"], AMSTERDAM)
        provider.fetch_observations(["2024-06-01"], utrecht)

        assert len(inner.calls) == 2


# ---------------------------------------------------------------------------
# Cache
# ---------------------------------------------------------------------------


class TestObservationCache:
    def test_least_recently_used_is_evicted(self) -> None:
        cache = ObservationCache(max_entries=2, ttl_seconds=60)
        cache.put(("a", "2024-06-01"), _observation("2024-06-01"))
        cache.put(("a", "2024-06-02"), _observation("2024-06-02"))
        assert cache.get(("a", "2024-06-01")) is not None

        cache.put(("a", "2024-06-03"), _observation("2024-06-03"))

        assert ("a", "2024-06-02") not in cache
        assert ("a", "2024-06-01") in cache
        assert len(cache) == 2

    def test_entries_expire(self) -> None:
        clock = FakeClock()
        cache = ObservationCache(max_entries=10, ttl_seconds=10, clock=clock)
        cache.put(("a", "2024-06-01"), _observation("2024-06-01"))

        clock.now = 9.9
        assert cache.get(("a", "2024-06-01")) is not None
        clock.now = 10.0
        assert cache.get(("a", "2024-06-01")) is None
        assert len(cache) == 0

    def test_evict_expired(self) -> None:
        clock = FakeClock()
        cache = ObservationCache(max_entries=10, ttl_seconds=10, clock=clock)
        cache.put(("a", "2024-06-01"), _observation("2024-06-01"))
        clock.now = 5
        cache.put(("a", "2024-06-02"), _observation("2024-06-02"))
        clock.now = 12

        assert cache.evict_expired() == 1
        assert ("a", "2024-06-02") in cache

    def test_clear(self) -> None:
        cache = ObservationCache(max_entries=10, ttl_seconds=10)
        cache.put(("a", "2024-06-01"), _observation("2024-06-01"))
        cache.clear()
        assert len(cache) == 0


# ---------------------------------------------------------------------------
# Meteostat
# ---------------------------------------------------------------------------


class TestMeteostat:
    def test_row_mapping(self) -> None:
        observation = parse_meteostat_row(
            {"date": "2024-06-01", "tavg": None, "tmin": 10, "tmax": 20, "prcp": 3, "snow": 0, "wspd": 18, "pres": 1010.4}
        )
        assert observation is not None
        assert observation.temperature == 15.0
        assert observation.precipitation == 3.0
        assert observation.weather_main == "Rain"
        assert observation.weather_description == "light rain"
        assert observation.humidity == 75.0
        assert observation.wind_speed == 5.0
        assert observation.pressure == 1010.0

    def test_snow(self) -> None:
        observation = parse_meteostat_row({"date": "2024-01-10", "tavg": -1, "snow": 2})
        assert observation.weather_main == "Snow"
        assert observation.weather_description == "snow"

    def test_freezing_without_precipitation_maps_to_snow(self) -> None:
        assert map_condition(-2, 0, 0) == "Snow"
        assert map_condition(27, 0, 0) == "Clear"
        assert map_condition(15, 1, 0) == "Drizzle"

    def test_rows_without_date_are_skipped(self) -> None:
        observations = parse_meteostat_daily([{"tavg": 12}, {"date": "2024-06-01", "tavg": 12}])
        assert [observation.date for observation in observations] == ["2024-06-01"]
