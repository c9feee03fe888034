"""
weather/models.py

Weather observations and the correlation results computed from them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

DEFAULT_HUMIDITY = 65.0
DEFAULT_PRESSURE = 1013.0


@dataclass(frozen=True)
class WeatherObservation:
    """
    Daily weather for one calendar day, keyed by ISO date string.

    Units: temperature in Celsius, precipitation in mm, humidity in %,
    wind speed in m/s, pressure in hPa.
    """

    date: str
    temperature: float
    precipitation: float
    humidity: float = DEFAULT_HUMIDITY
    wind_speed: float = 0.0
    pressure: float = DEFAULT_PRESSURE
    weather_main: str = "Clouds"
    weather_description: str = ""

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "WeatherObservation":
        """
        Build an observation from either the camelCase provider shape or
        snake_case keys.
        """

        def pick(*keys: str, default: Any = None) -> Any:
            for key in keys:
                value = payload.get(key)
                if value is not None:
                    return value
            return default

        raw_date = pick("date")
        if raw_date is None:
            raise ValueError("Weather observation is missing 'date'.")
        temperature = pick("temperature")
        if temperature is None:
            raise ValueError(f"Weather observation for {raw_date} is missing 'temperature'.")

        return cls(
            date=str(raw_date)[:10],
            temperature=float(temperature),
            precipitation=float(pick("precipitation", default=0.0)),
            humidity=float(pick("humidity", default=DEFAULT_HUMIDITY)),
            wind_speed=float(pick("windSpeed", "wind_speed", default=0.0)),
            pressure=float(pick("pressure", default=DEFAULT_PRESSURE)),
            weather_main=str(pick("weatherMain", "weather_main", default="Clouds")),
            weather_description=str(pick("weatherDescription", "weather_description", default="")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date,
            "temperature": self.temperature,
            "precipitation": self.precipitation,
            "humidity": self.humidity,
            "wind_speed": self.wind_speed,
            "pressure": self.pressure,
            "weather_main": self.weather_main,
            "weather_description": self.weather_description,
        }


@dataclass(frozen=True)
class JoinedDay:
    """
    One sales record paired with the weather of its date.
    """

    location: str
    revenue: float
    temperature: float
    precipitation: float
    weather_main: str = "Clouds"


class ImpactDirection(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


@dataclass(frozen=True)
class TemperatureCorrelation:
    """
    ``optimal_range`` is the half-open ``[min, max)`` bucket in Celsius.
    """

    correlation: float
    optimal_range: tuple[int, int]
    impact: ImpactDirection


@dataclass(frozen=True)
class PrecipitationCorrelation:
    correlation: float
    average_impact: int
    description: str


@dataclass(frozen=True)
class ConditionImpact:
    condition: str
    average_revenue: int
    revenue_impact: int
    transaction_count: int
    description: str


@dataclass(frozen=True)
class WeatherCorrelation:
    temperature: TemperatureCorrelation
    precipitation: PrecipitationCorrelation
    conditions: tuple[ConditionImpact, ...]
    matched_days: int
    baseline_revenue: float


# ----------------------------------------------------------------------
# Per-location scenario matrix
# ----------------------------------------------------------------------


class TemperatureBand(str, Enum):
    KOUD = "koud"
    MILD = "mild"
    WARM = "warm"


class PrecipitationBand(str, Enum):
    DROOG = "droog"
    LICHT_NAT = "lichtNat"
    NAT = "nat"


class SensitivityLevel(str, Enum):
    LAAG = "laag"
    MIDDEL = "middel"
    HOOG = "hoog"


def scenario_key(temperature: TemperatureBand, precipitation: PrecipitationBand) -> str:
    """
    ``warm`` + ``lichtNat`` -> ``warmLichtNat``.
    """

    value = precipitation.value
    return f"{temperature.value}{value[0].upper()}{value[1:]}"


@dataclass(frozen=True)
class ScenarioStats:
    temperature_band: TemperatureBand
    precipitation_band: PrecipitationBand
    count: int
    average_revenue: float
    total_revenue: float

    @property
    def scenario(self) -> str:
        return scenario_key(self.temperature_band, self.precipitation_band)


@dataclass(frozen=True)
class LocationInsight:
    kind: ImpactDirection
    weather: str
    message: str
    impact: int


@dataclass(frozen=True)
class LocationWeatherProfile:
    location: str
    total_days: int
    baseline_revenue: float
    scenarios: tuple[ScenarioStats, ...]
    sensitivity_score: int
    sensitivity_level: SensitivityLevel
    best_scenario: str
    worst_scenario: str
    insights: tuple[LocationInsight, ...]

    def scenario(self, key: str) -> ScenarioStats:
        for stats in self.scenarios:
            if stats.scenario == key:
                return stats
        raise KeyError(key)


@dataclass(frozen=True)
class OverallSensitivity:
    """
    ``most_sensitive`` and ``least_sensitive`` are None when no location
    qualified for the scenario matrix.
    """

    average_sensitivity: int
    most_sensitive: str | None
    least_sensitive: str | None


@dataclass(frozen=True)
class LocationWeatherAnalysis:
    locations: tuple[LocationWeatherProfile, ...]
    overall: OverallSensitivity
