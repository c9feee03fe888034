"""
weather package marker.
"""

from weather.cache import ObservationCache
from weather.correlation import WeatherCorrelationEngine, join_observations
from weather.insights import generate_weather_insights
from weather.meteostat import parse_meteostat_daily
from weather.models import LocationWeatherAnalysis, WeatherCorrelation, WeatherObservation
from weather.providers import (
    CachedWeatherProvider,
    ClimateNormalsProvider,
    StaticWeatherProvider,
    WeatherLocation,
    WeatherProvider,
    collect_observations,
)

__all__ = [
    "CachedWeatherProvider",
    "ClimateNormalsProvider",
    "LocationWeatherAnalysis",
    "ObservationCache",
    "StaticWeatherProvider",
    "WeatherCorrelation",
    "WeatherCorrelationEngine",
    "WeatherLocation",
    "WeatherObservation",
    "WeatherProvider",
    "collect_observations",
    "generate_weather_insights",
    "join_observations",
    "parse_meteostat_daily",
]
