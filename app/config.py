"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

_PROJECT_ROOT = Path(__file__).resolve().parents[1]


def load_env_files() -> None:
    """
    Load simple KEY=VALUE pairs from `.env` and `.env.local` (if present).
    Existing process environment variables are not overwritten.
    """

    for filename in (".env", ".env.local"):
        env_path = _PROJECT_ROOT / filename
        if not env_path.exists():
            continue

        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().strip('"').strip("'")
            if key and key not in os.environ:
                os.environ[key] = value


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    """
    Read a float from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


@dataclass(frozen=True)
class AnalysisSettings:
    """
    Thresholds for dataset validation and parse error reporting.
    """

    min_recommended_rows: int = 10
    min_valid_rows: int = 5
    weekday_skew_percent: float = 30.0
    outlier_high_factor: float = 3.0
    outlier_low_factor: float = 0.2
    log_parse_errors: bool = True
    max_logged_parse_errors: int = 50


@dataclass(frozen=True)
class UploadSettings:
    """
    Limits applied to raw uploads before they reach the parser.
    """

    max_upload_bytes: int = 5 * 1024 * 1024


@dataclass(frozen=True)
class WeatherSettings:
    """
    Weather observation lookup settings.

    Coordinates default to central Amsterdam; every pitch location is
    resolved against the same point.
    """

    enabled: bool = True
    default_latitude: float = 52.3676
    default_longitude: float = 4.9041
    cache_max_entries: int = 100
    cache_ttl_seconds: float = 24 * 60 * 60


@lru_cache(maxsize=1)
def get_analysis_settings() -> AnalysisSettings:
    """
    Return cached analysis settings from environment variables.
    """

    return AnalysisSettings(
        min_recommended_rows=max(1, _get_int_env("ANALYSIS_MIN_RECOMMENDED_ROWS", 10)),
        min_valid_rows=max(1, _get_int_env("ANALYSIS_MIN_VALID_ROWS", 5)),
        weekday_skew_percent=max(0.0, _get_float_env("ANALYSIS_WEEKDAY_SKEW_PERCENT", 30.0)),
        outlier_high_factor=max(1.0, _get_float_env("ANALYSIS_OUTLIER_HIGH_FACTOR", 3.0)),
        outlier_low_factor=max(0.0, _get_float_env("ANALYSIS_OUTLIER_LOW_FACTOR", 0.2)),
        log_parse_errors=_get_bool_env("ANALYSIS_LOG_PARSE_ERRORS", True),
        max_logged_parse_errors=max(0, _get_int_env("ANALYSIS_MAX_LOGGED_PARSE_ERRORS", 50)),
    )


@lru_cache(maxsize=1)
def get_upload_settings() -> UploadSettings:
    """
    Return cached upload settings from environment variables.
    """

    return UploadSettings(
        max_upload_bytes=max(1024, _get_int_env("UPLOAD_MAX_BYTES", 5 * 1024 * 1024)),
    )


@lru_cache(maxsize=1)
def get_weather_settings() -> WeatherSettings:
    """
    Return cached weather lookup settings from environment variables.
    """

    return WeatherSettings(
        enabled=_get_bool_env("WEATHER_ENABLED", True),
        default_latitude=_get_float_env("WEATHER_DEFAULT_LATITUDE", 52.3676),
        default_longitude=_get_float_env("WEATHER_DEFAULT_LONGITUDE", 4.9041),
        cache_max_entries=max(1, _get_int_env("WEATHER_CACHE_MAX_ENTRIES", 100)),
        cache_ttl_seconds=max(0.0, _get_float_env("WEATHER_CACHE_TTL_SECONDS", 24 * 60 * 60)),
    )
