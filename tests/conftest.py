"""
tests/conftest.py

Shared fixtures for the sales analysis test suite.
"""

from __future__ import annotations

import pytest

from app.config import get_analysis_settings, get_upload_settings, get_weather_settings

_SETTINGS_GETTERS = (get_analysis_settings, get_upload_settings, get_weather_settings)


@pytest.fixture(autouse=True)
def _reset_settings_cache():
    """Settings getters are lru_cached; isolate env changes between tests."""
    for getter in _SETTINGS_GETTERS:
        getter.cache_clear()
    yield
    for getter in _SETTINGS_GETTERS:
        getter.cache_clear()
