"""
weather/cache.py

Bounded in-process cache for daily weather observations.
"""

from __future__ import annotations

import threading
import time
from collections import OrderedDict
from typing import Callable

from weather.models import WeatherObservation

CacheKey = tuple[str, str]


class ObservationCache:
    """
    LRU cache keyed by (location key, ISO date) with per-entry expiry.

    Owned by whoever constructs it; there is no module-level instance.
    """

    def __init__(
        self,
        *,
        max_entries: int,
        ttl_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._max_entries = max(1, max_entries)
        self._ttl_seconds = max(0.0, ttl_seconds)
        self._clock = clock
        self._entries: OrderedDict[CacheKey, tuple[float, WeatherObservation]] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: CacheKey) -> WeatherObservation | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            stored_at, observation = entry
            if self._clock() - stored_at >= self._ttl_seconds:
                del self._entries[key]
                return None
            self._entries.move_to_end(key)
            return observation

    def put(self, key: CacheKey, observation: WeatherObservation) -> None:
        with self._lock:
            self._entries[key] = (self._clock(), observation)
            self._entries.move_to_end(key)
            while len(self._entries) > self._max_entries:
                self._entries.popitem(last=False)

    def evict_expired(self) -> int:
        """
        Drop every expired entry and return how many were removed.
        """

        with self._lock:
            now = self._clock()
            expired = [
                key
                for key, (stored_at, _) in self._entries.items()
                if now - stored_at >= self._ttl_seconds
            ]
            for key in expired:
                del self._entries[key]
            return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries
