"""
Caches for the issuer's key set.
"""

import threading
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Tuple

from cachetools import TTLCache


DEFAULT_CACHE_TTL = 300
DEFAULT_CACHE_MAX_SIZE = 16

_MISSING = object()


class Cache(ABC):
    """Key-value cache consulted before fetching the key set."""

    @abstractmethod
    def get(self, key: str) -> Tuple[Any, bool]:
        """Return ``(value, True)`` on a hit and ``(None, False)`` otherwise."""

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key``, replacing any existing item."""


class MemoryCache(Cache):
    """In-process cache whose entries expire ``ttl_seconds`` after being set."""

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_CACHE_TTL,
        max_size: int = DEFAULT_CACHE_MAX_SIZE,
        timer: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self._cache: TTLCache = TTLCache(maxsize=max_size, ttl=ttl_seconds, timer=timer)
        self._lock = threading.Lock()

    def get(self, key: str) -> Tuple[Any, bool]:
        with self._lock:
            value = self._cache.get(key, _MISSING)
        if value is _MISSING:
            return None, False
        return value, True

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._cache[key] = value

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()


class NopCache(Cache):
    """Cache that never stores anything, forcing a fetch on every call."""

    def get(self, key: str) -> Tuple[Any, bool]:
        return None, False

    def set(self, key: str, value: Any) -> None:
        return None
