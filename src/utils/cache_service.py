"""
In-memory LRU cache for slow-changing lookups (project names).

Survives across warm Lambda invocations.
"""

from collections import OrderedDict
from threading import Lock
import time
from typing import Any, Optional


class LRUCache:
    """Thread-safe LRU cache with TTL support."""

    def __init__(self, max_size: int = 100, ttl_seconds: int = 300):
        self.max_size = max_size
        self.ttl_seconds = ttl_seconds
        self._cache: "OrderedDict[str, tuple[Any, float]]" = OrderedDict()
        self._lock = Lock()

    def get(self, key: str) -> Optional[Any]:
        """Get value from cache if it exists and has not expired."""
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                return None

            value, stored_at = entry
            if time.monotonic() - stored_at > self.ttl_seconds:
                del self._cache[key]
                return None

            self._cache.move_to_end(key)
            return value

    def set(self, key: str, value: Any) -> None:
        """Set value in cache, evicting the least recently used entry when full."""
        with self._lock:
            if key in self._cache:
                self._cache.move_to_end(key)
            self._cache[key] = (value, time.monotonic())

            while len(self._cache) > self.max_size:
                self._cache.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)
