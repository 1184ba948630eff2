"""
TTL-based in-memory cache.

Services combine it with the time-bucketed keys from
``leapscan.core.cache_keys``: a key stops being produced when its window
ends, and writes purge entries past their TTL.
"""

import time
from typing import Any, Callable, Optional


class TTLCache:
    """
    Simple time-to-live cache backed by a plain dict.

    Single-process, single event loop, so no locking.
    """

    def __init__(self, ttl_seconds: int = 300, clock: Callable[[], float] = time.time):
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self._ttl = ttl_seconds
        self._clock = clock
        self._store: dict = {}

    @property
    def ttl_seconds(self) -> int:
        return self._ttl

    def get(self, key: str) -> Optional[Any]:
        """Return cached value if still within TTL, else None."""
        entry = self._store.get(key)
        if entry is None:
            return None
        value, ts = entry
        if self._clock() - ts < self._ttl:
            return value
        del self._store[key]
        return None

    def set(self, key: str, value: Any) -> None:
        """Store value with current timestamp.

        Keys carry their time bucket and are never read again once the
        window closes, so expired entries are dropped on every write.
        """
        self.purge_expired()
        self._store[key] = (value, self._clock())

    def invalidate(self, key: str) -> None:
        self._store.pop(key, None)

    def clear(self) -> None:
        self._store.clear()

    def purge_expired(self) -> int:
        """Drop expired entries and return how many were removed."""
        now = self._clock()
        expired = [k for k, (_, ts) in self._store.items() if now - ts >= self._ttl]
        for key in expired:
            del self._store[key]
        return len(expired)

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None
