"""
In-memory TTL cache.

Owned by the application instance (app.state.tenant_cache) rather than a
module global. A lock guards the map because sync handlers run in the
thread pool. The map holds at most `max_entries` keys: expired entries are
swept first, then the oldest writes are dropped.
"""

import threading
import time
from typing import Any, Callable, Dict, Optional, Tuple


class TTLCache:
    def __init__(
        self,
        ttl_seconds: float = 30,
        clock: Callable[[], float] = time.monotonic,
        max_entries: int = 10_000,
    ):
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: Dict[str, Tuple[Any, float]] = {}
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        return self.ttl_seconds > 0

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                return None
            return value

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        ttl = self.ttl_seconds if ttl is None else ttl
        if ttl <= 0:
            return
        with self._lock:
            now = self._clock()
            self._entries.pop(key, None)
            if len(self._entries) >= self.max_entries:
                self._purge(now)
            self._entries[key] = (value, now + ttl)

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _purge(self, now: float) -> None:
        expired = [key for key, (_, expires_at) in self._entries.items() if now >= expires_at]
        for key in expired:
            del self._entries[key]
        # Dicts keep insertion order, so the front holds the oldest writes
        while self._entries and len(self._entries) >= self.max_entries:
            del self._entries[next(iter(self._entries))]
