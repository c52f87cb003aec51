import time
from threading import Lock
from typing import Any, Callable, Dict, Optional, TypeVar

from app.utils.log import app_logger

T = TypeVar("T")

_MISSING = object()


class FreshnessCache:
    """Process-wide in-memory cache with a per-entry TTL.

    Sits in front of the Hacker News API so that paging does not pay network
    latency (or hit upstream rate limits) on every request. Entries are keyed
    by string (e.g. ``newstories``, ``story:42``) and expire ``ttl`` seconds
    after they were stored. Expired entries are dropped when read, and at most
    every `sweep_interval` seconds a write sweeps out all expired entries so
    keys that are never read again do not pile up.

    Reads and writes are guarded by a lock so the cache can be shared by
    concurrent requests. Misses are not coalesced: two requests missing the
    same key at the same time will both call their fetch function.
    """

    def __init__(self, default_ttl: float = 300, clock: Callable[[], float] = time.monotonic,
                 sweep_interval: float = 5):
        self.default_ttl = default_ttl
        self.sweep_interval = sweep_interval
        self._clock = clock
        self._lock = Lock()
        self._store: Dict[str, Dict[str, Any]] = {}
        self._next_sweep = clock() + sweep_interval

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        ttl = self.default_ttl if ttl is None else ttl
        with self._lock:
            now = self._clock()
            if now >= self._next_sweep:
                self._sweep(now)
            self._store[key] = {"value": value, "expires_at": now + ttl}

    def _sweep(self, now: float) -> None:
        # caller holds the lock; story keys that fell off the ids list are never read again
        expired = [key for key, entry in self._store.items() if now >= entry["expires_at"]]
        for key in expired:
            del self._store[key]
        self._next_sweep = now + self.sweep_interval
        if expired:
            app_logger.debug("cache.sweep", evicted=len(expired), remaining=len(self._store))

    def _lookup(self, key: str) -> Any:
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return _MISSING
            if self._clock() >= entry["expires_at"]:
                # expired
                del self._store[key]
                return _MISSING
            return entry["value"]

    def get(self, key: str) -> Optional[Any]:
        value = self._lookup(key)
        return None if value is _MISSING else value

    def contains(self, key: str) -> bool:
        return self._lookup(key) is not _MISSING

    def get_or_fetch(self, key: str, ttl: float, fetch_fn: Callable[[], T]) -> T:
        """Return the cached value for `key`, calling `fetch_fn` on a miss.

        A ``None`` result is cached like any other value. If `fetch_fn`
        raises, the exception propagates and nothing is stored.
        """
        value = self._lookup(key)
        if value is not _MISSING:
            return value

        app_logger.debug("cache.miss", key=key)
        value = fetch_fn()
        self.set(key, value, ttl)
        return value

    def clear(self, key: str) -> None:
        with self._lock:
            self._store.pop(key, None)

    def clear_all(self) -> None:
        with self._lock:
            self._store.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)
