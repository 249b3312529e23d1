"""In-process caches for job search pages and job details."""

import threading
import time
from collections import OrderedDict
from typing import Callable, Generic, Hashable, TypeVar

V = TypeVar("V")


class _TimedCache(Generic[V]):
    """Bounded TTL map; the least recently written (or read, if lru) entry goes first."""

    def __init__(
        self,
        max_entries: int,
        ttl_seconds: float,
        lru: bool = False,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_entries = max_entries
        self.ttl_seconds = ttl_seconds
        self._lru = lru
        self._clock = clock
        self._entries: OrderedDict[Hashable, tuple[float, V]] = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def _is_fresh(self, stored_at: float) -> bool:
        return self._clock() - stored_at < self.ttl_seconds

    def get(self, key: Hashable) -> V | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or not self._is_fresh(entry[0]):
                self.misses += 1
                return None
            if self._lru:
                self._entries.move_to_end(key)
            self.hits += 1
            return entry[1]

    def set(self, key: Hashable, value: V) -> None:
        with self._lock:
            self._entries.pop(key, None)
            self._entries[key] = (self._clock(), value)
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0

    def purge_expired(self) -> int:
        with self._lock:
            expired = [k for k, (stored_at, _) in self._entries.items() if not self._is_fresh(stored_at)]
            for key in expired:
                del self._entries[key]
            return len(expired)

    def values(self) -> list[V]:
        with self._lock:
            return [value for _, value in self._entries.values()]

    def __len__(self) -> int:
        return len(self._entries)

    def stats(self) -> dict:
        with self._lock:
            fresh = sum(1 for stored_at, _ in self._entries.values() if self._is_fresh(stored_at))
            return {
                "entries": len(self._entries),
                "fresh": fresh,
                "max_entries": self.max_entries,
                "ttl_seconds": self.ttl_seconds,
                "hits": self.hits,
                "misses": self.misses,
            }


class PageCache(_TimedCache):
    """Search result pages keyed by the canonical (query, filters, page) tuple.

    Expired pages stay around until evicted so they can be served when every
    provider is down.
    """

    def get_stale(self, key: Hashable):
        with self._lock:
            entry = self._entries.get(key)
            return entry[1] if entry is not None else None


class JobDetailsCache(_TimedCache):
    """Recently viewed or listed jobs by id, least recently used evicted first."""

    def __init__(self, max_entries: int = 20, ttl_seconds: float = 900, clock: Callable[[], float] = time.monotonic):
        super().__init__(max_entries, ttl_seconds, lru=True, clock=clock)

    def put(self, job_id: str, job) -> None:
        self.set(job_id, job)
