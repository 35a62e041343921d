"""TTL cache for search responses."""

import dataclasses
import threading
import time
from collections import OrderedDict

from loguru import logger

from spots_api.lib.places.base import PlaceCandidate


class ResponseCache:
    """Thread-safe TTL cache mapping a search key to its candidate list.

    An entry is valid while ``now - inserted_at < ttl_seconds``. Expired
    entries are dropped when read and pruned on every write; beyond
    ``max_entries`` the oldest insertion is evicted. All access goes through
    a single lock. Candidates are copied on the way in and out, so enriching
    a returned candidate never changes the cached response.

    Args:
        ttl_seconds: Entry time-to-live in seconds.
        max_entries: Upper bound on stored responses.
    """

    def __init__(self, ttl_seconds: float = 180.0, max_entries: int = 256) -> None:
        self._ttl_seconds = ttl_seconds
        self._max_entries = max_entries
        self._entries: OrderedDict[str, tuple[list[PlaceCandidate], float]] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: str) -> list[PlaceCandidate] | None:
        """Return a copy of the cached response if still within TTL.

        Args:
            key: Search cache key.

        Returns:
            The cached candidates, or None on a miss or expiry.
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, inserted_at = entry
            if time.monotonic() - inserted_at >= self._ttl_seconds:
                del self._entries[key]
                logger.debug("Search cache entry expired: {}", key)
                return None
            return _copy(value)

    def set(self, key: str, value: list[PlaceCandidate]) -> None:
        """Store a response, replacing any previous entry for the key.

        Args:
            key: Search cache key.
            value: Candidates to cache.
        """
        now = time.monotonic()
        with self._lock:
            self._entries.pop(key, None)
            self._entries[key] = (_copy(value), now)
            self._prune(now)

    def _prune(self, now: float) -> None:
        # Insertion order is expiry order, so stop at the first live entry
        while self._entries:
            oldest_key, (_, inserted_at) = next(iter(self._entries.items()))
            if now - inserted_at < self._ttl_seconds and len(self._entries) <= self._max_entries:
                break
            del self._entries[oldest_key]

    def invalidate(self) -> None:
        """Clear the cache."""
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


def _copy(candidates: list[PlaceCandidate]) -> list[PlaceCandidate]:
    return [dataclasses.replace(candidate) for candidate in candidates]
