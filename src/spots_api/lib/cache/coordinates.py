"""Place coordinate cache.

Coordinates never change once known, so entries do not expire; the map is
only bounded by size.
"""

import threading
from collections import OrderedDict

from spots_api.lib.places.base import Coordinate


class CoordinateCache:
    """Thread-safe place_id -> Coordinate map with a size bound.

    Args:
        max_entries: Upper bound; the oldest insertion is evicted beyond it.
    """

    def __init__(self, max_entries: int = 5000) -> None:
        self._max_entries = max_entries
        self._entries: OrderedDict[str, Coordinate] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, place_id: str) -> Coordinate | None:
        with self._lock:
            return self._entries.get(place_id)

    def set(self, place_id: str, coordinate: Coordinate) -> None:
        with self._lock:
            self._entries[place_id] = coordinate
            while len(self._entries) > self._max_entries:
                self._entries.popitem(last=False)

    def get_many(self, place_ids: list[str]) -> dict[str, Coordinate]:
        """Return cached coordinates for the ids that are present."""
        with self._lock:
            return {pid: self._entries[pid] for pid in place_ids if pid in self._entries}

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, place_id: object) -> bool:
        with self._lock:
            return place_id in self._entries
