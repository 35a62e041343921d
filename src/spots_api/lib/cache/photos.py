"""Least-recently-used photo cache bounded by entry count and total bytes."""

import threading
from collections import OrderedDict

from loguru import logger

from spots_api.lib.photos.image import DecodedPhoto


class PhotoCache:
    """Thread-safe LRU cache of decoded photos keyed by upstream photo reference.

    Eviction removes least-recently-used entries until both the count limit
    and the byte limit hold. A photo larger than ``max_bytes`` on its own is
    not cached.

    Args:
        max_entries: Maximum number of photos.
        max_bytes: Maximum total ``size_bytes`` across photos.
    """

    def __init__(self, max_entries: int = 100, max_bytes: int = 50 * 1024 * 1024) -> None:
        self._max_entries = max_entries
        self._max_bytes = max_bytes
        self._entries: OrderedDict[str, DecodedPhoto] = OrderedDict()
        self._total_bytes = 0
        self._lock = threading.Lock()

    def get(self, photo_reference: str) -> DecodedPhoto | None:
        """Return a cached photo and mark it most recently used."""
        with self._lock:
            photo = self._entries.get(photo_reference)
            if photo is not None:
                self._entries.move_to_end(photo_reference)
            return photo

    def put(self, photo_reference: str, photo: DecodedPhoto) -> bool:
        """Insert or replace a photo, evicting as needed.

        Args:
            photo_reference: Upstream photo reference.
            photo: Decoded photo.

        Returns:
            True if the photo was stored.
        """
        if photo.size_bytes > self._max_bytes:
            logger.debug("Photo {} ({} bytes) exceeds cache byte limit", photo_reference, photo.size_bytes)
            return False
        with self._lock:
            previous = self._entries.pop(photo_reference, None)
            if previous is not None:
                self._total_bytes -= previous.size_bytes
            self._entries[photo_reference] = photo
            self._total_bytes += photo.size_bytes
            while len(self._entries) > self._max_entries or self._total_bytes > self._max_bytes:
                _, evicted = self._entries.popitem(last=False)
                self._total_bytes -= evicted.size_bytes
            return True

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._total_bytes = 0

    @property
    def total_bytes(self) -> int:
        with self._lock:
            return self._total_bytes

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, photo_reference: object) -> bool:
        with self._lock:
            return photo_reference in self._entries
