"""In-memory caches: search responses, place coordinates, and photos.

Each cache owns its own lock and is created by the application wiring, so
tests can build fresh instances.
"""

from spots_api.lib.cache.coordinates import CoordinateCache
from spots_api.lib.cache.keys import normalize_query, search_cache_key
from spots_api.lib.cache.photos import PhotoCache
from spots_api.lib.cache.response import ResponseCache

__all__ = [
    "CoordinateCache",
    "PhotoCache",
    "ResponseCache",
    "normalize_query",
    "search_cache_key",
]
