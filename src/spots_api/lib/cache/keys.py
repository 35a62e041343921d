"""Cache key normalization for search responses."""

import re

from spots_api.lib.places.base import Coordinate

# 3 decimal places is ~110 m of latitude
COORDINATE_PRECISION = 3
_WHITESPACE = re.compile(r"\s+")


def normalize_query(query: str) -> str:
    """Collapse whitespace and casefold a search query.

    Args:
        query: Raw query text.

    Returns:
        Normalized query; empty when the input is blank.
    """
    return _WHITESPACE.sub(" ", query).strip().casefold()


def search_cache_key(normalized_query: str, origin: Coordinate | None) -> str:
    """Build the response cache key for a query and optional origin.

    Nearby origins that round to the same ~100 m cell share a key.

    Args:
        normalized_query: Output of normalize_query.
        origin: Optional search origin.

    Returns:
        Composite key string.
    """
    if origin is None:
        return f"{normalized_query}|-"
    lat = round(origin.latitude, COORDINATE_PRECISION)
    lng = round(origin.longitude, COORDINATE_PRECISION)
    # Avoid distinct keys for -0.0 and 0.0
    return f"{normalized_query}|{lat + 0.0:.{COORDINATE_PRECISION}f},{lng + 0.0:.{COORDINATE_PRECISION}f}"
