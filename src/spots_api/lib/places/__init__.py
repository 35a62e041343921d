"""Places library: upstream search provider interface and the Google implementation.

Public API:
    - BasePlacesProvider: Abstract provider interface
    - PlaceCandidate / PlaceRecord / NearbyPage / Coordinate: Result records
    - GooglePlacesClient: Google Places API (New) provider
    - categorize: Map place types to a display category
    - get_places_provider: Build the configured provider from settings
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from spots_api.lib.places.base import BasePlacesProvider, Coordinate, NearbyPage, PlaceCandidate, PlaceRecord
from spots_api.lib.places.categories import DEFAULT_CATEGORY, categorize
from spots_api.lib.places.google_places import GooglePlacesClient

if TYPE_CHECKING:
    from spots_api.core.config import Settings


def get_places_provider(settings: Settings) -> BasePlacesProvider:
    """Create the places provider described by settings.

    The provider is returned even when unconfigured; calls then raise
    ConfigurationError so the API can report it per request.

    Args:
        settings: Application settings.

    Returns:
        A BasePlacesProvider instance.
    """
    return GooglePlacesClient(
        api_key=settings.google_places_api_key,
        timeout=settings.google_places_timeout,
    )


__all__ = [
    "DEFAULT_CATEGORY",
    "BasePlacesProvider",
    "Coordinate",
    "GooglePlacesClient",
    "NearbyPage",
    "PlaceCandidate",
    "PlaceRecord",
    "categorize",
    "get_places_provider",
]
