"""Search service — cached free-text place search ranked by distance from an origin."""

import asyncio
import math

from loguru import logger

from spots_api.lib.cache import CoordinateCache, ResponseCache, normalize_query, search_cache_key
from spots_api.lib.errors import NetworkError
from spots_api.lib.geo import haversine_meters
from spots_api.lib.places.base import BasePlacesProvider, Coordinate, PlaceCandidate

DEFAULT_RESULT_LIMIT = 10
DEFAULT_BIAS_RADIUS_METERS = 10000.0


def dedupe_candidates(candidates: list[PlaceCandidate]) -> list[PlaceCandidate]:
    """Drop repeated place ids, keeping the first occurrence in order."""
    seen: set[str] = set()
    unique: list[PlaceCandidate] = []
    for candidate in candidates:
        if candidate.place_id in seen:
            continue
        seen.add(candidate.place_id)
        unique.append(candidate)
    return unique


def distance_from(origin: Coordinate, candidate: PlaceCandidate) -> float:
    """Great-circle distance to a candidate; +inf when its coordinate is unknown."""
    coordinate = candidate.coordinate
    if coordinate is None:
        return math.inf
    return haversine_meters(origin.latitude, origin.longitude, coordinate.latitude, coordinate.longitude)


class SearchService:
    """Free-text place search over a places provider.

    One autocomplete request per uncached (query, origin cell). With an
    origin, candidates are ranked by distance and candidates whose coordinate
    cannot be resolved go last. Results are cached for the response TTL.

    Args:
        provider: Upstream places provider.
        response_cache: Cache of truncated result lists.
        coordinate_cache: Cache of place coordinates.
        result_limit: Maximum results returned.
        bias_radius_meters: Autocomplete location bias radius.
    """

    def __init__(
        self,
        provider: BasePlacesProvider,
        response_cache: ResponseCache,
        coordinate_cache: CoordinateCache,
        result_limit: int = DEFAULT_RESULT_LIMIT,
        bias_radius_meters: float = DEFAULT_BIAS_RADIUS_METERS,
    ) -> None:
        self._provider = provider
        self._responses = response_cache
        self._coordinates = coordinate_cache
        self._result_limit = result_limit
        self._bias_radius_meters = bias_radius_meters

    async def search(self, query: str, origin: Coordinate | None = None) -> list[PlaceCandidate]:
        """Search for places matching free text.

        Args:
            query: Text typed by the user.
            origin: Optional location used for biasing and ranking.

        Returns:
            Up to ``result_limit`` candidates, nearest first when an origin is given.

        Raises:
            ConfigurationError: If the provider key is missing or rejected.
            NetworkError: If the autocomplete request fails.
        """
        normalized = normalize_query(query)
        if not normalized:
            return []

        key = search_cache_key(normalized, origin)
        cached = self._responses.get(key)
        if cached is not None:
            logger.debug(f"Search cache hit for {key!r}")
            return cached

        candidates = await self._provider.autocomplete(
            query.strip(),
            origin=origin,
            radius_meters=self._bias_radius_meters if origin is not None else None,
        )
        results = dedupe_candidates(candidates)

        if origin is not None and results:
            results = await self._resolve_coordinates(results)
            # sorted() is stable, so ties and unresolved candidates keep upstream order
            results = sorted(results, key=lambda candidate: distance_from(origin, candidate))

        results = results[: self._result_limit]
        self._responses.set(key, results)
        return list(results)

    async def _resolve_coordinates(self, candidates: list[PlaceCandidate]) -> list[PlaceCandidate]:
        """Attach coordinates from the cache, looking up misses concurrently."""
        known = self._coordinates.get_many([c.place_id for c in candidates if c.coordinate is None])
        missing = [c.place_id for c in candidates if c.coordinate is None and c.place_id not in known]

        if missing:
            fetched = await asyncio.gather(*(self._lookup_coordinate(place_id) for place_id in missing))
            for place_id, coordinate in zip(missing, fetched, strict=True):
                if coordinate is not None:
                    self._coordinates.set(place_id, coordinate)
                    known[place_id] = coordinate

        resolved: list[PlaceCandidate] = []
        for candidate in candidates:
            if candidate.coordinate is not None:
                self._coordinates.set(candidate.place_id, candidate.coordinate)
                resolved.append(candidate)
            elif candidate.place_id in known:
                resolved.append(candidate.with_coordinate(known[candidate.place_id]))
            else:
                resolved.append(candidate)
        return resolved

    async def _lookup_coordinate(self, place_id: str) -> Coordinate | None:
        try:
            return await self._provider.fetch_coordinate(place_id)
        except NetworkError as e:
            logger.warning(f"Coordinate lookup failed for {place_id}, ranking it last: {e}")
            return None
