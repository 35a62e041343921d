"""Spot API endpoints — free-text search, nearby search, detail, and location sync."""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from spots_api.core.background import BackgroundTaskRunner
from spots_api.core.config import Settings
from spots_api.core.dependencies import (
    get_async_session,
    get_photo_service,
    get_places_provider_dep,
    get_search_service,
    get_settings_dep,
    get_task_runner,
)
from spots_api.lib.geo import format_distance, haversine_meters
from spots_api.lib.places import BasePlacesProvider, Coordinate
from spots_api.schemas.spots import (
    NearbyResponse,
    PlaceCandidateResponse,
    SearchResponse,
    SpotLocationUpdate,
    SpotResponse,
)
from spots_api.services.nearby_service import NearbyQuery, search_nearby
from spots_api.services.photo_service import PhotoService
from spots_api.services.search_service import SearchService, distance_from
from spots_api.services.spot_service import get_or_fetch_spot, update_spot_location

spots_router = APIRouter(prefix="/spots", tags=["spots"])


def _origin(lat: float | None, lng: float | None) -> Coordinate | None:
    if lat is None and lng is None:
        return None
    if lat is None or lng is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="lat and lng must be provided together.",
        )
    return Coordinate(lat, lng)


@spots_router.get(
    "/search",
    response_model=SearchResponse,
)
async def search_spots(
    q: str = Query(..., max_length=200, description="Free text typed by the user"),  # noqa: B008
    lat: float | None = Query(None, ge=-90, le=90, description="Origin latitude"),  # noqa: B008
    lng: float | None = Query(None, ge=-180, le=180, description="Origin longitude"),  # noqa: B008
    service: SearchService = Depends(get_search_service),  # noqa: B008
) -> SearchResponse:
    """Search places by text, nearest first when an origin is given."""
    origin = _origin(lat, lng)
    candidates = await service.search(q, origin)
    results = []
    for candidate in candidates:
        response = PlaceCandidateResponse.model_validate(candidate)
        if origin is not None and candidate.coordinate is not None:
            response.distance_meters = distance_from(origin, candidate)
        results.append(response)
    return SearchResponse(query=q, results=results)


@spots_router.get(
    "/nearby",
    response_model=NearbyResponse,
)
async def nearby_spots(
    lat: float = Query(..., ge=-90, le=90, description="Origin latitude"),  # noqa: B008
    lng: float = Query(..., ge=-180, le=180, description="Origin longitude"),  # noqa: B008
    radius: float | None = Query(None, gt=0, le=50000, description="Search radius in meters"),  # noqa: B008
    max_results: int | None = Query(None, ge=1, le=20, description="Page size"),  # noqa: B008
    page_token: str | None = Query(None, description="Continuation token from a previous page"),  # noqa: B008
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
    provider: BasePlacesProvider = Depends(get_places_provider_dep),  # noqa: B008
    photo_service: PhotoService = Depends(get_photo_service),  # noqa: B008
    runner: BackgroundTaskRunner = Depends(get_task_runner),  # noqa: B008
    settings: Settings = Depends(get_settings_dep),  # noqa: B008
) -> NearbyResponse:
    """List places around a point, nearest first. Photos are mirrored in the background."""
    query = NearbyQuery(
        origin=Coordinate(lat, lng),
        radius_meters=radius or settings.places_nearby_radius_meters,
        max_results=max_results or settings.places_nearby_page_size,
        page_token=page_token,
    )
    return await search_nearby(session, provider, photo_service, runner, query)


@spots_router.get(
    "/{place_id}",
    response_model=SpotResponse,
)
async def get_spot_detail(
    place_id: str,
    lat: float | None = Query(None, ge=-90, le=90, description="Origin latitude"),  # noqa: B008
    lng: float | None = Query(None, ge=-180, le=180, description="Origin longitude"),  # noqa: B008
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
    provider: BasePlacesProvider = Depends(get_places_provider_dep),  # noqa: B008
    photo_service: PhotoService = Depends(get_photo_service),  # noqa: B008
    runner: BackgroundTaskRunner = Depends(get_task_runner),  # noqa: B008
) -> SpotResponse:
    """Return a spot, fetching it from the provider on first access."""
    origin = _origin(lat, lng)
    spot = await get_or_fetch_spot(session, provider, place_id)
    if spot is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Place {place_id} not found.",
        )

    if not spot.photo_url and spot.photo_reference:
        runner.submit_task(
            photo_service.ensure_photo(spot.place_id, spot.photo_reference),
            name=f"mirror-photo-{spot.place_id}",
        )

    response = SpotResponse.model_validate(spot)
    if origin is not None and spot.latitude is not None and spot.longitude is not None:
        meters = haversine_meters(origin.latitude, origin.longitude, spot.latitude, spot.longitude)
        response.distance_meters = meters
        response.distance_text = format_distance(meters)
    return response


@spots_router.patch(
    "/{place_id}/location",
    response_model=SpotResponse,
)
async def update_location(
    place_id: str,
    body: SpotLocationUpdate,
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
) -> SpotResponse:
    """Move a spot's stored coordinate."""
    spot = await update_spot_location(session, place_id, body.latitude, body.longitude)
    if spot is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Spot {place_id} not found.",
        )
    return SpotResponse.model_validate(spot)
