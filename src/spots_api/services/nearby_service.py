"""Nearby service — radius search that persists results and enriches photos in the background."""

from dataclasses import dataclass

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from spots_api.core.background import BackgroundTaskRunner
from spots_api.lib.geo import format_distance, haversine_meters
from spots_api.lib.places.base import BasePlacesProvider, Coordinate, PlaceRecord
from spots_api.schemas.spots import NearbyResponse, NearbySpotResponse
from spots_api.services.photo_service import PhotoService
from spots_api.services.spot_service import bulk_upsert_spots, get_photo_urls, spot_from_place


@dataclass
class NearbyQuery:
    """Parameters of one nearby-search page."""

    origin: Coordinate
    radius_meters: float = 1000.0
    max_results: int = 10
    page_token: str | None = None


def _to_response(record: PlaceRecord, origin: Coordinate, photo_url: str | None) -> NearbySpotResponse:
    meters = haversine_meters(origin.latitude, origin.longitude, record.latitude, record.longitude)
    return NearbySpotResponse(
        place_id=record.place_id,
        name=record.name,
        address=record.address,
        city=record.city,
        category=record.category,
        rating=record.rating,
        latitude=record.latitude,
        longitude=record.longitude,
        types=record.types,
        photo_reference=record.photo_reference,
        photo_url=photo_url,
        distance_meters=meters,
        distance_text=format_distance(meters),
    )


async def search_nearby(
    session: AsyncSession,
    provider: BasePlacesProvider,
    photo_service: PhotoService,
    runner: BackgroundTaskRunner,
    query: NearbyQuery,
) -> NearbyResponse:
    """Return one page of places around an origin, nearest first.

    Known durable photo URLs are attached from the database and the page is
    upserted into ``spots``. Photos missing a durable URL are mirrored by a
    detached background job that this call does not wait for; later reads of
    the spot pick up the URL.

    Args:
        session: Database session.
        provider: Places provider.
        photo_service: Photo mirror used by the background job.
        runner: Background task runner.
        query: Origin, radius, page size, and continuation token.

    Returns:
        NearbyResponse with spots sorted by distance and the next page token.

    Raises:
        ConfigurationError: If the provider key is missing or rejected.
        NetworkError: If the nearby request fails.
    """
    page = await provider.search_nearby(
        query.origin,
        radius_meters=query.radius_meters,
        max_results=query.max_results,
        page_token=query.page_token,
    )
    if not page.places:
        return NearbyResponse(spots=[], next_page_token=page.next_page_token)

    known_urls = await get_photo_urls(session, [record.place_id for record in page.places])
    await bulk_upsert_spots(session, [spot_from_place(record) for record in page.places])
    await session.commit()

    spots = [_to_response(record, query.origin, known_urls.get(record.place_id)) for record in page.places]
    spots.sort(key=lambda spot: spot.distance_meters)

    pending = [(spot.place_id, spot.photo_reference) for spot in spots if not spot.photo_url and spot.photo_reference]
    if pending:
        runner.submit_task(photo_service.ensure_photos(pending), name=f"mirror-photos-{len(pending)}")
        logger.debug(f"Queued photo mirroring for {len(pending)} nearby spot(s)")

    return NearbyResponse(spots=spots, next_page_token=page.next_page_token)
