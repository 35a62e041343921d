"""Photo API endpoints — mirror spot cover photos into object storage."""

from fastapi import APIRouter, Depends

from spots_api.core.dependencies import get_photo_service
from spots_api.schemas.photos import PhotoBatchRequest, PhotoBatchResponse, PhotoEnsureRequest, PhotoEnsureResponse
from spots_api.services.photo_service import PhotoService

photos_router = APIRouter(prefix="/photos", tags=["photos"])


@photos_router.post(
    "/batch",
    response_model=PhotoBatchResponse,
)
async def ensure_photo_batch(
    body: PhotoBatchRequest,
    service: PhotoService = Depends(get_photo_service),  # noqa: B008
) -> PhotoBatchResponse:
    """Mirror several photos in small concurrent batches; failed items are omitted."""
    photos = await service.ensure_photos([(item.place_id, item.photo_reference) for item in body.items])
    return PhotoBatchResponse(photos=photos)


@photos_router.post(
    "/{place_id}",
    response_model=PhotoEnsureResponse,
)
async def ensure_spot_photo(
    place_id: str,
    body: PhotoEnsureRequest,
    service: PhotoService = Depends(get_photo_service),  # noqa: B008
) -> PhotoEnsureResponse:
    """Return a durable URL for a spot's photo, mirroring it on first request."""
    url = await service.ensure_photo(place_id, body.photo_reference)
    return PhotoEnsureResponse(place_id=place_id, photo_url=url)
