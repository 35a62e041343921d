"""Pydantic v2 schemas for photo mirroring."""

from pydantic import BaseModel, Field


class PhotoEnsureRequest(BaseModel):
    """Request to mirror one spot's cover photo."""

    photo_reference: str = Field(..., min_length=1, description="Upstream photo resource name")


class PhotoEnsureResponse(BaseModel):
    """Durable URL for the spot's photo; null when mirroring failed."""

    place_id: str
    photo_url: str | None = None


class PhotoBatchItem(BaseModel):
    """One spot/photo pair in a batch request."""

    place_id: str = Field(..., min_length=1)
    photo_reference: str = Field(..., min_length=1)


class PhotoBatchRequest(BaseModel):
    """Request to mirror several photos."""

    items: list[PhotoBatchItem] = Field(..., max_length=100)


class PhotoBatchResponse(BaseModel):
    """Durable URLs for every spot whose photo was mirrored."""

    photos: dict[str, str]
