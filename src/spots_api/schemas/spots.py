"""Pydantic v2 schemas for spot search, nearby search, and spot records."""

from datetime import datetime

from pydantic import BaseModel, Field


class SpotUpsert(BaseModel):
    """Fields written by a spot upsert. Null photo fields never overwrite stored values."""

    place_id: str = Field(..., min_length=1, max_length=512)
    name: str = Field(..., min_length=1)
    address: str | None = None
    city: str | None = None
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)
    types: list[str] = Field(default_factory=list)
    photo_url: str | None = None
    photo_reference: str | None = None


class SpotResponse(BaseModel):
    """A persisted spot."""

    model_config = {"from_attributes": True}

    place_id: str
    name: str
    address: str | None = None
    city: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    types: list[str] | None = None
    photo_url: str | None = None
    photo_reference: str | None = None
    distance_meters: float | None = None
    distance_text: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class SpotLocationUpdate(BaseModel):
    """Request to move a spot's stored coordinate."""

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class PlaceCandidateResponse(BaseModel):
    """A free-text search result."""

    model_config = {"from_attributes": True}

    place_id: str
    name: str
    address: str = ""
    latitude: float | None = None
    longitude: float | None = None
    photo_url: str | None = None
    photo_reference: str | None = None
    distance_meters: float | None = None


class SearchResponse(BaseModel):
    """Results of a free-text search, nearest first when an origin was given."""

    query: str
    results: list[PlaceCandidateResponse]


class NearbySpotResponse(BaseModel):
    """A nearby-search result with its distance from the origin."""

    model_config = {"from_attributes": True}

    place_id: str
    name: str
    address: str | None = None
    city: str | None = None
    category: str
    rating: float | None = None
    latitude: float
    longitude: float
    types: list[str] = Field(default_factory=list)
    photo_reference: str | None = None
    photo_url: str | None = None
    distance_meters: float
    distance_text: str


class NearbyResponse(BaseModel):
    """One page of nearby spots."""

    spots: list[NearbySpotResponse]
    next_page_token: str | None = None
