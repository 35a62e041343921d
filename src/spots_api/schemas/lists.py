"""Pydantic v2 schemas for user lists and list membership."""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from spots_api.schemas.spots import SpotResponse, SpotUpsert


class UserListResponse(BaseModel):
    """A list with its display name and spot count."""

    id: uuid.UUID
    user_id: uuid.UUID
    list_type: str | None = None
    name: str
    spot_count: int = 0
    created_at: datetime | None = None


class CreateListRequest(BaseModel):
    """Request to create a user-defined list."""

    name: str = Field(..., min_length=1, max_length=100)


class ListSpotResponse(BaseModel):
    """A spot inside a list with the time it was saved."""

    spot: SpotResponse
    list_id: uuid.UUID
    saved_at: datetime


class SpotListsResponse(BaseModel):
    """Lists that currently contain a spot."""

    place_id: str
    list_ids: list[uuid.UUID]


class ReconcileRequest(BaseModel):
    """Desired set of lists for a spot.

    ``spot`` is required the first time a spot is added to any list so the
    spot row can be created before memberships reference it.
    """

    list_ids: list[uuid.UUID] = Field(default_factory=list)
    user_id: uuid.UUID | None = None
    spot: SpotUpsert | None = None


class ReconcileResponse(BaseModel):
    """Applied changes and new counts for the lists that changed."""

    place_id: str
    added: list[uuid.UUID]
    removed: list[uuid.UUID]
    counts: dict[uuid.UUID, int]
