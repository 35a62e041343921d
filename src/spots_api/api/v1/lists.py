"""List API endpoints — user lists, list contents, and spot membership reconciliation."""

import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from spots_api.core.dependencies import get_async_session, get_membership_service
from spots_api.schemas.lists import (
    CreateListRequest,
    ListSpotResponse,
    ReconcileRequest,
    ReconcileResponse,
    SpotListsResponse,
    UserListResponse,
)
from spots_api.services.list_service import (
    create_custom_list,
    create_default_lists,
    get_lists_by_ids,
    get_spots_in_list,
    get_user_lists,
)
from spots_api.services.membership_service import MembershipService

lists_router = APIRouter(tags=["lists"])


@lists_router.get(
    "/users/{user_id}/lists",
    response_model=list[UserListResponse],
)
async def list_user_lists(
    user_id: uuid.UUID,
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
) -> list[UserListResponse]:
    """Return a user's lists with spot counts."""
    return await get_user_lists(session, user_id)


@lists_router.post(
    "/users/{user_id}/lists/defaults",
    response_model=list[UserListResponse],
)
async def ensure_default_lists(
    user_id: uuid.UUID,
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
) -> list[UserListResponse]:
    """Create the starred, favorites, and bucket-list lists if missing."""
    await create_default_lists(session, user_id)
    return await get_user_lists(session, user_id)


@lists_router.post(
    "/users/{user_id}/lists",
    response_model=UserListResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_list(
    user_id: uuid.UUID,
    body: CreateListRequest,
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
) -> UserListResponse:
    """Create a user-defined list."""
    if not body.name.strip():
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="List name must not be empty or whitespace-only.",
        )
    user_list = await create_custom_list(session, user_id, body.name)
    return UserListResponse(
        id=user_list.id,
        user_id=user_list.user_id,
        list_type=None,
        name=user_list.display_name,
        spot_count=0,
        created_at=user_list.created_at,
    )


@lists_router.get(
    "/lists/{list_id}/spots",
    response_model=list[ListSpotResponse],
)
async def list_spots(
    list_id: uuid.UUID,
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
) -> list[ListSpotResponse]:
    """Return the spots in a list, most recently saved first."""
    if not await get_lists_by_ids(session, [list_id]):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"List {list_id} not found.",
        )
    return await get_spots_in_list(session, list_id)


@lists_router.get(
    "/spots/{place_id}/lists",
    response_model=SpotListsResponse,
)
async def spot_lists(
    place_id: str,
    user_id: uuid.UUID | None = Query(None, description="Restrict to this user's lists"),  # noqa: B008
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
    service: MembershipService = Depends(get_membership_service),  # noqa: B008
) -> SpotListsResponse:
    """Return the lists that currently contain a spot."""
    list_ids = await service.get_memberships(session, place_id, user_id)
    return SpotListsResponse(place_id=place_id, list_ids=sorted(list_ids))


@lists_router.put(
    "/spots/{place_id}/lists",
    response_model=ReconcileResponse,
)
async def reconcile_spot_lists(
    place_id: str,
    body: ReconcileRequest,
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
    service: MembershipService = Depends(get_membership_service),  # noqa: B008
) -> ReconcileResponse:
    """Make the spot's list memberships equal the submitted selection."""
    try:
        result = await service.reconcile(
            session,
            place_id,
            body.list_ids,
            user_id=body.user_id,
            spot=body.spot,
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        ) from e
    return ReconcileResponse(
        place_id=result.place_id,
        added=result.added,
        removed=result.removed,
        counts=result.counts,
    )
