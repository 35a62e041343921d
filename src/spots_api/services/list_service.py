"""List service — user lists, counts, and single membership add/remove."""

import uuid
from collections.abc import Iterable

from loguru import logger
from sqlalchemy import delete, func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from spots_api.lib.errors import ConflictError
from spots_api.models.spot import Spot
from spots_api.models.spot_list_item import SpotListItem
from spots_api.models.user_list import ListType, UserList
from spots_api.schemas.lists import ListSpotResponse, UserListResponse
from spots_api.schemas.spots import SpotResponse

# Which saved list a map marker represents when a spot is in several
_DISPLAY_PRIORITY: tuple[ListType, ...] = (ListType.BUCKET_LIST, ListType.STARRED, ListType.FAVORITES)


def _insert(session: AsyncSession):  # type: ignore[no-untyped-def]
    return pg_insert if session.get_bind().dialect.name == "postgresql" else sqlite_insert


def primary_list_type(list_types: Iterable[ListType | str | None]) -> ListType | None:
    """Pick the list type shown for a spot saved to several system lists.

    Args:
        list_types: Types of the lists containing the spot (None for custom lists).

    Returns:
        bucket_list over starred over favorites, or None if none apply.
    """
    present = {ListType(t) for t in list_types if t is not None}
    for list_type in _DISPLAY_PRIORITY:
        if list_type in present:
            return list_type
    return None


async def create_default_lists(session: AsyncSession, user_id: uuid.UUID) -> list[UserList]:
    """Create the starred, favorites, and bucket-list lists for a user.

    ON CONFLICT (user_id, list_type) DO NOTHING, so existing lists are kept.

    Args:
        session: Database session.
        user_id: Owner of the lists.

    Returns:
        The user's system lists.
    """
    stmt = (
        _insert(session)(UserList.__table__)
        .values([{"id": uuid.uuid4(), "user_id": user_id, "list_type": t, "name": None} for t in ListType])
        .on_conflict_do_nothing(index_elements=["user_id", "list_type"])
    )
    await session.execute(stmt)
    await session.commit()

    result = await session.execute(
        select(UserList).where(UserList.user_id == user_id, UserList.list_type.is_not(None))
    )
    order = list(ListType)
    return sorted(result.scalars().all(), key=lambda ul: order.index(ul.list_type))


async def create_custom_list(session: AsyncSession, user_id: uuid.UUID, name: str) -> UserList:
    """Create a user-defined list.

    Args:
        session: Database session.
        user_id: Owner of the list.
        name: Display name.

    Returns:
        The created UserList.
    """
    user_list = UserList(id=uuid.uuid4(), user_id=user_id, list_type=None, name=name.strip())
    session.add(user_list)
    await session.commit()
    await session.refresh(user_list)
    return user_list


async def get_list_by_type(session: AsyncSession, user_id: uuid.UUID, list_type: ListType) -> UserList | None:
    """Return a user's system list of the given type."""
    result = await session.execute(
        select(UserList).where(UserList.user_id == user_id, UserList.list_type == list_type)
    )
    return result.scalar_one_or_none()


async def get_lists_by_ids(session: AsyncSession, list_ids: Iterable[uuid.UUID]) -> list[UserList]:
    """Return the lists with the given ids that exist."""
    ids = list(list_ids)
    if not ids:
        return []
    result = await session.execute(select(UserList).where(UserList.id.in_(ids)))
    return list(result.scalars().all())


async def get_spot_counts(session: AsyncSession, list_ids: Iterable[uuid.UUID]) -> dict[uuid.UUID, int]:
    """Count spots per list, including zero for lists with no spots.

    Args:
        session: Database session.
        list_ids: Lists to count.

    Returns:
        Mapping of list id to spot count.
    """
    ids = list(list_ids)
    if not ids:
        return {}
    result = await session.execute(
        select(SpotListItem.list_id, func.count(SpotListItem.id))
        .where(SpotListItem.list_id.in_(ids))
        .group_by(SpotListItem.list_id)
    )
    counts = {list_id: 0 for list_id in ids}
    counts.update({list_id: count for list_id, count in result.all()})
    return counts


async def get_spot_count(session: AsyncSession, list_id: uuid.UUID) -> int:
    """Count the spots in one list."""
    return (await get_spot_counts(session, [list_id]))[list_id]


async def get_user_lists(session: AsyncSession, user_id: uuid.UUID) -> list[UserListResponse]:
    """Return a user's lists with spot counts, system lists first.

    Args:
        session: Database session.
        user_id: Owner of the lists.

    Returns:
        List of UserListResponse.
    """
    result = await session.execute(select(UserList).where(UserList.user_id == user_id))
    lists = list(result.scalars().all())
    counts = await get_spot_counts(session, [user_list.id for user_list in lists])

    order = {list_type: index for index, list_type in enumerate(ListType)}
    lists.sort(key=lambda ul: (order.get(ul.list_type, len(order)), ul.display_name))
    return [
        UserListResponse(
            id=user_list.id,
            user_id=user_list.user_id,
            list_type=user_list.list_type.value if user_list.list_type else None,
            name=user_list.display_name,
            spot_count=counts.get(user_list.id, 0),
            created_at=user_list.created_at,
        )
        for user_list in lists
    ]


async def get_spots_in_list(session: AsyncSession, list_id: uuid.UUID) -> list[ListSpotResponse]:
    """Return the spots in a list, most recently saved first."""
    result = await session.execute(
        select(Spot, SpotListItem.saved_at)
        .join(SpotListItem, SpotListItem.spot_id == Spot.place_id)
        .where(SpotListItem.list_id == list_id)
        .order_by(SpotListItem.saved_at.desc(), Spot.name)
    )
    return [
        ListSpotResponse(spot=SpotResponse.model_validate(spot), list_id=list_id, saved_at=saved_at)
        for spot, saved_at in result.all()
    ]


async def get_lists_containing_spot(
    session: AsyncSession,
    place_id: str,
    user_id: uuid.UUID | None = None,
) -> set[uuid.UUID]:
    """Return the ids of lists that contain a spot.

    Args:
        session: Database session.
        place_id: Spot to look up.
        user_id: When given, only that user's lists are considered.

    Returns:
        Set of list ids.
    """
    stmt = select(SpotListItem.list_id).where(SpotListItem.spot_id == place_id)
    if user_id is not None:
        stmt = stmt.join(UserList, UserList.id == SpotListItem.list_id).where(UserList.user_id == user_id)
    result = await session.execute(stmt)
    return set(result.scalars().all())


async def add_spot_to_list(session: AsyncSession, place_id: str, list_id: uuid.UUID) -> None:
    """Insert one membership row. The caller commits.

    Args:
        session: Database session.
        place_id: Spot to add (must exist).
        list_id: Target list (must exist).

    Raises:
        ConflictError: If the spot is already in the list.
        sqlalchemy.exc.IntegrityError: On any other constraint failure.
    """
    stmt = (
        _insert(session)(SpotListItem.__table__)
        .values(id=uuid.uuid4(), spot_id=place_id, list_id=list_id)
        .on_conflict_do_nothing(index_elements=["spot_id", "list_id"])
    )
    result = await session.execute(stmt)
    if result.rowcount == 0:
        raise ConflictError(place_id, list_id)
    logger.debug(f"Added {place_id} to list {list_id}")


async def remove_spot_from_list(session: AsyncSession, place_id: str, list_id: uuid.UUID) -> bool:
    """Delete one membership row; removing a missing row is a no-op. The caller commits.

    Returns:
        True if a row was deleted.
    """
    result = await session.execute(
        delete(SpotListItem).where(SpotListItem.spot_id == place_id, SpotListItem.list_id == list_id)
    )
    return bool(result.rowcount)
