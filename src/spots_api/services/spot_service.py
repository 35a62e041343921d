"""Spot service — upsert, lookup, and photo/location updates for the spots table."""

from loguru import logger
from sqlalchemy import func, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from spots_api.lib.places.base import BasePlacesProvider, PlaceRecord
from spots_api.models.spot import Spot
from spots_api.schemas.spots import SpotUpsert


def spot_from_place(record: PlaceRecord) -> SpotUpsert:
    """Build upsert fields from an upstream place record."""
    return SpotUpsert(
        place_id=record.place_id,
        name=record.name,
        address=record.address,
        city=record.city,
        latitude=record.latitude,
        longitude=record.longitude,
        types=list(record.types),
        photo_reference=record.photo_reference,
    )


def _upsert_statement(session: AsyncSession, rows: list[dict]):  # type: ignore[no-untyped-def]
    """Build INSERT .. ON CONFLICT (place_id) DO UPDATE for the session's dialect.

    Photo fields and city use COALESCE so a NULL in the incoming row keeps
    the stored value; the other fields take the incoming value.
    """
    dialect = session.get_bind().dialect.name
    insert = pg_insert if dialect == "postgresql" else sqlite_insert
    stmt = insert(Spot).values(rows)
    excluded = stmt.excluded
    return stmt.on_conflict_do_update(
        index_elements=[Spot.place_id],
        set_={
            "name": excluded.name,
            "address": excluded.address,
            "city": func.coalesce(excluded.city, Spot.city),
            "latitude": excluded.latitude,
            "longitude": excluded.longitude,
            "types": excluded.types,
            "photo_url": func.coalesce(excluded.photo_url, Spot.photo_url),
            "photo_reference": func.coalesce(excluded.photo_reference, Spot.photo_reference),
            "updated_at": func.now(),
        },
    )


async def upsert_spot(session: AsyncSession, data: SpotUpsert) -> Spot:
    """Insert a spot or update it in place.

    ON CONFLICT (place_id) DO UPDATE, never replacing a stored photo_url or
    photo_reference with NULL. The caller commits.

    Args:
        session: Database session.
        data: Spot fields.

    Returns:
        The upserted Spot row.
    """
    stmt = _upsert_statement(session, [data.model_dump()]).returning(Spot)
    result = await session.execute(stmt, execution_options={"populate_existing": True})
    spot = result.scalar_one()
    await session.flush()
    return spot


async def bulk_upsert_spots(session: AsyncSession, spots: list[SpotUpsert]) -> int:
    """Upsert many spots in one statement. The caller commits.

    Duplicate place ids within the batch keep the last occurrence, since a
    single INSERT .. ON CONFLICT cannot touch one row twice.

    Args:
        session: Database session.
        spots: Spot fields to write.

    Returns:
        Number of rows written.
    """
    unique = {spot.place_id: spot.model_dump() for spot in spots}
    if not unique:
        return 0
    await session.execute(_upsert_statement(session, list(unique.values())))
    await session.flush()
    logger.debug(f"Bulk upserted {len(unique)} spot(s)")
    return len(unique)


async def get_spot(session: AsyncSession, place_id: str) -> Spot | None:
    """Look up a spot by place id."""
    result = await session.execute(select(Spot).where(Spot.place_id == place_id))
    return result.scalar_one_or_none()


async def get_spot_photo_url(session: AsyncSession, place_id: str) -> str | None:
    """Return the durable photo URL of a spot, or None if missing or empty."""
    result = await session.execute(select(Spot.photo_url).where(Spot.place_id == place_id))
    url = result.scalar_one_or_none()
    return url or None


async def get_photo_urls(session: AsyncSession, place_ids: list[str]) -> dict[str, str]:
    """Return durable photo URLs for the given place ids that have one."""
    if not place_ids:
        return {}
    result = await session.execute(
        select(Spot.place_id, Spot.photo_url).where(Spot.place_id.in_(place_ids), Spot.photo_url.is_not(None))
    )
    return {place_id: url for place_id, url in result.all() if url}


async def set_spot_photo(session: AsyncSession, place_id: str, photo_url: str, photo_reference: str) -> bool:
    """Record a mirrored photo on an existing spot without touching other fields.

    The caller commits.

    Args:
        session: Database session.
        place_id: Spot to update.
        photo_url: Durable URL in object storage.
        photo_reference: Upstream reference the photo came from.

    Returns:
        True if a spot row was updated.
    """
    result = await session.execute(
        update(Spot)
        .where(Spot.place_id == place_id)
        .values(photo_url=photo_url, photo_reference=photo_reference, updated_at=func.now())
    )
    return bool(result.rowcount)


async def update_spot_location(session: AsyncSession, place_id: str, latitude: float, longitude: float) -> Spot | None:
    """Move a spot's stored coordinate.

    Args:
        session: Database session.
        place_id: Spot to update.
        latitude: New latitude.
        longitude: New longitude.

    Returns:
        The updated Spot, or None if it does not exist.
    """
    spot = await get_spot(session, place_id)
    if spot is None:
        return None
    spot.latitude = latitude
    spot.longitude = longitude
    await session.commit()
    await session.refresh(spot)
    return spot


async def get_or_fetch_spot(session: AsyncSession, provider: BasePlacesProvider, place_id: str) -> Spot | None:
    """Return a spot from the database, fetching and storing it on a miss.

    A stored spot is returned without contacting the provider.

    Args:
        session: Database session.
        provider: Places provider used on a database miss.
        place_id: Upstream place identifier.

    Returns:
        The Spot, or None if the provider does not know the place.

    Raises:
        ConfigurationError: If the provider key is missing or rejected.
        NetworkError: If the provider lookup fails.
    """
    spot = await get_spot(session, place_id)
    if spot is not None:
        logger.debug(f"Spot {place_id} served from database")
        return spot

    record = await provider.fetch_place(place_id)
    if record is None:
        return None

    spot = await upsert_spot(session, spot_from_place(record))
    await session.commit()
    return spot


async def get_spots_missing_photos(session: AsyncSession, limit: int | None = None) -> list[tuple[str, str]]:
    """Return (place_id, photo_reference) for spots with a reference but no durable URL.

    Args:
        session: Database session.
        limit: Maximum rows returned, oldest updates first.

    Returns:
        List of (place_id, photo_reference) pairs.
    """
    stmt = (
        select(Spot.place_id, Spot.photo_reference)
        .where(Spot.photo_url.is_(None), Spot.photo_reference.is_not(None))
        .order_by(Spot.updated_at, Spot.place_id)
    )
    if limit is not None:
        stmt = stmt.limit(limit)
    result = await session.execute(stmt)
    return [(place_id, reference) for place_id, reference in result.all()]
