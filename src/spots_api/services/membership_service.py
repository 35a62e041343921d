"""Membership service — reconcile a spot's list memberships to a desired set.

Reconciliation diffs the persisted memberships against the selection and
applies only the difference. Calls for the same place id are serialized so
two overlapping reconciles cannot interleave their reads and writes.
"""

import uuid
from collections.abc import Iterable
from dataclasses import dataclass, field

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from spots_api.lib.errors import ConflictError, NotFoundError
from spots_api.lib.membership import KeyedLock, compute_membership_diff
from spots_api.schemas.spots import SpotUpsert
from spots_api.services.list_service import (
    add_spot_to_list,
    get_lists_by_ids,
    get_lists_containing_spot,
    get_spot_counts,
    remove_spot_from_list,
)
from spots_api.services.spot_service import get_spot, upsert_spot


@dataclass
class ReconcileResult:
    """Outcome of one reconcile call."""

    place_id: str
    added: list[uuid.UUID] = field(default_factory=list)
    removed: list[uuid.UUID] = field(default_factory=list)
    counts: dict[uuid.UUID, int] = field(default_factory=dict)


class MembershipService:
    """Serialized list-membership synchronizer.

    Args:
        locks: Per-place lock map shared by every caller of this service.
    """

    def __init__(self, locks: KeyedLock | None = None) -> None:
        self._locks = locks or KeyedLock()

    async def get_memberships(
        self,
        session: AsyncSession,
        place_id: str,
        user_id: uuid.UUID | None = None,
    ) -> set[uuid.UUID]:
        """Return the lists that currently contain a spot."""
        return await get_lists_containing_spot(session, place_id, user_id)

    async def reconcile(
        self,
        session: AsyncSession,
        place_id: str,
        desired_list_ids: Iterable[uuid.UUID],
        *,
        user_id: uuid.UUID | None = None,
        spot: SpotUpsert | None = None,
    ) -> ReconcileResult:
        """Make the spot's memberships equal ``desired_list_ids``.

        The spot row is upserted before any membership insert. An insert that
        hits an existing membership counts as success. Removing a membership
        that is already gone is a no-op. When nothing changes, nothing is
        written.

        Args:
            session: Database session. Committed once all changes are applied.
            place_id: Spot being saved.
            desired_list_ids: Lists the spot should be in afterwards.
            user_id: Restrict reads and targets to this user's lists.
            spot: Spot fields to upsert before adding memberships.

        Returns:
            ReconcileResult with the applied changes and counts for touched lists.

        Raises:
            ValueError: If a desired list does not exist or belongs to another user.
            NotFoundError: If lists must be added but no spot row or spot data exists.
        """
        desired = set(desired_list_ids)
        if spot is not None and spot.place_id != place_id:
            msg = f"Spot data is for {spot.place_id}, not {place_id}"
            raise ValueError(msg)

        async with self._locks.hold(place_id):
            current = await get_lists_containing_spot(session, place_id, user_id)
            diff = compute_membership_diff(current, desired)
            if diff.is_noop:
                logger.debug(f"Memberships of {place_id} already up to date")
                return ReconcileResult(place_id=place_id)

            if diff.to_add:
                await self._check_targets(session, diff.to_add, user_id)
                if spot is not None:
                    await upsert_spot(session, spot)
                elif await get_spot(session, place_id) is None:
                    msg = f"Spot {place_id} does not exist; include spot data to save it"
                    raise NotFoundError(msg)

            # Each add commits on its own so a later failure leaves earlier adds applied
            added: list[uuid.UUID] = []
            for list_id in sorted(diff.to_add):
                try:
                    await add_spot_to_list(session, place_id, list_id)
                except ConflictError:
                    logger.debug(f"{place_id} was already in list {list_id}")
                await session.commit()
                added.append(list_id)

            removed: list[uuid.UUID] = []
            for list_id in sorted(diff.to_remove):
                await remove_spot_from_list(session, place_id, list_id)
                removed.append(list_id)

            await session.commit()
            counts = await get_spot_counts(session, diff.touched)

        logger.info(f"Reconciled {place_id}: +{len(added)} -{len(removed)}")
        return ReconcileResult(place_id=place_id, added=added, removed=removed, counts=counts)

    async def _check_targets(
        self,
        session: AsyncSession,
        list_ids: Iterable[uuid.UUID],
        user_id: uuid.UUID | None,
    ) -> None:
        wanted = set(list_ids)
        found = await get_lists_by_ids(session, wanted)
        valid = {ul.id for ul in found if user_id is None or ul.user_id == user_id}
        unknown = wanted - valid
        if unknown:
            names = ", ".join(sorted(str(list_id) for list_id in unknown))
            msg = f"Unknown list(s): {names}"
            raise ValueError(msg)
