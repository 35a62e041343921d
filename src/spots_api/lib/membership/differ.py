"""Membership diff: the minimal adds and removes to reach a desired set of lists."""

import uuid
from dataclasses import dataclass


@dataclass(frozen=True)
class MembershipDiff:
    """Changes needed to move a spot's memberships from current to desired."""

    to_add: frozenset[uuid.UUID]
    to_remove: frozenset[uuid.UUID]
    unchanged: frozenset[uuid.UUID]

    @property
    def is_noop(self) -> bool:
        """True when current already equals desired."""
        return not self.to_add and not self.to_remove

    @property
    def touched(self) -> frozenset[uuid.UUID]:
        """Lists whose membership count changes."""
        return self.to_add | self.to_remove


def compute_membership_diff(
    current_list_ids: set[uuid.UUID] | frozenset[uuid.UUID],
    desired_list_ids: set[uuid.UUID] | frozenset[uuid.UUID],
) -> MembershipDiff:
    """Compare persisted memberships with the desired selection.

    Args:
        current_list_ids: Lists the spot belongs to now.
        desired_list_ids: Lists the spot should belong to.

    Returns:
        MembershipDiff with ``to_add = desired - current`` and
        ``to_remove = current - desired``.
    """
    current = frozenset(current_list_ids)
    desired = frozenset(desired_list_ids)
    return MembershipDiff(
        to_add=desired - current,
        to_remove=current - desired,
        unchanged=current & desired,
    )
