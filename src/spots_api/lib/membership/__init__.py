"""List-membership diffing and per-place serialization."""

from spots_api.lib.membership.differ import MembershipDiff, compute_membership_diff
from spots_api.lib.membership.locks import KeyedLock

__all__ = ["KeyedLock", "MembershipDiff", "compute_membership_diff"]
