"""ORM model registry — import all models so Alembic autogenerate discovers them."""

from spots_api.models.spot import Spot
from spots_api.models.spot_list_item import SpotListItem
from spots_api.models.user_list import DEFAULT_LIST_NAMES, ListType, UserList

__all__ = [
    "DEFAULT_LIST_NAMES",
    "ListType",
    "Spot",
    "SpotListItem",
    "UserList",
]
