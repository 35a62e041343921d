"""UserList model: a named container of spots owned by one user."""

import enum
import uuid

from sqlalchemy import CheckConstraint, Enum, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from spots_api.models.base import Base, TimestampMixin, UUIDMixin


class ListType(enum.StrEnum):
    """System list kinds. User-defined lists have no type."""

    STARRED = "starred"
    FAVORITES = "favorites"
    BUCKET_LIST = "bucket_list"


DEFAULT_LIST_NAMES: dict[ListType, str] = {
    ListType.STARRED: "Starred",
    ListType.FAVORITES: "Favorites",
    ListType.BUCKET_LIST: "Bucket List",
}


class UserList(Base, UUIDMixin, TimestampMixin):
    """A system or custom list. At most one list per (user, list_type)."""

    __tablename__ = "user_lists"

    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
    list_type: Mapped[ListType | None] = mapped_column(
        Enum(ListType, name="list_type", values_callable=lambda e: [m.value for m in e]),
        nullable=True,
    )
    name: Mapped[str | None] = mapped_column(Text, nullable=True)

    items = relationship("SpotListItem", back_populates="user_list", lazy="raise", passive_deletes=True)

    __table_args__ = (
        UniqueConstraint("user_id", "list_type", name="uq_user_lists_user_id_list_type"),
        CheckConstraint("name IS NOT NULL OR list_type IS NOT NULL", name="name_or_type"),
    )

    @property
    def display_name(self) -> str:
        """The custom name, or the default name of the system kind."""
        if self.name:
            return self.name
        if self.list_type is not None:
            return DEFAULT_LIST_NAMES[ListType(self.list_type)]
        return ""
