"""SpotListItem model: membership of a spot in a list."""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Text, UniqueConstraint, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from spots_api.models.base import Base, UUIDMixin


class SpotListItem(Base, UUIDMixin):
    """One (spot, list) membership with the time it was saved."""

    __tablename__ = "spot_list_items"

    spot_id: Mapped[str] = mapped_column(Text, ForeignKey("spots.place_id", ondelete="CASCADE"), nullable=False)
    list_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("user_lists.id", ondelete="CASCADE"), nullable=False)
    saved_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())

    spot = relationship("Spot", back_populates="list_items", lazy="raise")
    user_list = relationship("UserList", back_populates="items", lazy="raise")

    __table_args__ = (
        UniqueConstraint("spot_id", "list_id", name="uq_spot_list_items_spot_id_list_id"),
        Index("ix_spot_list_items_list_id_saved_at", "list_id", "saved_at"),
        Index("ix_spot_list_items_spot_id", "spot_id"),
    )
