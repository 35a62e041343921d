"""Spot model: a persisted place keyed by its upstream place id."""

from sqlalchemy import JSON, Double, String, Text
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column, relationship

from spots_api.models.base import Base, TimestampMixin

# TEXT[] on PostgreSQL, JSON elsewhere (SQLite in tests)
PlaceTypes = JSON().with_variant(ARRAY(String), "postgresql")


class Spot(Base, TimestampMixin):
    """A place saved or enriched at least once.

    Writes touching more than one column go through the upsert in
    ``spot_service`` so a stored ``photo_url`` is never replaced by NULL.
    """

    __tablename__ = "spots"

    place_id: Mapped[str] = mapped_column(Text, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    city: Mapped[str | None] = mapped_column(Text, nullable=True)
    latitude: Mapped[float | None] = mapped_column(Double, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Double, nullable=True)
    types: Mapped[list[str] | None] = mapped_column(PlaceTypes, nullable=True)
    photo_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    photo_reference: Mapped[str | None] = mapped_column(Text, nullable=True)

    list_items = relationship("SpotListItem", back_populates="spot", lazy="raise", passive_deletes=True)
