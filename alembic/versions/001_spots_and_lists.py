"""Initial migration: spots, user_lists, spot_list_items, and list SQL functions.

Revision ID: 001
Revises: None
Create Date: 2026-10-18
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects.postgresql import ARRAY, ENUM, UUID

revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

list_type_enum = ENUM("starred", "favorites", "bucket_list", name="list_type", create_type=False)


def upgrade() -> None:
    list_type_enum.create(op.get_bind(), checkfirst=True)

    # Create spots table
    op.create_table(
        "spots",
        sa.Column("place_id", sa.Text, primary_key=True),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("address", sa.Text, nullable=True),
        sa.Column("city", sa.Text, nullable=True),
        sa.Column("latitude", sa.Double, nullable=True),
        sa.Column("longitude", sa.Double, nullable=True),
        sa.Column("types", ARRAY(sa.String), nullable=True),
        sa.Column("photo_url", sa.Text, nullable=True),
        sa.Column("photo_reference", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("place_id", name="pk_spots"),
    )

    # Create user_lists table; ids default server-side so the SQL functions can insert
    op.create_table(
        "user_lists",
        sa.Column("id", UUID(as_uuid=True), server_default=sa.text("gen_random_uuid()"), nullable=False),
        sa.Column("user_id", UUID(as_uuid=True), nullable=False),
        sa.Column("list_type", list_type_enum, nullable=True),
        sa.Column("name", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_user_lists"),
        sa.UniqueConstraint("user_id", "list_type", name="uq_user_lists_user_id_list_type"),
        sa.CheckConstraint("name IS NOT NULL OR list_type IS NOT NULL", name="ck_user_lists_name_or_type"),
    )
    op.create_index("ix_user_lists_user_id", "user_lists", ["user_id"])

    # Create spot_list_items table
    op.create_table(
        "spot_list_items",
        sa.Column("id", UUID(as_uuid=True), server_default=sa.text("gen_random_uuid()"), nullable=False),
        sa.Column("spot_id", sa.Text, nullable=False),
        sa.Column("list_id", UUID(as_uuid=True), nullable=False),
        sa.Column("saved_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_spot_list_items"),
        sa.ForeignKeyConstraint(
            ["spot_id"],
            ["spots.place_id"],
            name="fk_spot_list_items_spot_id_spots",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["list_id"],
            ["user_lists.id"],
            name="fk_spot_list_items_list_id_user_lists",
            ondelete="CASCADE",
        ),
        sa.UniqueConstraint("spot_id", "list_id", name="uq_spot_list_items_spot_id_list_id"),
    )
    op.create_index("ix_spot_list_items_list_id_saved_at", "spot_list_items", ["list_id", "saved_at"])
    op.create_index("ix_spot_list_items_spot_id", "spot_list_items", ["spot_id"])

    # SQL functions for clients that call the database directly
    op.execute(
        """
        CREATE OR REPLACE FUNCTION upsert_spot(
            p_place_id TEXT,
            p_name TEXT,
            p_address TEXT,
            p_latitude DOUBLE PRECISION,
            p_longitude DOUBLE PRECISION,
            p_types TEXT[],
            p_photo_url TEXT DEFAULT NULL,
            p_photo_reference TEXT DEFAULT NULL,
            p_city TEXT DEFAULT NULL
        )
        RETURNS TEXT
        LANGUAGE plpgsql
        AS $$
        BEGIN
            INSERT INTO spots (
                place_id, name, address, city, latitude, longitude, types,
                photo_url, photo_reference, created_at, updated_at
            )
            VALUES (
                p_place_id, p_name, p_address, p_city, p_latitude, p_longitude, p_types,
                p_photo_url, p_photo_reference, NOW(), NOW()
            )
            ON CONFLICT (place_id) DO UPDATE
            SET
                name = EXCLUDED.name,
                address = EXCLUDED.address,
                city = COALESCE(EXCLUDED.city, spots.city),
                latitude = EXCLUDED.latitude,
                longitude = EXCLUDED.longitude,
                types = EXCLUDED.types,
                photo_url = COALESCE(EXCLUDED.photo_url, spots.photo_url),
                photo_reference = COALESCE(EXCLUDED.photo_reference, spots.photo_reference),
                updated_at = NOW();
            RETURN p_place_id;
        END;
        $$
        """
    )
    op.execute(
        """
        CREATE OR REPLACE FUNCTION create_default_lists_for_user(p_user_id UUID)
        RETURNS void
        LANGUAGE plpgsql
        AS $$
        BEGIN
            INSERT INTO user_lists (user_id, list_type, name)
            VALUES
                (p_user_id, 'starred', NULL),
                (p_user_id, 'favorites', NULL),
                (p_user_id, 'bucket_list', NULL)
            ON CONFLICT (user_id, list_type) DO NOTHING;
        END;
        $$
        """
    )
    op.execute(
        """
        CREATE OR REPLACE FUNCTION get_list_spot_count(p_list_id UUID)
        RETURNS INTEGER
        LANGUAGE sql
        STABLE
        AS $$
            SELECT COUNT(*)::INTEGER FROM spot_list_items WHERE list_id = p_list_id;
        $$
        """
    )


def downgrade() -> None:
    op.execute("DROP FUNCTION IF EXISTS get_list_spot_count(UUID)")
    op.execute("DROP FUNCTION IF EXISTS create_default_lists_for_user(UUID)")
    op.execute(
        "DROP FUNCTION IF EXISTS upsert_spot(TEXT, TEXT, TEXT, DOUBLE PRECISION, DOUBLE PRECISION, TEXT[], TEXT, TEXT, TEXT)"
    )
    op.drop_table("spot_list_items")
    op.drop_table("user_lists")
    op.drop_table("spots")
    list_type_enum.drop(op.get_bind(), checkfirst=True)
