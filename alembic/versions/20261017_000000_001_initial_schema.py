"""Initial schema: shop settings, store locations, shop installations.

Revision ID: 001
Revises:
Create Date: 2026-10-17 00:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    ]


def upgrade() -> None:
    # Per-shop locator settings (at most one row per shop)
    op.create_table(
        "shop_settings",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("shop", sa.String(255), nullable=False),
        sa.Column("store_locator_url", sa.Text(), nullable=True),
        sa.Column("google_maps_api_key", sa.String(255), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_shop_settings")),
        sa.UniqueConstraint("shop", name=op.f("uq_shop_settings_shop")),
    )

    # Store directory
    op.create_table(
        "store_locations",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("shop", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("address", sa.Text(), nullable=False),
        sa.Column("latitude", sa.Float(), nullable=True),
        sa.Column("longitude", sa.Float(), nullable=True),
        sa.Column("product_id", sa.String(255), nullable=True),
        sa.Column("collection_id", sa.String(255), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_store_locations")),
    )
    op.create_index(
        op.f("ix_store_locations_shop"),
        "store_locations",
        ["shop"],
        unique=False,
    )

    # Offline Admin API credentials (encrypted)
    op.create_table(
        "shop_installations",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("shop", sa.String(255), nullable=False),
        sa.Column("access_token", sa.Text(), nullable=False),
        sa.Column("scope", sa.String(1024), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_shop_installations")),
        sa.UniqueConstraint("shop", name=op.f("uq_shop_installations_shop")),
    )


def downgrade() -> None:
    op.drop_table("shop_installations")
    op.drop_index(op.f("ix_store_locations_shop"), table_name="store_locations")
    op.drop_table("store_locations")
    op.drop_table("shop_settings")
