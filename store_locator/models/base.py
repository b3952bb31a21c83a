"""Base model and shared column mixins."""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, MetaData, String, Uuid, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# Naming convention for constraints (helps with migrations)
convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Bare shop names ("acme"); Shopify caps the subdomain well below this
SHOP_LENGTH = 255


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    metadata = MetaData(naming_convention=convention)

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class ShopOwnedMixin:
    """Rows that belong to exactly one shop (many rows per shop)."""

    shop: Mapped[str] = mapped_column(String(SHOP_LENGTH), nullable=False, index=True)


class ShopUniqueMixin:
    """Rows that exist at most once per shop."""

    shop: Mapped[str] = mapped_column(String(SHOP_LENGTH), nullable=False, unique=True)
