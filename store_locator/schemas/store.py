"""Pydantic schemas for store location CRUD and the public store feed."""

import math
import re
from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import Field, computed_field, field_validator

from store_locator.schemas.common import BaseSchema, CamelSchema

PRODUCT_GID_PREFIX = "gid://shopify/Product/"
COLLECTION_GID_PREFIX = "gid://shopify/Collection/"

LEADING_NUMBER = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def coerce_coordinate(value: Any) -> float | None:
    """Parse a coordinate leniently.

    Strings are read up to the end of their leading number, so ``"40.7 N"``
    gives 40.7. Absent, empty, unparsable and non-finite values become None.
    Range is not checked.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        match = LEADING_NUMBER.match(value.strip())
        if match is None:
            return None
        value = match.group()
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return None
    return parsed if math.isfinite(parsed) else None


# === Store CRUD Schemas ===


class StoreFields(BaseSchema):
    """Mutable fields of a store location."""

    name: str = Field(..., max_length=255, description="Store name")
    address: str = Field(..., description="Free-text street address")
    latitude: float | None = Field(default=None, description="Latitude, stored as given")
    longitude: float | None = Field(default=None, description="Longitude, stored as given")
    product_id: str | None = Field(default=None, description="Linked product GID")
    collection_id: str | None = Field(default=None, description="Linked collection GID")

    @field_validator("latitude", "longitude", mode="before")
    @classmethod
    def _parse_coordinate(cls, value: Any) -> float | None:
        return coerce_coordinate(value)

    @field_validator("product_id", "collection_id", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class StoreCreate(StoreFields):
    """Schema for creating a store location."""


class StoreUpdate(StoreFields):
    """Schema for replacing a store location's fields (full update)."""


class StoreResponse(BaseSchema):
    """Schema for a store location in the admin API."""

    id: UUID
    shop: str
    name: str
    address: str
    latitude: float | None
    longitude: float | None
    product_id: str | None
    collection_id: str | None
    created_at: datetime
    updated_at: datetime

    @computed_field  # type: ignore[prop-decorator]
    @property
    def linked_resource(self) -> str | None:
        """Short label for the linked product or collection."""
        if self.product_id:
            return f"Product: {self.product_id.removeprefix(PRODUCT_GID_PREFIX)}"
        if self.collection_id:
            return f"Collection: {self.collection_id.removeprefix(COLLECTION_GID_PREFIX)}"
        return None


class StoreListResponse(BaseSchema):
    """Schema for listing store locations."""

    items: list[StoreResponse]
    total: int


# === Public Feed Schemas ===


class PublicStore(CamelSchema):
    """A store location as consumed by the storefront widget."""

    id: UUID
    name: str
    address: str
    latitude: float | None
    longitude: float | None
    product_id: str | None
    collection_id: str | None
