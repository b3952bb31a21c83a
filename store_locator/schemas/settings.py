"""Pydantic schemas for locator settings."""

from pydantic import Field

from store_locator.schemas.common import BaseSchema, CamelSchema


class SettingsResponse(BaseSchema):
    """Effective settings for a shop after the fallback chain."""

    store_locator_url: str | None = None
    google_maps_api_key: str | None = None


class SettingsUpdate(BaseSchema):
    """Partial settings update.

    Only fields present in the request body are written. A present empty
    string (or null) clears the field.
    """

    store_locator_url: str | None = Field(default=None, max_length=2048)
    google_maps_api_key: str | None = Field(default=None, max_length=255)


class MetafieldUserError(BaseSchema):
    """A userErrors entry returned by a Shopify metafield mutation."""

    field: list[str] | None = None
    message: str


class SettingsUpdateResult(BaseSchema):
    """Outcome of a best-effort settings update.

    ``success`` is False when any sub-write failed. Writes that succeeded
    before the failure are kept.
    """

    success: bool
    errors: list[MetafieldUserError] = []


class DeleteResult(BaseSchema):
    """Outcome of a delete that is idempotent on the remote side."""

    success: bool


class OverviewResponse(BaseSchema):
    """Admin dashboard summary."""

    shop: str
    store_locator_url: str | None
    google_maps_api_key: str | None
    store_count: int
    embed_synced: bool


class PublicSettings(CamelSchema):
    """Settings as consumed by the storefront widget."""

    google_maps_api_key: str | None
    store_locator_url: str | None
