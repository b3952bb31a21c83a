"""Settings resolution and updates for the store locator.

Persistence per field:

- ``store_locator_url`` is written to the local ``shop_settings`` row only.
  Reads fall back to the legacy ``store_locator.store_locator_url`` shop
  metafield, then to the configured ``default_locator_url``.
- ``google_maps_api_key`` is written to exactly one place, chosen by
  ``settings.maps_key_storage``: the ``store_locator.google_maps_api_key``
  shop metafield (default) or the local row. Reads prefer the local row and
  fall back to the metafield.

Updates are best-effort: each field is written independently and a failed
write does not undo the ones before it.
"""

import asyncio
import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from store_locator.core.config import settings
from store_locator.models.settings import ShopSettings
from store_locator.schemas.settings import (
    MetafieldUserError,
    SettingsResponse,
    SettingsUpdate,
    SettingsUpdateResult,
)
from store_locator.services.metafield_service import (
    GOOGLE_MAPS_API_KEY,
    STORE_LOCATOR_URL,
    MetafieldField,
    MetafieldService,
)

logger = logging.getLogger(__name__)

NOT_INSTALLED_MESSAGE = "The app is not installed on this shop."
LOCAL_WRITE_FAILED_MESSAGE = "Could not save settings. Please try again."


def default_locator_url(shop: str) -> str | None:
    """The deployment's default locator URL for a shop, if configured."""
    template = settings.default_locator_url
    if not template:
        return None
    return template.replace("{shop}", shop)


class SettingsService:
    """Business logic for per-shop locator settings."""

    def __init__(self, db: AsyncSession, metafields: MetafieldService | None) -> None:
        self.db = db
        self.metafields = metafields

    async def get_settings(self, shop: str, *, create: bool = False) -> SettingsResponse:
        """Resolve the effective settings for a shop.

        The local row and the remote Maps key are fetched concurrently.
        Remote failures resolve to None; this never raises for them.

        Args:
            shop: Normalized shop name.
            create: Create an empty local row if the shop has none.
        """
        local_lookup = self._get_or_create_local(shop) if create else self._get_local(shop)
        local, remote_key = await asyncio.gather(
            local_lookup,
            self._get_remote(GOOGLE_MAPS_API_KEY),
        )

        google_maps_api_key = (local.google_maps_api_key if local else None) or remote_key

        store_locator_url = local.store_locator_url if local else None
        if not store_locator_url:
            store_locator_url = await self._get_remote(STORE_LOCATOR_URL)
        if not store_locator_url:
            store_locator_url = default_locator_url(shop)

        return SettingsResponse(
            store_locator_url=store_locator_url,
            google_maps_api_key=google_maps_api_key,
        )

    async def update_settings(self, shop: str, data: SettingsUpdate) -> SettingsUpdateResult:
        """Write the fields present in ``data``.

        Absent fields are untouched. Applying the same update twice leaves
        the same state.
        """
        fields = data.model_dump(exclude_unset=True)
        errors: list[MetafieldUserError] = []

        local_fields: dict[str, Any] = {}
        if "store_locator_url" in fields:
            local_fields["store_locator_url"] = fields["store_locator_url"]
        if "google_maps_api_key" in fields and settings.maps_key_storage == "local":
            local_fields["google_maps_api_key"] = fields["google_maps_api_key"]

        if local_fields and not await self._write_local(shop, local_fields):
            errors.append(MetafieldUserError(message=LOCAL_WRITE_FAILED_MESSAGE))

        if "google_maps_api_key" in fields and settings.maps_key_storage == "metafield":
            errors.extend(await self._write_remote_key(fields["google_maps_api_key"]))

        return SettingsUpdateResult(success=not errors, errors=errors)

    async def delete_maps_api_key(self, shop: str) -> bool:
        """Remove the Google Maps API key. Succeeds if it is already gone."""
        if settings.maps_key_storage == "local":
            return await self._write_local(shop, {"google_maps_api_key": None})

        if self.metafields is None:
            logger.warning("Cannot delete Maps key for %s: %s", shop, NOT_INSTALLED_MESSAGE)
            return False
        return await self.metafields.delete(GOOGLE_MAPS_API_KEY)

    async def sync_app_embed(self, effective: SettingsResponse) -> bool:
        """Push the effective settings to the theme app embed."""
        if self.metafields is None:
            return False
        return await self.metafields.sync_app_embed(
            google_maps_api_key=effective.google_maps_api_key,
            store_locator_url=effective.store_locator_url,
        )

    async def _get_local(self, shop: str) -> ShopSettings | None:
        result = await self.db.execute(select(ShopSettings).where(ShopSettings.shop == shop))
        return result.scalar_one_or_none()

    async def _get_or_create_local(self, shop: str) -> ShopSettings:
        row = await self._get_local(shop)
        if row is not None:
            return row

        row = ShopSettings(shop=shop)
        self.db.add(row)
        try:
            await self.db.commit()
        except IntegrityError:
            # Another request created it first
            await self.db.rollback()
            result = await self.db.execute(select(ShopSettings).where(ShopSettings.shop == shop))
            return result.scalar_one()
        await self.db.refresh(row)
        return row

    async def _get_remote(self, field: MetafieldField) -> str | None:
        if self.metafields is None:
            return None
        return await self.metafields.get(field)

    async def _write_local(self, shop: str, values: dict[str, Any]) -> bool:
        try:
            row = await self._get_or_create_local(shop)
            for name, value in values.items():
                setattr(row, name, value)
            await self.db.commit()
        except SQLAlchemyError:
            logger.exception("Failed to save settings for shop %s", shop)
            await self.db.rollback()
            return False
        return True

    async def _write_remote_key(self, value: str | None) -> list[MetafieldUserError]:
        if self.metafields is None:
            return [MetafieldUserError(message=NOT_INSTALLED_MESSAGE)]

        # Metafields cannot hold blank values, so clearing the key deletes it
        if not value:
            if await self.metafields.delete(GOOGLE_MAPS_API_KEY):
                return []
            return [MetafieldUserError(message="Could not remove the Google Maps API key.")]

        await self.metafields.ensure_definition(
            GOOGLE_MAPS_API_KEY,
            name="Google Maps API Key",
            description="API key for Google Maps integration",
        )
        user_errors = await self.metafields.set(GOOGLE_MAPS_API_KEY, value)
        return [MetafieldUserError.model_validate(e) for e in user_errors]
