"""Locator settings endpoints for the embedded admin."""

import logging

from fastapi import APIRouter

from store_locator.core.deps import CurrentShop, DBSession, ShopMetafields
from store_locator.schemas.settings import (
    DeleteResult,
    OverviewResponse,
    SettingsResponse,
    SettingsUpdate,
    SettingsUpdateResult,
)
from store_locator.services.settings_service import SettingsService
from store_locator.services.store_service import StoreService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/settings",
    response_model=SettingsResponse,
    summary="Get settings",
    description="Effective settings after falling back to metafields and deployment defaults.",
)
async def get_settings(
    shop: CurrentShop,
    db: DBSession,
    metafields: ShopMetafields,
) -> SettingsResponse:
    """Get the shop's settings, creating an empty settings row on first read."""
    return await SettingsService(db, metafields).get_settings(shop, create=True)


@router.patch(
    "/settings",
    response_model=SettingsUpdateResult,
    summary="Update settings",
    description=(
        "Write only the fields present in the body. Writes are best-effort: "
        "success is false if any write failed, and successful writes are kept."
    ),
)
async def update_settings(
    data: SettingsUpdate,
    shop: CurrentShop,
    db: DBSession,
    metafields: ShopMetafields,
) -> SettingsUpdateResult:
    """Update the shop's settings."""
    result = await SettingsService(db, metafields).update_settings(shop, data)
    if not result.success:
        logger.warning("Settings update for %s partially failed: %s", shop, result.errors)
    return result


@router.delete(
    "/settings/google-maps-api-key",
    response_model=DeleteResult,
    summary="Delete Google Maps API key",
)
async def delete_google_maps_api_key(
    shop: CurrentShop,
    db: DBSession,
    metafields: ShopMetafields,
) -> DeleteResult:
    """Remove the Maps key. Deleting a key that does not exist succeeds."""
    success = await SettingsService(db, metafields).delete_maps_api_key(shop)
    return DeleteResult(success=success)


@router.get(
    "/overview",
    response_model=OverviewResponse,
    summary="Admin overview",
    description="Dashboard summary. Also publishes the settings to the theme app embed.",
)
async def get_overview(
    shop: CurrentShop,
    db: DBSession,
    metafields: ShopMetafields,
) -> OverviewResponse:
    """Summarize the shop's locator setup and sync the app embed."""
    service = SettingsService(db, metafields)
    effective = await service.get_settings(shop)
    store_count = await StoreService(db).count_for_shop(shop)
    embed_synced = await service.sync_app_embed(effective)

    return OverviewResponse(
        shop=shop,
        store_locator_url=effective.store_locator_url,
        google_maps_api_key=effective.google_maps_api_key,
        store_count=store_count,
        embed_synced=embed_synced,
    )
