"""Dependency injection for FastAPI routes."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

# Re-export auth dependencies for convenience
from store_locator.core.auth import CurrentShop, get_current_shop
from store_locator.core.database import get_async_session
from store_locator.core.shop import normalize_shop_domain
from store_locator.services.metafield_service import MetafieldService


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield a database session for the request."""
    async for session in get_async_session():
        yield session


# Database session dependency
DBSession = Annotated[AsyncSession, Depends(get_db)]


async def get_shop_metafields(shop: CurrentShop, db: DBSession) -> MetafieldService | None:
    """Metafield access for the authenticated admin's shop."""
    return await MetafieldService.for_shop(db, shop)


async def get_public_metafields(
    db: DBSession,
    shop: str | None = Query(default=None),
) -> MetafieldService | None:
    """Metafield access for the shop named in the public feed's query string.

    Returns None when the parameter is missing; the route reports that.
    """
    if not shop:
        return None
    return await MetafieldService.for_shop(db, normalize_shop_domain(shop))


ShopMetafields = Annotated[MetafieldService | None, Depends(get_shop_metafields)]
PublicMetafields = Annotated[MetafieldService | None, Depends(get_public_metafields)]


__all__ = [
    "CurrentShop",
    "DBSession",
    "PublicMetafields",
    "ShopMetafields",
    "get_current_shop",
    "get_db",
    "get_public_metafields",
    "get_shop_metafields",
]
