"""Store directory service: per-shop CRUD for store locations."""

import logging
from enum import Enum
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from store_locator.core.exceptions import StoreNotFoundError
from store_locator.models.store import StoreLocation
from store_locator.schemas.store import StoreCreate, StoreUpdate

logger = logging.getLogger(__name__)


class StoreOrder(str, Enum):
    """Listing orders used by the two surfaces."""

    NEWEST_FIRST = "newest_first"  # admin table
    NAME = "name"  # storefront feed


class StoreService:
    """Business logic for store locations.

    Every operation is scoped to one shop; a row owned by another shop
    behaves exactly like a missing row.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def list_for_shop(
        self, shop: str, order: StoreOrder = StoreOrder.NEWEST_FIRST
    ) -> list[StoreLocation]:
        """List a shop's store locations in the requested order."""
        query = select(StoreLocation).where(StoreLocation.shop == shop)
        if order is StoreOrder.NAME:
            query = query.order_by(StoreLocation.name.asc())
        else:
            query = query.order_by(StoreLocation.created_at.desc())

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def count_for_shop(self, shop: str) -> int:
        """Count a shop's store locations."""
        result = await self.db.execute(
            select(func.count()).select_from(StoreLocation).where(StoreLocation.shop == shop)
        )
        return int(result.scalar_one())

    async def get(self, shop: str, store_id: UUID) -> StoreLocation:
        """Get a store location owned by the shop.

        Raises:
            StoreNotFoundError: If the id does not exist or belongs to another shop.
        """
        result = await self.db.execute(
            select(StoreLocation).where(
                StoreLocation.id == store_id,
                StoreLocation.shop == shop,
            )
        )
        store = result.scalar_one_or_none()
        if not store:
            raise StoreNotFoundError(store_id)
        return store

    async def create(self, shop: str, data: StoreCreate) -> StoreLocation:
        """Create a store location for the shop."""
        store = StoreLocation(shop=shop, **data.model_dump())
        self.db.add(store)
        await self.db.commit()
        await self.db.refresh(store)

        logger.info("Created store %s for shop %s", store.id, shop)
        return store

    async def update(self, shop: str, store_id: UUID, data: StoreUpdate) -> StoreLocation:
        """Replace every mutable field of a store location.

        Raises:
            StoreNotFoundError: If the id does not exist or belongs to another shop.
        """
        store = await self.get(shop, store_id)

        for field, value in data.model_dump().items():
            setattr(store, field, value)

        await self.db.commit()
        await self.db.refresh(store)
        return store

    async def delete(self, shop: str, store_id: UUID) -> None:
        """Delete a store location.

        Raises:
            StoreNotFoundError: If the id does not exist or belongs to another shop.
        """
        store = await self.get(shop, store_id)
        await self.db.delete(store)
        await self.db.commit()

        logger.info("Deleted store %s for shop %s", store_id, shop)
