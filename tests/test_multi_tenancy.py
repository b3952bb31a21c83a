"""Tests for multi-tenancy isolation.

Verifies that the admin for shop A cannot see or change shop B's data,
and that each shop's public feed only exposes its own stores and settings.

Uses:
- ``client`` (authenticated as TEST_SHOP)
- ``store`` (belongs to TEST_SHOP)
- ``other_store`` (belongs to OTHER_SHOP)
"""

from typing import Any

from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from store_locator.models.store import StoreLocation
from tests.conftest import OTHER_SHOP

# ---------------------------------------------------------------------------
# Store CRUD isolation
# ---------------------------------------------------------------------------


class TestStoreTenancy:
    """Verify store CRUD is scoped to the authenticated shop."""

    async def test_list_stores_only_returns_own_shop(
        self, client: AsyncClient, store: StoreLocation, other_store: StoreLocation
    ) -> None:
        """GET /stores only returns stores of the authenticated shop."""
        response = await client.get("/api/v1/stores")
        assert response.status_code == 200

        store_ids = [s["id"] for s in response.json()["items"]]
        assert store_ids == [str(store.id)]
        assert str(other_store.id) not in store_ids

    async def test_get_other_shop_store_returns_404(
        self, client: AsyncClient, other_store: StoreLocation
    ) -> None:
        """Another shop's store looks exactly like a missing one."""
        response = await client.get(f"/api/v1/stores/{other_store.id}")
        assert response.status_code == 404

    async def test_update_other_shop_store_returns_404(
        self,
        client: AsyncClient,
        other_store: StoreLocation,
        session_factory: async_sessionmaker[AsyncSession],
    ) -> None:
        """Cannot replace another shop's store, and the row is untouched."""
        response = await client.put(
            f"/api/v1/stores/{other_store.id}",
            json={"name": "Hacked", "address": "Nowhere"},
        )
        assert response.status_code == 404

        async with session_factory() as session:
            row = await session.get(StoreLocation, other_store.id)
        assert row is not None
        assert row.name == "Globex HQ"

    async def test_delete_other_shop_store_returns_404(
        self,
        client: AsyncClient,
        other_store: StoreLocation,
        session_factory: async_sessionmaker[AsyncSession],
    ) -> None:
        """Cannot delete another shop's store, and the row survives."""
        response = await client.delete(f"/api/v1/stores/{other_store.id}")
        assert response.status_code == 404

        async with session_factory() as session:
            assert await session.get(StoreLocation, other_store.id) is not None

    async def test_store_count_only_counts_own_shop(
        self,
        client: AsyncClient,
        store: StoreLocation,  # noqa: ARG002  # Ensures store exists in DB
        other_store: StoreLocation,  # noqa: ARG002
    ) -> None:
        """The overview counts only the authenticated shop's stores."""
        response = await client.get("/api/v1/overview")
        assert response.status_code == 200
        assert response.json()["store_count"] == 1


# ---------------------------------------------------------------------------
# Settings isolation
# ---------------------------------------------------------------------------


class TestSettingsTenancy:
    """Verify local settings rows are per shop."""

    async def test_other_shop_settings_not_visible(
        self, client: AsyncClient, settings_factory: Any
    ) -> None:
        """Another shop's locator URL never leaks into the admin settings."""
        await settings_factory(shop=OTHER_SHOP, store_locator_url="https://globex.test/find")

        response = await client.get("/api/v1/settings")
        assert response.status_code == 200
        assert response.json()["store_locator_url"] is None


# ---------------------------------------------------------------------------
# Public feed isolation
# ---------------------------------------------------------------------------


class TestPublicFeedTenancy:
    """Verify the storefront feed only exposes the requested shop."""

    async def test_stores_feed_only_returns_requested_shop(
        self, client: AsyncClient, store: StoreLocation, other_store: StoreLocation
    ) -> None:
        """Each shop's feed lists only that shop's stores."""
        acme = await client.get("/api/stores", params={"shop": "acme.myshopify.com"})
        globex = await client.get("/api/stores", params={"shop": OTHER_SHOP})

        assert [s["id"] for s in acme.json()] == [str(store.id)]
        assert [s["id"] for s in globex.json()] == [str(other_store.id)]

    async def test_unknown_shop_gets_empty_list(
        self, client: AsyncClient, store: StoreLocation  # noqa: ARG002
    ) -> None:
        """A shop with no stores gets an empty array, not someone else's."""
        response = await client.get("/api/stores", params={"shop": "initech"})
        assert response.status_code == 200
        assert response.json() == []
