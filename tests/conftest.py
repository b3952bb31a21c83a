"""Pytest configuration and fixtures for the store locator test suite.

Provides:
- A throwaway SQLite database per test (tables created from the models)
- Mock authentication (session token bypass) for a fixed test shop
- An in-memory stand-in for the shop's metafields
- Disabled rate limiting
- Model factory fixtures for StoreLocation, ShopSettings and ShopInstallation
"""

from collections.abc import AsyncGenerator, Callable, Generator
from datetime import datetime
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from store_locator.core.auth import get_current_shop
from store_locator.core.database import get_async_session
from store_locator.core.deps import get_db, get_public_metafields, get_shop_metafields
from store_locator.core.encryption import encrypt_access_token
from store_locator.core.rate_limit import limiter
from store_locator.main import app
from store_locator.models.base import Base
from store_locator.models.installation import ShopInstallation
from store_locator.models.settings import ShopSettings
from store_locator.models.store import StoreLocation
from store_locator.services.metafield_service import MetafieldField

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
TEST_SHOP = "acme"
OTHER_SHOP = "globex"

SHOPIFY_TEST_CLIENT_ID = "test-shopify-client-id"
SHOPIFY_TEST_CLIENT_SECRET = "test-shopify-client-secret-with-enough-bytes"

# ---------------------------------------------------------------------------
# Disable rate limiting globally for tests
# ---------------------------------------------------------------------------
limiter.enabled = False


@pytest.fixture(autouse=True)
def set_test_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    """Pin the settings every test relies on.

    This is autouse=True so a developer's .env never leaks into the suite.
    """
    monkeypatch.setattr(
        "store_locator.core.config.settings.shopify_client_id", SHOPIFY_TEST_CLIENT_ID
    )
    monkeypatch.setattr(
        "store_locator.core.config.settings.shopify_client_secret", SHOPIFY_TEST_CLIENT_SECRET
    )
    monkeypatch.setattr("store_locator.core.config.settings.default_locator_url", "")
    monkeypatch.setattr("store_locator.core.config.settings.maps_key_storage", "metafield")
    monkeypatch.setattr("store_locator.core.config.settings.app_url", "https://locator.test")


# ---------------------------------------------------------------------------
# Per-test database
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def session_factory(tmp_path: Path) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Create the schema in a fresh SQLite file and hand out sessions on it.

    NullPool gives every session its own connection, like separate requests
    against the real database.
    """
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        echo=False,
        poolclass=NullPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Provide a database session for test setup (factory fixtures)."""
    async with session_factory() as session:
        yield session


# ---------------------------------------------------------------------------
# Shop metafields
# ---------------------------------------------------------------------------


class FakeMetafields:
    """In-memory shop metafields with the MetafieldService interface.

    Methods are AsyncMocks wrapping the dict, so tests can both inspect the
    stored values and assert on calls or inject failures.
    """

    def __init__(self) -> None:
        self.values: dict[tuple[str, str], str] = {}

        async def _get(field: MetafieldField) -> str | None:
            return self.values.get((field.namespace, field.key))

        async def _set(field: MetafieldField, value: str) -> list[dict[str, Any]]:
            self.values[(field.namespace, field.key)] = value
            return []

        async def _delete(field: MetafieldField) -> bool:
            self.values.pop((field.namespace, field.key), None)
            return True

        self.get = AsyncMock(side_effect=_get)
        self.set = AsyncMock(side_effect=_set)
        self.delete = AsyncMock(side_effect=_delete)
        self.ensure_definition = AsyncMock(return_value=True)
        self.sync_app_embed = AsyncMock(return_value=True)


@pytest.fixture
def fake_metafields() -> FakeMetafields:
    """Provide empty shop metafields per test."""
    return FakeMetafields()


# ---------------------------------------------------------------------------
# Authenticated client (overrides DB, metafields, auth)
# ---------------------------------------------------------------------------


def _override_db(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[[], AsyncGenerator[AsyncSession, None]]:
    async def _override_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as s:
            yield s

    return _override_session


@pytest_asyncio.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
    fake_metafields: FakeMetafields,
) -> AsyncGenerator[AsyncClient, None]:
    """Admin test client authenticated as TEST_SHOP.

    The public feed resolves metafields to the same fake, whatever shop is
    requested.
    """

    async def _override_shop() -> str:
        return TEST_SHOP

    async def _override_metafields() -> FakeMetafields:
        return fake_metafields

    override_session = _override_db(session_factory)
    app.dependency_overrides[get_async_session] = override_session
    app.dependency_overrides[get_db] = override_session
    app.dependency_overrides[get_current_shop] = _override_shop
    app.dependency_overrides[get_shop_metafields] = _override_metafields
    app.dependency_overrides[get_public_metafields] = _override_metafields

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Unauthenticated client (overrides DB only; real session token checks)
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def unauthed_client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    """Test client without an auth bypass. Metafields resolve from installations."""
    override_session = _override_db(session_factory)
    app.dependency_overrides[get_async_session] = override_session
    app.dependency_overrides[get_db] = override_session

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Lightweight client (no DB, no auth; for stateless endpoint tests)
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def plain_client() -> AsyncGenerator[AsyncClient, None]:
    """Minimal async test client with NO dependency overrides."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# ---------------------------------------------------------------------------
# Model Factories
# ---------------------------------------------------------------------------


@pytest.fixture
def store_factory(db_session: AsyncSession) -> Callable[..., Any]:
    """Factory that creates StoreLocation rows in the test database.

    SQLite timestamps have one-second resolution, so pass ``created_at``
    when a test depends on creation order.
    """

    async def _create(
        *,
        shop: str = TEST_SHOP,
        name: str = "Downtown",
        address: str = "1 Main St",
        latitude: float | None = 40.7,
        longitude: float | None = -74.0,
        product_id: str | None = None,
        collection_id: str | None = None,
        created_at: datetime | None = None,
    ) -> StoreLocation:
        store = StoreLocation(
            shop=shop,
            name=name,
            address=address,
            latitude=latitude,
            longitude=longitude,
            product_id=product_id,
            collection_id=collection_id,
        )
        if created_at is not None:
            store.created_at = created_at
        db_session.add(store)
        await db_session.commit()
        await db_session.refresh(store)
        return store

    return _create


@pytest.fixture
def settings_factory(db_session: AsyncSession) -> Callable[..., Any]:
    """Factory that creates the local ShopSettings row for a shop."""

    async def _create(
        *,
        shop: str = TEST_SHOP,
        store_locator_url: str | None = None,
        google_maps_api_key: str | None = None,
    ) -> ShopSettings:
        row = ShopSettings(
            shop=shop,
            store_locator_url=store_locator_url,
            google_maps_api_key=google_maps_api_key,
        )
        db_session.add(row)
        await db_session.commit()
        await db_session.refresh(row)
        return row

    return _create


@pytest.fixture
def installation_factory(db_session: AsyncSession) -> Callable[..., Any]:
    """Factory that registers a shop's (encrypted) offline access token."""

    async def _create(
        *,
        shop: str = TEST_SHOP,
        access_token: str = "shpat_test_access_token_123",
        scope: str | None = "read_products,write_metafields",
        is_active: bool = True,
    ) -> ShopInstallation:
        installation = ShopInstallation(
            shop=shop,
            access_token=encrypt_access_token(access_token),
            scope=scope,
            is_active=is_active,
        )
        db_session.add(installation)
        await db_session.commit()
        await db_session.refresh(installation)
        return installation

    return _create


# ---------------------------------------------------------------------------
# Convenience fixtures (pre-built models)
# ---------------------------------------------------------------------------


@pytest.fixture
async def store(store_factory: Callable[..., Any]) -> StoreLocation:
    """A store location owned by TEST_SHOP."""
    return await store_factory()


@pytest.fixture
async def other_store(store_factory: Callable[..., Any]) -> StoreLocation:
    """A store location owned by OTHER_SHOP."""
    return await store_factory(shop=OTHER_SHOP, name="Globex HQ", address="9 Other Rd")


# ---------------------------------------------------------------------------
# Shopify HTTP mock
# ---------------------------------------------------------------------------


def graphql_response(data: dict[str, Any] | None = None, **extra: Any) -> MagicMock:
    """Build a mock httpx response carrying a GraphQL body."""
    response = MagicMock()
    response.json.return_value = {"data": data, **extra}
    response.raise_for_status = MagicMock()
    return response


@pytest.fixture
def mock_shopify_http() -> Generator[AsyncMock, None, None]:
    """Mock httpx.AsyncClient for ShopifyClient unit tests.

    Set ``mock_shopify_http.post.return_value`` (or ``side_effect``) to
    control the GraphQL responses.
    """
    with patch("store_locator.integrations.shopify.client.httpx.AsyncClient") as mock_class:
        mock_client = AsyncMock()
        mock_class.return_value.__aenter__.return_value = mock_client
        mock_client.post.return_value = graphql_response({})
        yield mock_client
