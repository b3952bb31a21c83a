"""Shop metafield access for locator settings.

Wraps ShopifyClient with the namespaces and keys the locator uses. Every
read and write is a live Admin API call. Failures are logged and turned
into None / False / user errors so callers never see an exception from
the remote store.
"""

import logging
from dataclasses import dataclass
from typing import Any

from cryptography.fernet import InvalidToken
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from store_locator.core.config import settings
from store_locator.core.encryption import decrypt_access_token
from store_locator.core.exceptions import ShopifyAPIError
from store_locator.integrations.shopify.client import ShopifyClient
from store_locator.models.installation import ShopInstallation

logger = logging.getLogger(__name__)

# Returned as a user error when the remote call itself failed
REMOTE_FAILURE_MESSAGE = "Could not reach Shopify. Please try again."

# metafieldDefinitionCreate userErrors code when the definition already exists
DEFINITION_TAKEN_CODE = "TAKEN"


@dataclass(frozen=True)
class MetafieldField:
    """A namespaced shop metafield used by the locator."""

    namespace: str
    key: str
    type: str


GOOGLE_MAPS_API_KEY = MetafieldField(
    namespace="store_locator",
    key="google_maps_api_key",
    type="single_line_text_field",
)

# Written by earlier app versions; only read as a fallback now
STORE_LOCATOR_URL = MetafieldField(
    namespace="store_locator",
    key="store_locator_url",
    type="url",
)


class MetafieldService:
    """Read and write the locator's metafields on one shop."""

    def __init__(self, client: ShopifyClient) -> None:
        self.client = client

    @classmethod
    async def for_shop(cls, db: AsyncSession, shop: str) -> "MetafieldService | None":
        """Build a service from the shop's stored installation.

        Returns None when the shop has no active installation or its token
        cannot be loaded.
        """
        try:
            result = await db.execute(
                select(ShopInstallation).where(
                    ShopInstallation.shop == shop,
                    ShopInstallation.is_active == True,  # noqa: E712
                )
            )
            installation = result.scalar_one_or_none()
        except SQLAlchemyError:
            logger.exception("Failed to load installation for shop %s", shop)
            return None

        if not installation:
            logger.info("No active installation for shop %s; metafields unavailable", shop)
            return None

        try:
            access_token = decrypt_access_token(installation.access_token)
        except InvalidToken:
            logger.exception("Failed to decrypt access token for shop %s", shop)
            return None

        return cls(ShopifyClient(shop, access_token))

    async def get(self, field: MetafieldField) -> str | None:
        """Get a metafield value, or None if absent or on error."""
        try:
            metafield = await self.client.get_shop_metafield(field.namespace, field.key)
        except ShopifyAPIError:
            logger.exception(
                "Error reading metafield %s.%s on %s",
                field.namespace,
                field.key,
                self.client.shop_domain,
            )
            return None

        if not metafield:
            return None
        value = metafield.get("value")
        return str(value) if value else None

    async def set(self, field: MetafieldField, value: str) -> list[dict[str, Any]]:
        """Write a shop metafield.

        Returns:
            userErrors from Shopify, or a single synthesized error if the
            request failed. Empty list on success.
        """
        try:
            owner_id = await self.client.get_shop_id()
            errors = await self.client.set_metafields(
                [
                    {
                        "namespace": field.namespace,
                        "key": field.key,
                        "type": field.type,
                        "value": value,
                        "ownerId": owner_id,
                    }
                ]
            )
        except ShopifyAPIError:
            logger.exception(
                "Error writing metafield %s.%s on %s",
                field.namespace,
                field.key,
                self.client.shop_domain,
            )
            return [{"field": None, "message": REMOTE_FAILURE_MESSAGE}]

        if errors:
            logger.error(
                "Metafield %s.%s rejected on %s: %s",
                field.namespace,
                field.key,
                self.client.shop_domain,
                errors,
            )
        return errors

    async def delete(self, field: MetafieldField) -> bool:
        """Delete a shop metafield by looking up its id first.

        A metafield that does not exist counts as deleted.
        """
        try:
            metafield = await self.client.get_shop_metafield(field.namespace, field.key)
            if not metafield:
                return True
            errors = await self.client.delete_metafield(metafield["id"])
        except ShopifyAPIError:
            logger.exception(
                "Error deleting metafield %s.%s on %s",
                field.namespace,
                field.key,
                self.client.shop_domain,
            )
            return False

        if errors:
            logger.error(
                "Metafield %s.%s delete rejected on %s: %s",
                field.namespace,
                field.key,
                self.client.shop_domain,
                errors,
            )
            return False
        return True

    async def ensure_definition(self, field: MetafieldField, name: str, description: str) -> bool:
        """Create the shop metafield definition unless it already exists."""
        try:
            errors = await self.client.create_metafield_definition(
                {
                    "name": name,
                    "namespace": field.namespace,
                    "key": field.key,
                    "description": description,
                    "type": field.type,
                    "ownerType": "SHOP",
                }
            )
        except ShopifyAPIError:
            logger.exception(
                "Error creating metafield definition %s.%s", field.namespace, field.key
            )
            return False

        unexpected = [e for e in errors if e.get("code") != DEFINITION_TAKEN_CODE]
        if unexpected:
            logger.warning(
                "Metafield definition %s.%s not created: %s",
                field.namespace,
                field.key,
                unexpected,
            )
            return False
        return True

    async def sync_app_embed(
        self, google_maps_api_key: str | None, store_locator_url: str | None
    ) -> bool:
        """Publish the theme app embed's configuration as app-installation metafields.

        The embed is enabled via ``availability.store_locator`` and reads the
        Maps key, locator URL and app URL from the ``app`` namespace.
        """
        metafields: list[dict[str, Any]] = [
            {
                "namespace": "availability",
                "key": "store_locator",
                "type": "boolean",
                "value": "true",
            },
            {
                "namespace": "app",
                "key": "app_url",
                "type": "single_line_text_field",
                "value": settings.app_url,
            },
        ]
        if google_maps_api_key:
            metafields.append(
                {
                    "namespace": "app",
                    "key": "google_maps_api_key",
                    "type": "single_line_text_field",
                    "value": google_maps_api_key,
                }
            )
        if store_locator_url:
            metafields.append(
                {
                    "namespace": "app",
                    "key": "store_locator_url",
                    "type": "url",
                    "value": store_locator_url,
                }
            )

        try:
            owner_id = await self.client.get_app_installation_id()
            errors = await self.client.set_metafields(
                [{**metafield, "ownerId": owner_id} for metafield in metafields]
            )
        except ShopifyAPIError:
            logger.exception("Error syncing app embed metafields on %s", self.client.shop_domain)
            return False

        if errors:
            logger.error("App embed metafields rejected on %s: %s", self.client.shop_domain, errors)
            return False
        return True
