"""Shopify Admin GraphQL API client using httpx."""

import logging
from typing import Any

import httpx

from store_locator.core.config import settings
from store_locator.core.exceptions import ShopifyAPIError
from store_locator.core.shop import shop_admin_domain

logger = logging.getLogger(__name__)

SHOP_METAFIELD_QUERY = """
query shopMetafield($namespace: String!, $key: String!) {
  shop {
    id
    metafield(namespace: $namespace, key: $key) {
      id
      value
    }
  }
}
"""

SHOP_ID_QUERY = """
query shopId {
  shop {
    id
  }
}
"""

APP_INSTALLATION_ID_QUERY = """
query appInstallationId {
  currentAppInstallation {
    id
  }
}
"""

METAFIELDS_SET_MUTATION = """
mutation metafieldsSet($metafields: [MetafieldsSetInput!]!) {
  metafieldsSet(metafields: $metafields) {
    metafields {
      id
      namespace
      key
    }
    userErrors {
      field
      message
    }
  }
}
"""

METAFIELD_DELETE_MUTATION = """
mutation metafieldDelete($input: MetafieldDeleteInput!) {
  metafieldDelete(input: $input) {
    deletedId
    userErrors {
      field
      message
    }
  }
}
"""

METAFIELD_DEFINITION_CREATE_MUTATION = """
mutation metafieldDefinitionCreate($definition: MetafieldDefinitionInput!) {
  metafieldDefinitionCreate(definition: $definition) {
    createdDefinition {
      id
    }
    userErrors {
      field
      message
      code
    }
  }
}
"""


class ShopifyClient:
    """Async client for the Shopify Admin GraphQL API.

    Every call is a live request; nothing is cached.
    """

    def __init__(self, shop: str, access_token: str) -> None:
        self.shop_domain = shop_admin_domain(shop)
        self.graphql_url = (
            f"https://{self.shop_domain}/admin/api/{settings.shopify_api_version}/graphql.json"
        )
        self.headers = {
            "X-Shopify-Access-Token": access_token,
            "Content-Type": "application/json",
        }

    async def get_shop_metafield(self, namespace: str, key: str) -> dict[str, Any] | None:
        """Fetch a shop-owned metafield.

        Returns:
            ``{"id", "value", "owner_id"}`` or None if the metafield does not exist.
        """
        data = await self._graphql(SHOP_METAFIELD_QUERY, {"namespace": namespace, "key": key})
        shop = data.get("shop") or {}
        metafield = shop.get("metafield")
        if not metafield:
            return None
        return {"id": metafield["id"], "value": metafield.get("value"), "owner_id": shop.get("id")}

    async def get_shop_id(self) -> str:
        """Get the shop's GID, the owner of shop metafields."""
        data = await self._graphql(SHOP_ID_QUERY)
        shop_id = (data.get("shop") or {}).get("id")
        if not shop_id:
            raise ShopifyAPIError(f"Could not resolve shop id for {self.shop_domain}")
        return str(shop_id)

    async def get_app_installation_id(self) -> str:
        """Get the GID of this app's installation on the shop."""
        data = await self._graphql(APP_INSTALLATION_ID_QUERY)
        installation_id = (data.get("currentAppInstallation") or {}).get("id")
        if not installation_id:
            raise ShopifyAPIError(f"Could not resolve app installation for {self.shop_domain}")
        return str(installation_id)

    async def set_metafields(self, metafields: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """Create or update metafields.

        Args:
            metafields: MetafieldsSetInput dicts (namespace, key, type, value, ownerId).

        Returns:
            The mutation's userErrors; empty on success.
        """
        data = await self._graphql(METAFIELDS_SET_MUTATION, {"metafields": metafields})
        errors: list[dict[str, Any]] = (data.get("metafieldsSet") or {}).get("userErrors", [])
        return errors

    async def delete_metafield(self, metafield_id: str) -> list[dict[str, Any]]:
        """Delete a metafield by its GID.

        Returns:
            The mutation's userErrors; empty on success.
        """
        data = await self._graphql(METAFIELD_DELETE_MUTATION, {"input": {"id": metafield_id}})
        errors: list[dict[str, Any]] = (data.get("metafieldDelete") or {}).get("userErrors", [])
        return errors

    async def create_metafield_definition(
        self, definition: dict[str, Any]
    ) -> list[dict[str, Any]]:
        """Create a metafield definition.

        Returns:
            The mutation's userErrors; a ``TAKEN`` code means it already exists.
        """
        data = await self._graphql(
            METAFIELD_DEFINITION_CREATE_MUTATION, {"definition": definition}
        )
        errors: list[dict[str, Any]] = (data.get("metafieldDefinitionCreate") or {}).get(
            "userErrors", []
        )
        return errors

    async def _graphql(
        self, query: str, variables: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        """Execute a GraphQL document and return its ``data`` object.

        Raises:
            ShopifyAPIError: On transport errors, non-2xx responses, unreadable
                bodies or top-level GraphQL errors.
        """
        payload: dict[str, Any] = {"query": query}
        if variables:
            payload["variables"] = variables

        try:
            async with httpx.AsyncClient(headers=self.headers, timeout=30.0) as client:
                response = await client.post(self.graphql_url, json=payload)
                response.raise_for_status()
                body: Any = response.json()
        except httpx.HTTPStatusError as e:
            raise ShopifyAPIError(
                f"Shopify returned {e.response.status_code} for {self.shop_domain}"
            ) from e
        except httpx.HTTPError as e:
            raise ShopifyAPIError(f"Shopify request to {self.shop_domain} failed: {e}") from e
        except ValueError as e:
            raise ShopifyAPIError(f"Shopify returned a non-JSON body for {self.shop_domain}") from e

        if not isinstance(body, dict):
            raise ShopifyAPIError(f"Unexpected GraphQL response shape from {self.shop_domain}")

        if body.get("errors"):
            logger.warning("GraphQL errors from %s: %s", self.shop_domain, body["errors"])
            raise ShopifyAPIError("Shopify GraphQL request failed", errors=body["errors"])

        data: dict[str, Any] = body.get("data") or {}
        return data
