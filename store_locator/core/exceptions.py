"""Domain exceptions raised by services and integrations."""

from typing import Any


class StoreLocatorError(Exception):
    """Base class for store locator errors."""


class StoreNotFoundError(StoreLocatorError):
    """Store location does not exist or belongs to another shop."""

    def __init__(self, store_id: Any) -> None:
        super().__init__(f"Store {store_id} not found")
        self.store_id = store_id


class ShopifyAPIError(StoreLocatorError):
    """Shopify Admin API call failed at the HTTP or GraphQL level."""

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []
