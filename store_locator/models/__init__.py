"""SQLAlchemy models."""

from store_locator.models.base import Base
from store_locator.models.installation import ShopInstallation
from store_locator.models.settings import ShopSettings
from store_locator.models.store import StoreLocation

__all__ = [
    # Base
    "Base",
    # Shop
    "ShopInstallation",
    "ShopSettings",
    # Store directory
    "StoreLocation",
]
