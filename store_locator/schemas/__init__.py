"""Pydantic schemas for request/response validation."""

from store_locator.schemas.common import ErrorResponse, HealthResponse
from store_locator.schemas.settings import (
    PublicSettings,
    SettingsResponse,
    SettingsUpdate,
    SettingsUpdateResult,
)
from store_locator.schemas.store import (
    PublicStore,
    StoreCreate,
    StoreListResponse,
    StoreResponse,
    StoreUpdate,
)

__all__ = [
    "HealthResponse",
    "ErrorResponse",
    # Settings
    "PublicSettings",
    "SettingsResponse",
    "SettingsUpdate",
    "SettingsUpdateResult",
    # Store directory
    "PublicStore",
    "StoreCreate",
    "StoreListResponse",
    "StoreResponse",
    "StoreUpdate",
]
