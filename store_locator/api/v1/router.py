"""API routers: versioned admin API and the public storefront feed."""

from fastapi import APIRouter

from store_locator.api import public
from store_locator.api.v1 import health, settings, stores

api_router = APIRouter()

# Include health check routes (no prefix)
api_router.include_router(health.router)

# Settings and overview (Shopify session token required)
api_router.include_router(
    settings.router,
    tags=["settings"],
)

# Store directory CRUD (Shopify session token required)
api_router.include_router(
    stores.router,
    prefix="/stores",
    tags=["stores"],
)

# Storefront feed (no auth, any origin); mounted outside the versioned prefix
public_router = APIRouter()
public_router.include_router(
    public.router,
    tags=["storefront"],
)
