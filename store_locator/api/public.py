"""Public storefront feed polled by the store locator theme embed.

These endpoints are unauthenticated and readable from any origin. Every
response, errors included, carries the permissive CORS headers.
"""

import logging
from typing import Any

from fastapi import APIRouter, Query, Request, Response, status
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from store_locator.core.deps import DBSession, PublicMetafields
from store_locator.core.rate_limit import PUBLIC_FEED_LIMIT, limiter
from store_locator.core.shop import normalize_shop_domain
from store_locator.schemas.common import ErrorResponse
from store_locator.schemas.settings import PublicSettings
from store_locator.schemas.store import PublicStore
from store_locator.services.settings_service import SettingsService
from store_locator.services.store_service import StoreOrder, StoreService

logger = logging.getLogger(__name__)

router = APIRouter()

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

SHOP_REQUIRED = "Shop parameter is required"
SETTINGS_NOT_FOUND = "Settings not found for this shop"
INTERNAL_ERROR = "Internal server error"
RATE_LIMITED = "Too many requests"

ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
}


def _feed_response(content: Any, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    return JSONResponse(content=content, status_code=status_code, headers=CORS_HEADERS)


def _error(message: str, status_code: int) -> JSONResponse:
    return _feed_response(ErrorResponse(error=message).model_dump(), status_code=status_code)


def feed_rate_limit_exceeded(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Answer a throttled feed request with a 429 the widget can still read."""
    logger.warning("Rate limit exceeded for %s: %s", request.url.path, exc.detail)
    response = _error(RATE_LIMITED, status.HTTP_429_TOO_MANY_REQUESTS)
    return request.app.state.limiter._inject_headers(response, request.state.view_rate_limit)


@router.get(
    "/settings",
    summary="Storefront settings feed",
    responses={**ERROR_RESPONSES, status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}},
)
@limiter.limit(PUBLIC_FEED_LIMIT)
async def get_public_settings(
    request: Request,  # noqa: ARG001  # required by slowapi
    db: DBSession,
    metafields: PublicMetafields,
    shop: str | None = Query(default=None, description="Shop domain or bare shop name"),
) -> JSONResponse:
    """Return ``{googleMapsApiKey, storeLocatorUrl}`` for a shop.

    404 when neither value resolves; a missing URL is otherwise filled from
    the deployment default.
    """
    if not shop:
        return _error(SHOP_REQUIRED, status.HTTP_400_BAD_REQUEST)

    shop = normalize_shop_domain(shop)
    try:
        effective = await SettingsService(db, metafields).get_settings(shop)
    except Exception:
        logger.exception("Error fetching settings for shop %s", shop)
        return _error(INTERNAL_ERROR, status.HTTP_500_INTERNAL_SERVER_ERROR)

    if not effective.google_maps_api_key and not effective.store_locator_url:
        return _error(SETTINGS_NOT_FOUND, status.HTTP_404_NOT_FOUND)

    body = PublicSettings(
        google_maps_api_key=effective.google_maps_api_key,
        store_locator_url=effective.store_locator_url,
    )
    return _feed_response(body.model_dump(mode="json", by_alias=True))


@router.get("/stores", summary="Storefront store list feed", responses=ERROR_RESPONSES)
@limiter.limit(PUBLIC_FEED_LIMIT)
async def get_public_stores(
    request: Request,  # noqa: ARG001  # required by slowapi
    db: DBSession,
    shop: str | None = Query(default=None, description="Shop domain or bare shop name"),
) -> JSONResponse:
    """Return the shop's store locations as a flat array, sorted by name."""
    if not shop:
        return _error(SHOP_REQUIRED, status.HTTP_400_BAD_REQUEST)

    shop = normalize_shop_domain(shop)
    try:
        stores = await StoreService(db).list_for_shop(shop, StoreOrder.NAME)
    except Exception:
        logger.exception("Error fetching stores for shop %s", shop)
        return _error(INTERNAL_ERROR, status.HTTP_500_INTERNAL_SERVER_ERROR)

    return _feed_response(
        [
            PublicStore.model_validate(store).model_dump(mode="json", by_alias=True)
            for store in stores
        ]
    )


@router.options("/settings", include_in_schema=False)
@router.options("/stores", include_in_schema=False)
async def public_feed_options() -> Response:
    """Answer pre-flight requests with an empty 200."""
    return Response(status_code=status.HTTP_200_OK, headers=CORS_HEADERS)
