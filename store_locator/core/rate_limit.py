"""Rate limiting for the public storefront feed using slowapi."""

from slowapi import Limiter
from starlette.requests import Request

from store_locator.core.config import settings
from store_locator.core.shop import normalize_shop_domain


def _get_shopper_key(request: Request) -> str:
    """Key requests by shopper IP and the shop they are browsing."""
    ip = (
        request.headers.get("CF-Connecting-IP")
        or request.headers.get("X-Forwarded-For", "").split(",")[0].strip()
        or (request.client.host if request.client else "127.0.0.1")
    )
    shop = normalize_shop_domain(request.query_params.get("shop", ""))
    return f"{ip}:{shop}"


limiter = Limiter(key_func=_get_shopper_key)

PUBLIC_FEED_LIMIT = settings.public_rate_limit
