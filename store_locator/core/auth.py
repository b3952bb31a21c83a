"""Shopify session token authentication for the embedded admin."""

from typing import Annotated, Any

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from store_locator.core.config import settings
from store_locator.core.logging_config import shop_var
from store_locator.core.shop import normalize_shop_domain

# HTTP Bearer token security scheme
bearer_scheme = HTTPBearer(auto_error=False)

# Shopify clocks and ours drift slightly; tokens only live for a minute
SESSION_TOKEN_LEEWAY_SECONDS = 10


def verify_session_token(token: str) -> dict[str, Any]:
    """Verify a Shopify App Bridge session token.

    Session tokens are HS256 JWTs signed with the app's client secret, with
    the app's client id as audience and the shop's domain in ``dest``.

    Args:
        token: The raw JWT from the Authorization header

    Returns:
        The decoded token payload

    Raises:
        HTTPException: If the token is invalid, expired or issued for another shop
    """
    try:
        payload: dict[str, Any] = jwt.decode(
            token,
            settings.shopify_client_secret,
            algorithms=["HS256"],
            audience=settings.shopify_client_id,
            leeway=SESSION_TOKEN_LEEWAY_SECONDS,
            options={"require": ["exp", "nbf", "dest", "iss"]},
        )
    except jwt.ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Session token has expired",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except jwt.InvalidTokenError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid session token: {str(e)}",
            headers={"WWW-Authenticate": "Bearer"},
        )

    # iss is "https://{shop}.myshopify.com/admin", dest is "https://{shop}.myshopify.com"
    if normalize_shop_domain(payload["iss"].removesuffix("/admin")) != normalize_shop_domain(
        payload["dest"]
    ):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Session token issuer does not match destination",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return payload


async def get_current_shop(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str:
    """Resolve the authenticated shop from the session token.

    Returns:
        The normalized (bare) shop name

    Raises:
        HTTPException: If no token is provided or the token is invalid
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = verify_session_token(credentials.credentials)
    shop = normalize_shop_domain(payload["dest"])
    shop_var.set(shop)
    return shop


# Type alias for dependency injection
CurrentShop = Annotated[str, Depends(get_current_shop)]
