"""FastAPI application entry point.

Two surfaces share one app: the embedded admin API under ``api_v1_prefix``
(Shopify session token) and the storefront feed under ``public_api_prefix``
(no auth, any origin, rate limited).
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from fastapi.routing import APIRoute
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.types import ASGIApp, Receive, Scope, Send

from store_locator.api.public import feed_rate_limit_exceeded
from store_locator.api.v1.router import api_router, public_router
from store_locator.core.config import settings
from store_locator.core.database import engine
from store_locator.core.logging_config import (
    generate_request_id,
    request_id_var,
    setup_logging,
)
from store_locator.core.rate_limit import limiter

logger = logging.getLogger(__name__)

DEFAULT_ENCRYPTION_KEY_PREFIX = "CHANGE-ME"


class AdminCORSMiddleware(CORSMiddleware):
    """CORSMiddleware that leaves the storefront feed paths alone.

    The feed answers every origin with its own fixed headers, pre-flight included.
    """

    def __init__(self, app: ASGIApp, *, exempt_paths: set[str], **kwargs: Any) -> None:
        super().__init__(app, **kwargs)
        self.exempt_paths = exempt_paths

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http" and scope["path"] in self.exempt_paths:
            await self.app(scope, receive, send)
            return
        await super().__call__(scope, receive, send)


def _feed_paths() -> set[str]:
    return {
        f"{settings.public_api_prefix}{route.path}"
        for route in public_router.routes
        if isinstance(route, APIRoute)
    }


def _warn_on_incomplete_config() -> None:
    if not settings.shopify_client_secret:
        logger.warning("SHOPIFY_CLIENT_SECRET is not set; admin session tokens will be rejected")
    if not settings.default_locator_url:
        logger.info("DEFAULT_LOCATOR_URL is not set; shops without a URL publish none")
    if settings.environment == "production" and settings.encryption_key.startswith(
        DEFAULT_ENCRYPTION_KEY_PREFIX
    ):
        logger.error("ENCRYPTION_KEY is the development default; set it before storing tokens")


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Configure logging on startup and release database connections on shutdown."""
    setup_logging(debug=settings.debug)
    logger.info(
        "Starting %s v%s (%s), Maps key storage: %s",
        settings.project_name,
        settings.version,
        settings.environment,
        settings.maps_key_storage,
    )
    _warn_on_incomplete_config()
    yield
    await engine.dispose()
    logger.info("Shut down cleanly")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    if settings.sentry_dsn:
        import sentry_sdk

        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            environment=settings.environment,
            traces_sample_rate=0.1,
        )

    app = FastAPI(
        title=settings.project_name,
        version=settings.version,
        openapi_url=f"{settings.api_v1_prefix}/openapi.json",
        docs_url=f"{settings.api_v1_prefix}/docs",
        redoc_url=f"{settings.api_v1_prefix}/redoc",
        lifespan=lifespan,
    )

    # Only the storefront routes carry limits; 429s keep the feed's CORS headers
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, feed_rate_limit_exceeded)  # type: ignore[arg-type]
    app.add_middleware(SlowAPIMiddleware)

    app.add_middleware(
        AdminCORSMiddleware,
        exempt_paths=_feed_paths(),
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type"],
    )

    @app.middleware("http")
    async def request_id_middleware(request: Request, call_next: Any) -> Response:
        rid = request.headers.get("X-Request-ID") or generate_request_id()
        request_id_var.set(rid)
        response: Response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response

    app.include_router(api_router, prefix=settings.api_v1_prefix)
    app.include_router(public_router, prefix=settings.public_api_prefix)

    @app.exception_handler(Exception)
    async def global_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
        """Log anything uncaught and answer with a JSON 500."""
        logger.exception("Unhandled exception: %s", exc)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    @app.get("/docs", include_in_schema=False)
    async def docs_redirect() -> RedirectResponse:
        return RedirectResponse(url=f"{settings.api_v1_prefix}/docs")

    @app.get("/")
    async def root() -> dict[str, Any]:
        """Service name and where each surface lives."""
        return {
            "name": settings.project_name,
            "version": settings.version,
            "docs": f"{settings.api_v1_prefix}/docs",
            "health": f"{settings.api_v1_prefix}/health",
            "admin": settings.api_v1_prefix,
            "storefront": settings.public_api_prefix,
        }

    return app


app = create_app()
