"""FastAPI application factory."""

from typing import Optional

from fastapi import FastAPI

from .api import api_router
from .web import web_router
from .middleware.request_id import RequestIdMiddleware
from .middleware.logging import LoggingMiddleware
from shortener.common.url_builder import ShortUrlBuilder
from shortener.service import URLShortenerService


def create_app(
    service_instance: Optional[URLShortenerService],
    config,
) -> FastAPI:
    """Create and configure FastAPI application.

    The short URL scheme, domain and path are validated here, so a bad
    configuration fails before the server starts listening.

    Args:
        service_instance: Service instance (may be set later on app.state)
        config: Configuration instance

    Returns:
        Configured FastAPI app

    Raises:
        InvalidConfigurationError: If the short URL settings are invalid
    """
    url_builder = ShortUrlBuilder(
        scheme=config.short_url_scheme,
        domain=config.short_url_domain,
        path=config.short_url_path,
    )

    app = FastAPI(
        title="URL Shortener",
        description="Maps long URLs to short tokens and redirects them back",
        version="1.0.0",
        docs_url=None,
        redoc_url=None,
        openapi_url="/api/v1/openapi.json",
    )

    # Store instances in app state for access in routes
    app.state.service = service_instance
    app.state.config = config
    app.state.url_builder = url_builder

    # Last added runs first: request id must be bound before logging
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(RequestIdMiddleware)

    app.include_router(api_router, prefix="/api/v1", tags=["API"])
    app.include_router(web_router, tags=["Redirect"])

    return app
