"""FastAPI dependencies shared by the route modules."""

import logging

from fastapi import Request

from shortener.service import URLShortenerService
from shortener.common.headers import get_request_id
from shortener.common.logging_config import get_request_logger
from shortener.common.url_builder import ShortUrlBuilder


def get_service(request: Request) -> URLShortenerService:
    return request.app.state.service


def get_url_builder(request: Request) -> ShortUrlBuilder:
    return request.app.state.url_builder


def get_logger(request: Request) -> logging.LoggerAdapter:
    """Request-scoped logger set by RequestIdMiddleware."""
    logger = getattr(request.state, "logger", None)
    if logger is None:
        logger = get_request_logger(get_request_id(request.headers))
    return logger
