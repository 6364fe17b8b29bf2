"""Common utilities for URL shortener."""

from .validators import is_valid_url, parse_ttl_seconds
from .headers import get_request_id
from .url_builder import ShortUrlBuilder
from .logging_config import setup_logging, get_request_logger, redact_url

__all__ = [
    "is_valid_url",
    "parse_ttl_seconds",
    "get_request_id",
    "ShortUrlBuilder",
    "setup_logging",
    "get_request_logger",
    "redact_url",
]
