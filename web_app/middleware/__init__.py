"""Middleware for URL shortener web app."""

from .request_id import RequestIdMiddleware
from .logging import LoggingMiddleware

__all__ = ["RequestIdMiddleware", "LoggingMiddleware"]
