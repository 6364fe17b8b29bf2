"""Logging middleware."""

import time
import logging
from http import HTTPStatus
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from typing import Callable


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for request/response logging.

    Also the last line of defence: an exception escaping a route is logged
    with its traceback and answered with a bare 500.
    """

    def __init__(self, app, logger: logging.Logger = None):
        """Initialize logging middleware."""
        super().__init__(app)
        self.logger = logger or logging.getLogger("url_shortener.web")

    async def dispatch(self, request: Request, call_next: Callable):
        """Log request and response."""
        start_time = time.time()
        log = getattr(request.state, "logger", None) or self.logger

        # Log request
        client_ip = request.client.host if request.client else "unknown"
        log.info(f"Request: {request.method} {request.url.path} from {client_ip}")

        # Process request
        try:
            response = await call_next(request)
        except Exception:
            log.exception(f"Unhandled error on {request.method} {request.url.path}")
            response = JSONResponse(
                status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
                content={"detail": HTTPStatus.INTERNAL_SERVER_ERROR.phrase},
            )

        # Calculate duration
        duration_ms = (time.time() - start_time) * 1000

        # Log response
        log.info(
            f"Response: {request.method} {request.url.path} - "
            f"Status: {response.status_code} - Duration: {duration_ms:.2f}ms"
        )

        return response
