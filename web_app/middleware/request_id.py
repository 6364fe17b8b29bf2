"""Request id middleware."""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from typing import Callable

from shortener.common.headers import REQUEST_ID_HEADER, get_request_id
from shortener.common.logging_config import get_request_logger


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Middleware to bind a request id and a request logger to each request."""

    async def dispatch(self, request: Request, call_next: Callable):
        """Process request and attach request id state."""
        request_id = get_request_id(request.headers)
        request.state.request_id = request_id
        request.state.logger = get_request_logger(request_id)

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
