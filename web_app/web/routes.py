"""Redirect routes implementation."""

import logging
from http import HTTPStatus
from datetime import datetime, timezone
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Response, status

from ..api.routes import ALL_METHODS
from ..dependencies import get_logger, get_service
from shortener.exceptions import StorageError
from shortener.service import URLShortenerService
from shortener.shortcode import ShortCodeGenerator

router = APIRouter()


def token_from_path(path: str) -> str:
    """Last segment of a request path, ignoring trailing slashes."""
    return path.rstrip("/").rsplit("/", 1)[-1]


def location_header(long_url: str) -> str:
    """Percent-encode non-ASCII characters only; the rest is sent as stored."""
    return "".join(c if c.isascii() else quote(c, safe="") for c in long_url)


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=HTTPStatus.NOT_FOUND.phrase,
    )


@router.api_route("/{full_path:path}", methods=ALL_METHODS, include_in_schema=False)
async def redirect_to_url(
    full_path: str,
    service: URLShortenerService = Depends(get_service),
    log: logging.LoggerAdapter = Depends(get_logger),
):
    """Redirect to the long URL behind the last path segment."""
    token = token_from_path(full_path)

    # Nothing outside the token alphabet can have been generated
    if not ShortCodeGenerator.is_valid_format(token):
        log.info(f"not a short url token: {token!r}")
        raise _not_found()

    try:
        long_url = await service.get_long_url(datetime.now(timezone.utc), token)
    except StorageError as e:
        log.error(f"cant get short url {token}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=HTTPStatus.INTERNAL_SERVER_ERROR.phrase,
        )

    if not long_url:
        log.info(f"long url is not found for {token!r}")
        raise _not_found()

    return Response(
        status_code=status.HTTP_301_MOVED_PERMANENTLY,
        headers={"location": location_header(long_url)},
    )
