"""API routes implementation."""

import logging
from http import HTTPStatus
from typing import Optional, Tuple
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request, HTTPException, status
from pydantic import ValidationError

from .schemas import (
    GenerateShortUrlRequest,
    ShortUrlResponse,
    ErrorResponse,
)
from ..dependencies import get_logger, get_service, get_url_builder
from shortener.common.validators import parse_ttl_seconds
from shortener.common.url_builder import ShortUrlBuilder
from shortener.exceptions import InvalidInputError, StorageError, TokenSpaceExhaustedError
from shortener.service import URLShortenerService

router = APIRouter()

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "TRACE", "CONNECT"]
GENERATE_METHODS = ("PUT", "POST")

FORM_URLENCODED = "application/x-www-form-urlencoded"
FORM_MULTIPART = "multipart/form-data"


def _bad_request(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


def _internal_error() -> HTTPException:
    # Never leak internals to the caller
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=HTTPStatus.INTERNAL_SERVER_ERROR.phrase,
    )


def _form_field(form, name: str) -> Optional[str]:
    value = form.get(name)
    if value is not None and not isinstance(value, str):
        raise _bad_request(f"{name} must be a plain form field")
    return value


async def parse_generate_request(request: Request, log: logging.LoggerAdapter) -> Tuple[str, int]:
    """Extract long_url and ttl_seconds from the request body.

    Exactly one parser runs, chosen by content type: urlencoded form,
    multipart form, or JSON for anything else.

    Returns:
        Tuple of (long_url, ttl_seconds); long_url may be empty

    Raises:
        HTTPException: 400 if the body or ttl_seconds cannot be parsed
    """
    media_type = request.headers.get("content-type", "").split(";")[0].strip().lower()

    if media_type in (FORM_URLENCODED, FORM_MULTIPART):
        form = await request.form()
        long_url = _form_field(form, "long_url") or ""
        ttl_seconds = parse_ttl_seconds(_form_field(form, "ttl_seconds"))
        if ttl_seconds is None:
            log.warning("ttl_seconds is invalid")
            raise _bad_request("ttl_seconds is invalid")
        return long_url, ttl_seconds

    body = await request.body()
    try:
        parsed = GenerateShortUrlRequest.model_validate_json(body)
    except ValidationError as e:
        error = e.errors()[0]
        field = ".".join(str(part) for part in error["loc"]) or "body"
        log.warning(f"cant json parse request body: {error['msg']}")
        raise _bad_request(f"cant parse request body: {field}: {error['msg']}")

    return parsed.long_url or "", parsed.ttl_seconds or 0


@router.api_route(
    "/generate_short_url",
    methods=ALL_METHODS,
    response_model=ShortUrlResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid request"},
        405: {"model": ErrorResponse, "description": "Only PUT and POST are allowed"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Create short URL",
    description="Create a short URL for long_url, optionally expiring after ttl_seconds.",
)
async def generate_short_url(
    request: Request,
    service: URLShortenerService = Depends(get_service),
    url_builder: ShortUrlBuilder = Depends(get_url_builder),
    log: logging.LoggerAdapter = Depends(get_logger),
):
    """Create a shortened URL."""
    if request.method not in GENERATE_METHODS:
        raise HTTPException(
            status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
            detail=HTTPStatus.METHOD_NOT_ALLOWED.phrase,
            headers={"Allow": ", ".join(GENERATE_METHODS)},
        )

    long_url, ttl_seconds = await parse_generate_request(request, log)

    if not long_url:
        log.warning("long_url is empty")
        raise _bad_request("long_url cannot be empty")
    if ttl_seconds < 0:
        log.warning("ttl < 0")
        raise _bad_request("ttl_seconds should be >= 0")

    try:
        token = await service.generate_short_url(
            now=datetime.now(timezone.utc),
            long_url=long_url,
            ttl=ttl_seconds,
        )
    except InvalidInputError as e:
        log.warning(f"long_url is invalid: {e}")
        raise _bad_request(str(e))
    except TokenSpaceExhaustedError as e:
        log.error(f"cant generate short url after {e.attempts} attempts")
        raise _internal_error()
    except StorageError as e:
        log.error(f"cant generate short url: {e}")
        raise _internal_error()

    short_url = url_builder.build(token)
    log.info(f"short url generation done: {short_url} -> {long_url} (ttl={ttl_seconds}s)")

    return ShortUrlResponse(short_url=short_url)
