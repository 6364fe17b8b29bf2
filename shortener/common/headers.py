"""Header parsing utilities for URL shortener."""

import re
import uuid
from typing import Mapping


REQUEST_ID_HEADER = "X-Request-ID"

# Request ids are echoed into logs and headers, so keep them printable and short
REQUEST_ID_PATTERN = re.compile(r'^[A-Za-z0-9._:-]{1,128}$')


def get_request_id(headers: Mapping[str, str]) -> str:
    """Get the request id from X-Request-ID, or make a new one.

    Args:
        headers: Request headers

    Returns:
        The caller's request id if it is well formed, a fresh uuid4 hex otherwise
    """
    key = REQUEST_ID_HEADER.lower()
    for k, v in headers.items():
        if k.lower() == key and v and REQUEST_ID_PATTERN.match(v):
            return v
    return uuid.uuid4().hex
