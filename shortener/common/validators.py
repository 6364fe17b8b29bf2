"""Validation utilities for URL shortener."""

import re
from urllib.parse import urlparse
from typing import Optional, Tuple


# Signed decimal integer, as accepted for ttl_seconds in form bodies
TTL_PATTERN = re.compile(r'^[+-]?[0-9]+$')

# ASCII control characters and whitespace never appear in a valid URL
FORBIDDEN_URL_CHARS = re.compile(r'[\x00-\x20\x7f]')


def is_valid_url(url: str) -> Tuple[bool, str]:
    """Validate a long URL.

    Args:
        url: The URL to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not url or not isinstance(url, str):
        return False, "long_url cannot be empty"

    if FORBIDDEN_URL_CHARS.search(url):
        return False, "long_url contains whitespace or control characters"

    try:
        result = urlparse(url)

        # Check if scheme is http or https
        if result.scheme not in ["http", "https"]:
            return False, "long_url must use http or https protocol"

        # Check if netloc (domain) exists
        if not result.netloc or not result.hostname:
            return False, "long_url must have a valid domain"

        # Raises ValueError for a non-numeric or out-of-range port
        result.port

        return True, ""

    except ValueError as e:
        return False, f"long_url is invalid url: {str(e)}"


def parse_ttl_seconds(raw: Optional[str]) -> Optional[int]:
    """Parse a ttl_seconds form field.

    Args:
        raw: Raw field value; None or "" means the field was not sent

    Returns:
        The parsed number of seconds (0 when absent), None if not an integer
    """
    if raw is None or raw == "":
        return 0
    if not TTL_PATTERN.match(raw):
        return None
    return int(raw)
