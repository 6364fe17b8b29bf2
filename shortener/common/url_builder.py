"""URL building utilities for URL shortener."""

import re

from ..exceptions import InvalidConfigurationError


class ShortUrlBuilder:
    """Builds the externally visible short URL for a token.

    The parts are validated once, when the builder is created, so a bad
    deployment fails at startup instead of on the first request.
    """

    def __init__(self, scheme: str, domain: str, path: str = "/"):
        """Initialize the builder.

        Args:
            scheme: "http" or "https"
            domain: Host (and optional port) of the short URLs, no slashes
            path: Path placed between domain and token; must start with "/"

        Raises:
            InvalidConfigurationError: If any part is invalid
        """
        if scheme not in ("http", "https"):
            raise InvalidConfigurationError(f"invalid short url scheme: {scheme!r}")
        if not domain or "/" in domain:
            raise InvalidConfigurationError(f"invalid short url domain: {domain!r}")
        if not path.startswith("/"):
            raise InvalidConfigurationError(f"invalid short url path: {path!r}")

        self.scheme = scheme
        self.domain = domain
        self.path = re.sub(r"/{2,}", "/", path)

    def build(self, token: str) -> str:
        """Build complete short URL.

        The token is appended to the path as is, so "/s/" gives
        https://domain/s/<token> while "/s" gives https://domain/s<token>.

        Args:
            token: The short token

        Returns:
            Complete short URL
        """
        return f"{self.scheme}://{self.domain}{self.path}{token}"
