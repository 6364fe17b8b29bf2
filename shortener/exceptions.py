"""Exceptions raised by the URL shortener.

Collisions are not exceptions: the store reports them as
``InsertOutcome.DUPLICATE_KEY`` and the service retries.
"""


class ShortenerError(Exception):
    """Base class for all URL shortener errors."""

    pass


class InvalidInputError(ShortenerError, ValueError):
    """Raised when a caller supplies a bad long URL or TTL."""

    pass


class TokenSpaceExhaustedError(ShortenerError):
    """Raised when every generation attempt collided with an existing token."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f"after {attempts} attempts every generated token already exists")


class StorageError(ShortenerError):
    """Raised when the mapping store fails.

    e.g. connection issues, timeouts, missing schema, etc.
    """

    pass


class InvalidConfigurationError(ShortenerError):
    """Raised when the service is configured with invalid parameters."""

    pass
