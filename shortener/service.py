"""Business logic service for URL shortener."""

import logging
from typing import Optional, Union
from datetime import datetime, timedelta

from .shortcode import ShortCodeGenerator
from .database.base import ShortURLStoreBase
from .database.cache import RedisCache
from .database.models import InsertOutcome, ShortLink, as_utc
from .common.validators import is_valid_url
from .exceptions import InvalidInputError, TokenSpaceExhaustedError


class URLShortenerService:
    """Service layer for URL shortening business logic.

    Token uniqueness is left entirely to the store's atomic insert: the
    service never locks, it only retries a bounded number of times when the
    store reports a duplicate token.
    """

    def __init__(
        self,
        store: ShortURLStoreBase,
        cache: Optional[RedisCache] = None,
        short_code_generator: Optional[ShortCodeGenerator] = None,
        logger: Optional[logging.Logger] = None,
        max_collision_retries: int = 5,
        store_timeout_seconds: Optional[float] = 5.0,
    ):
        """Initialize URL shortener service.

        Args:
            store: Mapping store instance
            cache: Optional cache instance
            short_code_generator: Optional short code generator
            logger: Optional logger
            max_collision_retries: Retries after the first attempt on collision
            store_timeout_seconds: Default deadline for each store call
        """
        if max_collision_retries < 0:
            raise ValueError("max_collision_retries must be >= 0")
        self.store = store
        self.cache = cache
        self.generator = short_code_generator or ShortCodeGenerator()
        self.logger = logger or logging.getLogger(__name__)
        self.max_collision_retries = max_collision_retries
        self.store_timeout_seconds = store_timeout_seconds

    @property
    def max_insert_attempts(self) -> int:
        """Total insert attempts for one generation (initial + retries)."""
        return self.max_collision_retries + 1

    async def generate_short_url(
        self,
        now: datetime,
        long_url: str,
        ttl: Union[int, timedelta] = 0,
        timeout: Optional[float] = None,
    ) -> str:
        """Create a new short link and return its token.

        Args:
            now: Creation time
            long_url: The original long URL
            ttl: Seconds (or timedelta) until expiry; 0 means never expires
            timeout: Deadline for each store call (service default if None)

        Returns:
            The generated token

        Raises:
            InvalidInputError: If the long URL or TTL is invalid
            TokenSpaceExhaustedError: If every attempt collided
            StorageError: If the store fails
        """
        is_valid, error = is_valid_url(long_url)
        if not is_valid:
            raise InvalidInputError(error)

        try:
            if not isinstance(ttl, timedelta):
                ttl = timedelta(seconds=ttl)
            if ttl < timedelta(0):
                raise InvalidInputError("ttl_seconds should be >= 0")

            created_at = as_utc(now)
            expire_at = created_at + ttl if ttl > timedelta(0) else None
        except OverflowError:
            raise InvalidInputError("ttl_seconds is too large")
        timeout = self._timeout(timeout)

        for attempt in range(1, self.max_insert_attempts + 1):
            token = self.generator.generate()
            outcome = await self.store.insert(
                token,
                long_url,
                created_at,
                expire_at,
                timeout=timeout,
            )
            if outcome is InsertOutcome.CREATED:
                self.logger.info(f"Created short URL: {token} -> {long_url} (attempt {attempt})")
                return token
            self.logger.debug(f"Collision on {token}, attempt {attempt}/{self.max_insert_attempts}")

        self.logger.error(f"Unable to generate unique short code after {self.max_insert_attempts} attempts")
        raise TokenSpaceExhaustedError(self.max_insert_attempts)

    async def get_long_url(
        self,
        now: datetime,
        token: str,
        timeout: Optional[float] = None,
    ) -> Optional[str]:
        """Resolve a token to its long URL.

        Unknown and expired tokens are indistinguishable to the caller.

        Args:
            now: Resolution time
            token: The token to resolve
            timeout: Deadline for the store call (service default if None)

        Returns:
            Long URL, or None if the token is unknown or expired

        Raises:
            StorageError: If the store fails
        """
        link = await self._lookup(now, token, self._timeout(timeout))

        if link is None:
            self.logger.debug(f"Short code not found: {token}")
            return None
        if link.is_expired(now):
            self.logger.debug(f"Short code expired: {token}")
            return None
        return link.long_url

    async def ensure_schema(self, timeout: Optional[float] = None) -> None:
        """Create the store schema if it is missing."""
        await self.store.ensure_schema(timeout=self._timeout(timeout))

    async def _lookup(self, now: datetime, token: str, timeout: Optional[float]) -> Optional[ShortLink]:
        # Try cache first
        if self.cache:
            cached = await self.cache.get_link(token)
            if cached:
                self.logger.debug(f"Cache hit for {token}")
                return cached

        link = await self.store.lookup(token, timeout=timeout)
        if link and self.cache:
            await self.cache.set_link(link, now)
        return link

    def _timeout(self, timeout: Optional[float]) -> Optional[float]:
        return self.store_timeout_seconds if timeout is None else timeout

    async def close(self) -> None:
        """Close service connections."""
        await self.store.close()
        if self.cache:
            await self.cache.close()
