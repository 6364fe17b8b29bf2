"""Redis cache layer for URL shortener."""

import json
import logging
import math
from typing import Optional
from datetime import datetime

import redis.asyncio as redis
from redis.exceptions import RedisError

from .models import ShortLink, as_utc


class RedisCache:
    """Read-through Redis cache for raw short link records.

    The cache holds records, not resolutions: expiry is still evaluated by
    the service on every read, so a cached entry can never resurrect an
    expired link. Failures are logged and reported as misses.
    """

    def __init__(
        self,
        redis_url: Optional[str] = None,
        ttl_seconds: int = 3600,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize Redis cache.

        Args:
            redis_url: Redis connection URL (e.g., redis://localhost:6379/0)
            ttl_seconds: Default TTL for cached items
            logger: Optional logger instance
        """
        self.redis_url = redis_url
        self.ttl_seconds = ttl_seconds
        self.logger = logger or logging.getLogger(__name__)
        self.enabled = redis_url is not None
        self.client: Optional[redis.Redis] = None

        if redis_url:
            self.logger.info(f"Redis cache enabled with TTL={ttl_seconds}s")

    async def connect(self) -> None:
        """Connect to Redis."""
        if not self.enabled:
            return

        try:
            self.client = redis.from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
            await self.client.ping()
            self.logger.info("Connected to Redis")
        except (RedisError, OSError) as e:
            self.logger.error(f"Failed to connect to Redis: {e}")
            self.enabled = False

    async def get_link(self, token: str) -> Optional[ShortLink]:
        """Get a cached record.

        Args:
            token: The short token

        Returns:
            Cached ShortLink or None
        """
        if not self.enabled or not self.client:
            return None

        try:
            raw = await self.client.get(self.get_cache_key(token))
        except (RedisError, OSError) as e:
            self.logger.error(f"Cache get error: {e}")
            return None

        if raw is None:
            return None
        try:
            return ShortLink.from_dict(json.loads(raw))
        except (ValueError, KeyError) as e:
            self.logger.warning(f"Dropping malformed cache entry for {token}: {e}")
            return None

    async def set_link(self, link: ShortLink, now: datetime) -> bool:
        """Cache a record, never beyond its expiry.

        Args:
            link: The record to cache
            now: Current time, used to cap the TTL of expiring records

        Returns:
            True if cached
        """
        if not self.enabled or not self.client:
            return False

        ttl = self.ttl_seconds
        if link.expire_at is not None:
            remaining = (as_utc(link.expire_at) - as_utc(now)).total_seconds()
            if remaining <= 0:
                return False
            ttl = min(ttl, math.ceil(remaining))

        try:
            await self.client.setex(self.get_cache_key(link.token), ttl, json.dumps(link.to_dict()))
            return True
        except (RedisError, OSError) as e:
            self.logger.error(f"Cache set error: {e}")
            return False

    async def close(self) -> None:
        """Close Redis connection."""
        if self.client:
            await self.client.aclose()
            self.logger.info("Redis connection closed")

    def get_cache_key(self, token: str) -> str:
        """Generate cache key for a token.

        Args:
            token: The short token

        Returns:
            Cache key
        """
        return f"url:shortener:{token}"
