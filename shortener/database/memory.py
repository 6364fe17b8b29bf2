"""In-process implementation of the short link store.

Used by the test suite and for running the service locally without a
database (``DATABASE_URL=memory://``). Records live only as long as the process.
"""

import asyncio
import logging
from datetime import datetime
from typing import Dict, Optional

from .base import ShortURLStoreBase
from .models import InsertOutcome, ShortLink, as_utc


class ShortURLMemoryStore(ShortURLStoreBase):
    """Dictionary-backed short link store."""

    def __init__(self, db_config: str = "memory://", logger: Optional[logging.Logger] = None):
        super().__init__(db_config)
        self.logger = logger or logging.getLogger(__name__)
        self._links: Dict[str, ShortLink] = {}
        self._lock = asyncio.Lock()

    async def ensure_schema(self, timeout: Optional[float] = None) -> None:
        self.logger.debug("Memory store needs no schema")

    async def insert(
        self,
        token: str,
        long_url: str,
        created_at: datetime,
        expire_at: Optional[datetime] = None,
        timeout: Optional[float] = None,
    ) -> InsertOutcome:
        async with self._lock:
            if token in self._links:
                self.logger.debug(f"Short url already exists: {token}")
                return InsertOutcome.DUPLICATE_KEY
            self._links[token] = ShortLink(
                token=token,
                long_url=long_url,
                created_at=as_utc(created_at),
                expire_at=as_utc(expire_at),
            )
        return InsertOutcome.CREATED

    async def lookup(self, token: str, timeout: Optional[float] = None) -> Optional[ShortLink]:
        return self._links.get(token)

    async def ping(self, timeout: Optional[float] = None) -> bool:
        return True

    async def close(self) -> None:
        self._links.clear()

    def __len__(self) -> int:
        return len(self._links)
