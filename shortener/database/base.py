"""Abstract base class for URL shortener store implementations."""

from abc import ABC, abstractmethod
from typing import Optional
from datetime import datetime

from .models import InsertOutcome, ShortLink


class ShortURLStoreBase(ABC):
    """Abstract base class for the short link mapping store.

    Implementations are a dumb durable map: they enforce token uniqueness but
    never evaluate expiry. Every operation accepts an optional ``timeout`` in
    seconds; failures of any kind, including an exceeded timeout, raise
    ``StorageError``.
    """

    def __init__(self, db_config: str):
        """Initialize store.

        Args:
            db_config: Database connection string
        """
        self.db_config = db_config

    @abstractmethod
    async def insert(
        self,
        token: str,
        long_url: str,
        created_at: datetime,
        expire_at: Optional[datetime] = None,
        timeout: Optional[float] = None,
    ) -> InsertOutcome:
        """Atomically insert a new short link.

        Args:
            token: The short token (primary key)
            long_url: The destination URL
            created_at: Creation timestamp
            expire_at: Optional expiry timestamp (None = never expires)
            timeout: Optional deadline for the call in seconds

        Returns:
            InsertOutcome.CREATED, or InsertOutcome.DUPLICATE_KEY if the token
            is already taken
        """
        pass

    @abstractmethod
    async def lookup(self, token: str, timeout: Optional[float] = None) -> Optional[ShortLink]:
        """Get the raw stored record for a token.

        Args:
            token: The short token to lookup
            timeout: Optional deadline for the call in seconds

        Returns:
            The stored ShortLink (expired or not), None if absent
        """
        pass

    @abstractmethod
    async def ensure_schema(self, timeout: Optional[float] = None) -> None:
        """Create the underlying table if it does not exist."""
        pass

    @abstractmethod
    async def ping(self, timeout: Optional[float] = None) -> bool:
        """Check if the store is reachable.

        Returns:
            True if healthy, False otherwise
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close store connections."""
        pass
