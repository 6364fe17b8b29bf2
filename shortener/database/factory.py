"""Store selection from the configured database URL."""

import logging
from typing import Optional
from urllib.parse import urlparse

from ..exceptions import InvalidConfigurationError
from .base import ShortURLStoreBase
from .memory import ShortURLMemoryStore
from .postgres import ShortURLPostgresStore


POSTGRES_SCHEMES = ("postgres", "postgresql")


def create_store(
    database_url: str,
    pool_max_size: int = 10,
    logger: Optional[logging.Logger] = None,
) -> ShortURLStoreBase:
    """Build the store matching the URL scheme of ``database_url``.

    Args:
        database_url: postgresql://... for PostgreSQL, memory:// for the in-process store
        pool_max_size: Maximum size of the PostgreSQL connection pool
        logger: Optional logger instance

    Returns:
        Store instance

    Raises:
        InvalidConfigurationError: If the scheme is not supported
    """
    scheme = urlparse(database_url).scheme.lower()
    if scheme in POSTGRES_SCHEMES:
        return ShortURLPostgresStore(
            db_config=database_url,
            pool_max_size=pool_max_size,
            logger=logger,
        )
    if scheme == "memory":
        return ShortURLMemoryStore(db_config=database_url, logger=logger)
    raise InvalidConfigurationError(f"unsupported database url scheme: {scheme!r}")
