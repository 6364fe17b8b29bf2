"""Storage layer for URL shortener."""

from .base import ShortURLStoreBase
from .cache import RedisCache
from .factory import create_store
from .memory import ShortURLMemoryStore
from .models import InsertOutcome, ShortLink
from .postgres import ShortURLPostgresStore

__all__ = [
    "ShortURLStoreBase",
    "ShortURLMemoryStore",
    "ShortURLPostgresStore",
    "RedisCache",
    "InsertOutcome",
    "ShortLink",
    "create_store",
]
