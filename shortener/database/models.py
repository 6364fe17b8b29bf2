"""Data models for URL shortener."""

import enum
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Return ``value`` as an aware UTC datetime (naive values are taken as UTC)."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class InsertOutcome(enum.Enum):
    """Result of inserting a short link into the store."""

    CREATED = "created"
    DUPLICATE_KEY = "duplicate_key"


@dataclass(frozen=True)
class ShortLink:
    """Represents a short link row in the database."""

    token: str
    long_url: str
    created_at: datetime
    expire_at: Optional[datetime] = None

    def is_expired(self, now: datetime) -> bool:
        """Check whether the link is no longer visible at ``now``.

        A link stays visible up to and including its expiry instant.
        """
        if self.expire_at is None:
            return False
        return as_utc(now) > as_utc(self.expire_at)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "token": self.token,
            "long_url": self.long_url,
            "created_at": self.created_at.isoformat(),
            "expire_at": self.expire_at.isoformat() if self.expire_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ShortLink":
        """Create from dictionary."""
        expire_at = data.get("expire_at")
        return cls(
            token=data["token"],
            long_url=data["long_url"],
            created_at=as_utc(datetime.fromisoformat(data["created_at"])),
            expire_at=as_utc(datetime.fromisoformat(expire_at)) if expire_at else None,
        )
