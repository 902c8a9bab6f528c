"""Expiring cache entry: a value plus creation and absolute expiry time."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class CacheEntry:
    """Value wrapped with creation time and absolute expiry (epoch seconds).

    Invariant: expires_at > created_at. Live while now <= expires_at.
    """

    data: Any
    created_at: float
    expires_at: float

    def __post_init__(self) -> None:
        if self.expires_at <= self.created_at:
            raise ValueError(
                f"expires_at ({self.expires_at}) must be after created_at ({self.created_at})"
            )

    @classmethod
    def create(cls, data: Any, now: float, ttl_seconds: float) -> CacheEntry:
        """Build an entry that expires ttl_seconds after now.

        Raises:
            ValueError: If ttl_seconds is not positive.
        """
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got: {ttl_seconds}")
        return cls(data=data, created_at=now, expires_at=now + ttl_seconds)

    def is_live(self, now: float) -> bool:
        return now <= self.expires_at
