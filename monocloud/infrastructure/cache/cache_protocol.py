"""Cache protocol consumed by the cache clients (DIP)."""

from collections.abc import Awaitable, Callable
from typing import Any, Protocol


class CacheProtocol(Protocol):
    """What the application services need from a cache (TieredCache implements it)."""

    async def get(self, key: str) -> Any:
        """Return cached value or None."""
        ...

    async def set(self, key: str, value: Any, ttl_seconds: float | None = None) -> bool:
        """Store value with optional TTL in seconds."""
        ...

    async def delete(self, key: str) -> bool:
        """Remove key from cache."""
        ...

    async def get_or_set(
        self,
        key: str,
        factory: Callable[[], Awaitable[Any]],
        ttl_seconds: float | None = None,
        *,
        validate: Callable[[Any], bool] | None = None,
    ) -> tuple[Any, bool]:
        """Return (value, from_cache), computing and caching on a miss.

        A cached value rejected by validate counts as a miss.
        """
        ...
