"""Tiered cache: in-process tier in front of an optional Redis tier.

Reads check process memory first, then Redis when the prober says reads
are allowed; Redis hits are back-filled into memory. Writes always land
in memory and go to Redis only when it is reachable and writable. Redis
faults are classified, folded into the capability status and logged;
they never reach the caller. Only malformed input (empty key,
non-positive TTL) raises.

Values are JSON-encoded once on set and stored as text in both tiers,
so a value read back from memory is decoded exactly like one read from
Redis by another process.
"""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Awaitable, Callable
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any

from monocloud.core.config import Settings
from monocloud.core.constants import CACHE_CLEAR_CHUNK_SIZE
from monocloud.domain.exceptions import InvalidCacheKeyException, InvalidTtlException
from monocloud.infrastructure.cache.capability import CacheOperation, CapabilityStatus
from monocloud.infrastructure.cache.errors import PERSISTENT_ERRORS, classify_error
from monocloud.infrastructure.cache.local_tier import LocalTier
from monocloud.infrastructure.cache.persistent import PersistentTierClient
from monocloud.infrastructure.cache.prober import CapabilityProber
from monocloud.infrastructure.cache.serialization import (
    CacheDecodeError,
    decode_value,
    encode_value,
)

logger = logging.getLogger(__name__)


class ClearScope(str, Enum):
    """How far a clear() reached."""

    FULL = "full"
    MEMORY_ONLY = "memory_only"


@dataclass(frozen=True)
class ClearResult:
    """Outcome of clear(). Truthy when the clear did everything it was allowed to do."""

    success: bool
    scope: ClearScope
    deleted_keys: int = 0
    reason: str | None = None

    def __bool__(self) -> bool:
        return self.success

    @property
    def message(self) -> str:
        if self.scope is ClearScope.FULL:
            return f"Cache cleared successfully ({self.deleted_keys} Redis keys deleted)"
        if self.success:
            return f"Only memory cache was cleared: {self.reason}"
        return f"Failed to clear Redis cache, but memory cache was cleared: {self.reason}"


@dataclass(frozen=True)
class CacheStatus:
    """Capability snapshot plus live key counts for both tiers."""

    available: bool
    read_only: bool
    keys_command_allowed: bool
    get_command_allowed: bool
    keys_count: int
    memory_keys_count: int

    @property
    def memory_only(self) -> bool:
        return not self.available

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["memory_only"] = self.memory_only
        return data


class TieredCache:
    """Get/set/has/delete/clear/status over a LocalTier and an optional Redis tier.

    Construct one per process (see monocloud.core.lifespan) and call
    connect() at startup and disconnect() at shutdown. Tests build fresh
    instances with an injected client and clock.
    """

    def __init__(
        self,
        client: PersistentTierClient | None = None,
        *,
        default_ttl: int = 60 * 60 * 24,
        local_ttl: int = 60 * 60,
        probe_interval_seconds: float = 60.0,
        local_max_entries: int | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the cache.

        Args:
            client: Persistent tier client; None runs the cache in memory-only mode.
            default_ttl: TTL in seconds used by set() when none is given.
            local_ttl: Lifetime of entries back-filled into memory from Redis.
            probe_interval_seconds: Minimum time between capability probes.
            local_max_entries: Optional LRU bound for the memory tier.
            clock: Returns epoch seconds; shared by the memory tier and the prober.
        """
        self._validate_ttl(default_ttl)
        self._validate_ttl(local_ttl)
        self._client = client
        self._default_ttl = default_ttl
        self._local_ttl = local_ttl
        self._local = LocalTier(clock=clock, max_entries=local_max_entries)
        self._prober = CapabilityProber(client, probe_interval_seconds, clock=clock)

    @classmethod
    def from_settings(cls, settings: Settings) -> TieredCache:
        """Build the process cache from application settings."""
        return cls(
            PersistentTierClient.from_settings(settings),
            default_ttl=settings.cache_default_ttl,
            local_ttl=settings.cache_local_ttl,
            probe_interval_seconds=settings.cache_probe_interval_seconds,
            local_max_entries=settings.cache_local_max_entries,
        )

    @property
    def client(self) -> PersistentTierClient | None:
        return self._client

    @property
    def prober(self) -> CapabilityProber:
        return self._prober

    @property
    def local(self) -> LocalTier:
        return self._local

    async def connect(self) -> None:
        """Probe the persistent tier once. Call on app startup; never raises."""
        if self._client is None:
            logger.info("Cache operating in memory-only mode (no Redis configured)")
            return
        status = await self._prober.probe()
        if not status.available:
            logger.warning("Redis unreachable at startup; cache running memory-only until next probe")
        elif status.read_only:
            logger.warning("Redis is read-only; cache writes stay in process memory")

    async def disconnect(self) -> None:
        """Close the Redis connection pool. Call on app shutdown."""
        if self._client is None:
            return
        try:
            await self._client.close()
            logger.info("Redis cache disconnected")
        except PERSISTENT_ERRORS as e:
            logger.warning("Error closing Redis connection: %s", e)

    @staticmethod
    def _validate_key(key: Any) -> None:
        if not isinstance(key, str) or not key.strip():
            raise InvalidCacheKeyException(key)

    @staticmethod
    def _validate_ttl(ttl: Any) -> None:
        if isinstance(ttl, bool) or not isinstance(ttl, (int, float)) or not ttl > 0:
            raise InvalidTtlException(ttl)

    def _record_failure(self, exc: BaseException, operation: CacheOperation, key: str) -> None:
        kind = classify_error(exc)
        logger.warning(
            "Redis %s failed for %s (%s): %s", operation.value, key, kind.value, exc
        )
        self._prober.record_failure(kind, operation)

    async def _discard_poisoned(self, full_key: str, status: CapabilityStatus) -> None:
        if self._client is None or not status.can_write:
            return
        try:
            await self._client.delete(full_key)
            logger.info("Deleted malformed cache entry %s", full_key)
        except PERSISTENT_ERRORS as e:
            self._record_failure(e, CacheOperation.WRITE, full_key)

    async def get(self, key: str) -> Any | None:
        """Return the cached value, or None on a miss in both tiers.

        Redis errors are treated as a miss.
        """
        self._validate_key(key)
        raw = self._local.get(key)
        if raw is not None:
            logger.debug("Cache HIT (memory): %s", key)
            return decode_value(raw)

        status = await self._prober.current()
        if self._client is None or not status.can_read:
            logger.debug("Cache MISS (memory only): %s", key)
            return None
        full_key = self._client.full_key(key)
        try:
            raw = await self._client.get(full_key)
        except PERSISTENT_ERRORS as e:
            self._record_failure(e, CacheOperation.READ, key)
            return None
        if raw is None:
            logger.debug("Cache MISS: %s", key)
            return None
        try:
            value = decode_value(raw)
        except CacheDecodeError as e:
            logger.warning("Ignoring malformed Redis value for %s: %s", key, e)
            await self._discard_poisoned(full_key, status)
            return None
        # Back-filled entries get the fixed local TTL, not Redis's remaining TTL.
        self._local.set(key, raw, self._local_ttl)
        logger.debug("Cache HIT (redis): %s", key)
        return value

    async def set(self, key: str, value: Any, ttl_seconds: float | None = None) -> bool:
        """Store value in memory, then in Redis when writable.

        Returns True once the memory write succeeded; a skipped or failed
        Redis write does not change the result.
        """
        self._validate_key(key)
        ttl = self._default_ttl if ttl_seconds is None else ttl_seconds
        self._validate_ttl(ttl)
        encoded = encode_value(value)
        self._local.set(key, encoded, ttl)

        status = await self._prober.current()
        if self._client is None or not status.can_write:
            logger.debug("Cache SET (memory only): %s (TTL: %ss)", key, ttl)
            return True
        try:
            await self._client.set(self._client.full_key(key), encoded, math.ceil(ttl))
            logger.debug("Cache SET: %s (TTL: %ss)", key, ttl)
        except PERSISTENT_ERRORS as e:
            self._record_failure(e, CacheOperation.WRITE, key)
        return True

    async def has(self, key: str) -> bool:
        """Return True if key is live in memory or exists in Redis."""
        self._validate_key(key)
        if self._local.has(key):
            return True
        status = await self._prober.current()
        if self._client is None or not status.can_read:
            return False
        try:
            return await self._client.exists(self._client.full_key(key))
        except PERSISTENT_ERRORS as e:
            self._record_failure(e, CacheOperation.READ, key)
            return False

    async def delete(self, key: str) -> bool:
        """Remove key from memory and, when writable, from Redis.

        Always True: removal from memory is enough for this process.
        """
        self._validate_key(key)
        self._local.delete(key)
        status = await self._prober.current()
        if self._client is None or not status.can_write:
            return True
        try:
            await self._client.delete(self._client.full_key(key))
            logger.debug("Cache DELETE: %s", key)
        except PERSISTENT_ERRORS as e:
            self._record_failure(e, CacheOperation.WRITE, key)
        return True

    async def clear(self, pattern: str | None = None) -> ClearResult:
        """Clear all of memory and, when allowed, Redis keys matching pattern.

        The pattern applies to Redis only (namespace is prepended); memory
        is always cleared entirely. The result scope tells a full clear
        apart from a memory-only one.
        """
        self._local.clear()
        logger.info("Cache CLEARED: memory tier")
        if self._client is None:
            return ClearResult(True, ClearScope.MEMORY_ONLY, reason="Redis is not configured")

        status = await self._prober.current()
        if not status.available:
            return ClearResult(True, ClearScope.MEMORY_ONLY, reason="Redis is unavailable")
        if status.read_only:
            return ClearResult(True, ClearScope.MEMORY_ONLY, reason="Redis is read-only")
        if not status.keys_command_allowed:
            return ClearResult(True, ClearScope.MEMORY_ONLY, reason="KEYS command not permitted")

        full_pattern = self._client.full_key(pattern or "*")
        try:
            keys = await self._client.keys(full_pattern)
        except PERSISTENT_ERRORS as e:
            self._record_failure(e, CacheOperation.SCAN, full_pattern)
            return ClearResult(False, ClearScope.MEMORY_ONLY, reason=f"KEYS failed: {e}")

        deleted = 0
        try:
            for start in range(0, len(keys), CACHE_CLEAR_CHUNK_SIZE):
                deleted += await self._client.delete(*keys[start:start + CACHE_CLEAR_CHUNK_SIZE])
        except PERSISTENT_ERRORS as e:
            self._record_failure(e, CacheOperation.WRITE, full_pattern)
            return ClearResult(
                False,
                ClearScope.MEMORY_ONLY,
                deleted_keys=deleted,
                reason=f"DEL failed after {deleted} of {len(keys)} keys: {e}",
            )
        logger.info("Cache CLEARED: %s (%s Redis keys)", full_pattern, deleted)
        return ClearResult(True, ClearScope.FULL, deleted_keys=deleted)

    async def get_status(self) -> CacheStatus:
        """Current capabilities plus live key counts (one uncached KEYS call)."""
        status = await self._prober.current()
        keys_count = 0
        if self._client is not None and status.available and status.keys_command_allowed:
            try:
                keys_count = len(await self._client.keys(self._client.full_key("*")))
            except PERSISTENT_ERRORS as e:
                self._record_failure(e, CacheOperation.SCAN, "status")
                status = self._prober.status
        return CacheStatus(
            available=status.available,
            read_only=status.read_only,
            keys_command_allowed=status.keys_command_allowed,
            get_command_allowed=status.get_command_allowed,
            keys_count=keys_count,
            memory_keys_count=self._local.size(),
        )

    async def list_keys(self) -> list[str]:
        """Redis keys in the namespace (namespace stripped); empty when KEYS is not allowed."""
        status = await self._prober.current()
        if self._client is None or not (status.can_read and status.keys_command_allowed):
            return []
        try:
            keys = await self._client.keys(self._client.full_key("*"))
        except PERSISTENT_ERRORS as e:
            self._record_failure(e, CacheOperation.SCAN, "list_keys")
            return []
        return sorted(self._client.strip_namespace(k) for k in keys)

    async def peek(self, key: str) -> Any | None:
        """Read a key straight from Redis, bypassing memory.

        key may be given with or without the namespace prefix. Values that
        are not valid JSON are returned as the raw string.
        """
        self._validate_key(key)
        status = await self._prober.current()
        if self._client is None or not status.can_read:
            return None
        full_key = key if key.startswith(self._client.namespace) else self._client.full_key(key)
        try:
            raw = await self._client.get(full_key)
        except PERSISTENT_ERRORS as e:
            self._record_failure(e, CacheOperation.READ, full_key)
            return None
        if raw is None:
            return None
        try:
            return decode_value(raw)
        except CacheDecodeError:
            return raw

    async def get_or_set(
        self,
        key: str,
        factory: Callable[[], Awaitable[Any]],
        ttl_seconds: float | None = None,
        *,
        validate: Callable[[Any], bool] | None = None,
    ) -> tuple[Any, bool]:
        """Return (value, from_cache); on a miss await factory() and cache its result.

        A cached value that validate rejects is treated as a miss and
        overwritten. None results are returned but not cached. Errors from
        factory propagate.
        """
        cached_value = await self.get(key)
        if cached_value is not None:
            if validate is None or validate(cached_value):
                return cached_value, True
            logger.warning(
                "Cached value for %s has unexpected shape (%s); recomputing",
                key,
                type(cached_value).__name__,
            )
        value = await factory()
        if value is not None:
            await self.set(key, value, ttl_seconds)
        return value, False
