"""Persistent tier client: namespaced, time-bounded access to Redis.

Thin wrapper over redis.asyncio.Redis. Every call is bounded by an
explicit timeout; a timeout surfaces as builtin TimeoutError and is
classified as a connectivity failure by the caller. No error handling
here: the tiered cache and the prober decide what a failure means.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from typing import TypeVar

import redis.asyncio as redis

from monocloud.core.config import Settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PersistentTierClient:
    """Redis commands used by the tiered cache, scoped to one key namespace.

    Command methods take fully namespaced keys; use full_key() to build
    them from cache keys.
    """

    def __init__(
        self,
        redis_client: redis.Redis,
        namespace: str,
        timeout_seconds: float = 4.0,
    ) -> None:
        """Initialize the client.

        Args:
            redis_client: Async Redis client created with decode_responses=True.
            namespace: Prefix for every key this process reads or writes.
            timeout_seconds: Ceiling for each command round-trip.
        """
        self.redis = redis_client
        self.namespace = namespace
        self.timeout_seconds = timeout_seconds

    @classmethod
    def from_settings(cls, settings: Settings) -> PersistentTierClient | None:
        """Build a client from settings, or None when Redis is disabled."""
        if not settings.redis_enabled:
            logger.info("Redis disabled; cache operating in memory-only mode")
            return None
        common = {
            "decode_responses": True,
            "socket_connect_timeout": settings.redis_socket_timeout,
            "socket_timeout": settings.redis_socket_timeout,
            "socket_keepalive": True,
        }
        if settings.redis_url is not None and settings.redis_url.get_secret_value():
            client = redis.Redis.from_url(settings.redis_url.get_secret_value(), **common)
        else:
            client = redis.Redis(
                host=settings.redis_host,
                port=settings.redis_port,
                db=settings.redis_db,
                password=settings.redis_password.get_secret_value() if settings.redis_password else None,
                **common,
            )
        return cls(
            client,
            namespace=settings.cache_namespace,
            timeout_seconds=settings.cache_operation_timeout_seconds,
        )

    def full_key(self, key: str) -> str:
        return f"{self.namespace}{key}"

    def strip_namespace(self, full_key: str) -> str:
        if full_key.startswith(self.namespace):
            return full_key[len(self.namespace):]
        return full_key

    async def _bounded(self, awaitable: Awaitable[T]) -> T:
        return await asyncio.wait_for(awaitable, timeout=self.timeout_seconds)

    async def get(self, full_key: str) -> str | None:
        return await self._bounded(self.redis.get(full_key))

    async def set(self, full_key: str, value: str, ttl_seconds: int) -> None:
        await self._bounded(self.redis.set(full_key, value, ex=ttl_seconds))

    async def exists(self, full_key: str) -> bool:
        return int(await self._bounded(self.redis.exists(full_key))) > 0

    async def delete(self, *full_keys: str) -> int:
        if not full_keys:
            return 0
        return int(await self._bounded(self.redis.delete(*full_keys)))

    async def keys(self, pattern: str) -> list[str]:
        return list(await self._bounded(self.redis.keys(pattern)))

    async def close(self) -> None:
        await self.redis.aclose()
