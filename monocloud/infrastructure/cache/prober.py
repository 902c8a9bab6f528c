"""Capability prober for the persistent tier.

Determines, without assuming prior success, whether the store is
reachable and which of point reads, point writes and KEYS enumeration it
permits. Managed Redis offerings often hand out read-only replicas or
forbid KEYS; probing once per interval keeps the cache adaptive without
operator configuration.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable

from monocloud.core.constants import (
    CACHE_KEY_SEP,
    CACHE_PROBE_PREFIX,
    CACHE_PROBE_READ_KEY,
    CACHE_PROBE_WRITE_KEY,
    CACHE_PROBE_WRITE_TTL,
)
from monocloud.infrastructure.cache.capability import CacheOperation, CapabilityStatus
from monocloud.infrastructure.cache.errors import (
    PERSISTENT_ERRORS,
    FailureKind,
    classify_error,
    is_read_only_error,
)
from monocloud.infrastructure.cache.persistent import PersistentTierClient

logger = logging.getLogger(__name__)


class CapabilityProber:
    """Probes and remembers the persistent tier's capabilities.

    The last status is reused until probe_interval_seconds have elapsed.
    Concurrent callers arriving after the interval share a single probe.
    """

    def __init__(
        self,
        client: PersistentTierClient | None,
        probe_interval_seconds: float = 60.0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._client = client
        self._interval = probe_interval_seconds
        self._clock = clock
        self._status = CapabilityStatus.unavailable()
        self._probed_at: float | None = None
        self._lock = asyncio.Lock()

    @property
    def status(self) -> CapabilityStatus:
        """Last known status, without probing."""
        return self._status

    @property
    def probed_at(self) -> float | None:
        return self._probed_at

    def _is_fresh(self) -> bool:
        return self._probed_at is not None and self._clock() - self._probed_at < self._interval

    async def current(self) -> CapabilityStatus:
        """Return the cached status, probing first if the interval has elapsed."""
        if self._client is None or self._is_fresh():
            return self._status
        async with self._lock:
            if not self._is_fresh():
                await self.probe()
        return self._status

    async def probe(self) -> CapabilityStatus:
        """Run the read, KEYS and write probes now and store the result."""
        if self._client is None:
            self._status = CapabilityStatus.unavailable()
        else:
            self._status = await self._run_probes(self._client)
        self._probed_at = self._clock()
        logger.info(
            "Cache capability probe: available=%s read_only=%s keys=%s get=%s",
            self._status.available,
            self._status.read_only,
            self._status.keys_command_allowed,
            self._status.get_command_allowed,
        )
        return self._status

    def record_failure(self, kind: FailureKind, operation: CacheOperation) -> CapabilityStatus:
        """Downgrade the status after a failure seen outside a probe.

        The downgraded status holds until the next scheduled probe.
        """
        downgraded = self._status.downgrade(kind, operation)
        if downgraded != self._status:
            logger.warning(
                "Cache capability downgraded after %s %s failure: %s -> %s",
                kind.value,
                operation.value,
                self._status,
                downgraded,
            )
            self._status = downgraded
            self._probed_at = self._clock()
        return self._status

    async def _run_probes(self, client: PersistentTierClient) -> CapabilityStatus:
        try:
            await client.get(client.full_key(CACHE_PROBE_READ_KEY))
        except PERSISTENT_ERRORS as e:
            kind = classify_error(e)
            if kind is FailureKind.PERMISSION:
                logger.warning("Redis GET not permitted; persistent tier unusable: %s", e)
            else:
                logger.warning("Redis unavailable (%s): %s", kind.value, e)
            return CapabilityStatus.unavailable()

        keys_allowed = await self._probe_keys(client)
        read_only = await self._probe_write(client)
        return CapabilityStatus(
            available=True,
            read_only=read_only,
            keys_command_allowed=keys_allowed,
            get_command_allowed=True,
        )

    async def _probe_keys(self, client: PersistentTierClient) -> bool:
        pattern = client.full_key(f"{CACHE_PROBE_PREFIX}{CACHE_KEY_SEP}*")
        try:
            await client.keys(pattern)
            return True
        except PERSISTENT_ERRORS as e:
            if classify_error(e) is FailureKind.PERMISSION:
                logger.info("Redis KEYS not permitted; bulk clear disabled")
            else:
                logger.warning("Redis KEYS probe failed; treating KEYS as not permitted: %s", e)
            return False

    async def _probe_write(self, client: PersistentTierClient) -> bool:
        """Return True (read-only) unless a write-then-delete cycle succeeds."""
        sentinel = client.full_key(CACHE_PROBE_WRITE_KEY)
        try:
            await client.set(sentinel, "1", CACHE_PROBE_WRITE_TTL)
            await client.delete(sentinel)
            return False
        except PERSISTENT_ERRORS as e:
            if is_read_only_error(e) or classify_error(e) is FailureKind.PERMISSION:
                logger.info("Redis is read-only; writes stay in memory: %s", e)
            else:
                logger.warning("Redis write probe failed; assuming read-only: %s", e)
            return True
