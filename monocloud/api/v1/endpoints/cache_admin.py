"""Cache administration: status, clear, single-key read and delete.

Thin pass-throughs to TieredCache. Everything except status requires the
admin bearer token.
"""

import logging

from fastapi import APIRouter

from monocloud.api.v1.dependencies import AdminDep, CacheDep
from monocloud.domain.exceptions import CacheReadOnlyException
from monocloud.infrastructure.cache.tiered_cache import ClearScope
from monocloud.schemas.cache import (
    CacheKeyResponse,
    CacheStatusResponse,
    ClearCacheRequest,
    ClearCacheResponse,
    DeleteKeyResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/status", response_model=CacheStatusResponse)
async def cache_status(cache: CacheDep) -> CacheStatusResponse:
    """Capability flags, key counts for both tiers and the Redis key list."""
    status = await cache.get_status()
    return CacheStatusResponse(**status.to_dict(), keys=await cache.list_keys())


@router.post(
    "/clear",
    response_model=ClearCacheResponse,
    dependencies=[AdminDep],
    responses={403: {"description": "Redis is read-only; only memory was cleared"}},
)
async def clear_cache(body: ClearCacheRequest, cache: CacheDep) -> ClearCacheResponse:
    """Clear memory and, when permitted, Redis keys matching body.pattern."""
    result = await cache.clear(body.pattern)
    capability = cache.prober.status
    if result.scope is ClearScope.MEMORY_ONLY and capability.available and capability.read_only:
        raise CacheReadOnlyException()
    logger.info("Admin cache clear: pattern=%s scope=%s", body.pattern, result.scope.value)
    return ClearCacheResponse(
        success=result.success,
        scope=result.scope,
        deleted_keys=result.deleted_keys,
        message=result.message,
    )


@router.get("/keys/{key:path}", response_model=CacheKeyResponse, dependencies=[AdminDep])
async def get_key(key: str, cache: CacheDep) -> CacheKeyResponse:
    """Raw Redis value for one key (namespace prefix optional)."""
    return CacheKeyResponse(key=key, value=await cache.peek(key))


@router.delete("/keys/{key:path}", response_model=DeleteKeyResponse, dependencies=[AdminDep])
async def delete_key(key: str, cache: CacheDep) -> DeleteKeyResponse:
    """Delete one key from both tiers (namespace prefix optional)."""
    if cache.client is not None:
        key = cache.client.strip_namespace(key)
    await cache.delete(key)
    return DeleteKeyResponse(success=True, message=f"Key {key} deleted successfully")
