"""API request/response schemas (Pydantic)."""

from monocloud.schemas.cache import (
    CacheKeyResponse,
    CacheStatusResponse,
    ClearCacheRequest,
    ClearCacheResponse,
    DeleteKeyResponse,
)
from monocloud.schemas.health import HealthResponse, ReadinessResponse

__all__ = [
    "CacheKeyResponse",
    "CacheStatusResponse",
    "ClearCacheRequest",
    "ClearCacheResponse",
    "DeleteKeyResponse",
    "HealthResponse",
    "ReadinessResponse",
]
