"""Cache administration API schemas."""

from typing import Any

from pydantic import BaseModel, Field

from monocloud.infrastructure.cache.tiered_cache import ClearScope


class CacheStatusResponse(BaseModel):
    """Response for GET /cache/status."""

    available: bool = Field(..., description="Redis reachable and readable")
    read_only: bool = Field(..., description="Writes stay in process memory")
    keys_command_allowed: bool = Field(..., description="KEYS permitted (bulk clear, key counts)")
    get_command_allowed: bool = Field(..., description="Point reads permitted")
    keys_count: int = Field(..., description="Keys in the Redis namespace")
    memory_keys_count: int = Field(..., description="Entries in process memory")
    memory_only: bool = Field(..., description="True when Redis is not in use")
    keys: list[str] = Field(default_factory=list, description="Redis keys without namespace")


class ClearCacheRequest(BaseModel):
    """Request for POST /cache/clear."""

    pattern: str | None = Field(
        default=None,
        description="Redis match pattern relative to the namespace (e.g. 'speech:*'); memory is always fully cleared",
    )


class ClearCacheResponse(BaseModel):
    """Response for POST /cache/clear."""

    success: bool
    scope: ClearScope
    deleted_keys: int = 0
    message: str


class CacheKeyResponse(BaseModel):
    """Response for GET /cache/keys/{key}."""

    key: str
    value: Any = None


class DeleteKeyResponse(BaseModel):
    """Response for DELETE /cache/keys/{key}."""

    success: bool
    message: str
