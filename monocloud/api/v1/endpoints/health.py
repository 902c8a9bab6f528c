"""Health check endpoints, used for liveness and readiness probes."""

from fastapi import APIRouter

from monocloud.api.v1.dependencies import CacheDep
from monocloud.schemas.health import HealthResponse, ReadinessResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return simple ok status for liveness."""
    return HealthResponse()


@router.get("/ready", response_model=ReadinessResponse)
def readiness_check(cache: CacheDep) -> ReadinessResponse:
    """Ready once the cache exists; a degraded cache is reported, not failed."""
    status = cache.prober.status
    if not status.available:
        mode = "memory-only"
    elif status.read_only:
        mode = "read-only"
    else:
        mode = "redis"
    return ReadinessResponse(cache_mode=mode)
