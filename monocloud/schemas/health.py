"""Health check API schemas."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response for GET /health (liveness)."""

    status: str = Field(default="ok", description="Service status")


class ReadinessResponse(BaseModel):
    """Response for GET /health/ready.

    The cache never blocks readiness; cache_mode reports how it is degraded.
    """

    status: str = Field(default="ok", description="Readiness status")
    cache_mode: Literal["redis", "read-only", "memory-only"] = Field(
        ..., description="Last known persistent tier mode (no probe is triggered)"
    )
