"""Application lifespan: startup and shutdown.

Single place for startup/shutdown wiring. The tiered cache is built
here, once per process, and shared through app.state.cache.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from monocloud.core.config import get_settings
from monocloud.infrastructure.cache.tiered_cache import TieredCache
from monocloud.shared.telemetry.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup: logging, tiered cache (memory-only when Redis is disabled or
    unreachable). Shutdown: cache disconnect.
    """
    settings = get_settings()
    setup_logging()

    # ---- Startup ----
    cache = TieredCache.from_settings(settings)
    await cache.connect()
    app.state.cache = cache
    logger.info("Tiered cache ready (namespace %s)", settings.cache_namespace)

    yield

    # ---- Shutdown ----
    if getattr(app.state, "cache", None) is not None:
        await app.state.cache.disconnect()
        app.state.cache = None
        logger.info("Cache disconnected")
