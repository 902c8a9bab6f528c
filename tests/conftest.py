"""Pytest configuration and fixtures for monocloud.

Cache fixtures share one FakeClock between the cache and the FakeRedis
double, so tests can advance time past TTLs and probe intervals. HTTP
tests use monocloud.main:app with app.state.cache set directly (the
ASGI transport does not run the lifespan).
"""

from collections.abc import AsyncIterator

import pytest
from httpx import ASGITransport, AsyncClient

from monocloud.core.config import get_settings
from monocloud.infrastructure.cache.persistent import PersistentTierClient
from monocloud.infrastructure.cache.tiered_cache import TieredCache
from monocloud.main import app
from tests.fakes import FakeClock, FakeRedis

NAMESPACE = "monocloud:"
ADMIN_API_KEY = "test-admin-key"


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_redis(clock: FakeClock) -> FakeRedis:
    return FakeRedis(clock)


@pytest.fixture
def persistent(fake_redis: FakeRedis) -> PersistentTierClient:
    """PersistentTierClient over FakeRedis with a short command timeout."""
    return PersistentTierClient(fake_redis, namespace=NAMESPACE, timeout_seconds=0.2)


@pytest.fixture
def cache(persistent: PersistentTierClient, clock: FakeClock) -> TieredCache:
    """Fresh TieredCache backed by FakeRedis (full access unless a test restricts it)."""
    return TieredCache(
        persistent,
        default_ttl=3600,
        local_ttl=600,
        probe_interval_seconds=60,
        clock=clock,
    )


@pytest.fixture
def memory_cache(clock: FakeClock) -> TieredCache:
    """TieredCache with no persistent tier configured."""
    return TieredCache(None, default_ttl=3600, clock=clock)


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {ADMIN_API_KEY}"}


@pytest.fixture
async def client(
    cache: TieredCache, monkeypatch: pytest.MonkeyPatch
) -> AsyncIterator[AsyncClient]:
    """Async HTTP client against the FastAPI app with the fixture cache installed."""
    monkeypatch.setenv("ADMIN_API_KEY", ADMIN_API_KEY)
    get_settings.cache_clear()
    previous = getattr(app.state, "cache", None)
    app.state.cache = cache
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    finally:
        app.state.cache = previous
        get_settings.cache_clear()
