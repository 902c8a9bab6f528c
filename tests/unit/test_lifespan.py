"""Tests for cache construction from settings and the app lifespan."""

import pytest
from fastapi import FastAPI

from monocloud.core.config import Settings, get_settings
from monocloud.core.lifespan import create_lifespan
from monocloud.infrastructure.cache.persistent import PersistentTierClient
from monocloud.infrastructure.cache.tiered_cache import TieredCache


def test_redis_disabled_builds_memory_only_cache() -> None:
    settings = Settings(_env_file=None, redis_enabled=False)
    assert PersistentTierClient.from_settings(settings) is None
    assert TieredCache.from_settings(settings).client is None


async def test_redis_url_builds_namespaced_client() -> None:
    settings = Settings(
        _env_file=None,
        redis_url="redis://localhost:6390/2",
        cache_namespace="test:",
        cache_operation_timeout_seconds=1.5,
    )
    client = PersistentTierClient.from_settings(settings)
    assert client is not None
    try:
        assert client.namespace == "test:"
        assert client.timeout_seconds == 1.5
        assert client.full_key("repo:a") == "test:repo:a"
    finally:
        await client.close()


async def test_lifespan_installs_and_removes_cache(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("REDIS_ENABLED", "false")
    get_settings.cache_clear()
    app = FastAPI()
    try:
        async with create_lifespan(app):
            cache = app.state.cache
            assert isinstance(cache, TieredCache)
            assert cache.client is None
            await cache.set("k", "v")
            assert await cache.get("k") == "v"
        assert app.state.cache is None
    finally:
        get_settings.cache_clear()
