"""Tests for TieredCache: tier ordering, degradation and failure absorption."""

import json

import pytest
from redis.exceptions import (
    ConnectionError as RedisConnectionError,
    NoPermissionError,
    ReadOnlyError,
    ResponseError,
    TimeoutError as RedisTimeoutError,
)

from monocloud.domain.exceptions import (
    InvalidCacheKeyException,
    InvalidTtlException,
    ValidationException,
)
from monocloud.infrastructure.cache.persistent import PersistentTierClient
from monocloud.infrastructure.cache.tiered_cache import ClearScope, TieredCache
from tests.fakes import FakeClock, FakeRedis

PROBE_READ_KEY = "monocloud:__probe__:read"


def _writes_to(fake_redis: FakeRedis, full_key: str) -> list[tuple]:
    return [args for name, args in fake_redis.calls if name == "set" and args[0] == full_key]


class TestSetThenGet:
    """A value written is immediately readable, whatever Redis is doing."""

    async def test_roundtrip_with_redis(self, cache: TieredCache, fake_redis: FakeRedis) -> None:
        assert await cache.set("k", {"a": [1, 2, 3]}, 60) is True
        assert await cache.get("k") == {"a": [1, 2, 3]}
        assert json.loads(fake_redis.store["monocloud:k"][0]) == {"a": [1, 2, 3]}

    async def test_roundtrip_when_redis_disconnected(
        self, cache: TieredCache, fake_redis: FakeRedis
    ) -> None:
        for command in ("get", "set", "exists", "delete", "keys"):
            fake_redis.failures[command] = RedisConnectionError("Connection refused")
        assert await cache.set("k", "value", 60) is True
        assert await cache.get("k") == "value"
        assert (await cache.get_status()).available is False

    async def test_roundtrip_memory_only(self, memory_cache: TieredCache) -> None:
        assert await memory_cache.set("k", [1, "two"], 60) is True
        assert await memory_cache.get("k") == [1, "two"]

    async def test_default_ttl_used_when_omitted(
        self, cache: TieredCache, fake_redis: FakeRedis
    ) -> None:
        await cache.set("k", 1)
        (args,) = _writes_to(fake_redis, "monocloud:k")
        assert args[2] == 3600

    async def test_last_write_wins_in_both_tiers(
        self, cache: TieredCache, fake_redis: FakeRedis, persistent: PersistentTierClient, clock: FakeClock
    ) -> None:
        await cache.set("k", "first")
        await cache.set("k", "second")
        assert await cache.get("k") == "second"
        assert json.loads(fake_redis.store["monocloud:k"][0]) == "second"
        other = TieredCache(persistent, clock=clock)
        assert await other.get("k") == "second"

    async def test_unserializable_value_degrades_to_string(self, cache: TieredCache) -> None:
        assert await cache.set("k", {1, 2}) is True
        assert await cache.get("k") == str({1, 2})


class TestExpiry:
    """Entries past their TTL are absent from both tiers."""

    async def test_expired_entry_is_absent(self, cache: TieredCache, clock: FakeClock) -> None:
        await cache.set("k", "v", ttl_seconds=10)
        clock.advance(11)
        assert await cache.get("k") is None
        assert await cache.has("k") is False

    async def test_expired_entry_is_absent_memory_only(
        self, memory_cache: TieredCache, clock: FakeClock
    ) -> None:
        await memory_cache.set("k", "v", ttl_seconds=10)
        clock.advance(10)
        assert await memory_cache.get("k") == "v"
        clock.advance(1)
        assert await memory_cache.get("k") is None
        assert await memory_cache.has("k") is False
        assert memory_cache.local.size() == 0


class TestReadPath:
    async def test_redis_hit_on_fresh_process_is_deep_equal(
        self, cache: TieredCache, persistent: PersistentTierClient, clock: FakeClock
    ) -> None:
        value = {"owner": "o", "graph": {"nodes": [{"id": "a", "data": {"deps": ["b", "c"]}}], "edges": []}}
        await cache.set("repo:o/r", value)
        fresh = TieredCache(persistent, clock=clock)
        assert await fresh.get("repo:o/r") == value

    async def test_redis_hit_is_backfilled_into_memory(
        self, cache: TieredCache, persistent: PersistentTierClient, fake_redis: FakeRedis, clock: FakeClock
    ) -> None:
        await cache.set("k", "v")
        fresh = TieredCache(persistent, local_ttl=600, clock=clock)
        assert await fresh.get("k") == "v"
        reads = fake_redis.count("get")
        assert await fresh.get("k") == "v"
        assert fake_redis.count("get") == reads
        entry = fresh.local.get_entry("k")
        assert entry is not None
        assert entry.expires_at - entry.created_at == 600

    async def test_malformed_redis_value_is_a_miss_and_deleted(
        self, cache: TieredCache, fake_redis: FakeRedis
    ) -> None:
        fake_redis.store["monocloud:bad"] = ("{not json", None)
        assert await cache.get("bad") is None
        assert "monocloud:bad" not in fake_redis.store

    async def test_has_checks_redis_after_memory(
        self, cache: TieredCache, persistent: PersistentTierClient, clock: FakeClock
    ) -> None:
        await cache.set("k", 1)
        fresh = TieredCache(persistent, clock=clock)
        assert await fresh.has("k") is True
        assert await fresh.has("missing") is False

    async def test_read_timeout_is_a_miss_and_marks_unavailable(
        self, cache: TieredCache, fake_redis: FakeRedis
    ) -> None:
        fake_redis.hang.add("get")
        assert await cache.get("k") is None
        assert (await cache.get_status()).available is False

    async def test_read_timeout_after_probe_downgrades(
        self, cache: TieredCache, fake_redis: FakeRedis
    ) -> None:
        await cache.prober.probe()
        assert cache.prober.status.available is True
        fake_redis.failures["get"] = RedisTimeoutError("Timeout reading from socket")
        assert await cache.get("k") is None
        status = await cache.get_status()
        assert status.available is False
        assert status.read_only is True
        assert status.get_command_allowed is False

    async def test_unavailable_redis_is_not_called_until_next_probe(
        self, cache: TieredCache, fake_redis: FakeRedis, clock: FakeClock
    ) -> None:
        fake_redis.failures["get"] = RedisConnectionError("Connection refused")
        assert await cache.get("a") is None
        calls = len(fake_redis.calls)
        assert await cache.get("b") is None
        assert len(fake_redis.calls) == calls

        del fake_redis.failures["get"]
        clock.advance(61)
        assert (await cache.get_status()).available is True


class TestWritePath:
    async def test_read_only_store_receives_no_data_writes(
        self, cache: TieredCache, fake_redis: FakeRedis
    ) -> None:
        fake_redis.failures["set"] = ReadOnlyError("READONLY You can't write against a read only replica.")
        assert await cache.set("k", "v") is True
        assert await cache.get("k") == "v"
        assert _writes_to(fake_redis, "monocloud:k") == []
        assert (await cache.get_status()).read_only is True

    async def test_noperm_on_write_flips_read_only(
        self, cache: TieredCache, fake_redis: FakeRedis
    ) -> None:
        fake_redis.failures["set"] = NoPermissionError(
            "NOPERM this user has no permissions to run the 'set' command"
        )
        assert await cache.set("k", "v") is True
        assert (await cache.get_status()).read_only is True

    async def test_noperm_discovered_during_set_flips_immediately(
        self, cache: TieredCache, fake_redis: FakeRedis
    ) -> None:
        await cache.prober.probe()
        assert cache.prober.status.read_only is False
        # Untyped error: classified by its NOPERM message.
        fake_redis.failures["set"] = ResponseError(
            "NOPERM this user has no permissions to run the 'set' command"
        )
        assert await cache.set("k", "v") is True
        status = await cache.get_status()
        assert status.read_only is True
        assert status.available is True
        assert await cache.get("k") == "v"

    async def test_delete_removes_from_both_tiers(
        self, cache: TieredCache, fake_redis: FakeRedis
    ) -> None:
        await cache.set("k", "v")
        assert await cache.delete("k") is True
        assert await cache.get("k") is None
        assert "monocloud:k" not in fake_redis.store

    async def test_delete_succeeds_when_redis_fails(
        self, cache: TieredCache, fake_redis: FakeRedis
    ) -> None:
        await cache.set("k", "v")
        fake_redis.failures["delete"] = RedisConnectionError("Connection reset by peer")
        assert await cache.delete("k") is True
        assert cache.local.has("k") is False


class TestClear:
    async def test_clear_twice_is_idempotent(self, cache: TieredCache) -> None:
        await cache.set("a", 1)
        await cache.set("b", 2)
        first = await cache.clear()
        assert first
        assert cache.local.size() == 0
        second = await cache.clear()
        assert second
        assert cache.local.size() == 0

    async def test_pattern_applies_to_redis_only(
        self, cache: TieredCache, fake_redis: FakeRedis
    ) -> None:
        await cache.set("speech:abc", {"audio": "AAAA", "contentType": "audio/mpeg"})
        await cache.set("repo:o/r", {"graph": {}})
        result = await cache.clear("speech:*")
        assert result.scope is ClearScope.FULL
        assert result.deleted_keys == 1
        assert cache.local.size() == 0
        assert "monocloud:repo:o/r" in fake_redis.store
        assert "monocloud:speech:abc" not in fake_redis.store

    async def test_keys_not_permitted_clears_memory_only(
        self, cache: TieredCache, fake_redis: FakeRedis
    ) -> None:
        fake_redis.failures["keys"] = NoPermissionError(
            "NOPERM this user has no permissions to run the 'keys' command"
        )
        await cache.set("a", 1)
        scans_before = fake_redis.count("keys")
        result = await cache.clear("a*")
        assert fake_redis.count("keys") == scans_before
        assert result.success is True
        assert result.scope is ClearScope.MEMORY_ONLY
        assert "KEYS" in (result.reason or "")
        assert cache.local.size() == 0
        assert "monocloud:a" in fake_redis.store

    async def test_read_only_store_clears_memory_only(
        self, cache: TieredCache, fake_redis: FakeRedis
    ) -> None:
        fake_redis.failures["set"] = ReadOnlyError("READONLY You can't write against a read only replica.")
        await cache.set("a", 1)
        result = await cache.clear()
        assert result.scope is ClearScope.MEMORY_ONLY
        assert fake_redis.count("delete") == 0

    async def test_memory_only_cache_reports_memory_only(self, memory_cache: TieredCache) -> None:
        await memory_cache.set("a", 1)
        result = await memory_cache.clear()
        assert result.success is True
        assert result.scope is ClearScope.MEMORY_ONLY
        assert memory_cache.local.size() == 0

    async def test_keys_failure_reports_unsuccessful(
        self, cache: TieredCache, fake_redis: FakeRedis
    ) -> None:
        await cache.set("a", 1)
        fake_redis.failures["keys"] = RedisConnectionError("Connection reset by peer")
        result = await cache.clear()
        assert not result
        assert result.scope is ClearScope.MEMORY_ONLY
        assert cache.local.size() == 0


class TestStatus:
    async def test_status_counts_both_tiers(self, cache: TieredCache) -> None:
        await cache.set("a", 1)
        await cache.set("b", 2)
        status = await cache.get_status()
        assert status.available is True
        assert status.read_only is False
        assert status.keys_command_allowed is True
        assert status.get_command_allowed is True
        assert status.keys_count == 2
        assert status.memory_keys_count == 2
        assert status.memory_only is False

    async def test_memory_only_status(self, memory_cache: TieredCache) -> None:
        await memory_cache.set("a", 1)
        status = await memory_cache.get_status()
        assert status.to_dict() == {
            "available": False,
            "read_only": True,
            "keys_command_allowed": False,
            "get_command_allowed": False,
            "keys_count": 0,
            "memory_keys_count": 1,
            "memory_only": True,
        }

    async def test_probe_runs_once_per_interval(
        self, cache: TieredCache, fake_redis: FakeRedis, clock: FakeClock
    ) -> None:
        def probe_reads() -> int:
            return len([a for n, a in fake_redis.calls if n == "get" and a[0] == PROBE_READ_KEY])

        await cache.get_status()
        await cache.get("x")
        await cache.get_status()
        assert probe_reads() == 1
        clock.advance(61)
        await cache.get_status()
        assert probe_reads() == 2

    async def test_list_keys_strips_namespace(self, cache: TieredCache) -> None:
        await cache.set("b", 1)
        await cache.set("a", 2)
        assert await cache.list_keys() == ["a", "b"]

    async def test_peek_accepts_prefixed_key(self, cache: TieredCache) -> None:
        await cache.set("k", {"x": 1})
        assert await cache.peek("k") == {"x": 1}
        assert await cache.peek("monocloud:k") == {"x": 1}
        assert await cache.peek("missing") is None


class TestInputValidation:
    """Malformed input is the only error that reaches callers."""

    @pytest.mark.parametrize("key", ["", "   ", None, 42])
    async def test_invalid_keys_raise(self, cache: TieredCache, key: object) -> None:
        with pytest.raises(InvalidCacheKeyException):
            await cache.set(key, "v")  # type: ignore[arg-type]
        with pytest.raises(InvalidCacheKeyException):
            await cache.get(key)  # type: ignore[arg-type]

    @pytest.mark.parametrize("ttl", [0, -5, True])
    async def test_non_positive_ttl_raises(self, cache: TieredCache, ttl: object) -> None:
        with pytest.raises(InvalidTtlException):
            await cache.set("k", "v", ttl)  # type: ignore[arg-type]
        assert cache.local.size() == 0

    def test_input_errors_are_validation_errors(self) -> None:
        assert issubclass(InvalidCacheKeyException, ValidationException)
        assert issubclass(InvalidTtlException, ValidationException)


class TestGetOrSet:
    async def test_factory_runs_once(self, cache: TieredCache) -> None:
        calls: list[int] = []

        async def factory() -> str:
            calls.append(1)
            return "computed"

        assert await cache.get_or_set("k", factory) == ("computed", False)
        assert await cache.get_or_set("k", factory) == ("computed", True)
        assert len(calls) == 1

    async def test_none_is_not_cached(self, cache: TieredCache) -> None:
        async def factory() -> None:
            return None

        assert await cache.get_or_set("k", factory) == (None, False)
        assert await cache.has("k") is False

    async def test_rejected_cached_value_is_recomputed_and_overwritten(
        self, cache: TieredCache, fake_redis: FakeRedis
    ) -> None:
        fake_redis.store["monocloud:k"] = ('{"x":1}', None)

        async def factory() -> str:
            return "computed"

        def is_text(value: object) -> bool:
            return isinstance(value, str)

        assert await cache.get_or_set("k", factory, validate=is_text) == ("computed", False)
        assert json.loads(fake_redis.store["monocloud:k"][0]) == "computed"
        assert await cache.get_or_set("k", factory, validate=is_text) == ("computed", True)


class TestLifecycle:
    async def test_connect_probes_and_disconnect_closes(
        self, cache: TieredCache, fake_redis: FakeRedis
    ) -> None:
        await cache.connect()
        assert cache.prober.probed_at is not None
        await cache.disconnect()
        assert fake_redis.closed is True

    async def test_connect_with_unreachable_redis_does_not_raise(
        self, cache: TieredCache, fake_redis: FakeRedis
    ) -> None:
        fake_redis.failures["get"] = RedisConnectionError("Connection refused")
        await cache.connect()
        assert cache.prober.status.available is False

    async def test_memory_only_connect_is_noop(self, memory_cache: TieredCache) -> None:
        await memory_cache.connect()
        await memory_cache.disconnect()
        assert memory_cache.prober.probed_at is None
