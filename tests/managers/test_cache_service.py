# tests/managers/test_cache_service.py
"""Tests for the tenant-aware cache service."""

from time import perf_counter

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from portal_cache.clients import MemoryClient, RedisClient
from portal_cache.configs import CacheConfig, settings
from portal_cache.managers import CacheService
from tests.doubles import Clock, FailingClient, SlowClient

ENVELOPE = {"success": True, "data": [{"id": 1, "title": "Homecoming"}]}


class TestReadWrite:
    @pytest.mark.asyncio
    async def test_set_then_get(self, cache_service: CacheService) -> None:
        assert await cache_service.set("tenant:T1:post:1", ENVELOPE, ttl=60) is True
        assert await cache_service.get("tenant:T1:post:1") == ENVELOPE

        stats = cache_service.get_statistics()
        assert stats["sets"] == 1
        assert stats["hits"] == 1
        assert stats["misses"] == 0

    @pytest.mark.asyncio
    async def test_miss_is_counted(self, cache_service: CacheService) -> None:
        assert await cache_service.get("tenant:T1:post:404") is None
        assert cache_service.get_statistics()["misses"] == 1

    @pytest.mark.asyncio
    async def test_ttl_is_clamped(self, cache_service: CacheService) -> None:
        await cache_service.set("tenant:T1:a", ENVELOPE, ttl=10**9)
        await cache_service.set("tenant:T1:b", ENVELOPE, ttl=0)
        assert await cache_service.ttl("tenant:T1:a") <= cache_service.config.max_ttl
        assert await cache_service.ttl("tenant:T1:b") <= cache_service.config.default_ttl

    @pytest.mark.asyncio
    async def test_expired_entry_is_a_miss(
        self,
        cache_service: CacheService,
        clock: Clock,
    ) -> None:
        await cache_service.set("tenant:T1:post:1", ENVELOPE, ttl=60)
        clock.advance(61)
        assert await cache_service.get("tenant:T1:post:1") is None

    @pytest.mark.asyncio
    async def test_malformed_entry_is_a_miss(
        self,
        cache_service: CacheService,
        memory_client: MemoryClient,
    ) -> None:
        await memory_client.set("tenant:T1:post:1", "{not json")
        assert await cache_service.get("tenant:T1:post:1") is None
        stats = cache_service.get_statistics()
        assert stats["misses"] == 1
        assert stats["errors"] == 1

    @pytest.mark.asyncio
    async def test_unserializable_value_is_not_stored(self, cache_service: CacheService) -> None:
        assert await cache_service.set("tenant:T1:x", {"count": 2**70}) is False
        assert await cache_service.exists("tenant:T1:x") is False

    @pytest.mark.asyncio
    async def test_compressed_round_trip(self, memory_client: MemoryClient) -> None:
        config = CacheConfig(compression_enabled=True, compression_threshold=16)
        service = CacheService(client=memory_client, config=config)
        await service.initialize()
        payload = {"success": True, "data": "x" * 4096}
        assert await service.set("tenant:T1:big", payload)
        raw = await memory_client.get("tenant:T1:big")
        assert raw is not None
        assert len(raw) < 4096
        assert await service.get("tenant:T1:big") == payload
        await service.shutdown()


class TestFaultTolerance:
    @pytest.mark.asyncio
    async def test_unreachable_store_never_raises(
        self,
        failing_service: CacheService,
        failing_client: FailingClient,
    ) -> None:
        """Every operation reports its empty value instead of raising."""
        assert await failing_service.get("tenant:T1:post:1") is None
        assert await failing_service.set("tenant:T1:post:1", ENVELOPE) is False
        assert await failing_service.delete("tenant:T1:post:1") is False
        assert await failing_service.delete_pattern("tenant:T1:posts:*") is False
        assert await failing_service.scan("tenant:T1:*") == []
        assert await failing_service.incr("tenant:T1:counter", 60) == 0
        assert await failing_service.counter("tenant:T1:counter") == 0
        assert await failing_service.exists("tenant:T1:post:1") is False
        assert await failing_service.ttl("tenant:T1:post:1") == -1
        assert await failing_service.expire("tenant:T1:post:1", 10) is False
        assert await failing_service.ping() is False
        assert await failing_service.clear("T1") == 0

        assert "get" in failing_client.calls
        assert failing_service.get_statistics()["errors"] >= 10

    @pytest.mark.asyncio
    async def test_health_check_reports_unhealthy(self, failing_service: CacheService) -> None:
        health = await failing_service.health_check()
        assert health["status"] == "unhealthy"
        assert health["backend"] == "custom"

    @pytest.mark.asyncio
    async def test_slow_store_is_bounded(self) -> None:
        """A hanging store costs at most the operation timeout."""
        service = CacheService(
            client=SlowClient(delay=5),
            config=CacheConfig(operation_timeout=0.1),
        )
        await service.initialize()

        started = perf_counter()
        assert await service.get("tenant:T1:post:1") is None
        assert await service.set("tenant:T1:post:1", ENVELOPE) is False
        assert perf_counter() - started < 1.0

        stats = service.get_statistics()
        assert stats["timeouts"] == 2
        assert stats["misses"] == 1
        await service.shutdown()

    def test_uninitialized_client(self) -> None:
        service = CacheService()
        assert service.backend == "uninitialized"
        with pytest.raises(RuntimeError, match="not initialized"):
            _ = service.client


class TestCounters:
    @pytest.mark.asyncio
    async def test_incr_sets_expiry_only_on_creation(
        self,
        cache_service: CacheService,
        clock: Clock,
    ) -> None:
        """Repeated increments never extend the counter's window."""
        key = "analytics:tenant:T1:hits:2026-10-18"
        assert await cache_service.incr(key, ttl=100) == 1
        clock.advance(40)
        assert await cache_service.incr(key, ttl=100) == 2
        assert await cache_service.ttl(key) == 60
        clock.advance(61)
        assert await cache_service.counter(key) == 0

    @pytest.mark.asyncio
    async def test_counter_does_not_touch_hit_statistics(
        self,
        cache_service: CacheService,
    ) -> None:
        await cache_service.incr("tenant:T1:c")
        assert await cache_service.counter("tenant:T1:c") == 1
        stats = cache_service.get_statistics()
        assert stats["hits"] == 0
        assert stats["misses"] == 0


class TestPatternDeletes:
    @pytest.mark.asyncio
    async def test_delete_pattern_is_idempotent(self, cache_service: CacheService) -> None:
        for page in range(1, 4):
            await cache_service.set(f"tenant:T1:posts:all:page:{page}", ENVELOPE)

        assert await cache_service.delete_pattern("tenant:T1:posts:*") is True
        assert await cache_service.scan("tenant:T1:posts:*") == []
        # A pattern matching nothing still succeeds.
        assert await cache_service.delete_pattern("tenant:T1:posts:*") is True

    @pytest.mark.asyncio
    async def test_delete_pattern_in_batches(self, memory_client: MemoryClient) -> None:
        service = CacheService(client=memory_client, config=CacheConfig(delete_batch_size=2))
        await service.initialize()
        for i in range(5):
            await service.set(f"tenant:T1:event:{i}", ENVELOPE)
        assert await service.delete_pattern("tenant:T1:event:*") is True
        assert service.get_statistics()["deletes"] == 5
        await service.shutdown()

    @pytest.mark.asyncio
    async def test_tenant_prefix_does_not_leak(self, cache_service: CacheService) -> None:
        """Clearing tenant T1 leaves T10, whose id shares the prefix, untouched."""
        await cache_service.set("tenant:T1:posts:1", ENVELOPE)
        await cache_service.set("tenant:T10:posts:1", ENVELOPE)

        assert await cache_service.clear("T1") == 1
        assert await cache_service.exists("tenant:T1:posts:1") is False
        assert await cache_service.exists("tenant:T10:posts:1") is True

    @pytest.mark.asyncio
    async def test_clear_rejects_empty_tenant(self, cache_service: CacheService) -> None:
        await cache_service.set("tenant:T1:posts:1", ENVELOPE)
        assert await cache_service.clear("") == 0
        assert await cache_service.exists("tenant:T1:posts:1") is True

    @pytest.mark.asyncio
    async def test_scan_limit(self, cache_service: CacheService) -> None:
        for i in range(10):
            await cache_service.set(f"tenant:T1:group:{i}", ENVELOPE)
        assert len(await cache_service.scan("tenant:T1:group:*", limit=3)) == 3


class TestBackgroundTasks:
    @pytest.mark.asyncio
    async def test_schedule_and_drain(self, cache_service: CacheService) -> None:
        cache_service.schedule(cache_service.set("tenant:T1:post:1", ENVELOPE), name="write")
        assert cache_service.pending == 1
        await cache_service.drain()
        assert cache_service.pending == 0
        assert await cache_service.get("tenant:T1:post:1") == ENVELOPE

    @pytest.mark.asyncio
    async def test_failed_task_is_logged_not_raised(self, cache_service: CacheService) -> None:
        async def boom() -> None:
            raise RuntimeError("write failed")

        cache_service.schedule(boom(), name="boom")
        await cache_service.drain()
        assert cache_service.pending == 0


class TestAdmin:
    @pytest.mark.asyncio
    async def test_health_check(self, cache_service: CacheService) -> None:
        await cache_service.set("tenant:T1:post:1", ENVELOPE)
        health = await cache_service.health_check()
        assert health["status"] == "healthy"
        assert health["backend"] == "in-memory"
        assert health["info"]["total_keys"] == 1
        assert "latency_ms" in health

    @pytest.mark.asyncio
    async def test_reset_statistics(self, cache_service: CacheService) -> None:
        await cache_service.get("tenant:T1:missing")
        cache_service.reset_statistics()
        assert cache_service.get_statistics()["misses"] == 0

    @pytest.mark.asyncio
    async def test_initialize_falls_back_to_memory(self) -> None:
        service = CacheService()
        await service.initialize()
        assert service.backend == "in-memory"
        assert await service.ping() is True
        await service.shutdown()


class TestBackendSelection:
    @pytest.mark.asyncio
    async def test_redis_disabled_uses_memory(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(settings, "REDIS_ENABLED", False)
        service = CacheService()
        await service.initialize()
        assert service.backend == "in-memory"
        await service.shutdown()

    @pytest.mark.asyncio
    async def test_unreachable_redis_falls_back_to_memory(
        self,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        async def refuse(self: RedisClient) -> None:
            mssg = f"Cannot connect to Redis at {self.address}"
            raise RedisConnectionError(mssg)

        monkeypatch.setattr(settings, "REDIS_ENABLED", True)
        monkeypatch.setattr(RedisClient, "connect", refuse)
        service = CacheService()
        await service.initialize()

        assert service.backend == "in-memory"
        assert await service.set("tenant:T1:post:1", ENVELOPE) is True
        await service.shutdown()
