"""Tenant-aware cache service over a key-value store."""

from asyncio import Task, create_task, gather, timeout
from collections.abc import Awaitable, Callable, Coroutine
from logging import DEBUG, getLogger
from time import perf_counter
from typing import Any, TypeVar

from redis.exceptions import ConnectionError as RedisConnectionError

from portal_cache.clients import KeyValueStore, MemoryClient, RedisClient
from portal_cache.configs import CacheConfig, RedisConfig, file_logger, settings
from portal_cache.data import CacheStatistics
from portal_cache.errors import (
    STORE_EXCEPTIONS,
    CacheDecompressionError,
    CacheDeserializationError,
    CacheSerializationError,
    KeyComputationError,
)
from portal_cache.keys import family_of, tenant_namespace
from portal_cache.monitoring import metrics
from portal_cache.utils.cache_serializer import (
    compress,
    decompress,
    deserialize,
    do_compress,
    serialize,
)

logger = file_logger(getLogger(__name__))

T = TypeVar("T")


class CacheService:
    """
    Typed cache operations with JSON serialization and bounded store calls.

    No public operation raises. Every store round-trip runs under
    ``CacheConfig.operation_timeout``; failures and timeouts are logged,
    counted and reported to the caller as the operation's empty value
    (``None``, ``False``, ``0`` or ``-1``), so an unavailable store behaves
    like a cache where every key is a permanent miss.

    The store client is either injected or chosen in ``initialize()``:
    Redis when ``REDIS_ENABLED`` is set, falling back to the in-memory
    client when Redis cannot be reached at startup.
    """

    def __init__(
        self,
        client: KeyValueStore | None = None,
        config: CacheConfig | None = None,
        redis_config: RedisConfig | None = None,
    ) -> None:
        self.config = config or CacheConfig()
        self.redis_config = redis_config
        self.statistics = CacheStatistics()
        self._client: KeyValueStore | None = client
        self._pending: set[Task[Any]] = set()

    @property
    def client(self) -> KeyValueStore:
        if self._client is None:
            mssg = "Cache service not initialized. Call initialize() first."
            raise RuntimeError(mssg)
        return self._client

    @property
    def backend(self) -> str:
        if isinstance(self._client, RedisClient):
            return "redis"
        if isinstance(self._client, MemoryClient):
            return "in-memory"
        return "custom" if self._client is not None else "uninitialized"

    async def initialize(self) -> None:
        """Connect the store client."""
        if self._client is None:
            if settings.REDIS_ENABLED:
                redis_client = RedisClient(self.redis_config)
                try:
                    await redis_client.connect()
                    self._client = redis_client
                except RedisConnectionError as e:
                    logger.warning(f"Redis connection failed: {e}. Using in-memory cache.")
            else:
                logger.info("Redis disabled. Using in-memory cache.")
            if self._client is None:
                self._client = MemoryClient()
        if isinstance(self._client, MemoryClient):
            await self._client.start_lifecycle()
        logger.info("Cache service initialized with %s backend.", self.backend)

    async def shutdown(self) -> None:
        """Wait for pending background writes, then close the store client."""
        await self.drain()
        if isinstance(self._client, RedisClient):
            await self._client.disconnect()
        elif isinstance(self._client, MemoryClient):
            await self._client.close()
        logger.info("Cache service shutdown successfully.")

    async def _run(
        self,
        operation: str,
        call: Callable[[], Awaitable[T]],
        target: str,
        deadline: float | None = None,
    ) -> tuple[bool, T | None]:
        """Run one bounded store call; returns ``(ok, result)``."""
        started = perf_counter()
        try:
            async with timeout(deadline or self.config.operation_timeout):
                result = await call()
        except TimeoutError:
            logger.warning("Cache %s timed out for %s", operation, target)
            self.statistics.record_timeout()
            metrics.record_store_timeout(operation)
            return False, None
        except (*STORE_EXCEPTIONS, ValueError) as e:
            logger.warning("Cache %s failed for %s: %s", operation, target, e)
            self.statistics.record_error()
            metrics.record_store_error(operation)
            return False, None
        metrics.observe_store_latency(operation, perf_counter() - started)
        return True, result

    def _family(self, key: str) -> str | None:
        return family_of(key, self.config.key_prefix)

    def _expiry(self, ttl: int | None) -> int:
        ttl = ttl if ttl and ttl > 0 else self.config.default_ttl
        return min(ttl, self.config.max_ttl)

    async def get(self, key: str) -> Any:  # noqa: ANN401
        """Return the cached value, or ``None`` on a miss or any failure."""
        ok, raw = await self._run("get", lambda: self.client.get(key), key)
        family = self._family(key)
        if not ok or raw is None:
            self.statistics.record_miss()
            metrics.record_cache_miss(family)
            return None
        try:
            value = deserialize(decompress(raw))
        except (CacheDecompressionError, CacheDeserializationError):
            logger.warning("Discarding malformed cache entry %s", key)
            self.statistics.record_error()
            self.statistics.record_miss()
            metrics.record_cache_miss(family)
            return None
        self.statistics.record_hit(len(raw.encode("utf-8")))
        metrics.record_cache_hit(family)
        if logger.isEnabledFor(DEBUG):
            logger.debug("Cache hit for %s", key)
        return value

    async def set(self, key: str, value: object, ttl: int | None = None) -> bool:
        """Serialize and store a value with an expiry; ``False`` on failure."""
        try:
            payload = serialize(value)
            if self.config.compression_enabled and do_compress(
                payload,
                self.config.compression_threshold,
            ):
                payload = compress(payload)
        except CacheSerializationError:
            self.statistics.record_error()
            return False
        ex = self._expiry(ttl)
        ok, stored = await self._run("set", lambda: self.client.set(key, payload, ex=ex), key)
        success = ok and bool(stored)
        if success:
            self.statistics.record_set(len(payload.encode("utf-8")))
        metrics.record_cache_write(self._family(key), ok=success)
        return success

    async def delete(self, key: str) -> bool:
        """Delete one key. Deleting a missing key is a success."""
        ok, deleted = await self._run("delete", lambda: self.client.delete(key), key)
        if ok and deleted:
            self.statistics.record_delete(deleted)
        return ok

    async def _delete_matching(self, pattern: str) -> int:
        batch_size = self.config.delete_batch_size
        deleted = 0
        batch: list[str] = []
        async for key in self.client.scan_iter(pattern, count=self.config.scan_count):
            batch.append(key)
            if len(batch) >= batch_size:
                deleted += await self.client.delete(*batch)
                batch = []
        if batch:
            deleted += await self.client.delete(*batch)
        return deleted

    async def delete_pattern(self, pattern: str) -> bool:
        """
        Delete every key matching a glob pattern.

        Keys are enumerated with SCAN and deleted in batches. A key created
        between enumeration and deletion may survive the pass. A pattern
        matching zero keys is a success.
        """
        ok, deleted = await self._run(
            "delete_pattern",
            lambda: self._delete_matching(pattern),
            pattern,
            deadline=self.config.pattern_timeout,
        )
        if ok:
            self.statistics.record_invalidation()
            if deleted:
                self.statistics.record_delete(deleted)
            if logger.isEnabledFor(DEBUG):
                logger.debug("Deleted %d keys matching %s", deleted, pattern)
        return ok

    async def scan(self, pattern: str, limit: int = 1000) -> list[str]:
        """Return up to ``limit`` keys matching a glob pattern; empty on failure."""

        async def collect() -> list[str]:
            found: list[str] = []
            async for key in self.client.scan_iter(pattern, count=self.config.scan_count):
                found.append(key)
                if len(found) >= limit:
                    break
            return found

        ok, keys = await self._run("scan", collect, pattern, deadline=self.config.pattern_timeout)
        return keys if ok and keys else []

    async def incr(self, key: str, ttl: int | None = None) -> int:
        """
        Increment a counter; ``0`` on failure.

        The expiry is only set when the counter is created, so repeated
        increments never extend its window.
        """
        ok, value = await self._run("incr", lambda: self.client.incr(key), key)
        if not ok or value is None:
            return 0
        if value == 1 and ttl:
            await self.expire(key, ttl)
        return value

    async def counter(self, key: str) -> int:
        """Read a counter written by ``incr`` without touching hit statistics."""
        ok, raw = await self._run("get", lambda: self.client.get(key), key)
        if not ok or raw is None or not raw.lstrip("-").isdigit():
            return 0
        return int(raw)

    async def exists(self, key: str) -> bool:
        ok, count = await self._run("exists", lambda: self.client.exists(key), key)
        return ok and bool(count)

    async def ttl(self, key: str) -> int:
        """Seconds left before expiry; ``-1`` for no expiry, a missing key or a failure."""
        ok, remaining = await self._run("ttl", lambda: self.client.ttl(key), key)
        if not ok or remaining is None or remaining < 0:
            return -1
        return remaining

    async def expire(self, key: str, seconds: int) -> bool:
        ok, updated = await self._run("expire", lambda: self.client.expire(key, seconds), key)
        return ok and bool(updated)

    async def ping(self) -> bool:
        ok, alive = await self._run("ping", lambda: self.client.ping(), self.backend)
        return ok and bool(alive)

    def schedule(self, coro: Coroutine[Any, Any, Any], *, name: str | None = None) -> Task[Any]:
        """
        Run a cache write in the background without blocking the caller.

        The task is referenced until it completes; a failure is logged and
        otherwise ignored.
        """
        task = create_task(coro, name=name)
        self._pending.add(task)
        task.add_done_callback(self._finish)
        return task

    def _finish(self, task: Task[Any]) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        if (exc := task.exception()) is not None:
            logger.warning("Background cache task %s failed: %r", task.get_name(), exc)

    @property
    def pending(self) -> int:
        return len(self._pending)

    async def drain(self) -> None:
        """Wait until every scheduled background task has finished."""
        while self._pending:
            await gather(*list(self._pending), return_exceptions=True)

    def namespace(self, tenant_id: object) -> str:
        return tenant_namespace(tenant_id, self.config.key_prefix)

    async def clear(self, tenant_id: object | None = None) -> int:
        """
        Delete a tenant namespace, or every key under the key prefix.

        Returns:
            Number of deleted keys, ``0`` on failure.
        """
        try:
            if tenant_id is not None:
                pattern = f"{self.namespace(tenant_id)}:*"
            else:
                prefix = self.config.key_prefix
                pattern = f"{prefix}:*" if prefix else "*"
        except KeyComputationError:
            logger.warning("Cannot clear cache for tenant %r", tenant_id)
            return 0
        ok, deleted = await self._run(
            "clear",
            lambda: self._delete_matching(pattern),
            pattern,
            deadline=self.config.pattern_timeout,
        )
        if not ok:
            return 0
        self.statistics.record_invalidation()
        if deleted:
            self.statistics.record_delete(deleted)
        logger.info("Cleared %d keys for pattern '%s'.", deleted, pattern)
        return deleted or 0

    async def health_check(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "backend": self.backend,
            "statistics": self.get_statistics(),
        }
        started = perf_counter()
        alive = await self.ping()
        result["status"] = "healthy" if alive else "unhealthy"
        if alive:
            result["latency_ms"] = round((perf_counter() - started) * 1000, 2)
            ok, info = await self._run("info", lambda: self.client.info(), self.backend)
            if ok and info:
                result["info"] = {
                    k: info[k]
                    for k in (
                        "redis_version",
                        "server",
                        "connected_clients",
                        "used_memory_human",
                        "uptime_in_seconds",
                        "total_keys",
                    )
                    if k in info
                }
        return result

    def get_statistics(self) -> dict[str, int | str]:
        return self.statistics.to_dict()

    def reset_statistics(self) -> None:
        self.statistics.reset()
        logger.info("Cache statistics reset.")
