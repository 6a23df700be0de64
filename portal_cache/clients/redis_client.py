"""Redis client module for the cache store."""

from collections.abc import AsyncGenerator, Awaitable
from logging import getLogger
from typing import Any, NoReturn

from redis.asyncio import ConnectionPool, Redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError

from portal_cache.configs import RedisConfig, file_logger, redis_pool_kwargs
from portal_cache.decorators.with_retry import with_retry

logger = file_logger(getLogger(__name__))


class RedisClient:
    """Async Redis client wrapper with connection pooling."""

    def __init__(self, config: RedisConfig | None = None) -> None:
        self.config = redis_pool_kwargs(config)
        self._pool: ConnectionPool | None = None
        self._redis: Redis | None = None

    @property
    def address(self) -> str:
        return f"{self.config.get('host')}:{self.config.get('port')}"

    @with_retry(attempts=3, base_delay=0.2, deadline=15)
    async def connect(self) -> None:
        """Open the connection pool and verify it with a PING."""
        try:
            self._pool = ConnectionPool(**self.config)
            self._redis = Redis(connection_pool=self._pool)
            if not await self._await(self._redis.ping()):
                mssg = "Redis ping returned False"
                raise RedisConnectionError(mssg)
            logger.info("Redis connection successful at %s.", self.address)
        except RedisError as e:
            logger.warning("Failed to connect to Redis at %s: %s", self.address, e)
            mssg = f"Cannot connect to Redis at {self.address}"
            raise RedisConnectionError(mssg) from e

    async def disconnect(self) -> None:
        """Close the connection pool."""
        if self._redis is not None:
            await self._redis.aclose()
            self._redis = None
            self._pool = None
            logger.info("Redis connection closed.")

    @property
    def client(self) -> Redis:
        if self._redis is None:
            mssg = "Redis client not initialized. Call connect() first."
            raise RuntimeError(mssg)
        return self._redis

    @staticmethod
    async def _await(result: Any) -> Any:  # noqa: ANN401
        return await result if isinstance(result, Awaitable) else result

    @staticmethod
    def _fail(operation: str, target: object, exc: RedisError) -> NoReturn:
        logger.warning("Redis %s failed for %s: %s", operation, target, exc)
        mssg = f"Cache {operation} operation failed for {target}: {exc}"
        raise RedisConnectionError(mssg) from exc

    async def get(self, key: str) -> str | None:
        try:
            return await self.client.get(key)
        except RedisError as e:
            self._fail("get", key, e)

    async def set(self, key: str, value: str, ex: int | None = None) -> bool:
        try:
            return bool(await self.client.set(key, value, ex=ex))
        except RedisError as e:
            self._fail("set", key, e)

    async def delete(self, *keys: str) -> int:
        if not keys:
            return 0
        try:
            return await self.client.delete(*keys)
        except RedisError as e:
            self._fail("delete", keys, e)

    async def exists(self, *keys: str) -> int:
        try:
            return await self.client.exists(*keys)
        except RedisError as e:
            self._fail("exists", keys, e)

    async def expire(self, key: str, seconds: int) -> bool:
        try:
            return bool(await self.client.expire(key, seconds))
        except RedisError as e:
            self._fail("expire", key, e)

    async def ttl(self, key: str) -> int:
        try:
            return await self.client.ttl(key)
        except RedisError as e:
            self._fail("ttl", key, e)

    async def incr(self, key: str) -> int:
        try:
            return await self.client.incr(key)
        except RedisError as e:
            self._fail("incr", key, e)

    async def flush_all(self) -> bool:
        """Flush the current database."""
        try:
            return bool(await self.client.flushdb())
        except RedisError as e:
            self._fail("flush_all", "database", e)

    async def ping(self) -> bool:
        try:
            return bool(await self._await(self.client.ping()))
        except RedisError as e:
            self._fail("ping", self.address, e)

    async def info(self) -> dict[str, Any]:
        try:
            info = await self.client.info()
        except RedisError as e:
            self._fail("info", self.address, e)
        return info if isinstance(info, dict) else {}

    async def scan_iter(self, pattern: str, count: int = 100) -> AsyncGenerator[str]:
        """
        Yield keys matching a glob pattern using cursor-based SCAN.

        Never issues KEYS, so large keyspaces are walked incrementally.
        """
        cursor = 0
        while True:
            try:
                cursor, keys = await self.client.scan(cursor, match=pattern, count=count)
            except RedisError as e:
                self._fail("scan", pattern, e)
            for key in keys:
                yield key.decode("utf-8") if isinstance(key, bytes) else key
            if cursor == 0:
                break
