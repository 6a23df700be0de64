# tests/doubles.py
"""Store doubles shared by the test suite."""

from asyncio import sleep
from collections.abc import AsyncIterator
from typing import Any

from redis.exceptions import ConnectionError as RedisConnectionError

from portal_cache.clients import MemoryClient


class Clock:
    """Controllable replacement for ``time.time`` in the memory client."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FailingClient:
    """Store double whose every call fails like an unreachable Redis."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    def _fail(self, operation: str) -> None:
        self.calls.append(operation)
        raise RedisConnectionError(f"{operation}: connection refused")

    async def get(self, key: str) -> str | None:
        self._fail("get")

    async def set(self, key: str, value: str, ex: int | None = None) -> bool:
        self._fail("set")

    async def delete(self, *keys: str) -> int:
        self._fail("delete")

    async def exists(self, *keys: str) -> int:
        self._fail("exists")

    async def expire(self, key: str, seconds: int) -> bool:
        self._fail("expire")

    async def ttl(self, key: str) -> int:
        self._fail("ttl")

    async def incr(self, key: str) -> int:
        self._fail("incr")

    async def scan_iter(self, pattern: str, count: int = 100) -> AsyncIterator[str]:
        self._fail("scan")
        yield pattern

    async def ping(self) -> bool:
        self._fail("ping")

    async def info(self) -> dict[str, Any]:
        self._fail("info")

    async def flush_all(self) -> bool:
        self._fail("flush_all")


class SlowClient(MemoryClient):
    """In-memory store that hangs on reads and writes."""

    def __init__(self, delay: float = 5.0) -> None:
        super().__init__()
        self.delay = delay

    async def get(self, key: str) -> str | None:
        await sleep(self.delay)
        return await super().get(key)

    async def set(self, key: str, value: str, ex: int | None = None) -> bool:
        await sleep(self.delay)
        return await super().set(key, value, ex)
