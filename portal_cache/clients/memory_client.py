"""In-memory key-value store used when Redis is disabled or unreachable."""

from asyncio import CancelledError, Lock, Task, create_task
from asyncio import sleep as asyncio_sleep
from collections import OrderedDict
from collections.abc import AsyncGenerator
from contextlib import suppress
from fnmatch import fnmatchcase
from logging import DEBUG, getLogger
from sys import getsizeof
from time import time

from portal_cache.configs import file_logger

logger = file_logger(getLogger(__name__))


class MemoryClient:
    """
    Asynchronous in-memory store that mirrors the RedisClient surface.

    Entries live in an LRU-ordered dict bounded by entry count and an
    estimated byte budget. Expiry is checked lazily on access and swept
    periodically by a background task once ``start_lifecycle`` is called.
    Glob matching is case-sensitive, like Redis SCAN MATCH.
    """

    DEFAULT_MAX_ENTRIES: int = 100_000
    DEFAULT_MAX_MEMORY_MB: int = 100
    DEFAULT_CLEANUP_INTERVAL: int = 60  # seconds

    def __init__(
        self,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        max_memory_mb: int = DEFAULT_MAX_MEMORY_MB,
        cleanup_interval: int = DEFAULT_CLEANUP_INTERVAL,
    ) -> None:
        self._data: OrderedDict[str, str] = OrderedDict()
        self._expires_at: dict[str, float] = {}
        self._size: int = 0
        self._max_entries = max_entries
        self._max_bytes = max_memory_mb * 1024 * 1024
        self._cleanup_interval = cleanup_interval
        self._sweeper: Task[None] | None = None
        self._lock = Lock()
        self.is_connected: bool = True

    async def start_lifecycle(self) -> None:
        """Start the background expiry sweeper."""
        async with self._lock:
            if self._sweeper is None:
                self.is_connected = True
                self._sweeper = create_task(self._sweep_loop())
                logger.info("MemoryClient expiry sweeper started.")

    async def close(self) -> None:
        """Stop the sweeper and mark the client disconnected."""
        async with self._lock:
            self.is_connected = False
            sweeper, self._sweeper = self._sweeper, None
        if sweeper is not None:
            sweeper.cancel()
            with suppress(CancelledError):
                await sweeper

    async def _sweep_loop(self) -> None:
        while self.is_connected:
            await asyncio_sleep(self._cleanup_interval)
            async with self._lock:
                expired = [k for k in list(self._expires_at) if self._expired(k)]
                removed = self._remove(*expired)
            if removed and logger.isEnabledFor(DEBUG):
                logger.debug("Memory sweep removed %d expired keys.", removed)

    # Internal helpers below assume the lock is held.

    def _expired(self, key: str) -> bool:
        deadline = self._expires_at.get(key)
        return deadline is not None and time() >= deadline

    def _live(self, key: str) -> bool:
        if self._expired(key):
            self._remove(key)
            return False
        return key in self._data

    @staticmethod
    def _entry_size(key: str, value: str) -> int:
        return getsizeof(key) + getsizeof(value)

    def _remove(self, *keys: str) -> int:
        removed = 0
        for key in keys:
            if key in self._data:
                self._size -= self._entry_size(key, self._data.pop(key))
                removed += 1
            self._expires_at.pop(key, None)
        return removed

    def _store(self, key: str, value: str) -> None:
        if key in self._data:
            self._size -= self._entry_size(key, self._data[key])
            del self._data[key]
        size = self._entry_size(key, value)
        while self._data and (
            len(self._data) >= self._max_entries or self._size + size > self._max_bytes
        ):
            oldest = next(iter(self._data))
            self._remove(oldest)
        self._data[key] = value
        self._size += size

    async def get(self, key: str) -> str | None:
        async with self._lock:
            if not self._live(key):
                return None
            self._data.move_to_end(key)
            return self._data[key]

    async def set(self, key: str, value: str, ex: int | None = None) -> bool:
        async with self._lock:
            self._store(key, value)
            # SET without EX clears any previous expiry.
            if ex:
                self._expires_at[key] = time() + ex
            else:
                self._expires_at.pop(key, None)
            return True

    async def delete(self, *keys: str) -> int:
        async with self._lock:
            return self._remove(*keys)

    async def exists(self, *keys: str) -> int:
        async with self._lock:
            return sum(1 for key in keys if self._live(key))

    async def expire(self, key: str, seconds: int) -> bool:
        async with self._lock:
            if not self._live(key):
                return False
            self._expires_at[key] = time() + seconds
            return True

    async def ttl(self, key: str) -> int:
        """Return remaining seconds, -2 for a missing key, -1 for no expiry."""
        async with self._lock:
            if not self._live(key):
                return -2
            deadline = self._expires_at.get(key)
            if deadline is None:
                return -1
            return max(0, int(deadline - time()))

    async def incr(self, key: str) -> int:
        """Increment an integer counter, creating it at 1 without expiry."""
        async with self._lock:
            current = self._data.get(key, "0") if self._live(key) else "0"
            if not current.lstrip("-").isdigit():
                mssg = f"value at {key} is not an integer"
                raise ValueError(mssg)
            value = int(current) + 1
            deadline = self._expires_at.get(key)
            self._store(key, str(value))
            if deadline is not None:
                self._expires_at[key] = deadline
            return value

    async def scan_iter(
        self,
        pattern: str,
        count: int = 100,  # noqa: ARG002
    ) -> AsyncGenerator[str]:
        """Yield live keys matching a glob pattern."""
        async with self._lock:
            keys = [k for k in list(self._data) if self._live(k)]
        for key in keys:
            if fnmatchcase(key, pattern):
                yield key

    async def flush_all(self) -> bool:
        async with self._lock:
            self._data.clear()
            self._expires_at.clear()
            self._size = 0
            return True

    async def ping(self) -> bool:
        return self.is_connected

    async def info(self) -> dict[str, str | int]:
        async with self._lock:
            return {
                "server": "In-Memory Store",
                "connected_clients": 1,
                "used_memory_bytes": self._size,
                "used_memory_human": f"{self._size / 1024 / 1024:.2f}MB",
                "total_keys": len(self._data),
                "max_entries": self._max_entries,
                "max_memory_mb": self._max_bytes // 1024 // 1024,
            }
