"""Interface of the key-value store underneath the cache service."""

from collections.abc import AsyncIterator, Awaitable
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class KeyValueStore(Protocol):
    """
    Minimal command set the cache service issues against its store.

    RedisClient and MemoryClient both satisfy it; tests hand the service
    doubles that fail or stall on demand. Values are UTF-8 strings, TTLs
    are whole seconds, and ``ttl`` follows Redis (``-2`` for a missing key,
    ``-1`` for a key without expiry).
    """

    def get(self, key: str) -> Awaitable[str | None]: ...

    def set(self, key: str, value: str, ex: int | None = None) -> Awaitable[bool]: ...

    def delete(self, *keys: str) -> Awaitable[int]: ...

    def exists(self, *keys: str) -> Awaitable[int]: ...

    def expire(self, key: str, seconds: int) -> Awaitable[bool]: ...

    def ttl(self, key: str) -> Awaitable[int]: ...

    def incr(self, key: str) -> Awaitable[int]:
        """Increment a counter atomically, creating it at ``1``."""
        ...

    def scan_iter(self, pattern: str, count: int = 100) -> AsyncIterator[str]:
        """Walk keys matching a glob pattern incrementally, never all at once."""
        ...

    def ping(self) -> Awaitable[bool]: ...

    def info(self) -> Awaitable[dict[str, Any]]: ...

    def flush_all(self) -> Awaitable[bool]: ...
