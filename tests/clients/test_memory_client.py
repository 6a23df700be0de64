"""Tests for the in-memory store."""

import pytest

from portal_cache.clients import KeyValueStore, MemoryClient
from tests.doubles import Clock


@pytest.mark.asyncio
async def test_set_and_get(memory_client: MemoryClient) -> None:
    await memory_client.set("key", "value")
    assert await memory_client.get("key") == "value"
    assert await memory_client.get("missing") is None


@pytest.mark.asyncio
async def test_satisfies_store_protocol(memory_client: MemoryClient) -> None:
    assert isinstance(memory_client, KeyValueStore)


@pytest.mark.asyncio
async def test_delete_counts_removed_keys(memory_client: MemoryClient) -> None:
    await memory_client.set("a", "1")
    await memory_client.set("b", "2")
    assert await memory_client.delete("a", "b", "c") == 2
    assert await memory_client.exists("a", "b") == 0


@pytest.mark.asyncio
async def test_expiry(memory_client: MemoryClient, clock: Clock) -> None:
    """Entries disappear once their TTL has elapsed."""
    await memory_client.set("key", "value", ex=10)
    clock.advance(9)
    assert await memory_client.get("key") == "value"
    clock.advance(1)
    assert await memory_client.get("key") is None


@pytest.mark.asyncio
async def test_ttl_values(memory_client: MemoryClient, clock: Clock) -> None:
    await memory_client.set("temp", "v", ex=30)
    await memory_client.set("forever", "v")
    clock.advance(10)
    assert await memory_client.ttl("temp") == 20
    assert await memory_client.ttl("forever") == -1
    assert await memory_client.ttl("missing") == -2


@pytest.mark.asyncio
async def test_set_without_expiry_clears_previous_ttl(
    memory_client: MemoryClient,
    clock: Clock,
) -> None:
    await memory_client.set("key", "v1", ex=5)
    await memory_client.set("key", "v2")
    clock.advance(60)
    assert await memory_client.get("key") == "v2"


@pytest.mark.asyncio
async def test_incr_creates_and_keeps_expiry(memory_client: MemoryClient, clock: Clock) -> None:
    assert await memory_client.incr("counter") == 1
    await memory_client.expire("counter", 10)
    clock.advance(4)
    assert await memory_client.incr("counter") == 2
    assert await memory_client.ttl("counter") == 6


@pytest.mark.asyncio
async def test_incr_rejects_non_integer(memory_client: MemoryClient) -> None:
    await memory_client.set("key", "not-a-number")
    with pytest.raises(ValueError, match="not an integer"):
        await memory_client.incr("key")


@pytest.mark.asyncio
async def test_scan_iter_matches_glob(memory_client: MemoryClient) -> None:
    for key in ("tenant:T1:posts:1", "tenant:T1:post:1", "tenant:T10:posts:1"):
        await memory_client.set(key, "v")
    found = [key async for key in memory_client.scan_iter("tenant:T1:posts*")]
    assert found == ["tenant:T1:posts:1"]


@pytest.mark.asyncio
async def test_scan_iter_skips_expired(memory_client: MemoryClient, clock: Clock) -> None:
    await memory_client.set("tenant:T1:a", "v", ex=1)
    await memory_client.set("tenant:T1:b", "v")
    clock.advance(2)
    assert [key async for key in memory_client.scan_iter("tenant:T1:*")] == ["tenant:T1:b"]


@pytest.mark.asyncio
async def test_lru_eviction() -> None:
    """The least recently used entry is evicted when the store is full."""
    client = MemoryClient(max_entries=2)
    await client.set("a", "1")
    await client.set("b", "2")
    await client.get("a")
    await client.set("c", "3")
    assert await client.get("a") == "1"
    assert await client.get("b") is None
    assert await client.get("c") == "3"


@pytest.mark.asyncio
async def test_lifecycle(memory_client: MemoryClient) -> None:
    await memory_client.start_lifecycle()
    assert await memory_client.ping() is True
    await memory_client.close()
    assert await memory_client.ping() is False


@pytest.mark.asyncio
async def test_flush_all_and_info(memory_client: MemoryClient) -> None:
    await memory_client.set("a", "1")
    info = await memory_client.info()
    assert info["total_keys"] == 1
    assert await memory_client.flush_all() is True
    assert (await memory_client.info())["total_keys"] == 0
