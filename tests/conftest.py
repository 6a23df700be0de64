# tests/conftest.py
"""Root pytest configuration and shared fixtures."""

import os

# Settings are read at import time; keep tests on the in-memory store.
os.environ["REDIS_ENABLED"] = "false"
os.environ["LOG_TO_FILE"] = "false"

from collections.abc import AsyncGenerator

import pytest

from portal_cache.clients import MemoryClient
from portal_cache.configs import CacheConfig
from portal_cache.managers import CacheService
from tests.doubles import Clock, FailingClient


@pytest.fixture
def clock(monkeypatch: pytest.MonkeyPatch) -> Clock:
    """Freeze the memory client's clock; advance it with ``clock.advance``."""
    fake = Clock()
    monkeypatch.setattr("portal_cache.clients.memory_client.time", fake)
    return fake


@pytest.fixture
def memory_client() -> MemoryClient:
    """
    Create an in-memory store for testing.

    Use this fixture for testing store operations without Redis dependency.
    """
    return MemoryClient()


@pytest.fixture
def cache_config() -> CacheConfig:
    return CacheConfig(operation_timeout=0.2, pattern_timeout=0.5, analytics_enabled=True)


@pytest.fixture
async def cache_service(
    memory_client: MemoryClient,
    cache_config: CacheConfig,
) -> AsyncGenerator[CacheService]:
    """Cache service over a fresh in-memory store, shut down after the test."""
    service = CacheService(client=memory_client, config=cache_config)
    await service.initialize()
    try:
        yield service
    finally:
        await service.shutdown()


@pytest.fixture
def failing_client() -> FailingClient:
    return FailingClient()


@pytest.fixture
async def failing_service(
    failing_client: FailingClient,
    cache_config: CacheConfig,
) -> AsyncGenerator[CacheService]:
    """Cache service whose store is unreachable."""
    service = CacheService(client=failing_client, config=cache_config)
    await service.initialize()
    yield service
    await service.shutdown()
