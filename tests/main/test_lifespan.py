"""Application startup and shutdown wiring."""

from asgi_lifespan import LifespanManager
from httpx import ASGITransport, AsyncClient
from pytest import mark

from portal_cache.main import app
from portal_cache.managers import CacheAnalytics, CacheService, limiter


@mark.asyncio
async def test_lifespan_installs_cache_service() -> None:
    limiter.enabled = False
    app.state.cache_service = None
    async with (
        LifespanManager(app),
        AsyncClient(base_url="http://test", transport=ASGITransport(app=app)) as ac,
    ):
        service = app.state.cache_service
        assert isinstance(service, CacheService)
        assert isinstance(app.state.cache_analytics, CacheAnalytics)
        assert service.backend == "in-memory"

        response = await ac.get("/health")
        assert response.json()["cache"]["backend"] == "in-memory"
    app.state.cache_service = None
    app.state.cache_analytics = None
