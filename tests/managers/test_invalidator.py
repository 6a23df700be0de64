# tests/managers/test_invalidator.py
"""Tests for mutation-driven invalidation."""

import pytest

from portal_cache.errors import InvalidationError
from portal_cache.keys import KeyContext
from portal_cache.managers import CacheInvalidator, CacheService
from portal_cache.policies import TTL, registry
from tests.doubles import Clock

ENVELOPE = {"success": True, "data": {}}


def view_key(
    service: CacheService,
    resource: str,
    view: str,
    tenant: str = "T1",
    viewer: str | None = None,
    path: dict | None = None,
    query: dict | None = None,
) -> str:
    ctx = KeyContext(
        tenant_id=tenant,
        viewer_id=viewer,
        path_params=path or {},
        query_params=query or {},
    )
    return registry.view(resource, view).key(service.namespace(tenant), ctx)


@pytest.fixture
def invalidator(cache_service: CacheService) -> CacheInvalidator:
    return CacheInvalidator(cache_service, registry)


class TestPatternsFor:
    def test_entity_patterns(self, invalidator: CacheInvalidator) -> None:
        ctx = KeyContext(tenant_id="T1")
        patterns = invalidator.patterns_for("tickets", "status", ctx, ticketId="7")
        assert "tenant:T1:ticket:7:*" in patterns
        assert "tenant:T1:tickets:user:*" in patterns

    def test_missing_tenant(self, invalidator: CacheInvalidator) -> None:
        with pytest.raises(InvalidationError):
            invalidator.patterns_for("posts", "create", KeyContext(tenant_id=""))


class TestInvalidate:
    @pytest.mark.asyncio
    async def test_update_drops_every_dependent_view(
        self,
        cache_service: CacheService,
        invalidator: CacheInvalidator,
    ) -> None:
        """After a post update no view derived from it is served from cache."""
        keys = [
            view_key(cache_service, "posts", "list"),
            view_key(cache_service, "posts", "list", viewer="u1", query={"page": "2"}),
            view_key(cache_service, "posts", "detail", path={"postId": "42"}),
            view_key(cache_service, "posts", "comments", path={"postId": "42"}),
            view_key(cache_service, "posts", "likes", path={"postId": "42"}),
        ]
        unrelated = view_key(cache_service, "posts", "detail", path={"postId": "43"})
        for key in [*keys, unrelated]:
            await cache_service.set(key, ENVELOPE)

        done = await invalidator.invalidate("posts", "update", tenant_id="T1", entity_id="42")

        assert done == 4
        for key in keys:
            assert await cache_service.exists(key) is False, key
        assert await cache_service.exists(unrelated) is True

    @pytest.mark.asyncio
    async def test_other_tenants_are_untouched(
        self,
        cache_service: CacheService,
        invalidator: CacheInvalidator,
    ) -> None:
        mine = view_key(cache_service, "posts", "detail", "T1", path={"postId": "42"})
        theirs = view_key(cache_service, "posts", "detail", "T2", path={"postId": "42"})
        similar = view_key(cache_service, "posts", "detail", "T10", path={"postId": "42"})
        for key in (mine, theirs, similar):
            await cache_service.set(key, ENVELOPE)

        await invalidator.invalidate("posts", "delete", tenant_id="T1", entity_id="42")

        assert await cache_service.exists(mine) is False
        assert await cache_service.exists(theirs) is True
        assert await cache_service.exists(similar) is True

    @pytest.mark.asyncio
    async def test_viewer_specific_details_for_all_viewers(
        self,
        cache_service: CacheService,
        invalidator: CacheInvalidator,
    ) -> None:
        keys = [
            view_key(cache_service, "tickets", "detail", viewer=viewer, path={"ticketId": "7"})
            for viewer in ("u1", "u2", None)
        ]
        for key in keys:
            await cache_service.set(key, ENVELOPE)

        await invalidator.invalidate("tickets", "message", tenant_id="T1", entity_id="7")

        for key in keys:
            assert await cache_service.exists(key) is False

    @pytest.mark.asyncio
    async def test_path_params_fill_placeholders(
        self,
        cache_service: CacheService,
        invalidator: CacheInvalidator,
    ) -> None:
        key = view_key(cache_service, "groups", "details", path={"groupId": "g1"})
        await cache_service.set(key, ENVELOPE)

        await invalidator.invalidate(
            "groups",
            "update",
            tenant_id="T1",
            path_params={"groupId": "g1"},
        )

        assert await cache_service.exists(key) is False

    @pytest.mark.asyncio
    async def test_repeated_invalidation_is_idempotent(
        self,
        invalidator: CacheInvalidator,
    ) -> None:
        first = await invalidator.invalidate("sponsors", "update", tenant_id="T1", entity_id="s")
        second = await invalidator.invalidate("sponsors", "update", tenant_id="T1", entity_id="s")
        assert first == second == 2

    @pytest.mark.asyncio
    async def test_unknown_mutation_never_raises(self, invalidator: CacheInvalidator) -> None:
        assert await invalidator.invalidate("posts", "publish", tenant_id="T1") == 0
        assert await invalidator.invalidate("nope", "update", tenant_id="T1") == 0
        assert await invalidator.invalidate("posts", "create", tenant_id="") == 0

    @pytest.mark.asyncio
    async def test_unreachable_store_never_raises(self, failing_service: CacheService) -> None:
        invalidator = CacheInvalidator(failing_service, registry)
        assert await invalidator.invalidate("posts", "update", tenant_id="T1", entity_id=1) == 0

    @pytest.mark.asyncio
    async def test_invalidate_tenant(
        self,
        cache_service: CacheService,
        invalidator: CacheInvalidator,
    ) -> None:
        await cache_service.set("tenant:T1:posts:1", ENVELOPE)
        await cache_service.set("tenant:T1:event:1", ENVELOPE)
        await cache_service.set("tenant:T2:posts:1", ENVELOPE)

        assert await invalidator.invalidate_tenant("T1") == 2
        assert await cache_service.exists("tenant:T2:posts:1") is True


class TestPopulateRace:
    @pytest.mark.asyncio
    async def test_late_write_stays_stale_until_ttl(
        self,
        cache_service: CacheService,
        invalidator: CacheInvalidator,
        clock: Clock,
    ) -> None:
        """
        A read that fetched before a mutation but writes after its invalidation.

        The stale entry is served until its TTL elapses; nothing coordinates
        the two.
        """
        key = view_key(cache_service, "posts", "detail", path={"postId": "42"})
        stale = {"success": True, "data": {"title": "before"}}

        await invalidator.invalidate("posts", "update", tenant_id="T1", entity_id="42")
        await cache_service.set(key, stale, TTL.DETAIL)

        assert await cache_service.get(key) == stale
        clock.advance(TTL.DETAIL - 1)
        assert await cache_service.get(key) == stale
        clock.advance(2)
        assert await cache_service.get(key) is None
