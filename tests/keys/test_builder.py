# tests/keys/test_builder.py
"""Tests for cache key composition."""

import pytest

from portal_cache.errors import KeyComputationError
from portal_cache.keys import (
    PAGE,
    VIEWER,
    Filters,
    KeyContext,
    Literal,
    Param,
    escape_segment,
    family_of,
    flag,
    format_value,
    is_pattern,
    render_key,
    render_pattern,
    tenant_namespace,
)
from portal_cache.policies import registry

CANONICAL_POST_LIST = (
    "tenant:T1:posts:all:published:notarchived:nosearch:user:anonymous:"
    "sort:createdAt:desc:date:nostart:noend:tags:notags:page:1:limit:10"
)


def post_list_key(tenant: str = "T1", viewer: str | None = None, **query: object) -> str:
    ctx = KeyContext(tenant_id=tenant, viewer_id=viewer, query_params=query)
    return registry.view("posts", "list").key(tenant_namespace(tenant), ctx)


class TestCanonicalKeys:
    def test_post_list_defaults(self) -> None:
        """An anonymous post list request without filters yields the canonical key."""
        assert post_list_key() == CANONICAL_POST_LIST

    def test_post_list_with_viewer_and_page(self) -> None:
        key = post_list_key(viewer="u42", page="3", category="news")
        assert key == (
            "tenant:T1:posts:news:published:notarchived:nosearch:user:u42:"
            "sort:createdAt:desc:date:nostart:noend:tags:notags:page:3:limit:10"
        )

    def test_archived_flag(self) -> None:
        assert ":archived:" in post_list_key(archived="true")
        assert ":notarchived:" in post_list_key(archived="false")


class TestDeterminism:
    def test_same_inputs_same_key(self) -> None:
        assert post_list_key(page="2", limit="5") == post_list_key(page="2", limit="5")

    def test_query_order_is_irrelevant(self) -> None:
        first = KeyContext(tenant_id="T1", query_params={"status": "open", "priority": "high"})
        second = KeyContext(tenant_id="T1", query_params={"priority": "high", "status": "open"})
        segments = (Literal("tickets"), Filters())
        assert render_key("tenant:T1", segments, first) == render_key(
            "tenant:T1",
            segments,
            second,
        )

    def test_multi_valued_params_are_sorted(self) -> None:
        assert post_list_key(tags=("b", "a")) == post_list_key(tags=("a", "b"))
        assert ":tags:a,b:" in post_list_key(tags=("b", "a"))


class TestDiscrimination:
    @pytest.mark.parametrize(
        "query",
        [
            {"page": "2"},
            {"limit": "20"},
            {"category": "jobs"},
            {"search": "reunion"},
            {"sortOrder": "asc"},
        ],
    )
    def test_differing_inputs_differ(self, query: dict[str, str]) -> None:
        assert post_list_key(**query) != CANONICAL_POST_LIST

    def test_tenants_never_share_keys(self) -> None:
        assert post_list_key("T1") != post_list_key("T2")

    def test_viewers_never_share_keys(self) -> None:
        assert post_list_key(viewer="u1") != post_list_key(viewer="u2")

    def test_separator_in_value_cannot_forge_segments(self) -> None:
        """A search term containing ':' must not collide with a different filter set."""
        forged = post_list_key(search="x:user:admin")
        assert forged != post_list_key(search="x", viewer="admin")
        assert "x%3Auser%3Aadmin" in forged


class TestSegments:
    def test_escape_segment(self) -> None:
        assert escape_segment("a:b*c?[d]") == "a%3Ab%2Ac%3F%5Bd%5D"
        assert escape_segment("hello world") == "hello%20world"
        assert escape_segment("100%") == "100%25"

    def test_format_value(self) -> None:
        assert format_value(None, "all") == "all"
        assert format_value("  ", "all") == "all"
        assert format_value(True) == "true"
        assert format_value(7) == "7"
        assert format_value(["z", "a"]) == "a,z"

    def test_comma_inside_a_value_is_not_a_separator(self) -> None:
        assert format_value(["a,b"]) == "a%2Cb"
        assert format_value(["a,b"]) != format_value(["a", "b"])
        assert post_list_key(tags=("a,b",)) != post_list_key(tags=("a", "b"))

    def test_flag(self) -> None:
        transform = flag("on", "off")
        assert transform("1") == "on"
        assert transform("no") == "off"
        assert transform(True) == "on"

    def test_required_param_missing(self) -> None:
        ctx = KeyContext(tenant_id="T1")
        with pytest.raises(KeyComputationError):
            Param("postId", required=True).render(ctx)

    def test_param_without_value_or_default(self) -> None:
        with pytest.raises(KeyComputationError):
            Param("category").render(KeyContext(tenant_id="T1"))

    def test_path_params_win_over_query(self) -> None:
        ctx = KeyContext(tenant_id="T1", path_params={"id": "p"}, query_params={"id": "q"})
        assert Param("id").render(ctx) == ["p"]
        assert Param("id", source="query").render(ctx) == ["q"]

    def test_viewer_and_page_defaults(self) -> None:
        ctx = KeyContext(tenant_id="T1")
        assert VIEWER.render(ctx) == ["user", "anonymous"]
        assert PAGE.render(ctx) == ["page", "1"]

    def test_filters_render_sorted_pairs(self) -> None:
        ctx = KeyContext(tenant_id="T1", query_params={"status": "open", "category": "it"})
        filters = Filters(("status", "category", "priority"), default="all")
        assert filters.render(ctx) == ["category", "it", "priority", "all", "status", "open"]

    def test_filters_exclude(self) -> None:
        ctx = KeyContext(tenant_id="T1", query_params={"status": "open", "page": "2"})
        assert Filters(exclude=("page",)).render(ctx) == ["status", "open"]


class TestNamespaces:
    def test_tenant_namespace(self) -> None:
        assert tenant_namespace("T1") == "tenant:T1"
        assert tenant_namespace(42, prefix="portal") == "portal:tenant:42"

    @pytest.mark.parametrize("tenant", [None, "", "   "])
    def test_missing_tenant(self, tenant: object) -> None:
        with pytest.raises(KeyComputationError):
            tenant_namespace(tenant)

    def test_render_pattern(self) -> None:
        assert render_pattern("tenant:T1", "post:{postId}", {"postId": 7}) == "tenant:T1:post:7"
        assert render_pattern("tenant:T1", "posts:*", {}) == "tenant:T1:posts:*"
        assert render_pattern("tenant:T1", "post:{postId}", {}) is None

    def test_render_pattern_escapes_values(self) -> None:
        assert render_pattern("tenant:T1", "post:{postId}:*", {"postId": "*"}) == (
            "tenant:T1:post:%2A:*"
        )

    def test_is_pattern(self) -> None:
        assert is_pattern("tenant:T1:posts:*")
        assert not is_pattern("tenant:T1:post:1")

    def test_family_of(self) -> None:
        assert family_of(CANONICAL_POST_LIST) == "posts"
        assert family_of("tenant:T1:posts:*") == "posts"
        assert family_of("portal:tenant:T1:event:9", prefix="portal") == "event"
        assert family_of("tenant:T1:event:9", prefix="portal") is None
        assert family_of("something-else") is None
