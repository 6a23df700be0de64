"""
Declarative cache policies.

A ``CachePolicy`` describes one resource: the views that can be cached
(each with a key template and a TTL) and, per mutation, the invalidation
templates of every view that mutation can make stale. Templates ending in
``*`` are deleted by pattern, the others by exact key.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any

from portal_cache.errors import UnknownCacheViewError
from portal_cache.keys import VIEWER, KeyContext, render_key, render_pattern, tenant_namespace
from portal_cache.keys.segments import Segment


class TTL(IntEnum):
    """
    Expiry tiers in seconds.

    Shorter tiers suit data that changes often or is polled, longer tiers
    suit data that is expensive to recompute and tolerates staleness.
    """

    LIVE = 60
    VOLATILE = 120
    SHORT = 180
    INTERACTIVE = 300
    LIST = 600
    STANDARD = 900
    RELAXED = 1200
    DETAIL = 1800
    STABLE = 3600
    AGGREGATE = 7200
    DASHBOARD = 14400
    EXTENDED = 21600
    HALF_DAY = 43200
    DAY = 86400


@dataclass(frozen=True, slots=True)
class CacheView:
    name: str
    segments: tuple[Segment, ...]
    ttl: int
    viewer_specific: bool = False

    @property
    def key_segments(self) -> tuple[Segment, ...]:
        if self.viewer_specific and not any(getattr(s, "is_viewer", False) for s in self.segments):
            return (*self.segments, VIEWER)
        return self.segments

    def key(self, namespace: str, ctx: KeyContext) -> str:
        return render_key(namespace, self.key_segments, ctx)


@dataclass(frozen=True, slots=True)
class CachePolicy:
    resource: str
    views: tuple[CacheView, ...]
    invalidations: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    # Placeholder filled by the mutated entity id.
    id_param: str | None = None

    def view(self, name: str) -> CacheView:
        for view in self.views:
            if view.name == name:
                return view
        mssg = f"Unknown view '{name}' for resource '{self.resource}'"
        raise UnknownCacheViewError(mssg)

    def templates(self, mutation: str) -> tuple[str, ...]:
        try:
            return self.invalidations[mutation]
        except KeyError:
            mssg = f"Unknown mutation '{mutation}' for resource '{self.resource}'"
            raise UnknownCacheViewError(mssg) from None


class PolicyRegistry:
    """Lookup table of cache policies by resource name."""

    def __init__(self, policies: Iterable[CachePolicy] = ()) -> None:
        self._policies: dict[str, CachePolicy] = {}
        for policy in policies:
            self.register(policy)

    def register(self, policy: CachePolicy) -> None:
        if policy.resource in self._policies:
            mssg = f"Cache policy for '{policy.resource}' is already registered"
            raise ValueError(mssg)
        names = [view.name for view in policy.views]
        if len(names) != len(set(names)):
            mssg = f"Cache policy for '{policy.resource}' declares a view twice"
            raise ValueError(mssg)
        self._policies[policy.resource] = policy

    def __contains__(self, resource: object) -> bool:
        return resource in self._policies

    def __iter__(self):  # noqa: ANN204
        return iter(self._policies.values())

    def __len__(self) -> int:
        return len(self._policies)

    @property
    def resources(self) -> list[str]:
        return sorted(self._policies)

    def policy(self, resource: str) -> CachePolicy:
        try:
            return self._policies[resource]
        except KeyError:
            mssg = f"Unknown cache resource '{resource}'"
            raise UnknownCacheViewError(mssg) from None

    def view(self, resource: str, name: str) -> CacheView:
        return self.policy(resource).view(name)

    def patterns(
        self,
        resource: str,
        mutation: str,
        ctx: KeyContext,
        prefix: str = "",
        **related: Any,  # noqa: ANN401
    ) -> list[str]:
        """
        Render the invalidation templates of a mutation for ``ctx.tenant_id``.

        Templates whose placeholders have no value are skipped. The result is
        ordered as declared and free of duplicates.
        """
        namespace = tenant_namespace(ctx.tenant_id, prefix)
        values = ctx.values(**related)
        rendered: dict[str, None] = {}
        for template in self.policy(resource).templates(mutation):
            pattern = render_pattern(namespace, template, values)
            if pattern is not None:
                rendered.setdefault(pattern)
        return list(rendered)
