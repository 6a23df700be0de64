"""Mutation-driven cache invalidation."""

from asyncio import gather
from collections.abc import Mapping
from logging import getLogger
from typing import TYPE_CHECKING, Any

from portal_cache.configs import file_logger
from portal_cache.errors import InvalidationError, KeyComputationError, UnknownCacheViewError
from portal_cache.keys import KeyContext, family_of, is_pattern
from portal_cache.monitoring import metrics
from portal_cache.policies import PolicyRegistry

if TYPE_CHECKING:
    from portal_cache.managers.cache_service import CacheService

logger = file_logger(getLogger(__name__))


class CacheInvalidator:
    """
    Deletes every cached view a mutation can make stale.

    Patterns are derived from the resource's policy and are always scoped to
    one tenant namespace. Deletes run concurrently; failures are logged and
    leave the affected entries to expire with their TTL.
    """

    def __init__(self, service: "CacheService", registry: PolicyRegistry) -> None:
        self.service = service
        self.registry = registry

    def patterns_for(
        self,
        resource: str,
        mutation: str,
        ctx: KeyContext,
        **related: Any,  # noqa: ANN401
    ) -> list[str]:
        """
        Render the keys and patterns to delete for one mutation.

        Raises:
            UnknownCacheViewError: If the resource or mutation is not registered.
            InvalidationError: If the tenant namespace cannot be derived.
        """
        try:
            return self.registry.patterns(
                resource,
                mutation,
                ctx,
                self.service.config.key_prefix,
                **related,
            )
        except KeyComputationError as e:
            mssg = f"Cannot compute invalidation patterns for {resource}.{mutation}: {e}"
            raise InvalidationError(mssg) from e

    async def _apply(self, target: str) -> bool:
        if is_pattern(target):
            ok = await self.service.delete_pattern(target)
        else:
            ok = await self.service.delete(target)
        metrics.record_invalidation(family_of(target, self.service.config.key_prefix), ok=ok)
        return ok

    async def invalidate(
        self,
        resource: str,
        mutation: str,
        *,
        tenant_id: str,
        entity_id: object | None = None,
        viewer_id: str | None = None,
        path_params: Mapping[str, Any] | None = None,
        **related: Any,  # noqa: ANN401
    ) -> int:
        """
        Invalidate the views touched by ``mutation`` on ``resource``.

        Returns:
            Number of keys and patterns deleted successfully. Never raises.
        """
        ctx = KeyContext(tenant_id=tenant_id, viewer_id=viewer_id, path_params=path_params or {})
        try:
            id_param = self.registry.policy(resource).id_param
            if entity_id is not None and id_param:
                related.setdefault(id_param, entity_id)
            targets = self.patterns_for(resource, mutation, ctx, **related)
        except (InvalidationError, UnknownCacheViewError) as e:
            logger.warning(f"Skipping invalidation: {e}")
            return 0

        results = await gather(*(self._apply(target) for target in targets))
        done = sum(results)
        if done < len(targets):
            failed = [t for t, ok in zip(targets, results, strict=True) if not ok]
            logger.warning(
                "Invalidation %s.%s for tenant %s left %d stale targets: %s",
                resource,
                mutation,
                tenant_id,
                len(failed),
                failed,
            )
        else:
            logger.info(
                "Invalidated %s.%s for tenant %s (%d targets)",
                resource,
                mutation,
                tenant_id,
                done,
            )
        return done

    async def invalidate_tenant(self, tenant_id: str) -> int:
        """Drop a tenant's whole namespace, e.g. after a subscription change."""
        deleted = await self.service.clear(tenant_id)
        logger.info("Dropped cache namespace of tenant %s (%d keys)", tenant_id, deleted)
        return deleted
