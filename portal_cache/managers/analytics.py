"""Daily cache hit/miss counters kept in the store itself."""

from asyncio import gather
from typing import TYPE_CHECKING, Any

from portal_cache.errors import KeyComputationError
from portal_cache.keys import family_of, tenant_namespace
from portal_cache.utils.helpers import utc_date

if TYPE_CHECKING:
    from portal_cache.managers.cache_service import CacheService

SECONDS_PER_DAY = 24 * 60 * 60


class CacheAnalytics:
    """
    Per-tenant daily hit and miss counters.

    Counters live under ``analytics:tenant:{id}:`` and expire after
    ``CacheConfig.analytics_retention_days``. Unlike ``CacheStatistics`` they
    are shared by every process using the same store.
    """

    def __init__(self, service: "CacheService") -> None:
        self.service = service

    @property
    def enabled(self) -> bool:
        return self.service.config.analytics_enabled

    @property
    def retention(self) -> int:
        return self.service.config.analytics_retention_days * SECONDS_PER_DAY

    def _base(self, tenant_id: object) -> str:
        # Kept out of ``tenant:{id}:*``; tenant clears never reach it.
        prefix = self.service.config.key_prefix
        return tenant_namespace(tenant_id, f"{prefix}:analytics" if prefix else "analytics")

    async def _track(self, outcome: str, tenant_id: object, key: str) -> None:
        if not self.enabled:
            return
        try:
            base = self._base(tenant_id)
        except KeyComputationError:
            return
        date = utc_date()
        family = family_of(key, self.service.config.key_prefix) or "unknown"
        await gather(
            self.service.incr(f"{base}:{outcome}:{date}", self.retention),
            self.service.incr(f"{base}:{outcome}:family:{family}:{date}", self.retention),
        )

    async def track_hit(self, tenant_id: object, key: str) -> None:
        await self._track("hits", tenant_id, key)

    async def track_miss(self, tenant_id: object, key: str) -> None:
        await self._track("misses", tenant_id, key)

    async def _count(self, key: str) -> int:
        return await self.service.counter(key)

    async def get_stats(self, tenant_id: object, days: int = 7) -> dict[str, dict[str, Any]]:
        """
        Return hits, misses, total and hit ratio for each of the last ``days``.

        Dates are UTC and listed newest first.
        """
        base = self._base(tenant_id)
        stats: dict[str, dict[str, Any]] = {}
        for offset in range(max(days, 0)):
            date = utc_date(offset)
            hits, misses = await gather(
                self._count(f"{base}:hits:{date}"),
                self._count(f"{base}:misses:{date}"),
            )
            total = hits + misses
            stats[date] = {
                "hits": hits,
                "misses": misses,
                "total": total,
                "hit_ratio": round(hits / total * 100, 2) if total else 0.0,
            }
        return stats

    async def top_families(self, tenant_id: object, limit: int = 10) -> list[dict[str, Any]]:
        """Resource families with the most hits today."""
        date = utc_date()
        head = f"{self._base(tenant_id)}:hits:family:"
        ranking: list[dict[str, Any]] = []
        for key in await self.service.scan(f"{head}*:{date}"):
            family = key[len(head) : -(len(date) + 1)]
            ranking.append({"family": family, "hits": await self._count(key)})
        ranking.sort(key=lambda item: item["hits"], reverse=True)
        return ranking[:limit]

    async def dashboard(self, tenant_id: object, days: int = 7) -> dict[str, Any]:
        daily = await self.get_stats(tenant_id, days)
        hits = sum(day["hits"] for day in daily.values())
        misses = sum(day["misses"] for day in daily.values())
        total = hits + misses
        return {
            "overview": {
                "total_hits": hits,
                "total_misses": misses,
                "total_requests": total,
                "hit_ratio": round(hits / total * 100, 2) if total else 0.0,
            },
            "daily": daily,
            "top_families": await self.top_families(tenant_id),
        }
