from portal_cache.schemas.cache import (
    CacheAnalyticsResponse,
    CacheClearResponse,
    CacheHealthResponse,
    CacheInvalidateResponse,
    CacheMessageResponse,
    CacheStatistics,
    CacheStatsResponse,
    HealthCheckResponse,
)

__all__ = [
    "CacheAnalyticsResponse",
    "CacheClearResponse",
    "CacheHealthResponse",
    "CacheInvalidateResponse",
    "CacheMessageResponse",
    "CacheStatistics",
    "CacheStatsResponse",
    "HealthCheckResponse",
]
