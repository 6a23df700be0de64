from portal_cache.managers.analytics import CacheAnalytics
from portal_cache.managers.cache_service import CacheService
from portal_cache.managers.invalidator import CacheInvalidator
from portal_cache.managers.rate_limiter import limiter, rate_limit_exceeded_handler

__all__ = [
    "CacheAnalytics",
    "CacheInvalidator",
    "CacheService",
    "limiter",
    "rate_limit_exceeded_handler",
]
