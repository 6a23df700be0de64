from portal_cache.configs.logger import file_logger
from portal_cache.configs.settings import (
    CACHE_HIT_HEADER,
    CacheConfig,
    LimiterConfig,
    RedisConfig,
    redis_pool_kwargs,
    settings,
)

__all__ = [
    "CACHE_HIT_HEADER",
    "CacheConfig",
    "LimiterConfig",
    "RedisConfig",
    "file_logger",
    "redis_pool_kwargs",
    "settings",
]
