from portal_cache.data.statistics import CacheStatistics

__all__ = ["CacheStatistics"]
