from portal_cache.errors.base import (
    STORE_EXCEPTIONS,
    BaseAppError,
    create_exception_handler,
)
from portal_cache.errors.cache import (
    CacheCompressionError,
    CacheDecompressionError,
    CacheDeserializationError,
    CacheExceptionError,
    CacheSerializationError,
    InvalidationError,
    KeyComputationError,
    StoreUnavailableError,
    UnknownCacheViewError,
    cache_exception_handler,
)

__all__ = [
    "STORE_EXCEPTIONS",
    "BaseAppError",
    "CacheCompressionError",
    "CacheDecompressionError",
    "CacheDeserializationError",
    "CacheExceptionError",
    "CacheSerializationError",
    "InvalidationError",
    "KeyComputationError",
    "StoreUnavailableError",
    "UnknownCacheViewError",
    "cache_exception_handler",
    "create_exception_handler",
]
