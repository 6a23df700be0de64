"""Custom exceptions for caching module."""

from logging import getLogger

from starlette import status

from portal_cache.configs import file_logger
from portal_cache.errors.base import BaseAppError, create_exception_handler

logger = file_logger(getLogger(__name__))


class CacheExceptionError(BaseAppError):
    """Base exception for cache operations."""

    def __init__(self, detail: str = "Cache exception occurred") -> None:
        super().__init__(
            detail=detail,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )


class StoreUnavailableError(CacheExceptionError):
    """Raised when the key-value store cannot be reached."""

    def __init__(self, detail: str = "Cache store unavailable") -> None:
        super().__init__(detail)
        self.status_code = status.HTTP_503_SERVICE_UNAVAILABLE


class CacheSerializationError(CacheExceptionError):
    """Raised when cache serialization fails."""

    def __init__(self, detail: str = "Cannot serialize value") -> None:
        super().__init__(detail)


class CacheDeserializationError(CacheExceptionError):
    """Raised when cache deserialization fails."""

    def __init__(self, detail: str = "Cannot deserialize value") -> None:
        super().__init__(detail)


class CacheCompressionError(CacheExceptionError):
    """Raised when cache compression fails."""

    def __init__(self, detail: str = "Cannot compress data") -> None:
        super().__init__(detail)


class CacheDecompressionError(CacheExceptionError):
    """Raised when cache decompression fails."""

    def __init__(self, detail: str = "Cannot decompress data") -> None:
        super().__init__(detail)


class KeyComputationError(CacheExceptionError):
    """Raised when a cache key cannot be derived from the request."""

    def __init__(self, detail: str = "Cannot compute cache key") -> None:
        super().__init__(detail)


class InvalidationError(CacheExceptionError):
    """Raised when invalidation patterns cannot be computed."""

    def __init__(self, detail: str = "Cache invalidation failed") -> None:
        super().__init__(detail)


class UnknownCacheViewError(CacheExceptionError):
    """Raised when a resource, view or mutation is not registered."""

    def __init__(self, detail: str = "Unknown cache view") -> None:
        super().__init__(detail)
        self.status_code = status.HTTP_404_NOT_FOUND


# Create the exception handler using the helper
cache_exception_handler = create_exception_handler(logger)
