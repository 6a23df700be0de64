from portal_cache.decorators.with_retry import CONNECT_ERRORS, with_retry
from portal_cache.decorators.caching import cache_response, invalidate_on_success

__all__ = [
    "cache_response",
    "invalidate_on_success",
    "with_retry",
    "CONNECT_ERRORS",
]
