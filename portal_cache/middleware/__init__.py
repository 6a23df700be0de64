from portal_cache.middleware.context import TenantContextMiddleware
from portal_cache.middleware.middleware import (
    LoggingMiddleware,
    SecurityHeadersMiddleware,
    configure_cors,
    lifespan,
)

__all__ = [
    "LoggingMiddleware",
    "SecurityHeadersMiddleware",
    "TenantContextMiddleware",
    "configure_cors",
    "lifespan",
]
