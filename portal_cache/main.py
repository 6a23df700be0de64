# portal_cache/main.py

"""Alumni Portal Cache - tenant-aware response caching for the portal API."""

from fastapi import FastAPI, Request
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from portal_cache.configs import settings
from portal_cache.errors import CacheExceptionError, cache_exception_handler
from portal_cache.managers import CacheService, limiter, rate_limit_exceeded_handler
from portal_cache.middleware import (
    LoggingMiddleware,
    SecurityHeadersMiddleware,
    TenantContextMiddleware,
    configure_cors,
    lifespan,
)
from portal_cache.monitoring import setup_prometheus
from portal_cache.routes import cache_router
from portal_cache.schemas import CacheHealthResponse, HealthCheckResponse
from portal_cache.utils.helpers import today_str

app = FastAPI(
    title=settings.APP_NAME,
    description="Tenant-aware response cache of the alumni portal API",
    version="1.0.0",
    lifespan=lifespan,
    swagger_ui_parameters={
        "docExpansion": "none",
        "operationsSorter": "method",
    },
)

configure_cors(app)

app.add_middleware(LoggingMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(TenantContextMiddleware, header=settings.TENANT_HEADER)
app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(ProxyHeadersMiddleware, trusted_hosts="*")

app.include_router(cache_router)

errors = [
    (CacheExceptionError, cache_exception_handler),
    (RateLimitExceeded, rate_limit_exceeded_handler),
]

_ = [app.add_exception_handler(exc_type, handler) for exc_type, handler in errors]

app.state.limiter = limiter
limiter: Limiter = app.state.limiter

if settings.ENABLE_METRICS:
    setup_prometheus(app)


@app.get(
    "/health",
    tags=["🩺 Health"],
    summary="Health check endpoint",
    response_model=HealthCheckResponse,
    response_class=ORJSONResponse,
    operation_id="health_check",
)
@limiter.exempt
async def health_check(request: Request) -> ORJSONResponse:
    """
    Health check endpoint with the cache backend status.

    The API stays ``ok`` while the cache store is down; a missing store only
    makes every lookup a miss.
    """
    service: CacheService | None = getattr(request.app.state, "cache_service", None)
    cache = None
    if service is not None:
        cache = CacheHealthResponse.model_validate(await service.health_check())

    response = HealthCheckResponse(
        version=app.version,
        status="ok",
        timestamp=today_str(),
        cache=cache,
    )
    return ORJSONResponse(response.model_dump(exclude_none=True))


if __name__ == "__main__":
    from uvicorn import run

    run(app, host="127.0.0.1", port=8000, log_level="info")
