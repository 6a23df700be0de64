# portal_cache/routes/cache.py
"""Administrative routes of the cache layer, rate-limited with SlowAPI."""

from logging import getLogger
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import ORJSONResponse

from portal_cache.configs import file_logger
from portal_cache.context import query_params, resolve_tenant_id, resolve_viewer_id
from portal_cache.errors import StoreUnavailableError
from portal_cache.keys import KeyContext
from portal_cache.managers import CacheAnalytics, CacheInvalidator, CacheService, limiter
from portal_cache.policies import registry
from portal_cache.schemas import (
    CacheAnalyticsResponse,
    CacheClearResponse,
    CacheHealthResponse,
    CacheInvalidateResponse,
    CacheMessageResponse,
    CacheStatsResponse,
)

logger = file_logger(getLogger(__name__))

router = APIRouter(prefix="/cache", tags=["cache"])


# --- Dependency Injection ---
def get_cache_service(request: Request) -> CacheService:
    """Cache service created by the application lifespan."""
    service: CacheService | None = getattr(request.app.state, "cache_service", None)
    if service is None:
        raise StoreUnavailableError("Cache service is not configured")
    return service


CacheDep = Annotated[CacheService, Depends(get_cache_service)]


def get_cache_analytics(request: Request, service: CacheDep) -> CacheAnalytics:
    return getattr(request.app.state, "cache_analytics", None) or CacheAnalytics(service)


AnalyticsDep = Annotated[CacheAnalytics, Depends(get_cache_analytics)]


def _tenant(request: Request, service: CacheService) -> str:
    return resolve_tenant_id(request, service.config.default_tenant)


# --- Routes ---
@router.get(
    "/stats",
    response_model=CacheStatsResponse,
    summary="Get cache statistics",
    response_class=ORJSONResponse,
)
@limiter.limit("10/minute")
async def get_cache_stats(request: Request, service: CacheDep) -> ORJSONResponse:
    """
    Get the statistics of this process's cache service.

    Returns:
        Cache statistics.
    """
    response = CacheStatsResponse(success=True, data=service.get_statistics())
    return ORJSONResponse(content=response.model_dump())


@router.get(
    "/ping",
    response_model=CacheMessageResponse,
    summary="Ping cache store",
    response_class=ORJSONResponse,
)
@limiter.limit("20/minute")
async def ping_cache(request: Request, service: CacheDep) -> ORJSONResponse:
    if await service.ping():
        response = CacheMessageResponse(success=True, message="Cache store is reachable")
        return ORJSONResponse(content=response.model_dump())

    response = CacheMessageResponse(
        success=False,
        message="Cache store is not reachable",
        error_code=503,
    )
    return ORJSONResponse(content=response.model_dump(), status_code=503)


@router.get(
    "/health",
    response_model=CacheHealthResponse,
    summary="Cache backend health",
    response_class=ORJSONResponse,
)
@limiter.limit("20/minute")
async def cache_health(request: Request, service: CacheDep) -> ORJSONResponse:
    health = CacheHealthResponse.model_validate(await service.health_check())
    status_code = 200 if health.status == "healthy" else 503
    return ORJSONResponse(content=health.model_dump(exclude_none=True), status_code=status_code)


@router.get(
    "/analytics",
    response_model=CacheAnalyticsResponse,
    summary="Daily hit and miss counters of the current tenant",
    response_class=ORJSONResponse,
)
@limiter.limit("10/minute")
async def cache_analytics(
    request: Request,
    service: CacheDep,
    analytics: AnalyticsDep,
    days: Annotated[int, Query(ge=1, le=90)] = 7,
) -> ORJSONResponse:
    """
    Hit ratio of the current tenant over the last ``days`` days.

    Counters are shared by every process using the same store.
    """
    tenant = _tenant(request, service)
    response = CacheAnalyticsResponse(
        success=True,
        tenant=tenant,
        days=days,
        data=await analytics.dashboard(tenant, days),
    )
    return ORJSONResponse(content=response.model_dump())


@router.get(
    "/reset-stats",
    response_model=CacheMessageResponse,
    summary="Reset cache statistics",
    response_class=ORJSONResponse,
)
@limiter.limit("5/hour")
async def reset_stats(request: Request, service: CacheDep) -> ORJSONResponse:
    service.reset_statistics()
    response = CacheMessageResponse(success=True, message="Cache statistics reset")
    return ORJSONResponse(content=response.model_dump())


@router.delete(
    "/clear",
    response_model=CacheClearResponse,
    summary="Clear the cache namespace of the current tenant",
    response_class=ORJSONResponse,
)
@limiter.limit("2/hour")
async def clear_cache(request: Request, service: CacheDep) -> ORJSONResponse:
    """
    Delete every cached entry of the current tenant.

    Other tenants' namespaces are never touched.
    """
    tenant = _tenant(request, service)
    invalidator = CacheInvalidator(service, registry)
    deleted = await invalidator.invalidate_tenant(tenant)
    response = CacheClearResponse(
        success=True,
        message="Cache cleared successfully",
        tenant=tenant,
        deleted=deleted,
    )
    return ORJSONResponse(content=response.model_dump())


@router.delete(
    "/invalidate/{resource}/{mutation}",
    response_model=CacheInvalidateResponse,
    summary="Run a mutation's invalidation for the current tenant",
    response_class=ORJSONResponse,
)
@limiter.limit("30/minute")
async def invalidate(
    request: Request,
    service: CacheDep,
    resource: str,
    mutation: str,
) -> ORJSONResponse:
    """
    Invalidate what ``mutation`` on ``resource`` makes stale.

    Query parameters fill the templates' placeholders, e.g.
    ``DELETE /cache/invalidate/posts/update?postId=42``. Templates whose
    placeholders are not given are skipped.
    """
    tenant = _tenant(request, service)
    viewer = resolve_viewer_id(request)
    related = {k: v for k, v in query_params(request).items() if isinstance(v, str)}
    invalidator = CacheInvalidator(service, registry)
    patterns = invalidator.patterns_for(
        resource,
        mutation,
        KeyContext(tenant_id=tenant, viewer_id=viewer),
        **related,
    )
    done = await invalidator.invalidate(
        resource,
        mutation,
        tenant_id=tenant,
        viewer_id=viewer,
        **related,
    )
    response = CacheInvalidateResponse(
        success=done == len(patterns),
        message=f"Invalidated {done} of {len(patterns)} targets",
        tenant=tenant,
        resource=resource,
        mutation=mutation,
        patterns=patterns,
        invalidated=done,
    )
    return ORJSONResponse(content=response.model_dump())
