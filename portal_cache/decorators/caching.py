# portal_cache/decorators/caching.py
"""FastAPI decorators for tenant-aware response caching and invalidation."""

from collections.abc import Callable, Mapping
from functools import wraps
from inspect import signature
from logging import getLogger
from typing import TYPE_CHECKING, Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import ORJSONResponse
from orjson import JSONDecodeError, loads
from pydantic import BaseModel
from starlette.requests import Request
from starlette.responses import Response

from portal_cache.configs import CACHE_HIT_HEADER, file_logger
from portal_cache.context import build_key_context, resolve_tenant_id, resolve_viewer_id
from portal_cache.errors import KeyComputationError
from portal_cache.policies import PolicyRegistry

if TYPE_CHECKING:
    from portal_cache.managers.analytics import CacheAnalytics
    from portal_cache.managers.cache_service import CacheService

logger = file_logger(getLogger(__name__))

RelatedIds = Callable[[Request, Any], Mapping[str, Any]]


def _request_param(func: Callable) -> str:
    """Name of the endpoint parameter holding the ``Request``."""
    for name, param in signature(func).parameters.items():
        if param.annotation is Request or name == "request":
            return name
    mssg = f"Cached endpoint '{func.__name__}' must accept a 'request: Request' argument"
    raise TypeError(mssg)


def _find_request(name: str, args: tuple[Any, ...], kwargs: dict[str, Any]) -> Request | None:
    if isinstance(request := kwargs.get(name), Request):
        return request
    return next((arg for arg in args if isinstance(arg, Request)), None)


def _service(request: Request) -> "CacheService | None":
    return getattr(request.app.state, "cache_service", None)


def _analytics(request: Request) -> "CacheAnalytics | None":
    return getattr(request.app.state, "cache_analytics", None)


def _sub_response(kwargs: dict[str, Any]) -> Response | None:
    """Response injected by FastAPI for endpoints declaring ``response: Response``."""
    return next((v for v in kwargs.values() if isinstance(v, Response)), None)


def normalize(result: object, kwargs: dict[str, Any]) -> tuple[int, Any]:
    """
    Reduce an endpoint result to ``(status, body)``.

    A ``Response`` keeps its status and its body is decoded when it is JSON.
    A response without a JSON body yields ``None`` and is never cached or
    counted as a success. Models and plain data are encoded the way FastAPI
    would serialize them.
    """
    if isinstance(result, Response):
        # Streaming and file responses carry no buffered body.
        raw = getattr(result, "body", None)
        try:
            body = loads(raw) if raw else None
        except JSONDecodeError:
            body = None
        return result.status_code, body
    if isinstance(result, BaseModel):
        body = result.model_dump(mode="json")
    else:
        body = jsonable_encoder(result)
    sub = _sub_response(kwargs)
    status = sub.status_code if sub is not None and sub.status_code else 200
    return status, body


def _succeeded(body: object, success_field: str) -> bool:
    return isinstance(body, Mapping) and bool(body.get(success_field))


def _related_ids(
    related: RelatedIds | None,
    request: Request,
    body: object,
    label: str,
) -> dict[str, Any]:
    """
    Extra placeholder values for an invalidation.

    A failing ``related`` callable only narrows the invalidation to the
    patterns the request alone can fill.
    """
    if related is None:
        return {}
    try:
        return dict(related(request, body))
    except Exception as e:
        logger.warning(f"Related ids for {label} unavailable, invalidating without them: {e!r}")
        return {}


def cache_response(registry: PolicyRegistry, resource: str, view: str) -> Callable:
    """
    Cache-aside decorator for read endpoints.

    The key is rendered from the view's segments for the request's tenant,
    path, query and viewer. A hit short-circuits the endpoint; a miss runs it
    and stores the envelope in the background when the response is a
    successful ``200``.

    Args:
        registry: Policy registry holding ``resource``.
        resource: Resource name of the cache policy.
        view: View name within the policy.

    Raises:
        UnknownCacheViewError: At decoration time, if the view is not registered.
        TypeError: At decoration time, if the endpoint takes no ``Request``.

    Example:
        @router.get("/posts")
        @cache_response(registry, "posts", "list")
        async def list_posts(request: Request) -> dict: ...
    """
    cache_view = registry.view(resource, view)

    def decorator(func: Callable) -> Callable:
        param = _request_param(func)

        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> object:  # noqa: ANN401
            request = _find_request(param, args, kwargs)
            service = _service(request) if request is not None else None
            if request is None or service is None:
                return await func(*args, **kwargs)

            ctx = build_key_context(request, service.config.default_tenant)
            try:
                key = cache_view.key(service.namespace(ctx.tenant_id), ctx)
            except KeyComputationError as e:
                logger.warning(f"Serving {resource}.{view} uncached: {e}")
                return await func(*args, **kwargs)

            request.state.cache_key = key
            analytics = _analytics(request)
            if (cached := await service.get(key)) is not None:
                request.state.cache_hit = True
                if analytics is not None:
                    service.schedule(analytics.track_hit(ctx.tenant_id, key), name="track_hit")
                return ORJSONResponse(cached, headers={CACHE_HIT_HEADER: "HIT"})

            request.state.cache_hit = False
            if analytics is not None:
                service.schedule(analytics.track_miss(ctx.tenant_id, key), name="track_miss")

            result = await func(*args, **kwargs)
            status, body = normalize(result, kwargs)
            if status == 200 and _succeeded(body, service.config.success_field):
                service.schedule(service.set(key, body, cache_view.ttl), name=f"cache:{key}")

            if isinstance(result, Response):
                result.headers[CACHE_HIT_HEADER] = "MISS"
                return result
            return ORJSONResponse(body, status_code=status, headers={CACHE_HIT_HEADER: "MISS"})

        return wrapper

    return decorator


def invalidate_on_success(
    registry: PolicyRegistry,
    resource: str,
    mutation: str,
    related: RelatedIds | None = None,
) -> Callable:
    """
    Invalidate the views a mutation makes stale once it has succeeded.

    Invalidation runs in the background after the endpoint returns and only
    when the status is below ``300`` and the envelope's success flag is set.
    The endpoint's result is returned unchanged.

    Args:
        registry: Policy registry holding ``resource``.
        resource: Resource name of the cache policy.
        mutation: Mutation name in the policy's invalidation table.
        related: Optional callable ``(request, body)`` returning extra
            placeholder values, e.g. the parent id of a created comment.

    Raises:
        UnknownCacheViewError: At decoration time, if the mutation is not registered.
        TypeError: At decoration time, if the endpoint takes no ``Request``.
    """
    from portal_cache.managers.invalidator import CacheInvalidator  # noqa: PLC0415

    registry.policy(resource).templates(mutation)

    def decorator(func: Callable) -> Callable:
        param = _request_param(func)

        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> object:  # noqa: ANN401
            result = await func(*args, **kwargs)

            request = _find_request(param, args, kwargs)
            service = _service(request) if request is not None else None
            if request is None or service is None:
                return result

            status, body = normalize(result, kwargs)
            if status >= 300 or not _succeeded(body, service.config.success_field):
                return result

            extra = _related_ids(related, request, body, f"{resource}.{mutation}")
            invalidator = CacheInvalidator(service, registry)
            service.schedule(
                invalidator.invalidate(
                    resource,
                    mutation,
                    tenant_id=resolve_tenant_id(request, service.config.default_tenant),
                    viewer_id=resolve_viewer_id(request),
                    path_params=dict(request.path_params),
                    **extra,
                ),
                name=f"invalidate:{resource}.{mutation}",
            )
            return result

        return wrapper

    return decorator
