# portal_cache/context/__init__.py
"""
Request context consumed by the cache layer.

The tenant and the authenticated viewer are resolved upstream (tenant
resolver and auth middleware). The cache only reads what they leave on
``request.state``.
"""

from collections.abc import Mapping
from typing import Any

from starlette.requests import Request

from portal_cache.keys import KeyContext


def _identity(obj: object) -> str | None:
    """Read ``id`` from a model, a mapping or a plain value."""
    if obj is None:
        return None
    if isinstance(obj, Mapping):
        value = obj.get("id")
    elif isinstance(obj, str | int):
        value = obj
    else:
        value = getattr(obj, "id", None)
    return None if value is None or value == "" else str(value)


def resolve_tenant_id(request: Request, default: str) -> str:
    """Resolved tenant id, tenant code from the header, then ``default``."""
    state = request.state
    return (
        _identity(getattr(state, "tenant", None))
        or _identity(getattr(state, "tenant_id", None))
        or default
    )


def resolve_viewer_id(request: Request) -> str | None:
    """Authenticated user id, or ``None`` for anonymous requests."""
    state = request.state
    return _identity(getattr(state, "user", None)) or _identity(getattr(state, "user_id", None))


def query_params(request: Request) -> dict[str, Any]:
    """Query parameters; repeated parameters are kept as tuples."""
    params: dict[str, Any] = {}
    for name in request.query_params:
        values = request.query_params.getlist(name)
        params[name] = values[0] if len(values) == 1 else tuple(values)
    return params


def build_key_context(request: Request, default_tenant: str) -> KeyContext:
    return KeyContext(
        tenant_id=resolve_tenant_id(request, default_tenant),
        viewer_id=resolve_viewer_id(request),
        path_params=dict(request.path_params),
        query_params=query_params(request),
    )


__all__ = ["build_key_context", "query_params", "resolve_tenant_id", "resolve_viewer_id"]
