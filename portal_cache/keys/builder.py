"""Key and invalidation-pattern rendering."""

from collections.abc import Mapping, Sequence
from string import Formatter
from typing import Any

from portal_cache.errors import KeyComputationError
from portal_cache.keys.context import KeyContext
from portal_cache.keys.segments import SEPARATOR, Segment, escape_segment, format_value

TENANT_SEGMENT = "tenant"
WILDCARD = "*"

_formatter = Formatter()


def tenant_namespace(tenant_id: object, prefix: str = "") -> str:
    """
    Return the keyspace prefix of one tenant.

    >>> tenant_namespace("T1")
    'tenant:T1'
    >>> tenant_namespace("T1", prefix="portal")
    'portal:tenant:T1'
    """
    tenant = format_value(tenant_id)
    if tenant is None:
        mssg = "Tenant id is required to build a cache key"
        raise KeyComputationError(mssg)
    namespace = f"{TENANT_SEGMENT}{SEPARATOR}{tenant}"
    return f"{prefix}{SEPARATOR}{namespace}" if prefix else namespace


def render_key(namespace: str, segments: Sequence[Segment], ctx: KeyContext) -> str:
    parts = [namespace]
    for segment in segments:
        parts.extend(segment.render(ctx))
    return SEPARATOR.join(parts)


def template_fields(template: str) -> list[str]:
    return [name for _, name, _, _ in _formatter.parse(template) if name]


def render_pattern(namespace: str, template: str, values: Mapping[str, Any]) -> str | None:
    """
    Substitute ``{name}`` placeholders of an invalidation template.

    Returns ``None`` when a placeholder has no value, so the caller skips the
    pattern instead of deleting a wider set of keys than intended.

    >>> render_pattern("tenant:T1", "post:{postId}", {"postId": 7})
    'tenant:T1:post:7'
    >>> render_pattern("tenant:T1", "post:{postId}", {}) is None
    True
    """
    rendered: dict[str, str] = {}
    for name in template_fields(template):
        value = format_value(values.get(name))
        if value is None:
            return None
        rendered[name] = value
    return f"{namespace}{SEPARATOR}{template.format_map(rendered)}"


def is_pattern(key: str) -> bool:
    return key.endswith(WILDCARD)


def family_of(key: str, prefix: str = "") -> str | None:
    """Resource family of a key: the first segment after the tenant namespace."""
    if prefix:
        head = f"{prefix}{SEPARATOR}"
        if not key.startswith(head):
            return None
        key = key[len(head) :]
    parts = key.split(SEPARATOR, 3)
    if len(parts) < 3 or parts[0] != TENANT_SEGMENT:  # noqa: PLR2004
        return None
    return parts[2].rstrip(WILDCARD) or None
