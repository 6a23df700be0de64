from portal_cache.keys.builder import (
    family_of,
    is_pattern,
    render_key,
    render_pattern,
    tenant_namespace,
)
from portal_cache.keys.context import KeyContext
from portal_cache.keys.segments import (
    PAGE,
    VIEWER,
    Filters,
    Literal,
    Param,
    Today,
    escape_segment,
    flag,
    format_value,
    limit,
)

__all__ = [
    "PAGE",
    "VIEWER",
    "Filters",
    "KeyContext",
    "Literal",
    "Param",
    "Today",
    "escape_segment",
    "family_of",
    "flag",
    "format_value",
    "is_pattern",
    "limit",
    "render_key",
    "render_pattern",
    "tenant_namespace",
]
