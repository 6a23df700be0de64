from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Literal

Source = Literal["path", "query", "viewer", "any"]


@dataclass(frozen=True, slots=True)
class KeyContext:
    """Request inputs a cache key may depend on."""

    tenant_id: str
    viewer_id: str | None = None
    path_params: Mapping[str, Any] = field(default_factory=dict)
    query_params: Mapping[str, Any] = field(default_factory=dict)

    def lookup(self, name: str, source: Source = "any") -> Any:  # noqa: ANN401
        """Return the raw value of ``name``; path params win over query params."""
        if source == "viewer":
            return self.viewer_id
        if source in ("path", "any") and name in self.path_params:
            return self.path_params[name]
        if source in ("query", "any"):
            return self.query_params.get(name)
        return None

    def values(self, **related: Any) -> dict[str, Any]:  # noqa: ANN401
        """Placeholder values for invalidation templates."""
        merged: dict[str, Any] = {"tenantId": self.tenant_id, "viewerId": self.viewer_id}
        merged.update(self.query_params)
        merged.update(self.path_params)
        merged.update({k: v for k, v in related.items() if v is not None})
        return merged
