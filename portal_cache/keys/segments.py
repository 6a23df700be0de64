"""
Declarative building blocks for cache key templates.

A key template is a tuple of segments. Each segment renders to one or more
colon-separated key parts from a ``KeyContext``:

>>> from portal_cache.keys import KeyContext, Literal, Param
>>> ctx = KeyContext(tenant_id="T1", path_params={"postId": "42"})
>>> Literal("post").render(ctx) + Param("postId", required=True).render(ctx)
['post', '42']

Values are escaped so user input can never introduce a segment separator or
a glob metacharacter into a key.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any, Protocol

from portal_cache.errors import KeyComputationError
from portal_cache.keys.context import KeyContext, Source
from portal_cache.utils.helpers import utc_date

SEPARATOR = ":"
_ESCAPED = frozenset(":*?[]\\%,")
_TRUTHY = frozenset({"1", "true", "yes", "on"})


def escape_segment(value: str) -> str:
    """Percent-encode separators, glob metacharacters and whitespace."""
    return "".join(
        f"%{ord(char):02X}" if char in _ESCAPED or char.isspace() else char for char in value
    )


def is_empty(value: object) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, list | tuple | set | frozenset):
        return not value
    return False


def format_value(value: object, default: str | None = None) -> str | None:
    """
    Render a raw parameter value as an escaped key part.

    Empty values fall back to ``default``. Booleans render as ``true`` or
    ``false``. Multi-valued parameters are escaped one by one, sorted
    and comma-joined, so their order never changes the key and a comma inside
    one value never reads as two values.
    """
    if is_empty(value):
        return default
    if isinstance(value, bool):
        text = "true" if value else "false"
    elif isinstance(value, list | tuple | set | frozenset):
        items = (escape_segment(str(item).strip()) for item in value if not is_empty(item))
        return ",".join(sorted(items))
    else:
        text = str(value).strip()
    return escape_segment(text)


def flag(when_true: str, when_false: str) -> Callable[[object], str]:
    """Transform a boolean-ish parameter into one of two fixed words."""

    def transform(value: object) -> str:
        if isinstance(value, bool):
            return when_true if value else when_false
        return when_true if str(value).strip().lower() in _TRUTHY else when_false

    return transform


class Segment(Protocol):
    def render(self, ctx: KeyContext) -> list[str]: ...


@dataclass(frozen=True, slots=True)
class Literal:
    """Fixed text, e.g. ``"posts"`` or ``"polls:statistics"``."""

    text: str

    def render(self, ctx: KeyContext) -> list[str]:  # noqa: ARG002
        return self.text.split(SEPARATOR)


@dataclass(frozen=True, slots=True)
class Param:
    """
    One request value, optionally preceded by a ``label`` segment.

    ``transform`` receives the raw value when it is present and must return
    the final text. A ``required`` parameter with no value makes the key
    uncomputable.
    """

    name: str
    default: str | None = None
    label: str | None = None
    source: Source = "any"
    transform: Callable[[Any], str] | None = None
    required: bool = False

    @property
    def is_viewer(self) -> bool:
        return self.source == "viewer"

    def render(self, ctx: KeyContext) -> list[str]:
        raw = ctx.lookup(self.name, self.source)
        if is_empty(raw):
            if self.required:
                mssg = f"Missing required key parameter '{self.name}'"
                raise KeyComputationError(mssg)
            value = self.default
        elif self.transform is not None:
            value = escape_segment(self.transform(raw))
        else:
            value = format_value(raw, self.default)
        if value is None:
            mssg = f"No value or default for key parameter '{self.name}'"
            raise KeyComputationError(mssg)
        return [self.label, value] if self.label else [value]


@dataclass(frozen=True, slots=True)
class Filters:
    """
    Query parameters rendered as ``field:value`` pairs sorted by field name.

    With ``names`` unset every query parameter except ``exclude`` takes part.
    Absent parameters are rendered with ``default`` or left out when it is
    ``None``.
    """

    names: tuple[str, ...] | None = None
    default: str | None = None
    exclude: tuple[str, ...] = ()

    def _fields(self, ctx: KeyContext) -> Iterable[str]:
        names = self.names if self.names is not None else tuple(ctx.query_params)
        return sorted(name for name in set(names) if name not in self.exclude)

    def render(self, ctx: KeyContext) -> list[str]:
        parts: list[str] = []
        for name in self._fields(ctx):
            value = format_value(ctx.lookup(name, "query"), self.default)
            if value is not None:
                parts.extend((escape_segment(name), value))
        return parts


@dataclass(frozen=True, slots=True)
class Today:
    """The current UTC date, so day-bound views roll over at midnight."""

    label: str | None = None

    def render(self, ctx: KeyContext) -> list[str]:  # noqa: ARG002
        return [self.label, utc_date()] if self.label else [utc_date()]


VIEWER = Param("viewer", default="anonymous", label="user", source="viewer")
PAGE = Param("page", default="1", label="page")


def limit(default: int = 10) -> Param:
    return Param("limit", default=str(default), label="limit")
