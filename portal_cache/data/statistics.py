"""Cache statistics tracking."""

from dataclasses import dataclass, field, fields
from threading import Lock

from portal_cache.utils.helpers import today_str

_COUNTERS = (
    "hits",
    "misses",
    "sets",
    "deletes",
    "invalidations",
    "errors",
    "timeouts",
    "total_bytes_written",
    "total_bytes_read",
)


@dataclass
class CacheStatistics:
    """Process-local counters for one CacheService instance."""

    hits: int = 0
    misses: int = 0
    sets: int = 0
    deletes: int = 0
    invalidations: int = 0
    errors: int = 0
    timeouts: int = 0
    total_bytes_written: int = 0
    total_bytes_read: int = 0
    created_at: str = field(default_factory=today_str)
    last_updated_at: str = field(default_factory=today_str)
    _lock: Lock = field(default_factory=Lock, init=False, repr=False)

    def _bump(self, name: str, amount: int = 1) -> None:
        with self._lock:
            setattr(self, name, getattr(self, name) + amount)
            self.last_updated_at = today_str()

    def record_hit(self, bytes_read: int = 0) -> None:
        self._bump("hits")
        if bytes_read:
            self._bump("total_bytes_read", bytes_read)

    def record_miss(self) -> None:
        self._bump("misses")

    def record_set(self, bytes_written: int = 0) -> None:
        self._bump("sets")
        if bytes_written:
            self._bump("total_bytes_written", bytes_written)

    def record_delete(self, count: int = 1) -> None:
        self._bump("deletes", count)

    def record_invalidation(self) -> None:
        self._bump("invalidations")

    def record_error(self) -> None:
        self._bump("errors")

    def record_timeout(self) -> None:
        """Timeouts count as errors too."""
        self._bump("timeouts")
        self._bump("errors")

    @property
    def total_requests(self) -> int:
        return self.hits + self.misses

    @property
    def hit_rate(self) -> float:
        """Hit rate as a percentage (0-100)."""
        total = self.total_requests
        return (self.hits / total * 100) if total > 0 else 0.0

    def reset(self) -> None:
        with self._lock:
            for name in _COUNTERS:
                setattr(self, name, 0)
            self.created_at = today_str()
            self.last_updated_at = self.created_at

    def to_dict(self) -> dict[str, int | str]:
        with self._lock:
            data: dict[str, int | str] = {
                f.name: getattr(self, f.name) for f in fields(self) if not f.name.startswith("_")
            }
        data["hit_rate"] = f"{self.hit_rate:.2f}%"
        data["total_requests"] = self.total_requests
        return data
