"""
Prometheus metrics for the response cache.

Labels are restricted to bounded values: the resource family (first key
segment after the tenant namespace), the store operation and its outcome.
Tenant ids, viewer ids and raw keys are never used as labels.

Examples
--------
>>> from portal_cache.monitoring import metrics
>>> metrics.record_cache_hit("posts")
>>> metrics.record_store_error("get")
"""

from re import compile as re_compile

from fastapi import FastAPI
from prometheus_client import Counter, Histogram
from prometheus_fastapi_instrumentator import Instrumentator

MAX_LABEL_VALUE_LENGTH: int = 64
UNKNOWN_FAMILY: str = "unknown"

STORE_LATENCY_BUCKETS: tuple[float, ...] = (
    0.001,
    0.0025,
    0.005,
    0.01,
    0.025,
    0.05,
    0.1,
    0.25,
    0.5,
    1.0,
    2.5,
)

_FAMILY = re_compile(r"^[A-Za-z][A-Za-z0-9_-]*$")


class MetricsCollector:
    """
    Cache metrics collector.

    Attributes
    ----------
    cache_hits_total : Counter
        Cache hits by resource family.
    cache_misses_total : Counter
        Cache misses by resource family.
    cache_writes_total : Counter
        Write-through attempts by resource family and outcome.
    cache_invalidations_total : Counter
        Invalidated patterns by resource family and outcome.
    store_errors_total : Counter
        Failed store operations by operation.
    store_timeouts_total : Counter
        Store operations that exceeded the operation timeout.
    store_latency_seconds : Histogram
        Store round-trip latency by operation.
    """

    def __init__(self, namespace: str = "portal_cache") -> None:
        self.cache_hits_total = Counter(
            f"{namespace}_hits_total",
            "Total number of cache hits",
            ["family"],
        )
        self.cache_misses_total = Counter(
            f"{namespace}_misses_total",
            "Total number of cache misses",
            ["family"],
        )
        self.cache_writes_total = Counter(
            f"{namespace}_writes_total",
            "Total number of cache write-through attempts",
            ["family", "outcome"],
        )
        self.cache_invalidations_total = Counter(
            f"{namespace}_invalidations_total",
            "Total number of invalidated key patterns",
            ["family", "outcome"],
        )
        self.store_errors_total = Counter(
            f"{namespace}_store_errors_total",
            "Total number of failed store operations",
            ["operation"],
        )
        self.store_timeouts_total = Counter(
            f"{namespace}_store_timeouts_total",
            "Total number of store operations that timed out",
            ["operation"],
        )
        self.store_latency_seconds = Histogram(
            f"{namespace}_store_latency_seconds",
            "Store round-trip latency in seconds",
            ["operation"],
            buckets=STORE_LATENCY_BUCKETS,
        )

    @staticmethod
    def family_label(family: str | None) -> str:
        """
        Reduce a family name to a bounded label value.

        Examples
        --------
        >>> MetricsCollector.family_label("posts")
        'posts'
        >>> MetricsCollector.family_label("42")
        'unknown'
        """
        if not family or not _FAMILY.match(family):
            return UNKNOWN_FAMILY
        return family[:MAX_LABEL_VALUE_LENGTH]

    def record_cache_hit(self, family: str | None) -> None:
        self.cache_hits_total.labels(family=self.family_label(family)).inc()

    def record_cache_miss(self, family: str | None) -> None:
        self.cache_misses_total.labels(family=self.family_label(family)).inc()

    def record_cache_write(self, family: str | None, *, ok: bool) -> None:
        outcome = "ok" if ok else "failed"
        self.cache_writes_total.labels(family=self.family_label(family), outcome=outcome).inc()

    def record_invalidation(self, family: str | None, *, ok: bool) -> None:
        outcome = "ok" if ok else "failed"
        self.cache_invalidations_total.labels(
            family=self.family_label(family),
            outcome=outcome,
        ).inc()

    def record_store_error(self, operation: str) -> None:
        self.store_errors_total.labels(operation=operation).inc()

    def record_store_timeout(self, operation: str) -> None:
        self.store_timeouts_total.labels(operation=operation).inc()

    def observe_store_latency(self, operation: str, seconds: float) -> None:
        self.store_latency_seconds.labels(operation=operation).observe(seconds)


# Global metrics collector instance
metrics = MetricsCollector()


def setup_prometheus(app: FastAPI) -> Instrumentator:
    """
    Instrument HTTP handlers and expose ``/metrics``.

    Args:
        app: The FastAPI application instance.

    Returns:
        Configured Instrumentator instance.
    """
    instrumentator = Instrumentator(
        should_group_status_codes=True,
        should_ignore_untemplated=True,
        should_respect_env_var=False,
        should_instrument_requests_inprogress=True,
        excluded_handlers=["/metrics", "/health.*"],
        inprogress_name="portal_cache_http_requests_inprogress",
        inprogress_labels=True,
    )
    instrumentator.instrument(app)
    instrumentator.expose(app, endpoint="/metrics", include_in_schema=False)
    return instrumentator
