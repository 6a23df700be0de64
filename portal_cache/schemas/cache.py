from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CacheStatistics(BaseModel):
    """Cache statistics model."""

    model_config = ConfigDict(ser_json_timedelta="iso8601", ser_json_bytes="utf8")

    hits: int
    misses: int
    sets: int
    deletes: int
    invalidations: int
    errors: int
    timeouts: int
    total_bytes_written: int
    total_bytes_read: int
    hit_rate: str
    total_requests: int
    created_at: str
    last_updated_at: str


class CacheHealthResponse(BaseModel):
    """Cache health response model (nested in HealthCheckResponse)."""

    model_config = ConfigDict(ser_json_timedelta="iso8601", ser_json_bytes="utf8")

    backend: str
    statistics: CacheStatistics
    status: str
    latency_ms: float | None = None
    info: dict[str, Any] | None = None


class HealthCheckResponse(BaseModel):
    """Health check response model."""

    model_config = ConfigDict(ser_json_timedelta="iso8601", ser_json_bytes="utf8")

    version: str = Field(description="API version")
    status: str = Field(description="Overall health status")
    timestamp: str = Field(description="Current timestamp")
    cache: CacheHealthResponse | None = Field(
        default=None,
        description="Cache health information",
    )


class CacheStatsResponse(BaseModel):
    """Cache statistics response model."""

    model_config = ConfigDict(ser_json_timedelta="iso8601", ser_json_bytes="utf8")

    success: bool
    data: CacheStatistics


class CacheAnalyticsResponse(BaseModel):
    """Per-tenant daily hit and miss counters."""

    model_config = ConfigDict(ser_json_timedelta="iso8601", ser_json_bytes="utf8")

    success: bool
    tenant: str
    days: int
    data: dict[str, Any]


class CacheMessageResponse(BaseModel):
    """Outcome of an administrative cache operation."""

    model_config = ConfigDict(ser_json_timedelta="iso8601", ser_json_bytes="utf8")

    success: bool
    message: str
    error_code: int | None = None


class CacheClearResponse(CacheMessageResponse):
    """Cache clear response model."""

    tenant: str
    deleted: int = 0


class CacheInvalidateResponse(CacheMessageResponse):
    """Manual invalidation response model."""

    tenant: str
    resource: str
    mutation: str
    patterns: list[str] = Field(default_factory=list)
    invalidated: int = 0
