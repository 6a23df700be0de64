"""Application settings and configuration constants.

This module contains application settings, constants, and configuration
values for the alumni portal cache layer.
"""

from pathlib import Path
from typing import Any

from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = Path(__file__).parent.parent.parent / ".env"

# Response constants
DEFAULT_ERROR_MESSAGE = "An unexpected server error occurred."
CACHE_HIT_HEADER = "X-Cache"


class Settings(BaseSettings):
    """Application settings with validation and default values."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    APP_NAME: str = "Alumni Portal Cache"
    DEBUG: bool = False

    # Environment
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    LOG_TO_FILE: bool = False
    LOG_FILE: str = "logs/portal_cache.log"
    PRODUCTION_FRONTEND_URL: str | None = None
    ENABLE_METRICS: bool = True

    # Redis Configuration (optional)
    REDIS_ENABLED: bool = False
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0
    REDIS_PASSWORD: str | None = None

    # Multi-tenancy
    TENANT_HEADER: str = "X-Tenant-Code"


settings = Settings()


class RedisConfig(BaseSettings):
    """Redis connection pool configuration."""

    model_config = SettingsConfigDict(env_prefix="REDIS_", case_sensitive=False, extra="ignore")

    host: str = settings.REDIS_HOST
    port: int = settings.REDIS_PORT
    db: int = settings.REDIS_DB
    password: str | None = settings.REDIS_PASSWORD
    socket_timeout: float = 5.0
    socket_connect_timeout: float = 5.0
    socket_keepalive: bool = True
    health_check_interval: int = 30
    max_connections: int = 50
    decode_responses: bool = True
    encoding: str = "utf-8"


class CacheConfig(BaseSettings):
    """Cache configuration."""

    model_config = SettingsConfigDict(env_prefix="CACHE_", case_sensitive=False, extra="ignore")

    key_prefix: str = ""  # empty: keys start with the tenant segment
    default_ttl: int = 3600  # 1 hour
    max_ttl: int = 86400  # 24 hours
    operation_timeout: float = 2.0  # seconds, per store call
    pattern_timeout: float = 10.0  # seconds, per SCAN-and-delete pass
    scan_count: int = 500
    delete_batch_size: int = 1000
    success_field: str = "success"
    default_tenant: str = "global"
    compression_enabled: bool = False
    compression_threshold: int = 1024  # bytes
    analytics_enabled: bool = True
    analytics_retention_days: int = 30


class LimiterConfig(BaseSettings):
    """Rate limiter configuration for the cache admin routes."""

    model_config = SettingsConfigDict(env_prefix="LIMITER_", case_sensitive=False, extra="ignore")

    default_limits: list[str] = ["100/minute"]
    headers_enabled: bool = False
    enabled: bool = True


def redis_pool_kwargs(config: RedisConfig | None = None) -> dict[str, Any]:
    """Build ``redis.asyncio.ConnectionPool`` kwargs from a RedisConfig."""
    config = config or RedisConfig()
    kwargs = config.model_dump()
    if not kwargs.get("password"):
        kwargs.pop("password", None)
    return kwargs
