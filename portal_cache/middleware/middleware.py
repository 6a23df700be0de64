# portal_cache/middleware/middleware.py
"""
Middleware components for the alumni portal cache application.

This module contains middleware for security headers, request logging and
CORS handling, and the lifespan event handler that connects the cache
service on startup and drains it on shutdown.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from logging import basicConfig, getLogger
from time import perf_counter
from uuid import uuid4

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from pythonjsonlogger.json import JsonFormatter
from rich.logging import RichHandler
from rich.traceback import install
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from portal_cache.configs import CACHE_HIT_HEADER, file_logger, settings
from portal_cache.managers import CacheAnalytics, CacheService
from portal_cache.utils.helpers import host

# --- Logging Configuration ---
basicConfig(
    level=settings.LOG_LEVEL,
    format="%(message)s",
    datefmt="%X",
    handlers=[RichHandler(rich_tracebacks=True)],
)
logger = getLogger("rich")
file_logger(logger)
for handler in logger.handlers:
    handler.setFormatter(JsonFormatter())

install()

REQUEST_ID_HEADER = "X-Request-ID"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Connect the cache service on startup and release it on shutdown."""
    logger.info(f"Starting {app.title} (tenant header: {settings.TENANT_HEADER})")

    # A service installed before startup (tests, embedding apps) is reused.
    cache_service: CacheService = getattr(app.state, "cache_service", None) or CacheService()
    try:
        await cache_service.initialize()
    except Exception:
        logger.exception("Cache service failed to start")
        raise
    app.state.cache_service = cache_service
    app.state.cache_analytics = CacheAnalytics(cache_service)
    logger.info(f"Cache backend: {cache_service.backend}")
    if settings.ENABLE_METRICS:
        logger.info("Metrics exposed on /metrics")

    yield

    logger.info(f"Shutting down {app.title}, {cache_service.pending} cache writes pending")
    try:
        await cache_service.shutdown()
    except Exception:
        logger.exception("Error while stopping the cache service")


def configure_cors(app: FastAPI) -> None:
    """Configure CORS middleware for the application."""
    allowed_origins: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    if frontend_url := settings.PRODUCTION_FRONTEND_URL:
        allowed_origins.append(frontend_url)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=[CACHE_HIT_HEADER, REQUEST_ID_HEADER],
    )


class LoggingMiddleware(BaseHTTPMiddleware):
    """Log each request with its tenant and the cache outcome of the response."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid4().hex
        route = f"{request.method} {request.url.path}"
        started = perf_counter()

        response = await call_next(request)

        tenant = getattr(request.state, "tenant_id", None) or "-"
        cache = response.headers.get(CACHE_HIT_HEADER, "-")
        logger.info(
            f"[{request_id}] {route} -> {response.status_code} "
            f"tenant={tenant} ip={host(request)} cache={cache} "
            f"in {perf_counter() - started:.3f}s",
        )
        if cache != "-" and (key := getattr(request.state, "cache_key", None)):
            logger.debug(f"[{request_id}] cache key {key}")

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """
        Add security headers, and keep tenant data out of shared caches.

        Responses differ per tenant, so intermediaries must key them by the
        tenant header. Cache administration responses are never stored.
        """
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        if CACHE_HIT_HEADER in response.headers:
            response.headers.append("Vary", settings.TENANT_HEADER)
        if request.url.path.startswith("/cache"):
            response.headers["Cache-Control"] = "no-store"
        return response
