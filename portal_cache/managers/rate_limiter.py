"""Rate limiter for the cache administration routes, backed by slowapi."""

from logging import getLogger
from typing import cast

from fastapi import Request
from fastapi.responses import ORJSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.status import HTTP_429_TOO_MANY_REQUESTS

from portal_cache.configs import LimiterConfig, file_logger, settings

logger = file_logger(getLogger(__name__))


def get_identifier(request: Request) -> str:
    """
    Rate-limit bucket of a request.

    Admin calls are counted per tenant and client address, so one tenant's
    operators cannot exhaust another tenant's allowance.
    """
    tenant = request.headers.get(settings.TENANT_HEADER, "").strip() or "global"
    return f"tenant:{tenant}:ip:{get_remote_address(request)}"


limiter = Limiter(**LimiterConfig().model_dump(), key_func=get_identifier)


async def rate_limit_exceeded_handler(
    request: Request,
    exc: Exception,
) -> ORJSONResponse:
    """Answer a rejected request with the limit and the retry delay."""
    http_exc = cast(RateLimitExceeded, exc)
    response = _rate_limit_exceeded_handler(request, http_exc)
    logger.warning(f"Rate limit exceeded for {get_identifier(request)} on {request.url.path}")
    return ORJSONResponse(
        status_code=HTTP_429_TOO_MANY_REQUESTS,
        content={
            "success": False,
            "message": "Rate limit exceeded",
            "error_code": HTTP_429_TOO_MANY_REQUESTS,
            "allowed_requests": http_exc.detail,
            "retry_after": f"{response.headers.get('retry-after', '60')} seconds",
        },
    )
