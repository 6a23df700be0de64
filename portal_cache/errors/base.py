from collections.abc import Awaitable, Callable
from logging import Logger
from typing import Any

from fastapi import Request
from fastapi.responses import ORJSONResponse
from redis.exceptions import RedisError
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR

from portal_cache.configs.settings import DEFAULT_ERROR_MESSAGE
from portal_cache.utils.helpers import host

# Everything a store round-trip may raise.
STORE_EXCEPTIONS = (
    RedisError,
    OSError,
    MemoryError,
    RuntimeError,
    ConnectionError,
    TimeoutError,
)


class BaseAppError(Exception):
    """Error rendered as a portal failure envelope."""

    def __init__(
        self,
        detail: str = DEFAULT_ERROR_MESSAGE,
        status_code: int = HTTP_500_INTERNAL_SERVER_ERROR,
        **context: Any,  # noqa: ANN401
    ) -> None:
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code
        self.context = context

    def __str__(self) -> str:
        return self.detail

    def envelope(self) -> dict[str, Any]:
        """Body in the ``{success, message, error_code}`` shape the portal clients read."""
        return {
            "success": False,
            "message": self.detail,
            "error_code": self.status_code,
            **self.context,
        }


def create_exception_handler(
    logger: Logger,
) -> Callable[[Request, Exception], Awaitable[ORJSONResponse]]:
    """
    Build an exception handler that answers with the failure envelope.

    Exceptions that are not ``BaseAppError`` are reported as a generic
    server error without leaking their message.
    """

    async def handler(request: Request, exc: Exception) -> ORJSONResponse:
        error = exc if isinstance(exc, BaseAppError) else BaseAppError()
        tenant = getattr(request.state, "tenant_id", None) or "-"
        logger.warning(
            f"{error.detail} for ip: {host(request)} tenant: {tenant} "
            f"endpoint: {request.method} {request.url.path}",
        )
        return ORJSONResponse(content=error.envelope(), status_code=error.status_code)

    return handler
