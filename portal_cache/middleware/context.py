# portal_cache/middleware/context.py
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from portal_cache.configs import settings


class TenantContextMiddleware(BaseHTTPMiddleware):
    """
    Store the tenant code from a request header on ``request.state.tenant_id``.

    Covers deployments where the tenant is only known from a header. A tenant
    already resolved by an upstream middleware is left untouched.

    Examples
    --------
    >>> app.add_middleware(TenantContextMiddleware, header="X-Tenant-Code")
    """

    def __init__(self, app: ASGIApp, header: str | None = None) -> None:
        super().__init__(app)
        self.header = header or settings.TENANT_HEADER

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        state = request.state
        if getattr(state, "tenant", None) is None and getattr(state, "tenant_id", None) is None:
            if tenant := request.headers.get(self.header, "").strip():
                state.tenant_id = tenant
        return await call_next(request)
