from __future__ import annotations

from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from menuhub.core.database import get_session_factory
from menuhub.core.errors import TenantNotFoundError, error_body
from menuhub.core.request_context import bind_log_context
from menuhub.services.tenant_resolver import (
    TenantResolutionSettings,
    TenantResolver,
    is_tenant_independent_path,
)

def get_tenant_resolver(app) -> TenantResolver:
    resolver = getattr(app.state, "tenant_resolver", None)
    if resolver is None:
        resolver = TenantResolver(TenantResolutionSettings.from_config())
        app.state.tenant_resolver = resolver
    return resolver

class TenantContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        request.state.tenant_context = None

        if is_tenant_independent_path(request.url.path):
            return await call_next(request)

        resolver = get_tenant_resolver(request.app)
        header_value = request.headers.get(resolver.settings.header_name)

        db = get_session_factory(request.app)()
        try:
            try:
                context = resolver.resolve(db, resolver.settings.request_host(request.headers), header_value)
            except TenantNotFoundError as exc:
                return JSONResponse(
                    status_code=exc.status_code,
                    content=error_body(exc.error_code, exc.message, **exc.details()),
                )
        finally:
            db.close()

        request.state.tenant_context = context
        if context is not None:
            bind_log_context(tenant_id=context.tenant_id, subdomain=context.subdomain)

        return await call_next(request)
