from __future__ import annotations

import logging
import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from menuhub.core.request_context import bind_log_context, clear_log_context

logger = logging.getLogger(__name__)


class ObservabilityMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        bind_log_context(request_id=request_id)

        status_code = 500
        response = None
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            context = getattr(request.state, "tenant_context", None)
            principal = getattr(request.state, "principal", None)
            logger.info(
                "request completed",
                extra={
                    "tenant_id": str(context.tenant_id) if context is not None else None,
                    "user_id": str(principal.user_id) if principal is not None else None,
                    "endpoint": request.url.path,
                    "method": request.method,
                    "status_code": status_code,
                    "duration_ms": round((time.perf_counter() - start) * 1000, 2),
                },
            )
            if response is not None:
                response.headers["X-Request-ID"] = request_id
            clear_log_context()
