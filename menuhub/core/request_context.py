from __future__ import annotations

from contextvars import ContextVar
from dataclasses import dataclass, replace


@dataclass(frozen=True)
class LogContext:
    request_id: str | None = None
    tenant_id: str | None = None
    user_id: str | None = None
    subdomain: str | None = None


_EMPTY = LogContext()
_LOG_CTX: ContextVar[LogContext] = ContextVar("menuhub_log_context", default=_EMPTY)


def bind_log_context(**fields: str | None) -> LogContext:
    """Merge non-null fields into the current request's log context."""
    updates = {key: str(value) for key, value in fields.items() if value is not None}
    context = replace(_LOG_CTX.get(), **updates)
    _LOG_CTX.set(context)
    return context


def current_log_context() -> LogContext:
    return _LOG_CTX.get()


def clear_log_context() -> None:
    _LOG_CTX.set(_EMPTY)
