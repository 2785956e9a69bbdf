"""Domain errors and their translation into HTTP responses.

Services raise the exceptions below; the handlers registered by
``register_exception_handlers`` turn them into JSON bodies shaped as
``{"error": <code>, "message": <text>, ...details}``.
"""

from __future__ import annotations

import logging
import traceback
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

logger = logging.getLogger(__name__)


class MenuError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = "internal_error"
    default_message = "Erro interno"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def details(self) -> dict[str, Any]:
        return {}


class UnauthenticatedError(MenuError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error_code = "unauthenticated"
    default_message = "Não autenticado"


class ForbiddenError(MenuError):
    status_code = status.HTTP_403_FORBIDDEN
    error_code = "forbidden"
    default_message = "Acesso negado"


class ResourceNotFoundError(MenuError):
    status_code = status.HTTP_404_NOT_FOUND
    error_code = "not_found"
    default_message = "Recurso não encontrado"


class TenantNotFoundError(MenuError):
    status_code = status.HTTP_404_NOT_FOUND
    error_code = "tenant_not_found"
    default_message = "Tenant not found"

    def __init__(self, subdomain: str, hostname: str | None = None) -> None:
        super().__init__(f"Nenhum comércio encontrado para o subdomínio: {subdomain}")
        self.subdomain = subdomain
        self.hostname = hostname

    def details(self) -> dict[str, Any]:
        return {"subdomain": self.subdomain, "hostname": self.hostname}


class ValidationFailedError(MenuError):
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "validation_failed"
    default_message = "Dados inválidos"

    def __init__(self, message: str | None = None, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field

    def details(self) -> dict[str, Any]:
        if self.field is None:
            return {"fields": []}
        return {"fields": [{"field": self.field, "message": self.message}]}


class ConflictError(MenuError):
    status_code = status.HTTP_409_CONFLICT
    error_code = "conflict"
    default_message = "Registro já existe"


class UpstreamError(MenuError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = "upstream_failure"
    default_message = "Falha no serviço externo"


def error_body(code: str, message: str, **details: Any) -> dict[str, Any]:
    return {"error": code, "message": message, **details}


def _validation_fields(exc: RequestValidationError) -> list[dict[str, str]]:
    fields = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        fields.append({"field": ".".join(location), "message": str(error.get("msg", ""))})
    return fields


def register_exception_handlers(app: FastAPI, *, expose_internals: bool = False) -> None:
    """Attach the domain error translation to ``app``.

    ``expose_internals`` adds exception type and traceback to 500 bodies; it is
    only enabled outside production.
    """

    async def _menu_error(request: Request, exc: MenuError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc.error_code, exc.message, **exc.details()),
        )

    async def _request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_body("validation_failed", "Dados inválidos", fields=_validation_fields(exc)),
        )

    async def _integrity(request: Request, exc: IntegrityError) -> JSONResponse:
        logger.warning("Integrity violation on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=ConflictError.status_code,
            content=error_body(ConflictError.error_code, ConflictError.default_message),
        )

    async def _unhandled(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        details: dict[str, Any] = {}
        if expose_internals:
            details["type"] = type(exc).__name__
            details["trace"] = traceback.format_exception(type(exc), exc, exc.__traceback__)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body("internal_error", "Erro interno", **details),
        )

    app.add_exception_handler(MenuError, _menu_error)
    app.add_exception_handler(RequestValidationError, _request_validation)
    app.add_exception_handler(IntegrityError, _integrity)
    app.add_exception_handler(Exception, _unhandled)
