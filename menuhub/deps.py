from __future__ import annotations

import logging
from typing import Callable, Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from menuhub.core.database import get_db
from menuhub.core.errors import UnauthenticatedError
from menuhub.core.request_context import bind_log_context
from menuhub.models.user import User
from menuhub.services.authorization_service import AuthorizationService, Capability
from menuhub.services.image_storage import ImageUploader, R2ImageUploader
from menuhub.services.principal import Principal, principal_from_user
from menuhub.services.session import SESSION_COOKIE_NAME, decode_session_token, resolve_session_secret

logger = logging.getLogger(__name__)


def _extract_user_id(payload: dict) -> Optional[int]:
    raw = payload.get("user_id")
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str) and raw.strip().isdigit():
        return int(raw.strip())
    return None


def get_current_user_optional(request: Request, db: Session = Depends(get_db)) -> Optional[User]:
    token = request.cookies.get(SESSION_COOKIE_NAME)
    if not token:
        return None

    payload = decode_session_token(token, secret=resolve_session_secret(request.app))
    if payload is None:
        return None

    user_id = _extract_user_id(payload)
    if user_id is None:
        return None

    return db.query(User).filter(User.id == user_id).first()


def get_current_user(user: Optional[User] = Depends(get_current_user_optional)) -> User:
    if user is None:
        raise UnauthenticatedError()
    return user


def get_optional_principal(
    request: Request,
    user: Optional[User] = Depends(get_current_user_optional),
) -> Optional[Principal]:
    if user is None:
        return None
    principal = principal_from_user(user)
    request.state.principal = principal
    bind_log_context(user_id=principal.user_id)
    return principal


def get_current_principal(principal: Optional[Principal] = Depends(get_optional_principal)) -> Principal:
    if principal is None:
        raise UnauthenticatedError()
    return principal


def _path_tenant_id(request: Request) -> Optional[int]:
    raw = request.path_params.get("tenant_id")
    if raw is None:
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


def requires(capability: Capability) -> Callable[..., Principal]:
    """Router-level guard: attach with ``dependencies=[Depends(requires(...))]``."""

    def _guard(request: Request, principal: Principal = Depends(get_current_principal)) -> Principal:
        AuthorizationService.enforce(
            capability,
            request=request,
            principal=principal,
            tenant_id=_path_tenant_id(request),
        )
        return principal

    _guard.__name__ = f"requires_{capability.value}"
    return _guard


def get_image_uploader(request: Request) -> ImageUploader:
    uploader = getattr(request.app.state, "image_uploader", None)
    if uploader is None:
        uploader = R2ImageUploader()
        request.app.state.image_uploader = uploader
    return uploader
