from __future__ import annotations

import time
from typing import Any, Dict, Optional

from fastapi import Request, Response
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from menuhub.core.config import (
    SESSION_COOKIE_DOMAIN,
    SESSION_COOKIE_SAMESITE,
    SESSION_COOKIE_SECURE,
    SESSION_MAX_AGE_SECONDS,
    SESSION_SECRET,
)

SESSION_COOKIE_NAME = "menuhub_session"
SESSION_SALT = "menuhub-session"


def resolve_session_secret(app) -> str:
    secret = getattr(app.state, "session_secret", "") or SESSION_SECRET
    if not secret:
        raise RuntimeError("SESSION_SECRET não configurado.")
    return secret


def _serializer(secret: str) -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(secret, salt=SESSION_SALT)


def create_session_token(user_id: int, *, secret: str) -> str:
    payload = {
        "user_id": int(user_id),
        "exp": int(time.time()) + SESSION_MAX_AGE_SECONDS,
    }
    return _serializer(secret).dumps(payload)


def decode_session_token(token: str, *, secret: str) -> Optional[Dict[str, Any]]:
    try:
        payload = _serializer(secret).loads(token, max_age=SESSION_MAX_AGE_SECONDS)
    except (BadSignature, SignatureExpired, ValueError):
        return None
    if not isinstance(payload, dict):
        return None
    exp = payload.get("exp")
    if exp is not None:
        try:
            if int(exp) < int(time.time()):
                return None
        except (TypeError, ValueError):
            return None
    return payload


def _cookie_options(request: Request | None) -> dict[str, Any]:
    secure = SESSION_COOKIE_SECURE
    samesite = SESSION_COOKIE_SAMESITE

    host = ""
    if request is not None:
        host = (request.headers.get("x-forwarded-host") or request.headers.get("host") or "").lower()
        host = host.split(",")[0].strip().split(":")[0]

    # Em hosts públicos, nunca emitir cookie inseguro.
    if host not in {"", "localhost", "127.0.0.1"}:
        secure = True

    # Browsers rejeitam SameSite=None sem Secure.
    if samesite == "none" and not secure:
        samesite = "lax"

    return {
        "domain": SESSION_COOKIE_DOMAIN,
        "httponly": True,
        "samesite": samesite,
        "path": "/",
        "secure": secure,
    }


def set_session_cookie(response: Response, token: str, request: Request | None = None) -> None:
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=token,
        max_age=SESSION_MAX_AGE_SECONDS,
        **_cookie_options(request),
    )


def clear_session_cookie(response: Response, request: Request | None = None) -> None:
    response.delete_cookie(
        key=SESSION_COOKIE_NAME,
        **_cookie_options(request),
    )
