from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from menuhub.core.database import get_db
from menuhub.core.errors import ConflictError, UnauthenticatedError
from menuhub.deps import get_current_user
from menuhub.models.user import User
from menuhub.schemas.user import UserCredentials, UserRead
from menuhub.services.passwords import hash_password, verify_password
from menuhub.services.session import (
    clear_session_cookie,
    create_session_token,
    resolve_session_secret,
    set_session_cookie,
)

router = APIRouter(prefix="/api", tags=["auth"])
logger = logging.getLogger(__name__)


def _start_session(request: Request, response: Response, user: User) -> None:
    token = create_session_token(user.id, secret=resolve_session_secret(request.app))
    set_session_cookie(response, token, request)


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def register(
    payload: UserCredentials,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
):
    username = payload.username.strip()
    if db.query(User).filter(User.username == username).first() is not None:
        raise ConflictError("Usuário já existe")

    user = User(
        username=username,
        password_hash=hash_password(payload.password),
        is_super_admin=False,
        tenant_id=None,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError("Usuário já existe") from exc
    db.refresh(user)

    _start_session(request, response, user)
    logger.info("User registered id=%s", user.id)
    return user


@router.post("/login", response_model=UserRead)
def login(
    payload: UserCredentials,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
):
    user = db.query(User).filter(User.username == payload.username.strip()).first()
    if user is None or not verify_password(payload.password, user.password_hash):
        logger.info("Login failed username=%s", payload.username.strip())
        raise UnauthenticatedError("Usuário ou senha inválidos")

    _start_session(request, response, user)
    return user


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(request: Request):
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    clear_session_cookie(response, request)
    return response


@router.get("/user", response_model=UserRead)
def current_user(user: User = Depends(get_current_user)):
    return user
