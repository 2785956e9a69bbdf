from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from menuhub.core.database import get_db
from menuhub.core.errors import ConflictError, ResourceNotFoundError
from menuhub.deps import requires
from menuhub.models.user import User
from menuhub.schemas.tenant import TenantCreate, TenantRead
from menuhub.schemas.user import TenantUserCreate, UserRead
from menuhub.services.authorization_service import Capability
from menuhub.services.passwords import hash_password
from menuhub.services.tenant_directory import TenantDirectory

router = APIRouter(
    prefix="/api/tenants",
    tags=["tenants"],
    dependencies=[Depends(requires(Capability.SUPER_ADMIN))],
)
logger = logging.getLogger(__name__)


@router.post("", response_model=TenantRead, status_code=status.HTTP_201_CREATED)
def create_tenant(payload: TenantCreate, db: Session = Depends(get_db)):
    return TenantDirectory(db).create(
        name=payload.name,
        subdomain=payload.subdomain,
        active=payload.active,
        config=payload.config,
    )


@router.get("", response_model=list[TenantRead])
def list_tenants(db: Session = Depends(get_db)):
    return TenantDirectory(db).list_all()


@router.post("/{tenant_id}/users", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def create_tenant_user(tenant_id: int, payload: TenantUserCreate, db: Session = Depends(get_db)):
    if TenantDirectory(db).find_by_id(tenant_id) is None:
        raise ResourceNotFoundError("Tenant não encontrado")

    username = payload.username.strip()
    if db.query(User).filter(User.username == username).first() is not None:
        raise ConflictError("Usuário já existe")

    user = User(
        username=username,
        password_hash=hash_password(payload.password),
        is_super_admin=False,
        tenant_id=tenant_id,
        role=payload.role.strip(),
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError("Usuário já existe") from exc
    db.refresh(user)

    logger.info("Tenant user created id=%s tenant_id=%s role=%s", user.id, tenant_id, user.role)
    return user
