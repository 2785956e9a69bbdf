from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from menuhub.core.database import get_db
from menuhub.core.errors import ResourceNotFoundError
from menuhub.deps import requires
from menuhub.schemas.tenant import TenantRead, TenantSettingsUpdate
from menuhub.services.authorization_service import Capability
from menuhub.services.tenant_directory import TenantDirectory

router = APIRouter(
    prefix="/api/tenants/{tenant_id}/settings",
    tags=["tenant-settings"],
    dependencies=[Depends(requires(Capability.TENANT_MEMBER))],
)


@router.get("", response_model=TenantRead)
def get_settings(tenant_id: int, db: Session = Depends(get_db)):
    tenant = TenantDirectory(db).find_by_id(tenant_id)
    if tenant is None:
        raise ResourceNotFoundError("Tenant não encontrado")
    return tenant


@router.patch("", response_model=TenantRead)
def update_settings(tenant_id: int, payload: TenantSettingsUpdate, db: Session = Depends(get_db)):
    # Substitui a configuração inteira; campos omitidos voltam ao padrão.
    return TenantDirectory(db).update_config(tenant_id, payload.config)
