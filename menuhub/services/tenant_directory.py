from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from menuhub.core.errors import ConflictError, ResourceNotFoundError
from menuhub.models.tenant import Tenant
from menuhub.schemas.tenant import TenantConfig
from menuhub.utils.subdomain import normalize_subdomain

logger = logging.getLogger(__name__)


def _config_to_storage(config: TenantConfig | None) -> dict:
    # Sempre completo: campos omitidos recebem o valor padrão.
    return (config or TenantConfig()).model_dump(by_alias=True)


class TenantDirectory:
    """Authoritative subdomain -> tenant mapping backed by the tenants table."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def find_by_subdomain(self, subdomain: str) -> Optional[Tenant]:
        normalized = normalize_subdomain(subdomain)
        if not normalized:
            return None
        return self.db.query(Tenant).filter(Tenant.subdomain == normalized).first()

    def find_by_id(self, tenant_id: int) -> Optional[Tenant]:
        return self.db.query(Tenant).filter(Tenant.id == tenant_id).first()

    def list_all(self) -> list[Tenant]:
        return self.db.query(Tenant).order_by(Tenant.id.asc()).all()

    def create(
        self,
        *,
        name: str,
        subdomain: str,
        active: bool = True,
        config: TenantConfig | None = None,
    ) -> Tenant:
        normalized = normalize_subdomain(subdomain)
        if self.find_by_subdomain(normalized) is not None:
            raise ConflictError(f"Subdomínio já em uso: {normalized}")

        tenant = Tenant(
            name=name.strip(),
            subdomain=normalized,
            active=active,
            config=_config_to_storage(config),
        )
        self.db.add(tenant)
        try:
            self.db.commit()
        except IntegrityError as exc:
            # Corrida entre dois cadastros simultâneos do mesmo subdomínio.
            self.db.rollback()
            raise ConflictError(f"Subdomínio já em uso: {normalized}") from exc
        self.db.refresh(tenant)
        logger.info("Tenant created id=%s subdomain=%s", tenant.id, tenant.subdomain)
        return tenant

    def update_config(self, tenant_id: int, new_config: TenantConfig) -> Tenant:
        """Replace the whole config; fields absent from ``new_config`` fall back to defaults."""
        tenant = self.find_by_id(tenant_id)
        if tenant is None:
            raise ResourceNotFoundError("Tenant não encontrado")

        tenant.config = _config_to_storage(new_config)
        self.db.commit()
        self.db.refresh(tenant)
        return tenant
