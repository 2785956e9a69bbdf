from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fastapi import Request

from menuhub.core.errors import ResourceNotFoundError
from menuhub.models.tenant import Tenant
from menuhub.schemas.tenant import TenantConfig


@dataclass(frozen=True)
class TenantContext:
    """Tenant identity resolved once per request by the tenant middleware."""

    tenant_id: int
    subdomain: str
    name: str
    config: TenantConfig

    @classmethod
    def from_tenant(cls, tenant: Tenant) -> "TenantContext":
        return cls(
            tenant_id=int(tenant.id),
            subdomain=tenant.subdomain,
            name=tenant.name,
            config=TenantConfig.model_validate(tenant.config or {}),
        )


def get_tenant_context(request: Request) -> Optional[TenantContext]:
    return getattr(request.state, "tenant_context", None)


def require_tenant_context(request: Request) -> TenantContext:
    context = get_tenant_context(request)
    if context is None:
        raise ResourceNotFoundError("Nenhum comércio associado a este endereço")
    return context
