from __future__ import annotations

import enum
import logging

from fastapi import Request

from menuhub.core.errors import ForbiddenError
from menuhub.services.principal import Principal, SuperAdmin, TenantUser

logger = logging.getLogger(__name__)


class Capability(str, enum.Enum):
    SUPER_ADMIN = "super_admin"
    TENANT_MEMBER = "tenant_member"


def is_super_admin(principal: Principal | None) -> bool:
    return isinstance(principal, SuperAdmin)


def is_tenant_member(principal: Principal | None, target_tenant_id: int) -> bool:
    """Exact tenant match; a super-admin is deliberately not a member of any tenant."""
    if not isinstance(principal, TenantUser):
        return False
    return int(principal.tenant_id) == int(target_tenant_id)


class AuthorizationService:
    """Single enforcement point for the capability attached to each router."""

    @staticmethod
    def log_access_denied(
        *,
        reason: str,
        principal: Principal,
        tenant_id: int | None,
        request: Request,
    ) -> None:
        endpoint = f"{request.method} {request.url.path}"
        logger.warning(
            "Access denied (%s): user_id=%s principal=%s user_tenant=%s tenant_id=%s endpoint=%s",
            reason,
            principal.user_id,
            type(principal).__name__,
            getattr(principal, "tenant_id", None),
            tenant_id,
            endpoint,
        )

    @classmethod
    def enforce(
        cls,
        capability: Capability,
        *,
        request: Request,
        principal: Principal,
        tenant_id: int | None = None,
    ) -> None:
        if capability is Capability.SUPER_ADMIN:
            if not is_super_admin(principal):
                cls.log_access_denied(
                    reason="super_admin_required",
                    principal=principal,
                    tenant_id=tenant_id,
                    request=request,
                )
                raise ForbiddenError("Superadmin necessário")
            return

        if capability is Capability.TENANT_MEMBER:
            if tenant_id is None or not is_tenant_member(principal, tenant_id):
                cls.log_access_denied(
                    reason="tenant_mismatch",
                    principal=principal,
                    tenant_id=tenant_id,
                    request=request,
                )
                raise ForbiddenError("Tenant não autorizado")
            return

        raise ValueError(f"Unknown capability: {capability}")
