from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from menuhub.models.user import User


@dataclass(frozen=True)
class SuperAdmin:
    user_id: int
    username: str


@dataclass(frozen=True)
class TenantUser:
    user_id: int
    username: str
    tenant_id: int


@dataclass(frozen=True)
class UnassignedUser:
    """Authenticated account not yet bound to any tenant."""

    user_id: int
    username: str


Principal = Union[SuperAdmin, TenantUser, UnassignedUser]


def principal_from_user(user: User) -> Principal:
    # is_super_admin prevalece: um superadmin nunca vira membro de tenant,
    # mesmo que a linha tenha tenant_id preenchido.
    if user.is_super_admin:
        return SuperAdmin(user_id=user.id, username=user.username)
    if user.tenant_id is not None:
        return TenantUser(user_id=user.id, username=user.username, tenant_id=int(user.tenant_id))
    return UnassignedUser(user_id=user.id, username=user.username)
