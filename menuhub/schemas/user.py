from typing import Annotated, Optional

from pydantic import Field, StringConstraints

from menuhub.schemas.base import CamelModel


class UserCredentials(CamelModel):
    username: Annotated[str, StringConstraints(strip_whitespace=True, min_length=3, max_length=80)]
    password: str = Field(..., min_length=6, max_length=200)


class UserRead(CamelModel):
    id: int
    username: str
    is_super_admin: bool
    tenant_id: Optional[int] = None
    role: str


class TenantUserCreate(UserCredentials):
    role: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=40)] = "user"
