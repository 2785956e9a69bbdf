from datetime import datetime
from typing import Optional

from pydantic import ConfigDict, EmailStr, Field, field_validator

from menuhub.schemas.base import CamelModel, Name
from menuhub.utils.subdomain import is_valid_subdomain, normalize_subdomain


class TenantConfig(CamelModel):
    model_config = ConfigDict(frozen=True)

    theme: str = "light"
    logo: Optional[str] = None
    contact_email: Optional[EmailStr] = None
    address: Optional[str] = None
    phone: Optional[str] = None


class TenantCreate(CamelModel):
    name: Name
    subdomain: str = Field(..., min_length=1, max_length=63)
    active: bool = True
    config: Optional[TenantConfig] = None

    @field_validator("subdomain")
    @classmethod
    def _normalize_subdomain(cls, value: str) -> str:
        normalized = normalize_subdomain(value)
        if not is_valid_subdomain(normalized):
            raise ValueError("Subdomínio inválido. Use letras minúsculas, números e hífen.")
        return normalized


class TenantRead(CamelModel):
    id: int
    name: str
    subdomain: str
    active: bool
    config: TenantConfig
    created_at: Optional[datetime] = None


class TenantSettingsUpdate(CamelModel):
    config: TenantConfig
