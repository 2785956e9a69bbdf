from typing import Optional

from menuhub.schemas.base import CamelModel
from menuhub.schemas.tenant import TenantConfig


class PublicTenant(CamelModel):
    id: int
    name: str
    subdomain: str
    config: TenantConfig


class MenuVariant(CamelModel):
    id: int
    name: str
    price_modifier: str
    final_price: str


class MenuProduct(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    image: Optional[str] = None
    base_price: str
    variants: list[MenuVariant]


class MenuSection(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    image: Optional[str] = None
    products: list[MenuProduct]


class PublicMenu(CamelModel):
    tenant: PublicTenant
    sections: list[MenuSection]
