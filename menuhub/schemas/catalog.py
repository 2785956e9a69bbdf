from typing import Annotated, Literal, Optional, Union

from pydantic import Field, field_validator

from menuhub.core.money import normalize_money
from menuhub.schemas.base import CamelModel, Name


def _validate_url(value: str) -> str:
    value = value.strip()
    if not value.startswith(("http://", "https://")):
        raise ValueError("URL de imagem deve começar com http:// ou https://")
    return value


class InlineImage(CamelModel):
    """Fresh image sent as base64 (a ``data:image/...;base64,`` prefix is accepted)."""

    kind: Literal["inline"]
    data: str = Field(..., min_length=1)


class HostedImage(CamelModel):
    """Image already hosted; stored as-is, never re-uploaded."""

    kind: Literal["hosted"]
    url: str = Field(..., min_length=1)

    @field_validator("url")
    @classmethod
    def _check_url(cls, value: str) -> str:
        return _validate_url(value)


ImagePayload = Annotated[Union[InlineImage, HostedImage], Field(discriminator="kind")]


class CategoryCreate(CamelModel):
    name: Name
    description: Optional[str] = None
    image: Optional[str] = None
    order: int = 0
    active: bool = True

    @field_validator("image")
    @classmethod
    def _check_image(cls, value: Optional[str]) -> Optional[str]:
        return _validate_url(value) if value else None


class CategoryUpdate(CamelModel):
    name: Optional[Name] = None
    description: Optional[str] = None
    image: Optional[str] = None
    order: Optional[int] = None
    active: Optional[bool] = None

    @field_validator("image")
    @classmethod
    def _check_image(cls, value: Optional[str]) -> Optional[str]:
        return _validate_url(value) if value else None


class CategoryRead(CamelModel):
    id: int
    tenant_id: int
    name: str
    description: Optional[str] = None
    image: Optional[str] = None
    order: int
    active: bool


class ProductCreate(CamelModel):
    name: Name
    description: Optional[str] = None
    image: Optional[ImagePayload] = None
    base_price: str
    order: int = 0
    active: bool = True

    @field_validator("base_price")
    @classmethod
    def _normalize_price(cls, value: str) -> str:
        return normalize_money(value)


class ProductUpdate(CamelModel):
    name: Optional[Name] = None
    description: Optional[str] = None
    image: Optional[ImagePayload] = None
    base_price: Optional[str] = None
    category_id: Optional[int] = None
    order: Optional[int] = None
    active: Optional[bool] = None

    @field_validator("base_price")
    @classmethod
    def _normalize_price(cls, value: Optional[str]) -> Optional[str]:
        return normalize_money(value) if value is not None else None


class ProductRead(CamelModel):
    id: int
    tenant_id: int
    category_id: int
    name: str
    description: Optional[str] = None
    image: Optional[str] = None
    base_price: str
    order: int
    active: bool


class VariantCreate(CamelModel):
    name: Name
    price_modifier: str = "0.00"
    order: int = 0
    active: bool = True

    @field_validator("price_modifier")
    @classmethod
    def _normalize_modifier(cls, value: str) -> str:
        return normalize_money(value, allow_negative=True)


class VariantUpdate(CamelModel):
    name: Optional[Name] = None
    price_modifier: Optional[str] = None
    order: Optional[int] = None
    active: Optional[bool] = None

    @field_validator("price_modifier")
    @classmethod
    def _normalize_modifier(cls, value: Optional[str]) -> Optional[str]:
        return normalize_money(value, allow_negative=True) if value is not None else None


class VariantRead(CamelModel):
    id: int
    tenant_id: int
    product_id: int
    name: str
    price_modifier: str
    order: int
    active: bool
