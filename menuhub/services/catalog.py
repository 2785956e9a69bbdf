"""Tenant-scoped access to categories, products and variants.

Every query here filters by ``tenant_id``; a row owned by another tenant is
indistinguishable from a missing one and raises ``ResourceNotFoundError``.
"""

from __future__ import annotations

import logging
from typing import Any, ClassVar

from sqlalchemy.orm import Session

from menuhub.core.errors import ResourceNotFoundError, ValidationFailedError
from menuhub.core.money import apply_price_modifier
from menuhub.models.category import Category
from menuhub.models.product import Product
from menuhub.models.product_variant import ProductVariant

logger = logging.getLogger(__name__)

ROW_DEFAULTS: dict[str, Any] = {
    "description": None,
    "image": None,
    "order": 0,
    "active": True,
}
NULLABLE_FIELDS = frozenset({"description", "image"})


def _check_final_price(base_price: str, modifier: str) -> None:
    try:
        apply_price_modifier(base_price, modifier)
    except ValueError as exc:
        raise ValidationFailedError(str(exc), field="priceModifier") from exc


class _ScopedRepository:
    model: ClassVar[type]
    not_found_message: ClassVar[str]
    # Campos que nunca vêm do corpo da requisição.
    protected_fields: ClassVar[frozenset[str]] = frozenset({"id", "tenant_id", "created_at", "updated_at"})

    def __init__(self, db: Session) -> None:
        self.db = db

    def _scoped(self, tenant_id: int):
        return self.db.query(self.model).filter(self.model.tenant_id == tenant_id)

    def _ordered(self, query):
        return query.order_by(self.model.order.asc(), self.model.name.asc())

    def list_by_tenant(self, tenant_id: int) -> list:
        return self._ordered(self._scoped(tenant_id)).all()

    def get(self, row_id: int, tenant_id: int):
        row = self._scoped(tenant_id).filter(self.model.id == row_id).first()
        if row is None:
            raise ResourceNotFoundError(self.not_found_message)
        return row

    def _clean(self, fields: dict[str, Any]) -> dict[str, Any]:
        return {key: value for key, value in fields.items() if key not in self.protected_fields}

    def _insert(self, tenant_id: int, fields: dict[str, Any]):
        values = {**ROW_DEFAULTS, **{k: v for k, v in self._clean(fields).items() if v is not None}}
        row = self.model(tenant_id=tenant_id, **values)
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        logger.info("%s created id=%s tenant_id=%s", self.model.__name__, row.id, tenant_id)
        return row

    def _apply(self, row, fields: dict[str, Any]):
        for key, value in self._clean(fields).items():
            # Só description e image aceitam null explícito.
            if value is None and key not in NULLABLE_FIELDS:
                continue
            setattr(row, key, value)
        self.db.commit()
        self.db.refresh(row)
        return row


class CategoryRepository(_ScopedRepository):
    model = Category
    not_found_message = "Categoria não encontrada"

    def create(self, tenant_id: int, fields: dict[str, Any]) -> Category:
        return self._insert(tenant_id, fields)

    def update(self, category_id: int, tenant_id: int, fields: dict[str, Any]) -> Category:
        return self._apply(self.get(category_id, tenant_id), fields)


class ProductRepository(_ScopedRepository):
    model = Product
    not_found_message = "Produto não encontrado"

    def list_by_category_and_tenant(self, category_id: int, tenant_id: int) -> list[Product]:
        query = self._scoped(tenant_id).filter(Product.category_id == category_id)
        return self._ordered(query).all()

    def create(self, tenant_id: int, fields: dict[str, Any]) -> Product:
        CategoryRepository(self.db).get(fields["category_id"], tenant_id)
        return self._insert(tenant_id, fields)

    def update(self, product_id: int, tenant_id: int, fields: dict[str, Any]) -> Product:
        product = self.get(product_id, tenant_id)
        new_category = fields.get("category_id")
        if new_category is not None and new_category != product.category_id:
            CategoryRepository(self.db).get(new_category, tenant_id)
        return self._apply(product, fields)


class VariantRepository(_ScopedRepository):
    model = ProductVariant
    not_found_message = "Variação não encontrada"
    protected_fields = _ScopedRepository.protected_fields | {"product_id"}

    def list_by_product_and_tenant(self, product_id: int, tenant_id: int) -> list[ProductVariant]:
        query = self._scoped(tenant_id).filter(ProductVariant.product_id == product_id)
        return self._ordered(query).all()

    def get_for_product(self, variant_id: int, product_id: int, tenant_id: int) -> ProductVariant:
        variant = self.get(variant_id, tenant_id)
        if variant.product_id != product_id:
            raise ResourceNotFoundError(self.not_found_message)
        return variant

    def create(self, tenant_id: int, product_id: int, fields: dict[str, Any]) -> ProductVariant:
        product = ProductRepository(self.db).get(product_id, tenant_id)
        _check_final_price(product.base_price, fields.get("price_modifier") or "0.00")
        values = {"order": 0, "active": True, "price_modifier": "0.00"}
        values.update({k: v for k, v in self._clean(fields).items() if v is not None})
        row = ProductVariant(tenant_id=tenant_id, product_id=product_id, **values)
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        logger.info("ProductVariant created id=%s product_id=%s tenant_id=%s", row.id, product_id, tenant_id)
        return row

    def update(self, variant_id: int, product_id: int, tenant_id: int, fields: dict[str, Any]) -> ProductVariant:
        variant = self.get_for_product(variant_id, product_id, tenant_id)
        if fields.get("price_modifier") is not None:
            product = ProductRepository(self.db).get(product_id, tenant_id)
            _check_final_price(product.base_price, fields["price_modifier"])
        return self._apply(variant, fields)
