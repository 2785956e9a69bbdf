from __future__ import annotations

from collections import defaultdict
from typing import Iterable

from menuhub.core.money import apply_price_modifier
from menuhub.models.category import Category
from menuhub.models.product import Product
from menuhub.models.product_variant import ProductVariant
from menuhub.schemas.public_menu import MenuProduct, MenuSection, MenuVariant


def _sort_key(row) -> tuple:
    return (row.order or 0, row.name or "")


def _menu_variants(product: Product, variants: list[ProductVariant]) -> list[MenuVariant]:
    items = []
    for variant in sorted(variants, key=_sort_key):
        try:
            final_price = apply_price_modifier(product.base_price, variant.price_modifier)
        except ValueError:
            # Preço base reduzido depois do cadastro da variação.
            continue
        items.append(
            MenuVariant(
                id=variant.id,
                name=variant.name,
                price_modifier=variant.price_modifier,
                final_price=final_price,
            )
        )
    return items


def build_menu_sections(
    categories: Iterable[Category],
    products: Iterable[Product],
    variants: Iterable[ProductVariant] = (),
) -> list[MenuSection]:
    """Group active products under their active categories.

    Categories without any active product are left out of the menu.
    """
    variants_by_product: dict[int, list[ProductVariant]] = defaultdict(list)
    for variant in variants:
        if variant.active:
            variants_by_product[variant.product_id].append(variant)

    products_by_category: dict[int, list[Product]] = defaultdict(list)
    for product in products:
        if product.active:
            products_by_category[product.category_id].append(product)

    sections = []
    for category in sorted(categories, key=_sort_key):
        if not category.active:
            continue
        items = sorted(products_by_category.get(category.id, []), key=_sort_key)
        if not items:
            continue
        sections.append(
            MenuSection(
                id=category.id,
                name=category.name,
                description=category.description,
                image=category.image,
                products=[
                    MenuProduct(
                        id=product.id,
                        name=product.name,
                        description=product.description,
                        image=product.image,
                        base_price=product.base_price,
                        variants=_menu_variants(product, variants_by_product.get(product.id, [])),
                    )
                    for product in items
                ],
            )
        )
    return sections
