from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from menuhub.core.database import get_db
from menuhub.deps import get_image_uploader, requires
from menuhub.schemas.catalog import (
    CategoryCreate,
    CategoryRead,
    CategoryUpdate,
    ProductCreate,
    ProductRead,
    ProductUpdate,
    VariantCreate,
    VariantRead,
    VariantUpdate,
)
from menuhub.services.authorization_service import Capability
from menuhub.services.catalog import CategoryRepository, ProductRepository, VariantRepository
from menuhub.services.image_storage import ImageUploader, resolve_image

router = APIRouter(
    prefix="/api/tenants/{tenant_id}",
    tags=["catalog"],
    dependencies=[Depends(requires(Capability.TENANT_MEMBER))],
)


@router.get("/categories", response_model=list[CategoryRead])
def list_categories(tenant_id: int, db: Session = Depends(get_db)):
    return CategoryRepository(db).list_by_tenant(tenant_id)


@router.post("/categories", response_model=CategoryRead, status_code=status.HTTP_201_CREATED)
def create_category(tenant_id: int, payload: CategoryCreate, db: Session = Depends(get_db)):
    return CategoryRepository(db).create(tenant_id, payload.model_dump())


@router.patch("/categories/{category_id}", response_model=CategoryRead)
def update_category(
    tenant_id: int,
    category_id: int,
    payload: CategoryUpdate,
    db: Session = Depends(get_db),
):
    return CategoryRepository(db).update(category_id, tenant_id, payload.model_dump(exclude_unset=True))


@router.get("/categories/{category_id}/products", response_model=list[ProductRead])
def list_category_products(tenant_id: int, category_id: int, db: Session = Depends(get_db)):
    CategoryRepository(db).get(category_id, tenant_id)
    return ProductRepository(db).list_by_category_and_tenant(category_id, tenant_id)


@router.post(
    "/categories/{category_id}/products",
    response_model=ProductRead,
    status_code=status.HTTP_201_CREATED,
)
def create_product(
    tenant_id: int,
    category_id: int,
    payload: ProductCreate,
    db: Session = Depends(get_db),
    uploader: ImageUploader = Depends(get_image_uploader),
):
    CategoryRepository(db).get(category_id, tenant_id)
    # Upload antes de gravar: falha no upload não deixa linha parcial.
    image_url = resolve_image(payload.image, uploader, tenant_id)

    fields = payload.model_dump(exclude={"image"})
    fields.update(category_id=category_id, image=image_url)
    return ProductRepository(db).create(tenant_id, fields)


@router.get("/products", response_model=list[ProductRead])
def list_products(tenant_id: int, db: Session = Depends(get_db)):
    return ProductRepository(db).list_by_tenant(tenant_id)


@router.patch("/products/{product_id}", response_model=ProductRead)
def update_product(
    tenant_id: int,
    product_id: int,
    payload: ProductUpdate,
    db: Session = Depends(get_db),
    uploader: ImageUploader = Depends(get_image_uploader),
):
    repository = ProductRepository(db)
    repository.get(product_id, tenant_id)

    fields = payload.model_dump(exclude_unset=True, exclude={"image"})
    if "image" in payload.model_fields_set:
        fields["image"] = resolve_image(payload.image, uploader, tenant_id)
    return repository.update(product_id, tenant_id, fields)


@router.get("/products/{product_id}/variants", response_model=list[VariantRead])
def list_variants(tenant_id: int, product_id: int, db: Session = Depends(get_db)):
    ProductRepository(db).get(product_id, tenant_id)
    return VariantRepository(db).list_by_product_and_tenant(product_id, tenant_id)


@router.post(
    "/products/{product_id}/variants",
    response_model=VariantRead,
    status_code=status.HTTP_201_CREATED,
)
def create_variant(
    tenant_id: int,
    product_id: int,
    payload: VariantCreate,
    db: Session = Depends(get_db),
):
    return VariantRepository(db).create(tenant_id, product_id, payload.model_dump())


@router.patch("/products/{product_id}/variants/{variant_id}", response_model=VariantRead)
def update_variant(
    tenant_id: int,
    product_id: int,
    variant_id: int,
    payload: VariantUpdate,
    db: Session = Depends(get_db),
):
    return VariantRepository(db).update(
        variant_id,
        product_id,
        tenant_id,
        payload.model_dump(exclude_unset=True),
    )
