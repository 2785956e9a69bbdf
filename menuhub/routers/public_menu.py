from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from menuhub.core.database import get_db
from menuhub.core.errors import ResourceNotFoundError
from menuhub.models.tenant import Tenant
from menuhub.schemas.catalog import CategoryRead, ProductRead
from menuhub.schemas.public_menu import PublicMenu, PublicTenant
from menuhub.services.catalog import CategoryRepository, ProductRepository, VariantRepository
from menuhub.services.menu import build_menu_sections
from menuhub.services.tenant_context import TenantContext, require_tenant_context
from menuhub.services.tenant_directory import TenantDirectory

router = APIRouter(prefix="/api/public", tags=["public-menu"])


def _active_tenant_by_id(db: Session, tenant_id: int) -> Tenant:
    tenant = TenantDirectory(db).find_by_id(tenant_id)
    if tenant is None or not tenant.active:
        raise ResourceNotFoundError("Tenant não encontrado")
    return tenant


@router.get("/tenant-by-subdomain/{subdomain}", response_model=PublicTenant)
def tenant_by_subdomain(subdomain: str, db: Session = Depends(get_db)):
    tenant = TenantDirectory(db).find_by_subdomain(subdomain)
    if tenant is None or not tenant.active:
        raise ResourceNotFoundError("Tenant não encontrado")
    return tenant


@router.get("/categories/{tenant_id}", response_model=list[CategoryRead])
def public_categories(tenant_id: int, db: Session = Depends(get_db)):
    _active_tenant_by_id(db, tenant_id)
    return CategoryRepository(db).list_by_tenant(tenant_id)


@router.get("/products/{tenant_id}", response_model=list[ProductRead])
def public_products(tenant_id: int, db: Session = Depends(get_db)):
    # Inclui produtos inativos; o filtro é feito pelo cliente.
    _active_tenant_by_id(db, tenant_id)
    return ProductRepository(db).list_by_tenant(tenant_id)


@router.get("/menu", response_model=PublicMenu)
def public_menu(
    context: TenantContext = Depends(require_tenant_context),
    db: Session = Depends(get_db),
):
    sections = build_menu_sections(
        CategoryRepository(db).list_by_tenant(context.tenant_id),
        ProductRepository(db).list_by_tenant(context.tenant_id),
        VariantRepository(db).list_by_tenant(context.tenant_id),
    )
    return PublicMenu(
        tenant=PublicTenant(
            id=context.tenant_id,
            name=context.name,
            subdomain=context.subdomain,
            config=context.config,
        ),
        sections=sections,
    )
