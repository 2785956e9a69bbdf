from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, String, func

from menuhub.core.database import Base


class ProductVariant(Base):
    __tablename__ = "product_variants"
    __table_args__ = (Index("ix_product_variants_tenant_product", "tenant_id", "product_id"),)

    id = Column(Integer, primary_key=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id"), index=True, nullable=False)
    product_id = Column(Integer, ForeignKey("products.id"), index=True, nullable=False)
    name = Column(String, nullable=False)
    # Acréscimo (ou desconto) sobre o base_price do produto, decimal em texto.
    price_modifier = Column(String(32), nullable=False, default="0.00")
    order = Column("sort_order", Integer, default=0, nullable=False)
    active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
