from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, String, Text, func

from menuhub.core.database import Base


class Product(Base):
    __tablename__ = "products"
    __table_args__ = (Index("ix_products_tenant_category", "tenant_id", "category_id"),)

    id = Column(Integer, primary_key=True)
    # Redundante com a categoria: todo filtro de acesso é um único tenant_id == X.
    tenant_id = Column(Integer, ForeignKey("tenants.id"), index=True, nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    image = Column(Text, nullable=True)
    # Decimal exato em texto ("12.50"), nunca float.
    base_price = Column(String(32), nullable=False)
    order = Column("sort_order", Integer, default=0, nullable=False)
    active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
