from sqlalchemy import JSON, Boolean, Column, DateTime, Integer, String, func

from menuhub.core.database import Base


class Tenant(Base):
    __tablename__ = "tenants"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    # Sempre minúsculo; chave de busca da resolução por subdomínio.
    subdomain = Column(String, unique=True, index=True, nullable=False)
    active = Column(Boolean, nullable=False, default=True)
    config = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
