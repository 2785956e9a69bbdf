from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String

from menuhub.core.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)

    is_super_admin = Column(Boolean, nullable=False, default=False)
    # Nulo para superadmin e para contas ainda sem comércio.
    tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=True, index=True)
    role = Column(String, nullable=False, default="user")

    created_at = Column(DateTime, default=datetime.utcnow)
