"""Helpers reutilizáveis para os cenários de teste do backend."""

from __future__ import annotations

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from menuhub.core.database import Base
from menuhub.main import create_app
from menuhub.models.user import User
from menuhub.services.passwords import hash_password
from menuhub.services.session import SESSION_COOKIE_NAME, create_session_token
from menuhub.services.tenant_directory import TenantDirectory
from menuhub.services.tenant_resolver import TenantResolutionSettings

TEST_SESSION_SECRET = "test-session-secret"
BASE_DOMAIN = "example.com"

# Sem modo dev: o tenant vem sempre do host.
HOST_SETTINGS = TenantResolutionSettings(is_production=False, dev_mode=False, base_domain=BASE_DOMAIN)
PRODUCTION_SETTINGS = TenantResolutionSettings(
    is_production=True,
    dev_mode=False,
    dev_host_patterns=("localhost",),
    base_domain=BASE_DOMAIN,
)
DEV_SETTINGS = TenantResolutionSettings(
    is_production=False,
    dev_mode=False,
    dev_host_patterns=("localhost", "127.0.0.1", "replit.dev"),
    base_domain=BASE_DOMAIN,
)


class FakeUploader:
    def __init__(self, *, error: Exception | None = None) -> None:
        self.error = error
        self.calls: list[dict] = []

    def upload(self, data: bytes, tenant_id: int, *, content_type: str = "image/jpeg") -> str:
        self.calls.append({"data": data, "tenant_id": tenant_id, "content_type": content_type})
        if self.error is not None:
            raise self.error
        return f"https://cdn.example.com/tenants/{tenant_id}/products/img{len(self.calls)}.png"


def build_session_factory() -> sessionmaker:
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def build_client(
    *,
    settings: TenantResolutionSettings = HOST_SETTINGS,
    uploader=None,
) -> tuple[TestClient, sessionmaker]:
    session_factory = build_session_factory()
    app = create_app(
        session_factory=session_factory,
        resolution_settings=settings,
        image_uploader=uploader or FakeUploader(),
        session_secret=TEST_SESSION_SECRET,
    )
    return TestClient(app), session_factory


def seed_tenant(session_factory: sessionmaker, name: str, subdomain: str, *, active: bool = True) -> int:
    db = session_factory()
    try:
        return TenantDirectory(db).create(name=name, subdomain=subdomain, active=active).id
    finally:
        db.close()


def seed_user(
    session_factory: sessionmaker,
    username: str,
    *,
    tenant_id: int | None = None,
    super_admin: bool = False,
    password: str = "secret123",
) -> int:
    db = session_factory()
    try:
        user = User(
            username=username,
            password_hash=hash_password(password),
            is_super_admin=super_admin,
            tenant_id=tenant_id,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user.id
    finally:
        db.close()


def login_as(client: TestClient, user_id: int) -> None:
    client.cookies.set(SESSION_COOKIE_NAME, create_session_token(user_id, secret=TEST_SESSION_SECRET))
