import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import sessionmaker

from menuhub.core.config import (
    CORS_ORIGINS,
    DATABASE_URL,
    IS_PROD,
    SUPERADMIN_PASSWORD,
    SUPERADMIN_USERNAME,
)
from menuhub.core.database import Base, get_session_factory
from menuhub.core.errors import register_exception_handlers
from menuhub.core.logging_setup import configure_logging
from menuhub.core.startup_checks import (
    ensure_migrations_applied,
    validate_database_environment,
    validate_tenant_resolution,
)
from menuhub.middleware.observability import ObservabilityMiddleware
from menuhub.middleware.tenant_context import TenantContextMiddleware
import menuhub.models  # garante que os models são importados antes do create_all

from menuhub.routers.auth import router as auth_router
from menuhub.routers.catalog import router as catalog_router
from menuhub.routers.public_menu import router as public_menu_router
from menuhub.routers.tenant_settings import router as tenant_settings_router
from menuhub.routers.tenants import router as tenants_router
from menuhub.services.image_storage import ImageUploader, R2ImageUploader
from menuhub.services.session import resolve_session_secret
from menuhub.services.superadmin_bootstrap import BOOTSTRAP_PREFIX, bootstrap_super_admin
from menuhub.services.tenant_resolver import TenantResolutionSettings, TenantResolver

configure_logging()

logger = logging.getLogger(__name__)
REPO_ROOT = Path(__file__).resolve().parents[1]
ALEMBIC_CONFIG_PATH = Path(os.getenv("ALEMBIC_CONFIG", str(REPO_ROOT / "alembic.ini")))


def _startup_tasks(app: FastAPI) -> None:
    try:
        validate_tenant_resolution(app.state.tenant_resolver.settings)
        resolve_session_secret(app)
        session_factory = get_session_factory(app)
        engine = session_factory.kw["bind"]
        validate_database_environment(str(engine.url), is_production=IS_PROD)

        # Cria tabelas (dev/test). Em produção, use migrations.
        if engine.url.get_backend_name() == "sqlite":
            Base.metadata.create_all(bind=engine)
        if IS_PROD:
            ensure_migrations_applied(engine=engine, alembic_config_path=ALEMBIC_CONFIG_PATH)

        db = session_factory()
        try:
            bootstrap_super_admin(db, username=SUPERADMIN_USERNAME, password=SUPERADMIN_PASSWORD)
        finally:
            db.close()
    except Exception:
        logger.exception("%s ERROR startup failed", BOOTSTRAP_PREFIX)
        raise


@asynccontextmanager
async def lifespan(app: FastAPI):
    _startup_tasks(app)
    yield


def create_app(
    *,
    session_factory: Optional[sessionmaker] = None,
    resolution_settings: Optional[TenantResolutionSettings] = None,
    image_uploader: Optional[ImageUploader] = None,
    session_secret: Optional[str] = None,
) -> FastAPI:
    app = FastAPI(
        title="MenuHub API",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    settings = resolution_settings or TenantResolutionSettings.from_config()
    app.state.session_factory = session_factory
    app.state.tenant_resolver = TenantResolver(settings)
    app.state.image_uploader = image_uploader or R2ImageUploader()
    app.state.session_secret = session_secret

    register_exception_handlers(app, expose_internals=not settings.is_production)

    app.add_middleware(TenantContextMiddleware)
    app.add_middleware(ObservabilityMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth_router)
    app.include_router(tenants_router)
    app.include_router(tenant_settings_router)
    app.include_router(catalog_router)
    app.include_router(public_menu_router)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.get("/")
    def root():
        return {"service": "menuhub", "status": "ok"}

    return app


app = create_app()
logger.info("MenuHub API initialized database=%s", "sqlite" if DATABASE_URL.startswith("sqlite") else "external")
