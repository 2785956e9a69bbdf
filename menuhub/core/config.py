import os
from dotenv import load_dotenv

# Carrega o .env da raiz do projeto
load_dotenv()

_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in _TRUTHY


def _env_list(name: str, default: str) -> list[str]:
    raw = os.getenv(name, default)
    return [item.strip().lower() for item in raw.split(",") if item.strip()]


DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./menuhub.db")
ENV = os.getenv("ENV", "dev")
ENV_NORMALIZED = ENV.lower()
IS_DEV = ENV_NORMALIZED in {"dev", "development", "local"}
IS_PROD = ENV_NORMALIZED in {"prod", "production"}
IS_TEST = ENV_NORMALIZED == "test"
PUBLIC_BASE_DOMAIN = os.getenv("PUBLIC_BASE_DOMAIN", "").strip().lower()

# Resolução de tenant
# O header de override só é lido fora de produção; ver startup_checks.
TENANT_DEV_MODE = _env_flag("TENANT_DEV_MODE", "1" if IS_DEV else "0")
TENANT_DEV_HOST_PATTERNS = _env_list("TENANT_DEV_HOST_PATTERNS", "localhost,127.0.0.1,replit.dev")
TENANT_DEV_DEFAULT_SUBDOMAIN = os.getenv("TENANT_DEV_DEFAULT_SUBDOMAIN", "development").strip().lower()
TENANT_RESERVED_SUBDOMAINS = _env_list("TENANT_RESERVED_SUBDOMAINS", "www")
TENANT_SUBDOMAIN_HEADER = "x-tenant-subdomain"
# Desligue quando o app não estiver atrás de um proxy que sobrescreve X-Forwarded-Host.
TENANT_TRUST_FORWARDED_HOST = _env_flag("TENANT_TRUST_FORWARDED_HOST", "1")

# Sessão (cookie assinado)
SESSION_SECRET = os.getenv("SESSION_SECRET", "").strip() or ("menuhub-dev-secret" if IS_DEV or IS_TEST else "")
SESSION_MAX_AGE_SECONDS = int(os.getenv("SESSION_MAX_AGE_SECONDS", "604800"))
SESSION_COOKIE_SECURE = _env_flag("SESSION_COOKIE_SECURE", "0" if IS_DEV else "1")
SESSION_COOKIE_SAMESITE = os.getenv("SESSION_COOKIE_SAMESITE", "lax").strip().lower()
if SESSION_COOKIE_SAMESITE not in {"lax", "strict", "none"}:
    SESSION_COOKIE_SAMESITE = "lax"
SESSION_COOKIE_DOMAIN = os.getenv("SESSION_COOKIE_DOMAIN", "").strip() or None

# Bootstrap do superadmin
SUPERADMIN_USERNAME = os.getenv("SUPERADMIN_USERNAME", "").strip()
SUPERADMIN_PASSWORD = os.getenv("SUPERADMIN_PASSWORD", "").strip()

# Hospedagem de imagens (Cloudflare R2)
R2_ACCOUNT_ID = os.getenv("R2_ACCOUNT_ID", "").strip()
R2_ACCESS_KEY_ID = os.getenv("R2_ACCESS_KEY_ID", "").strip()
R2_SECRET_ACCESS_KEY = os.getenv("R2_SECRET_ACCESS_KEY", "").strip()
R2_BUCKET_NAME = os.getenv("R2_BUCKET_NAME", "").strip()
R2_PUBLIC_URL = os.getenv("R2_PUBLIC_URL", "").strip().rstrip("/")
IMAGE_UPLOAD_TIMEOUT_SECONDS = float(os.getenv("IMAGE_UPLOAD_TIMEOUT_SECONDS", "10"))
IMAGE_MAX_BYTES = int(os.getenv("IMAGE_MAX_BYTES", str(5 * 1024 * 1024)))

# CORS
_cors_env = os.getenv("CORS_ORIGINS", "")
CORS_ORIGINS = [origin.strip() for origin in _cors_env.split(",") if origin.strip() and origin.strip() != "*"]

if not CORS_ORIGINS and IS_DEV:
    CORS_ORIGINS = [
        "http://localhost:5000",
        "http://127.0.0.1:5000",
    ]
