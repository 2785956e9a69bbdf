from __future__ import annotations

import ipaddress
import logging
from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import urlsplit

from sqlalchemy.orm import Session

from menuhub.core import config
from menuhub.core.errors import TenantNotFoundError
from menuhub.services.tenant_context import TenantContext
from menuhub.services.tenant_directory import TenantDirectory
from menuhub.utils.subdomain import normalize_subdomain

logger = logging.getLogger(__name__)
RESOLUTION_PREFIX = "[TENANT_RESOLUTION]"

# Rotas que não dependem de tenant: seguem sem resolução e sem contexto.
TENANT_INDEPENDENT_PATHS = frozenset(
    {
        "/",
        "/health",
        "/docs",
        "/redoc",
        "/openapi.json",
        "/api/register",
        "/api/login",
        "/api/logout",
        "/api/user",
    }
)
TENANT_INDEPENDENT_PREFIXES = (
    "/docs/",
    "/api/public/tenant-by-subdomain/",
    "/api/public/categories/",
    "/api/public/products/",
)


def is_tenant_independent_path(path: str) -> bool:
    return path in TENANT_INDEPENDENT_PATHS or path.startswith(TENANT_INDEPENDENT_PREFIXES)


@dataclass(frozen=True)
class TenantResolutionSettings:
    is_production: bool
    dev_mode: bool = False
    dev_host_patterns: tuple[str, ...] = ()
    dev_default_subdomain: str = "development"
    reserved_subdomains: frozenset[str] = field(default_factory=lambda: frozenset({"www"}))
    base_domain: str = ""
    header_name: str = config.TENANT_SUBDOMAIN_HEADER
    trust_forwarded_host: bool = True

    @classmethod
    def from_config(cls) -> "TenantResolutionSettings":
        return cls(
            is_production=config.IS_PROD,
            dev_mode=config.TENANT_DEV_MODE,
            dev_host_patterns=tuple(config.TENANT_DEV_HOST_PATTERNS),
            dev_default_subdomain=config.TENANT_DEV_DEFAULT_SUBDOMAIN,
            reserved_subdomains=frozenset(config.TENANT_RESERVED_SUBDOMAINS),
            base_domain=TenantResolver.normalize_host(config.PUBLIC_BASE_DOMAIN),
            trust_forwarded_host=config.TENANT_TRUST_FORWARDED_HOST,
        )

    def request_host(self, headers) -> str:
        if self.trust_forwarded_host and headers.get("x-forwarded-host"):
            return headers["x-forwarded-host"]
        return headers.get("host") or ""

    def matches_dev_host(self, hostname: str) -> bool:
        return any(
            hostname == pattern or hostname.endswith(f".{pattern}")
            for pattern in self.dev_host_patterns
        )

    def header_override_allowed(self, hostname: str) -> bool:
        # Em produção o header nunca é lido, qualquer que seja o host.
        if self.is_production:
            return False
        return self.dev_mode or self.matches_dev_host(hostname)


class TenantResolver:
    """Map a request host (or the dev-only override header) to a tenant."""

    def __init__(self, settings: TenantResolutionSettings) -> None:
        self.settings = settings

    @staticmethod
    def normalize_host(host: str) -> str:
        normalized = (host or "").split(",")[0].strip().lower()
        if not normalized:
            return ""

        if "://" in normalized:
            return (urlsplit(normalized).hostname or "").lower()

        normalized = normalized.split("/")[0].strip()
        if normalized.startswith("["):
            return normalized.split("]")[0].lstrip("[")
        if ":" in normalized:
            normalized = normalized.split(":")[0].strip()
        return normalized.rstrip(".")

    @staticmethod
    def _is_ip_address(hostname: str) -> bool:
        try:
            ipaddress.ip_address(hostname)
        except ValueError:
            return False
        return True

    def extract_subdomain(self, host: str, header_value: str | None = None) -> Optional[str]:
        """Return the subdomain to resolve, or ``None`` for the main application."""
        hostname = self.normalize_host(host)

        if self.settings.header_override_allowed(hostname):
            override = normalize_subdomain(header_value or "")
            return override or self.settings.dev_default_subdomain

        if not hostname or self._is_ip_address(hostname):
            return None
        if self.settings.base_domain and hostname == self.settings.base_domain:
            return None

        labels = hostname.split(".")
        if len(labels) < 2:
            return None

        subdomain = normalize_subdomain(labels[0])
        if not subdomain or subdomain in self.settings.reserved_subdomains:
            return None
        return subdomain

    def resolve(self, db: Session, host: str, header_value: str | None = None) -> Optional[TenantContext]:
        subdomain = self.extract_subdomain(host, header_value)
        if subdomain is None:
            return None

        hostname = self.normalize_host(host)
        tenant = TenantDirectory(db).find_by_subdomain(subdomain)
        if tenant is None or not tenant.active:
            logger.info(
                "%s no active tenant subdomain=%s hostname=%s",
                RESOLUTION_PREFIX,
                subdomain,
                hostname,
            )
            raise TenantNotFoundError(subdomain, hostname=hostname)

        return TenantContext.from_tenant(tenant)
