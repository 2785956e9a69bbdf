import re
import unicodedata

SUBDOMAIN_PATTERN = re.compile(r"^[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?$")


def normalize_subdomain(value: str) -> str:
    if not value:
        return ""

    value = unicodedata.normalize("NFKD", value)
    value = value.encode("ascii", "ignore").decode("ascii")
    value = value.strip().lower()

    return value


def is_valid_subdomain(value: str) -> bool:
    return bool(SUBDOMAIN_PATTERN.match(value or ""))
