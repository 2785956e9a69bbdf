from __future__ import annotations

import logging

from passlib.context import CryptContext
from passlib.exc import UnknownHashError

logger = logging.getLogger(__name__)

# pbkdf2_sha256 gera os hashes novos; bcrypt só é aceito na verificação de
# hashes legados e marcado como obsoleto.
_pwd_context = CryptContext(schemes=["pbkdf2_sha256", "bcrypt"], deprecated=["bcrypt"])


def hash_password(password: str) -> str:
    return _pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    if not password_hash:
        return False

    try:
        return _pwd_context.verify(password, password_hash)
    except (UnknownHashError, ValueError):
        logger.warning("Password hash with unsupported format")
        return False


def password_looks_hashed(value: str) -> bool:
    return _pwd_context.identify(value) is not None
