from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.orm import Session

from menuhub.models.user import User
from menuhub.services.passwords import hash_password, password_looks_hashed

logger = logging.getLogger(__name__)
BOOTSTRAP_PREFIX = "[SUPERADMIN_BOOTSTRAP]"


def _resolve_password_hash(password: str) -> str:
    if password_looks_hashed(password):
        logger.info("%s password already hashed; storing as-is", BOOTSTRAP_PREFIX)
        return password
    return hash_password(password)


def bootstrap_super_admin(db: Session, *, username: str, password: str) -> Optional[User]:
    """Create the first super-admin account unless one with ``username`` exists.

    Returns the created user, or ``None`` when nothing was done.
    """
    username = (username or "").strip()
    if not username or not password:
        logger.warning("%s skipped: configure SUPERADMIN_USERNAME e SUPERADMIN_PASSWORD.", BOOTSTRAP_PREFIX)
        return None

    existing = db.query(User).filter(User.username == username).first()
    if existing is not None:
        if not existing.is_super_admin:
            logger.warning("%s username=%s exists but is not a super-admin", BOOTSTRAP_PREFIX, username)
        else:
            logger.info("%s exists id=%s", BOOTSTRAP_PREFIX, existing.id)
        return None

    user = User(
        username=username,
        password_hash=_resolve_password_hash(password),
        is_super_admin=True,
        tenant_id=None,
        role="superadmin",
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("%s created id=%s username=%s", BOOTSTRAP_PREFIX, user.id, username)
    return user
