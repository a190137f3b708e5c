from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import inspect
from sqlalchemy.orm import Session

from ..core.config import settings
from ..database import SessionLocal
from ..models import User, UserRole
from ..utils.auth import get_password_hash, normalize_email

logger = logging.getLogger(__name__)


def _table_exists(session: Session, table_name: str) -> bool:
    insp = inspect(session.get_bind())
    return table_name in insp.get_table_names()


def ensure_default_admin(session: Optional[Session] = None) -> Optional[User]:
    """Create the default admin account if no ADMIN user exists yet.

    Controlled by ``DEFAULT_ADMIN_BOOTSTRAP``; turn it off in production once
    real admin accounts exist.
    """
    if not settings.DEFAULT_ADMIN_BOOTSTRAP:
        return None

    owns_session = session is None
    session = session or SessionLocal()
    try:
        if not _table_exists(session, "users"):
            return None
        if session.query(User).filter(User.role == UserRole.ADMIN).count() > 0:
            return None

        email = normalize_email(settings.DEFAULT_ADMIN_EMAIL)
        user = session.query(User).filter(User.email == email).first()
        if user is None:
            user = User(
                email=email,
                password=get_password_hash(settings.DEFAULT_ADMIN_PASSWORD),
                name="Admin User",
                role=UserRole.ADMIN,
            )
            session.add(user)
        else:
            user.role = UserRole.ADMIN
        session.commit()
        session.refresh(user)
        logger.warning("Bootstrapped default admin %s; change its password", email)
        return user
    except Exception:
        session.rollback()
        logger.exception("Default admin bootstrap failed")
        return None
    finally:
        if owns_session:
            session.close()
