"""User administration, profile edits and system settings."""

import logging
from datetime import datetime
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from .. import crud, models, schemas
from ..utils.audit import record_audit
from ..utils.auth import get_password_hash, normalize_email
from ..utils.errors import Conflict, NotFound, ValidationFailed
from .policy import Action, Actor, authorize, ensure_owner
from .uow import atomic

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("name", "phone", "avatar")

# Pseudo-key in a settings payload naming the category for new keys.
CATEGORY_KEY = "_category"


def create_user(
    db: Session,
    actor: Actor,
    data: schemas.UserCreate,
    role: models.UserRole = models.UserRole.STUDENT,
) -> models.User:
    authorize(actor, Action.CREATE_USER)
    with atomic(db, "create_user"):
        if crud.user.get_user_by_email(db, data.email):
            raise Conflict("User with this email already exists", {"email": "taken"})
        user = models.User(
            email=normalize_email(data.email),
            password=get_password_hash(data.password),
            name=data.name.strip(),
            phone=data.phone,
            role=role,
        )
        db.add(user)
        db.flush()
        record_audit(db, actor.id, "CREATE_USER", "USER", user.id, {"role": role.value})
    db.refresh(user)
    return user


def update_user(
    db: Session, actor: Actor, user_id: int, data: schemas.UserUpdate
) -> models.User:
    """Apply profile edits; suspension fields only take effect for admins.

    The audit entry lists the changed keys, never their values.
    """
    authorize(actor, Action.UPDATE_USER)
    payload = data.model_dump(exclude_unset=True)
    with atomic(db, "update_user"):
        user = db.get(models.User, user_id)
        if user is None:
            raise NotFound("User not found", {"user_id": "not_found"})
        ensure_owner(actor, user.id, "user")

        changed: List[str] = []
        for field in PROFILE_FIELDS:
            if field in payload:
                setattr(user, field, payload[field])
                changed.append(field)
        if payload.get("password"):
            user.password = get_password_hash(payload["password"])
            changed.append("password")
        if actor.is_admin and payload.get("is_suspended") is not None:
            if user.id == actor.id and payload["is_suspended"]:
                raise ValidationFailed(
                    "You cannot suspend your own account", {"is_suspended": "self"}
                )
            suspend = bool(payload["is_suspended"])
            user.is_suspended = suspend
            user.suspended_at = datetime.utcnow() if suspend else None
            user.suspended_reason = payload.get("suspended_reason") if suspend else None
            changed.extend(["is_suspended", "suspended_at", "suspended_reason"])

        record_audit(db, actor.id, "UPDATE_USER", "USER", user.id, changed)
    db.refresh(user)
    return user


def update_settings(
    db: Session, actor: Actor, values: Dict[str, Any]
) -> List[models.SystemSetting]:
    authorize(actor, Action.UPDATE_SETTINGS)
    if not isinstance(values, dict) or not values:
        raise ValidationFailed("No settings provided", {"settings": "required"})
    category = str(values.get(CATEGORY_KEY) or "general")
    with atomic(db, "update_settings"):
        rows = [
            crud.crud_setting.upsert_setting(db, key, str(value), category)
            for key, value in values.items()
            if key != CATEGORY_KEY
        ]
        record_audit(
            db, actor.id, "UPDATE_SETTINGS", "SETTINGS", "SYSTEM", list(values.keys())
        )
    for row in rows:
        db.refresh(row)
    return rows
