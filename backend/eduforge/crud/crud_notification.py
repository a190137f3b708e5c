from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session

from .. import models
from ..utils.pagination import paginate


def get_notification(db: Session, notification_id: int) -> Optional[models.Notification]:
    return (
        db.query(models.Notification)
        .filter(models.Notification.id == notification_id)
        .first()
    )


def get_notifications_for_user(
    db: Session,
    user_id: int,
    *,
    unread_only: bool = False,
    page: int = 1,
    limit: int = 20,
) -> Tuple[List[models.Notification], dict]:
    """Return a page of notifications, newest first."""
    query = db.query(models.Notification).filter(
        models.Notification.user_id == user_id
    )
    if unread_only:
        query = query.filter(models.Notification.is_read.is_(False))
    query = query.order_by(
        models.Notification.created_at.desc(), models.Notification.id.desc()
    )
    return paginate(query, page, limit)


def unread_count(db: Session, user_id: int) -> int:
    return (
        db.query(models.Notification)
        .filter(
            models.Notification.user_id == user_id,
            models.Notification.is_read.is_(False),
        )
        .count()
    )


def mark_as_read(
    db: Session, db_notification: models.Notification
) -> models.Notification:
    if not db_notification.is_read:
        db_notification.is_read = True
        db_notification.read_at = datetime.utcnow()
    db.commit()
    db.refresh(db_notification)
    return db_notification


def mark_read(db: Session, user_id: int, ids: Optional[Iterable[int]] = None) -> int:
    """Mark the user's notifications read; all of them when ``ids`` is empty.

    Already-read rows are left untouched, so repeating the call updates 0.
    Returns the number of notifications updated.
    """
    query = db.query(models.Notification).filter(
        models.Notification.user_id == user_id,
        models.Notification.is_read.is_(False),
    )
    ids = list(ids or [])
    if ids:
        query = query.filter(models.Notification.id.in_(ids))
    updated = query.update(
        {"is_read": True, "read_at": datetime.utcnow()},
        synchronize_session="fetch",
    )
    db.commit()
    return int(updated)


def mark_all_read(db: Session, user_id: int) -> int:
    return mark_read(db, user_id)


def delete_notifications(
    db: Session, user_id: int, ids: Optional[Iterable[int]] = None
) -> int:
    """Delete the user's notifications; all of them when ``ids`` is empty."""
    query = db.query(models.Notification).filter(
        models.Notification.user_id == user_id
    )
    ids = list(ids or [])
    if ids:
        query = query.filter(models.Notification.id.in_(ids))
    deleted = query.delete(synchronize_session="fetch")
    db.commit()
    return int(deleted)
