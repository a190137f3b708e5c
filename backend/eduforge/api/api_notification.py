from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from .. import models, schemas, crud
from .dependencies import get_db, get_current_user
from ..utils import error_response

router = APIRouter(tags=["notifications"])

logger = logging.getLogger(__name__)


@router.get("/", response_model=schemas.NotificationList)
def read_my_notifications(
    unread_only: bool = Query(default=False, alias="unreadOnly"),
    page: int = 1,
    limit: int = 20,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    """Page through the caller's notifications, newest first."""
    rows, meta = crud.crud_notification.get_notifications_for_user(
        db, current_user.id, unread_only=unread_only, page=page, limit=limit
    )
    return {
        "items": rows,
        "unread_count": crud.crud_notification.unread_count(db, current_user.id),
        "pagination": meta,
    }


@router.post("/")
def mark_notifications_read(
    payload: Optional[schemas.NotificationMarkRead] = Body(default=None),
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    """Mark the listed notifications read, or all of them when none are listed."""
    ids = payload.notification_ids if payload else None
    updated = crud.crud_notification.mark_read(db, current_user.id, ids)
    return {"updated": updated}


@router.delete("/")
def delete_notifications(
    ids: Optional[List[int]] = Query(default=None),
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    """Delete the listed notifications, or all of them when none are listed."""
    deleted = crud.crud_notification.delete_notifications(db, current_user.id, ids)
    logger.info("user %s deleted %d notifications", current_user.id, deleted)
    return {"deleted": deleted}


@router.put(
    "/{notification_id}/read",
    response_model=schemas.NotificationResponse,
)
def mark_notification_read(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    """Mark a notification as read."""
    db_notif = crud.crud_notification.get_notification(db, notification_id)
    if not db_notif or db_notif.user_id != current_user.id:
        raise error_response(
            "Notification not found",
            {"notification_id": "not_found"},
            status.HTTP_404_NOT_FOUND,
        )
    return crud.crud_notification.mark_as_read(db, db_notif)
