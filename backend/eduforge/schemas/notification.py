from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from ..models.notification import NotificationType
from .common import Pagination


class NotificationResponse(BaseModel):
    id: int
    user_id: int
    type: NotificationType
    title: str
    message: str
    link: Optional[str] = None
    is_read: bool
    read_at: Optional[datetime] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class NotificationList(BaseModel):
    items: List[NotificationResponse]
    unread_count: int
    pagination: Pagination


class NotificationMarkRead(BaseModel):
    """Empty or missing ``notification_ids`` marks everything read."""

    notification_ids: Optional[List[int]] = None
