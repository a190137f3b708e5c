from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from ..models.statuses import TicketPriority, TicketStatus, UserRole
from .common import upper_enum_value
from .user import UserSummary


class TicketCreate(BaseModel):
    title: str = Field(min_length=1)
    category: Optional[str] = None
    priority: TicketPriority = TicketPriority.MEDIUM
    request_id: Optional[int] = None
    # Optional opening message, stored as the first reply
    content: Optional[str] = None

    _upper = field_validator("priority", mode="before")(upper_enum_value)


class TicketUpdate(BaseModel):
    status: TicketStatus
    priority: Optional[TicketPriority] = None

    _upper = field_validator("status", "priority", mode="before")(upper_enum_value)


class TicketReplyCreate(BaseModel):
    content: str = Field(min_length=1)


class ReplyAuthor(UserSummary):
    role: UserRole


class TicketReplyResponse(BaseModel):
    id: int
    ticket_id: int
    user_id: int
    content: str
    is_admin: bool
    created_at: datetime
    user: Optional[ReplyAuthor] = None

    model_config = {"from_attributes": True}


class TicketResponse(BaseModel):
    id: int
    title: str
    category: Optional[str] = None
    status: TicketStatus
    priority: TicketPriority
    user_id: int
    request_id: Optional[int] = None
    resolved_at: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    user: Optional[UserSummary] = None
    reply_count: int = 0

    model_config = {"from_attributes": True}


class TicketDetail(TicketResponse):
    replies: List[TicketReplyResponse] = []
