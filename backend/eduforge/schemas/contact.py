from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from ..models.statuses import ContactStatus
from .common import upper_enum_value
from .user import UserSummary


class ContactCreate(BaseModel):
    """Public contact-form body; every field is required and non-blank."""

    name: str = Field(max_length=200)
    email: EmailStr
    subject: str = Field(max_length=300)
    message: str = Field(max_length=10000)

    @field_validator("name", "subject", "message", mode="before")
    def strip_required(cls, v):
        if isinstance(v, str):
            v = v.strip()
            if not v:
                raise ValueError("This field is required")
        return v


class ContactUpdate(BaseModel):
    # Omitted status means the admin is replying.
    status: Optional[ContactStatus] = None
    response: Optional[str] = None

    _upper = field_validator("status", mode="before")(upper_enum_value)


class ContactResponse(BaseModel):
    id: int
    name: str
    email: str
    subject: str
    message: str
    status: ContactStatus
    response: Optional[str] = None
    admin_id: Optional[int] = None
    admin: Optional[UserSummary] = None
    responded_at: Optional[datetime] = None
    created_at: datetime

    model_config = {"from_attributes": True}
