# backend/eduforge/schemas/user.py

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from ..models.statuses import UserRole


class UserBase(BaseModel):
    email: EmailStr
    name: str = Field(min_length=1)
    phone: Optional[str] = None


class UserCreate(UserBase):
    password: str = Field(min_length=6)


class UserUpdate(BaseModel):
    """Self-service profile edits; suspension fields are admin-only."""

    name: Optional[str] = Field(default=None, min_length=1)
    phone: Optional[str] = None
    avatar: Optional[str] = None
    password: Optional[str] = Field(default=None, min_length=6)
    is_suspended: Optional[bool] = None
    suspended_reason: Optional[str] = None


class UserSummary(BaseModel):
    id: int
    name: str
    email: str

    model_config = {"from_attributes": True}


class UserResponse(UserBase):
    id: int
    email: str
    role: UserRole
    avatar: Optional[str] = None
    is_suspended: bool
    suspended_at: Optional[datetime] = None
    suspended_reason: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class TokenData(BaseModel):
    email: Optional[str] = None


class UserAdminCreate(UserCreate):
    role: UserRole = UserRole.STUDENT
