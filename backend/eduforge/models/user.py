# backend/eduforge/models/user.py

from sqlalchemy import Boolean, Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from .base import BaseModel
from .statuses import UserRole
from .types import CaseInsensitiveEnum


class User(BaseModel):
    __tablename__ = "users"

    id         = Column(Integer, primary_key=True, index=True)
    email      = Column(String, unique=True, index=True, nullable=False)
    password   = Column(String, nullable=False)
    name       = Column(String, nullable=False)
    phone      = Column(String, nullable=True)
    avatar     = Column(String, nullable=True)
    role       = Column(
        CaseInsensitiveEnum(UserRole, name="userrole"),
        nullable=False,
        default=UserRole.STUDENT,
        index=True,
    )
    is_suspended     = Column(Boolean, default=False, nullable=False)
    suspended_at     = Column(DateTime, nullable=True)
    suspended_reason = Column(String, nullable=True)

    requests = relationship(
        "ServiceRequest",
        back_populates="user",
        cascade="all, delete-orphan",
    )
    payments = relationship(
        "Payment",
        foreign_keys="Payment.user_id",
        back_populates="user",
        cascade="all, delete-orphan",
    )
    tickets = relationship(
        "Ticket",
        back_populates="user",
        cascade="all, delete-orphan",
    )
    notifications = relationship(
        "Notification",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
