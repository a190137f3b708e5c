from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
import enum

from .base import BaseModel
from .types import CaseInsensitiveEnum


class NotificationType(str, enum.Enum):
    REQUEST_UPDATED = "REQUEST_UPDATED"
    REQUEST_DELIVERED = "REQUEST_DELIVERED"
    PAYMENT_APPROVED = "PAYMENT_APPROVED"
    PAYMENT_REJECTED = "PAYMENT_REJECTED"
    PAYMENT_DISPUTED = "PAYMENT_DISPUTED"
    DISPUTE_RESOLVED = "DISPUTE_RESOLVED"
    TICKET_CREATED = "TICKET_CREATED"
    TICKET_UPDATED = "TICKET_UPDATED"


class Notification(BaseModel):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    type = Column(CaseInsensitiveEnum(NotificationType, name="notificationtype"), nullable=False)
    title = Column(String, nullable=False)
    message = Column(String, nullable=False)
    link = Column(String, nullable=True)
    is_read = Column(Boolean, default=False, nullable=False)
    read_at = Column(DateTime, nullable=True)

    user = relationship("User", back_populates="notifications")
