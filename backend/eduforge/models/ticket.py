from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from .base import BaseModel
from .statuses import TicketPriority, TicketStatus
from .types import CaseInsensitiveEnum


class Ticket(BaseModel):
    __tablename__ = "tickets"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    category = Column(String, nullable=True)
    status = Column(
        CaseInsensitiveEnum(TicketStatus, name="ticketstatus"),
        nullable=False,
        default=TicketStatus.OPEN,
        index=True,
    )
    priority = Column(
        CaseInsensitiveEnum(TicketPriority, name="ticketpriority"),
        nullable=False,
        default=TicketPriority.MEDIUM,
    )
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    request_id = Column(Integer, ForeignKey("requests.id"), nullable=True)
    resolved_at = Column(DateTime, nullable=True)

    user = relationship("User", back_populates="tickets")
    request = relationship("ServiceRequest", back_populates="tickets")
    replies = relationship(
        "TicketReply",
        back_populates="ticket",
        order_by="TicketReply.id",
        cascade="all, delete-orphan",
    )

    @property
    def reply_count(self) -> int:
        return len(self.replies)


class TicketReply(BaseModel):
    """One message in a ticket thread; replies are append-only."""

    __tablename__ = "ticket_replies"

    id = Column(Integer, primary_key=True, index=True)
    ticket_id = Column(Integer, ForeignKey("tickets.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    content = Column(Text, nullable=False)
    is_admin = Column(Boolean, nullable=False, default=False)

    ticket = relationship("Ticket", back_populates="replies")
    user = relationship("User")
