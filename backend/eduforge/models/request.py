from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from .base import BaseModel
from .statuses import RequestStatus
from .types import CaseInsensitiveEnum


class ServiceRequest(BaseModel):
    """A student's order for one Service.

    Requests are never deleted; status moves through :class:`RequestStatus`
    via admin updates, payment decisions and deliverable uploads.
    """

    __tablename__ = "requests"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    service_id = Column(Integer, ForeignKey("services.id"), nullable=False, index=True)

    title = Column(String, nullable=False)
    instructions = Column(Text, nullable=False)
    academic_level = Column(String, nullable=True)
    deadline = Column(DateTime, nullable=False)
    notes = Column(Text, nullable=True)

    status = Column(
        CaseInsensitiveEnum(RequestStatus, name="requeststatus"),
        nullable=False,
        default=RequestStatus.CREATED,
        index=True,
    )
    rejection_reason = Column(String, nullable=True)
    delivered_at = Column(DateTime, nullable=True)
    closed_at = Column(DateTime, nullable=True)

    user = relationship("User", back_populates="requests")
    service = relationship("Service", back_populates="requests")
    payments = relationship(
        "Payment",
        back_populates="request",
        order_by="Payment.id",
        cascade="all, delete-orphan",
    )
    files = relationship(
        "UploadedFile",
        back_populates="request",
        order_by="UploadedFile.id.desc()",
        cascade="all, delete-orphan",
    )
    deliverables = relationship(
        "Deliverable",
        back_populates="request",
        order_by="Deliverable.id.desc()",
        cascade="all, delete-orphan",
    )
    tickets = relationship("Ticket", back_populates="request")

    @property
    def latest_payment(self):
        return self.payments[-1] if self.payments else None
