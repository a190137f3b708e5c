from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from .base import BaseModel
from .statuses import PaymentStatus
from .types import CaseInsensitiveEnum


class Payment(BaseModel):
    """Proof of a manual payment against a Request, reconciled by an admin."""

    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    reference_number = Column(String, unique=True, index=True, nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    currency = Column(String(3), nullable=False, default="USD")
    receipt_url = Column(String, nullable=True)

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    request_id = Column(Integer, ForeignKey("requests.id"), nullable=False, index=True)

    status = Column(
        CaseInsensitiveEnum(PaymentStatus, name="paymentstatus"),
        nullable=False,
        default=PaymentStatus.PENDING,
        index=True,
    )
    rejection_reason = Column(String, nullable=True)
    fraud_flagged = Column(Boolean, nullable=False, default=False)
    fraud_notes = Column(Text, nullable=True)
    reviewed_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    reviewed_at = Column(DateTime, nullable=True)

    user = relationship("User", foreign_keys=[user_id], back_populates="payments")
    reviewer = relationship("User", foreign_keys=[reviewed_by])
    request = relationship("ServiceRequest", back_populates="payments")
    dispute = relationship(
        "PaymentDispute",
        back_populates="payment",
        uselist=False,
        cascade="all, delete-orphan",
    )
