from sqlalchemy import Column, DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship

from .base import BaseModel
from .statuses import DisputeStatus, PaymentStatus
from .types import CaseInsensitiveEnum


class PaymentDispute(BaseModel):
    __tablename__ = "payment_disputes"

    id = Column(Integer, primary_key=True, index=True)
    # Unique: a payment carries at most one dispute.
    payment_id = Column(Integer, ForeignKey("payments.id"), nullable=False, unique=True, index=True)
    explanation = Column(Text, nullable=False)
    additional_files = Column(Text, nullable=False, default="")
    admin_response = Column(Text, nullable=True)
    status = Column(
        CaseInsensitiveEnum(DisputeStatus, name="disputestatus"),
        nullable=False,
        default=DisputeStatus.PENDING,
    )
    # Payment status when the dispute was filed; a rejected dispute restores it.
    payment_status_before = Column(
        CaseInsensitiveEnum(PaymentStatus, name="paymentstatus"), nullable=True
    )
    resolved_at = Column(DateTime, nullable=True)

    payment = relationship("Payment", back_populates="dispute")
