from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from ..models.statuses import DisputeStatus, PaymentStatus
from .common import upper_enum_value
from .user import UserSummary


class PaymentCreate(BaseModel):
    request_id: int
    amount: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)
    receipt_url: Optional[str] = None


class PaymentReview(BaseModel):
    """Admin decision on a submitted payment."""

    status: Literal["APPROVED", "REJECTED"]
    rejection_reason: Optional[str] = None
    fraud_flagged: Optional[bool] = None
    fraud_notes: Optional[str] = None

    _upper = field_validator("status", mode="before")(upper_enum_value)


class DisputeCreate(BaseModel):
    explanation: str = Field(min_length=1)
    additional_files: Optional[str] = None


class DisputeResolve(BaseModel):
    status: Literal["RESOLVED", "REJECTED"]
    admin_response: Optional[str] = None
    approve_payment: bool = False

    _upper = field_validator("status", mode="before")(upper_enum_value)


class DisputeResponse(BaseModel):
    id: int
    payment_id: int
    explanation: str
    additional_files: str
    admin_response: Optional[str] = None
    status: DisputeStatus
    payment_status_before: Optional[PaymentStatus] = None
    resolved_at: Optional[datetime] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class PaymentRequestSummary(BaseModel):
    id: int
    title: str
    status: str

    model_config = {"from_attributes": True}


class PaymentResponse(BaseModel):
    id: int
    reference_number: str
    amount: Decimal
    currency: str
    receipt_url: Optional[str] = None
    status: PaymentStatus
    rejection_reason: Optional[str] = None
    fraud_flagged: bool
    fraud_notes: Optional[str] = None
    reviewed_by: Optional[int] = None
    reviewed_at: Optional[datetime] = None
    user_id: int
    request_id: int
    created_at: datetime
    user: Optional[UserSummary] = None
    request: Optional[PaymentRequestSummary] = None
    dispute: Optional[DisputeResponse] = None

    model_config = {"from_attributes": True}
