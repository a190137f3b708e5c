from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from ..models.statuses import PaymentStatus, RequestStatus
from .common import upper_enum_value
from .file import DeliverableResponse, FileResponse
from .service import ServiceSummary
from .user import UserSummary


class RequestCreate(BaseModel):
    service_id: int
    title: str = Field(min_length=1)
    instructions: str = Field(min_length=1)
    academic_level: Optional[str] = None
    deadline: datetime
    notes: Optional[str] = None


class RequestStatusUpdate(BaseModel):
    status: RequestStatus
    rejection_reason: Optional[str] = None

    _upper = field_validator("status", mode="before")(upper_enum_value)


class RequestPaymentSummary(BaseModel):
    id: int
    reference_number: str
    amount: Decimal
    status: PaymentStatus

    model_config = {"from_attributes": True}


class RequestResponse(BaseModel):
    id: int
    user_id: int
    service_id: int
    title: str
    instructions: str
    academic_level: Optional[str] = None
    deadline: datetime
    notes: Optional[str] = None
    status: RequestStatus
    rejection_reason: Optional[str] = None
    delivered_at: Optional[datetime] = None
    closed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    user: Optional[UserSummary] = None
    service: Optional[ServiceSummary] = None
    latest_payment: Optional[RequestPaymentSummary] = None

    model_config = {"from_attributes": True}


class RequestDetail(RequestResponse):
    payments: List[RequestPaymentSummary] = []
    files: List[FileResponse] = []
    deliverables: List[DeliverableResponse] = []
