from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class ServiceBase(BaseModel):
    name: Optional[str] = None
    slug: Optional[str] = Field(default=None, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    description: Optional[str] = None
    long_description: Optional[str] = None
    ideal_use_case: Optional[str] = None
    estimated_turnaround: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, ge=0)
    pricing_note: Optional[str] = None
    sort_order: Optional[int] = None
    is_active: Optional[bool] = None


class ServiceCreate(ServiceBase):
    name: str = Field(min_length=1)
    slug: str = Field(pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    description: str
    price: Decimal = Field(default=Decimal("0"), ge=0)
    sort_order: int = 0
    is_active: bool = True


class ServiceUpdate(ServiceBase):
    pass


class ServiceSummary(BaseModel):
    id: int
    name: str

    model_config = {"from_attributes": True}


class ServiceResponse(ServiceBase):
    id: int
    name: str
    slug: str
    description: str
    price: Decimal
    sort_order: int
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}
