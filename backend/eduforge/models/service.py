# backend/eduforge/models/service.py
from sqlalchemy import Boolean, Column, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship
from .base import BaseModel


class Service(BaseModel):
    """An academic-assistance offering students can request."""

    __tablename__ = "services"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    slug = Column(String, unique=True, index=True, nullable=False)
    description = Column(Text, nullable=False)
    long_description = Column(Text, nullable=True)
    ideal_use_case = Column(String, nullable=True)
    estimated_turnaround = Column(String, nullable=True)
    price = Column(Numeric(10, 2), nullable=False, default=0)
    pricing_note = Column(String, nullable=True)
    sort_order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)

    requests = relationship("ServiceRequest", back_populates="service")
