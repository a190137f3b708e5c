from sqlalchemy import Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from .base import BaseModel


class UploadedFile(BaseModel):
    """Supporting material a student (or admin) attached to a request."""

    __tablename__ = "files"

    id = Column(Integer, primary_key=True, index=True)
    file_name = Column(String, nullable=False)
    file_url = Column(String, nullable=False)
    file_type = Column(String, nullable=True)
    file_size = Column(Integer, nullable=False, default=0)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    request_id = Column(Integer, ForeignKey("requests.id"), nullable=False, index=True)

    user = relationship("User")
    request = relationship("ServiceRequest", back_populates="files")


class Deliverable(BaseModel):
    """Fulfillment output uploaded by staff for a request."""

    __tablename__ = "deliverables"

    id = Column(Integer, primary_key=True, index=True)
    file_name = Column(String, nullable=False)
    file_url = Column(String, nullable=False)
    file_type = Column(String, nullable=True)
    file_size = Column(Integer, nullable=False, default=0)
    description = Column(Text, nullable=True)
    request_id = Column(Integer, ForeignKey("requests.id"), nullable=False, index=True)

    request = relationship("ServiceRequest", back_populates="deliverables")
