from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from .base import BaseModel
from .statuses import ContactStatus
from .types import CaseInsensitiveEnum


class ContactMessage(BaseModel):
    """A message sent through the public contact form.

    Submitters need no account; ``admin_id`` records who last answered or
    archived it.
    """

    __tablename__ = "contact_messages"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False, index=True)
    subject = Column(String, nullable=False)
    message = Column(Text, nullable=False)
    status = Column(
        CaseInsensitiveEnum(ContactStatus, name="contactstatus"),
        nullable=False,
        default=ContactStatus.PENDING,
        index=True,
    )
    response = Column(Text, nullable=True)
    admin_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    responded_at = Column(DateTime, nullable=True)

    admin = relationship("User")
