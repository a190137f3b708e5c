from sqlalchemy import Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from .base import BaseModel


class AuditLog(BaseModel):
    """Append-only record of a mutating action.

    ``changes`` holds the JSON-serialized request body (or the narrower set of
    changed keys) exactly as the caller supplied it.
    """

    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    action = Column(String, nullable=False, index=True)
    entity_type = Column(String, nullable=False, index=True)
    entity_id = Column(String, nullable=False)
    changes = Column(Text, nullable=True)

    user = relationship("User")
