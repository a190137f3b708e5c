from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from ..models.statuses import UserRole


class AuditActor(BaseModel):
    id: int
    name: str
    email: str
    role: UserRole

    model_config = {"from_attributes": True}


class AuditLogResponse(BaseModel):
    id: int
    user_id: int
    action: str
    entity_type: str
    entity_id: str
    changes: Optional[str] = None
    created_at: datetime
    user: Optional[AuditActor] = None

    model_config = {"from_attributes": True}
