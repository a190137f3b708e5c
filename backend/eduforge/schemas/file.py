from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class StoredFile(BaseModel):
    """Descriptor returned by the file-storage wrapper."""

    file_name: str
    file_url: str
    file_type: Optional[str] = None
    file_size: int


class FileResponse(StoredFile):
    id: int
    user_id: int
    request_id: int
    created_at: datetime

    model_config = {"from_attributes": True}


class DeliverableResponse(StoredFile):
    id: int
    request_id: int
    description: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}
