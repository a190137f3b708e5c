from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.orm import Session
from typing import List
import logging

from .. import schemas
from ..database import get_db
from ..services import fulfillment, request_workflow
from ..services.policy import Action, Actor
from .dependencies import get_current_actor, require_action

router = APIRouter(tags=["files"])

logger = logging.getLogger(__name__)


@router.get("/", response_model=List[schemas.FileResponse])
def list_request_files(
    request_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    req = request_workflow.get_request_for(db, actor, request_id)
    return req.files


@router.post("/", response_model=schemas.FileResponse, status_code=status.HTTP_201_CREATED)
async def upload_request_file(
    request_id: int = Form(...),
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_action(Action.UPLOAD_FILE)),
):
    """Attach a supporting file to a request (owner or admin)."""
    try:
        data = await file.read()
    finally:
        await file.close()
    return fulfillment.upload_file(
        db, actor, request_id, file.filename or "", data, file.content_type
    )
