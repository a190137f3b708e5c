from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.orm import Session
from typing import Optional

from .. import models, schemas
from ..database import get_db
from ..services import fulfillment
from ..services.policy import Action, Actor
from ..utils.pagination import paginate
from .dependencies import get_current_actor, require_action

router = APIRouter(tags=["deliverables"])


@router.get("/", response_model=schemas.Page[schemas.DeliverableResponse])
def list_deliverables(
    request_id: Optional[int] = None,
    page: int = 1,
    limit: int = 10,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """Deliverables across the caller's requests (all requests for admins)."""
    query = db.query(models.Deliverable).join(models.ServiceRequest)
    if not actor.is_admin:
        query = query.filter(models.ServiceRequest.user_id == actor.id)
    if request_id is not None:
        query = query.filter(models.Deliverable.request_id == request_id)
    query = query.order_by(models.Deliverable.created_at.desc(), models.Deliverable.id.desc())
    rows, meta = paginate(query, page, limit)
    return {"items": rows, "pagination": meta}


@router.post(
    "/", response_model=schemas.DeliverableResponse, status_code=status.HTTP_201_CREATED
)
async def upload_deliverable(
    request_id: int = Form(...),
    description: Optional[str] = Form(default=None),
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_action(Action.UPLOAD_DELIVERABLE)),
):
    try:
        data = await file.read()
    finally:
        await file.close()
    return fulfillment.add_deliverable(
        db,
        actor,
        request_id,
        file.filename or "",
        data,
        file.content_type,
        description=description,
    )
