from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional

from .. import crud, schemas
from ..database import get_db
from ..models import RequestStatus
from ..services import request_workflow
from ..services.policy import Action, Actor
from ..services.transitions import coerce_status
from .dependencies import get_current_actor, require_action

router = APIRouter(tags=["requests"])


@router.get("/", response_model=schemas.Page[schemas.RequestResponse])
def list_requests(
    status_filter: Optional[str] = Query(default=None, alias="status"),
    page: int = 1,
    limit: int = 10,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """Students see their own requests; admins see everything."""
    rows, meta = crud.crud_request.list_requests(
        db,
        user_id=None if actor.is_admin else actor.id,
        status=coerce_status(RequestStatus, status_filter) if status_filter else None,
        page=page,
        limit=limit,
    )
    return {"items": rows, "pagination": meta}


@router.post("/", response_model=schemas.RequestResponse, status_code=status.HTTP_201_CREATED)
def create_request(
    request_in: schemas.RequestCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_action(Action.CREATE_REQUEST)),
):
    return request_workflow.create_request(db, actor, request_in)


@router.get("/{request_id}", response_model=schemas.RequestDetail)
def read_request(
    request_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    return request_workflow.get_request_for(db, actor, request_id)


@router.put("/{request_id}", response_model=schemas.RequestResponse)
def update_request_status(
    request_id: int,
    update: schemas.RequestStatusUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_action(Action.UPDATE_REQUEST_STATUS)),
):
    return request_workflow.update_request_status(
        db, request_id, update.status, actor, rejection_reason=update.rejection_reason
    )
