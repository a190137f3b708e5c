from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional

from .. import crud, schemas
from ..database import get_db
from ..models import TicketStatus
from ..services import ticket_workflow
from ..services.policy import Action, Actor
from ..services.transitions import coerce_status
from .dependencies import get_current_actor, require_action

router = APIRouter(tags=["tickets"])


@router.get("/", response_model=schemas.Page[schemas.TicketResponse])
def list_tickets(
    status_filter: Optional[str] = Query(default=None, alias="status"),
    page: int = 1,
    limit: int = 10,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    rows, meta = crud.crud_ticket.list_tickets(
        db,
        user_id=None if actor.is_admin else actor.id,
        status=coerce_status(TicketStatus, status_filter) if status_filter else None,
        page=page,
        limit=limit,
    )
    return {"items": rows, "pagination": meta}


@router.post("/", response_model=schemas.TicketResponse, status_code=status.HTTP_201_CREATED)
def create_ticket(
    ticket_in: schemas.TicketCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_action(Action.CREATE_TICKET)),
):
    return ticket_workflow.create_ticket(db, actor, ticket_in)


@router.get("/{ticket_id}", response_model=schemas.TicketDetail)
def read_ticket(
    ticket_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    return ticket_workflow.get_ticket_for(db, actor, ticket_id)


@router.put("/{ticket_id}", response_model=schemas.TicketResponse)
def update_ticket(
    ticket_id: int,
    update: schemas.TicketUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_action(Action.UPDATE_TICKET_STATUS)),
):
    return ticket_workflow.update_ticket_status(
        db, ticket_id, update.status, actor, priority=update.priority
    )


@router.post(
    "/{ticket_id}/replies",
    response_model=schemas.TicketReplyResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_reply(
    ticket_id: int,
    reply_in: schemas.TicketReplyCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_action(Action.ADD_TICKET_REPLY)),
):
    return ticket_workflow.add_ticket_reply(db, ticket_id, reply_in.content, actor)
