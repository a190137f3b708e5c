from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional

from .. import crud, schemas
from ..database import get_db
from ..models import ContactStatus
from ..services import contact_desk
from ..services.policy import Action, Actor
from ..services.transitions import coerce_status
from .dependencies import require_action

router = APIRouter(tags=["contacts"])


@router.post("/", response_model=schemas.ContactResponse, status_code=status.HTTP_201_CREATED)
def submit_contact(contact_in: schemas.ContactCreate, db: Session = Depends(get_db)):
    """Public contact form; no account needed."""
    return contact_desk.submit_contact(db, contact_in)


@router.get("/", response_model=schemas.Page[schemas.ContactResponse])
def list_contacts(
    status_filter: Optional[str] = Query(default=None, alias="status"),
    page: int = 1,
    limit: int = 10,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_action(Action.MANAGE_CONTACTS)),
):
    # "all" is what the admin filter dropdown sends for no filter
    wanted = None
    if status_filter and status_filter.lower() != "all":
        wanted = coerce_status(ContactStatus, status_filter)
    rows, meta = crud.crud_contact.list_contacts(db, status=wanted, page=page, limit=limit)
    return {"items": rows, "pagination": meta}


@router.put("/{contact_id}", response_model=schemas.ContactResponse)
def update_contact(
    contact_id: int,
    update: schemas.ContactUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_action(Action.MANAGE_CONTACTS)),
):
    return contact_desk.update_contact(
        db, contact_id, actor, new_status=update.status, response=update.response
    )


@router.delete("/{contact_id}")
def delete_contact(
    contact_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_action(Action.MANAGE_CONTACTS)),
):
    contact_desk.delete_contact(db, contact_id, actor)
    return {"message": "Contact deleted successfully"}
