"""Public contact-form submissions and their admin triage."""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from .. import crud, models, schemas
from ..models import ContactStatus
from ..utils.audit import record_audit
from ..utils.errors import NotFound
from .policy import Action, Actor, authorize
from .uow import atomic

logger = logging.getLogger(__name__)

ENTITY = "CONTACT"


def submit_contact(db: Session, data: schemas.ContactCreate) -> models.ContactMessage:
    with atomic(db, "submit_contact"):
        contact = models.ContactMessage(
            name=data.name,
            email=data.email.lower(),
            subject=data.subject,
            message=data.message,
            status=ContactStatus.PENDING,
        )
        db.add(contact)
        db.flush()
        logger.info("contact message %s received from %s", contact.id, contact.email)
    db.refresh(contact)
    return contact


def _load(db: Session, contact_id: int) -> models.ContactMessage:
    contact = crud.crud_contact.get_contact(db, contact_id)
    if contact is None:
        raise NotFound("Contact message not found", {"contact_id": "not_found"})
    return contact


def update_contact(
    db: Session,
    contact_id: int,
    actor: Actor,
    new_status: Optional[ContactStatus] = None,
    response: Optional[str] = None,
) -> models.ContactMessage:
    """Reply to, reopen or archive a submission. No status means a reply."""
    authorize(actor, Action.MANAGE_CONTACTS)
    target = new_status or ContactStatus.RESPONDED
    with atomic(db, "update_contact"):
        contact = _load(db, contact_id)
        previous = contact.status
        contact.status = target
        if response is not None:
            contact.response = response.strip()
        contact.admin_id = actor.id
        if target == ContactStatus.RESPONDED:
            contact.responded_at = datetime.utcnow()
        record_audit(
            db,
            actor.id,
            f"UPDATE_CONTACT_{target.value}",
            ENTITY,
            contact.id,
            {"status": target.value, "response": response},
        )
        logger.info(
            "contact %s: %s -> %s by admin %s",
            contact.id,
            previous.value,
            target.value,
            actor.id,
        )
    db.refresh(contact)
    return contact


def delete_contact(db: Session, contact_id: int, actor: Actor) -> None:
    authorize(actor, Action.MANAGE_CONTACTS)
    with atomic(db, "delete_contact"):
        contact = _load(db, contact_id)
        record_audit(
            db,
            actor.id,
            "DELETE_CONTACT",
            ENTITY,
            contact.id,
            {"email": contact.email, "subject": contact.subject},
        )
        db.delete(contact)
