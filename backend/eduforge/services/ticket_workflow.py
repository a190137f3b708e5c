"""Support tickets: creation, admin status changes and threaded replies."""

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from .. import crud, models, schemas
from ..models import TicketPriority, TicketStatus
from ..utils.audit import record_audit
from ..utils.errors import NotFound, ValidationFailed
from ..utils.notifications import (
    notify_ticket_created,
    notify_ticket_reply,
    notify_ticket_status,
)
from .policy import Action, Actor, authorize, ensure_owner
from .transitions import TICKET_TRANSITIONS, check_transition, coerce_status
from .uow import atomic

logger = logging.getLogger(__name__)

ENTITY = "TICKET"

RESOLVING = (TicketStatus.RESOLVED, TicketStatus.CLOSED)


def create_ticket(db: Session, actor: Actor, data: schemas.TicketCreate) -> models.Ticket:
    authorize(actor, Action.CREATE_TICKET)
    with atomic(db, "create_ticket"):
        if data.request_id is not None:
            req = db.get(models.ServiceRequest, data.request_id)
            if req is None:
                raise NotFound("Request not found", {"request_id": "not_found"})
            ensure_owner(actor, req.user_id, "request")

        ticket = models.Ticket(
            title=data.title.strip(),
            category=data.category,
            priority=data.priority or TicketPriority.MEDIUM,
            status=TicketStatus.OPEN,
            user_id=actor.id,
            request_id=data.request_id,
        )
        db.add(ticket)
        db.flush()
        if data.content and data.content.strip():
            db.add(
                models.TicketReply(
                    ticket_id=ticket.id,
                    user_id=actor.id,
                    content=data.content.strip(),
                    is_admin=actor.is_admin,
                )
            )
        notify_ticket_created(db, ticket)
        record_audit(
            db,
            actor.id,
            "CREATE_TICKET",
            ENTITY,
            ticket.id,
            {"title": ticket.title, "priority": ticket.priority.value},
        )
    db.refresh(ticket)
    return ticket


def get_ticket_for(db: Session, actor: Actor, ticket_id: int) -> models.Ticket:
    ticket = crud.crud_ticket.get_ticket(db, ticket_id)
    if ticket is None:
        raise NotFound("Ticket not found", {"ticket_id": "not_found"})
    ensure_owner(actor, ticket.user_id, "ticket")
    return ticket


def update_ticket_status(
    db: Session,
    ticket_id: int,
    new_status,
    actor: Actor,
    priority=None,
) -> models.Ticket:
    authorize(actor, Action.UPDATE_TICKET_STATUS)
    status = coerce_status(TicketStatus, new_status)
    new_priority = (
        coerce_status(TicketPriority, priority, "priority") if priority is not None else None
    )
    with atomic(db, "update_ticket_status"):
        ticket = db.get(models.Ticket, ticket_id)
        if ticket is None:
            raise NotFound("Ticket not found", {"ticket_id": "not_found"})
        previous = ticket.status
        check_transition("ticket", TICKET_TRANSITIONS, previous, status)

        ticket.status = status
        if new_priority is not None:
            ticket.priority = new_priority
        if status in RESOLVING:
            ticket.resolved_at = datetime.utcnow()

        record_audit(
            db,
            actor.id,
            f"UPDATE_TICKET_STATUS_{status.value}",
            ENTITY,
            ticket.id,
            {
                "status": status.value,
                "priority": new_priority.value if new_priority else None,
            },
        )
        notify_ticket_status(db, ticket)
        logger.info(
            "ticket %s: %s -> %s by admin %s", ticket.id, previous.value, status.value, actor.id
        )
    db.refresh(ticket)
    return ticket


def add_ticket_reply(
    db: Session, ticket_id: int, content: str, actor: Actor
) -> models.TicketReply:
    """Append a reply; replying to a CLOSED ticket reopens it."""
    authorize(actor, Action.ADD_TICKET_REPLY)
    if not content or not content.strip():
        raise ValidationFailed("Reply content is required", {"content": "required"})
    with atomic(db, "add_ticket_reply"):
        ticket = db.get(models.Ticket, ticket_id)
        if ticket is None:
            raise NotFound("Ticket not found", {"ticket_id": "not_found"})
        ensure_owner(actor, ticket.user_id, "ticket")

        reply = models.TicketReply(
            ticket=ticket,
            user_id=actor.id,
            content=content.strip(),
            is_admin=actor.is_admin,
        )
        db.add(reply)
        if ticket.status == TicketStatus.CLOSED:
            ticket.status = TicketStatus.IN_PROGRESS
            logger.info("ticket %s reopened by reply from user %s", ticket.id, actor.id)
        db.flush()
        notify_ticket_reply(db, ticket, from_admin=actor.is_admin)
        record_audit(
            db,
            actor.id,
            "ADD_TICKET_REPLY",
            ENTITY,
            ticket.id,
            {"reply_id": reply.id},
        )
    db.refresh(reply)
    return reply
