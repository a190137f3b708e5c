"""Request lifecycle: creation by students and admin status updates."""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from .. import crud, models, schemas
from ..models import RequestStatus
from ..utils.audit import record_audit
from ..utils.errors import NotFound
from ..utils.notifications import notify_request_status
from .policy import Action, Actor, authorize, ensure_owner
from .transitions import REQUEST_TRANSITIONS, check_transition, coerce_status
from .uow import atomic

logger = logging.getLogger(__name__)

ENTITY = "REQUEST"

# Statuses that tell the student something happened to their order.
NOTIFY_ON = (RequestStatus.DELIVERED, RequestStatus.CLOSED)


def create_request(
    db: Session, actor: Actor, data: schemas.RequestCreate
) -> models.ServiceRequest:
    authorize(actor, Action.CREATE_REQUEST)
    with atomic(db, "create_request"):
        service = crud.service.get_service(db, data.service_id)
        if service is None or not service.is_active:
            raise NotFound("Service not found", {"service_id": "not_found"})
        req = models.ServiceRequest(
            user_id=actor.id,
            service_id=service.id,
            title=data.title.strip(),
            instructions=data.instructions,
            academic_level=data.academic_level,
            deadline=data.deadline,
            notes=data.notes,
            status=RequestStatus.CREATED,
        )
        db.add(req)
        db.flush()
        record_audit(
            db,
            actor.id,
            "CREATE_REQUEST",
            ENTITY,
            req.id,
            {"service_id": service.id, "title": req.title},
        )
    db.refresh(req)
    return req


def get_request_for(db: Session, actor: Actor, request_id: int) -> models.ServiceRequest:
    """Load a request the actor may see (owner or admin)."""
    req = crud.crud_request.get_request(db, request_id)
    if req is None:
        raise NotFound("Request not found", {"request_id": "not_found"})
    ensure_owner(actor, req.user_id, "request")
    return req


def update_request_status(
    db: Session,
    request_id: int,
    new_status,
    actor: Actor,
    rejection_reason: Optional[str] = None,
) -> models.ServiceRequest:
    authorize(actor, Action.UPDATE_REQUEST_STATUS)
    status = coerce_status(RequestStatus, new_status)
    with atomic(db, "update_request_status"):
        req = db.get(models.ServiceRequest, request_id)
        if req is None:
            raise NotFound("Request not found", {"request_id": "not_found"})
        previous = req.status
        check_transition("request", REQUEST_TRANSITIONS, previous, status)

        req.status = status
        if rejection_reason is not None:
            req.rejection_reason = rejection_reason
        now = datetime.utcnow()
        if status == RequestStatus.DELIVERED:
            req.delivered_at = now
        elif status == RequestStatus.CLOSED:
            req.closed_at = now

        record_audit(
            db,
            actor.id,
            f"UPDATE_REQUEST_STATUS_{status.value}",
            ENTITY,
            req.id,
            {"status": status.value, "rejection_reason": rejection_reason},
        )
        if status in NOTIFY_ON:
            notify_request_status(db, req)
        logger.info(
            "request %s: %s -> %s by admin %s", req.id, previous.value, status.value, actor.id
        )
    db.refresh(req)
    return req
