"""Request attachments and admin deliverables backed by local file storage."""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from .. import crud, models
from ..models import RequestStatus
from ..utils import storage
from ..utils.audit import record_audit
from ..utils.errors import NotFound
from ..utils.notifications import notify_deliverable_added
from .policy import Action, Actor, authorize, ensure_owner
from .transitions import REQUEST_TRANSITIONS, check_transition
from .uow import atomic

logger = logging.getLogger(__name__)


def _load_request(db: Session, request_id: int) -> models.ServiceRequest:
    req = db.get(models.ServiceRequest, request_id)
    if req is None:
        raise NotFound("Request not found", {"request_id": "not_found"})
    return req


def upload_file(
    db: Session,
    actor: Actor,
    request_id: int,
    filename: str,
    data: bytes,
    content_type: Optional[str] = None,
) -> models.UploadedFile:
    """Attach supporting material to a request the actor owns."""
    authorize(actor, Action.UPLOAD_FILE)
    max_bytes, allowed = crud.crud_setting.get_file_limits(db)
    storage.validate_upload(filename, len(data), max_bytes, allowed)
    req = _load_request(db, request_id)
    ensure_owner(actor, req.user_id, "request")

    stored = storage.save_bytes(data, filename, content_type, folder="files")
    try:
        with atomic(db, "upload_file"):
            record = models.UploadedFile(
                user_id=actor.id,
                request=req,
                **stored.model_dump(),
            )
            db.add(record)
            db.flush()
            record_audit(
                db,
                actor.id,
                "UPLOAD_FILE",
                "FILE",
                record.id,
                {"file_name": filename, "request_id": req.id},
            )
    except Exception:
        storage.remove_stored(stored, folder="files")
        raise
    db.refresh(record)
    return record


def add_deliverable(
    db: Session,
    actor: Actor,
    request_id: int,
    filename: str,
    data: bytes,
    content_type: Optional[str] = None,
    description: Optional[str] = None,
) -> models.Deliverable:
    """Upload fulfillment output; the first one marks the request DELIVERED.

    Unpaid and closed requests refuse deliverables while transitions are
    enforced.
    """
    authorize(actor, Action.UPLOAD_DELIVERABLE)
    max_bytes, allowed = crud.crud_setting.get_file_limits(db)
    storage.validate_upload(filename, len(data), max_bytes, allowed)
    req = _load_request(db, request_id)
    check_transition("request", REQUEST_TRANSITIONS, req.status, RequestStatus.DELIVERED)

    stored = storage.save_bytes(data, filename, content_type, folder="deliverables")
    try:
        with atomic(db, "add_deliverable"):
            first = (
                db.query(models.Deliverable)
                .filter(models.Deliverable.request_id == req.id)
                .count()
                == 0
            )
            deliverable = models.Deliverable(
                request=req,
                description=description,
                **stored.model_dump(),
            )
            db.add(deliverable)
            if first and req.status != RequestStatus.DELIVERED:
                req.status = RequestStatus.DELIVERED
                req.delivered_at = datetime.utcnow()
                logger.info("request %s delivered by first deliverable", req.id)
            db.flush()
            record_audit(
                db,
                actor.id,
                "UPLOAD_DELIVERABLE",
                "DELIVERABLE",
                deliverable.id,
                {"request_id": req.id},
            )
            notify_deliverable_added(db, req)
    except Exception:
        storage.remove_stored(stored, folder="deliverables")
        raise
    db.refresh(deliverable)
    return deliverable
