from typing import List, Optional, Tuple

from sqlalchemy.orm import Session, joinedload, selectinload

from .. import models
from ..utils.pagination import paginate


def get_request(db: Session, request_id: int) -> Optional[models.ServiceRequest]:
    return (
        db.query(models.ServiceRequest)
        .options(
            joinedload(models.ServiceRequest.user),
            joinedload(models.ServiceRequest.service),
            selectinload(models.ServiceRequest.payments),
            selectinload(models.ServiceRequest.files),
            selectinload(models.ServiceRequest.deliverables),
        )
        .filter(models.ServiceRequest.id == request_id)
        .first()
    )


def list_requests(
    db: Session,
    *,
    user_id: Optional[int] = None,
    status: Optional[models.RequestStatus] = None,
    page: int = 1,
    limit: int = 10,
) -> Tuple[List[models.ServiceRequest], dict]:
    """Newest first. ``user_id`` scopes the list to one student."""
    query = db.query(models.ServiceRequest).options(
        joinedload(models.ServiceRequest.user),
        joinedload(models.ServiceRequest.service),
        selectinload(models.ServiceRequest.payments),
    )
    if user_id is not None:
        query = query.filter(models.ServiceRequest.user_id == user_id)
    if status is not None:
        query = query.filter(models.ServiceRequest.status == status)
    query = query.order_by(
        models.ServiceRequest.created_at.desc(), models.ServiceRequest.id.desc()
    )
    return paginate(query, page, limit)
