from typing import List, Optional, Tuple

from sqlalchemy.orm import Session, joinedload

from .. import models
from ..utils.pagination import paginate


def list_audit_logs(
    db: Session,
    *,
    action: Optional[str] = None,
    entity_type: Optional[str] = None,
    user_id: Optional[int] = None,
    page: int = 1,
    limit: int = 50,
) -> Tuple[List[models.AuditLog], dict]:
    """Newest first. ``action`` matches as a prefix so ``UPDATE_PAYMENT_STATUS``
    finds every decision."""
    query = db.query(models.AuditLog).options(joinedload(models.AuditLog.user))
    if action:
        query = query.filter(models.AuditLog.action.like(f"{action}%"))
    if entity_type:
        query = query.filter(models.AuditLog.entity_type == entity_type)
    if user_id is not None:
        query = query.filter(models.AuditLog.user_id == user_id)
    query = query.order_by(models.AuditLog.created_at.desc(), models.AuditLog.id.desc())
    return paginate(query, page, limit)
