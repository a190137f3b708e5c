from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional

from .. import crud, schemas
from ..database import get_db
from ..services.policy import Action, Actor
from .dependencies import require_action

router = APIRouter(tags=["audit-logs"])


@router.get("/", response_model=schemas.Page[schemas.AuditLogResponse])
def list_audit_logs(
    action: Optional[str] = None,
    entity_type: Optional[str] = Query(default=None, alias="entityType"),
    user_id: Optional[int] = Query(default=None, alias="userId"),
    page: int = 1,
    limit: int = 50,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_action(Action.VIEW_AUDIT_LOGS)),
):
    rows, meta = crud.crud_audit.list_audit_logs(
        db,
        action=action,
        entity_type=entity_type,
        user_id=user_id,
        page=page,
        limit=limit,
    )
    return {"items": rows, "pagination": meta}
