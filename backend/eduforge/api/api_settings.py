from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session
from typing import Any, Dict, List, Optional

from .. import crud, schemas
from ..database import get_db
from ..services import account
from ..services.policy import Action, Actor
from .dependencies import require_action

router = APIRouter(tags=["settings"])


@router.get("/", response_model=Dict[str, str])
def read_settings(category: Optional[str] = None, db: Session = Depends(get_db)):
    """Public key/value view of system settings."""
    return crud.crud_setting.get_settings_map(db, category)


@router.post("/", response_model=List[schemas.SettingResponse])
def update_settings(
    values: Dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_action(Action.UPDATE_SETTINGS)),
):
    """Upsert settings; ``_category`` names the category for new keys."""
    return account.update_settings(db, actor, values)
