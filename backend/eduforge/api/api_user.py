from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional

from .. import crud, schemas
from ..database import get_db
from ..models import UserRole
from ..services import account
from ..services.policy import Action, Actor, ensure_owner
from ..services.transitions import coerce_status
from ..utils import error_response
from .dependencies import get_current_actor, require_action

router = APIRouter(tags=["users"])


@router.get("/", response_model=schemas.Page[schemas.UserResponse])
def list_users(
    role: Optional[str] = None,
    search: Optional[str] = Query(default=None, max_length=100),
    page: int = 1,
    limit: int = 10,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_action(Action.LIST_USERS)),
):
    rows, meta = crud.user.list_users(
        db,
        role=coerce_status(UserRole, role, "role") if role else None,
        search=search,
        page=page,
        limit=limit,
    )
    return {"items": rows, "pagination": meta}


@router.post("/", response_model=schemas.UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    user_in: schemas.UserAdminCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_action(Action.CREATE_USER)),
):
    return account.create_user(db, actor, user_in, role=user_in.role)


@router.get("/{user_id}", response_model=schemas.UserResponse)
def read_user(
    user_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    user = crud.user.get_user(db, user_id)
    if user is None:
        raise error_response(
            "User not found", {"user_id": "not_found"}, status.HTTP_404_NOT_FOUND
        )
    ensure_owner(actor, user.id, "user")
    return user


@router.put("/{user_id}", response_model=schemas.UserResponse)
def update_user(
    user_id: int,
    user_in: schemas.UserUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_action(Action.UPDATE_USER)),
):
    return account.update_user(db, actor, user_id, user_in)
