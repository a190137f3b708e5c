from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from .. import crud, schemas
from ..database import get_db
from ..schemas.service import ServiceCreate, ServiceResponse, ServiceUpdate
from ..services.policy import Action, Actor
from ..services.uow import atomic
from ..utils import error_response
from .dependencies import require_action

router = APIRouter(tags=["services"])


@router.get("/", response_model=List[ServiceResponse])
def list_services(db: Session = Depends(get_db)):
    """Public catalog of active services, in display order."""
    return crud.service.list_services(db)


@router.get("/all", response_model=List[ServiceResponse])
def list_all_services(
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_action(Action.MANAGE_SERVICES)),
):
    return crud.service.list_services(db, include_inactive=True)


@router.get("/{service_ref}", response_model=ServiceResponse)
def read_service(service_ref: str, db: Session = Depends(get_db)):
    """Look up a service by numeric id or slug."""
    svc = (
        crud.service.get_service(db, int(service_ref))
        if service_ref.isdigit()
        else crud.service.get_service_by_slug(db, service_ref)
    )
    if svc is None:
        raise error_response(
            "Service not found", {"service": "not_found"}, status.HTTP_404_NOT_FOUND
        )
    return svc


@router.post("/", response_model=ServiceResponse, status_code=status.HTTP_201_CREATED)
def create_service(
    service_in: ServiceCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_action(Action.MANAGE_SERVICES)),
):
    with atomic(db, "create_service"):
        svc = crud.service.create_service(db, service_in)
    db.refresh(svc)
    return svc


@router.put("/{service_id}", response_model=ServiceResponse)
def update_service(
    service_id: int,
    service_in: ServiceUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_action(Action.MANAGE_SERVICES)),
):
    svc = crud.service.get_service(db, service_id)
    if svc is None:
        raise error_response(
            "Service not found", {"service_id": "not_found"}, status.HTTP_404_NOT_FOUND
        )
    with atomic(db, "update_service"):
        crud.service.update_service(db, svc, service_in)
    db.refresh(svc)
    return svc


@router.delete("/{service_id}", response_model=ServiceResponse)
def deactivate_service(
    service_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_action(Action.MANAGE_SERVICES)),
):
    """Services referenced by requests are never removed, only deactivated."""
    svc = crud.service.get_service(db, service_id)
    if svc is None:
        raise error_response(
            "Service not found", {"service_id": "not_found"}, status.HTTP_404_NOT_FOUND
        )
    with atomic(db, "deactivate_service"):
        crud.service.update_service(db, svc, schemas.ServiceUpdate(is_active=False))
    db.refresh(svc)
    return svc
