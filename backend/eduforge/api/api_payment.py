from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional

from .. import crud, schemas
from ..database import get_db
from ..models import PaymentStatus
from ..services import payment_workflow
from ..services.policy import Action, Actor, ensure_owner
from ..services.transitions import coerce_status
from ..utils import error_response
from .dependencies import get_current_actor, require_action

router = APIRouter(tags=["payments"])


@router.get("/", response_model=schemas.Page[schemas.PaymentResponse])
def list_payments(
    status_filter: Optional[str] = Query(default=None, alias="status"),
    page: int = 1,
    limit: int = 10,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    rows, meta = crud.crud_payment.list_payments(
        db,
        user_id=None if actor.is_admin else actor.id,
        status=coerce_status(PaymentStatus, status_filter) if status_filter else None,
        page=page,
        limit=limit,
    )
    return {"items": rows, "pagination": meta}


@router.post("/", response_model=schemas.PaymentResponse, status_code=status.HTTP_201_CREATED)
def submit_payment(
    payment_in: schemas.PaymentCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_action(Action.SUBMIT_PAYMENT)),
):
    return payment_workflow.submit_payment(
        db,
        payment_in.request_id,
        payment_in.amount,
        payment_in.receipt_url,
        actor,
        currency=payment_in.currency,
    )


@router.get("/{payment_id}", response_model=schemas.PaymentResponse)
def read_payment(
    payment_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    payment = crud.crud_payment.get_payment(db, payment_id)
    if payment is None:
        raise error_response(
            "Payment not found", {"payment_id": "not_found"}, status.HTTP_404_NOT_FOUND
        )
    ensure_owner(actor, payment.user_id, "payment")
    return payment


@router.put("/{payment_id}", response_model=schemas.PaymentResponse)
def review_payment(
    payment_id: int,
    review: schemas.PaymentReview,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_action(Action.REVIEW_PAYMENT)),
):
    return payment_workflow.review_payment(
        db,
        payment_id,
        review.status,
        actor,
        reason=review.rejection_reason,
        fraud_flag=review.fraud_flagged,
        fraud_notes=review.fraud_notes,
    )


@router.post(
    "/{payment_id}/dispute",
    response_model=schemas.DisputeResponse,
    status_code=status.HTTP_201_CREATED,
)
def file_dispute(
    payment_id: int,
    dispute_in: schemas.DisputeCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_action(Action.FILE_DISPUTE)),
):
    return payment_workflow.file_dispute(
        db,
        payment_id,
        dispute_in.explanation,
        actor,
        additional_files=dispute_in.additional_files,
    )


@router.put("/{payment_id}/dispute", response_model=schemas.DisputeResponse)
def resolve_dispute(
    payment_id: int,
    resolution: schemas.DisputeResolve,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_action(Action.RESOLVE_DISPUTE)),
):
    return payment_workflow.resolve_dispute(
        db,
        payment_id,
        resolution.status,
        actor,
        admin_response=resolution.admin_response,
        approve_payment=resolution.approve_payment,
    )
