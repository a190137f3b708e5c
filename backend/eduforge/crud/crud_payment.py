from typing import List, Optional, Tuple

from sqlalchemy.orm import Session, joinedload

from .. import models
from ..utils.pagination import paginate


def get_payment(db: Session, payment_id: int) -> Optional[models.Payment]:
    return (
        db.query(models.Payment)
        .options(
            joinedload(models.Payment.request),
            joinedload(models.Payment.user),
            joinedload(models.Payment.dispute),
        )
        .filter(models.Payment.id == payment_id)
        .first()
    )


def get_payment_by_reference(db: Session, reference_number: str) -> Optional[models.Payment]:
    return (
        db.query(models.Payment)
        .filter(models.Payment.reference_number == reference_number)
        .first()
    )


def list_payments(
    db: Session,
    *,
    user_id: Optional[int] = None,
    status: Optional[models.PaymentStatus] = None,
    page: int = 1,
    limit: int = 10,
) -> Tuple[List[models.Payment], dict]:
    query = db.query(models.Payment).options(
        joinedload(models.Payment.request),
        joinedload(models.Payment.user),
        joinedload(models.Payment.dispute),
    )
    if user_id is not None:
        query = query.filter(models.Payment.user_id == user_id)
    if status is not None:
        query = query.filter(models.Payment.status == status)
    query = query.order_by(models.Payment.created_at.desc(), models.Payment.id.desc())
    return paginate(query, page, limit)


def get_dispute_for_payment(db: Session, payment_id: int) -> Optional[models.PaymentDispute]:
    return (
        db.query(models.PaymentDispute)
        .filter(models.PaymentDispute.payment_id == payment_id)
        .first()
    )
