"""Manual payment reconciliation and the dispute sub-workflow.

Students submit proof of payment against their request; admins approve or
reject it, which moves the request along with it. A student who disagrees
with a decision files one dispute per payment, which an admin resolves.
"""

import logging
import secrets
import string
import time
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Optional

from sqlalchemy.orm import Session

from .. import crud, models
from ..core.config import settings
from ..models import DisputeStatus, PaymentStatus, RequestStatus
from ..utils.audit import record_audit
from ..utils.errors import Conflict, NotFound, ValidationFailed
from ..utils.notifications import (
    notify_dispute_filed,
    notify_dispute_resolved,
    notify_payment_reviewed,
)
from .policy import Action, Actor, authorize, ensure_owner
from .transitions import (
    DISPUTE_TRANSITIONS,
    PAYMENT_TRANSITIONS,
    check_transition,
    coerce_status,
)
from .uow import atomic

logger = logging.getLogger(__name__)

_REF_ALPHABET = string.ascii_uppercase + string.digits

# Request states from which a (re)submission is accepted.
SUBMITTABLE = (RequestStatus.CREATED, RequestStatus.PAYMENT_REJECTED)

# Payment decision -> request status it cascades to.
DECISION_TO_REQUEST = {
    PaymentStatus.APPROVED: RequestStatus.PAYMENT_APPROVED,
    PaymentStatus.REJECTED: RequestStatus.PAYMENT_REJECTED,
}


def _is_current(payment: models.Payment) -> bool:
    """Only the newest payment of a request drives the request status."""
    return payment.request.latest_payment is payment


def _cascade_decision(payment: models.Payment) -> None:
    target = DECISION_TO_REQUEST.get(payment.status)
    if target is not None and _is_current(payment):
        payment.request.status = target


def generate_reference_number() -> str:
    """``PAY-<epoch millis>-<9 uppercase alphanumerics>``."""
    suffix = "".join(secrets.choice(_REF_ALPHABET) for _ in range(9))
    return f"PAY-{int(time.time() * 1000)}-{suffix}"


def _unique_reference(db: Session) -> str:
    ref = generate_reference_number()
    while crud.crud_payment.get_payment_by_reference(db, ref) is not None:
        ref = generate_reference_number()
    return ref


def _positive_amount(amount) -> Decimal:
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, ValueError):
        raise ValidationFailed("Amount must be a number", {"amount": "invalid"}) from None
    if not value.is_finite() or value <= 0:
        raise ValidationFailed("Amount must be positive", {"amount": "must_be_positive"})
    return value


def submit_payment(
    db: Session,
    request_id: int,
    amount,
    receipt_ref: Optional[str],
    actor: Actor,
    currency: Optional[str] = None,
) -> models.Payment:
    authorize(actor, Action.SUBMIT_PAYMENT)
    value = _positive_amount(amount)
    with atomic(db, "submit_payment"):
        req = db.get(models.ServiceRequest, request_id)
        if req is None:
            raise NotFound("Request not found", {"request_id": "not_found"})
        ensure_owner(actor, req.user_id, "request")
        if settings.WORKFLOW_ENFORCE_TRANSITIONS and req.status not in SUBMITTABLE:
            raise Conflict(
                f"Cannot submit a payment while the request is {req.status.value}",
                {"status": "invalid_transition"},
            )
        current = req.latest_payment
        if (
            current is not None
            and current.dispute is not None
            and current.dispute.status == DisputeStatus.PENDING
        ):
            raise Conflict(
                "The previous payment has an open dispute", {"request_id": "dispute_pending"}
            )

        payment = models.Payment(
            reference_number=_unique_reference(db),
            amount=value,
            currency=(currency or settings.DEFAULT_CURRENCY).upper(),
            receipt_url=receipt_ref,
            user_id=actor.id,
            request=req,
            status=PaymentStatus.PENDING,
        )
        db.add(payment)
        req.status = RequestStatus.PAYMENT_SUBMITTED
        db.flush()
        record_audit(
            db,
            actor.id,
            "SUBMIT_PAYMENT",
            "PAYMENT",
            payment.id,
            {
                "request_id": req.id,
                "amount": value,
                "currency": payment.currency,
                "reference_number": payment.reference_number,
            },
        )
        logger.info(
            "payment %s submitted for request %s (%s %s)",
            payment.reference_number,
            req.id,
            value,
            payment.currency,
        )
    db.refresh(payment)
    return payment


def review_payment(
    db: Session,
    payment_id: int,
    decision,
    actor: Actor,
    reason: Optional[str] = None,
    fraud_flag: Optional[bool] = None,
    fraud_notes: Optional[str] = None,
) -> models.Payment:
    """Approve or reject a payment and move its request to match."""
    authorize(actor, Action.REVIEW_PAYMENT)
    status = coerce_status(PaymentStatus, decision)
    if status not in DECISION_TO_REQUEST:
        raise ValidationFailed(
            "Decision must be APPROVED or REJECTED", {"status": "invalid"}
        )
    with atomic(db, "review_payment"):
        payment = crud.crud_payment.get_payment(db, payment_id)
        if payment is None:
            raise NotFound("Payment not found", {"payment_id": "not_found"})
        previous = payment.status
        check_transition("payment", PAYMENT_TRANSITIONS, previous, status)

        payment.status = status
        payment.rejection_reason = reason if status == PaymentStatus.REJECTED else None
        if fraud_flag is not None:
            payment.fraud_flagged = fraud_flag
        if fraud_notes is not None:
            payment.fraud_notes = fraud_notes
        payment.reviewed_by = actor.id
        payment.reviewed_at = datetime.utcnow()
        _cascade_decision(payment)

        record_audit(
            db,
            actor.id,
            f"UPDATE_PAYMENT_STATUS_{status.value}",
            "PAYMENT",
            payment.id,
            {
                "status": status.value,
                "rejection_reason": reason,
                "fraud_flagged": fraud_flag,
                "fraud_notes": fraud_notes,
            },
        )
        notify_payment_reviewed(db, payment)
        logger.info(
            "payment %s: %s -> %s by admin %s",
            payment.reference_number,
            previous.value,
            status.value,
            actor.id,
        )
    db.refresh(payment)
    return payment


def file_dispute(
    db: Session,
    payment_id: int,
    explanation: str,
    actor: Actor,
    additional_files: Optional[str] = None,
) -> models.PaymentDispute:
    authorize(actor, Action.FILE_DISPUTE)
    if not explanation or not explanation.strip():
        raise ValidationFailed("Explanation is required", {"explanation": "required"})
    with atomic(db, "file_dispute"):
        payment = crud.crud_payment.get_payment(db, payment_id)
        if payment is None:
            raise NotFound("Payment not found", {"payment_id": "not_found"})
        ensure_owner(actor, payment.user_id, "payment")
        if crud.crud_payment.get_dispute_for_payment(db, payment.id) is not None:
            raise Conflict(
                "A dispute already exists for this payment", {"payment_id": "disputed"}
            )
        if not (payment.status == PaymentStatus.REJECTED or payment.fraud_flagged):
            raise Conflict(
                "Only a rejected or flagged payment can be disputed",
                {"payment_id": "not_disputable"},
            )
        if not _is_current(payment):
            raise Conflict(
                "A newer payment has been submitted for this request",
                {"payment_id": "superseded"},
            )

        dispute = models.PaymentDispute(
            payment=payment,
            explanation=explanation.strip(),
            additional_files=additional_files or "",
            status=DisputeStatus.PENDING,
            payment_status_before=payment.status,
        )
        db.add(dispute)
        payment.status = PaymentStatus.UNDER_REVIEW
        db.flush()
        record_audit(
            db,
            actor.id,
            "CREATE_PAYMENT_DISPUTE",
            "PAYMENT_DISPUTE",
            dispute.id,
            {"payment_id": payment.id, "explanation": dispute.explanation},
        )
        notify_dispute_filed(db, payment)
        logger.info("dispute %s filed for payment %s", dispute.id, payment.reference_number)
    db.refresh(dispute)
    return dispute


def resolve_dispute(
    db: Session,
    payment_id: int,
    resolution,
    actor: Actor,
    admin_response: Optional[str] = None,
    approve_payment: bool = False,
) -> models.PaymentDispute:
    """Close a dispute.

    RESOLVED with ``approve_payment`` approves the payment and its request.
    RESOLVED without it leaves the payment under review for a normal decision.
    REJECTED restores the status the payment had when the dispute was filed,
    and a restored rejection moves the request back to PAYMENT_REJECTED.
    """
    authorize(actor, Action.RESOLVE_DISPUTE)
    status = coerce_status(DisputeStatus, resolution)
    if status == DisputeStatus.PENDING:
        raise ValidationFailed(
            "Resolution must be RESOLVED or REJECTED", {"status": "invalid"}
        )
    with atomic(db, "resolve_dispute"):
        payment = crud.crud_payment.get_payment(db, payment_id)
        if payment is None or payment.dispute is None:
            raise NotFound("Dispute not found", {"payment_id": "not_found"})
        dispute = payment.dispute
        check_transition("dispute", DISPUTE_TRANSITIONS, dispute.status, status)

        dispute.status = status
        dispute.admin_response = admin_response
        dispute.resolved_at = datetime.utcnow()

        if status == DisputeStatus.RESOLVED and approve_payment:
            payment.status = PaymentStatus.APPROVED
            payment.reviewed_by = actor.id
            payment.reviewed_at = dispute.resolved_at
        elif status == DisputeStatus.REJECTED:
            payment.status = dispute.payment_status_before or PaymentStatus.REJECTED
        # An approval that stands leaves the request where fulfillment has taken it.
        if not (
            payment.status == PaymentStatus.APPROVED
            and dispute.payment_status_before == PaymentStatus.APPROVED
        ):
            _cascade_decision(payment)

        record_audit(
            db,
            actor.id,
            "RESOLVE_PAYMENT_DISPUTE",
            "PAYMENT_DISPUTE",
            dispute.id,
            {
                "status": status.value,
                "admin_response": admin_response,
                "approve_payment": approve_payment,
            },
        )
        notify_dispute_resolved(db, dispute)
        logger.info(
            "dispute %s %s by admin %s (payment now %s)",
            dispute.id,
            status.value.lower(),
            actor.id,
            payment.status.value,
        )
    db.refresh(dispute)
    return dispute
