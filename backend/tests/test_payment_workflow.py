import re
from decimal import Decimal

import pytest

from eduforge import schemas
from eduforge.models import (
    AuditLog,
    Notification,
    NotificationType,
    Payment,
    PaymentStatus,
    RequestStatus,
    ServiceRequest,
)
from eduforge.services import payment_workflow, request_workflow
from eduforge.services.policy import Actor
from eduforge.utils.errors import Conflict, Forbidden, NotFound, ValidationFailed

from conftest import in_days

REFERENCE = re.compile(r"^PAY-\d{13}-[A-Z0-9]{9}$")


@pytest.fixture
def request_row(db, student_actor, service):
    return request_workflow.create_request(
        db,
        student_actor,
        schemas.RequestCreate(
            service_id=service.id,
            title="Lab report",
            instructions="Chemistry lab 3",
            deadline=in_days(),
        ),
    )


def test_reference_number_format():
    refs = {payment_workflow.generate_reference_number() for _ in range(50)}
    assert all(REFERENCE.match(r) for r in refs)
    assert len(refs) == 50


def test_submit_payment_creates_pending_and_moves_request(db, student_actor, request_row):
    payment = payment_workflow.submit_payment(
        db, request_row.id, Decimal("50.00"), "/uploads/r.pdf", student_actor
    )

    assert payment.status == PaymentStatus.PENDING
    assert REFERENCE.match(payment.reference_number)
    assert payment.currency == "USD"
    db.refresh(request_row)
    assert request_row.status == RequestStatus.PAYMENT_SUBMITTED
    assert request_row.latest_payment.id == payment.id
    assert db.query(AuditLog).filter_by(action="SUBMIT_PAYMENT").count() == 1


@pytest.mark.parametrize("amount", [0, -5, "abc"])
def test_submit_payment_requires_positive_amount(db, student_actor, request_row, amount):
    with pytest.raises(ValidationFailed):
        payment_workflow.submit_payment(db, request_row.id, amount, None, student_actor)
    assert db.query(Payment).count() == 0


def test_submit_payment_for_someone_elses_request(db, other_student, request_row):
    with pytest.raises(Forbidden):
        payment_workflow.submit_payment(
            db, request_row.id, 10, None, Actor.from_user(other_student)
        )


def test_submit_payment_missing_request(db, student_actor):
    with pytest.raises(NotFound):
        payment_workflow.submit_payment(db, 404, 10, None, student_actor)


def test_submit_twice_while_pending_conflicts(db, student_actor, request_row):
    payment_workflow.submit_payment(db, request_row.id, 10, None, student_actor)
    with pytest.raises(Conflict):
        payment_workflow.submit_payment(db, request_row.id, 10, None, student_actor)
    assert db.query(Payment).count() == 1


@pytest.mark.parametrize(
    "decision, expected",
    [
        ("APPROVED", RequestStatus.PAYMENT_APPROVED),
        ("REJECTED", RequestStatus.PAYMENT_REJECTED),
        ("approved", RequestStatus.PAYMENT_APPROVED),
    ],
)
def test_review_cascades_to_request(db, student_actor, admin_actor, request_row, decision, expected):
    payment = payment_workflow.submit_payment(db, request_row.id, 20, None, student_actor)

    reviewed = payment_workflow.review_payment(db, payment.id, decision, admin_actor)

    assert reviewed.reviewed_by == admin_actor.id
    assert reviewed.reviewed_at is not None
    db.refresh(request_row)
    assert request_row.status == expected


def test_review_rejects_other_decisions(db, student_actor, admin_actor, request_row):
    payment = payment_workflow.submit_payment(db, request_row.id, 20, None, student_actor)
    for bad in ("UNDER_REVIEW", "PENDING", "MAYBE"):
        with pytest.raises(ValidationFailed):
            payment_workflow.review_payment(db, payment.id, bad, admin_actor)
    db.refresh(payment)
    assert payment.status == PaymentStatus.PENDING


def test_student_cannot_review(db, student_actor, request_row):
    payment = payment_workflow.submit_payment(db, request_row.id, 20, None, student_actor)

    with pytest.raises(Forbidden):
        payment_workflow.review_payment(db, payment.id, "APPROVED", student_actor)

    db.expire_all()
    assert db.get(Payment, payment.id).status == PaymentStatus.PENDING
    assert db.get(ServiceRequest, request_row.id).status == RequestStatus.PAYMENT_SUBMITTED


def test_resubmission_after_rejection(db, student_actor, admin_actor, request_row):
    first = payment_workflow.submit_payment(db, request_row.id, 20, None, student_actor)
    payment_workflow.review_payment(db, first.id, "REJECTED", admin_actor, reason="blurry")

    second = payment_workflow.submit_payment(db, request_row.id, 20, None, student_actor)

    db.refresh(request_row)
    assert request_row.status == RequestStatus.PAYMENT_SUBMITTED
    assert [p.id for p in request_row.payments] == [first.id, second.id]
    assert request_row.latest_payment.id == second.id


def test_full_scenario_chain(db, student_actor, admin_actor, request_row):
    payment = payment_workflow.submit_payment(
        db, request_row.id, Decimal("50.00"), "/uploads/receipt.pdf", student_actor
    )
    assert payment.status == PaymentStatus.PENDING
    assert REFERENCE.match(payment.reference_number)

    payment_workflow.review_payment(
        db, payment.id, "REJECTED", admin_actor, reason="illegible receipt"
    )
    rejected = (
        db.query(Notification)
        .filter_by(user_id=student_actor.id, type=NotificationType.PAYMENT_REJECTED)
        .one()
    )
    assert "illegible receipt" in rejected.message
    assert rejected.message.startswith('Your payment for request "Lab report" has been rejected.')

    payment_workflow.file_dispute(db, payment.id, "The receipt is readable", student_actor)
    db.refresh(payment)
    assert payment.status == PaymentStatus.UNDER_REVIEW
    assert (
        db.query(Notification)
        .filter_by(user_id=admin_actor.id, type=NotificationType.PAYMENT_DISPUTED)
        .count()
        == 1
    )

    dispute = payment_workflow.resolve_dispute(
        db, payment.id, "RESOLVED", admin_actor, admin_response="ok", approve_payment=True
    )
    assert dispute.resolved_at is not None
    db.refresh(payment)
    db.refresh(request_row)
    assert payment.status == PaymentStatus.APPROVED
    assert request_row.status == RequestStatus.PAYMENT_APPROVED
    resolved = (
        db.query(Notification)
        .filter_by(user_id=student_actor.id, type=NotificationType.DISPUTE_RESOLVED)
        .all()
    )
    assert len(resolved) == 1
    assert resolved[0].message == "Your payment dispute has been resolved."
