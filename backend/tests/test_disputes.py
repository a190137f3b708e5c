import pytest

from eduforge import schemas
from eduforge.models import (
    AuditLog,
    DisputeStatus,
    Notification,
    NotificationType,
    PaymentDispute,
    PaymentStatus,
    RequestStatus,
    UserRole,
)
from eduforge.services import payment_workflow, request_workflow
from eduforge.services.policy import Actor
from eduforge.utils.errors import Conflict, Forbidden, NotFound, ValidationFailed

from conftest import create_user, in_days


@pytest.fixture
def rejected_payment(db, student_actor, admin_actor, service):
    req = request_workflow.create_request(
        db,
        student_actor,
        schemas.RequestCreate(
            service_id=service.id, title="Thesis", instructions="ch. 2", deadline=in_days()
        ),
    )
    payment = payment_workflow.submit_payment(db, req.id, 100, None, student_actor)
    return payment_workflow.review_payment(
        db, payment.id, "REJECTED", admin_actor, reason="amount mismatch"
    )


def test_dispute_fans_out_to_every_admin(db, student_actor, admin, rejected_payment):
    second_admin = create_user(db, "ops@eduforge.com", role=UserRole.ADMIN)

    dispute = payment_workflow.file_dispute(
        db, rejected_payment.id, "I paid the full amount", student_actor
    )

    assert dispute.status == DisputeStatus.PENDING
    recipients = {
        n.user_id
        for n in db.query(Notification).filter_by(type=NotificationType.PAYMENT_DISPUTED)
    }
    assert recipients == {admin.id, second_admin.id}
    log = db.query(AuditLog).filter_by(action="CREATE_PAYMENT_DISPUTE").one()
    assert log.entity_type == "PAYMENT_DISPUTE"
    assert log.entity_id == str(dispute.id)


def test_second_dispute_conflicts(db, student_actor, rejected_payment):
    payment_workflow.file_dispute(db, rejected_payment.id, "first", student_actor)

    with pytest.raises(Conflict):
        payment_workflow.file_dispute(db, rejected_payment.id, "second", student_actor)

    assert db.query(PaymentDispute).count() == 1
    assert db.query(AuditLog).filter_by(action="CREATE_PAYMENT_DISPUTE").count() == 1


def test_dispute_requires_explanation(db, student_actor, rejected_payment):
    with pytest.raises(ValidationFailed):
        payment_workflow.file_dispute(db, rejected_payment.id, "   ", student_actor)


def test_only_payment_owner_may_dispute(db, other_student, rejected_payment):
    with pytest.raises(Forbidden):
        payment_workflow.file_dispute(
            db, rejected_payment.id, "not mine", Actor.from_user(other_student)
        )
    assert db.query(PaymentDispute).count() == 0


def test_resolve_without_dispute_is_not_found(db, admin_actor, rejected_payment):
    with pytest.raises(NotFound):
        payment_workflow.resolve_dispute(db, rejected_payment.id, "RESOLVED", admin_actor)


def test_rejecting_dispute_restores_rejected_payment(
    db, student_actor, admin_actor, rejected_payment
):
    payment_workflow.file_dispute(db, rejected_payment.id, "please recheck", student_actor)

    dispute = payment_workflow.resolve_dispute(
        db, rejected_payment.id, "rejected", admin_actor, admin_response="Still mismatched"
    )

    assert dispute.status == DisputeStatus.REJECTED
    assert dispute.admin_response == "Still mismatched"
    db.refresh(rejected_payment)
    assert rejected_payment.status == PaymentStatus.REJECTED
    assert rejected_payment.request.status == RequestStatus.PAYMENT_REJECTED
    notif = (
        db.query(Notification)
        .filter_by(user_id=student_actor.id, type=NotificationType.DISPUTE_RESOLVED)
        .one()
    )
    assert notif.message == "Your payment dispute has been rejected."


def test_resolved_without_approval_leaves_payment_under_review(
    db, student_actor, admin_actor, rejected_payment
):
    payment_workflow.file_dispute(db, rejected_payment.id, "please recheck", student_actor)

    payment_workflow.resolve_dispute(db, rejected_payment.id, "RESOLVED", admin_actor)

    db.refresh(rejected_payment)
    assert rejected_payment.status == PaymentStatus.UNDER_REVIEW
    assert rejected_payment.request.status == RequestStatus.PAYMENT_REJECTED


def test_closed_dispute_cannot_be_resolved_again(
    db, student_actor, admin_actor, rejected_payment
):
    payment_workflow.file_dispute(db, rejected_payment.id, "please recheck", student_actor)
    payment_workflow.resolve_dispute(db, rejected_payment.id, "REJECTED", admin_actor)

    with pytest.raises(Conflict):
        payment_workflow.resolve_dispute(
            db, rejected_payment.id, "RESOLVED", admin_actor, approve_payment=True
        )
    db.refresh(rejected_payment)
    assert rejected_payment.status == PaymentStatus.REJECTED


def test_pending_is_not_a_resolution(db, admin_actor, rejected_payment):
    with pytest.raises(ValidationFailed):
        payment_workflow.resolve_dispute(db, rejected_payment.id, "PENDING", admin_actor)


def test_student_cannot_resolve(db, student_actor, rejected_payment):
    payment_workflow.file_dispute(db, rejected_payment.id, "please recheck", student_actor)
    with pytest.raises(Forbidden):
        payment_workflow.resolve_dispute(db, rejected_payment.id, "RESOLVED", student_actor)


def test_pending_payment_cannot_be_disputed(db, student_actor, service):
    req = request_workflow.create_request(
        db,
        student_actor,
        schemas.RequestCreate(
            service_id=service.id, title="Essay", instructions="draft", deadline=in_days()
        ),
    )
    payment = payment_workflow.submit_payment(db, req.id, 40, None, student_actor)

    with pytest.raises(Conflict):
        payment_workflow.file_dispute(db, payment.id, "just checking", student_actor)

    db.refresh(payment)
    assert payment.status == PaymentStatus.PENDING
    assert payment.request.status == RequestStatus.PAYMENT_SUBMITTED
    assert db.query(PaymentDispute).count() == 0


def test_rejected_dispute_on_flagged_payment_allows_resubmission(
    db, student_actor, admin_actor, service
):
    req = request_workflow.create_request(
        db,
        student_actor,
        schemas.RequestCreate(
            service_id=service.id, title="Essay", instructions="draft", deadline=in_days()
        ),
    )
    payment = payment_workflow.submit_payment(db, req.id, 40, None, student_actor)
    payment_workflow.review_payment(
        db, payment.id, "REJECTED", admin_actor, reason="forged", fraud_flag=True
    )
    dispute = payment_workflow.file_dispute(db, payment.id, "It is genuine", student_actor)
    assert dispute.payment_status_before == PaymentStatus.REJECTED

    payment_workflow.resolve_dispute(db, payment.id, "REJECTED", admin_actor)

    db.refresh(payment)
    assert payment.status == PaymentStatus.REJECTED
    assert payment.request.status == RequestStatus.PAYMENT_REJECTED
    again = payment_workflow.submit_payment(db, req.id, 40, None, student_actor)
    assert again.status == PaymentStatus.PENDING
    assert again.request.status == RequestStatus.PAYMENT_SUBMITTED


def test_rejected_dispute_restores_flagged_approval_without_moving_request(
    db, student_actor, admin_actor, service
):
    req = request_workflow.create_request(
        db,
        student_actor,
        schemas.RequestCreate(
            service_id=service.id, title="Essay", instructions="draft", deadline=in_days()
        ),
    )
    payment = payment_workflow.submit_payment(db, req.id, 40, None, student_actor)
    payment_workflow.review_payment(db, payment.id, "APPROVED", admin_actor, fraud_flag=True)
    request_workflow.update_request_status(db, req.id, "IN_PROGRESS", admin_actor)
    payment_workflow.file_dispute(db, payment.id, "Please clear the flag", student_actor)

    payment_workflow.resolve_dispute(db, payment.id, "REJECTED", admin_actor)

    db.refresh(payment)
    assert payment.status == PaymentStatus.APPROVED
    assert payment.request.status == RequestStatus.IN_PROGRESS


def test_resubmission_blocked_while_dispute_pending(
    db, student_actor, admin_actor, rejected_payment
):
    payment_workflow.file_dispute(db, rejected_payment.id, "please recheck", student_actor)

    with pytest.raises(Conflict):
        payment_workflow.submit_payment(
            db, rejected_payment.request_id, 100, None, student_actor
        )

    db.refresh(rejected_payment)
    assert len(rejected_payment.request.payments) == 1


def test_superseded_payment_cannot_be_disputed(
    db, student_actor, admin_actor, rejected_payment
):
    newer = payment_workflow.submit_payment(
        db, rejected_payment.request_id, 100, None, student_actor
    )
    payment_workflow.review_payment(db, newer.id, "REJECTED", admin_actor)

    with pytest.raises(Conflict):
        payment_workflow.file_dispute(db, rejected_payment.id, "the first one", student_actor)

    dispute = payment_workflow.file_dispute(db, newer.id, "the second one", student_actor)
    assert dispute.payment_id == newer.id


def test_decision_on_older_payment_does_not_move_request(
    db, student_actor, admin_actor, rejected_payment
):
    newer = payment_workflow.submit_payment(
        db, rejected_payment.request_id, 100, None, student_actor
    )
    payment_workflow.review_payment(db, newer.id, "APPROVED", admin_actor)

    payment_workflow.review_payment(
        db, rejected_payment.id, "REJECTED", admin_actor, reason="still mismatched"
    )

    db.refresh(newer)
    assert newer.request.status == RequestStatus.PAYMENT_APPROVED
    assert newer.request.latest_payment.id == newer.id
