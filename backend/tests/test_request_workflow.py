import json

import pytest

from eduforge import schemas
from eduforge.models import AuditLog, Notification, NotificationType, RequestStatus, ServiceRequest
from eduforge.services import request_workflow
from eduforge.services.policy import Actor
from eduforge.utils.errors import Conflict, Forbidden, NotFound, ValidationFailed

from conftest import create_service, in_days


def _new_request(db, actor, service, title="Essay on Kant"):
    return request_workflow.create_request(
        db,
        actor,
        schemas.RequestCreate(
            service_id=service.id,
            title=title,
            instructions="2000 words, APA",
            academic_level="Undergraduate",
            deadline=in_days(),
        ),
    )


def test_create_request_starts_created_and_is_audited(db, student_actor, service):
    req = _new_request(db, student_actor, service)

    assert req.status == RequestStatus.CREATED
    assert req.user_id == student_actor.id
    log = db.query(AuditLog).one()
    assert log.action == "CREATE_REQUEST"
    assert log.entity_type == "REQUEST"
    assert log.entity_id == str(req.id)
    assert json.loads(log.changes)["service_id"] == service.id


def test_create_request_rejects_inactive_service(db, student_actor):
    svc = create_service(db, slug="retired", is_active=False)
    with pytest.raises(NotFound):
        _new_request(db, student_actor, svc)
    assert db.query(ServiceRequest).count() == 0


def test_admin_cannot_create_request(db, admin_actor, service):
    with pytest.raises(Forbidden):
        _new_request(db, admin_actor, service)


def test_delivered_sets_timestamp_and_notifies_student(db, student_actor, admin_actor, service):
    req = _new_request(db, student_actor, service)
    req.status = RequestStatus.IN_PROGRESS
    db.commit()

    updated = request_workflow.update_request_status(db, req.id, "delivered", admin_actor)

    assert updated.status == RequestStatus.DELIVERED
    assert updated.delivered_at is not None
    notif = db.query(Notification).filter_by(user_id=student_actor.id).one()
    assert notif.type == NotificationType.REQUEST_DELIVERED
    assert notif.message == 'Your request "Essay on Kant" has been delivered.'
    actions = [a.action for a in db.query(AuditLog).order_by(AuditLog.id)]
    assert actions[-1] == "UPDATE_REQUEST_STATUS_DELIVERED"


def test_closed_sets_closed_at_and_notifies(db, student_actor, admin_actor, service):
    req = _new_request(db, student_actor, service)

    updated = request_workflow.update_request_status(db, req.id, "CLOSED", admin_actor)

    assert updated.closed_at is not None
    notif = db.query(Notification).one()
    assert notif.type == NotificationType.REQUEST_UPDATED
    assert "updated to CLOSED" in notif.message


def test_in_progress_does_not_notify(db, student_actor, admin_actor, service):
    req = _new_request(db, student_actor, service)
    req.status = RequestStatus.PAYMENT_APPROVED
    db.commit()

    request_workflow.update_request_status(db, req.id, RequestStatus.IN_PROGRESS, admin_actor)

    assert db.query(Notification).count() == 0


def test_student_cannot_update_status(db, student_actor, service):
    req = _new_request(db, student_actor, service)

    with pytest.raises(Forbidden):
        request_workflow.update_request_status(db, req.id, "CLOSED", student_actor)

    db.expire_all()
    assert db.get(ServiceRequest, req.id).status == RequestStatus.CREATED
    assert db.query(AuditLog).count() == 1
    assert db.query(Notification).count() == 0


def test_unknown_status_is_a_validation_error(db, admin_actor):
    with pytest.raises(ValidationFailed):
        request_workflow.update_request_status(db, 1, "SHIPPED", admin_actor)


def test_missing_request_is_not_found(db, admin_actor):
    with pytest.raises(NotFound):
        request_workflow.update_request_status(db, 999, "CLOSED", admin_actor)


def test_get_request_for_other_student_is_forbidden(db, student_actor, other_student, service):
    req = _new_request(db, student_actor, service)
    with pytest.raises(Forbidden):
        request_workflow.get_request_for(db, Actor.from_user(other_student), req.id)


def test_illegal_transition_conflicts(db, student_actor, admin_actor, service):
    req = _new_request(db, student_actor, service)

    with pytest.raises(Conflict):
        request_workflow.update_request_status(db, req.id, "DELIVERED", admin_actor)

    db.expire_all()
    assert db.get(ServiceRequest, req.id).status == RequestStatus.CREATED
