from datetime import timedelta

from eduforge.api.auth import create_access_token
from eduforge.models import (
    AuditLog,
    Payment,
    PaymentStatus,
    RequestStatus,
    ServiceRequest,
)

from conftest import auth_headers, in_days


def _request_body(service, **overrides):
    body = {
        "service_id": service.id,
        "title": "Essay on Kant",
        "instructions": "2000 words",
        "deadline": in_days().isoformat(),
    }
    body.update(overrides)
    return body


def _create_request(client, student, service):
    res = client.post(
        "/api/requests/", json=_request_body(service), headers=auth_headers(student)
    )
    assert res.status_code == 201, res.text
    return res.json()


def test_missing_token_is_401(client):
    res = client.get("/api/requests/")
    assert res.status_code == 401


def test_expired_token_is_401(client, student):
    token = create_access_token({"sub": student.email}, timedelta(minutes=-1))
    res = client.get("/api/requests/", headers={"Authorization": f"Bearer {token}"})
    assert res.status_code == 401


def test_suspended_user_is_403(client, db, student):
    student.is_suspended = True
    db.commit()
    res = client.get("/api/requests/", headers=auth_headers(student))
    assert res.status_code == 403


def test_create_request_returns_201(client, db, student, service):
    data = _create_request(client, student, service)

    assert data["status"] == "CREATED"
    assert data["user_id"] == student.id
    assert data["latest_payment"] is None
    assert db.query(ServiceRequest).count() == 1


def test_invalid_body_is_400_with_field_errors(client, student, service):
    res = client.post(
        "/api/requests/",
        json=_request_body(service, title=""),
        headers=auth_headers(student),
    )
    assert res.status_code == 400
    detail = res.json()["detail"]
    assert detail["message"] == "Validation failed"
    assert "title" in detail["field_errors"]


def test_role_check_precedes_body_validation(client, db, admin):
    res = client.post(
        "/api/payments/", json={"amount": -1}, headers=auth_headers(admin)
    )
    assert res.status_code == 403
    assert res.json()["detail"]["field_errors"] == {"action": "SUBMIT_PAYMENT"}
    assert db.query(Payment).count() == 0


def test_unknown_request_is_404(client, admin):
    res = client.put(
        "/api/requests/999", json={"status": "CLOSED"}, headers=auth_headers(admin)
    )
    assert res.status_code == 404
    assert res.json()["detail"]["message"] == "Request not found"


def test_other_students_request_is_403(client, student, other_student, service):
    created = _create_request(client, student, service)
    res = client.get(f"/api/requests/{created['id']}", headers=auth_headers(other_student))
    assert res.status_code == 403


def test_student_lists_only_own_requests(client, student, other_student, admin, service):
    _create_request(client, student, service)
    _create_request(client, other_student, service)

    mine = client.get("/api/requests/", headers=auth_headers(student)).json()
    everything = client.get("/api/requests/", headers=auth_headers(admin)).json()

    assert mine["pagination"]["total"] == 1
    assert mine["items"][0]["user_id"] == student.id
    assert everything["pagination"]["total"] == 2


def test_payment_flow_over_http(client, db, student, admin, service):
    created = _create_request(client, student, service)

    res = client.post(
        "/api/payments/",
        json={"request_id": created["id"], "amount": "50.00", "receipt_url": "/uploads/r.pdf"},
        headers=auth_headers(student),
    )
    assert res.status_code == 201, res.text
    payment = res.json()
    assert payment["status"] == "PENDING"
    assert payment["reference_number"].startswith("PAY-")

    detail = client.get(f"/api/requests/{created['id']}", headers=auth_headers(student))
    assert detail.json()["latest_payment"]["id"] == payment["id"]
    assert detail.json()["status"] == "PAYMENT_SUBMITTED"

    res = client.put(
        f"/api/payments/{payment['id']}",
        json={"status": "rejected", "rejection_reason": "illegible receipt"},
        headers=auth_headers(admin),
    )
    assert res.status_code == 200, res.text
    assert res.json()["status"] == "REJECTED"

    res = client.post(
        f"/api/payments/{payment['id']}/dispute",
        json={"explanation": "It is readable"},
        headers=auth_headers(student),
    )
    assert res.status_code == 201

    again = client.post(
        f"/api/payments/{payment['id']}/dispute",
        json={"explanation": "Again"},
        headers=auth_headers(student),
    )
    assert again.status_code == 409

    res = client.put(
        f"/api/payments/{payment['id']}/dispute",
        json={"status": "RESOLVED", "approve_payment": True},
        headers=auth_headers(admin),
    )
    assert res.status_code == 200
    assert res.json()["status"] == "RESOLVED"

    db.expire_all()
    stored = db.get(Payment, payment["id"])
    assert stored.status == PaymentStatus.APPROVED
    assert stored.request.status == RequestStatus.PAYMENT_APPROVED


def test_review_decision_must_be_approved_or_rejected(client, student, admin, service):
    created = _create_request(client, student, service)
    payment = client.post(
        "/api/payments/",
        json={"request_id": created["id"], "amount": 10},
        headers=auth_headers(student),
    ).json()

    res = client.put(
        f"/api/payments/{payment['id']}",
        json={"status": "UNDER_REVIEW"},
        headers=auth_headers(admin),
    )
    assert res.status_code == 400


def test_illegal_transition_is_409(client, db, student, admin, service):
    created = _create_request(client, student, service)
    res = client.put(
        f"/api/requests/{created['id']}",
        json={"status": "DELIVERED"},
        headers=auth_headers(admin),
    )
    assert res.status_code == 409
    assert db.query(AuditLog).filter(AuditLog.action.like("UPDATE_REQUEST%")).count() == 0


def test_notifications_endpoints(client, student, admin):
    res = client.post(
        "/api/tickets/",
        json={"title": "Upload broken", "priority": "high"},
        headers=auth_headers(student),
    )
    assert res.status_code == 201, res.text

    listing = client.get("/api/notifications/", headers=auth_headers(admin)).json()
    assert listing["unread_count"] == 1
    assert listing["items"][0]["type"] == "TICKET_CREATED"

    assert client.post("/api/notifications/", headers=auth_headers(admin)).json() == {
        "updated": 1
    }
    assert client.post("/api/notifications/", headers=auth_headers(admin)).json() == {
        "updated": 0
    }
    unread = client.get(
        "/api/notifications/", params={"unreadOnly": "true"}, headers=auth_headers(admin)
    ).json()
    assert unread["items"] == []
    assert client.delete("/api/notifications/", headers=auth_headers(admin)).json() == {
        "deleted": 1
    }


def test_audit_logs_are_admin_only(client, student, admin, service):
    _create_request(client, student, service)

    assert client.get("/api/audit-logs/", headers=auth_headers(student)).status_code == 403
    res = client.get(
        "/api/audit-logs/",
        params={"entityType": "REQUEST"},
        headers=auth_headers(admin),
    )
    assert res.status_code == 200
    body = res.json()
    assert body["pagination"]["total"] == 1
    assert body["items"][0]["action"] == "CREATE_REQUEST"


def test_register_and_login(client):
    res = client.post(
        "/auth/register",
        json={"email": "New@Example.edu", "password": "secret123", "name": "New Student"},
    )
    assert res.status_code == 201, res.text
    assert res.json()["role"] == "STUDENT"

    dup = client.post(
        "/auth/register",
        json={"email": "new@example.edu", "password": "secret123", "name": "Dup"},
    )
    assert dup.status_code == 409

    bad = client.post(
        "/auth/login", data={"username": "new@example.edu", "password": "wrong"}
    )
    assert bad.status_code == 401

    ok = client.post(
        "/auth/login", data={"username": "new@example.edu", "password": "secret123"}
    )
    assert ok.status_code == 200
    token = ok.json()["access_token"]
    me = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.json()["email"] == "new@example.edu"
