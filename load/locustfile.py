"""
Locust load script for the Eduforge request/payment workflow.

Two user classes share one run:
- StudentUser: logs in, browses services, creates a request, submits a
  payment, files the occasional dispute, opens tickets and polls
  notifications.
- AdminUser: logs in with the admin account, lists pending payments and
  reviews them, resolves disputes and reads the audit log.

Configure with env vars:
- EDUFORGE_STUDENTS: CSV of `email:password` pairs (else load/test_users.csv)
- EDUFORGE_ADMIN: `email:password` for the reviewing admin
- EDUFORGE_API_PREFIX: defaults to /api

Run:
  locust -f load/locustfile.py --host http://localhost:8000
"""

from __future__ import annotations

import logging
import os
import random
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Tuple

from locust import HttpUser, between, task

logger = logging.getLogger(__name__)

API = os.getenv("EDUFORGE_API_PREFIX", "/api").rstrip("/")
USERS_CSV = os.path.join(os.path.dirname(__file__), "test_users.csv")


def _parse_creds(raw: str) -> List[Tuple[str, str]]:
    out: List[Tuple[str, str]] = []
    for piece in raw.replace("\n", ",").split(","):
        piece = piece.strip()
        if not piece or ":" not in piece:
            continue
        email, pwd = piece.split(":", 1)
        if email.strip() and pwd.strip():
            out.append((email.strip(), pwd.strip()))
    return out


def _load_students() -> List[Tuple[str, str]]:
    raw = os.getenv("EDUFORGE_STUDENTS", "").strip()
    if not raw and os.path.exists(USERS_CSV):
        with open(USERS_CSV, encoding="utf-8") as f:
            raw = f.read()
    return _parse_creds(raw) or [("student1@example.edu", "secret123")]


STUDENTS = _load_students()
ADMIN = (_parse_creds(os.getenv("EDUFORGE_ADMIN", "")) or [("admin@eduforge.com", "admin123")])[0]


def _auth_header(token: Optional[str]) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"} if token else {}


def _safe_json(resp) -> Dict:
    try:
        return resp.json()
    except ValueError:
        return {}


class _EduforgeUser(HttpUser):
    abstract = True
    token: Optional[str] = None

    def _login(self, email: str, password: str) -> None:
        r = self.client.post(
            "/auth/login",
            data={"username": email, "password": password},
            name="/auth/login",
        )
        if r.status_code != 200:
            logger.warning("login failed for %s: %s", email, r.status_code)
            self.token = None
            return
        self.token = _safe_json(r).get("access_token")

    def _get(self, path: str, name: str, **kw):
        return self.client.get(f"{API}{path}", headers=_auth_header(self.token), name=name, **kw)

    def _post(self, path: str, name: str, **kw):
        return self.client.post(f"{API}{path}", headers=_auth_header(self.token), name=name, **kw)

    def _put(self, path: str, name: str, **kw):
        return self.client.put(f"{API}{path}", headers=_auth_header(self.token), name=name, **kw)


class StudentUser(_EduforgeUser):
    wait_time = between(1, 4)
    weight = 5

    def on_start(self):
        self.requests: List[int] = []
        self.payments: List[int] = []
        email, password = random.choice(STUDENTS)
        self._login(email, password)

    @task(3)
    def browse_services(self):
        self._get("/services/", name="/services")

    @task(2)
    def create_request_and_pay(self):
        if not self.token:
            return
        services = _safe_json(self._get("/services/", name="/services"))
        if not isinstance(services, list) or not services:
            return
        svc = random.choice(services)
        deadline = (datetime.utcnow() + timedelta(days=7)).isoformat()
        r = self._post(
            "/requests/",
            name="/requests [create]",
            json={
                "service_id": svc["id"],
                "title": f"Load test {random.randint(1, 10**6)}",
                "instructions": "Generated by locust",
                "deadline": deadline,
            },
        )
        req_id = _safe_json(r).get("id")
        if not req_id:
            return
        self.requests.append(req_id)
        p = self._post(
            "/payments/",
            name="/payments [submit]",
            json={"request_id": req_id, "amount": "50.00", "receipt_url": "/uploads/receipt.pdf"},
        )
        pay_id = _safe_json(p).get("id")
        if pay_id:
            self.payments.append(pay_id)

    @task(1)
    def dispute_payment(self):
        if not self.payments:
            return
        pay_id = self.payments.pop(0)
        with self.client.post(
            f"{API}/payments/{pay_id}/dispute",
            headers=_auth_header(self.token),
            json={"explanation": "Receipt was clear, please re-check"},
            name="/payments/{id}/dispute [file]",
            catch_response=True,
        ) as resp:
            # A second dispute on the same payment is an expected 409
            if resp.status_code in (201, 409):
                resp.success()

    @task(1)
    def open_ticket(self):
        self._post(
            "/tickets/",
            name="/tickets [create]",
            json={"title": "Question about my order", "content": "When will it be ready?"},
        )

    @task(4)
    def poll_notifications(self):
        self._get("/notifications/", name="/notifications", params={"unreadOnly": "true"})

    @task(1)
    def read_statistics(self):
        self._get("/statistics/", name="/statistics")


class AdminUser(_EduforgeUser):
    wait_time = between(2, 5)
    weight = 1

    def on_start(self):
        self._login(*ADMIN)

    @task(3)
    def review_pending_payments(self):
        data = _safe_json(
            self._get("/payments/", name="/payments [pending]", params={"status": "PENDING", "limit": 10})
        )
        for item in data.get("items", [])[:3]:
            decision = random.choice(["APPROVED", "REJECTED"])
            body = {"status": decision}
            if decision == "REJECTED":
                body["rejection_reason"] = "illegible receipt"
            self._put(f"/payments/{item['id']}", name="/payments/{id} [review]", json=body)

    @task(1)
    def resolve_disputes(self):
        data = _safe_json(
            self._get("/payments/", name="/payments [under review]", params={"status": "UNDER_REVIEW"})
        )
        for item in data.get("items", [])[:2]:
            self._put(
                f"/payments/{item['id']}/dispute",
                name="/payments/{id}/dispute [resolve]",
                json={"status": "RESOLVED", "approve_payment": True, "admin_response": "Verified"},
            )

    @task(2)
    def read_audit_log(self):
        self._get("/audit-logs/", name="/audit-logs", params={"limit": 20})

    @task(1)
    def list_tickets(self):
        self._get("/tickets/", name="/tickets")
