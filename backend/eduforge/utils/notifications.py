"""In-app notification emitter.

Notifications are rows only: nothing here sends email or push. Like the audit
recorder, emitters add to the caller's session and leave the commit to the
surrounding workflow operation.
"""

from typing import List, Optional
import logging

from sqlalchemy import insert, select
from sqlalchemy.orm import Session

from .. import models
from ..models import NotificationType, UserRole

logger = logging.getLogger(__name__)


def notify_user(
    db: Session,
    user_id: int,
    ntype: NotificationType,
    title: str,
    message: str,
    link: Optional[str] = None,
) -> models.Notification:
    """Queue a notification for a single user on the current session."""
    notif = models.Notification(
        user_id=user_id,
        type=ntype,
        title=title,
        message=message,
        link=link,
    )
    db.add(notif)
    logger.debug("notification queued user_id=%s type=%s", user_id, ntype.value)
    return notif


def admin_ids(db: Session) -> List[int]:
    return list(
        db.execute(
            select(models.User.id)
            .where(models.User.role == UserRole.ADMIN)
            .order_by(models.User.id)
        ).scalars()
    )


def notify_admins(
    db: Session,
    ntype: NotificationType,
    title: str,
    message: str,
    link: Optional[str] = None,
) -> int:
    """Insert one notification per ADMIN user in a single batched statement.

    Returns the number of rows inserted.
    """
    ids = admin_ids(db)
    if not ids:
        logger.warning("No admin users to notify for %s", ntype.value)
        return 0
    rows = [
        {
            "user_id": admin_id,
            "type": ntype,
            "title": title,
            "message": message,
            "link": link,
            "is_read": False,
        }
        for admin_id in ids
    ]
    db.execute(insert(models.Notification), rows)
    logger.info("notification fan-out type=%s admins=%d", ntype.value, len(ids))
    return len(ids)


# ─── Typed notifications per workflow event ──────────────────────────────────


def notify_request_status(db: Session, req: models.ServiceRequest) -> None:
    if req.status == models.RequestStatus.DELIVERED:
        notify_user(
            db,
            req.user_id,
            NotificationType.REQUEST_DELIVERED,
            "Request Delivered",
            f'Your request "{req.title}" has been delivered.',
            f"/student/requests/{req.id}",
        )
    else:
        notify_user(
            db,
            req.user_id,
            NotificationType.REQUEST_UPDATED,
            "Request Updated",
            f'Your request "{req.title}" status has been updated to {req.status.value}.',
            f"/student/requests/{req.id}",
        )


def notify_payment_reviewed(db: Session, payment: models.Payment) -> None:
    title = payment.request.title if payment.request else f"#{payment.request_id}"
    if payment.status == models.PaymentStatus.APPROVED:
        notify_user(
            db,
            payment.user_id,
            NotificationType.PAYMENT_APPROVED,
            "Payment Approved",
            f'Your payment for request "{title}" has been approved.',
            f"/student/payments/{payment.id}",
        )
    else:
        reason = payment.rejection_reason or ""
        notify_user(
            db,
            payment.user_id,
            NotificationType.PAYMENT_REJECTED,
            "Payment Rejected",
            f'Your payment for request "{title}" has been rejected. {reason}'.strip(),
            f"/student/payments/{payment.id}",
        )


def notify_dispute_filed(db: Session, payment: models.Payment) -> int:
    return notify_admins(
        db,
        NotificationType.PAYMENT_DISPUTED,
        "New Payment Dispute",
        f"A new dispute has been filed for payment {payment.reference_number}.",
        f"/admin/payments/{payment.id}",
    )


def notify_dispute_resolved(db: Session, dispute: models.PaymentDispute) -> None:
    payment = dispute.payment
    notify_user(
        db,
        payment.user_id,
        NotificationType.DISPUTE_RESOLVED,
        "Dispute Resolved",
        f"Your payment dispute has been {dispute.status.value.lower()}.",
        f"/student/payments/{payment.id}",
    )


def notify_ticket_created(db: Session, ticket: models.Ticket) -> int:
    return notify_admins(
        db,
        NotificationType.TICKET_CREATED,
        "New Support Ticket",
        f'A new ticket "{ticket.title}" has been created.',
        f"/admin/tickets/{ticket.id}",
    )


def notify_ticket_status(db: Session, ticket: models.Ticket) -> None:
    notify_user(
        db,
        ticket.user_id,
        NotificationType.TICKET_UPDATED,
        "Ticket Updated",
        f'Your ticket "{ticket.title}" status has been updated to {ticket.status.value}.',
        f"/student/tickets/{ticket.id}",
    )


def notify_ticket_reply(db: Session, ticket: models.Ticket, from_admin: bool) -> int:
    """Notify the party opposite the reply's author; returns rows created."""
    if from_admin:
        notify_user(
            db,
            ticket.user_id,
            NotificationType.TICKET_UPDATED,
            "New Reply on Your Ticket",
            f'Admin has replied to your ticket "{ticket.title}".',
            f"/student/tickets/{ticket.id}",
        )
        return 1
    return notify_admins(
        db,
        NotificationType.TICKET_UPDATED,
        "New Reply on Ticket",
        f'Student has replied to ticket "{ticket.title}".',
        f"/admin/tickets/{ticket.id}",
    )


def notify_deliverable_added(db: Session, req: models.ServiceRequest) -> None:
    notify_user(
        db,
        req.user_id,
        NotificationType.REQUEST_DELIVERED,
        "New Deliverable Available",
        f'A new deliverable has been added to your request "{req.title}".',
        f"/student/requests/{req.id}",
    )
