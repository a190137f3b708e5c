from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.orm import Session
from typing import Dict

from .. import models
from ..database import get_db
from ..models import PaymentStatus, RequestStatus, TicketStatus, UserRole
from ..services.policy import Actor
from .dependencies import get_current_actor

router = APIRouter(tags=["statistics"])

PENDING_REQUEST_STATES = (
    RequestStatus.CREATED,
    RequestStatus.PAYMENT_SUBMITTED,
    RequestStatus.PAYMENT_APPROVED,
)


def admin_statistics(db: Session) -> Dict[str, object]:
    revenue = (
        db.query(func.coalesce(func.sum(models.Payment.amount), 0))
        .filter(models.Payment.status == PaymentStatus.APPROVED)
        .scalar()
    )
    return {
        "total_users": db.query(models.User).filter(models.User.role == UserRole.STUDENT).count(),
        "total_requests": db.query(models.ServiceRequest).count(),
        "total_payments": db.query(models.Payment).count(),
        "pending_payments": db.query(models.Payment)
        .filter(models.Payment.status == PaymentStatus.PENDING)
        .count(),
        "in_progress_requests": db.query(models.ServiceRequest)
        .filter(models.ServiceRequest.status == RequestStatus.IN_PROGRESS)
        .count(),
        "total_deliverables": db.query(models.Deliverable).count(),
        "open_tickets": db.query(models.Ticket)
        .filter(models.Ticket.status == TicketStatus.OPEN)
        .count(),
        "total_revenue": str(revenue or 0),
    }


def student_statistics(db: Session, user_id: int) -> Dict[str, object]:
    requests = db.query(models.ServiceRequest).filter(models.ServiceRequest.user_id == user_id)
    payments = db.query(models.Payment).filter(models.Payment.user_id == user_id)
    tickets = db.query(models.Ticket).filter(models.Ticket.user_id == user_id)
    return {
        "user_requests": requests.count(),
        "pending_requests": requests.filter(
            models.ServiceRequest.status.in_(PENDING_REQUEST_STATES)
        ).count(),
        "in_progress_requests": requests.filter(
            models.ServiceRequest.status == RequestStatus.IN_PROGRESS
        ).count(),
        "delivered_requests": requests.filter(
            models.ServiceRequest.status == RequestStatus.DELIVERED
        ).count(),
        "user_payments": payments.count(),
        "approved_payments": payments.filter(
            models.Payment.status == PaymentStatus.APPROVED
        ).count(),
        "pending_payments": payments.filter(
            models.Payment.status == PaymentStatus.PENDING
        ).count(),
        "user_tickets": tickets.count(),
        "open_tickets": tickets.filter(models.Ticket.status == TicketStatus.OPEN).count(),
    }


@router.get("/")
def read_statistics(
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """Dashboard counters for the caller's role."""
    if actor.is_admin:
        return admin_statistics(db)
    return student_statistics(db, actor.id)
