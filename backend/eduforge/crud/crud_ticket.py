from typing import List, Optional, Tuple

from sqlalchemy import case
from sqlalchemy.orm import Session, joinedload, selectinload

from .. import models
from ..models import TicketPriority
from ..utils.pagination import paginate

# Higher rank sorts first.
_PRIORITY_RANK = case(
    (models.Ticket.priority == TicketPriority.URGENT, 4),
    (models.Ticket.priority == TicketPriority.HIGH, 3),
    (models.Ticket.priority == TicketPriority.MEDIUM, 2),
    else_=1,
)


def get_ticket(db: Session, ticket_id: int) -> Optional[models.Ticket]:
    return (
        db.query(models.Ticket)
        .options(
            joinedload(models.Ticket.user),
            selectinload(models.Ticket.replies).joinedload(models.TicketReply.user),
        )
        .filter(models.Ticket.id == ticket_id)
        .first()
    )


def list_tickets(
    db: Session,
    *,
    user_id: Optional[int] = None,
    status: Optional[models.TicketStatus] = None,
    page: int = 1,
    limit: int = 10,
) -> Tuple[List[models.Ticket], dict]:
    """Tickets ordered by priority (urgent first), then newest."""
    query = db.query(models.Ticket).options(
        joinedload(models.Ticket.user),
        selectinload(models.Ticket.replies),
    )
    if user_id is not None:
        query = query.filter(models.Ticket.user_id == user_id)
    if status is not None:
        query = query.filter(models.Ticket.status == status)
    query = query.order_by(
        _PRIORITY_RANK.desc(), models.Ticket.created_at.desc(), models.Ticket.id.desc()
    )
    return paginate(query, page, limit)
