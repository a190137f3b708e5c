"""Allowed status transitions for admin-driven changes.

Cascaded statuses (a payment decision moving its request, a reply reopening
a ticket) are derived state and bypass these tables. Re-setting the current
status is always allowed. ``WORKFLOW_ENFORCE_TRANSITIONS=false`` turns the
check off entirely.
"""

from typing import Dict, FrozenSet, Mapping

from ..core.config import settings
from ..models import DisputeStatus, PaymentStatus, RequestStatus, TicketStatus
from ..utils.errors import Conflict, ValidationFailed

R = RequestStatus
REQUEST_TRANSITIONS: Dict[RequestStatus, FrozenSet[RequestStatus]] = {
    R.CREATED: frozenset({R.PAYMENT_SUBMITTED, R.CLOSED}),
    R.PAYMENT_SUBMITTED: frozenset({R.PAYMENT_APPROVED, R.PAYMENT_REJECTED, R.CLOSED}),
    R.PAYMENT_REJECTED: frozenset({R.PAYMENT_SUBMITTED, R.PAYMENT_APPROVED, R.CLOSED}),
    R.PAYMENT_APPROVED: frozenset({R.IN_PROGRESS, R.DELIVERED, R.CLOSED}),
    R.IN_PROGRESS: frozenset({R.DELIVERED, R.CLOSED}),
    R.DELIVERED: frozenset({R.IN_PROGRESS, R.CLOSED}),
    R.CLOSED: frozenset({R.IN_PROGRESS}),
}

P = PaymentStatus
PAYMENT_TRANSITIONS: Dict[PaymentStatus, FrozenSet[PaymentStatus]] = {
    P.PENDING: frozenset({P.APPROVED, P.REJECTED, P.UNDER_REVIEW}),
    P.REJECTED: frozenset({P.UNDER_REVIEW, P.APPROVED}),
    P.UNDER_REVIEW: frozenset({P.APPROVED, P.REJECTED}),
    P.APPROVED: frozenset({P.UNDER_REVIEW, P.REJECTED}),
}

T = TicketStatus
TICKET_TRANSITIONS: Dict[TicketStatus, FrozenSet[TicketStatus]] = {
    T.OPEN: frozenset({T.IN_PROGRESS, T.RESOLVED, T.CLOSED}),
    T.IN_PROGRESS: frozenset({T.OPEN, T.RESOLVED, T.CLOSED}),
    T.RESOLVED: frozenset({T.IN_PROGRESS, T.CLOSED}),
    T.CLOSED: frozenset({T.IN_PROGRESS}),
}

D = DisputeStatus
DISPUTE_TRANSITIONS: Dict[DisputeStatus, FrozenSet[DisputeStatus]] = {
    D.PENDING: frozenset({D.RESOLVED, D.REJECTED}),
    D.RESOLVED: frozenset(),
    D.REJECTED: frozenset(),
}


def check_transition(entity: str, table: Mapping, current, target) -> None:
    """Raise :class:`Conflict` if ``current -> target`` is not allowed."""
    if not settings.WORKFLOW_ENFORCE_TRANSITIONS:
        return
    if current is None or current == target:
        return
    if target not in table.get(current, frozenset()):
        raise Conflict(
            f"Cannot move {entity} from {current.value} to {target.value}",
            {"status": "invalid_transition"},
        )


def can_transition(table: Mapping, current, target) -> bool:
    if not settings.WORKFLOW_ENFORCE_TRANSITIONS or current == target:
        return True
    return target in table.get(current, frozenset())


def coerce_status(enum_cls, value, field: str = "status"):
    """Accept an enum member or a case-insensitive string."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().upper())
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationFailed(
            f"Invalid {field} '{value}'. Allowed: {allowed}",
            {field: "invalid"},
        ) from None
