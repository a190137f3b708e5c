import pytest

from eduforge import crud, schemas
from eduforge.models import (
    AuditLog,
    Notification,
    NotificationType,
    TicketPriority,
    TicketReply,
    TicketStatus,
)
from eduforge.services import ticket_workflow
from eduforge.services.policy import Actor
from eduforge.utils.errors import Conflict, Forbidden, NotFound, ValidationFailed


def _ticket(db, actor, title="Cannot upload", priority="MEDIUM", content=None):
    return ticket_workflow.create_ticket(
        db,
        actor,
        schemas.TicketCreate(title=title, priority=priority, content=content),
    )


def test_create_ticket_notifies_admins_and_stores_opening_message(
    db, student_actor, admin
):
    ticket = _ticket(db, student_actor, content="The upload button spins forever")

    assert ticket.status == TicketStatus.OPEN
    assert ticket.priority == TicketPriority.MEDIUM
    assert ticket.reply_count == 1
    assert ticket.replies[0].is_admin is False
    notif = db.query(Notification).filter_by(user_id=admin.id).one()
    assert notif.type == NotificationType.TICKET_CREATED
    assert db.query(AuditLog).filter_by(action="CREATE_TICKET").count() == 1


def test_priority_is_case_insensitive():
    data = schemas.TicketCreate(title="x", priority="urgent")
    assert data.priority == TicketPriority.URGENT


def test_admin_reply_notifies_owner(db, student_actor, admin_actor):
    ticket = _ticket(db, student_actor)

    ticket_workflow.add_ticket_reply(db, ticket.id, "Looking into it", admin_actor)

    notif = (
        db.query(Notification)
        .filter_by(user_id=student_actor.id, type=NotificationType.TICKET_UPDATED)
        .one()
    )
    assert "replied" in notif.message


def test_student_reply_notifies_admins(db, student_actor, admin):
    ticket = _ticket(db, student_actor)
    before = db.query(Notification).filter_by(user_id=admin.id).count()

    reply = ticket_workflow.add_ticket_reply(db, ticket.id, "Any news?", student_actor)

    assert reply.is_admin is False
    assert db.query(Notification).filter_by(user_id=admin.id).count() == before + 1


def test_reply_reopens_closed_ticket(db, student_actor, admin_actor):
    ticket = _ticket(db, student_actor)
    closed = ticket_workflow.update_ticket_status(db, ticket.id, "CLOSED", admin_actor)
    assert closed.resolved_at is not None

    ticket_workflow.add_ticket_reply(db, ticket.id, "Still broken", student_actor)

    db.refresh(ticket)
    assert ticket.status == TicketStatus.IN_PROGRESS
    assert ticket.reply_count == 1


def test_reply_on_resolved_ticket_keeps_status(db, student_actor, admin_actor):
    ticket = _ticket(db, student_actor)
    ticket_workflow.update_ticket_status(db, ticket.id, "RESOLVED", admin_actor)

    ticket_workflow.add_ticket_reply(db, ticket.id, "Thanks!", student_actor)

    db.refresh(ticket)
    assert ticket.status == TicketStatus.RESOLVED


def test_empty_reply_rejected(db, student_actor):
    ticket = _ticket(db, student_actor)
    with pytest.raises(ValidationFailed):
        ticket_workflow.add_ticket_reply(db, ticket.id, "  ", student_actor)
    assert db.query(TicketReply).count() == 0


def test_other_student_cannot_reply(db, student_actor, other_student):
    ticket = _ticket(db, student_actor)
    with pytest.raises(Forbidden):
        ticket_workflow.add_ticket_reply(
            db, ticket.id, "hi", Actor.from_user(other_student)
        )


def test_reply_to_missing_ticket(db, student_actor):
    with pytest.raises(NotFound):
        ticket_workflow.add_ticket_reply(db, 12345, "hello", student_actor)


def test_status_update_changes_priority_and_notifies(db, student_actor, admin_actor):
    ticket = _ticket(db, student_actor)

    updated = ticket_workflow.update_ticket_status(
        db, ticket.id, "IN_PROGRESS", admin_actor, priority="HIGH"
    )

    assert updated.status == TicketStatus.IN_PROGRESS
    assert updated.priority == TicketPriority.HIGH
    assert updated.resolved_at is None
    notif = db.query(Notification).filter_by(user_id=student_actor.id).one()
    assert notif.message.endswith("updated to IN_PROGRESS.")


def test_student_cannot_change_status(db, student_actor):
    ticket = _ticket(db, student_actor)
    with pytest.raises(Forbidden):
        ticket_workflow.update_ticket_status(db, ticket.id, "CLOSED", student_actor)


def test_closed_ticket_cannot_jump_to_resolved(db, student_actor, admin_actor):
    ticket = _ticket(db, student_actor)
    ticket_workflow.update_ticket_status(db, ticket.id, "CLOSED", admin_actor)
    with pytest.raises(Conflict):
        ticket_workflow.update_ticket_status(db, ticket.id, "RESOLVED", admin_actor)


def test_list_orders_by_priority_then_newest(db, student_actor):
    low = _ticket(db, student_actor, "low", "LOW")
    urgent = _ticket(db, student_actor, "urgent", "URGENT")
    medium_old = _ticket(db, student_actor, "medium old", "MEDIUM")
    high = _ticket(db, student_actor, "high", "HIGH")
    medium_new = _ticket(db, student_actor, "medium new", "MEDIUM")

    rows, meta = crud.crud_ticket.list_tickets(db, user_id=student_actor.id)

    assert [t.id for t in rows] == [
        urgent.id,
        high.id,
        medium_new.id,
        medium_old.id,
        low.id,
    ]
    assert meta["total"] == 5


def test_list_filters_by_owner(db, student_actor, other_student):
    _ticket(db, student_actor)
    _ticket(db, Actor.from_user(other_student))

    rows, meta = crud.crud_ticket.list_tickets(db, user_id=other_student.id)

    assert meta["total"] == 1
    assert rows[0].user_id == other_student.id
