from eduforge import crud
from eduforge.models import Notification, NotificationType, UserRole
from eduforge.utils.notifications import notify_admins, notify_user

from conftest import create_user


def _seed(db, user_id, n=3):
    rows = [
        notify_user(db, user_id, NotificationType.REQUEST_UPDATED, "t", f"m{i}")
        for i in range(n)
    ]
    db.commit()
    return rows


def test_list_newest_first_with_unread_count(db, student):
    rows = _seed(db, student.id)

    items, meta = crud.crud_notification.get_notifications_for_user(db, student.id)

    assert [n.id for n in items] == [r.id for r in reversed(rows)]
    assert meta == {"page": 1, "limit": 20, "total": 3, "pages": 1}
    assert crud.crud_notification.unread_count(db, student.id) == 3


def test_mark_all_read_is_idempotent(db, student, other_student):
    _seed(db, student.id)
    _seed(db, other_student.id, 1)

    assert crud.crud_notification.mark_all_read(db, student.id) == 3
    assert crud.crud_notification.mark_all_read(db, student.id) == 0

    assert crud.crud_notification.unread_count(db, student.id) == 0
    assert crud.crud_notification.unread_count(db, other_student.id) == 1
    assert all(
        n.read_at is not None
        for n in db.query(Notification).filter_by(user_id=student.id)
    )


def test_mark_selected_ids_only_touches_own_rows(db, student, other_student):
    mine = _seed(db, student.id, 2)
    theirs = _seed(db, other_student.id, 1)

    updated = crud.crud_notification.mark_read(
        db, student.id, [mine[0].id, theirs[0].id]
    )

    assert updated == 1
    assert crud.crud_notification.unread_count(db, student.id) == 1
    assert crud.crud_notification.unread_count(db, other_student.id) == 1


def test_unread_only_filter(db, student):
    rows = _seed(db, student.id)
    crud.crud_notification.mark_as_read(db, rows[0])

    items, meta = crud.crud_notification.get_notifications_for_user(
        db, student.id, unread_only=True
    )

    assert meta["total"] == 2
    assert rows[0].id not in {n.id for n in items}


def test_delete_selected_and_all(db, student):
    rows = _seed(db, student.id)

    assert crud.crud_notification.delete_notifications(db, student.id, [rows[0].id]) == 1
    assert crud.crud_notification.delete_notifications(db, student.id) == 2
    assert db.query(Notification).count() == 0


def test_notify_admins_inserts_one_row_per_admin(db, student, admin):
    ops = create_user(db, "ops@eduforge.com", role=UserRole.ADMIN)

    count = notify_admins(db, NotificationType.TICKET_CREATED, "New", "msg", "/admin/x")
    db.commit()

    assert count == 2
    assert {n.user_id for n in db.query(Notification)} == {admin.id, ops.id}
    assert all(n.is_read is False for n in db.query(Notification))


def test_notify_admins_without_admins(db, student):
    assert notify_admins(db, NotificationType.TICKET_CREATED, "New", "msg") == 0
