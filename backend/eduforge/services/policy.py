"""Actor value and per-action authorization policy.

Every workflow operation receives an explicit :class:`Actor` and calls
:func:`authorize` exactly once before touching the store. Ownership checks
that depend on a loaded entity go through :func:`ensure_owner`.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Callable, Dict

from ..models import User, UserRole
from ..utils.errors import Forbidden


@dataclass(frozen=True)
class Actor:
    id: int
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @classmethod
    def from_user(cls, user: User) -> "Actor":
        return cls(id=user.id, role=UserRole(user.role))


class Action(str, enum.Enum):
    CREATE_REQUEST = "CREATE_REQUEST"
    UPDATE_REQUEST_STATUS = "UPDATE_REQUEST_STATUS"
    SUBMIT_PAYMENT = "SUBMIT_PAYMENT"
    REVIEW_PAYMENT = "REVIEW_PAYMENT"
    FILE_DISPUTE = "FILE_DISPUTE"
    RESOLVE_DISPUTE = "RESOLVE_DISPUTE"
    CREATE_TICKET = "CREATE_TICKET"
    UPDATE_TICKET_STATUS = "UPDATE_TICKET_STATUS"
    ADD_TICKET_REPLY = "ADD_TICKET_REPLY"
    UPLOAD_FILE = "UPLOAD_FILE"
    UPLOAD_DELIVERABLE = "UPLOAD_DELIVERABLE"
    CREATE_USER = "CREATE_USER"
    UPDATE_USER = "UPDATE_USER"
    MANAGE_SERVICES = "MANAGE_SERVICES"
    UPDATE_SETTINGS = "UPDATE_SETTINGS"
    VIEW_AUDIT_LOGS = "VIEW_AUDIT_LOGS"
    LIST_USERS = "LIST_USERS"
    MANAGE_CONTACTS = "MANAGE_CONTACTS"


def _admin_only(actor: Actor) -> bool:
    return actor.is_admin


def _student_only(actor: Actor) -> bool:
    return actor.role == UserRole.STUDENT


def _anyone(actor: Actor) -> bool:
    return True


POLICIES: Dict[Action, Callable[[Actor], bool]] = {
    Action.CREATE_REQUEST: _student_only,
    Action.UPDATE_REQUEST_STATUS: _admin_only,
    Action.SUBMIT_PAYMENT: _student_only,
    Action.REVIEW_PAYMENT: _admin_only,
    # Ownership of the payment is checked once it is loaded.
    Action.FILE_DISPUTE: _anyone,
    Action.RESOLVE_DISPUTE: _admin_only,
    Action.CREATE_TICKET: _anyone,
    Action.UPDATE_TICKET_STATUS: _admin_only,
    Action.ADD_TICKET_REPLY: _anyone,
    Action.UPLOAD_FILE: _anyone,
    Action.UPLOAD_DELIVERABLE: _admin_only,
    Action.CREATE_USER: _admin_only,
    Action.UPDATE_USER: _anyone,
    Action.MANAGE_SERVICES: _admin_only,
    Action.UPDATE_SETTINGS: _admin_only,
    Action.VIEW_AUDIT_LOGS: _admin_only,
    Action.LIST_USERS: _admin_only,
    Action.MANAGE_CONTACTS: _admin_only,
}


def authorize(actor: Actor, action: Action) -> None:
    """Raise :class:`Forbidden` unless ``actor`` may perform ``action``."""
    if not POLICIES[action](actor):
        raise Forbidden(
            "You do not have permission to perform this action",
            {"action": action.value},
        )


def ensure_owner(actor: Actor, owner_id: int, entity: str) -> None:
    """Admins act on anything; everyone else only on what they own."""
    if actor.is_admin or actor.id == owner_id:
        return
    raise Forbidden("Forbidden", {entity: "not_owner"})
