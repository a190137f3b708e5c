from fastapi import Depends, status

from ..database import get_db  # noqa: F401
from ..models import User
from ..services.policy import Action, Actor, authorize
from ..utils.errors import error_response
from .auth import get_current_user as _decode_current_user


def get_current_user(current_user: User = Depends(_decode_current_user)) -> User:
    """Authenticated, non-suspended user."""
    if current_user.is_suspended:
        raise error_response(
            "Account suspended", {"account": "suspended"}, status.HTTP_403_FORBIDDEN
        )
    return current_user


def get_current_actor(current_user: User = Depends(get_current_user)) -> Actor:
    return Actor.from_user(current_user)


def require_action(action: Action):
    """Route gate applying the workflow policy before the body is validated."""

    def _dep(actor: Actor = Depends(get_current_actor)) -> Actor:
        authorize(actor, action)
        return actor

    return _dep
