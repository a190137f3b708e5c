"""Log every workflow status change, whichever code path made it.

Records carry ``entity``, ``entity_id``, ``from_status`` and ``to_status`` as
extra fields so the JSON formatter emits them as keys.
"""

import logging

from sqlalchemy import event
from sqlalchemy.orm.attributes import NO_VALUE

from .. import models

logger = logging.getLogger(__name__)

TRACKED_MODELS = (
    models.ServiceRequest,
    models.Payment,
    models.PaymentDispute,
    models.Ticket,
)

_registered = False


def _plain(value):
    return getattr(value, "value", value)


def _listener_factory(entity: str):
    def _status_change(target, value, oldvalue, initiator):  # noqa: ANN001
        # New rows and unloaded attributes have no meaningful "from" state.
        if oldvalue is NO_VALUE or oldvalue is None or oldvalue == value:
            return
        entity_id = getattr(target, "id", None)
        logger.info(
            "%s id=%s status changed from %s to %s",
            entity,
            entity_id,
            _plain(oldvalue),
            _plain(value),
            extra={
                "entity": entity,
                "entity_id": entity_id,
                "from_status": _plain(oldvalue),
                "to_status": _plain(value),
            },
        )

    return _status_change


def register_status_listeners() -> None:
    """Attach the listeners once per process."""
    global _registered
    if _registered:
        return
    for model in TRACKED_MODELS:
        event.listen(model.status, "set", _listener_factory(model.__name__), propagate=True)
    _registered = True
