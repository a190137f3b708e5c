"""Audit recorder.

Entries are added to the caller's session and committed together with the
change they describe, so an audit row never outlives a rolled-back mutation.
"""

import logging
from typing import Any, Optional

from sqlalchemy.orm import Session

from .. import models
from .json_utils import dumps

logger = logging.getLogger(__name__)


def record_audit(
    db: Session,
    actor_id: int,
    action: str,
    entity_type: str,
    entity_id: Any,
    changes: Optional[Any] = None,
) -> models.AuditLog:
    """Append one audit entry for a mutating action."""
    entry = models.AuditLog(
        user_id=actor_id,
        action=action,
        entity_type=entity_type,
        entity_id=str(entity_id),
        changes=dumps(changes) if changes is not None else None,
    )
    db.add(entry)
    logger.info(
        "audit action=%s entity=%s:%s actor=%s", action, entity_type, entity_id, actor_id
    )
    return entry
