import logging
from contextlib import contextmanager

from sqlalchemy.orm import Session

from ..utils.errors import WorkflowError

logger = logging.getLogger(__name__)


@contextmanager
def atomic(db: Session, operation: str):
    """Commit everything a workflow operation added, or nothing.

    The primary change, its audit entry and its notifications share this one
    transaction.
    """
    try:
        yield
        db.commit()
    except WorkflowError as exc:
        db.rollback()
        logger.info("%s rejected: %s", operation, exc.message)
        raise
    except Exception:
        db.rollback()
        logger.exception("%s failed; rolled back", operation)
        raise
