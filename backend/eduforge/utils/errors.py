from typing import Dict, Optional
from fastapi import HTTPException, status
import logging

logger = logging.getLogger(__name__)


def error_response(
    message: str,
    field_errors: Dict[str, str],
    code: int = status.HTTP_400_BAD_REQUEST,
) -> HTTPException:
    """Return an HTTPException with a consistent structure and log details."""
    logger.error("%s %s", message, field_errors)
    detail = {"message": message, "field_errors": field_errors}
    return HTTPException(status_code=code, detail=detail)


class WorkflowError(Exception):
    """Base class for failures raised by workflow and CRUD operations.

    Each subclass carries the HTTP status it maps to; the API layer renders
    them with the same body shape as :func:`error_response`.
    """

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, field_errors: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.field_errors = field_errors or {}

    def to_detail(self) -> dict:
        return {"message": self.message, "field_errors": self.field_errors}


class Unauthorized(WorkflowError):
    status_code = status.HTTP_401_UNAUTHORIZED


class Forbidden(WorkflowError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFound(WorkflowError):
    status_code = status.HTTP_404_NOT_FOUND


class ValidationFailed(WorkflowError):
    status_code = status.HTTP_400_BAD_REQUEST


class Conflict(WorkflowError):
    status_code = status.HTTP_409_CONFLICT
