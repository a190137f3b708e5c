from .json_utils import dumps
from .errors import (
    error_response,
    WorkflowError,
    Unauthorized,
    Forbidden,
    NotFound,
    ValidationFailed,
    Conflict,
)
from .auth import normalize_email
