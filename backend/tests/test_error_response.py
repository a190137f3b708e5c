import logging

import pytest
from fastapi import HTTPException

from eduforge.utils.errors import (
    Conflict,
    Forbidden,
    NotFound,
    ValidationFailed,
    WorkflowError,
    error_response,
)


def test_error_response_logs(caplog):
    caplog.set_level(logging.ERROR, logger="eduforge.utils.errors")
    with pytest.raises(HTTPException) as exc:
        raise error_response("Invalid", {"field": "bad"})
    assert exc.value.status_code == 400
    assert exc.value.detail == {"message": "Invalid", "field_errors": {"field": "bad"}}
    assert any(
        "Invalid" in r.getMessage() and "'field': 'bad'" in r.getMessage()
        for r in caplog.records
    )


@pytest.mark.parametrize(
    "cls, code",
    [(Forbidden, 403), (NotFound, 404), (ValidationFailed, 400), (Conflict, 409)],
)
def test_workflow_errors_carry_status(cls, code):
    err = cls("nope", {"x": "y"})
    assert isinstance(err, WorkflowError)
    assert err.status_code == code
    assert err.to_detail() == {"message": "nope", "field_errors": {"x": "y"}}


def test_workflow_error_defaults_field_errors():
    assert NotFound("gone").to_detail() == {"message": "gone", "field_errors": {}}
