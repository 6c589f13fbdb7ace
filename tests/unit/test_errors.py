"""
Tests for the error taxonomy.
"""
import pytest

from auth_workflow.core.errors import ERROR_STATUS, AuthServiceError, ErrorKind


@pytest.mark.unit
def test_every_kind_has_a_status():
    assert set(ERROR_STATUS) == set(ErrorKind)


@pytest.mark.unit
@pytest.mark.parametrize("kind,code,label", [
    (ErrorKind.BAD_REQUEST, 400, "Bad Request"),
    (ErrorKind.UNAUTHORIZED, 401, "Unauthorized"),
    (ErrorKind.FORBIDDEN, 403, "Forbidden"),
    (ErrorKind.NOT_FOUND, 404, "Not Found"),
    (ErrorKind.CONFLICT, 409, "Conflict"),
    (ErrorKind.VALIDATION_ERROR, 422, "Validation Error"),
    (ErrorKind.INTERNAL_ERROR, 500, "Internal Server Error"),
    (ErrorKind.SERVICE_UNAVAILABLE, 503, "Service Unavailable"),
])
def test_error_maps_kind_to_status(kind, code, label):
    error = AuthServiceError(kind, "boom")

    assert error.status_code == code
    assert error.status == label
    assert str(error) == "boom"
