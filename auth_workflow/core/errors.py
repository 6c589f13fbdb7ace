"""
Error taxonomy for the auth workflow.

Every failure the workflow raises on purpose is an ``AuthServiceError`` tagged
with one ``ErrorKind``. The HTTP boundary renders the kind through
``ERROR_STATUS`` and never inspects anything else.
"""
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class ErrorKind(str, Enum):
    BAD_REQUEST = "bad_request"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    METHOD_NOT_ALLOWED = "method_not_allowed"
    CONFLICT = "conflict"
    VALIDATION_ERROR = "validation_error"
    INTERNAL_ERROR = "internal_error"
    SERVICE_UNAVAILABLE = "service_unavailable"


# kind -> (status_code, status label)
ERROR_STATUS: Dict[ErrorKind, Tuple[int, str]] = {
    ErrorKind.BAD_REQUEST: (400, "Bad Request"),
    ErrorKind.UNAUTHORIZED: (401, "Unauthorized"),
    ErrorKind.FORBIDDEN: (403, "Forbidden"),
    ErrorKind.NOT_FOUND: (404, "Not Found"),
    ErrorKind.METHOD_NOT_ALLOWED: (405, "Method Not Allowed"),
    ErrorKind.CONFLICT: (409, "Conflict"),
    ErrorKind.VALIDATION_ERROR: (422, "Validation Error"),
    ErrorKind.INTERNAL_ERROR: (500, "Internal Server Error"),
    ErrorKind.SERVICE_UNAVAILABLE: (503, "Service Unavailable"),
}


class AuthServiceError(Exception):
    """Typed failure carrying a kind, a user-facing message and optional field errors."""

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        errors: Optional[List[Dict[str, Any]]] = None
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.errors = errors

    @property
    def status_code(self) -> int:
        return ERROR_STATUS[self.kind][0]

    @property
    def status(self) -> str:
        return ERROR_STATUS[self.kind][1]

    def __repr__(self) -> str:
        return f"AuthServiceError(kind={self.kind.value}, message={self.message!r})"
