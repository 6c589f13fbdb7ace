"""
HTTP middleware: request tracking and last-resort error handling.
Also renders the uniform error envelope used by every exception handler.
"""
import time
import traceback
import uuid
from typing import Any, Callable, Dict, List, Optional
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from fastapi.responses import JSONResponse
import structlog

from .config import settings
from .errors import ERROR_STATUS, ErrorKind
from ..schemas.envelopes import ErrorResponse

logger = structlog.get_logger()


def error_response(
    kind: ErrorKind,
    message: str,
    errors: Optional[List[Dict[str, Any]]] = None,
    exc: Optional[BaseException] = None
) -> JSONResponse:
    """Build the error envelope; the traceback is withheld in production."""
    status_code, label = ERROR_STATUS[kind]
    stack = None
    if not settings.is_production and exc is not None:
        stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))

    body = ErrorResponse(
        status=label,
        status_code=status_code,
        message=message,
        errors=errors,
        stack=stack
    )
    return JSONResponse(status_code=status_code, content=body.to_content())


class RequestTrackingMiddleware(BaseHTTPMiddleware):
    """Middleware for request tracking and correlation."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        client_ip = request.client.host if request.client else None
        request.state.client_ip = client_ip

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            client_ip=client_ip
        )

        start_time = time.time()

        try:
            response = await call_next(request)
        except Exception as e:
            process_time = time.time() - start_time
            logger.error(
                "Request failed",
                error=str(e),
                process_time=f"{process_time:.3f}s"
            )
            raise

        response.headers["X-Request-ID"] = request_id
        process_time = time.time() - start_time
        logger.info(
            "Request completed",
            status_code=response.status_code,
            process_time=f"{process_time:.3f}s"
        )
        return response


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Turns anything the exception handlers did not catch into a 500 envelope."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            request_id = getattr(request.state, 'request_id', 'unknown')
            logger.error(
                "Unexpected error in request",
                request_id=request_id,
                error=str(e),
                error_type=type(e).__name__,
                path=request.url.path,
                method=request.method
            )
            return error_response(ErrorKind.INTERNAL_ERROR, "Internal Server Error", exc=e)
