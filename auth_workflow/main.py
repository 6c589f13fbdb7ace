"""
FastAPI application entry point for the auth workflow service.
"""
from contextlib import asynccontextmanager
from typing import Any, Dict, List
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import structlog
import uvicorn

from .core.config import settings
from .core.database import DatabaseHealthCheck, close_db_connections, create_tables
from .core.errors import ERROR_STATUS, AuthServiceError, ErrorKind
from .core.middleware import ErrorHandlingMiddleware, RequestTrackingMiddleware, error_response
from .api.auth import router as auth_router
from .container.container import cleanup_container, initialize_container


# Configure structured logging
structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.ConsoleRenderer() if settings.DEBUG else structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.make_filtering_bound_logger(10 if settings.DEBUG else 20),
    logger_factory=structlog.WriteLoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()

KIND_BY_STATUS = {code: kind for kind, (code, _) in ERROR_STATUS.items()}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.
    Handles startup and shutdown events.
    """
    logger.info("Starting auth service", version=settings.VERSION, environment=settings.ENVIRONMENT)

    try:
        if settings.ENVIRONMENT in ("development", "test"):
            await create_tables()

        await initialize_container()
        logger.info("Dependency injection container initialized")

        yield

    finally:
        logger.info("Shutting down auth service")
        await cleanup_container()
        await close_db_connections()
        logger.info("Auth service shutdown complete")


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="User registration, login, email OTP verification and password reset",
    version=settings.VERSION,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    openapi_url="/openapi.json" if settings.DEBUG else None,
    lifespan=lifespan
)

# Error handling is outermost
app.add_middleware(RequestTrackingMiddleware)
app.add_middleware(ErrorHandlingMiddleware)

if settings.BACKEND_CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"]
    )


def _field_errors(exc: RequestValidationError) -> List[Dict[str, Any]]:
    errors = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        message = error.get("msg", "Invalid value")
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.append({"field": ".".join(location), "message": message})
    return errors


@app.exception_handler(AuthServiceError)
async def auth_service_exception_handler(request: Request, exc: AuthServiceError):
    """Render typed workflow failures."""
    if exc.kind is ErrorKind.INTERNAL_ERROR:
        logger.error("Internal error", message=exc.message, path=request.url.path)
    return error_response(exc.kind, exc.message, errors=exc.errors, exc=exc)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle Pydantic validation errors."""
    errors = _field_errors(exc)
    logger.warning("Validation error", errors=errors, path=request.url.path)
    return error_response(ErrorKind.VALIDATION_ERROR, "Validation Error", errors=errors, exc=exc)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle routing and framework HTTP exceptions."""
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        return error_response(ErrorKind.NOT_FOUND, "Route Not Found", exc=exc)
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        return error_response(
            ErrorKind.METHOD_NOT_ALLOWED,
            f"Method {request.method} not allowed on {request.url.path}",
            exc=exc
        )

    kind = KIND_BY_STATUS.get(exc.status_code, ErrorKind.INTERNAL_ERROR)
    return error_response(kind, str(exc.detail), exc=exc)


@app.get("/health", tags=["health"])
async def health_check():
    """Basic health check endpoint."""
    return {"status": "healthy", "service": "auth-workflow-service", "version": settings.VERSION}


@app.get("/ready", tags=["health"])
async def readiness_check():
    """Readiness check with dependency validation."""
    checks = {"database": await DatabaseHealthCheck.check_connection()}

    if not all(checks.values()):
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "checks": checks, "version": settings.VERSION}
        )
    return {"status": "ready", "checks": checks, "version": settings.VERSION}


app.include_router(auth_router, prefix=settings.API_V1_STR)


def run_dev():
    """Run development server."""
    uvicorn.run(
        "auth_workflow.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="debug" if settings.DEBUG else "info"
    )


def run_prod():
    """Run production server."""
    uvicorn.run(
        "auth_workflow.main:app",
        host="0.0.0.0",
        port=8000,
        reload=False,
        log_level="info",
        workers=1,
        access_log=False
    )


if __name__ == "__main__":
    if settings.DEBUG:
        run_dev()
    else:
        run_prod()
