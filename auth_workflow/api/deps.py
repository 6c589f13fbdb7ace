"""
Dependency injection for FastAPI endpoints.
Resolves services from the container and authenticates bearer tokens.
"""
from typing import Optional
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
import structlog

from ..container import get_container
from ..core.errors import AuthServiceError, ErrorKind
from ..interfaces.upload_interface import IUploadService
from ..services.auth.token_service import TokenService
from ..services.auth.workflow_service import AuthWorkflowService

security = HTTPBearer(auto_error=False)


def get_auth_workflow() -> AuthWorkflowService:
    """Get a workflow engine wired from the container."""
    return get_container().get(AuthWorkflowService)


def get_token_service() -> TokenService:
    return get_container().get(TokenService)


def get_upload_service() -> IUploadService:
    return get_container().get(IUploadService)


async def get_current_account_id(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    token_service: TokenService = Depends(get_token_service)
) -> str:
    """
    Get the authenticated account identity from the bearer token.

    Tokens are stateless, so no store is consulted here.

    Raises:
        AuthServiceError: UNAUTHORIZED if the header is missing or the token is invalid
    """
    if credentials is None or not credentials.credentials:
        raise AuthServiceError(ErrorKind.UNAUTHORIZED, "No Token Provided")

    payload = token_service.decode_access_token(credentials.credentials)
    request.state.account_id = payload.account_id
    structlog.contextvars.bind_contextvars(account_id=payload.account_id)
    return payload.account_id
