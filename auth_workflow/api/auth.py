"""
Authentication endpoints.
Implements signup, signin, OTP verification, password reset and the
authenticated profile routes. Every handler delegates to the workflow engine.
"""
import asyncio
import os
import shutil
import tempfile
from typing import Optional
from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from fastapi.responses import JSONResponse
import structlog

from ..core.errors import AuthServiceError, ErrorKind
from ..interfaces.upload_interface import IUploadService
from ..schemas.auth_schemas import (
    EmailRequest,
    LoginRequest,
    RegistrationRequest,
    ResetPasswordRequest,
    VerifyOTPRequest
)
from ..schemas.envelopes import ApiSuccess, ErrorResponse
from ..services.auth.workflow_service import AuthWorkflowService
from .deps import get_auth_workflow, get_current_account_id, get_upload_service

logger = structlog.get_logger()
router = APIRouter(prefix="/auth", tags=["authentication"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    422: {"model": ErrorResponse}
}


def render(result: ApiSuccess) -> JSONResponse:
    return JSONResponse(status_code=result.status_code, content=result.model_dump())


@router.get("", response_model=ApiSuccess, responses=ERROR_RESPONSES)
async def get_user(
    account_id: str = Depends(get_current_account_id),
    workflow: AuthWorkflowService = Depends(get_auth_workflow)
):
    """Return the authenticated user's profile."""
    return render(await workflow.get_user(account_id))


@router.put("/avatar", response_model=ApiSuccess, responses=ERROR_RESPONSES)
async def update_avatar(
    file: Optional[UploadFile] = File(None),
    provider: str = Query("cloudinary", description="Upload provider: cloudinary or aws"),
    account_id: str = Depends(get_current_account_id),
    workflow: AuthWorkflowService = Depends(get_auth_workflow),
    upload_service: IUploadService = Depends(get_upload_service)
):
    """
    Upload a new profile image and store its URL.

    - **file**: image, multipart form field
    - **provider**: `cloudinary` (default) or `aws`
    """
    if file is None or not file.filename:
        raise AuthServiceError(ErrorKind.BAD_REQUEST, "Please upload an image")

    suffix = os.path.splitext(file.filename)[1]
    with tempfile.NamedTemporaryFile(suffix=suffix, delete=False) as tmp:
        await asyncio.to_thread(shutil.copyfileobj, file.file, tmp)
        temp_path = tmp.name

    try:
        image_url = await upload_service.upload(temp_path, provider=provider)
        logger.info("Avatar uploaded", account_id=account_id, provider=provider)
    finally:
        os.unlink(temp_path)
        await file.close()

    return render(await workflow.update_avatar(account_id, image_url))


@router.post(
    "/signup",
    response_model=ApiSuccess,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES
)
async def signup(
    registration: RegistrationRequest,
    workflow: AuthWorkflowService = Depends(get_auth_workflow)
):
    """
    Register a new user and email them a verification OTP.

    - **email**: unique email address
    - **password**: at least the configured minimum length
    - **firstName** / **lastName**
    - **phoneNumber**: e.g. 08012345678
    - **roles**: optional, one of `user` or `admin`
    """
    return render(await workflow.register(registration))


@router.post("/signin", response_model=ApiSuccess, responses=ERROR_RESPONSES)
async def signin(
    login_data: LoginRequest,
    workflow: AuthWorkflowService = Depends(get_auth_workflow)
):
    """Authenticate a verified user and return a bearer token."""
    return render(await workflow.login(login_data.email, login_data.password))


@router.post("/send-otp", response_model=ApiSuccess, responses=ERROR_RESPONSES)
async def send_otp(
    body: EmailRequest,
    workflow: AuthWorkflowService = Depends(get_auth_workflow)
):
    return render(await workflow.send_otp(body.email))


@router.post("/verify-otp", response_model=ApiSuccess, responses=ERROR_RESPONSES)
async def verify_otp(
    body: VerifyOTPRequest,
    workflow: AuthWorkflowService = Depends(get_auth_workflow)
):
    return render(await workflow.verify_otp(body.email, body.otp))


@router.post("/forgot-password", response_model=ApiSuccess, responses=ERROR_RESPONSES)
async def forgot_password(
    body: EmailRequest,
    workflow: AuthWorkflowService = Depends(get_auth_workflow)
):
    """Email a password reset OTP. Works for unverified accounts as well."""
    return render(await workflow.forgot_password(body.email))


@router.post("/reset-password", response_model=ApiSuccess, responses=ERROR_RESPONSES)
async def reset_password(
    body: ResetPasswordRequest,
    workflow: AuthWorkflowService = Depends(get_auth_workflow)
):
    return render(await workflow.reset_password(body.email, body.otp, body.password))
