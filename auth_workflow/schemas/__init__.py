"""
Pydantic schemas for request/response validation.
"""
from .envelopes import ApiSuccess, ErrorResponse, FieldError
from .auth_schemas import (
    RegistrationRequest,
    LoginRequest,
    EmailRequest,
    VerifyOTPRequest,
    ResetPasswordRequest
)

__all__ = [
    "ApiSuccess",
    "ErrorResponse",
    "FieldError",
    "RegistrationRequest",
    "LoginRequest",
    "EmailRequest",
    "VerifyOTPRequest",
    "ResetPasswordRequest"
]
