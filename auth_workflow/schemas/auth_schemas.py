"""
Authentication-related Pydantic schemas for request validation.
Wire names follow the public API (camelCase); attributes are snake_case.
"""
from typing import List, Literal
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from ..core.config import settings

PHONE_NUMBER_PATTERN = r"^0[789][01]\d{8}$"


def _check_password_length(password: str) -> str:
    if len(password) < settings.PASSWORD_MIN_LENGTH:
        raise ValueError(
            f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters long"
        )
    return password


class RegistrationRequest(BaseModel):
    """Registration request schema."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "email": "user@example.com",
                "password": "pw12345",
                "firstName": "Ada",
                "lastName": "Obi",
                "phoneNumber": "08012345678",
                "roles": ["user"]
            }
        }
    )

    email: EmailStr = Field(..., description="User's email address (must be unique)")
    password: str = Field(..., description="User's password")
    first_name: str = Field(..., alias="firstName", min_length=1, max_length=100)
    last_name: str = Field(..., alias="lastName", min_length=1, max_length=100)
    phone_number: str = Field(
        ...,
        alias="phoneNumber",
        pattern=PHONE_NUMBER_PATTERN,
        description="Nigerian mobile number, e.g. 08012345678"
    )
    roles: List[Literal["user", "admin"]] = Field(
        default_factory=lambda: ["user"],
        max_length=1,
        description="At most one of 'user' or 'admin'"
    )

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return _check_password_length(v)


class LoginRequest(BaseModel):
    """Login request schema."""

    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., min_length=1, description="User's password")


class EmailRequest(BaseModel):
    """Body for send-otp and forgot-password."""

    email: EmailStr = Field(..., description="User's email address")


class VerifyOTPRequest(BaseModel):
    """Email verification request schema."""

    email: EmailStr
    otp: str = Field(..., min_length=1, max_length=16)


class ResetPasswordRequest(BaseModel):
    """Password reset confirmation schema."""

    email: EmailStr
    otp: str = Field(..., min_length=1, max_length=16)
    password: str = Field(..., description="New password")

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return _check_password_length(v)
