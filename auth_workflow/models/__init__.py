"""
Database models for the authentication service.
"""
from .base import Base
from .account import Account
from .profile import UserProfile
from .otp import OneTimeCode

__all__ = [
    "Base",
    "Account",
    "UserProfile",
    "OneTimeCode"
]
