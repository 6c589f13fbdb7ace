"""
Repository implementations following the Repository pattern.
Provides the data access layer behind the store interfaces.
"""

from .account_repository import AccountRepository
from .profile_repository import ProfileRepository
from .otp_repository import OneTimeCodeRepository

__all__ = [
    "AccountRepository",
    "ProfileRepository",
    "OneTimeCodeRepository"
]
