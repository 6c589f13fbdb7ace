"""
Interface definitions for dependency abstractions.
These Protocol classes define contracts for services to enable dependency injection
and improve testability.
"""

from .repository_interface import IAccountRepository, IProfileRepository, IOneTimeCodeRepository
from .notification_interface import INotificationDispatcher
from .upload_interface import IUploadService

__all__ = [
    "IAccountRepository",
    "IProfileRepository",
    "IOneTimeCodeRepository",
    "INotificationDispatcher",
    "IUploadService"
]
