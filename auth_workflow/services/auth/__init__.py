"""
Authentication services: token handling and the workflow engine.
"""

from .token_service import TokenPayload, TokenService
from .workflow_service import AuthWorkflowService

__all__ = [
    "TokenPayload",
    "TokenService",
    "AuthWorkflowService"
]
