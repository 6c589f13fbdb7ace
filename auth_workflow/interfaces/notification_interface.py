"""
Notification interfaces for dependency abstraction.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class INotificationDispatcher(Protocol):
    """Protocol for delivering one-time codes to users."""

    async def dispatch(self, email: str, human_name: str, code: str) -> str:
        """
        Deliver a one-time code.

        Args:
            email: Recipient address
            human_name: Name used in the greeting
            code: Plaintext code

        Returns:
            The recipient the message was accepted for

        Raises:
            Exception: Any delivery failure; callers treat it as fatal
        """
        ...
