"""
Repository interfaces for dependency abstraction.
Defines contracts for data access operations to enable dependency injection
and improve testability.
"""

from typing import List, Optional, Protocol, runtime_checkable
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.account import Account
from ..models.profile import UserProfile


@runtime_checkable
class IAccountRepository(Protocol):
    """Protocol for credential store operations."""

    async def get_by_email(self, db: AsyncSession, email: str) -> Account:
        """
        Get account by email.

        Args:
            db: Database session
            email: Account email (normalised before lookup)

        Returns:
            Account instance

        Raises:
            AuthServiceError: NOT_FOUND if no account uses this email
        """
        ...

    async def get_by_id(self, db: AsyncSession, account_id: str) -> Optional[Account]:
        """Get account by identity, or None."""
        ...

    async def create(
        self,
        db: AsyncSession,
        email: str,
        password_hash: str,
        roles: Optional[List[str]] = None
    ) -> Account:
        """
        Create a new account inside the caller's transaction.

        Raises:
            AuthServiceError: CONFLICT if the email already exists
        """
        ...

    async def update_password(self, db: AsyncSession, account_id: str, password_hash: str) -> None:
        """Replace the stored password hash."""
        ...


@runtime_checkable
class IProfileRepository(Protocol):
    """Protocol for profile store operations."""

    async def get_by_identifier_or_email(self, db: AsyncSession, key: str) -> UserProfile:
        """
        Resolve a profile from an account identity or an email address.

        Raises:
            AuthServiceError: NOT_FOUND if nothing matches
        """
        ...

    async def create(
        self,
        db: AsyncSession,
        account_id: str,
        email: str,
        first_name: str,
        last_name: str,
        phone_number: str
    ) -> UserProfile:
        """
        Create the profile for an account inside the caller's transaction.

        Raises:
            AuthServiceError: CONFLICT if the email already exists
        """
        ...

    async def mark_verified(self, db: AsyncSession, profile: UserProfile) -> UserProfile:
        """Set the verification flag and persist it."""
        ...

    async def save(self, db: AsyncSession, profile: UserProfile) -> UserProfile:
        """Persist pending changes on a profile."""
        ...


@runtime_checkable
class IOneTimeCodeRepository(Protocol):
    """Protocol for one-time code store operations."""

    async def issue(self, db: AsyncSession, email: str) -> str:
        """
        Replace any code for the email with a fresh one.

        Returns:
            The plaintext code, for dispatch
        """
        ...

    async def verify(self, db: AsyncSession, email: str, code: str) -> bool:
        """True only if this exact (email, code) pair exists and has not expired."""
        ...

    async def consume(self, db: AsyncSession, email: str) -> int:
        """Delete every code for the email. Returns the number removed."""
        ...
