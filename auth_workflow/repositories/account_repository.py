"""
Account repository implementation following the Repository pattern.
Handles credential data access inside the caller's transaction.
"""

from typing import List, Optional
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
import structlog

from ..core.errors import AuthServiceError, ErrorKind
from ..interfaces.repository_interface import IAccountRepository
from ..models.account import Account, normalize_email

logger = structlog.get_logger()

DUPLICATE_EMAIL_MESSAGE = "User with this email already exists"


class AccountRepository(IAccountRepository):
    """Repository for account data access operations."""

    async def get_by_email(self, db: AsyncSession, email: str) -> Account:
        result = await db.execute(
            select(Account).where(Account.email == normalize_email(email))
        )
        account = result.scalar_one_or_none()
        if not account:
            raise AuthServiceError(ErrorKind.NOT_FOUND, "No user with this email")
        return account

    async def get_by_id(self, db: AsyncSession, account_id: str) -> Optional[Account]:
        return await Account.get_by_id(db, account_id)

    async def create(
        self,
        db: AsyncSession,
        email: str,
        password_hash: str,
        roles: Optional[List[str]] = None
    ) -> Account:
        """
        Create a new account. Only flushes; the caller owns commit and rollback.

        Args:
            db: Database session with an open transaction
            email: Account email
            password_hash: Already hashed password
            roles: Role names, defaults to ["user"]

        Returns:
            Created account instance
        """
        account = Account(
            email=email,
            password_hash=password_hash,
            roles=roles or ["user"]
        )
        try:
            await account.save(db)
        except IntegrityError as e:
            logger.info("Account creation rejected by uniqueness constraint")
            raise AuthServiceError(ErrorKind.CONFLICT, DUPLICATE_EMAIL_MESSAGE) from e

        logger.info("Account created", account_id=account.id)
        return account

    async def update_password(self, db: AsyncSession, account_id: str, password_hash: str) -> None:
        result = await db.execute(
            update(Account)
            .where(Account.id == account_id)
            .values(password_hash=password_hash)
        )
        if result.rowcount == 0:
            raise AuthServiceError(ErrorKind.NOT_FOUND, "No user with this email")
        logger.info("Account password updated", account_id=account_id)
