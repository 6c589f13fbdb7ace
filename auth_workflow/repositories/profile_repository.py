"""
Profile repository implementation following the Repository pattern.
"""

import uuid
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
import structlog

from ..core.errors import AuthServiceError, ErrorKind
from ..interfaces.repository_interface import IProfileRepository
from ..models.account import normalize_email
from ..models.profile import UserProfile
from .account_repository import DUPLICATE_EMAIL_MESSAGE

logger = structlog.get_logger()


def is_account_identifier(key: str) -> bool:
    try:
        uuid.UUID(str(key))
    except ValueError:
        return False
    return True


class ProfileRepository(IProfileRepository):
    """Repository for profile data access operations."""

    async def get_by_identifier_or_email(self, db: AsyncSession, key: str) -> UserProfile:
        if is_account_identifier(key):
            query = select(UserProfile).where(UserProfile.account_id == str(key))
        else:
            query = select(UserProfile).where(UserProfile.email == normalize_email(key))

        result = await db.execute(query)
        profile = result.scalar_one_or_none()
        if not profile:
            raise AuthServiceError(ErrorKind.NOT_FOUND, "User Not Found")
        return profile

    async def create(
        self,
        db: AsyncSession,
        account_id: str,
        email: str,
        first_name: str,
        last_name: str,
        phone_number: str
    ) -> UserProfile:
        profile = UserProfile(
            account_id=account_id,
            email=email,
            first_name=first_name,
            last_name=last_name,
            phone_number=phone_number,
            is_verified=False
        )
        try:
            await profile.save(db)
        except IntegrityError as e:
            logger.info("Profile creation rejected by uniqueness constraint", account_id=account_id)
            raise AuthServiceError(ErrorKind.CONFLICT, DUPLICATE_EMAIL_MESSAGE) from e

        logger.info("Profile created", account_id=account_id)
        return profile

    async def mark_verified(self, db: AsyncSession, profile: UserProfile) -> UserProfile:
        profile.is_verified = True
        await self.save(db, profile)
        logger.info("Profile verified", account_id=profile.account_id)
        return profile

    async def save(self, db: AsyncSession, profile: UserProfile) -> UserProfile:
        return await profile.save(db)
