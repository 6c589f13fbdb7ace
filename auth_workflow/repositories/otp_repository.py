"""
One-time code repository implementation following the Repository pattern.
"""

import secrets
from datetime import timedelta
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
import structlog

from ..core.config import settings
from ..interfaces.repository_interface import IOneTimeCodeRepository
from ..models.account import normalize_email
from ..models.base import utcnow
from ..models.otp import OneTimeCode

logger = structlog.get_logger()


def generate_code(length: int) -> str:
    """Numeric code with leading zeros preserved."""
    return f"{secrets.randbelow(10 ** length):0{length}d}"


class OneTimeCodeRepository(IOneTimeCodeRepository):
    """Repository for one-time code issuance and validation."""

    def __init__(
        self,
        code_length: int = settings.OTP_LENGTH,
        expire_minutes: int = settings.OTP_EXPIRE_MINUTES
    ):
        self.code_length = code_length
        self.ttl = timedelta(minutes=expire_minutes)

    async def issue(self, db: AsyncSession, email: str) -> str:
        email = normalize_email(email)
        # A newer code always supersedes older ones
        await self.consume(db, email)

        code = generate_code(self.code_length)
        await OneTimeCode(email=email, code=code, expires_at=utcnow() + self.ttl).save(db)

        logger.info("One-time code issued", ttl_seconds=int(self.ttl.total_seconds()))
        return code

    async def verify(self, db: AsyncSession, email: str, code: str) -> bool:
        if not code:
            return False

        result = await db.execute(
            select(OneTimeCode).where(
                OneTimeCode.email == normalize_email(email),
                OneTimeCode.code == str(code)
            )
        )
        record = result.scalars().first()
        if not record:
            return False
        if record.is_expired():
            logger.info("Expired one-time code presented")
            return False
        return True

    async def consume(self, db: AsyncSession, email: str) -> int:
        result = await db.execute(
            delete(OneTimeCode).where(OneTimeCode.email == normalize_email(email))
        )
        return result.rowcount or 0
