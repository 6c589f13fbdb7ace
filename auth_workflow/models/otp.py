"""
One-time code model used for email verification and password reset.
"""
from datetime import datetime
from typing import Optional
from sqlalchemy import Column, DateTime, String
from sqlalchemy.orm import validates

from .base import BaseModel, as_utc, utcnow
from .account import normalize_email


class OneTimeCode(BaseModel):
    """Short-lived code addressed to an email. At most one is active per email."""

    __tablename__ = "one_time_code"

    email = Column(String(255), nullable=False, index=True)
    code = Column(String(16), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)

    @validates("email")
    def _normalize_email(self, key: str, value: str) -> str:
        return normalize_email(value)

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        now = now or utcnow()
        return as_utc(self.expires_at) <= now

    def __repr__(self) -> str:
        return f"<OneTimeCode(email={self.email}, expires_at={self.expires_at})>"
