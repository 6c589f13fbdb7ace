"""
Profile model: personal details and the email verification flag.
"""
from sqlalchemy import Boolean, Column, ForeignKey, String
from sqlalchemy.orm import validates

from .base import BaseModel
from .account import normalize_email
from ..core.config import settings


class UserProfile(BaseModel):
    """One profile per account. ``is_verified`` only ever moves from False to True."""

    __tablename__ = "user_profile"

    account_id = Column(
        String(36),
        ForeignKey("account.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
        index=True
    )
    email = Column(String(255), unique=True, nullable=False, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    phone_number = Column(String(20), nullable=False)
    is_verified = Column(Boolean, default=False, nullable=False)
    image = Column(String(500), nullable=False, default=lambda: settings.DEFAULT_AVATAR_URL)

    @validates("email")
    def _normalize_email(self, key: str, value: str) -> str:
        return normalize_email(value)

    @validates("is_verified")
    def _keep_verified(self, key: str, value: bool) -> bool:
        if self.is_verified and not value:
            raise ValueError("A verified profile cannot be marked unverified")
        return value

    def __repr__(self) -> str:
        return f"<UserProfile(account_id={self.account_id}, is_verified={self.is_verified})>"
