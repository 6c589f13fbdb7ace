"""
Account model: login identity and credentials.
"""
from typing import List
from sqlalchemy import Column, String, JSON, CheckConstraint
from sqlalchemy.orm import validates

from .base import BaseModel

ALLOWED_ROLES = ("user", "admin")


def normalize_email(email: str) -> str:
    return email.strip().lower()


class Account(BaseModel):
    """Credential record. Email is globally unique and stored normalised."""

    __tablename__ = "account"

    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    roles = Column(JSON, nullable=False, default=lambda: ["user"])

    __table_args__ = (
        CheckConstraint("password_hash <> ''", name="ck_account_password_hash_not_empty"),
    )

    @validates("email")
    def _normalize_email(self, key: str, value: str) -> str:
        return normalize_email(value)

    @validates("roles")
    def _validate_roles(self, key: str, value: List[str]) -> List[str]:
        unknown = [role for role in value if role not in ALLOWED_ROLES]
        if unknown:
            raise ValueError(f"Unknown roles: {unknown}")
        return list(value)

    def summary(self) -> dict:
        return {"email": self.email, "id": self.id}

    def __repr__(self) -> str:
        return f"<Account(id={self.id}, email={self.email})>"
