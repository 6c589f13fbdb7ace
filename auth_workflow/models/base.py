"""
Base model class with common fields and functionality.
"""
import uuid
from datetime import datetime, timezone
from typing import Optional, Type, TypeVar
from sqlalchemy import Column, DateTime, String, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import declarative_base
import structlog

logger = structlog.get_logger()

T = TypeVar('T', bound='BaseModel')

Base = declarative_base()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """SQLite hands back naive datetimes; treat them as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def new_identifier() -> str:
    return str(uuid.uuid4())


class TimestampMixin:
    """Mixin for created_at and updated_at timestamps."""

    created_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True
    )
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False
    )


class BaseModel(Base, TimestampMixin):
    """Base model with common functionality for all models."""

    __abstract__ = True

    id = Column(String(36), primary_key=True, default=new_identifier)

    @classmethod
    async def get_by_id(cls: Type[T], db: AsyncSession, id: str) -> Optional[T]:
        """Get record by ID."""
        result = await db.execute(select(cls).where(cls.id == id))
        return result.scalar_one_or_none()

    async def save(self, db: AsyncSession) -> T:
        """Flush instance to the current transaction."""
        try:
            db.add(self)
            await db.flush()
            await db.refresh(self)
            return self
        except Exception as e:
            logger.error(
                "Failed to save model instance",
                model=self.__class__.__name__,
                error=str(e)
            )
            raise

    def __repr__(self) -> str:
        """String representation of model."""
        return f"<{self.__class__.__name__}(id={self.id})>"
