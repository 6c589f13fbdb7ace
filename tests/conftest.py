"""
Pytest configuration and fixtures for auth workflow testing.
Provides an in-memory database, a recording OTP dispatcher and HTTP clients.
"""
import os

# Settings are read at import time
os.environ["SECRET_KEY"] = "test-signing-key-abcdefghijklmnopqrstuvwxyzABCD"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENVIRONMENT"] = "test"
os.environ["EMAIL_BACKEND"] = "console"
os.environ["DEBUG"] = "false"

from typing import AsyncGenerator
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from auth_workflow.api.deps import get_auth_workflow, get_token_service, get_upload_service
from auth_workflow.core.config import settings
from auth_workflow.core.database import create_session_factory
from auth_workflow.main import app
from auth_workflow.models import Base
from auth_workflow.repositories import AccountRepository, OneTimeCodeRepository, ProfileRepository
from auth_workflow.services.auth.token_service import TokenService
from auth_workflow.services.auth.workflow_service import AuthWorkflowService

from tests.support import RecordingDispatcher

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
AVATAR_URL = "https://cdn.example.com/AppName/avatar.png"


@pytest_asyncio.fixture
async def test_engine():
    """Create a fresh in-memory database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False}
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return create_session_factory(test_engine)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Session for direct repository tests; rolled back afterwards."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def dispatcher() -> RecordingDispatcher:
    return RecordingDispatcher()


@pytest.fixture
def token_service() -> TokenService:
    return TokenService(
        secret_key=settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
        expire_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
    )


@pytest.fixture
def workflow(session_factory, dispatcher, token_service) -> AuthWorkflowService:
    return AuthWorkflowService(
        session_factory=session_factory,
        account_repository=AccountRepository(),
        profile_repository=ProfileRepository(),
        otp_repository=OneTimeCodeRepository(),
        token_service=token_service,
        notification_dispatcher=dispatcher
    )


@pytest.fixture
def upload_service() -> AsyncMock:
    service = AsyncMock()
    service.upload.return_value = AVATAR_URL
    return service


@pytest_asyncio.fixture
async def async_client(workflow, token_service, upload_service):
    """HTTP client bound to the app with test services injected."""
    app.dependency_overrides[get_auth_workflow] = lambda: workflow
    app.dependency_overrides[get_token_service] = lambda: token_service
    app.dependency_overrides[get_upload_service] = lambda: upload_service

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
