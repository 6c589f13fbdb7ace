"""
Repository tests against an in-memory SQLite database.
"""
from datetime import timedelta

import pytest
from sqlalchemy import update

from auth_workflow.core.errors import AuthServiceError, ErrorKind
from auth_workflow.models import Account, OneTimeCode
from auth_workflow.models.base import utcnow
from auth_workflow.repositories import AccountRepository, OneTimeCodeRepository, ProfileRepository
from tests.support import count_rows


@pytest.mark.integration
class TestAccountRepository:

    @pytest.mark.asyncio
    async def test_create_normalises_email(self, db_session):
        account = await AccountRepository().create(db_session, email="  Ada@Example.COM ", password_hash="hash")

        assert account.email == "ada@example.com"
        assert account.roles == ["user"]
        assert (await AccountRepository().get_by_email(db_session, "ADA@example.com")).id == account.id

    @pytest.mark.asyncio
    async def test_duplicate_email_is_conflict(self, session_factory):
        repository = AccountRepository()
        async with session_factory() as db:
            async with db.begin():
                await repository.create(db, email="ada@example.com", password_hash="hash")

        with pytest.raises(AuthServiceError) as exc_info:
            async with session_factory() as db:
                async with db.begin():
                    await repository.create(db, email="ADA@example.com", password_hash="hash")

        assert exc_info.value.kind is ErrorKind.CONFLICT
        assert exc_info.value.message == "User with this email already exists"
        assert await count_rows(session_factory, Account) == 1

    @pytest.mark.asyncio
    async def test_unknown_email_is_not_found(self, db_session):
        with pytest.raises(AuthServiceError) as exc_info:
            await AccountRepository().get_by_email(db_session, "ghost@example.com")

        assert exc_info.value.kind is ErrorKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_update_password(self, db_session):
        repository = AccountRepository()
        account = await repository.create(db_session, email="ada@example.com", password_hash="old")

        await repository.update_password(db_session, account.id, "new")

        assert (await repository.get_by_id(db_session, account.id)).password_hash == "new"

    @pytest.mark.asyncio
    async def test_update_password_unknown_account(self, db_session):
        with pytest.raises(AuthServiceError) as exc_info:
            await AccountRepository().update_password(db_session, "5f8d0d55-0000-4000-8000-000000000000", "new")

        assert exc_info.value.kind is ErrorKind.NOT_FOUND


@pytest.mark.integration
class TestProfileRepository:

    @pytest.mark.asyncio
    async def test_lookup_by_identifier_or_email(self, db_session):
        account = await AccountRepository().create(db_session, email="ada@example.com", password_hash="hash")
        repository = ProfileRepository()
        profile = await repository.create(
            db_session,
            account_id=account.id,
            email=account.email,
            first_name="Ada",
            last_name="Obi",
            phone_number="08012345678"
        )

        assert profile.is_verified is False
        assert profile.image
        assert (await repository.get_by_identifier_or_email(db_session, account.id)).id == profile.id
        assert (await repository.get_by_identifier_or_email(db_session, "ADA@example.com")).id == profile.id

    @pytest.mark.asyncio
    async def test_missing_profile(self, db_session):
        with pytest.raises(AuthServiceError) as exc_info:
            await ProfileRepository().get_by_identifier_or_email(db_session, "ghost@example.com")

        assert exc_info.value.message == "User Not Found"

    @pytest.mark.asyncio
    async def test_verified_flag_never_reverts(self, db_session):
        account = await AccountRepository().create(db_session, email="ada@example.com", password_hash="hash")
        repository = ProfileRepository()
        profile = await repository.create(
            db_session, account.id, account.email, "Ada", "Obi", "08012345678"
        )

        await repository.mark_verified(db_session, profile)

        assert profile.is_verified is True
        with pytest.raises(ValueError):
            profile.is_verified = False


@pytest.mark.integration
class TestOneTimeCodeRepository:

    @pytest.mark.asyncio
    async def test_issue_and_verify(self, db_session):
        repository = OneTimeCodeRepository(code_length=6, expire_minutes=10)

        code = await repository.issue(db_session, "ada@example.com")

        assert len(code) == 6 and code.isdigit()
        assert await repository.verify(db_session, "ada@example.com", code)
        assert not await repository.verify(db_session, "other@example.com", code)
        assert not await repository.verify(db_session, "ada@example.com", "")

    @pytest.mark.asyncio
    async def test_new_code_supersedes_old(self, session_factory):
        repository = OneTimeCodeRepository()
        async with session_factory() as db:
            async with db.begin():
                first = await repository.issue(db, "ada@example.com")
                second = await repository.issue(db, "ada@example.com")

        async with session_factory() as db:
            assert await repository.verify(db, "ada@example.com", second)
            if first != second:
                assert not await repository.verify(db, "ada@example.com", first)
        assert await count_rows(session_factory, OneTimeCode, email="ada@example.com") == 1

    @pytest.mark.asyncio
    async def test_expired_code_is_invalid(self, db_session):
        repository = OneTimeCodeRepository()
        code = await repository.issue(db_session, "ada@example.com")

        await db_session.execute(
            update(OneTimeCode)
            .where(OneTimeCode.email == "ada@example.com")
            .values(expires_at=utcnow() - timedelta(seconds=1))
        )

        assert not await repository.verify(db_session, "ada@example.com", code)

    @pytest.mark.asyncio
    async def test_consume(self, db_session):
        repository = OneTimeCodeRepository()
        code = await repository.issue(db_session, "ada@example.com")

        assert await repository.consume(db_session, "ada@example.com") == 1
        assert not await repository.verify(db_session, "ada@example.com", code)
