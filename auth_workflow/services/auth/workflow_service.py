"""
Auth workflow engine.

Orchestrates registration, login, OTP verification and password reset over
the account, profile and one-time code stores. Each operation owns exactly one
database transaction; repositories only flush into it.

Account states: unregistered -> registered (unverified) -> verified.
"""

import asyncio
from typing import Any, Awaitable, Callable, Dict, Optional
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
import structlog

from ...core.config import settings
from ...core.errors import AuthServiceError, ErrorKind
from ...core.security import SecurityService
from ...interfaces.notification_interface import INotificationDispatcher
from ...interfaces.repository_interface import (
    IAccountRepository,
    IOneTimeCodeRepository,
    IProfileRepository
)
from ...models.profile import UserProfile
from ...schemas.auth_schemas import RegistrationRequest
from ...schemas.envelopes import ApiSuccess
from .token_service import TokenService

logger = structlog.get_logger()

INVALID_OTP_MESSAGE = "Invalid or Expired OTP"
ALREADY_VERIFIED_MESSAGE = "User Already Verified"


class AuthWorkflowService:
    """Service coordinating the authentication workflow across stores."""

    def __init__(
        self,
        session_factory: async_sessionmaker,
        account_repository: IAccountRepository,
        profile_repository: IProfileRepository,
        otp_repository: IOneTimeCodeRepository,
        token_service: TokenService,
        notification_dispatcher: INotificationDispatcher,
        request_timeout: float = settings.REQUEST_TIMEOUT_SECONDS
    ):
        self.session_factory = session_factory
        self.account_repository = account_repository
        self.profile_repository = profile_repository
        self.otp_repository = otp_repository
        self.token_service = token_service
        self.notification_dispatcher = notification_dispatcher
        self.request_timeout = request_timeout

    async def _run(
        self,
        operation: str,
        work: Callable[[AsyncSession], Awaitable[ApiSuccess]],
        timeout: Optional[float]
    ) -> ApiSuccess:
        """
        Run ``work`` inside one transaction, bounded by a timeout.

        Cancellation on timeout unwinds the ``begin()`` block, which rolls
        the transaction back. A ``TimeoutError`` raised by a collaborator is
        not the deadline and propagates unchanged.
        """
        raised_by_work = False

        async def transactional() -> ApiSuccess:
            nonlocal raised_by_work
            try:
                async with self.session_factory() as db:
                    async with db.begin():
                        return await work(db)
            except asyncio.TimeoutError:
                raised_by_work = True
                raise

        limit = self.request_timeout if timeout is None else timeout
        try:
            return await asyncio.wait_for(transactional(), timeout=limit)
        except asyncio.TimeoutError:
            if raised_by_work:
                raise
            logger.error("Auth operation timed out", operation=operation, timeout=limit)
            raise AuthServiceError(ErrorKind.SERVICE_UNAVAILABLE, "Request timed out")
        except AuthServiceError as e:
            logger.info(
                "Auth operation rejected",
                operation=operation,
                kind=e.kind.value,
                message=e.message
            )
            raise

    async def _send_code(self, db: AsyncSession, profile: UserProfile) -> str:
        code = await self.otp_repository.issue(db, profile.email)
        return await self.notification_dispatcher.dispatch(profile.email, profile.first_name, code)

    async def register(
        self,
        draft: RegistrationRequest,
        timeout: Optional[float] = None
    ) -> ApiSuccess:
        """
        Create account and profile atomically, then issue and mail an OTP.

        Dispatch happens before commit, so a mail failure rolls the new
        account back and the dispatcher's error propagates unchanged.

        Raises:
            AuthServiceError: CONFLICT on duplicate email, BAD_REQUEST on empty password
        """
        password_hash = await asyncio.to_thread(SecurityService.get_password_hash, draft.password)

        async def work(db: AsyncSession) -> ApiSuccess:
            account = await self.account_repository.create(
                db,
                email=draft.email,
                password_hash=password_hash,
                roles=list(draft.roles)
            )
            profile = await self.profile_repository.create(
                db,
                account_id=account.id,
                email=account.email,
                first_name=draft.first_name,
                last_name=draft.last_name,
                phone_number=draft.phone_number
            )
            recipient = await self._send_code(db, profile)

            logger.info("User registered", account_id=account.id)
            return ApiSuccess.created(
                f"Registeration Successful, OTP has been sent to {recipient}",
                data=account.summary()
            )

        return await self._run("register", work, timeout)

    async def login(
        self,
        email: str,
        password: str,
        timeout: Optional[float] = None
    ) -> ApiSuccess:
        """
        Check credentials and the verification gate, then mint a token.

        Raises:
            AuthServiceError: NOT_FOUND, UNAUTHORIZED on password mismatch,
                FORBIDDEN when the email is not verified
        """
        async def work(db: AsyncSession) -> ApiSuccess:
            account = await self.account_repository.get_by_email(db, email)
            await asyncio.to_thread(
                SecurityService.validate_password, password, account.password_hash
            )

            profile = await self.profile_repository.get_by_identifier_or_email(db, account.id)
            if not profile.is_verified:
                raise AuthServiceError(ErrorKind.FORBIDDEN, "Email Not Verified")

            token = self.token_service.create_access_token(account.id)
            logger.info("User logged in", account_id=account.id)
            return ApiSuccess.ok(
                "Login Successful",
                data={"user": account.summary(), "token": token}
            )

        return await self._run("login", work, timeout)

    async def send_otp(self, email: str, timeout: Optional[float] = None) -> ApiSuccess:
        async def work(db: AsyncSession) -> ApiSuccess:
            profile = await self.profile_repository.get_by_identifier_or_email(db, email)
            if profile.is_verified:
                return ApiSuccess.ok(ALREADY_VERIFIED_MESSAGE)

            recipient = await self._send_code(db, profile)
            return ApiSuccess.ok(f"OTP has been sent to {recipient}")

        return await self._run("send_otp", work, timeout)

    async def verify_otp(
        self,
        email: str,
        otp: str,
        timeout: Optional[float] = None
    ) -> ApiSuccess:
        """Flip the profile to verified. A verified profile short-circuits without touching codes."""
        async def work(db: AsyncSession) -> ApiSuccess:
            profile = await self.profile_repository.get_by_identifier_or_email(db, email)
            if profile.is_verified:
                return ApiSuccess.ok(ALREADY_VERIFIED_MESSAGE)

            if not await self.otp_repository.verify(db, profile.email, otp):
                raise AuthServiceError(ErrorKind.BAD_REQUEST, INVALID_OTP_MESSAGE)

            await self.profile_repository.mark_verified(db, profile)
            await self.otp_repository.consume(db, profile.email)
            return ApiSuccess.ok("Email Verified")

        return await self._run("verify_otp", work, timeout)

    async def forgot_password(self, email: str, timeout: Optional[float] = None) -> ApiSuccess:
        """Issue a reset code. Unverified accounts are served too."""
        async def work(db: AsyncSession) -> ApiSuccess:
            profile = await self.profile_repository.get_by_identifier_or_email(db, email)
            recipient = await self._send_code(db, profile)
            return ApiSuccess.ok(f"OTP has been sent to {recipient}")

        return await self._run("forgot_password", work, timeout)

    async def reset_password(
        self,
        email: str,
        otp: str,
        password: str,
        timeout: Optional[float] = None
    ) -> ApiSuccess:
        """
        Replace the password after checking a reset code.

        Raises:
            AuthServiceError: NOT_FOUND for unknown email, BAD_REQUEST for a bad
                code or an empty password
        """
        async def work(db: AsyncSession) -> ApiSuccess:
            account = await self.account_repository.get_by_email(db, email)
            if not await self.otp_repository.verify(db, account.email, otp):
                raise AuthServiceError(ErrorKind.BAD_REQUEST, INVALID_OTP_MESSAGE)

            password_hash = await asyncio.to_thread(SecurityService.get_password_hash, password)
            await self.account_repository.update_password(db, account.id, password_hash)
            await self.otp_repository.consume(db, account.email)

            logger.info("Password reset", account_id=account.id)
            return ApiSuccess.ok("Password Updated")

        return await self._run("reset_password", work, timeout)

    async def get_user(self, account_id: str, timeout: Optional[float] = None) -> ApiSuccess:
        async def work(db: AsyncSession) -> ApiSuccess:
            profile = await self.profile_repository.get_by_identifier_or_email(db, account_id)
            user: Dict[str, Any] = {
                "id": profile.account_id,
                "email": profile.email,
                "firstName": profile.first_name
            }
            return ApiSuccess.ok("User Retrieved Successfully", data={"user": user})

        return await self._run("get_user", work, timeout)

    async def update_avatar(
        self,
        account_id: str,
        image_url: str,
        timeout: Optional[float] = None
    ) -> ApiSuccess:
        async def work(db: AsyncSession) -> ApiSuccess:
            profile = await self.profile_repository.get_by_identifier_or_email(db, account_id)
            profile.image = image_url
            await self.profile_repository.save(db, profile)
            return ApiSuccess.ok("Avatar Updated", data={"image": profile.image})

        return await self._run("update_avatar", work, timeout)
