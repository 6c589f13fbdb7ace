"""
Token service focused solely on JWT token operations.
Tokens are stateless: validation never touches a store.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import ExpiredSignatureError, JWTError, jwt
import structlog

from ...core.config import settings
from ...core.errors import AuthServiceError, ErrorKind

logger = structlog.get_logger()

ACCESS_TOKEN_TYPE = "access"


@dataclass(frozen=True)
class TokenPayload:
    account_id: str
    issued_at: datetime
    expires_at: datetime


class TokenService:
    """Service responsible for signing and validating bearer tokens."""

    def __init__(
        self,
        secret_key: str = settings.SECRET_KEY,
        algorithm: str = settings.ALGORITHM,
        expire_minutes: int = settings.ACCESS_TOKEN_EXPIRE_MINUTES
    ):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.lifetime = timedelta(minutes=expire_minutes)

    def create_access_token(
        self,
        account_id: str,
        expires_delta: Optional[timedelta] = None
    ) -> str:
        """
        Create JWT access token.

        Args:
            account_id: Account identity carried in the ``sub`` claim
            expires_delta: Custom lifetime, defaults to the configured one

        Returns:
            Signed JWT access token
        """
        issued_at = datetime.now(timezone.utc)
        expire = issued_at + (expires_delta if expires_delta is not None else self.lifetime)

        to_encode = {
            "sub": str(account_id),
            "iat": int(issued_at.timestamp()),
            "exp": int(expire.timestamp()),
            "type": ACCESS_TOKEN_TYPE
        }
        token = jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

        logger.debug("Access token created", account_id=account_id)
        return token

    def decode_access_token(self, token: str) -> TokenPayload:
        """
        Validate access token and return its payload.

        Raises:
            AuthServiceError: UNAUTHORIZED with "Token Expired" or "Invalid Token"
        """
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            raise AuthServiceError(ErrorKind.UNAUTHORIZED, "Token Expired")
        except JWTError as e:
            logger.debug("Access token validation failed", error=str(e))
            raise AuthServiceError(ErrorKind.UNAUTHORIZED, "Invalid Token")

        account_id = payload.get("sub")
        if payload.get("type") != ACCESS_TOKEN_TYPE or not account_id:
            raise AuthServiceError(ErrorKind.UNAUTHORIZED, "Invalid Token")

        try:
            return TokenPayload(
                account_id=account_id,
                issued_at=datetime.fromtimestamp(int(payload["iat"]), tz=timezone.utc),
                expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc)
            )
        except (KeyError, TypeError, ValueError):
            raise AuthServiceError(ErrorKind.UNAUTHORIZED, "Invalid Token")
