from passlib.context import CryptContext

from .errors import AuthServiceError, ErrorKind


pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class SecurityService:
    """Handles password hashing and comparison"""

    @staticmethod
    def get_password_hash(password: str) -> str:
        """Generate password hash"""
        if not password:
            raise AuthServiceError(ErrorKind.BAD_REQUEST, "Please provide a password")
        return pwd_context.hash(password)

    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        """Verify a password against its hash"""
        if not plain_password or not hashed_password:
            raise AuthServiceError(ErrorKind.BAD_REQUEST, "Please provide a password")
        return pwd_context.verify(plain_password, hashed_password)

    @staticmethod
    def validate_password(plain_password: str, hashed_password: str) -> None:
        """Raise Unauthorized unless the password matches the stored hash"""
        if not SecurityService.verify_password(plain_password, hashed_password):
            raise AuthServiceError(ErrorKind.UNAUTHORIZED, "Unauthorized")
