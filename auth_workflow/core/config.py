from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, ValidationError, field_validator
from typing import List, Optional, Any
import sys
from functools import lru_cache
import structlog

logger = structlog.get_logger()


class Settings(BaseSettings):
    """
    Auth Workflow Service Configuration

    Sensitive values MUST be provided via environment variables.
    The service will fail fast if required security configurations are missing.
    """

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env",
        extra="ignore",
        validate_assignment=True,
    )

    # Application settings
    APP_NAME: str = "Auth Workflow Service"
    VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "production"

    # API settings
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Auth Workflow Service"

    # Security settings - REQUIRED, NO DEFAULTS
    SECRET_KEY: str = Field(..., min_length=32)
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=1440, ge=5, le=43200)  # 1 day default
    PASSWORD_MIN_LENGTH: int = Field(default=5, ge=5, le=128)

    # One-time codes
    OTP_LENGTH: int = Field(default=6, ge=4, le=10)
    OTP_EXPIRE_MINUTES: int = Field(default=10, ge=1, le=1440)

    # Upper bound for a single workflow operation (store + mail calls)
    REQUEST_TIMEOUT_SECONDS: float = Field(default=30.0, gt=0, le=300)

    # Database - REQUIRED
    DATABASE_URL: str
    DATABASE_POOL_SIZE: int = Field(default=20, ge=1, le=200)
    DATABASE_MAX_OVERFLOW: int = Field(default=40, ge=0, le=200)
    DATABASE_POOL_RECYCLE: int = Field(default=1800, ge=300, le=3600)

    # CORS settings
    BACKEND_CORS_ORIGINS: List[str] = Field(default_factory=list)

    # Email settings
    EMAIL_BACKEND: str = "console"
    SENDGRID_API_KEY: Optional[str] = None
    EMAILS_FROM_EMAIL: str = "Admin@BCT.com"

    # Uploads
    UPLOAD_FOLDER: str = "AppName"
    CLOUDINARY_CLOUD_NAME: Optional[str] = None
    CLOUDINARY_API_KEY: Optional[str] = None
    CLOUDINARY_API_SECRET: Optional[str] = None
    AWS_S3_BUCKET: Optional[str] = None
    AWS_REGION: str = "us-east-1"

    DEFAULT_AVATAR_URL: str = (
        "https://res.cloudinary.com/demmgc49v/image/upload/v1695969739/default-avatar_scnpps.jpg"
    )

    @field_validator("SECRET_KEY")
    @classmethod
    def validate_secret_key(cls, v: str) -> str:
        """Validate that the signing key is strong enough"""
        bad_values = ["your-secret-key", "change-me", "password", "12345"]
        if any(bad in v.lower() for bad in bad_values):
            raise ValueError("SECRET_KEY contains weak or default values")
        return v

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: Any) -> List[str]:
        """Parse CORS origins from comma-separated string or list"""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        elif isinstance(v, list):
            return v
        return []

    @field_validator("ENVIRONMENT")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        valid_envs = ["development", "staging", "production", "test"]
        if v not in valid_envs:
            raise ValueError(f"ENVIRONMENT must be one of: {valid_envs}")
        return v

    @field_validator("EMAIL_BACKEND")
    @classmethod
    def validate_email_backend(cls, v: str) -> str:
        valid_backends = ["console", "sendgrid"]
        if v not in valid_backends:
            raise ValueError(f"EMAIL_BACKEND must be one of: {valid_backends}")
        return v

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"


def validate_required_settings(settings: Settings) -> None:
    """
    Validate settings that depend on each other.
    Fail fast if critical settings are missing or invalid.
    """
    errors = []

    if settings.is_production and settings.DEBUG:
        errors.append("DEBUG must be False in production")

    if settings.EMAIL_BACKEND == "sendgrid" and not settings.SENDGRID_API_KEY:
        errors.append("SENDGRID_API_KEY is required when EMAIL_BACKEND=sendgrid")

    if settings.is_production and settings.EMAIL_BACKEND == "console":
        errors.append("EMAIL_BACKEND=console cannot be used in production")

    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        logger.error(error_msg)
        raise ValueError(error_msg)

    logger.info(
        "Configuration validated successfully",
        environment=settings.ENVIRONMENT,
        debug=settings.DEBUG,
        email_backend=settings.EMAIL_BACKEND,
        otp_expire_minutes=settings.OTP_EXPIRE_MINUTES,
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Fails fast if required environment variables are missing.
    """
    try:
        settings = Settings()
        validate_required_settings(settings)
        return settings
    except ValidationError as e:
        logger.error("Failed to load settings", errors=e.errors())
        print("\n" + "=" * 60)
        print("CONFIGURATION ERROR")
        print("=" * 60)
        print("\nRequired environment variables are missing or invalid:")
        for error in e.errors():
            field = error.get("loc", ["unknown"])[0]
            msg = error.get("msg", "Invalid value")
            print(f"  - {field}: {msg}")
        print("\nPlease check your environment variables and .env file")
        print("=" * 60 + "\n")
        sys.exit(1)
    except ValueError as e:
        logger.error("Invalid configuration", error=str(e))
        sys.exit(1)


# Initialize settings on module import
settings = get_settings()
