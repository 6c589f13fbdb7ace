"""
Dependency injection container implementation.
Holds the store handles, dispatcher and services handed to the workflow engine.
"""

from typing import Any, Callable, Dict, Optional, Type, TypeVar
from sqlalchemy.ext.asyncio import async_sessionmaker
import structlog

from ..core.config import Settings, settings as default_settings
from ..interfaces.notification_interface import INotificationDispatcher
from ..interfaces.repository_interface import (
    IAccountRepository,
    IOneTimeCodeRepository,
    IProfileRepository
)
from ..interfaces.upload_interface import IUploadService
from ..repositories import AccountRepository, OneTimeCodeRepository, ProfileRepository
from ..services.auth.token_service import TokenService
from ..services.auth.workflow_service import AuthWorkflowService
from ..services.notification_service import create_notification_dispatcher
from ..services.upload_service import UploadService

logger = structlog.get_logger()

T = TypeVar('T')


class Container:
    """Dependency injection container."""

    def __init__(self):
        self._instances: Dict[str, Any] = {}
        self._factories: Dict[str, Callable[[], Any]] = {}
        self._initialized = False

    def register_instance(self, interface: Type[T], instance: T) -> None:
        """
        Register a specific instance for an interface.

        Args:
            interface: Interface type
            instance: Instance to register
        """
        key = interface.__name__
        self._instances[key] = instance
        logger.debug("Registered instance", interface=key, instance=type(instance).__name__)

    def register_factory(self, interface: Type[T], factory: Callable[[], T]) -> None:
        """Register a factory called on every resolution."""
        key = interface.__name__
        self._factories[key] = factory
        logger.debug("Registered factory", interface=key, factory=getattr(factory, "__name__", repr(factory)))

    def get(self, interface: Type[T]) -> T:
        """
        Get service instance by interface type.

        Raises:
            ValueError: If service is not registered
        """
        key = interface.__name__

        if key in self._factories:
            return self._factories[key]()
        if key in self._instances:
            return self._instances[key]

        raise ValueError(f"Service not registered: {key}")

    @property
    def initialized(self) -> bool:
        return self._initialized

    async def initialize(
        self,
        session_factory: Optional[async_sessionmaker] = None,
        settings: Settings = default_settings
    ) -> None:
        """Initialize the container and configure default services."""
        if self._initialized:
            return

        if session_factory is None:
            from ..core.database import AsyncSessionLocal
            session_factory = AsyncSessionLocal

        try:
            self.register_instance(async_sessionmaker, session_factory)
            self.register_instance(IAccountRepository, AccountRepository())
            self.register_instance(IProfileRepository, ProfileRepository())
            self.register_instance(
                IOneTimeCodeRepository,
                OneTimeCodeRepository(
                    code_length=settings.OTP_LENGTH,
                    expire_minutes=settings.OTP_EXPIRE_MINUTES
                )
            )
            self.register_instance(
                TokenService,
                TokenService(
                    secret_key=settings.SECRET_KEY,
                    algorithm=settings.ALGORITHM,
                    expire_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
                )
            )
            self.register_instance(INotificationDispatcher, create_notification_dispatcher(settings))
            self.register_instance(IUploadService, UploadService(settings))

            def build_workflow() -> AuthWorkflowService:
                return AuthWorkflowService(
                    session_factory=self.get(async_sessionmaker),
                    account_repository=self.get(IAccountRepository),
                    profile_repository=self.get(IProfileRepository),
                    otp_repository=self.get(IOneTimeCodeRepository),
                    token_service=self.get(TokenService),
                    notification_dispatcher=self.get(INotificationDispatcher),
                    request_timeout=settings.REQUEST_TIMEOUT_SECONDS
                )

            self.register_factory(AuthWorkflowService, build_workflow)

            self._initialized = True
            logger.info("Dependency injection container initialized successfully")

        except Exception as e:
            logger.error("Failed to initialize container", error=str(e))
            raise

    async def cleanup(self) -> None:
        """Cleanup container resources."""
        self._instances.clear()
        self._factories.clear()
        self._initialized = False
        logger.info("Container cleanup completed")

    def get_registration_info(self) -> Dict[str, str]:
        """Get information about registered services."""
        info = {key: f"Instance: {type(impl).__name__}" for key, impl in self._instances.items()}
        for key, factory in self._factories.items():
            info[key] = f"Factory: {getattr(factory, '__name__', repr(factory))}"
        return info


# Global container instance
_container: Optional[Container] = None


def get_container() -> Container:
    """Get the global container instance."""
    global _container
    if _container is None:
        _container = Container()
    return _container


async def initialize_container(**kwargs) -> Container:
    """Initialize and return the global container."""
    container = get_container()
    await container.initialize(**kwargs)
    return container


async def cleanup_container() -> None:
    """Cleanup the global container."""
    global _container
    if _container:
        await _container.cleanup()
        _container = None
