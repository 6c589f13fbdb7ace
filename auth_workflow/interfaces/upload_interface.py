"""
Upload interfaces for dependency abstraction.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class IUploadService(Protocol):
    """Protocol for pushing a local file to object storage."""

    async def upload(self, file_path: str, provider: str = "cloudinary") -> str:
        """
        Upload a file with the named provider.

        Returns:
            Public URL of the stored object

        Raises:
            AuthServiceError: BAD_REQUEST for unknown providers, INTERNAL_ERROR on failure
        """
        ...
