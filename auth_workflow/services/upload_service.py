"""
Upload service for profile images.
Pushes a local file to the selected provider and returns its public URL.
"""

import asyncio
import os
import uuid
import cloudinary
import cloudinary.uploader
import boto3
import structlog

from ..core.config import Settings, settings as default_settings
from ..core.errors import AuthServiceError, ErrorKind
from ..interfaces.upload_interface import IUploadService

logger = structlog.get_logger()


class UploadService(IUploadService):
    """Provider-selectable uploader (Cloudinary or AWS S3)."""

    def __init__(self, settings: Settings = default_settings, s3_client=None):
        self.settings = settings
        self.folder = settings.UPLOAD_FOLDER
        self._s3_client = s3_client
        self._cloudinary_configured = False

    @property
    def s3_client(self):
        """Get or create S3 client."""
        if self._s3_client is None:
            self._s3_client = boto3.client("s3", region_name=self.settings.AWS_REGION)
        return self._s3_client

    def _configure_cloudinary(self) -> None:
        if self._cloudinary_configured:
            return
        cloudinary.config(
            cloud_name=self.settings.CLOUDINARY_CLOUD_NAME,
            api_key=self.settings.CLOUDINARY_API_KEY,
            api_secret=self.settings.CLOUDINARY_API_SECRET,
            secure=True
        )
        self._cloudinary_configured = True

    async def upload_to_cloudinary(self, file_path: str) -> str:
        try:
            self._configure_cloudinary()
            result = await asyncio.to_thread(
                cloudinary.uploader.upload,
                file_path,
                use_filename=True,
                folder=self.folder
            )
            return result["secure_url"]
        except Exception as e:
            logger.error("Cloudinary upload failed", error=str(e))
            raise AuthServiceError(
                ErrorKind.INTERNAL_ERROR, f"Error uploading to Cloudinary: {e}"
            ) from e

    async def upload_to_aws(self, file_path: str) -> str:
        bucket = self.settings.AWS_S3_BUCKET
        if not bucket:
            raise AuthServiceError(ErrorKind.INTERNAL_ERROR, "Error uploading to AWS: no bucket configured")

        key = f"{self.folder}/{uuid.uuid4().hex}-{os.path.basename(file_path)}"
        try:
            await asyncio.to_thread(self.s3_client.upload_file, file_path, bucket, key)
        except Exception as e:
            logger.error("S3 upload failed", bucket=bucket, error=str(e))
            raise AuthServiceError(ErrorKind.INTERNAL_ERROR, f"Error uploading to AWS: {e}") from e

        return f"https://{bucket}.s3.{self.settings.AWS_REGION}.amazonaws.com/{key}"

    async def upload(self, file_path: str, provider: str = "cloudinary") -> str:
        provider_name = provider.lower()
        if provider_name == "cloudinary":
            url = await self.upload_to_cloudinary(file_path)
        elif provider_name == "aws":
            url = await self.upload_to_aws(file_path)
        else:
            raise AuthServiceError(ErrorKind.BAD_REQUEST, f"Unsupported upload provider: {provider}")

        logger.info("File uploaded", provider=provider_name)
        return url
