"""
Tests for the avatar upload service.
"""
from unittest.mock import MagicMock, patch

import pytest

from auth_workflow.core.config import settings
from auth_workflow.core.errors import AuthServiceError, ErrorKind
from auth_workflow.services.upload_service import UploadService


@pytest.mark.unit
class TestUploadService:

    @pytest.mark.asyncio
    async def test_cloudinary_upload_returns_secure_url(self):
        service = UploadService(settings)

        with patch("auth_workflow.services.upload_service.cloudinary") as mock_cloudinary:
            mock_cloudinary.uploader.upload.return_value = {"secure_url": "https://res.cloudinary.com/x/a.png"}

            url = await service.upload("/tmp/a.png")

        assert url == "https://res.cloudinary.com/x/a.png"
        mock_cloudinary.uploader.upload.assert_called_once_with(
            "/tmp/a.png", use_filename=True, folder=settings.UPLOAD_FOLDER
        )

    @pytest.mark.asyncio
    async def test_cloudinary_failure(self):
        service = UploadService(settings)

        with patch("auth_workflow.services.upload_service.cloudinary") as mock_cloudinary:
            mock_cloudinary.uploader.upload.side_effect = RuntimeError("quota exceeded")

            with pytest.raises(AuthServiceError) as exc_info:
                await service.upload("/tmp/a.png", provider="cloudinary")

        assert exc_info.value.kind is ErrorKind.INTERNAL_ERROR
        assert exc_info.value.message.startswith("Error uploading to Cloudinary")

    @pytest.mark.asyncio
    async def test_aws_upload_returns_object_url(self):
        s3_client = MagicMock()
        aws_settings = settings.model_copy(update={"AWS_S3_BUCKET": "avatars", "AWS_REGION": "eu-west-1"})
        service = UploadService(aws_settings, s3_client=s3_client)

        url = await service.upload("/tmp/a.png", provider="aws")

        bucket, key = s3_client.upload_file.call_args[0][1:]
        assert bucket == "avatars"
        assert key.endswith("-a.png")
        assert url == f"https://avatars.s3.eu-west-1.amazonaws.com/{key}"

    @pytest.mark.asyncio
    async def test_aws_without_bucket(self):
        service = UploadService(settings.model_copy(update={"AWS_S3_BUCKET": None}), s3_client=MagicMock())

        with pytest.raises(AuthServiceError) as exc_info:
            await service.upload("/tmp/a.png", provider="aws")

        assert exc_info.value.message.startswith("Error uploading to AWS")

    @pytest.mark.asyncio
    async def test_unknown_provider(self):
        service = UploadService(settings)

        with pytest.raises(AuthServiceError) as exc_info:
            await service.upload("/tmp/a.png", provider="dropbox")

        assert exc_info.value.kind is ErrorKind.BAD_REQUEST
        assert exc_info.value.message == "Unsupported upload provider: dropbox"
