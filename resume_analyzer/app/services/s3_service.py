"""
S3 storage service for uploaded resumes.
Stores files under {prefix}/{user_id}/{file_name}, tagged with the owning user.
"""
from urllib.parse import urlencode

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from resume_analyzer.app.core.config import settings
from resume_analyzer.app.core.exceptions import StorageDeletionError, StorageUploadError
from resume_analyzer.app.core.logging_config import get_logger

logger = get_logger("services.s3")


def _error_code_message(e: Exception) -> tuple[str, str]:
    if isinstance(e, ClientError):
        err = e.response.get("Error", {})
        return err.get("Code", ""), err.get("Message", str(e))
    return type(e).__name__, str(e)


class S3StorageService:
    """Object storage collaborator: upload(bytes, folder, tags) -> {url, key}; delete(key)."""

    def __init__(self, client, bucket: str, region: str):
        self._client = client
        self.bucket = bucket
        self.region = region

    @classmethod
    def from_settings(cls) -> "S3StorageService":
        """Build from settings. Falls back to the default boto3 credential chain when keys are unset."""
        kwargs = {"region_name": settings.aws_region}
        if settings.aws_access_key_id and settings.aws_secret_access_key:
            kwargs["aws_access_key_id"] = settings.aws_access_key_id
            kwargs["aws_secret_access_key"] = settings.aws_secret_access_key
        return cls(boto3.client("s3", **kwargs), settings.aws_bucket_name, settings.aws_region)

    def public_url(self, key: str) -> str:
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"

    def upload(
        self,
        file_buffer: bytes,
        folder: str,
        file_name: str,
        tags: dict[str, str] | None = None,
        mime_type: str = "application/octet-stream",
    ) -> dict:
        """
        Upload bytes to S3 under {folder}/{file_name}.

        Returns:
            dict with key, url

        Raises:
            StorageUploadError: on any S3 or transport failure.
        """
        key = f"{folder.rstrip('/')}/{file_name}"
        logger.info(
            "S3 upload started bucket=%s key=%s size_bytes=%d",
            self.bucket,
            key,
            len(file_buffer),
        )
        params = {
            "Bucket": self.bucket,
            "Key": key,
            "Body": file_buffer,
            "ContentType": mime_type,
        }
        if tags:
            params["Tagging"] = urlencode(tags)
        try:
            self._client.put_object(**params)
        except (ClientError, BotoCoreError) as e:
            code, msg = _error_code_message(e)
            logger.error(
                "S3 upload failed bucket=%s key=%s error_code=%s error_message=%s",
                self.bucket,
                key,
                code,
                msg,
            )
            raise StorageUploadError(detail=f"S3 upload failed - {code}: {msg}") from e

        url = self.public_url(key)
        logger.info("S3 upload success bucket=%s key=%s url=%s", self.bucket, key, url)
        return {"key": key, "url": url}

    def delete(self, key: str) -> None:
        """Delete object by key. Raises StorageDeletionError when S3 refuses or is unreachable."""
        try:
            self._client.delete_object(Bucket=self.bucket, Key=key)
        except (ClientError, BotoCoreError) as e:
            code, msg = _error_code_message(e)
            logger.error("S3 delete failed bucket=%s key=%s error_code=%s error_message=%s", self.bucket, key, code, msg)
            raise StorageDeletionError(detail=f"S3 delete failed - {code}: {msg}") from e
        logger.info("S3 delete success bucket=%s key=%s", self.bucket, key)
