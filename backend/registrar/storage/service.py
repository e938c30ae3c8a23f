import logging
import os
from datetime import datetime, timezone
from typing import Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError, NoCredentialsError

from registrar.config.settings import settings

logger = logging.getLogger(__name__)

DOCUMENT_KINDS = ("clearance", "copy_of_grades")

ALLOWED_CONTENT_TYPES = {
    "application/pdf": "pdf",
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
}


class StorageError(RuntimeError):
    """Object storage is unavailable or rejected the upload."""


def document_key(kind: str, student_id: str, extension: str, now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    timestamp = int(now.timestamp() * 1000)
    return f"enrollment/{kind}/{student_id}_{timestamp}.{extension}"


def validate_document(kind: str, content_type: Optional[str], size: int) -> str:
    """
    Check an enrollment document before upload and return its file extension.

    Raises:
        ValueError: unknown kind, unsupported type, empty or oversized file.
    """
    if kind not in DOCUMENT_KINDS:
        raise ValueError(f"Document kind must be one of: {', '.join(DOCUMENT_KINDS)}")
    if content_type not in ALLOWED_CONTENT_TYPES:
        raise ValueError("Only PDF, JPEG, PNG and GIF files are accepted")
    if size <= 0:
        raise ValueError("File is empty")
    if size > settings.MAX_UPLOAD_BYTES:
        raise ValueError(f"File must be smaller than {settings.MAX_UPLOAD_BYTES // (1024 * 1024)}MB")
    return ALLOWED_CONTENT_TYPES[content_type]


class StorageService:
    """Uploads enrollment documents to S3."""

    def __init__(self):
        self.bucket = settings.DOCUMENTS_BUCKET
        self.s3 = None

        if not self.bucket:
            logger.warning("DOCUMENTS_BUCKET is not set; document uploads are disabled")
            return

        boto3_config = Config(
            region_name=settings.AWS_REGION,
            retries={'max_attempts': 2, 'mode': 'adaptive'},
            read_timeout=15,
            connect_timeout=5
        )
        is_lambda_env = os.getenv('AWS_LAMBDA_FUNCTION_NAME') is not None
        if not is_lambda_env and settings.AWS_ACCESS_KEY_ID and settings.AWS_SECRET_ACCESS_KEY:
            self.s3 = boto3.client(
                's3',
                aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
                aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
                config=boto3_config
            )
        else:
            self.s3 = boto3.client('s3', config=boto3_config)

    def object_url(self, key: str) -> str:
        return f"https://{self.bucket}.s3.{settings.AWS_REGION}.amazonaws.com/{key}"

    def upload_document(self, kind: str, student_id: str, content: bytes, content_type: Optional[str]) -> str:
        extension = validate_document(kind, content_type, len(content))
        if self.s3 is None:
            raise StorageError("Document storage is not configured")

        key = document_key(kind, student_id, extension)
        try:
            self.s3.put_object(Bucket=self.bucket, Key=key, Body=content, ContentType=content_type)
        except NoCredentialsError:
            logger.error("AWS credentials not found for document upload")
            raise StorageError("Document storage is not configured")
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to upload {key}: {e}")
            raise StorageError("Failed to upload document")

        logger.info(f"Uploaded enrollment document {key}")
        return self.object_url(key)


_storage_service: Optional[StorageService] = None


def get_storage_service() -> StorageService:
    """Dependency that creates the S3 client on first use."""
    global _storage_service
    if _storage_service is None:
        _storage_service = StorageService()
    return _storage_service
