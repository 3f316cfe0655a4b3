"""
Blob storage for file content.

BlobStorage is the capability the file service depends on; S3Storage is the
production implementation (AWS S3, or MinIO/localstack through a custom
endpoint). Tests substitute an in-memory implementation.
"""

from abc import ABC, abstractmethod
from typing import BinaryIO, Optional
import logging

import boto3
from boto3.s3.transfer import TransferConfig
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from app.config import settings

logger = logging.getLogger(__name__)

MISSING_OBJECT_CODES = {"NoSuchKey", "404", "NotFound"}


class BlobNotFoundError(Exception):
    """The object does not exist under the given key."""


class BlobStorage(ABC):
    @abstractmethod
    def put(self, key: str, body: BinaryIO, content_type: str, size: int) -> None:
        """Store size bytes read from body under key. Raises on failure."""

    @abstractmethod
    def get(self, key: str) -> BinaryIO:
        """Return a readable stream; the caller closes it. Raises BlobNotFoundError on a missing key."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove the object. Raises on failure."""

    @abstractmethod
    def presign_get(self, key: str, expires_in: int) -> str:
        """Time-bounded GET URL for the object."""


class S3Storage(BlobStorage):
    def __init__(self, s3_client=None, bucket_name: Optional[str] = None):
        self.bucket_name = bucket_name or settings.s3_bucket_name
        if not self.bucket_name:
            raise ValueError("S3 bucket name must be configured")

        self.s3_client = s3_client or self._create_client()
        self.multipart_threshold = settings.s3_multipart_threshold_bytes
        self.transfer_config = TransferConfig(
            multipart_threshold=settings.s3_multipart_threshold_bytes,
            multipart_chunksize=settings.s3_multipart_chunk_bytes,
            max_concurrency=settings.s3_max_concurrency,
        )

    @staticmethod
    def _create_client():
        client_config = Config(
            region_name=settings.aws_region,
            connect_timeout=settings.s3_connect_timeout_seconds,
            read_timeout=settings.s3_read_timeout_seconds,
            s3={"addressing_style": "path" if settings.s3_path_style else "auto"},
        )
        kwargs = {"config": client_config}
        if settings.aws_endpoint_url:
            kwargs["endpoint_url"] = settings.aws_endpoint_url
        # Static credentials when given, otherwise the default AWS provider chain
        if settings.aws_access_key_id and settings.aws_secret_access_key:
            kwargs["aws_access_key_id"] = settings.aws_access_key_id
            kwargs["aws_secret_access_key"] = settings.aws_secret_access_key
        return boto3.client("s3", **kwargs)

    def put(self, key: str, body: BinaryIO, content_type: str, size: int) -> None:
        """Upload to S3; payloads over the threshold go through a multipart upload"""
        try:
            if size > self.multipart_threshold:
                self.s3_client.upload_fileobj(
                    body,
                    self.bucket_name,
                    key,
                    ExtraArgs={"ContentType": content_type},
                    Config=self.transfer_config,
                )
            else:
                self.s3_client.put_object(
                    Bucket=self.bucket_name,
                    Key=key,
                    Body=body,
                    ContentType=content_type,
                    ContentLength=size,
                )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to upload {key} to S3: {str(e)}")
            raise

    def get(self, key: str) -> BinaryIO:
        try:
            response = self.s3_client.get_object(Bucket=self.bucket_name, Key=key)
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in MISSING_OBJECT_CODES:
                raise BlobNotFoundError(key)
            logger.error(f"Failed to download {key} from S3: {str(e)}")
            raise
        return response["Body"]

    def delete(self, key: str) -> None:
        try:
            self.s3_client.delete_object(Bucket=self.bucket_name, Key=key)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to delete {key} from S3: {str(e)}")
            raise

    def presign_get(self, key: str, expires_in: int) -> str:
        return self.s3_client.generate_presigned_url(
            "get_object",
            Params={"Bucket": self.bucket_name, "Key": key},
            ExpiresIn=expires_in,
        )


_storage: Optional[S3Storage] = None


def get_blob_storage() -> BlobStorage:
    global _storage
    if _storage is None:
        _storage = S3Storage()
        logger.info(f"S3 storage initialized for bucket {_storage.bucket_name}")
    return _storage
