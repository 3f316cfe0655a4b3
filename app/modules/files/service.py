"""
File orchestration across the metadata store and blob storage.

Metadata is the source of truth for whether a file exists:

- upload writes the blob first, then the metadata row; if the row insert fails
  the blob is deleted best-effort and the insert error is raised;
- delete removes the metadata row first, then the blob best-effort.

The blob may therefore briefly outlive its row (an orphan after a failed
cleanup), but a visible row never points at missing bytes because of these
flows. Membership is re-checked against the file's group on every call.
"""

from datetime import datetime, timezone
from typing import BinaryIO, List, Tuple
import uuid
import logging

from app.core.errors import (
    DownloadFailed, FileNotFound, FileTooLarge, NotMember, UploadFailed
)
from app.modules.files.repository import FileRepository
from app.modules.files.schemas import (
    File, UploadFileInput, DEFAULT_CONTENT_TYPE, build_blob_key
)
from app.modules.files.storage import BlobNotFoundError, BlobStorage
from app.modules.groups.service import GroupService

logger = logging.getLogger(__name__)

MAX_FILE_SIZE = 1 * 1024 * 1024 * 1024  # 1 GiB
DEFAULT_URL_TTL_SECONDS = 15 * 60


class FileService:
    def __init__(
        self,
        repo: FileRepository,
        storage: BlobStorage,
        group_service: GroupService,
        max_file_size: int = MAX_FILE_SIZE,
        url_ttl_seconds: int = DEFAULT_URL_TTL_SECONDS,
    ):
        self.repo = repo
        self.storage = storage
        self.group_service = group_service
        self.max_file_size = max_file_size
        self.url_ttl_seconds = url_ttl_seconds

    def _require_member(self, group_id: str, user_id: str) -> None:
        if not self.group_service.is_member(group_id, user_id):
            raise NotMember()

    def upload(self, file_data: UploadFileInput, body: BinaryIO) -> File:
        """Store the bytes, then record the metadata row"""
        file_data.validate_fields()
        if file_data.size_bytes > self.max_file_size:
            raise FileTooLarge()
        self._require_member(file_data.group_id, file_data.uploaded_by)

        file_id = str(uuid.uuid4())
        s3_key = build_blob_key(file_data.group_id, file_id, file_data.name)
        content_type = file_data.content_type or DEFAULT_CONTENT_TYPE

        try:
            self.storage.put(s3_key, body, content_type, file_data.size_bytes)
        except Exception as e:
            logger.error(f"Blob upload failed for {s3_key}: {e}")
            raise UploadFailed()

        file = File(
            id=file_id,
            name=file_data.name,
            s3_key=s3_key,
            size_bytes=file_data.size_bytes,
            content_type=content_type,
            group_id=file_data.group_id,
            uploaded_by=file_data.uploaded_by,
            created_at=datetime.now(timezone.utc),
        )
        try:
            self.repo.create(file)
        except Exception:
            # Clean up the blob (best effort); the metadata error is what the caller sees
            try:
                self.storage.delete(s3_key)
            except Exception as cleanup_error:
                logger.warning(f"Failed to clean up orphaned blob {s3_key}: {cleanup_error}")
            raise

        logger.info(f"Uploaded file {file_id} ({file.size_bytes} bytes) to group {file.group_id}")
        return file

    def get_file(self, file_id: str, user_id: str) -> File:
        """Get file metadata (requires membership of the file's group)"""
        file = self.repo.get_by_id(file_id)
        self._require_member(file.group_id, user_id)
        return file

    def download(self, file_id: str, user_id: str) -> Tuple[BinaryIO, File]:
        """Return an open byte stream and the file metadata; the caller closes the stream"""
        file = self.get_file(file_id, user_id)
        try:
            body = self.storage.get(file.s3_key)
        except BlobNotFoundError:
            logger.warning(f"File {file_id} has metadata but no blob at {file.s3_key}")
            raise FileNotFound()
        except Exception as e:
            logger.error(f"Blob download failed for {file.s3_key}: {e}")
            raise DownloadFailed()
        return body, file

    def list_by_group(self, group_id: str, user_id: str) -> List[File]:
        self._require_member(group_id, user_id)
        return self.repo.list_by_group_id(group_id)

    def delete(self, file_id: str, user_id: str) -> None:
        """Delete the metadata row, then the blob (best effort)"""
        file = self.get_file(file_id, user_id)
        self.repo.delete(file_id)
        try:
            self.storage.delete(file.s3_key)
        except Exception as e:
            logger.warning(f"Failed to delete blob {file.s3_key} for file {file_id}: {e}")
        logger.info(f"Deleted file {file_id} from group {file.group_id}")

    def get_download_url(self, file_id: str, user_id: str) -> str:
        file = self.get_file(file_id, user_id)
        try:
            return self.storage.presign_get(file.s3_key, self.url_ttl_seconds)
        except Exception as e:
            logger.error(f"Failed to presign {file.s3_key}: {e}")
            raise DownloadFailed()
