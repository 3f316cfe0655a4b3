from fastapi import APIRouter, Depends, File as FormFile, UploadFile
from fastapi.responses import StreamingResponse
from app.core.dependencies import get_current_user, get_file_service
from app.core.errors import InvalidFileId, InvalidGroupId
from app.core.ids import require_uuid
from app.modules.files.schemas import (
    DownloadUrlResponse, FileResponse, UploadFileInput, DEFAULT_CONTENT_TYPE
)
from app.modules.files.service import FileService
from typing import List, Dict
from urllib.parse import quote
import os

router = APIRouter(tags=["files"])

CHUNK_SIZE = 64 * 1024


def _upload_size(upload: UploadFile) -> int:
    if upload.size is not None:
        return upload.size
    upload.file.seek(0, os.SEEK_END)
    size = upload.file.tell()
    upload.file.seek(0)
    return size


def _iter_body(body):
    try:
        while True:
            chunk = body.read(CHUNK_SIZE)
            if not chunk:
                break
            yield chunk
    finally:
        body.close()


@router.post("/groups/{group_id}/files", response_model=FileResponse, status_code=201)
def upload_file(
    group_id: str,
    file: UploadFile = FormFile(...),
    current_user: Dict = Depends(get_current_user),
    service: FileService = Depends(get_file_service)
):
    """Upload a file to a group (requires membership)"""
    require_uuid(group_id, InvalidGroupId)
    file_data = UploadFileInput(
        name=file.filename or "",
        content_type=file.content_type or DEFAULT_CONTENT_TYPE,
        size_bytes=_upload_size(file),
        group_id=group_id,
        uploaded_by=current_user["id"],
    )
    return service.upload(file_data, file.file)


@router.get("/groups/{group_id}/files", response_model=List[FileResponse])
def list_files(
    group_id: str,
    current_user: Dict = Depends(get_current_user),
    service: FileService = Depends(get_file_service)
):
    """List files in a group, newest first (requires membership)"""
    require_uuid(group_id, InvalidGroupId)
    return service.list_by_group(group_id, current_user["id"])


@router.get("/files/{file_id}", response_model=FileResponse)
def get_file(
    file_id: str,
    current_user: Dict = Depends(get_current_user),
    service: FileService = Depends(get_file_service)
):
    """Get file metadata"""
    require_uuid(file_id, InvalidFileId)
    return service.get_file(file_id, current_user["id"])


@router.get("/files/{file_id}/download")
def download_file(
    file_id: str,
    current_user: Dict = Depends(get_current_user),
    service: FileService = Depends(get_file_service)
):
    """Stream file content"""
    require_uuid(file_id, InvalidFileId)
    body, file = service.download(file_id, current_user["id"])
    headers = {
        "Content-Disposition": f"attachment; filename*=UTF-8''{quote(file.name)}",
        "Content-Length": str(file.size_bytes),
    }
    return StreamingResponse(_iter_body(body), media_type=file.content_type, headers=headers)


@router.get("/files/{file_id}/url", response_model=DownloadUrlResponse)
def get_download_url(
    file_id: str,
    current_user: Dict = Depends(get_current_user),
    service: FileService = Depends(get_file_service)
):
    """Get a time-limited pre-signed download URL"""
    require_uuid(file_id, InvalidFileId)
    url = service.get_download_url(file_id, current_user["id"])
    return DownloadUrlResponse(url=url, expires_in=service.url_ttl_seconds)


@router.delete("/files/{file_id}", status_code=204)
def delete_file(
    file_id: str,
    current_user: Dict = Depends(get_current_user),
    service: FileService = Depends(get_file_service)
):
    """Delete a file (requires membership of its group)"""
    require_uuid(file_id, InvalidFileId)
    service.delete(file_id, current_user["id"])
    return None
