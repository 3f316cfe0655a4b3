from pydantic import BaseModel
from datetime import datetime
from app.core.errors import GroupIdRequired, NameRequired, UploadedByRequired

DEFAULT_CONTENT_TYPE = "application/octet-stream"


def build_blob_key(group_id: str, file_id: str, name: str) -> str:
    """Blob key layout: groups/{group_id}/{file_id}/{name}"""
    return f"groups/{group_id}/{file_id}/{name}"


class File(BaseModel):
    id: str
    name: str
    s3_key: str
    size_bytes: int
    content_type: str
    group_id: str
    uploaded_by: str
    created_at: datetime

    class Config:
        from_attributes = True


class UploadFileInput(BaseModel):
    name: str = ""
    content_type: str = ""
    size_bytes: int = 0
    group_id: str = ""
    uploaded_by: str = ""

    def validate_fields(self) -> None:
        if not self.name:
            raise NameRequired()
        if not self.group_id:
            raise GroupIdRequired()
        if not self.uploaded_by:
            raise UploadedByRequired()


class FileResponse(BaseModel):
    id: str
    name: str
    size_bytes: int
    content_type: str
    group_id: str
    uploaded_by: str
    created_at: datetime

    class Config:
        from_attributes = True


class DownloadUrlResponse(BaseModel):
    url: str
    expires_in: int
