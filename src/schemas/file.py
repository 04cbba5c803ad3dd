"""File upload and management schemas."""

from typing import Optional, List
from datetime import datetime
from pydantic import Field
from .shared import CamelModel
from ..models.file import File


class FileMetadata(CamelModel):
    """Structured metadata stored with each file record."""

    file_name: str = Field(..., description="Storage key of the object")
    file_type: str = Field(..., description="MIME type of the file")
    file_size: int = Field(..., ge=0, description="File size in bytes")


class FileUpload(CamelModel):
    """Upload description sent by clients for put-url and add."""

    file_name: str = Field(..., min_length=1, max_length=255)
    file_size: int = Field(..., ge=0, description="File size in bytes")
    file_type: str = Field(..., min_length=3, description="MIME type of the file")


class PutUrlResponse(CamelModel):
    """Presigned single-put URL and the storage key it writes to."""

    url: str
    file_name: str


class FileResponse(CamelModel):
    """File record response schema."""

    id: int
    url: str
    metadata: FileMetadata
    created_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, file: File) -> "FileResponse":
        return cls(
            id=file.id,
            url=file.url,
            metadata=FileMetadata.model_validate(file.file_metadata),
            created_at=file.created_at,
        )


class AddFileResponse(CamelModel):
    """Response for a newly registered file."""

    file: FileResponse


class FileListResponse(CamelModel):
    """All file records."""

    files: List[FileResponse]
    count: int


class DeleteFileRequest(CamelModel):
    """Optional delete body. The stored file name is always used instead."""

    file_name: Optional[str] = None


class FileDownloadResponse(CamelModel):
    """Presigned download URL."""

    url: str
    expires_in: int
