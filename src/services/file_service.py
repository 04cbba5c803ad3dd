"""File service for presigned uploads and file record management."""

from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from ..config import settings
from ..config.storage import get_public_url
from ..core.exceptions import NotFoundError
from ..repositories.file_repo import FileRepository
from ..repositories.storage_repo import StorageRepository
from ..schemas.file import (
    AddFileResponse,
    FileDownloadResponse,
    FileListResponse,
    FileResponse,
    FileUpload,
    PutUrlResponse,
)
from ..utils.helpers import get_file_name_with_file_type
from ..utils.logger import get_logger

logger = get_logger(__name__)


class FileService:
    """Service for file operations."""

    def __init__(self, db: AsyncSession, storage_repo: Optional[StorageRepository] = None):
        self.db = db
        self.file_repo = FileRepository(db)
        self.storage_repo = storage_repo or StorageRepository()

    async def get_put_url(self, upload: FileUpload) -> PutUrlResponse:
        """
        Issue a presigned PUT URL for a single-request upload.
        The returned file name is the storage key the client must pass to add.
        """
        file_name = get_file_name_with_file_type(upload.file_name, upload.file_type)
        url = await self.storage_repo.presign_put(
            key=file_name,
            content_type=upload.file_type,
            content_length=upload.file_size,
        )
        return PutUrlResponse(url=url, file_name=file_name)

    async def create_file(self, upload: FileUpload) -> AddFileResponse:
        """
        Register an uploaded object.
        upload.file_name is the storage key returned by put-url or initiate.
        """
        if settings.verify_upload_on_add and not await self.storage_repo.object_exists(
            upload.file_name
        ):
            raise NotFoundError(f"No uploaded object named {upload.file_name}")

        file_record = await self.file_repo.create(
            url=get_public_url(upload.file_name),
            metadata={
                "fileName": upload.file_name,
                "fileType": upload.file_type,
                "fileSize": upload.file_size,
            },
        )
        logger.info("File registered", file_id=file_record.id, key=upload.file_name)
        return AddFileResponse(file=FileResponse.from_model(file_record))

    async def list_files(self) -> FileListResponse:
        """List every file record."""
        files: List[FileResponse] = [
            FileResponse.from_model(f) for f in await self.file_repo.get_all()
        ]
        return FileListResponse(files=files, count=len(files))

    async def get_file_details(self, file_id: int) -> FileResponse:
        """Get file details by ID."""
        file_record = await self.file_repo.get(file_id)
        if not file_record:
            raise NotFoundError()
        return FileResponse.from_model(file_record)

    async def get_download_url(self, file_id: int) -> FileDownloadResponse:
        """Generate presigned download URL for a file record."""
        file_record = await self.file_repo.get(file_id)
        if not file_record or not file_record.file_name:
            raise NotFoundError()

        url = await self.storage_repo.presign_get(file_record.file_name)
        return FileDownloadResponse(url=url, expires_in=settings.presigned_get_expiration)

    async def delete_file(self, file_id: int) -> None:
        """
        Delete the stored object, then its record.
        The key comes from the stored metadata, never from the client.
        """
        file_record = await self.file_repo.get(file_id)
        if not file_record or not file_record.file_name:
            raise NotFoundError()

        key = file_record.file_name
        await self.storage_repo.delete_object(key)

        try:
            deleted = await self.file_repo.delete(file_id)
        except Exception:
            logger.error("Object deleted but record was not", file_id=file_id, key=key)
            raise
        if not deleted:
            # Removed concurrently between lookup and delete
            raise NotFoundError()
        logger.info("File deleted", file_id=file_id, key=key)
