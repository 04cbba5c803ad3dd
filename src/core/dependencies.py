"""Reusable FastAPI dependencies."""

from typing import AsyncGenerator
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession
from ..config.database import get_db
from ..repositories.storage_repo import StorageRepository
from ..services.file_service import FileService
from ..services.upload_service import MultipartUploadService


async def get_storage_repo() -> AsyncGenerator[StorageRepository, None]:
    """Dependency to get storage repository."""
    yield StorageRepository()


async def get_file_service(
    db: AsyncSession = Depends(get_db),
    storage_repo: StorageRepository = Depends(get_storage_repo),
) -> AsyncGenerator[FileService, None]:
    """Dependency to get file service."""
    yield FileService(db, storage_repo=storage_repo)


async def get_upload_service(
    storage_repo: StorageRepository = Depends(get_storage_repo),
) -> AsyncGenerator[MultipartUploadService, None]:
    """Dependency to get multipart upload service."""
    yield MultipartUploadService(storage_repo=storage_repo)
