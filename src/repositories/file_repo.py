"""File repository for file metadata operations."""

from typing import Any, Dict, List, Optional
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from ..core.exceptions import BackendError
from ..models.file import File
from ..utils.logger import get_logger

logger = get_logger(__name__)


class FileRepository:
    """Repository for file records."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, url: str, metadata: Dict[str, Any]) -> File:
        """Insert a file record."""
        file_record = File(url=url, file_metadata=metadata)
        self.session.add(file_record)
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise BackendError(f"Failed to save file record: {e}") from e
        await self.session.refresh(file_record)
        return file_record

    async def get_all(self) -> List[File]:
        """Get every file record."""
        try:
            result = await self.session.execute(select(File).order_by(File.id))
        except SQLAlchemyError as e:
            raise BackendError(f"Failed to list file records: {e}") from e
        return list(result.scalars().all())

    async def get(self, file_id: int) -> Optional[File]:
        """Get file by ID."""
        try:
            result = await self.session.execute(select(File).where(File.id == file_id))
        except SQLAlchemyError as e:
            raise BackendError(f"Failed to load file record: {e}") from e
        return result.scalar_one_or_none()

    async def delete(self, file_id: int) -> bool:
        """Delete file by ID. Returns False if no row matched."""
        try:
            result = await self.session.execute(delete(File).where(File.id == file_id))
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise BackendError(f"Failed to delete file record: {e}") from e
        return result.rowcount > 0
