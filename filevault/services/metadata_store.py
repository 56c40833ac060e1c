"""
Metadata store - durable FileRecord persistence.
Knows nothing about where the bytes live.
"""

from typing import Sequence

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from filevault.core.exceptions import FileNotFoundException, PersistenceException
from filevault.models.file_record import BackendKind, FileRecord


class MetadataStore:
    """Service class for FileRecord operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, record: FileRecord) -> str:
        """
        Persist a new record and commit immediately.

        Args:
            record: Fully populated FileRecord

        Returns:
            The record id

        Raises:
            PersistenceException: If the database rejects or cannot take the write
        """
        try:
            self.db.add(record)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise PersistenceException(
                message=f"Failed to save file metadata: {e}",
                details={"id": record.id},
            ) from e
        return record.id

    async def find_by_id(self, file_id: str) -> FileRecord:
        """
        Get record by ID.

        Raises:
            FileNotFoundException: If no record has this id
        """
        try:
            record = await self.db.get(FileRecord, file_id)
        except SQLAlchemyError as e:
            raise PersistenceException(
                message=f"Failed to load file metadata: {e}",
                details={"id": file_id},
            ) from e

        if record is None:
            raise FileNotFoundException(file_id)
        return record

    async def list(self, backend_kind: BackendKind) -> Sequence[FileRecord]:
        """Records held by one backend, newest first."""
        query = (
            select(FileRecord)
            .where(FileRecord.backend_kind == backend_kind)
            .order_by(FileRecord.created_at.desc(), FileRecord.id.desc())
        )
        try:
            result = await self.db.execute(query)
        except SQLAlchemyError as e:
            raise PersistenceException(message=f"Failed to list files: {e}") from e
        return result.scalars().all()

    async def delete_by_id(self, file_id: str) -> None:
        """
        Remove a record and commit.

        A second call for the same id raises FileNotFoundException.
        """
        try:
            result = await self.db.execute(delete(FileRecord).where(FileRecord.id == file_id))
            if result.rowcount == 0:
                await self.db.rollback()
                raise FileNotFoundException(file_id)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise PersistenceException(
                message=f"Failed to delete file metadata: {e}",
                details={"id": file_id},
            ) from e
