"""
Storage gateway - keeps file bytes and metadata records consistent.

The only component that touches both the metadata store and a blob backend
in the same operation. Ordering rules:

    upload:  bytes first, record second
    delete:  bytes first (best effort), record second
    open:    record first, then the backend's stream

Nothing is retried and no locks are taken; concurrent deletes of one id end
with one success and one NotFound.
"""

import logging
from typing import AsyncIterator, Sequence
from uuid import uuid4

from filevault.core.exceptions import (
    BlobNotFoundException,
    FileNotFoundException,
    FileTooLargeException,
    PersistenceException,
    StorageIOException,
    ValidationException,
)
from filevault.models.file_record import FileRecord
from filevault.services.metadata_store import MetadataStore
from filevault.storage.base import BlobBackend
from filevault.storage.streams import limit_stream

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "application/octet-stream"
MAX_NAME_LENGTH = 255


class StorageGateway:
    """Orchestrates uploads, downloads and deletes across metadata and bytes."""

    def __init__(
        self,
        metadata: MetadataStore,
        backend: BlobBackend,
        max_file_size: int,
        compensate_orphans: bool = True,
    ):
        """
        Args:
            metadata: Metadata store bound to the current session
            backend: The process-wide backend chosen at startup
            max_file_size: Largest accepted upload in bytes
            compensate_orphans: Delete freshly stored bytes when the metadata
                write fails, instead of leaving them orphaned
        """
        self.metadata = metadata
        self.backend = backend
        self.max_file_size = max_file_size
        self.compensate_orphans = compensate_orphans

    async def upload(
        self,
        stream: AsyncIterator[bytes],
        original_name: str,
        mime_type: str | None,
        declared_size: int | None = None,
    ) -> FileRecord:
        """
        Store a byte stream and record it.

        The recorded size is whatever the backend reports having written,
        never declared_size, which is only used to reject obvious oversize
        uploads before reading anything.

        Raises:
            ValidationException: Missing or overlong name
            FileTooLargeException: Upload exceeds max_file_size
            StorageIOException: Backend write failed, no record was created
            PersistenceException: Record write failed after the bytes were stored
        """
        if not original_name:
            raise ValidationException("Uploaded file has no name")
        if len(original_name) > MAX_NAME_LENGTH:
            raise ValidationException(
                f"File name must be at most {MAX_NAME_LENGTH} characters",
                details={"length": len(original_name)},
            )
        if declared_size is not None and declared_size > self.max_file_size:
            raise FileTooLargeException(self.max_file_size)

        mime_type = mime_type or DEFAULT_MIME_TYPE
        logger.debug("Upload received: %s (%s)", original_name, mime_type)

        try:
            stored = await self.backend.store(
                limit_stream(stream, self.max_file_size),
                original_name,
                mime_type,
            )
        except (StorageIOException, ValidationException) as e:
            logger.warning("Upload of %s failed before metadata write: %s", original_name, e.message)
            raise

        logger.debug("Bytes persisted at %s (%d bytes)", stored.locator, stored.size_bytes)

        record = FileRecord(
            id=str(uuid4()),
            original_name=original_name,
            stored_name=stored.stored_name,
            mime_type=mime_type,
            size_bytes=stored.size_bytes,
            backend_kind=self.backend.kind,
            locator=stored.locator,
        )

        try:
            await self.metadata.create(record)
        except PersistenceException:
            if self.compensate_orphans:
                await self._discard_blob(stored.locator)
            else:
                logger.warning(
                    "Metadata write failed, blob %s left orphaned (%s backend)",
                    stored.locator,
                    self.backend.kind.value,
                )
            raise

        logger.info(
            "Uploaded file %s (%s, %d bytes, %s backend)",
            record.id,
            original_name,
            record.size_bytes,
            self.backend.kind.value,
        )
        return record

    async def _discard_blob(self, locator: str) -> None:
        try:
            await self.backend.delete(locator)
            logger.warning("Metadata write failed, removed stored blob %s", locator)
        except (BlobNotFoundException, StorageIOException):
            logger.error("Metadata write failed and blob %s could not be removed", locator, exc_info=True)

    async def list_files(self) -> Sequence[FileRecord]:
        """Records held by the configured backend, newest first."""
        return await self.metadata.list(self.backend.kind)

    async def get(self, file_id: str) -> FileRecord:
        """
        Look up a record served by the configured backend.

        Records written under another STORAGE_TYPE are reported as missing.
        """
        record = await self.metadata.find_by_id(file_id)
        if record.backend_kind != self.backend.kind:
            raise FileNotFoundException(file_id)
        return record

    async def open(self, file_id: str) -> tuple[FileRecord, AsyncIterator[bytes]]:
        """
        Resolve a file id to its record and a stream of its bytes.

        Raises:
            FileNotFoundException: Unknown id
            BlobNotFoundException: Record exists but the bytes are gone
        """
        record = await self.get(file_id)
        stream = await self.backend.retrieve(record.locator)
        return record, stream

    async def delete(self, file_id: str) -> FileRecord:
        """
        Delete the bytes, then the record.

        Missing bytes and backend I/O failures are logged and absorbed so the
        record never outlives a delete request.

        Raises:
            FileNotFoundException: Unknown id (including a repeated delete)
        """
        record = await self.get(file_id)

        try:
            await self.backend.delete(record.locator)
        except BlobNotFoundException:
            logger.info("Bytes for file %s already gone, removing record", file_id)
        except StorageIOException as e:
            logger.warning(
                "Could not delete bytes for file %s at %s, removing record anyway: %s",
                file_id,
                record.locator,
                e.message,
            )

        await self.metadata.delete_by_id(file_id)
        logger.info("Deleted file %s (%s backend)", file_id, self.backend.kind.value)
        return record
