"""
Chunked blob storage backend.

Bytes are split into fixed-size chunk rows in the database, bucket style:
chunks are written and committed one at a time while the upload streams in,
and the blob row carrying the total length is committed last. A blob is
therefore only visible once all of its chunks exist.
"""

import logging
from typing import AsyncIterator
from uuid import uuid4

from sqlalchemy import delete, insert, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from filevault.config import get_settings
from filevault.core.exceptions import BlobNotFoundException, StorageIOException
from filevault.models.blob import Blob, BlobChunk
from filevault.models.file_record import BackendKind
from filevault.storage.base import BlobBackend, StoredBlob

logger = logging.getLogger(__name__)
settings = get_settings()


class ChunkedBlobBackend(BlobBackend):
    """
    Chunk-store implementation backed by the blobs/blob_chunks tables.

    Owns a process-wide session factory rather than the request session, so
    chunk commits stay independent of metadata writes and downloads can keep
    streaming after the request handler has returned.
    """

    kind = BackendKind.CHUNKED

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        chunk_size: int | None = None,
    ):
        """
        Initialize chunked storage backend.

        Args:
            session_factory: Factory for sessions on the chunk store database
            chunk_size: Chunk size in bytes. Defaults to settings.CHUNK_SIZE_BYTES
        """
        self.session_factory = session_factory
        self.chunk_size = chunk_size or settings.CHUNK_SIZE_BYTES
        if self.chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")

    async def store(
        self,
        stream: AsyncIterator[bytes],
        suggested_name: str,
        content_type: str | None = None,
    ) -> StoredBlob:
        """
        Split the stream into chunks and commit the blob.

        At most one chunk plus one incoming piece is buffered. If anything
        fails before the blob row is committed, the chunks written so far are
        deleted again (best effort).
        """
        blob_id = uuid4().hex
        buffer = bytearray()
        written = 0
        length = 0

        try:
            async for piece in stream:
                buffer += piece
                length += len(piece)
                while len(buffer) >= self.chunk_size:
                    await self._write_chunk(blob_id, written, bytes(buffer[:self.chunk_size]))
                    del buffer[:self.chunk_size]
                    written += 1

            if buffer:
                await self._write_chunk(blob_id, written, bytes(buffer))
                written += 1

            async with self.session_factory() as session:
                session.add(
                    Blob(
                        id=blob_id,
                        filename=suggested_name,
                        content_type=content_type or "application/octet-stream",
                        length=length,
                        chunk_size=self.chunk_size,
                    )
                )
                await session.commit()

        except BaseException as e:
            # a cancelled commit may have landed before the counter moved
            await self._discard_chunks(blob_id)
            if isinstance(e, (SQLAlchemyError, OSError)):
                raise StorageIOException(
                    message=f"Failed to write blob: {e}",
                    details={"blobId": blob_id, "chunksWritten": written},
                ) from e
            raise

        logger.debug("Stored blob %s: %d bytes in %d chunks", blob_id, length, written)
        return StoredBlob(locator=blob_id, size_bytes=length, stored_name=suggested_name)

    async def _write_chunk(self, blob_id: str, n: int, data: bytes) -> None:
        async with self.session_factory() as session:
            await session.execute(insert(BlobChunk).values(blob_id=blob_id, n=n, data=data))
            await session.commit()

    async def _discard_chunks(self, blob_id: str) -> None:
        try:
            async with self.session_factory() as session:
                await session.execute(delete(BlobChunk).where(BlobChunk.blob_id == blob_id))
                await session.commit()
        except SQLAlchemyError:
            logger.warning("Orphaned chunks left behind for blob %s", blob_id, exc_info=True)

    async def retrieve(self, locator: str) -> AsyncIterator[bytes]:
        try:
            async with self.session_factory() as session:
                blob = await session.get(Blob, locator)
        except SQLAlchemyError as e:
            raise StorageIOException(
                message=f"Failed to look up blob: {e}",
                details={"blobId": locator},
            ) from e

        if blob is None:
            raise BlobNotFoundException(locator)
        return self._read_chunks(locator, blob.chunk_count)

    async def _read_chunks(self, blob_id: str, chunk_count: int) -> AsyncIterator[bytes]:
        """Yield chunks 0..chunk_count-1, one query each, failing on any gap."""
        try:
            async with self.session_factory() as session:
                for n in range(chunk_count):
                    data = await session.scalar(
                        select(BlobChunk.data).where(
                            BlobChunk.blob_id == blob_id,
                            BlobChunk.n == n,
                        )
                    )
                    if data is None:
                        raise StorageIOException(
                            message=f"Blob is missing chunk {n}",
                            details={"blobId": blob_id, "chunk": n},
                        )
                    yield data
        except SQLAlchemyError as e:
            raise StorageIOException(
                message=f"Failed to read blob: {e}",
                details={"blobId": blob_id},
            ) from e

    async def delete(self, locator: str) -> None:
        try:
            async with self.session_factory() as session:
                async with session.begin():
                    result = await session.execute(delete(Blob).where(Blob.id == locator))
                    if result.rowcount == 0:
                        raise BlobNotFoundException(locator)
                    await session.execute(delete(BlobChunk).where(BlobChunk.blob_id == locator))
        except SQLAlchemyError as e:
            raise StorageIOException(
                message=f"Failed to delete blob: {e}",
                details={"blobId": locator},
            ) from e
