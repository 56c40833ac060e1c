"""
Abstract storage backend interface.
Defines the store/retrieve/delete contract shared by every backend.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import AsyncIterator

from filevault.models.file_record import BackendKind

# Bytes moved per read when streaming to or from a backend
STREAM_PIECE_SIZE = 1024 * 1024


@dataclass(frozen=True)
class StoredBlob:
    """Result of a successful store()."""

    locator: str
    size_bytes: int
    stored_name: str


class BlobBackend(ABC):
    """
    Abstract base class for blob backends.

    A backend only knows about bytes and locators. Metadata records are the
    gateway's business.
    """

    kind: BackendKind

    @abstractmethod
    async def store(
        self,
        stream: AsyncIterator[bytes],
        suggested_name: str,
        content_type: str | None = None,
    ) -> StoredBlob:
        """
        Persist a byte stream.

        The stream is consumed incrementally; the backend never holds the
        whole payload in memory.

        Args:
            stream: Async iterator of byte pieces
            suggested_name: Client file name, used to derive the stored name
            content_type: MIME type, recorded by backends that keep it

        Returns:
            StoredBlob with the locator and the exact byte count written

        Raises:
            StorageIOException: If the write fails
        """

    @abstractmethod
    async def retrieve(self, locator: str) -> AsyncIterator[bytes]:
        """
        Open stored bytes for streaming.

        Existence is checked before returning, so a missing blob fails here
        rather than half-way through a response.

        Args:
            locator: Value previously returned by store()

        Returns:
            Async iterator yielding the original bytes in order

        Raises:
            BlobNotFoundException: If nothing is stored at locator
        """

    @abstractmethod
    async def delete(self, locator: str) -> None:
        """
        Remove stored bytes.

        Raises:
            BlobNotFoundException: If nothing is stored at locator
            StorageIOException: If removal fails for other reasons
        """

    async def close(self) -> None:
        """Release backend resources at shutdown."""
