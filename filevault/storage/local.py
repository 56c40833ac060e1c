"""
Local filesystem storage backend.
Each upload becomes one file under LOCAL_STORAGE_PATH; the locator is its path.
"""

import logging
import random
import time
from pathlib import Path, PurePosixPath
from typing import AsyncIterator

import aiofiles
import aiofiles.os

from filevault.config import get_settings
from filevault.core.exceptions import BlobNotFoundException, StorageIOException
from filevault.models.file_record import BackendKind
from filevault.storage.base import STREAM_PIECE_SIZE, BlobBackend, StoredBlob

logger = logging.getLogger(__name__)
settings = get_settings()

_MAX_NAME_LENGTH = 200


def _safe_basename(name: str) -> str:
    """Strip any directory part a client may have sent."""
    base = PurePosixPath(name.replace("\\", "/")).name
    if base in ("", ".", ".."):
        return "upload"
    return base[-_MAX_NAME_LENGTH:]


class LocalBlobBackend(BlobBackend):
    """
    Local filesystem storage implementation.

    Stored names are "<epoch ms>-<random>-<client name>" and files are opened
    in exclusive-create mode, so two uploads can never share a path.
    """

    kind = BackendKind.LOCAL

    def __init__(self, base_path: str | None = None):
        """
        Initialize local storage backend.

        Args:
            base_path: Base directory for storage. Defaults to settings.LOCAL_STORAGE_PATH
        """
        self.base_path = Path(base_path or settings.LOCAL_STORAGE_PATH).resolve()
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _unique_name(self, suggested_name: str) -> str:
        unique = f"{int(time.time() * 1000)}-{random.randrange(10**9)}"
        return f"{unique}-{_safe_basename(suggested_name)}"

    async def store(
        self,
        stream: AsyncIterator[bytes],
        suggested_name: str,
        content_type: str | None = None,
    ) -> StoredBlob:
        """Write the stream to a new file, removing it again on any failure."""
        stored_name = self._unique_name(suggested_name)
        full_path = self.base_path / stored_name

        try:
            f = await aiofiles.open(full_path, "xb")
        except OSError as e:
            raise StorageIOException(
                message=f"Failed to create file: {e}",
                details={"path": str(full_path)},
            ) from e

        size = 0
        try:
            try:
                async for piece in stream:
                    await f.write(piece)
                    size += len(piece)
            finally:
                await f.close()
        except BaseException as e:
            await self._discard(full_path)
            if isinstance(e, OSError):
                raise StorageIOException(
                    message=f"Failed to write file: {e}",
                    details={"path": str(full_path)},
                ) from e
            raise

        return StoredBlob(locator=str(full_path), size_bytes=size, stored_name=stored_name)

    async def retrieve(self, locator: str) -> AsyncIterator[bytes]:
        path = Path(locator)
        if not path.is_file():
            raise BlobNotFoundException(locator)
        return self._read_pieces(path)

    async def _read_pieces(self, path: Path) -> AsyncIterator[bytes]:
        try:
            async with aiofiles.open(path, "rb") as f:
                while piece := await f.read(STREAM_PIECE_SIZE):
                    yield piece
        except FileNotFoundError as e:
            raise BlobNotFoundException(str(path)) from e
        except OSError as e:
            raise StorageIOException(
                message=f"Failed to read file: {e}",
                details={"path": str(path)},
            ) from e

    async def delete(self, locator: str) -> None:
        try:
            await aiofiles.os.remove(locator)
        except FileNotFoundError as e:
            raise BlobNotFoundException(locator) from e
        except OSError as e:
            raise StorageIOException(
                message=f"Failed to delete file: {e}",
                details={"path": locator},
            ) from e

    async def _discard(self, path: Path) -> None:
        """Best-effort removal of a partially written file."""
        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError:
            pass
        except OSError:
            logger.warning("Could not remove partial upload %s", path, exc_info=True)
