"""Helpers for moving upload bodies through the storage layer in bounded pieces."""

from typing import AsyncIterator

from fastapi import UploadFile

from filevault.core.exceptions import FileTooLargeException
from filevault.storage.base import STREAM_PIECE_SIZE


async def iter_upload(
    file: UploadFile,
    piece_size: int = STREAM_PIECE_SIZE,
) -> AsyncIterator[bytes]:
    """Read an UploadFile piece by piece."""
    while piece := await file.read(piece_size):
        yield piece


async def iter_bytes(data: bytes, piece_size: int = STREAM_PIECE_SIZE) -> AsyncIterator[bytes]:
    """Expose an in-memory payload as a stream."""
    for offset in range(0, len(data), piece_size):
        yield data[offset:offset + piece_size]


async def limit_stream(stream: AsyncIterator[bytes], max_size: int) -> AsyncIterator[bytes]:
    """
    Pass pieces through until the running total exceeds max_size.

    A stream of exactly max_size bytes goes through untouched. The piece
    that crosses the limit is never yielded, so nothing is silently truncated.

    Raises:
        FileTooLargeException: As soon as the limit is crossed
    """
    total = 0
    async for piece in stream:
        total += len(piece)
        if total > max_size:
            raise FileTooLargeException(max_size)
        yield piece
