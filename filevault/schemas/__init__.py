"""Pydantic schemas for request/response validation."""

from filevault.schemas.file import (
    FileDescriptor,
    UploadResponse,
    LocalFileItem,
    ChunkedFileItem,
    FileListResponse,
    DeleteResponse,
)
from filevault.schemas.error import ErrorResponse

__all__ = [
    "FileDescriptor",
    "UploadResponse",
    "LocalFileItem",
    "ChunkedFileItem",
    "FileListResponse",
    "DeleteResponse",
    "ErrorResponse",
]
