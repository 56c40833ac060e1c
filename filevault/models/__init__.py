"""SQLAlchemy ORM models for FileVault."""

from filevault.models.file_record import FileRecord, BackendKind
from filevault.models.blob import Blob, BlobChunk

__all__ = [
    "FileRecord",
    "BackendKind",
    "Blob",
    "BlobChunk",
]
