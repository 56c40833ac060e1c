"""
Storage abstraction layer for FileVault.
Supports two backends: local filesystem and a chunked blob store.
"""

from filevault.storage.base import BlobBackend, StoredBlob, STREAM_PIECE_SIZE
from filevault.storage.local import LocalBlobBackend
from filevault.storage.chunked import ChunkedBlobBackend
from filevault.storage.factory import build_storage_backend, get_storage
from filevault.storage.streams import iter_bytes, iter_upload, limit_stream

__all__ = [
    "BlobBackend",
    "StoredBlob",
    "STREAM_PIECE_SIZE",
    "LocalBlobBackend",
    "ChunkedBlobBackend",
    "build_storage_backend",
    "get_storage",
    "iter_bytes",
    "iter_upload",
    "limit_stream",
]
