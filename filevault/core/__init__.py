"""Core exceptions for FileVault."""

from filevault.core.exceptions import (
    FileVaultException,
    ValidationException,
    FileTooLargeException,
    NotFoundException,
    FileNotFoundException,
    BlobNotFoundException,
    StorageIOException,
    PersistenceException,
)

__all__ = [
    "FileVaultException",
    "ValidationException",
    "FileTooLargeException",
    "NotFoundException",
    "FileNotFoundException",
    "BlobNotFoundException",
    "StorageIOException",
    "PersistenceException",
]
