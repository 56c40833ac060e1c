"""
Custom exceptions for FileVault.

Every failure is rendered as {"error": ..., "message": ..., "details"?: ...}
with the status code carried by the exception.
"""

from typing import Any


class FileVaultException(Exception):
    """Base exception for all FileVault errors."""

    def __init__(
        self,
        error: str,
        message: str,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ):
        self.error = error
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to response dictionary."""
        response = {
            "error": self.error,
            "message": self.message,
        }
        if self.details:
            response["details"] = self.details
        return response


class ValidationException(FileVaultException):
    """400 - Malformed request (missing upload field, bad parameters)."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            error="validation_failed",
            message=message,
            status_code=400,
            details=details,
        )


class FileTooLargeException(ValidationException):
    """400 - Upload exceeds MAX_FILE_SIZE_BYTES."""

    def __init__(self, max_size: int):
        super().__init__(
            message=f"File exceeds the maximum upload size of {max_size} bytes",
            details={"maxSizeBytes": max_size},
        )
        self.error = "file_too_large"
        self.max_size = max_size


class NotFoundException(FileVaultException):
    """404 - Requested resource does not exist."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            error="not_found",
            message=message,
            status_code=404,
            details=details,
        )


class FileNotFoundException(NotFoundException):
    """404 - No metadata record for the file id."""

    def __init__(self, file_id: str):
        super().__init__(message=f"File with ID '{file_id}' not found")
        self.file_id = file_id


class BlobNotFoundException(NotFoundException):
    """404 - The bytes behind a locator are gone."""

    def __init__(self, locator: str):
        super().__init__(
            message="File content is missing from storage",
            details={"locator": locator},
        )
        self.locator = locator


class StorageIOException(FileVaultException):
    """500 - Disk or object store failure."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            error="storage_error",
            message=message,
            status_code=500,
            details=details,
        )


class PersistenceException(FileVaultException):
    """500 - Metadata store unreachable or rejected the write."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            error="persistence_error",
            message=message,
            status_code=500,
            details=details,
        )
