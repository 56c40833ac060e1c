"""
Pydantic schemas for file API responses.
Field names follow the public JSON contract (originalname, mimetype, ...).
"""

from datetime import datetime

from pydantic import BaseModel, Field


class FileDescriptor(BaseModel):
    """Public description of an uploaded file."""

    id: str
    originalname: str
    mimetype: str
    size: int = Field(..., ge=0, description="Bytes actually stored")
    url: str = Field(..., description="Absolute download URL")


class UploadResponse(BaseModel):
    """Response for POST /upload."""

    message: str = Field(..., examples=["Uploaded (local)"])
    file: FileDescriptor


class LocalFileItem(BaseModel):
    """Listing entry for files on the local backend."""

    id: str
    originalname: str
    filename: str
    mimetype: str
    size: int
    uploadDate: datetime
    url: str


class ChunkedFileItem(BaseModel):
    """Listing entry for files on the chunked backend."""

    id: str
    filename: str
    contentType: str
    length: int
    uploadDate: datetime
    url: str


class FileListResponse(BaseModel):
    """Response for GET /files. Lists only the configured backend's files."""

    storageType: str
    files: list[LocalFileItem] | list[ChunkedFileItem]


class DeleteResponse(BaseModel):
    """Response for DELETE /files/{id}."""

    message: str = Field(..., examples=["Deleted (local)"])
    id: str
