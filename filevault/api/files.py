"""
File endpoints.
Upload, list, download and delete, all routed through the StorageGateway.
"""

from typing import Any
from urllib.parse import quote

from fastapi import APIRouter, File, UploadFile
from fastapi.responses import StreamingResponse

from filevault.config import Settings
from filevault.core.exceptions import ValidationException
from filevault.dependencies import AppSettings, Gateway
from filevault.models.file_record import BackendKind, FileRecord
from filevault.schemas.error import ErrorResponse
from filevault.schemas.file import DeleteResponse, FileListResponse, UploadResponse
from filevault.storage.streams import iter_upload

router = APIRouter()

_errors: dict[int | str, dict[str, Any]] = {
    500: {"model": ErrorResponse, "description": "Storage or metadata failure"},
}


def _file_to_descriptor(record: FileRecord, settings: Settings) -> dict[str, Any]:
    """Convert FileRecord to the public upload descriptor."""
    return {
        "id": record.id,
        "originalname": record.original_name,
        "mimetype": record.mime_type,
        "size": record.size_bytes,
        "url": settings.file_url(record.id),
    }


def _file_to_list_item(record: FileRecord, settings: Settings) -> dict[str, Any]:
    """Convert FileRecord to a listing entry, shaped per backend."""
    if record.backend_kind == BackendKind.CHUNKED:
        return {
            "id": record.id,
            "filename": record.stored_name,
            "contentType": record.mime_type,
            "length": record.size_bytes,
            "uploadDate": record.created_at,
            "url": settings.file_url(record.id),
        }
    return {
        "id": record.id,
        "originalname": record.original_name,
        "filename": record.stored_name,
        "mimetype": record.mime_type,
        "size": record.size_bytes,
        "uploadDate": record.created_at,
        "url": settings.file_url(record.id),
    }


def _content_disposition(filename: str) -> str:
    """Attachment header with an RFC 5987 fallback for non-ASCII names."""
    cleaned = "".join(c for c in filename if c not in '"\\\r\n')
    ascii_name = cleaned.encode("ascii", "ignore").decode("ascii")
    if ascii_name == cleaned:
        return f'attachment; filename="{cleaned}"'
    return f"attachment; filename=\"{ascii_name or 'download'}\"; filename*=UTF-8''{quote(cleaned)}"


@router.post(
    "/upload",
    response_model=UploadResponse,
    responses={400: {"model": ErrorResponse, "description": "Missing or oversized file"}, **_errors},
)
async def upload_file(
    gateway: Gateway,
    settings: AppSettings,
    file: UploadFile | None = File(default=None, description="File to store (form field \"file\")"),
):
    """
    Upload a single file.

    Accepts multipart/form-data with one field named "file". The body is
    handed to the configured backend in bounded pieces; the reported size
    is the number of bytes the backend actually stored.
    """
    if file is None:
        raise ValidationException('No file uploaded (use field name "file")')

    record = await gateway.upload(
        iter_upload(file),
        original_name=file.filename or "",
        mime_type=file.content_type,
        declared_size=file.size,
    )

    return {
        "message": f"Uploaded ({record.backend_kind.value})",
        "file": _file_to_descriptor(record, settings),
    }


@router.get("/files", response_model=FileListResponse, responses=_errors)
async def list_files(gateway: Gateway, settings: AppSettings):
    """
    List stored files, newest first.

    Only files held by the configured backend are listed.
    """
    records = await gateway.list_files()
    return {
        "storageType": gateway.backend.kind.value,
        "files": [_file_to_list_item(record, settings) for record in records],
    }


@router.get(
    "/files/{file_id}",
    response_class=StreamingResponse,
    responses={404: {"model": ErrorResponse, "description": "Unknown id or bytes missing"}, **_errors},
)
async def download_file(file_id: str, gateway: Gateway):
    """
    Download a file.

    Streams the stored bytes as an attachment with the declared content type.
    """
    record, stream = await gateway.open(file_id)

    return StreamingResponse(
        stream,
        media_type=record.mime_type,
        headers={
            "Content-Disposition": _content_disposition(record.original_name),
            "Content-Length": str(record.size_bytes),
        },
    )


@router.delete(
    "/files/{file_id}",
    response_model=DeleteResponse,
    responses={404: {"model": ErrorResponse, "description": "Unknown id"}, **_errors},
)
async def delete_file(file_id: str, gateway: Gateway):
    """
    Delete a file.

    Removes the stored bytes (best effort) and then the metadata record.
    A second delete of the same id returns 404.
    """
    record = await gateway.delete(file_id)
    return {"message": f"Deleted ({record.backend_kind.value})", "id": file_id}
