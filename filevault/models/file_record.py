"""
FileRecord SQLAlchemy model.
One row per uploaded file, pointing at the bytes held by a storage backend.
"""

import enum
from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import BigInteger, DateTime, Enum, String
from sqlalchemy.orm import Mapped, mapped_column

from filevault.db.base import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BackendKind(str, enum.Enum):
    """Storage engine that owns a file's bytes."""
    LOCAL = "local"        # locator is a filesystem path
    CHUNKED = "chunked"    # locator is a blob id in the chunk store


class FileRecord(Base):
    """
    Metadata for one uploaded file.

    Rows are written only after the backend has persisted the bytes and are
    never updated afterwards.
    """
    __tablename__ = "file_records"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
        comment="File unique identifier",
    )
    original_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Client-supplied display name",
    )
    stored_name: Mapped[str] = mapped_column(
        String(512),
        nullable=False,
        comment="Backend-chosen name for the stored bytes",
    )
    mime_type: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        default="application/octet-stream",
        comment="Declared content type",
    )
    size_bytes: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        comment="Bytes actually written by the backend",
    )
    backend_kind: Mapped[BackendKind] = mapped_column(
        Enum(BackendKind),
        nullable=False,
        index=True,
        comment="Backend holding the bytes",
    )
    locator: Mapped[str] = mapped_column(
        String(1024),
        nullable=False,
        comment="Filesystem path or blob id, opaque outside the backend",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        index=True,
        comment="Upload timestamp",
    )

    def __repr__(self) -> str:
        return f"<FileRecord(id={self.id}, name={self.original_name}, backend={self.backend_kind})>"
