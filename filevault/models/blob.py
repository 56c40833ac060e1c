"""
Blob and BlobChunk SQLAlchemy models for the chunked object store.

Laid out like a GridFS bucket: one row per blob describing its total length,
plus fixed-size chunk rows numbered from zero. Chunk rows carry no foreign
key so they can be written before the blob row is committed.
"""

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Integer, LargeBinary, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from filevault.db.base import Base
from filevault.models.file_record import utcnow


class Blob(Base):
    """Committed blob. Exists only once every chunk has been written."""
    __tablename__ = "blobs"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    filename: Mapped[str] = mapped_column(String(255), nullable=False)
    content_type: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        default="application/octet-stream",
    )
    length: Mapped[int] = mapped_column(BigInteger, nullable=False)
    chunk_size: Mapped[int] = mapped_column(Integer, nullable=False)
    upload_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    @property
    def chunk_count(self) -> int:
        return -(-self.length // self.chunk_size)

    def __repr__(self) -> str:
        return f"<Blob(id={self.id}, length={self.length})>"


class BlobChunk(Base):
    """One segment of a blob's bytes."""
    __tablename__ = "blob_chunks"
    __table_args__ = (UniqueConstraint("blob_id", "n", name="uq_blob_chunks_blob_id_n"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    blob_id: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    n: Mapped[int] = mapped_column(Integer, nullable=False, comment="Chunk index from 0")
    data: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
