"""Create file metadata and chunked blob tables

Adds:
- file_records (one row per uploaded file, pointing at its bytes)
- blobs (committed blobs of the chunked backend)
- blob_chunks (fixed-size chunk rows, unique per blob and index)

Revision ID: 001
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

backend_kind = sa.Enum("LOCAL", "CHUNKED", name="backendkind")


def upgrade() -> None:
    op.create_table(
        "file_records",
        sa.Column("id", sa.String(36), primary_key=True, comment="File unique identifier"),
        sa.Column("original_name", sa.String(255), nullable=False, comment="Client-supplied display name"),
        sa.Column("stored_name", sa.String(512), nullable=False, comment="Backend-chosen name for the stored bytes"),
        sa.Column("mime_type", sa.String(255), nullable=False, comment="Declared content type"),
        sa.Column("size_bytes", sa.BigInteger(), nullable=False, comment="Bytes actually written by the backend"),
        sa.Column("backend_kind", backend_kind, nullable=False, comment="Backend holding the bytes"),
        sa.Column("locator", sa.String(1024), nullable=False, comment="Filesystem path or blob id, opaque outside the backend"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, comment="Upload timestamp"),
    )
    op.create_index("ix_file_records_backend_kind", "file_records", ["backend_kind"])
    op.create_index("ix_file_records_created_at", "file_records", ["created_at"])

    op.create_table(
        "blobs",
        sa.Column("id", sa.String(32), primary_key=True),
        sa.Column("filename", sa.String(255), nullable=False),
        sa.Column("content_type", sa.String(255), nullable=False),
        sa.Column("length", sa.BigInteger(), nullable=False),
        sa.Column("chunk_size", sa.Integer(), nullable=False),
        sa.Column("upload_date", sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        "blob_chunks",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("blob_id", sa.String(32), nullable=False),
        sa.Column("n", sa.Integer(), nullable=False, comment="Chunk index from 0"),
        sa.Column("data", sa.LargeBinary(), nullable=False),
        sa.UniqueConstraint("blob_id", "n", name="uq_blob_chunks_blob_id_n"),
    )
    op.create_index("ix_blob_chunks_blob_id", "blob_chunks", ["blob_id"])


def downgrade() -> None:
    op.drop_index("ix_blob_chunks_blob_id", table_name="blob_chunks")
    op.drop_table("blob_chunks")
    op.drop_table("blobs")
    op.drop_index("ix_file_records_created_at", table_name="file_records")
    op.drop_index("ix_file_records_backend_kind", table_name="file_records")
    op.drop_table("file_records")
    backend_kind.drop(op.get_bind(), checkfirst=True)
