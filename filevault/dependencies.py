"""
FastAPI dependency injection functions.
Provides common dependencies used across endpoints.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from filevault.config import Settings, get_settings
from filevault.db.session import get_db
from filevault.services.metadata_store import MetadataStore
from filevault.services.storage_gateway import StorageGateway
from filevault.storage import BlobBackend, get_storage


# Type aliases for cleaner endpoint signatures
DbSession = Annotated[AsyncSession, Depends(get_db)]
Storage = Annotated[BlobBackend, Depends(get_storage)]
AppSettings = Annotated[Settings, Depends(get_settings)]


def get_storage_gateway(
    db: DbSession,
    storage: Storage,
    settings: AppSettings,
) -> StorageGateway:
    """Assemble a gateway around the request session and the shared backend."""
    return StorageGateway(
        metadata=MetadataStore(db),
        backend=storage,
        max_file_size=settings.MAX_FILE_SIZE_BYTES,
        compensate_orphans=settings.COMPENSATE_ORPHANED_BLOBS,
    )


Gateway = Annotated[StorageGateway, Depends(get_storage_gateway)]
