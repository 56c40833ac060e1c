"""
Storage backend factory.
Provides configuration-driven backend selection.

The backend is built once during application startup and kept on
app.state; request handlers receive it through the get_storage dependency.
"""

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from filevault.config import Settings, get_settings
from filevault.storage.base import BlobBackend
from filevault.storage.chunked import ChunkedBlobBackend
from filevault.storage.local import LocalBlobBackend


def build_storage_backend(
    settings: Settings | None = None,
    session_factory: async_sessionmaker[AsyncSession] | None = None,
) -> BlobBackend:
    """
    Build the configured storage backend.

    Args:
        settings: Settings to read STORAGE_TYPE from. Defaults to get_settings()
        session_factory: Session factory for the chunk store. Defaults to the
            application's AsyncSessionLocal

    Returns:
        Configured BlobBackend instance

    Raises:
        ValueError: If an unknown storage type is configured
    """
    settings = settings or get_settings()
    storage_type = settings.STORAGE_TYPE.lower()

    if storage_type == "local":
        return LocalBlobBackend(base_path=settings.LOCAL_STORAGE_PATH)
    elif storage_type == "chunked":
        if session_factory is None:
            from filevault.db.session import AsyncSessionLocal
            session_factory = AsyncSessionLocal
        return ChunkedBlobBackend(session_factory, chunk_size=settings.CHUNK_SIZE_BYTES)
    else:
        raise ValueError(f"Unknown storage type: {storage_type}")


def get_storage(request: Request) -> BlobBackend:
    """
    Dependency function for FastAPI.

    Usage:
        @router.post("/upload")
        async def upload(storage: BlobBackend = Depends(get_storage)):
            ...
    """
    return request.app.state.storage_backend
