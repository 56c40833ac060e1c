"""
Pytest configuration and fixtures for FileVault tests.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

from filevault.config import Settings, get_settings
from filevault.db.base import Base
from filevault.db.session import get_db
from filevault.main import app
from filevault.models import BackendKind, Blob, BlobChunk, FileRecord  # noqa: F401
from filevault.storage import BlobBackend, ChunkedBlobBackend, LocalBlobBackend, get_storage

# Small enough that short test payloads span several chunks
TEST_CHUNK_SIZE = 8


@pytest_asyncio.fixture(scope="function")
async def db_engine(tmp_path):
    """Create a test database engine on a throwaway SQLite file."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(db_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest_asyncio.fixture(scope="function")
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def local_storage(tmp_path) -> LocalBlobBackend:
    """Create a local storage backend in a temp directory."""
    return LocalBlobBackend(base_path=str(tmp_path / "uploads"))


@pytest.fixture
def chunked_storage(session_factory) -> ChunkedBlobBackend:
    """Create a chunked storage backend with tiny chunks."""
    return ChunkedBlobBackend(session_factory, chunk_size=TEST_CHUNK_SIZE)


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Get test settings."""
    return Settings(
        BASE_URL="http://test",
        STORAGE_TYPE="local",
        LOCAL_STORAGE_PATH=str(tmp_path / "uploads"),
        CHUNK_SIZE_BYTES=TEST_CHUNK_SIZE,
        MAX_FILE_SIZE_BYTES=1024,
    )


@asynccontextmanager
async def _client_for(
    db_session: AsyncSession,
    storage: BlobBackend,
    settings: Settings,
) -> AsyncGenerator[AsyncClient, None]:
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_settings] = lambda: settings

    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
    finally:
        app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def client(db_session, local_storage, test_settings) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against an app configured for the local backend."""
    async with _client_for(db_session, local_storage, test_settings) as client:
        yield client


@pytest_asyncio.fixture(scope="function")
async def chunked_client(db_session, chunked_storage, test_settings) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against an app configured for the chunked backend."""
    settings = test_settings.model_copy(update={"STORAGE_TYPE": "chunked"})
    async with _client_for(db_session, chunked_storage, settings) as client:
        yield client


@pytest.fixture
def sample_file_content() -> bytes:
    """Ten bytes of text."""
    return b"hello file"


@pytest.fixture
def make_record():
    """Factory for unsaved FileRecord rows with overridable fields."""

    def _make(
        kind: BackendKind = BackendKind.LOCAL,
        created_at: datetime | None = None,
        **overrides,
    ) -> FileRecord:
        values = {
            "id": str(uuid4()),
            "original_name": "a.txt",
            "stored_name": "1700000000000-1-a.txt",
            "mime_type": "text/plain",
            "size_bytes": 10,
            "backend_kind": kind,
            "locator": "/tmp/uploads/1700000000000-1-a.txt",
            "created_at": created_at or datetime.now(timezone.utc),
        }
        values.update(overrides)
        return FileRecord(**values)

    return _make
