"""
FileVault - Main Application Entry Point.

FastAPI application serving the file upload/list/download/delete API.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from filevault import __version__
from filevault.api import health
from filevault.api.router import api_router
from filevault.config import get_settings
from filevault.core.exceptions import FileVaultException, ValidationException

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Builds the storage backend once before serving requests and releases it,
    together with the database engine, at shutdown.
    """
    from filevault.db.session import AsyncSessionLocal, engine, is_using_sqlite_fallback
    from filevault.storage.factory import build_storage_backend

    logger.info(f"Starting {settings.PROJECT_NAME}")
    logger.info(f"Storage type: {settings.STORAGE_TYPE}")
    logger.info(f"Max upload size: {settings.MAX_FILE_SIZE_BYTES} bytes")

    if is_using_sqlite_fallback():
        logger.info("Creating SQLite development tables...")
        from filevault.db.base import Base
        # Import all models to register them
        from filevault.models import Blob, BlobChunk, FileRecord  # noqa: F401
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Development database ready")

    backend = build_storage_backend(settings, AsyncSessionLocal)
    app.state.storage_backend = backend

    yield

    logger.info(f"Shutting down {settings.PROJECT_NAME}")
    await backend.close()
    await engine.dispose()


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="""
## FileVault API

Upload, list, download and delete files.

Bytes are kept either on the local filesystem or in a chunked blob store,
selected once per deployment with `STORAGE_TYPE`. File metadata is stored
separately from the bytes.
    """,
    version=__version__,
    openapi_tags=[
        {"name": "files", "description": "File storage operations"},
        {"name": "health", "description": "Service health checks"},
    ],
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(FileVaultException)
async def filevault_exception_handler(request: Request, exc: FileVaultException) -> JSONResponse:
    """Render FileVault exceptions as structured error payloads."""
    if exc.status_code >= 500:
        logger.error(f"{exc.error} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed requests as 400 validation_failed instead of 422."""
    errors = [
        {"loc": [str(part) for part in err.get("loc", ())], "msg": err.get("msg", "")}
        for err in exc.errors()
    ]
    if any(err["loc"] == ["body", "file"] for err in errors):
        message = 'No file uploaded (use field name "file")'
    else:
        message = "Request validation failed"
    error = ValidationException(message, details={"errors": errors})
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Catch-all exception handler for unexpected errors.
    Logs the full error but returns a sanitized response.
    """
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_error",
            "message": "An unexpected error occurred",
        },
    )


app.include_router(health.router, tags=["health"])
app.include_router(api_router, prefix=settings.API_PREFIX)


@app.get("/", include_in_schema=False)
async def root():
    """Service information."""
    return {
        "name": settings.PROJECT_NAME,
        "version": __version__,
        "storageType": settings.STORAGE_TYPE,
        "docs": "/docs",
        "api": settings.API_PREFIX,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "filevault.main:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=settings.DEBUG,
    )
