"""
Health endpoint.
Mounted at the application root, outside the /api prefix.
"""

from fastapi import APIRouter
from sqlalchemy import text

from filevault.db.session import is_using_sqlite_fallback
from filevault.dependencies import AppSettings, DbSession

router = APIRouter()


@router.get("/health")
async def health_check(db: DbSession, settings: AppSettings):
    """
    Service health check endpoint.

    Returns:
        {"status": "ok", ...} when the metadata database answers
        {"status": "degraded", "issues": [...]} otherwise
    """
    try:
        await db.execute(text("SELECT 1"))
    except Exception as e:
        return {
            "status": "degraded",
            "storageType": settings.STORAGE_TYPE,
            "issues": [f"Database: {e}"],
        }

    return {
        "status": "ok",
        "storageType": settings.STORAGE_TYPE,
        "database": "sqlite (dev fallback)" if is_using_sqlite_fallback() else "configured",
    }
