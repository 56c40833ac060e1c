"""Database module for FileVault."""

from filevault.db.base import Base
from filevault.db.session import get_db, engine, AsyncSessionLocal

__all__ = ["Base", "get_db", "engine", "AsyncSessionLocal"]
