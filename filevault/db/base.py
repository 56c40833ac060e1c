"""SQLAlchemy declarative base for all models."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Base class for FileVault tables.
    Metadata records and chunked blobs share this registry.
    """
    pass
