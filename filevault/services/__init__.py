"""
Business logic services for FileVault.
Services handle core operations separate from API endpoints.
"""

from filevault.services.metadata_store import MetadataStore
from filevault.services.storage_gateway import StorageGateway

__all__ = [
    "MetadataStore",
    "StorageGateway",
]
